import sys

import click


def error_exit(message: str, code: int = 1):
    """Print an error message to stderr and exit."""
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(code)
