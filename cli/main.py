import logging

import click
from dotenv import find_dotenv, load_dotenv

from cli import __version__
from cli.commands.wait_cmd import wait
from dbcopy.common.logging_config import setup_colored_logging


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(
    __version__, "-v", "--version", help="Show the CLI version and exit."
)
@click.option(
    "-u",
    "--system-env",
    is_flag=True,
    default=False,
    help="Use system environment variables only; do not load .env file.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def cli(system_env: bool, debug: bool):
    """Wait for database transfer jobs published to S3."""
    if not system_env:
        load_dotenv(find_dotenv(usecwd=True))
    setup_colored_logging(level=logging.DEBUG if debug else logging.INFO)


cli.add_command(wait)


def main():
    cli()


if __name__ == "__main__":
    main()
