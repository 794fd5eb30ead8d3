"""
CLI command waiting for a transfer job's markers and printing the artifact size.
"""
import asyncio
import logging
import sys

import click
from pydantic import ValidationError

from cli.params import DURATION
from cli.utils import error_exit
from dbcopy.config import DEFAULT_WAIT_TIMEOUT, Settings
from dbcopy.context import AppContext
from dbcopy.storage import StorageError
from dbcopy.wait import WaitCoordinator, WaitError

log = logging.getLogger(__name__)


@click.command("wait")
@click.argument("name", required=True)
@click.option(
    "--bucket",
    "-b",
    envvar="DBCOPY_BUCKET",
    required=True,
    help="S3 bucket holding the job markers and the artifact.",
)
@click.option(
    "--timeout",
    "-t",
    envvar="DBCOPY_WAIT_TIMEOUT",
    type=DURATION,
    default=DEFAULT_WAIT_TIMEOUT,
    show_default="1h",
    help="How long to wait for each marker, e.g. 30m, 1h30m, 90s.",
)
@click.option(
    "--region",
    envvar="DBCOPY_REGION",
    default=None,
    help="Bucket region (discovered from the bucket when omitted).",
)
@click.option(
    "--endpoint-url",
    envvar="S3_ENDPOINT_URL",
    default=None,
    help="Endpoint of an S3-compatible store such as MinIO.",
)
def wait(
    name: str,
    bucket: str,
    timeout: float,
    region: str | None,
    endpoint_url: str | None,
):
    """
    Wait for NAME.bz2.crypt and print its size in bytes.

    Watches NAME.started, NAME.ok and NAME.error in the bucket. Exits 0 and
    prints the artifact size on stdout once NAME.ok appears; exits 1 with
    the remote error text once NAME.error appears or the timeout elapses.

    \b
    Examples:
        dbcopy wait -b my-bucket nightly-2024-05-01
        dbcopy wait -b my-bucket -t 2h nightly-2024-05-01
    """
    try:
        settings = Settings.from_env(
            bucket=bucket,
            region=region,
            endpoint_url=endpoint_url,
            timeout=timeout,
        )
    except ValidationError as e:
        error_exit(f"Invalid configuration: {e}")

    try:
        size = _run(settings, name)
    except KeyboardInterrupt:
        click.echo("\nWait cancelled.", err=True)
        sys.exit(130)
    except (WaitError, StorageError) as e:
        log.debug("Wait for %r failed", name, exc_info=True)
        error_exit(f"wait for {name!r}: {e}")
    except ValueError as e:
        error_exit(f"Error: {e}")

    click.echo(size)


def _run(settings: Settings, name: str) -> int:
    return asyncio.run(_wait_async(settings, name))


async def _wait_async(settings: Settings, name: str) -> int:
    """Build the context and run the coordinator."""
    app = await asyncio.to_thread(AppContext.create, settings)
    coordinator = WaitCoordinator(app.store, tick_interval=settings.wait.tick_interval)
    return await coordinator.run(name, settings.wait.timeout)
