"""CLI interface for blobsync."""

import logging
from pathlib import Path
from typing import Any

import click

from . import __version__
from .azure_store import AzureBlobStore
from .config import load_account_config
from .exceptions import (
    ConfigLoadError,
    LocalScanError,
    OperationError,
    RemoteConnectError,
    RemoteListingError,
)
from .output import OutputFormatter
from .sync import SyncEngine

logger = logging.getLogger(__name__)


@click.command()
@click.argument("config_path", metavar="CONFIG", type=click.Path(dir_okay=False))
@click.argument("local_root", metavar="LOCAL_ROOT", type=click.Path())
@click.option(
    "--dry-run",
    "-p",
    is_flag=True,
    help="Practice run - just print out actions rather than execute them",
)
@click.option(
    "--workers",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    help="Number of parallel workers (default: 1, use 4-8 for parallel uploads)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__, prog_name="blobsync")
@click.pass_context
def main(
    ctx: Any,
    config_path: str,
    local_root: str,
    dry_run: bool,
    workers: int,
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """Mirror LOCAL_ROOT into the blob container described by CONFIG.

    CONFIG is a JSON file with accountName, accountKey and containerName.
    After a successful run the container holds exactly one object per
    local file, with matching content.

    Examples:
        blobsync account.json ./public            # Upload changes, delete orphans
        blobsync -p account.json ./public         # Preview the operations
        blobsync -j 8 account.json ./public       # Upload with 8 workers
    """
    out = OutputFormatter(json_output=json, quiet=quiet)

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("blobsync").setLevel(logging.DEBUG)
        # The Azure SDK logs every HTTP request at INFO
        logging.getLogger("azure").setLevel(logging.WARNING)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        account = load_account_config(config_path)
    except ConfigLoadError as e:
        out.error(f"Failed to load account info: {e}")
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    local_path = Path(local_root)
    if not local_path.is_dir():
        out.error(f"Local path is not a directory: {local_root}")
        ctx.exit(1)

    try:
        store = AzureBlobStore.connect(account)
    except RemoteConnectError as e:
        out.error(f"Failed to connect to container: {e}")
        ctx.exit(1)
        return

    if not out.quiet:
        out.print_summary(
            "blobsync",
            [
                ("Container", f"{account.container_name} ({account.account_url})"),
                ("Local path", str(local_path)),
                ("Mode", "dry run" if dry_run else "live"),
            ],
        )

    engine = SyncEngine(store, out)
    try:
        stats = engine.sync(local_path, dry_run=dry_run, max_workers=workers)
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)
        return
    except RemoteListingError as e:
        out.error(f"Failed to list remote objects: {e}")
        ctx.exit(1)
        return
    except LocalScanError as e:
        out.error(f"Failed to build operation list: {e}")
        ctx.exit(1)
        return
    except OperationError as e:
        out.error(f"Failed to execute operations: {e}")
        ctx.exit(1)
        return
    except ValueError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    # Dry runs already printed the operation list as JSON
    if out.json_output and not dry_run:
        out.output_json(stats)


if __name__ == "__main__":
    main()
