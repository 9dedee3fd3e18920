"""CLI for Holocron."""

from pathlib import Path

import click

from ..app import open_library
from ..config import resolve_db_path
from ..db import Database
from ..log import setup_logger


@click.group()
@click.option(
    "--db-path",
    type=click.Path(path_type=Path),
    envvar="HOLOCRON_DB_PATH",
    help="Path to database file (overrides HOLOCRON_DB_PATH environment variable)",
)
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def cli(ctx: click.Context, db_path: Path | None, log_level: str | None) -> None:
    """Holocron - Track books from wishlist to hangar to archive.

    Books start on the wishlist, move to the hangar while you read them,
    and land in the archive when finished. Reading stats and achievements
    are updated as you go.
    """
    setup_logger(log_level)
    ctx.ensure_object(dict)

    # Open the database only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        db = Database(db_path=resolve_db_path(db_path))
        ctx.call_on_close(db.close)
        library, stats = open_library(db)
        ctx.obj["db"] = db
        ctx.obj["library"] = library
        ctx.obj["stats"] = stats


from . import books as _books  # noqa: F401,E402
from . import stats as _stats  # noqa: F401,E402


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
