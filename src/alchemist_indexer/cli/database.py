import click

from alchemist_indexer.cli import cli
from alchemist_indexer.config import settings
from alchemist_indexer.database import (
    get_current_database_version,
    get_db_session,
    get_latest_database_version,
)
from alchemist_indexer.database.operations import (
    backup_sqlite_database,
    compact_sqlite_database,
    create_new_sqlite_database,
    remove_sqlite_database,
    upgrade_existing_sqlite_database,
)
from alchemist_indexer.exceptions.database import BackupExists
from alchemist_indexer.version import __version__


def _require_database() -> None:
    if not settings.database.path.exists():
        raise click.ClickException(
            f"No database found at {settings.database.path}. "
            "Create one with 'alchemist-indexer database init'."
        )


@cli.group()
def database() -> None:
    """
    Manage the position database
    """


@database.command("init")
def database_init() -> None:
    """
    Create and initialize a new database.
    """

    if settings.database.path.exists():
        click.echo(f"A database already exists at {settings.database.path}.")
        raise click.Abort
    create_new_sqlite_database(settings.database.path)
    click.echo(f"Created database at {settings.database.path}")


@database.command("backup")
def database_backup() -> None:
    """
    Copy the database to a .bak file beside it.
    """

    _require_database()
    try:
        backup_path = backup_sqlite_database(settings.database.path)
    except BackupExists as exc:
        if not click.confirm(
            f"A backup already exists at {exc.path}. Replace it?",
            default=False,
        ):
            raise click.Abort from None
        exc.path.unlink()
        backup_path = backup_sqlite_database(settings.database.path)
    click.echo(f"Backed up database to {backup_path}")


@database.command("reset")
def database_reset() -> None:
    """
    Remove all indexed data and recreate an empty database.
    """

    if not click.confirm(
        f"All positions, users, snapshots and statistics in {settings.database.path} will be "
        f"removed, and an empty database will be created with the schema from {__package__} "
        f"version {__version__}. Do you want to proceed?",
        default=False,
    ):
        raise click.Abort
    remove_sqlite_database(settings.database.path)
    create_new_sqlite_database(settings.database.path)
    click.echo(f"Reset database at {settings.database.path}")


@database.command("upgrade")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def database_upgrade(*, force: bool) -> None:
    """
    Upgrade the database to the latest schema.
    """

    _require_database()
    db_session = get_db_session()
    current_database_version = get_current_database_version(db_session)
    db_session.remove()
    latest_database_version = get_latest_database_version()

    if current_database_version == latest_database_version:
        click.echo(f"The database is already at the latest revision ({latest_database_version}).")
        return

    if not force and not click.confirm(
        f"The database at {settings.database.path} will be upgraded from revision "
        f"{current_database_version} to {latest_database_version}. Do you want to proceed?",
        default=False,
    ):
        raise click.Abort
    upgrade_existing_sqlite_database()
    click.echo(f"Upgraded database to revision {latest_database_version}")


@database.command("compact")
def database_compact() -> None:
    """
    Reclaim unused space in the database.
    """

    _require_database()
    compact_sqlite_database(settings.database.path)
