"""
Lifecycle operations for the SQLite file holding the indexed positions.

Every operation opens its own engine and disposes it before returning, so no pooled connection keeps
the file or its write-ahead log open after the operation completes.
"""

import pathlib
import sqlite3

from alembic import command
from alembic.config import Config
from sqlalchemy import URL, Engine, create_engine, text
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from alchemist_indexer.config import settings
from alchemist_indexer.database.models import Base
from alchemist_indexer.exceptions.database import BackupExists
from alchemist_indexer.logging import logger

SQLITE_SIDECAR_SUFFIXES = ("-wal", "-shm")


def get_backup_path(db_path: pathlib.Path) -> pathlib.Path:
    return db_path.with_suffix(db_path.suffix + ".bak")


def backup_sqlite_database(db_path: pathlib.Path) -> pathlib.Path:
    """
    Copy the database to a `.bak` file beside it, after checkpointing the write-ahead log.

    Returns:
        The path of the backup

    Raises:
        BackupExists: If a backup is already present
    """

    assert db_path.exists()

    backup_path = get_backup_path(db_path)
    if backup_path.exists():
        raise BackupExists(path=backup_path)

    engine = get_sqlite_engine(db_path)
    with engine.connect() as connection:
        connection.execute(text("PRAGMA wal_checkpoint(FULL);"))
    engine.dispose()

    with sqlite3.connect(db_path) as src, sqlite3.connect(backup_path) as dest:
        src.backup(target=dest)

    logger.info(f"Backed up {db_path} to {backup_path}")
    return backup_path


def create_new_sqlite_database(db_path: pathlib.Path) -> None:
    """
    Create the position, user, loop, snapshot and statistics tables in a new WAL-mode database and
    stamp it with the latest schema revision.
    """

    engine = get_sqlite_engine(db_path)
    with engine.connect() as connection:
        journal_mode = connection.execute(text("PRAGMA journal_mode=WAL;")).scalar()
        assert journal_mode == "wal"
        connection.execute(text("PRAGMA auto_vacuum=FULL;"))

        Base.metadata.create_all(bind=connection)
        connection.commit()
        connection.execute(text("VACUUM;"))
    engine.dispose()

    command.stamp(get_alembic_config(db_path), "head")
    logger.info(f"Initialized new SQLite database at {db_path}")


def remove_sqlite_database(db_path: pathlib.Path) -> None:
    """
    Delete the database together with its write-ahead log and shared-memory files.
    """

    db_path.unlink(missing_ok=True)
    for suffix in SQLITE_SIDECAR_SUFFIXES:
        db_path.with_name(db_path.name + suffix).unlink(missing_ok=True)
    logger.info(f"Removed SQLite database at {db_path}")


def compact_sqlite_database(db_path: pathlib.Path) -> None:
    engine = get_sqlite_engine(db_path)
    with engine.connect() as connection:
        connection.execute(text("VACUUM;"))
    engine.dispose()
    logger.info(f"Compacted SQLite database at {db_path}")


def upgrade_existing_sqlite_database(db_path: pathlib.Path | None = None) -> None:
    command.upgrade(get_alembic_config(db_path), "head")
    logger.info("Upgraded SQLite database to the latest schema revision")


def get_sqlite_engine(database_path: pathlib.Path) -> Engine:
    return create_engine(
        URL.create(
            drivername="sqlite",
            database=str(database_path.absolute()),
        )
    )


def get_scoped_sqlite_session(database_path: pathlib.Path) -> scoped_session[Session]:
    return scoped_session(
        session_factory=sessionmaker(
            bind=get_sqlite_engine(database_path),
        )
    )


def get_alembic_config(db_path: pathlib.Path | None = None) -> Config:
    """
    Build an Alembic configuration for the migrations shipped with this package, targeting the given
    database or the configured one.
    """

    if db_path is None:
        db_path = settings.database.path

    cfg = Config()
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path.absolute()}")
    cfg.set_main_option("script_location", "alchemist_indexer:migrations")

    return cfg
