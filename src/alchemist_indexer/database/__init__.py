from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.orm import Session, scoped_session

from alchemist_indexer.config import settings
from alchemist_indexer.database.operations import get_alembic_config, get_scoped_sqlite_session
from alchemist_indexer.database.store import EntityStore, SqlAlchemyEntityStore
from alchemist_indexer.logging import logger
from alchemist_indexer.version import __version__


def get_db_session() -> scoped_session[Session]:
    """
    Open a session to the configured database, warning if its schema is behind the package.
    """

    db_session = get_scoped_sqlite_session(database_path=settings.database.path)

    current_database_version = get_current_database_version(db_session)
    latest_database_version = get_latest_database_version()
    if current_database_version is not None and current_database_version != latest_database_version:
        logger.warning(
            f"The current database revision ({current_database_version}) does not match the latest "
            f"({latest_database_version}) for {__package__} version {__version__}!"
            "\n"
            "Database-related features may raise exceptions if you continue. Perform database "
            "migrations with 'alchemist-indexer database upgrade'."
        )

    return db_session


def get_current_database_version(db_session: scoped_session[Session]) -> str | None:
    return MigrationContext.configure(connection=db_session.connection()).get_current_revision()


def get_latest_database_version() -> str | None:
    return ScriptDirectory.from_config(config=get_alembic_config()).get_current_head()


__all__ = (
    "EntityStore",
    "SqlAlchemyEntityStore",
    "get_current_database_version",
    "get_db_session",
    "get_latest_database_version",
)
