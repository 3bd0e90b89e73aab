from alchemist_indexer.exceptions.base import IndexerError
from alchemist_indexer.exceptions.database import BackupExists
from alchemist_indexer.exceptions.events import (
    EventOrderingError,
    InvalidEventPayload,
    UnknownEvent,
    UnsupportedDialect,
)

from . import base, database, events

__all__ = (
    "BackupExists",
    "EventOrderingError",
    "IndexerError",
    "InvalidEventPayload",
    "UnknownEvent",
    "UnsupportedDialect",
    "base",
    "database",
    "events",
)
