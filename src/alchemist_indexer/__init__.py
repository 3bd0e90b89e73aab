from .config import settings
from .version import __version__

# isort: split

from .database import EntityStore, SqlAlchemyEntityStore
from .dialects import AlchemistV1Dialect, AlchemistV3Dialect, DialectFactory, LooperDialect
from .events import ContractEvent, EventMetadata
from .functions import calculate_leverage, calculate_ltv, calculate_multiple, get_day_id
from .indexer import Indexer
from .logging import logger

__all__ = (
    "AlchemistV1Dialect",
    "AlchemistV3Dialect",
    "ContractEvent",
    "DialectFactory",
    "EntityStore",
    "EventMetadata",
    "Indexer",
    "LooperDialect",
    "SqlAlchemyEntityStore",
    "__version__",
    "calculate_leverage",
    "calculate_ltv",
    "calculate_multiple",
    "get_day_id",
    "logger",
    "settings",
)
