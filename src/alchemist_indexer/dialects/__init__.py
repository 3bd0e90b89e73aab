"""Contract event dialects, translating the events of each contract version into operations."""

from alchemist_indexer.dialects.base import DecoderTableDialect, EventDialect
from alchemist_indexer.dialects.factory import DialectFactory
from alchemist_indexer.dialects.looper import LooperDialect
from alchemist_indexer.dialects.v1 import AlchemistV1Dialect
from alchemist_indexer.dialects.v3 import AlchemistV3Dialect

__all__ = [
    "AlchemistV1Dialect",
    "AlchemistV3Dialect",
    "DecoderTableDialect",
    "DialectFactory",
    "EventDialect",
    "LooperDialect",
]
