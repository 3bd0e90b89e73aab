"""Factory for creating event dialects by name."""

from typing import ClassVar

from alchemist_indexer.dialects.base import EventDialect
from alchemist_indexer.dialects.looper import LooperDialect
from alchemist_indexer.dialects.v1 import AlchemistV1Dialect
from alchemist_indexer.dialects.v3 import AlchemistV3Dialect
from alchemist_indexer.exceptions.events import UnsupportedDialect
from alchemist_indexer.logging import logger


class DialectFactory:
    """Factory for creating event dialects by name."""

    DIALECTS: ClassVar[dict[str, type[EventDialect]]] = {
        AlchemistV1Dialect.name: AlchemistV1Dialect,
        AlchemistV3Dialect.name: AlchemistV3Dialect,
        LooperDialect.name: LooperDialect,
    }

    @classmethod
    def get_dialect(cls, name: str) -> EventDialect:
        """Get a dialect by name.

        Args:
            name: The dialect name, e.g. "v1", "v3" or "looper"

        Returns:
            Dialect instance

        Raises:
            UnsupportedDialect: If no dialect has this name
        """
        dialect_class = cls.DIALECTS.get(name.lower())
        if dialect_class is None:
            raise UnsupportedDialect(dialect=name)
        dialect = dialect_class()
        logger.debug(
            f"Created {dialect_class.__name__} ({len(dialect.supported_events)} event types)"
        )
        return dialect
