"""
Entity store used by the event handlers.

Handlers only need two operations from persistent storage: load an entity by its key, and save an
entity. The `EntityStore` protocol captures that contract so handlers can run against any backend,
and `SqlAlchemyEntityStore` implements it on top of a SQLAlchemy session.

The store never commits. A single handler invocation is one unit of work, and the host decides
when to commit or roll back. Store errors are not caught here.
"""

from typing import Protocol, TypeVar

from sqlalchemy.orm import Session

from alchemist_indexer.database.models import Base

EntityT = TypeVar("EntityT", bound=Base)


class EntityStore(Protocol):
    """Protocol for the key-value entity store consumed by the handlers."""

    def load(self, entity_type: type[EntityT], key: str) -> EntityT | None:
        """
        Load an entity by its key.

        Args:
            entity_type: The mapped entity class
            key: The entity's natural or composite key

        Returns:
            The entity, or None if no entity exists with this key
        """
        ...

    def save(self, entity: Base) -> None:
        """
        Persist an entity. Saving an entity that is already persisted is a no-op.
        """
        ...


class SqlAlchemyEntityStore(EntityStore):
    """Entity store backed by a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def load(self, entity_type: type[EntityT], key: str) -> EntityT | None:
        return self.session.get(entity_type, key)

    def save(self, entity: Base) -> None:
        self.session.add(entity)
