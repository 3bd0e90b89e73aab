"""Base protocol for contract event dialects."""

from collections.abc import Callable
from typing import ClassVar, Protocol

from alchemist_indexer.events import ContractEvent, Operation
from alchemist_indexer.exceptions.events import UnknownEvent


class EventDialect(Protocol):
    """
    Protocol for event dialects.

    Contract versions emit logically equivalent events with different names, parameter orders and
    address semantics. A dialect translates one version's decoded events into the normalized
    operations consumed by the handlers. Dialects are stateless.
    """

    name: ClassVar[str]

    @property
    def supported_events(self) -> frozenset[str]:
        """The event names this dialect can normalize."""
        ...

    def normalize(self, event: ContractEvent) -> Operation:
        """
        Translate a decoded event into a normalized operation.

        Args:
            event: The decoded contract event

        Returns:
            The normalized operation

        Raises:
            UnknownEvent: If the event name is not part of this dialect
            InvalidEventPayload: If a required parameter is missing or malformed
        """
        ...


class DecoderTableDialect(EventDialect):
    """
    Dialect implemented as a table of per-event decoding functions.
    """

    decoders: ClassVar[dict[str, Callable[[ContractEvent], Operation]]]

    @property
    def supported_events(self) -> frozenset[str]:
        return frozenset(self.decoders)

    def normalize(self, event: ContractEvent) -> Operation:
        decoder = self.decoders.get(event.name)
        if decoder is None:
            raise UnknownEvent(dialect=self.name, event_name=event.name)
        return decoder(event)
