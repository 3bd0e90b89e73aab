"""
Exceptions raised while decoding and dispatching contract events.

A missing position is not an error and never raises. These exceptions cover configuration and
input problems which the host must see: an event the configured dialect cannot decode, a payload
missing a parameter, or a replay stream delivered out of canonical order.
"""

from alchemist_indexer.exceptions.base import IndexerError


class UnsupportedDialect(IndexerError):
    """
    Raised when no event dialect is registered under the requested name.
    """

    def __init__(self, dialect: str) -> None:
        self.dialect = dialect
        super().__init__(message=f"No event dialect named {dialect!r}")


class UnknownEvent(IndexerError):
    """
    Raised when a dialect does not recognize an event name.
    """

    def __init__(self, dialect: str, event_name: str) -> None:
        self.dialect = dialect
        self.event_name = event_name
        super().__init__(message=f"Event {event_name!r} is not part of the {dialect!r} dialect")


class InvalidEventPayload(IndexerError):
    """
    Raised when a decoded event is missing a parameter, or a parameter has the wrong type.
    """

    def __init__(self, event_name: str, parameter: str, reason: str) -> None:
        self.event_name = event_name
        self.parameter = parameter
        super().__init__(message=f"Invalid parameter {parameter!r} for {event_name}: {reason}")


class EventOrderingError(IndexerError):
    """
    Raised when an event arrives before a previously processed event in (block, log index) order.
    """

    def __init__(self, previous: tuple[int, int], current: tuple[int, int]) -> None:
        self.previous = previous
        self.current = current
        super().__init__(
            message=f"Event at block {current[0]}, log {current[1]} is out of order "
            f"(previous event at block {previous[0]}, log {previous[1]})"
        )
