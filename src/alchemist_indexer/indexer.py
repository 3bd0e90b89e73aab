"""
Event dispatch.

The event delivery layer calls `Indexer.handle` once per decoded log, in canonical (block number,
log index) order. Each call selects the dialect for the emitting contract, normalizes the event and
applies exactly one handler. A call is one unit of work: the indexer performs no commits, retries
or rollbacks, so store failures propagate to the caller, which decides whether to redeliver.
"""

from collections.abc import Callable, Mapping
from typing import Any

from eth_typing import ChecksumAddress

from alchemist_indexer.context import EventHandlerContext, init_verbose_config_from_env
from alchemist_indexer.database.models import ProtocolStatsTable
from alchemist_indexer.database.store import EntityStore
from alchemist_indexer.dialects import DialectFactory, EventDialect
from alchemist_indexer.entities import get_or_create_protocol_stats
from alchemist_indexer.events import (
    BorrowOperation,
    ContractEvent,
    DepositOperation,
    ForceRepayOperation,
    LiquidationOperation,
    LoopedPositionCreatedOperation,
    LoopExecutedOperation,
    Operation,
    PositionTransferOperation,
    RepayOperation,
    WithdrawOperation,
)
from alchemist_indexer.exceptions.events import EventOrderingError
from alchemist_indexer.functions import get_checksum_address
from alchemist_indexer.handlers import (
    apply_borrow,
    apply_deposit,
    apply_force_repay,
    apply_liquidation,
    apply_loop_executed,
    apply_looped_position_created,
    apply_position_transfer,
    apply_repay,
    apply_withdraw,
)
from alchemist_indexer.logging import logger

OPERATION_HANDLERS: dict[type, Callable[[EventHandlerContext, Any], None]] = {
    DepositOperation: apply_deposit,
    WithdrawOperation: apply_withdraw,
    BorrowOperation: apply_borrow,
    RepayOperation: apply_repay,
    ForceRepayOperation: apply_force_repay,
    LiquidationOperation: apply_liquidation,
    PositionTransferOperation: apply_position_transfer,
    LoopedPositionCreatedOperation: apply_looped_position_created,
    LoopExecutedOperation: apply_loop_executed,
}


# Initialize from environment on module load
init_verbose_config_from_env()


class Indexer:
    """
    Applies decoded contract events to the aggregate state held in an entity store.

    Args:
        store: The entity store
        contracts: Emitting contract address -> dialect name
        default_dialect: Dialect name used for events from unregistered addresses
        enforce_ordering: Raise `EventOrderingError` for an event that does not follow the previous
            one in (block number, log index) order
    """

    def __init__(
        self,
        store: EntityStore,
        contracts: Mapping[ChecksumAddress | str, str] | None = None,
        default_dialect: str = "v3",
        *,
        enforce_ordering: bool = False,
    ) -> None:
        self.store = store
        self.enforce_ordering = enforce_ordering
        self.default_dialect: EventDialect = DialectFactory.get_dialect(default_dialect)
        self.contract_dialects: dict[ChecksumAddress, EventDialect] = {
            get_checksum_address(address): DialectFactory.get_dialect(name)
            for address, name in (contracts or {}).items()
        }
        self.last_event: tuple[int, int] | None = None

    @property
    def stats(self) -> ProtocolStatsTable:
        """
        The protocol statistics singleton as currently held by the store. It is resolved on every
        access, so totals from a unit of work the host rolled back are never carried forward.
        """
        return get_or_create_protocol_stats(self.store)

    def get_dialect(self, event: ContractEvent) -> EventDialect:
        if event.metadata.address is None:
            return self.default_dialect
        return self.contract_dialects.get(
            get_checksum_address(event.metadata.address), self.default_dialect
        )

    def handle(self, event: ContractEvent, dialect: str | None = None) -> Operation:
        """
        Normalize an event and apply it to the aggregate state.

        Args:
            event: The decoded event
            dialect: Name of a dialect to use instead of the one selected by contract address

        Returns:
            The normalized operation that was applied

        Raises:
            UnknownEvent: If the selected dialect does not include this event
            InvalidEventPayload: If the event is missing a parameter or has a malformed one
            EventOrderingError: If ordering is enforced and the event is out of order
        """

        ordering_key = event.metadata.ordering_key
        if (
            self.enforce_ordering
            and self.last_event is not None
            and ordering_key <= self.last_event
        ):
            raise EventOrderingError(previous=self.last_event, current=ordering_key)

        event_dialect = (
            DialectFactory.get_dialect(dialect) if dialect is not None else self.get_dialect(event)
        )
        operation = event_dialect.normalize(event)

        context = EventHandlerContext(
            store=self.store,
            metadata=event.metadata,
            stats=self.stats,
            dialect=event_dialect.name,
        )
        OPERATION_HANDLERS[type(operation)](context, operation)
        self.store.save(context.stats)

        self.last_event = ordering_key
        logger.debug(
            f"Processed {event.name} ({event_dialect.name}) at block "
            f"{event.metadata.block_number}, log {event.metadata.log_index}"
        )
        return operation
