import os
from dataclasses import dataclass
from typing import ClassVar

from hexbytes import HexBytes

from alchemist_indexer.database.models import PositionTable, ProtocolStatsTable
from alchemist_indexer.database.store import EntityStore
from alchemist_indexer.events import EventMetadata
from alchemist_indexer.logging import logger


@dataclass
class EventHandlerContext:
    """Context object passed to event handlers containing all necessary state."""

    store: EntityStore
    metadata: EventMetadata
    # Singleton aggregate, resolved from the store by the indexer for each event
    stats: ProtocolStatsTable
    dialect: str

    @property
    def timestamp(self) -> int:
        return self.metadata.block_timestamp

    def touch_stats(self) -> None:
        self.stats.updated_at = self.timestamp


class VerboseConfig:
    """Runtime configurable verbose logging settings for event processing."""

    all_enabled: ClassVar[bool] = False
    positions: ClassVar[set[int]] = set()
    transactions: ClassVar[set[HexBytes]] = set()

    @classmethod
    def enable_all(cls) -> None:
        cls.all_enabled = True

    @classmethod
    def add_position(cls, token_id: int) -> None:
        cls.positions.add(token_id)

    @classmethod
    def add_transaction(cls, tx_hash: HexBytes | str) -> None:
        cls.transactions.add(HexBytes(tx_hash))

    @classmethod
    def reset(cls) -> None:
        cls.all_enabled = False
        cls.positions.clear()
        cls.transactions.clear()

    @classmethod
    def is_verbose(
        cls,
        token_id: int | None = None,
        tx_hash: HexBytes | None = None,
    ) -> bool:
        """Check if verbose logging should be enabled for the given context."""
        return (
            cls.all_enabled
            or (token_id is not None and token_id in cls.positions)
            or (tx_hash is not None and tx_hash in cls.transactions)
        )


def init_verbose_config_from_env() -> None:
    """Initialize VerboseConfig from environment variables."""
    # ALCHEMIST_INDEXER_VERBOSE_ALL: Set to "1", "true", or "yes" to enable
    verbose_all = os.environ.get("ALCHEMIST_INDEXER_VERBOSE_ALL", "").lower()
    if verbose_all in {"1", "true", "yes"}:
        VerboseConfig.enable_all()

    # ALCHEMIST_INDEXER_VERBOSE_POSITIONS: Comma-separated list of token IDs
    for token_id in os.environ.get("ALCHEMIST_INDEXER_VERBOSE_POSITIONS", "").split(","):
        if token_id.strip():
            VerboseConfig.add_position(int(token_id.strip()))

    # ALCHEMIST_INDEXER_VERBOSE_TX: Comma-separated list of transaction hashes
    for tx_hash in os.environ.get("ALCHEMIST_INDEXER_VERBOSE_TX", "").split(","):
        if tx_hash.strip():
            VerboseConfig.add_transaction(tx_hash.strip())


def log_position_update(
    context: EventHandlerContext,
    position: PositionTable,
    operation: str,
    collateral_before: int,
    debt_before: int,
) -> None:
    if not VerboseConfig.is_verbose(
        token_id=position.token_id, tx_hash=context.metadata.transaction_hash
    ):
        return

    metadata = context.metadata
    logger.info(f"{operation} ({context.dialect})")
    logger.info(f"  position={position.id}")
    logger.info(f"  collateral: {collateral_before} -> {position.collateral}")
    logger.info(f"  debt: {debt_before} -> {position.debt}")
    logger.info(f"  tx={metadata.transaction_hash.to_0x_hex()}")
    logger.info(f"  block={metadata.block_number}.{metadata.log_index}")
