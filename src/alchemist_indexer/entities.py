"""
Repository accessors for the aggregate entities.

These functions only look up and initialize entities, they contain no business logic. Lookups use
stable natural keys: the decimal token ID for positions and looper data, the checksummed address
for users, and a fixed key for the protocol statistics singleton.
"""

from eth_typing import ChecksumAddress

from alchemist_indexer.constants import PROTOCOL_STATS_ID
from alchemist_indexer.database.models import (
    LooperPositionDataTable,
    PositionTable,
    ProtocolStatsTable,
    UserTable,
)
from alchemist_indexer.database.store import EntityStore
from alchemist_indexer.functions import BI_ZERO, get_checksum_address
from alchemist_indexer.logging import logger


def get_position_id(token_id: int) -> str:
    return str(token_id)


def load_user(store: EntityStore, address: ChecksumAddress | str) -> UserTable | None:
    return store.load(UserTable, get_checksum_address(address))


def load_position(store: EntityStore, token_id: int) -> PositionTable | None:
    return store.load(PositionTable, get_position_id(token_id))


def load_looper_data(store: EntityStore, token_id: int) -> LooperPositionDataTable | None:
    return store.load(LooperPositionDataTable, get_position_id(token_id))


def get_or_create_user(
    store: EntityStore,
    address: ChecksumAddress | str,
    timestamp: int,
) -> UserTable:
    """
    Get existing user or create and save a new one with no positions.
    """

    address = get_checksum_address(address)
    if (user := store.load(UserTable, address)) is None:
        user = UserTable(
            address=address,
            total_positions=0,
            created_at=timestamp,
        )
        store.save(user)
    return user


def get_or_create_position(
    store: EntityStore,
    token_id: int,
    timestamp: int,
) -> PositionTable:
    """
    Get existing position or create a new one with zero balances.

    A new position is NOT saved. The owner is left unset and must be assigned by the caller before
    the position is saved; `save_position` reports positions saved without one.
    """

    if (position := load_position(store, token_id)) is None:
        position = PositionTable(
            id=get_position_id(token_id),
            token_id=token_id,
            owner_id=None,
            collateral=BI_ZERO,
            debt=BI_ZERO,
            is_looped_position=False,
            looper_data_id=None,
            created_at=timestamp,
            updated_at=timestamp,
        )
    return position


def save_position(store: EntityStore, position: PositionTable) -> None:
    if position.owner_id is None:
        logger.warning(f"Saving position {position.id} without an owner")
    store.save(position)


def get_or_create_protocol_stats(store: EntityStore) -> ProtocolStatsTable:
    """
    Get the protocol statistics singleton, creating and saving it with zeroed totals if missing.
    """

    if (stats := store.load(ProtocolStatsTable, PROTOCOL_STATS_ID)) is None:
        stats = ProtocolStatsTable(
            id=PROTOCOL_STATS_ID,
            total_positions=0,
            total_looped_positions=0,
            total_collateral=BI_ZERO,
            total_debt=BI_ZERO,
            total_loop_volume=BI_ZERO,
            updated_at=BI_ZERO,
        )
        store.save(stats)
    return stats
