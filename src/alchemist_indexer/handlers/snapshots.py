"""Derived per-position state refreshed after every balance change."""

from alchemist_indexer.context import EventHandlerContext
from alchemist_indexer.database.models import (
    DailyPositionSnapshotTable,
    LooperPositionDataTable,
    PositionTable,
)
from alchemist_indexer.entities import load_looper_data
from alchemist_indexer.functions import (
    BI_ZERO,
    calculate_leverage,
    calculate_multiple,
    get_day_id,
    get_day_start_timestamp,
    get_snapshot_id,
)


def refresh_multiple(looper_data: LooperPositionDataTable, collateral: int) -> None:
    """
    Recalculate the current multiple against the initial deposit and raise the peak if exceeded.

    Without an initial deposit the multiple is undefined, and both values are left unchanged.
    """

    if looper_data.initial_deposit <= BI_ZERO:
        return

    looper_data.current_multiple = calculate_multiple(collateral, looper_data.initial_deposit)
    looper_data.peak_multiple = max(looper_data.peak_multiple, looper_data.current_multiple)


def update_looper_multiple(context: EventHandlerContext, position: PositionTable) -> None:
    if not position.is_looped_position:
        return

    if (looper_data := load_looper_data(context.store, position.token_id)) is None:
        return

    refresh_multiple(looper_data, position.collateral)
    context.store.save(looper_data)


def upsert_daily_snapshot(
    context: EventHandlerContext,
    position: PositionTable,
) -> DailyPositionSnapshotTable:
    """
    Write the position's state into the snapshot for the current UTC day.

    Snapshots are not cumulative: a later event on the same day overwrites the earlier values.
    """

    day_id = get_day_id(context.timestamp)
    snapshot_id = get_snapshot_id(position.id, day_id)

    if (snapshot := context.store.load(DailyPositionSnapshotTable, snapshot_id)) is None:
        snapshot = DailyPositionSnapshotTable(
            id=snapshot_id,
            position_id=position.id,
            date=day_id,
            timestamp=get_day_start_timestamp(day_id),
        )

    snapshot.collateral = position.collateral
    snapshot.debt = position.debt
    snapshot.leverage = calculate_leverage(position.collateral, position.debt)
    snapshot.multiple = None
    if position.is_looped_position and (
        looper_data := load_looper_data(context.store, position.token_id)
    ):
        snapshot.multiple = looper_data.current_multiple

    context.store.save(snapshot)
    return snapshot
