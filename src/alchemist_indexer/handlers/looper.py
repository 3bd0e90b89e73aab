"""
Handlers for the looper contract's leverage strategy.

A looped position repeatedly borrows against its collateral, swaps the borrowed funds and deposits
the proceeds. `LooperPositionDataTable` tracks the strategy's basis and progress for each position:
the multiple is the position's collateral relative to the initial deposit, and the peak multiple
never decreases.
"""

from alchemist_indexer.context import EventHandlerContext, log_position_update
from alchemist_indexer.database.models import LooperPositionDataTable, LoopEventTable, PositionTable
from alchemist_indexer.entities import (
    get_or_create_position,
    load_looper_data,
    save_position,
)
from alchemist_indexer.events import LoopedPositionCreatedOperation, LoopExecutedOperation
from alchemist_indexer.functions import (
    BD_ONE,
    BD_ZERO,
    BI_ZERO,
    calculate_average_swap_rate,
    calculate_leverage,
    calculate_ltv,
)
from alchemist_indexer.handlers.core import load_position_or_skip
from alchemist_indexer.handlers.snapshots import refresh_multiple, upsert_daily_snapshot
from alchemist_indexer.logging import logger


def _flag_looped(context: EventHandlerContext, position: PositionTable) -> None:
    if not position.is_looped_position:
        position.is_looped_position = True
        context.stats.total_looped_positions += 1
    position.looper_data_id = position.id


def apply_looped_position_created(
    context: EventHandlerContext,
    operation: LoopedPositionCreatedOperation,
) -> None:
    """
    Establish the loop basis for a position and set its balances to the reported totals.

    The multiple starts at 1. The protocol totals receive the difference between the old and the
    reported balances, so balances already credited by Deposit and Mint events count only once.
    """

    position = get_or_create_position(context.store, operation.token_id, context.timestamp)
    if position.dialect is None:
        position.dialect = context.dialect

    if (looper_data := load_looper_data(context.store, operation.token_id)) is None:
        looper_data = LooperPositionDataTable(id=position.id, position_id=position.id)

    looper_data.initial_deposit = operation.initial_usdc
    looper_data.initial_collateral = operation.final_shares
    looper_data.initial_debt = operation.total_borrowed
    # Shares are used as a proxy for collateral value
    looper_data.initial_leverage = calculate_leverage(
        operation.final_shares, operation.total_borrowed
    )
    looper_data.total_loops = operation.loops_executed
    looper_data.total_minted = operation.total_borrowed
    looper_data.total_swapped = operation.total_usdc_swapped
    looper_data.average_swap_rate = calculate_average_swap_rate(
        operation.total_usdc_swapped, operation.total_borrowed
    )
    looper_data.created_at = context.timestamp
    looper_data.created_tx_hash = context.metadata.transaction_hash.to_0x_hex()
    looper_data.last_loop_at = context.timestamp
    looper_data.current_multiple = BD_ONE
    looper_data.peak_multiple = BD_ONE
    context.store.save(looper_data)

    collateral_before = position.collateral
    debt_before = position.debt

    _flag_looped(context, position)
    position.collateral = operation.final_shares
    position.debt = operation.total_borrowed
    position.updated_at = context.timestamp
    save_position(context.store, position)

    context.stats.total_collateral += position.collateral - collateral_before
    context.stats.total_debt += position.debt - debt_before
    context.stats.total_loop_volume += operation.total_borrowed
    context.touch_stats()

    upsert_daily_snapshot(context, position)

    log_position_update(
        context,
        position,
        operation="LOOPED POSITION CREATED",
        collateral_before=collateral_before,
        debt_before=debt_before,
    )


def _backfill_looper_data(
    context: EventHandlerContext,
    position: PositionTable,
) -> LooperPositionDataTable:
    """
    Create loop data for a position that was looped without a creation event.

    The true basis cannot be recovered, so the position's current balances are used instead.
    Multiples derived from this data are only valid from this event forward.
    """

    logger.warning(
        f"Position {position.id} has no loop data, backfilling from current balances "
        f"(collateral={position.collateral}, debt={position.debt})"
    )

    looper_data = LooperPositionDataTable(
        id=position.id,
        position_id=position.id,
        initial_deposit=position.collateral,
        initial_collateral=position.collateral,
        initial_debt=position.debt,
        initial_leverage=BD_ZERO,
        total_loops=0,
        total_minted=BI_ZERO,
        total_swapped=BI_ZERO,
        average_swap_rate=BD_ZERO,
        created_at=context.timestamp,
        created_tx_hash=context.metadata.transaction_hash.to_0x_hex(),
        last_loop_at=context.timestamp,
        current_multiple=BD_ONE,
        peak_multiple=BD_ONE,
    )
    _flag_looped(context, position)
    return looper_data


def apply_loop_executed(context: EventHandlerContext, operation: LoopExecutedOperation) -> None:
    """
    Add one or more loop iterations to an existing position.

    Single loops and batched loops share this handler; a batch advances the loop counter by its
    reported count and is recorded as a single summary event.
    """

    event_kind = "multi-loop" if operation.is_batch else "loop"
    if (position := load_position_or_skip(context, operation.token_id, event_kind)) is None:
        return

    if (looper_data := load_looper_data(context.store, operation.token_id)) is None:
        looper_data = _backfill_looper_data(context, position)

    collateral_before = position.collateral
    debt_before = position.debt
    new_collateral = collateral_before + operation.shares_deposited
    new_debt = debt_before + operation.borrow_amount

    context.store.save(
        LoopEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            looper_data_id=looper_data.id,
            loop_number=looper_data.total_loops + operation.loops_executed,
            borrow_amount=operation.borrow_amount,
            usdc_received=operation.usdc_received,
            shares_deposited=operation.shares_deposited,
            collateral_after=new_collateral,
            debt_after=new_debt,
            ltv_after=calculate_ltv(new_collateral, new_debt),
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    looper_data.total_loops += operation.loops_executed
    looper_data.total_minted += operation.borrow_amount
    looper_data.total_swapped += operation.usdc_received
    looper_data.last_loop_at = context.timestamp
    if looper_data.total_minted > BI_ZERO:
        looper_data.average_swap_rate = calculate_average_swap_rate(
            looper_data.total_swapped, looper_data.total_minted
        )
    refresh_multiple(looper_data, new_collateral)
    context.store.save(looper_data)

    position.collateral = new_collateral
    position.debt = new_debt
    position.updated_at = context.timestamp
    save_position(context.store, position)

    context.stats.total_collateral += operation.shares_deposited
    context.stats.total_debt += operation.borrow_amount
    context.stats.total_loop_volume += operation.borrow_amount
    context.touch_stats()

    upsert_daily_snapshot(context, position)

    log_position_update(
        context,
        position,
        operation="MULTI LOOP" if operation.is_batch else "LOOP",
        collateral_before=collateral_before,
        debt_before=debt_before,
    )
