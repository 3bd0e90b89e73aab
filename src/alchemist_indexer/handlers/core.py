"""
Handlers for the core Alchemist operations.

Every handler follows the same sequence:
    1. Resolve the position. Deposits create it, all other operations skip silently if it is
       missing. Skipped events produce no writes.
    2. Append an immutable record of the event, keyed by transaction hash and log index.
    3. Apply the signed balance delta to the position.
    4. Apply the same delta to the protocol totals, refresh the looper multiple for looped
       positions, and overwrite the day's snapshot.

Balances are never clamped. A negative balance means an event was missed upstream and is kept as a
visible integrity signal instead of being hidden.
"""

from alchemist_indexer.constants import ZERO_ADDRESS
from alchemist_indexer.context import EventHandlerContext, log_position_update
from alchemist_indexer.database.models import (
    BorrowEventTable,
    DepositEventTable,
    LiquidationEventTable,
    PositionTable,
    RepayEventTable,
    WithdrawalEventTable,
)
from alchemist_indexer.entities import (
    get_or_create_position,
    get_or_create_user,
    load_position,
    load_user,
    save_position,
)
from alchemist_indexer.events import (
    BorrowOperation,
    DepositOperation,
    ForceRepayOperation,
    LiquidationOperation,
    PositionTransferOperation,
    RepayOperation,
    WithdrawOperation,
)
from alchemist_indexer.handlers.snapshots import update_looper_multiple, upsert_daily_snapshot
from alchemist_indexer.logging import logger


def load_position_or_skip(
    context: EventHandlerContext,
    token_id: int,
    event_kind: str,
) -> PositionTable | None:
    """
    Load the position for an event which cannot create one.
    """

    if (position := load_position(context.store, token_id)) is None:
        logger.debug(
            f"Skipping {event_kind} for unknown position {token_id} "
            f"(block {context.metadata.block_number}, log {context.metadata.log_index})"
        )
    return position


def apply_balance_delta(
    context: EventHandlerContext,
    position: PositionTable,
    *,
    collateral_delta: int,
    debt_delta: int,
    operation: str,
) -> None:
    """
    Apply signed collateral and debt deltas to a position and cascade them to the derived state.
    """

    collateral_before = position.collateral
    debt_before = position.debt

    position.collateral += collateral_delta
    position.debt += debt_delta
    position.updated_at = context.timestamp
    save_position(context.store, position)

    context.stats.total_collateral += collateral_delta
    context.stats.total_debt += debt_delta
    context.touch_stats()

    update_looper_multiple(context, position)
    upsert_daily_snapshot(context, position)

    log_position_update(
        context,
        position,
        operation=operation,
        collateral_before=collateral_before,
        debt_before=debt_before,
    )


def apply_deposit(context: EventHandlerContext, operation: DepositOperation) -> None:
    position = get_or_create_position(context.store, operation.token_id, context.timestamp)
    if position.dialect is None:
        position.dialect = context.dialect

    context.store.save(
        DepositEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            amount=operation.amount,
            shares=operation.shares,
            depositor=operation.depositor,
            is_loop_deposit=False,
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    apply_balance_delta(
        context,
        position,
        collateral_delta=operation.shares,
        debt_delta=0,
        operation="DEPOSIT",
    )


def apply_withdraw(context: EventHandlerContext, operation: WithdrawOperation) -> None:
    if (position := load_position_or_skip(context, operation.token_id, "withdraw")) is None:
        return

    context.store.save(
        WithdrawalEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            amount=operation.amount,
            shares=operation.shares,
            recipient=operation.recipient,
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    apply_balance_delta(
        context,
        position,
        collateral_delta=-operation.shares,
        debt_delta=0,
        operation="WITHDRAW",
    )


def apply_borrow(context: EventHandlerContext, operation: BorrowOperation) -> None:
    if (position := load_position_or_skip(context, operation.token_id, "borrow")) is None:
        return

    context.store.save(
        BorrowEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            amount=operation.amount,
            recipient=operation.recipient,
            is_loop_borrow=False,
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    apply_balance_delta(
        context,
        position,
        collateral_delta=0,
        debt_delta=operation.amount,
        operation="BORROW",
    )


def apply_repay(context: EventHandlerContext, operation: RepayOperation) -> None:
    if (position := load_position_or_skip(context, operation.token_id, "repay")) is None:
        return

    context.store.save(
        RepayEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            amount=operation.amount,
            credit=operation.credit,
            payer=operation.payer,
            is_force_repay=False,
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    apply_balance_delta(
        context,
        position,
        collateral_delta=0,
        debt_delta=-operation.debt_delta,
        operation="REPAY",
    )


def apply_force_repay(context: EventHandlerContext, operation: ForceRepayOperation) -> None:
    """
    Set the position's debt to the reported absolute value.

    The protocol totals receive the difference between the old and new debt, which keeps them equal
    to the sum of the position balances even if the reported amount disagrees with that difference.
    """

    if (position := load_position_or_skip(context, operation.token_id, "force repay")) is None:
        return

    context.store.save(
        RepayEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            amount=operation.amount,
            credit=None,
            payer=operation.payer,
            is_force_repay=True,
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    debt_delta = operation.new_debt - position.debt
    if -debt_delta != operation.amount:
        logger.debug(
            f"Force repay on position {position.id} reported amount {operation.amount}, "
            f"debt changed by {-debt_delta}"
        )

    apply_balance_delta(
        context,
        position,
        collateral_delta=0,
        debt_delta=debt_delta,
        operation="FORCE REPAY",
    )
    assert position.debt == operation.new_debt


def apply_liquidation(context: EventHandlerContext, operation: LiquidationOperation) -> None:
    if (position := load_position_or_skip(context, operation.token_id, "liquidation")) is None:
        return

    context.store.save(
        LiquidationEventTable(
            id=context.metadata.event_id,
            position_id=position.id,
            collateral_liquidated=operation.collateral_liquidated,
            debt_repaid=operation.debt_repaid,
            liquidator=operation.liquidator,
            fee_in_yield=operation.fee_in_yield,
            fee_in_underlying=operation.fee_in_underlying,
            timestamp=context.timestamp,
            tx_hash=context.metadata.transaction_hash.to_0x_hex(),
            block_number=context.metadata.block_number,
        )
    )

    apply_balance_delta(
        context,
        position,
        collateral_delta=-operation.collateral_liquidated,
        debt_delta=-operation.debt_repaid,
        operation="LIQUIDATION",
    )


def apply_position_transfer(
    context: EventHandlerContext,
    operation: PositionTransferOperation,
) -> None:
    """
    Track position ownership.

    Transfers from the zero address mint a position, transfers to the zero address burn it, and all
    others reassign it. Burned positions are kept for their history, only the counters change.
    """

    if operation.from_ == ZERO_ADDRESS:
        _mint_position(context, operation)
    elif operation.to == ZERO_ADDRESS:
        _burn_position(context, operation)
    else:
        _reassign_position(context, operation)


def _mint_position(context: EventHandlerContext, operation: PositionTransferOperation) -> None:
    position = get_or_create_position(context.store, operation.token_id, context.timestamp)
    if position.dialect is None:
        position.dialect = context.dialect

    owner = get_or_create_user(context.store, operation.to, context.timestamp)
    owner.total_positions += 1
    context.store.save(owner)

    position.owner_id = owner.address
    save_position(context.store, position)

    context.stats.total_positions += 1
    context.touch_stats()

    logger.debug(f"Position {position.id} minted to {owner.address}")


def _burn_position(context: EventHandlerContext, operation: PositionTransferOperation) -> None:
    if (position := load_position_or_skip(context, operation.token_id, "burn")) is None:
        return

    if position.owner_id is not None and (
        previous_owner := load_user(context.store, position.owner_id)
    ):
        previous_owner.total_positions -= 1
        context.store.save(previous_owner)

    context.stats.total_positions -= 1
    if position.is_looped_position:
        context.stats.total_looped_positions -= 1
    context.touch_stats()

    logger.debug(f"Position {position.id} burned by {operation.from_}")


def _reassign_position(context: EventHandlerContext, operation: PositionTransferOperation) -> None:
    if (position := load_position_or_skip(context, operation.token_id, "transfer")) is None:
        return

    if position.owner_id is not None and (
        previous_owner := load_user(context.store, position.owner_id)
    ):
        previous_owner.total_positions -= 1
        context.store.save(previous_owner)

    new_owner = get_or_create_user(context.store, operation.to, context.timestamp)
    new_owner.total_positions += 1
    context.store.save(new_owner)

    position.owner_id = new_owner.address
    position.updated_at = context.timestamp
    save_position(context.store, position)

    logger.debug(f"Position {position.id} transferred from {operation.from_} to {operation.to}")
