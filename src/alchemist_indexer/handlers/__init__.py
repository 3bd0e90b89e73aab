"""Handlers applying normalized operations to the aggregate entities."""

from alchemist_indexer.handlers.core import (
    apply_borrow,
    apply_deposit,
    apply_force_repay,
    apply_liquidation,
    apply_position_transfer,
    apply_repay,
    apply_withdraw,
)
from alchemist_indexer.handlers.looper import apply_loop_executed, apply_looped_position_created
from alchemist_indexer.handlers.snapshots import update_looper_multiple, upsert_daily_snapshot

__all__ = [
    "apply_borrow",
    "apply_deposit",
    "apply_force_repay",
    "apply_liquidation",
    "apply_loop_executed",
    "apply_looped_position_created",
    "apply_position_transfer",
    "apply_repay",
    "apply_withdraw",
    "update_looper_multiple",
    "upsert_daily_snapshot",
]
