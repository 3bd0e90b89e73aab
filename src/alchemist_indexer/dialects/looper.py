"""
Event dialect for the looper contract.

LoopedPositionCreated(tokenId, initialUsdc, finalShares, totalBorrowed, totalUsdcSwapped,
    loopsExecuted)
LoopExecuted(tokenId, borrowAmount, usdcReceived, sharesDeposited)
MultiLoopExecuted(tokenId, loopsExecuted, totalBorrowed, totalUsdcReceived, totalSharesDeposited)
"""

from typing import ClassVar

from alchemist_indexer.dialects.base import DecoderTableDialect
from alchemist_indexer.events import (
    ContractEvent,
    LoopedPositionCreatedOperation,
    LoopExecutedOperation,
)


def _decode_looped_position_created(event: ContractEvent) -> LoopedPositionCreatedOperation:
    return LoopedPositionCreatedOperation(
        token_id=event.get_int("tokenId"),
        initial_usdc=event.get_int("initialUsdc"),
        final_shares=event.get_int("finalShares"),
        total_borrowed=event.get_int("totalBorrowed"),
        total_usdc_swapped=event.get_int("totalUsdcSwapped"),
        loops_executed=event.get_int("loopsExecuted"),
    )


def _decode_loop_executed(event: ContractEvent) -> LoopExecutedOperation:
    return LoopExecutedOperation(
        token_id=event.get_int("tokenId"),
        borrow_amount=event.get_int("borrowAmount"),
        usdc_received=event.get_int("usdcReceived"),
        shares_deposited=event.get_int("sharesDeposited"),
    )


def _decode_multi_loop_executed(event: ContractEvent) -> LoopExecutedOperation:
    return LoopExecutedOperation(
        token_id=event.get_int("tokenId"),
        borrow_amount=event.get_int("totalBorrowed"),
        usdc_received=event.get_int("totalUsdcReceived"),
        shares_deposited=event.get_int("totalSharesDeposited"),
        loops_executed=event.get_int("loopsExecuted"),
        is_batch=True,
    )


class LooperDialect(DecoderTableDialect):
    """Dialect for the looper contract's leverage strategy events."""

    name = "looper"

    decoders: ClassVar = {
        "LoopedPositionCreated": _decode_looped_position_created,
        "LoopExecuted": _decode_loop_executed,
        "MultiLoopExecuted": _decode_multi_loop_executed,
    }
