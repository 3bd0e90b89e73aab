"""
Event dialect for Alchemist contracts that report share counts.

Deposit(sender, tokenId, amount, shares)
Withdraw(tokenId, amount, shares, recipient)
Mint(tokenId, amount, recipient)
Burn(sender, tokenId, amount)
Liquidate(tokenId, liquidator, amount, shares)
Transfer(from, to, tokenId)
"""

from typing import ClassVar

from alchemist_indexer.dialects.base import DecoderTableDialect
from alchemist_indexer.events import (
    BorrowOperation,
    ContractEvent,
    DepositOperation,
    LiquidationOperation,
    PositionTransferOperation,
    RepayOperation,
    WithdrawOperation,
)


def _decode_deposit(event: ContractEvent) -> DepositOperation:
    return DepositOperation(
        token_id=event.get_int("tokenId"),
        amount=event.get_int("amount"),
        shares=event.get_int("shares"),
        depositor=event.get_address("sender"),
    )


def _decode_withdraw(event: ContractEvent) -> WithdrawOperation:
    return WithdrawOperation(
        token_id=event.get_int("tokenId"),
        amount=event.get_int("amount"),
        shares=event.get_int("shares"),
        recipient=event.get_address("recipient"),
    )


def _decode_mint(event: ContractEvent) -> BorrowOperation:
    return BorrowOperation(
        token_id=event.get_int("tokenId"),
        amount=event.get_int("amount"),
        recipient=event.get_address("recipient"),
    )


def _decode_burn(event: ContractEvent) -> RepayOperation:
    amount = event.get_int("amount")
    return RepayOperation(
        token_id=event.get_int("tokenId"),
        amount=amount,
        debt_delta=amount,
        payer=event.get_address("sender"),
    )


def _decode_liquidate(event: ContractEvent) -> LiquidationOperation:
    return LiquidationOperation(
        token_id=event.get_int("tokenId"),
        collateral_liquidated=event.get_int("shares"),
        debt_repaid=event.get_int("amount"),
        liquidator=event.get_address("liquidator"),
    )


def _decode_transfer(event: ContractEvent) -> PositionTransferOperation:
    return PositionTransferOperation(
        token_id=event.get_int("tokenId"),
        from_=event.get_address("from"),
        to=event.get_address("to"),
    )


class AlchemistV3Dialect(DecoderTableDialect):
    """Dialect for Alchemist contracts which report deposited and withdrawn shares."""

    name = "v3"

    decoders: ClassVar = {
        "Deposit": _decode_deposit,
        "Withdraw": _decode_withdraw,
        "Mint": _decode_mint,
        "Burn": _decode_burn,
        "Liquidate": _decode_liquidate,
        "Transfer": _decode_transfer,
    }
