"""
Event dialect for Alchemist contracts that report amounts only.

These contracts identify positions as "recipientId" or "accountId", report liquidation fees in
yield and underlying tokens separately, credit yield-token repayments in debt units, and report the
position's resulting debt for force repayments instead of the amount removed.

Deposit(amount, recipientId)
Withdraw(amount, tokenId, recipient)
Mint(tokenId, amount, recipient)
Burn(sender, amount, recipientId)
Repay(sender, amount, recipientId, credit)
Liquidated(accountId, liquidator, amount, feeInYield, feeInUnderlying)
ForceRepay(accountId, amount, newDebt)
Transfer(from, to, tokenId)
"""

from typing import ClassVar

from alchemist_indexer.dialects.base import DecoderTableDialect
from alchemist_indexer.events import (
    BorrowOperation,
    ContractEvent,
    DepositOperation,
    ForceRepayOperation,
    LiquidationOperation,
    PositionTransferOperation,
    RepayOperation,
    WithdrawOperation,
)


def _decode_deposit(event: ContractEvent) -> DepositOperation:
    # No share count is emitted, deposits are credited 1:1. The depositor is not part of the
    # event, so the transaction sender is recorded instead.
    amount = event.get_int("amount")
    return DepositOperation(
        token_id=event.get_int("recipientId"),
        amount=amount,
        shares=amount,
        depositor=event.metadata.transaction_from,
    )


def _decode_withdraw(event: ContractEvent) -> WithdrawOperation:
    amount = event.get_int("amount")
    return WithdrawOperation(
        token_id=event.get_int("tokenId"),
        amount=amount,
        shares=amount,
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
        token_id=event.get_int("recipientId"),
        amount=amount,
        debt_delta=amount,
        payer=event.get_address("sender"),
    )


def _decode_repay(event: ContractEvent) -> RepayOperation:
    credit = event.get_int("credit")
    return RepayOperation(
        token_id=event.get_int("recipientId"),
        amount=event.get_int("amount"),
        debt_delta=credit,
        payer=event.get_address("sender"),
        credit=credit,
    )


def _decode_liquidated(event: ContractEvent) -> LiquidationOperation:
    fee_in_yield = event.get_int("feeInYield")
    fee_in_underlying = event.get_int("feeInUnderlying")
    return LiquidationOperation(
        token_id=event.get_int("accountId"),
        collateral_liquidated=fee_in_yield + fee_in_underlying,
        debt_repaid=event.get_int("amount"),
        liquidator=event.get_address("liquidator"),
        fee_in_yield=fee_in_yield,
        fee_in_underlying=fee_in_underlying,
    )


def _decode_force_repay(event: ContractEvent) -> ForceRepayOperation:
    return ForceRepayOperation(
        token_id=event.get_int("accountId"),
        amount=event.get_int("amount"),
        new_debt=event.get_int("newDebt"),
        payer=event.metadata.transaction_from,
    )


def _decode_transfer(event: ContractEvent) -> PositionTransferOperation:
    return PositionTransferOperation(
        token_id=event.get_int("tokenId"),
        from_=event.get_address("from"),
        to=event.get_address("to"),
    )


class AlchemistV1Dialect(DecoderTableDialect):
    """Dialect for Alchemist contracts which report amounts, fees and absolute debt."""

    name = "v1"

    decoders: ClassVar = {
        "Deposit": _decode_deposit,
        "Withdraw": _decode_withdraw,
        "Mint": _decode_mint,
        "Burn": _decode_burn,
        "Repay": _decode_repay,
        "Liquidated": _decode_liquidated,
        "ForceRepay": _decode_force_repay,
        "Transfer": _decode_transfer,
    }
