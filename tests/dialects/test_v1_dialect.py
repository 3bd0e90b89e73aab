import pytest

from alchemist_indexer.dialects import AlchemistV1Dialect
from alchemist_indexer.events import (
    BorrowOperation,
    DepositOperation,
    ForceRepayOperation,
    LiquidationOperation,
    PositionTransferOperation,
    RepayOperation,
    WithdrawOperation,
)
from alchemist_indexer.exceptions import UnknownEvent
from tests.conftest import ALCHEMIST_V1_ADDRESS, ALICE, BOB, LIQUIDATOR, EventFactory


@pytest.fixture
def dialect() -> AlchemistV1Dialect:
    return AlchemistV1Dialect()


@pytest.fixture
def make_v1_event(make_event: EventFactory) -> EventFactory:
    def _make_v1_event(name, params, **kwargs):
        return make_event(name, params, address=ALCHEMIST_V1_ADDRESS, **kwargs)

    return _make_v1_event


def test_deposit_without_shares(dialect: AlchemistV1Dialect, make_v1_event: EventFactory):
    """
    The v1 deposit has no share count or depositor, so the amount is credited 1:1 and the
    transaction sender is recorded as the depositor.
    """

    operation = dialect.normalize(make_v1_event("Deposit", {"amount": 1000, "recipientId": 3}))
    assert operation == DepositOperation(token_id=3, amount=1000, shares=1000, depositor=ALICE)


def test_withdraw(dialect: AlchemistV1Dialect, make_v1_event: EventFactory):
    operation = dialect.normalize(
        make_v1_event("Withdraw", {"amount": 200, "tokenId": 3, "recipient": BOB})
    )
    assert operation == WithdrawOperation(token_id=3, amount=200, shares=200, recipient=BOB)


def test_mint(dialect: AlchemistV1Dialect, make_v1_event: EventFactory):
    operation = dialect.normalize(
        make_v1_event("Mint", {"tokenId": 3, "amount": 400, "recipient": ALICE})
    )
    assert operation == BorrowOperation(token_id=3, amount=400, recipient=ALICE)


def test_burn(dialect: AlchemistV1Dialect, make_v1_event: EventFactory):
    operation = dialect.normalize(
        make_v1_event("Burn", {"sender": BOB, "amount": 100, "recipientId": 3})
    )
    assert operation == RepayOperation(token_id=3, amount=100, debt_delta=100, payer=BOB)


def test_repay_uses_credit_as_debt_reduction(
    dialect: AlchemistV1Dialect, make_v1_event: EventFactory
):
    operation = dialect.normalize(
        make_v1_event("Repay", {"sender": BOB, "amount": 110, "recipientId": 3, "credit": 100})
    )
    assert operation == RepayOperation(
        token_id=3, amount=110, debt_delta=100, payer=BOB, credit=100
    )


def test_liquidated_collateral_is_sum_of_fees(
    dialect: AlchemistV1Dialect, make_v1_event: EventFactory
):
    operation = dialect.normalize(
        make_v1_event(
            "Liquidated",
            {
                "accountId": 3,
                "liquidator": LIQUIDATOR,
                "amount": 250,
                "feeInYield": 200,
                "feeInUnderlying": 60,
            },
        )
    )
    assert operation == LiquidationOperation(
        token_id=3,
        collateral_liquidated=260,
        debt_repaid=250,
        liquidator=LIQUIDATOR,
        fee_in_yield=200,
        fee_in_underlying=60,
    )


def test_force_repay_reports_new_debt(dialect: AlchemistV1Dialect, make_v1_event: EventFactory):
    operation = dialect.normalize(
        make_v1_event("ForceRepay", {"accountId": 3, "amount": 50, "newDebt": 250})
    )
    assert operation == ForceRepayOperation(token_id=3, amount=50, new_debt=250, payer=ALICE)


def test_transfer(dialect: AlchemistV1Dialect, make_v1_event: EventFactory):
    operation = dialect.normalize(
        make_v1_event("Transfer", {"from": ALICE, "to": BOB, "tokenId": 3})
    )
    assert operation == PositionTransferOperation(token_id=3, from_=ALICE, to=BOB)


@pytest.mark.parametrize("event_name", ["Liquidate", "LoopExecuted", "deposit"])
def test_unknown_events(
    dialect: AlchemistV1Dialect, make_v1_event: EventFactory, event_name: str
):
    with pytest.raises(UnknownEvent):
        dialect.normalize(make_v1_event(event_name, {}))
