import pytest

from alchemist_indexer.dialects import AlchemistV3Dialect
from alchemist_indexer.events import (
    BorrowOperation,
    DepositOperation,
    LiquidationOperation,
    PositionTransferOperation,
    RepayOperation,
    WithdrawOperation,
)
from alchemist_indexer.exceptions import InvalidEventPayload, UnknownEvent
from tests.conftest import ALICE, BOB, LIQUIDATOR, EventFactory


@pytest.fixture
def dialect() -> AlchemistV3Dialect:
    return AlchemistV3Dialect()


def test_supported_events(dialect: AlchemistV3Dialect):
    assert dialect.supported_events == {
        "Deposit",
        "Withdraw",
        "Mint",
        "Burn",
        "Liquidate",
        "Transfer",
    }


def test_deposit_credits_shares(dialect: AlchemistV3Dialect, make_event: EventFactory):
    operation = dialect.normalize(
        make_event("Deposit", {"sender": BOB, "tokenId": 7, "amount": 1000, "shares": 990})
    )
    assert operation == DepositOperation(token_id=7, amount=1000, shares=990, depositor=BOB)


def test_withdraw(dialect: AlchemistV3Dialect, make_event: EventFactory):
    operation = dialect.normalize(
        make_event(
            "Withdraw", {"tokenId": 7, "amount": 505, "shares": 500, "recipient": ALICE.lower()}
        )
    )
    assert operation == WithdrawOperation(token_id=7, amount=505, shares=500, recipient=ALICE)


def test_mint_is_a_borrow(dialect: AlchemistV3Dialect, make_event: EventFactory):
    operation = dialect.normalize(
        make_event("Mint", {"tokenId": 7, "amount": 400, "recipient": BOB})
    )
    assert operation == BorrowOperation(token_id=7, amount=400, recipient=BOB)


def test_burn_is_a_repay(dialect: AlchemistV3Dialect, make_event: EventFactory):
    operation = dialect.normalize(
        make_event("Burn", {"sender": BOB, "tokenId": 7, "amount": 100})
    )
    assert operation == RepayOperation(token_id=7, amount=100, debt_delta=100, payer=BOB)
    assert operation.credit is None


def test_liquidate(dialect: AlchemistV3Dialect, make_event: EventFactory):
    operation = dialect.normalize(
        make_event(
            "Liquidate", {"tokenId": 7, "liquidator": LIQUIDATOR, "amount": 300, "shares": 320}
        )
    )
    assert operation == LiquidationOperation(
        token_id=7,
        collateral_liquidated=320,
        debt_repaid=300,
        liquidator=LIQUIDATOR,
    )
    assert operation.fee_in_yield is None
    assert operation.fee_in_underlying is None


def test_transfer(dialect: AlchemistV3Dialect, make_event: EventFactory):
    operation = dialect.normalize(make_event("Transfer", {"from": ALICE, "to": BOB, "tokenId": 7}))
    assert operation == PositionTransferOperation(token_id=7, from_=ALICE, to=BOB)


def test_string_encoded_amounts(dialect: AlchemistV3Dialect, make_event: EventFactory):
    large_amount = 2**200 + 1
    operation = dialect.normalize(
        make_event(
            "Deposit",
            {
                "sender": BOB,
                "tokenId": "0x7",
                "amount": str(large_amount),
                "shares": hex(large_amount),
            },
        )
    )
    assert isinstance(operation, DepositOperation)
    assert operation.token_id == 7
    assert operation.amount == large_amount
    assert operation.shares == large_amount


def test_unknown_event(dialect: AlchemistV3Dialect, make_event: EventFactory):
    # Liquidations are named differently by the v1 contracts
    with pytest.raises(UnknownEvent) as exc_info:
        dialect.normalize(make_event("Liquidated", {"accountId": 7}))
    assert exc_info.value.dialect == "v3"
    assert exc_info.value.event_name == "Liquidated"


def test_missing_parameter(dialect: AlchemistV3Dialect, make_event: EventFactory):
    with pytest.raises(InvalidEventPayload) as exc_info:
        dialect.normalize(make_event("Deposit", {"sender": BOB, "tokenId": 7, "amount": 1000}))
    assert exc_info.value.event_name == "Deposit"
    assert exc_info.value.parameter == "shares"


def test_malformed_address(dialect: AlchemistV3Dialect, make_event: EventFactory):
    with pytest.raises(InvalidEventPayload) as exc_info:
        dialect.normalize(make_event("Mint", {"tokenId": 7, "amount": 400, "recipient": "0x1234"}))
    assert exc_info.value.parameter == "recipient"
