from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from alchemist_indexer.constants import SECONDS_PER_DAY, ZERO_ADDRESS
from alchemist_indexer.database.models import DailyPositionSnapshotTable, LooperPositionDataTable
from alchemist_indexer.functions import get_day_id
from alchemist_indexer.handlers.snapshots import refresh_multiple
from alchemist_indexer.indexer import Indexer
from tests.conftest import ALICE, START_TIMESTAMP, EventFactory


def test_same_day_events_overwrite_snapshot(
    indexer: Indexer,
    make_event: EventFactory,
    session: Session,
):
    indexer.handle(make_event("Transfer", {"from": ZERO_ADDRESS, "to": ALICE, "tokenId": 1}))
    indexer.handle(
        make_event(
            "Deposit",
            {"sender": ALICE, "tokenId": 1, "amount": 1000, "shares": 1000},
            block_number=19_000_001,
        )
    )
    indexer.handle(
        make_event(
            "Mint",
            {"tokenId": 1, "amount": 500, "recipient": ALICE},
            block_number=19_000_100,
        )
    )

    snapshot = session.scalars(select(DailyPositionSnapshotTable)).one()
    assert snapshot.date == get_day_id(START_TIMESTAMP)
    assert snapshot.timestamp == START_TIMESTAMP
    assert snapshot.collateral == 1000
    assert snapshot.debt == 500
    assert snapshot.leverage == Decimal(2)


def test_new_day_creates_snapshot(
    indexer: Indexer,
    make_event: EventFactory,
    session: Session,
):
    indexer.handle(make_event("Transfer", {"from": ZERO_ADDRESS, "to": ALICE, "tokenId": 1}))
    indexer.handle(
        make_event(
            "Deposit",
            {"sender": ALICE, "tokenId": 1, "amount": 1000, "shares": 1000},
            block_number=19_000_001,
        )
    )
    indexer.handle(
        make_event(
            "Withdraw",
            {"tokenId": 1, "amount": 400, "shares": 400, "recipient": ALICE},
            block_number=19_010_000,
            timestamp=START_TIMESTAMP + SECONDS_PER_DAY + 60,
        )
    )

    first, second = session.scalars(
        select(DailyPositionSnapshotTable).order_by(DailyPositionSnapshotTable.date)
    ).all()
    assert second.date == first.date + 1
    assert second.timestamp == START_TIMESTAMP + SECONDS_PER_DAY
    assert first.collateral == 1000
    assert second.collateral == 600
    assert first.leverage == second.leverage == Decimal(1)
    assert first.position_id == second.position_id == "1"


def test_zero_equity_snapshot_has_zero_leverage(
    indexer: Indexer,
    make_event: EventFactory,
    session: Session,
):
    indexer.handle(make_event("Transfer", {"from": ZERO_ADDRESS, "to": ALICE, "tokenId": 1}))
    indexer.handle(
        make_event("Deposit", {"sender": ALICE, "tokenId": 1, "amount": 100, "shares": 100})
    )
    indexer.handle(make_event("Mint", {"tokenId": 1, "amount": 100, "recipient": ALICE}))

    snapshot = session.scalars(select(DailyPositionSnapshotTable)).one()
    assert snapshot.leverage == Decimal(0)


def test_refresh_multiple_without_initial_deposit():
    looper_data = LooperPositionDataTable(
        id="1",
        position_id="1",
        initial_deposit=0,
        current_multiple=Decimal(1),
        peak_multiple=Decimal(1),
    )
    refresh_multiple(looper_data, collateral=5000)
    assert looper_data.current_multiple == Decimal(1)
    assert looper_data.peak_multiple == Decimal(1)


def test_refresh_multiple_raises_peak():
    looper_data = LooperPositionDataTable(
        id="1",
        position_id="1",
        initial_deposit=1000,
        current_multiple=Decimal(1),
        peak_multiple=Decimal(2),
    )

    refresh_multiple(looper_data, collateral=1500)
    assert looper_data.current_multiple == Decimal("1.5")
    assert looper_data.peak_multiple == Decimal(2)

    refresh_multiple(looper_data, collateral=2500)
    assert looper_data.current_multiple == Decimal("2.5")
    assert looper_data.peak_multiple == Decimal("2.5")
