from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Address, Base, BigDecimal, BigInteger, TransactionHash
from .types import (
    ForeignKeyLooperDataId,
    ForeignKeyPositionId,
    PrimaryKeyAddress,
    PrimaryKeyCompositeId,
    PrimaryKeyNaturalId,
)


class UserTable(Base):
    __tablename__ = "users"

    address: Mapped[PrimaryKeyAddress]
    total_positions: Mapped[int]
    created_at: Mapped[int]

    # Relationships
    positions: Mapped[list["PositionTable"]] = relationship(
        "PositionTable",
        back_populates="owner",
    )


class PositionTable(Base):
    __tablename__ = "positions"

    id: Mapped[PrimaryKeyNaturalId]
    token_id: Mapped[BigInteger]
    # Unset until the position is minted to an owner
    owner_id: Mapped[str | None] = mapped_column(
        String(42),
        ForeignKey("users.address"),
        index=True,
    )
    dialect: Mapped[str | None]

    collateral: Mapped[BigInteger]
    debt: Mapped[BigInteger]
    is_looped_position: Mapped[bool]
    # Same key as the position once looped, no foreign key
    looper_data_id: Mapped[str | None]

    created_at: Mapped[int]
    updated_at: Mapped[int]

    # Relationships
    owner: Mapped["UserTable | None"] = relationship(
        "UserTable",
        foreign_keys="PositionTable.owner_id",
        back_populates="positions",
    )
    looper_data: Mapped["LooperPositionDataTable | None"] = relationship(
        "LooperPositionDataTable",
        back_populates="position",
        uselist=False,
    )
    snapshots: Mapped[list["DailyPositionSnapshotTable"]] = relationship(
        "DailyPositionSnapshotTable",
        back_populates="position",
        order_by="DailyPositionSnapshotTable.date",
    )


class ProtocolStatsTable(Base):
    __tablename__ = "protocol_stats"

    id: Mapped[PrimaryKeyNaturalId]
    total_positions: Mapped[int]
    total_looped_positions: Mapped[int]
    total_collateral: Mapped[BigInteger]
    total_debt: Mapped[BigInteger]
    total_loop_volume: Mapped[BigInteger]
    updated_at: Mapped[int]


class LooperPositionDataTable(Base):
    """
    Loop strategy state for a position, keyed by the same ID as the position.

    The initial basis is taken from the LoopedPositionCreated event. For positions that were looped
    without that event, the basis is backfilled from the position balances at the first observed
    loop, and multiples are only meaningful from that point forward.
    """

    __tablename__ = "looper_position_data"

    id: Mapped[PrimaryKeyNaturalId]
    position_id: Mapped[ForeignKeyPositionId]

    initial_deposit: Mapped[BigInteger]
    initial_collateral: Mapped[BigInteger]
    initial_debt: Mapped[BigInteger]
    initial_leverage: Mapped[BigDecimal]

    total_loops: Mapped[int]
    total_minted: Mapped[BigInteger]
    total_swapped: Mapped[BigInteger]
    average_swap_rate: Mapped[BigDecimal]
    current_multiple: Mapped[BigDecimal]
    peak_multiple: Mapped[BigDecimal]

    created_at: Mapped[int]
    created_tx_hash: Mapped[TransactionHash]
    last_loop_at: Mapped[int]

    # Relationships
    position: Mapped["PositionTable"] = relationship(
        "PositionTable",
        foreign_keys="LooperPositionDataTable.position_id",
        back_populates="looper_data",
    )
    loops: Mapped[list["LoopEventTable"]] = relationship(
        "LoopEventTable",
        back_populates="looper_data",
    )


class DepositEventTable(Base):
    __tablename__ = "deposit_events"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]

    amount: Mapped[BigInteger]
    shares: Mapped[BigInteger]
    depositor: Mapped[Address]
    is_loop_deposit: Mapped[bool]

    timestamp: Mapped[int]
    tx_hash: Mapped[TransactionHash]
    block_number: Mapped[int]


class BorrowEventTable(Base):
    __tablename__ = "borrow_events"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]

    amount: Mapped[BigInteger]
    recipient: Mapped[Address]
    is_loop_borrow: Mapped[bool]

    timestamp: Mapped[int]
    tx_hash: Mapped[TransactionHash]
    block_number: Mapped[int]


class RepayEventTable(Base):
    __tablename__ = "repay_events"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]

    amount: Mapped[BigInteger]
    # Debt units credited, for repayments made in yield tokens
    credit: Mapped[BigInteger | None]
    payer: Mapped[Address]
    is_force_repay: Mapped[bool]

    timestamp: Mapped[int]
    tx_hash: Mapped[TransactionHash]
    block_number: Mapped[int]


class WithdrawalEventTable(Base):
    __tablename__ = "withdrawal_events"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]

    amount: Mapped[BigInteger]
    shares: Mapped[BigInteger]
    recipient: Mapped[Address]

    timestamp: Mapped[int]
    tx_hash: Mapped[TransactionHash]
    block_number: Mapped[int]


class LiquidationEventTable(Base):
    __tablename__ = "liquidation_events"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]

    collateral_liquidated: Mapped[BigInteger]
    debt_repaid: Mapped[BigInteger]
    liquidator: Mapped[Address]
    fee_in_yield: Mapped[BigInteger | None]
    fee_in_underlying: Mapped[BigInteger | None]

    timestamp: Mapped[int]
    tx_hash: Mapped[TransactionHash]
    block_number: Mapped[int]


class LoopEventTable(Base):
    __tablename__ = "loop_events"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]
    looper_data_id: Mapped[ForeignKeyLooperDataId]

    loop_number: Mapped[int]
    borrow_amount: Mapped[BigInteger]
    usdc_received: Mapped[BigInteger]
    shares_deposited: Mapped[BigInteger]
    collateral_after: Mapped[BigInteger]
    debt_after: Mapped[BigInteger]
    ltv_after: Mapped[BigDecimal]

    timestamp: Mapped[int]
    tx_hash: Mapped[TransactionHash]
    block_number: Mapped[int]

    # Relationships
    looper_data: Mapped["LooperPositionDataTable"] = relationship(
        "LooperPositionDataTable",
        foreign_keys="LoopEventTable.looper_data_id",
        back_populates="loops",
    )


class DailyPositionSnapshotTable(Base):
    __tablename__ = "daily_position_snapshots"

    id: Mapped[PrimaryKeyCompositeId]
    position_id: Mapped[ForeignKeyPositionId]

    date: Mapped[int]
    timestamp: Mapped[int]
    collateral: Mapped[BigInteger]
    debt: Mapped[BigInteger]
    leverage: Mapped[BigDecimal]
    multiple: Mapped[BigDecimal | None]

    # Relationships
    position: Mapped["PositionTable"] = relationship(
        "PositionTable",
        foreign_keys="DailyPositionSnapshotTable.position_id",
        back_populates="snapshots",
    )


Index(
    "ix_daily_position_snapshots_position_date",
    DailyPositionSnapshotTable.position_id,
    DailyPositionSnapshotTable.date,
    unique=True,
)
