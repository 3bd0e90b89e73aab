from .alchemist import (
    BorrowEventTable,
    DailyPositionSnapshotTable,
    DepositEventTable,
    LiquidationEventTable,
    LooperPositionDataTable,
    LoopEventTable,
    PositionTable,
    ProtocolStatsTable,
    RepayEventTable,
    UserTable,
    WithdrawalEventTable,
)
from .base import Base

__all__ = (
    "Base",
    "BorrowEventTable",
    "DailyPositionSnapshotTable",
    "DepositEventTable",
    "LiquidationEventTable",
    "LoopEventTable",
    "LooperPositionDataTable",
    "PositionTable",
    "ProtocolStatsTable",
    "RepayEventTable",
    "UserTable",
    "WithdrawalEventTable",
)
