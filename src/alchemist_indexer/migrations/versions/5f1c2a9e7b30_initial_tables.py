"""Initial tables

Revision ID: 5f1c2a9e7b30
Revises:
Create Date: 2026-10-16 09:12:41.204117

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

import alchemist_indexer.database.models

# revision identifiers, used by Alembic.
revision: str = "5f1c2a9e7b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _big_integer() -> sa.types.TypeEngine:
    return alchemist_indexer.database.models.base.IntMappedToString(length=79)


def _big_decimal() -> sa.types.TypeEngine:
    return alchemist_indexer.database.models.base.DecimalMappedToString()


def _event_columns() -> list[sa.Column]:
    return [
        sa.Column("timestamp", sa.Integer(), nullable=False),
        sa.Column("tx_hash", sa.String(length=66), nullable=False),
        sa.Column("block_number", sa.Integer(), nullable=False),
    ]


def _create_position_index(table_name: str) -> None:
    with op.batch_alter_table(table_name, schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f(f"ix_{table_name}_position_id"), ["position_id"], unique=False
        )


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "users",
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("total_positions", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("address"),
    )
    op.create_table(
        "protocol_stats",
        sa.Column("id", sa.String(length=78), nullable=False),
        sa.Column("total_positions", sa.Integer(), nullable=False),
        sa.Column("total_looped_positions", sa.Integer(), nullable=False),
        sa.Column("total_collateral", _big_integer(), nullable=False),
        sa.Column("total_debt", _big_integer(), nullable=False),
        sa.Column("total_loop_volume", _big_integer(), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "positions",
        sa.Column("id", sa.String(length=78), nullable=False),
        sa.Column("token_id", _big_integer(), nullable=False),
        sa.Column("owner_id", sa.String(length=42), nullable=True),
        sa.Column("dialect", sa.Text(), nullable=True),
        sa.Column("collateral", _big_integer(), nullable=False),
        sa.Column("debt", _big_integer(), nullable=False),
        sa.Column("is_looped_position", sa.Boolean(), nullable=False),
        sa.Column("looper_data_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["users.address"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("positions", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_positions_owner_id"), ["owner_id"], unique=False)

    op.create_table(
        "looper_position_data",
        sa.Column("id", sa.String(length=78), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("initial_deposit", _big_integer(), nullable=False),
        sa.Column("initial_collateral", _big_integer(), nullable=False),
        sa.Column("initial_debt", _big_integer(), nullable=False),
        sa.Column("initial_leverage", _big_decimal(), nullable=False),
        sa.Column("total_loops", sa.Integer(), nullable=False),
        sa.Column("total_minted", _big_integer(), nullable=False),
        sa.Column("total_swapped", _big_integer(), nullable=False),
        sa.Column("average_swap_rate", _big_decimal(), nullable=False),
        sa.Column("current_multiple", _big_decimal(), nullable=False),
        sa.Column("peak_multiple", _big_decimal(), nullable=False),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("created_tx_hash", sa.String(length=66), nullable=False),
        sa.Column("last_loop_at", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("looper_position_data")

    op.create_table(
        "deposit_events",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("amount", _big_integer(), nullable=False),
        sa.Column("shares", _big_integer(), nullable=False),
        sa.Column("depositor", sa.String(length=42), nullable=False),
        sa.Column("is_loop_deposit", sa.Boolean(), nullable=False),
        *_event_columns(),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("deposit_events")

    op.create_table(
        "borrow_events",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("amount", _big_integer(), nullable=False),
        sa.Column("recipient", sa.String(length=42), nullable=False),
        sa.Column("is_loop_borrow", sa.Boolean(), nullable=False),
        *_event_columns(),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("borrow_events")

    op.create_table(
        "repay_events",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("amount", _big_integer(), nullable=False),
        sa.Column("credit", _big_integer(), nullable=True),
        sa.Column("payer", sa.String(length=42), nullable=False),
        sa.Column("is_force_repay", sa.Boolean(), nullable=False),
        *_event_columns(),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("repay_events")

    op.create_table(
        "withdrawal_events",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("amount", _big_integer(), nullable=False),
        sa.Column("shares", _big_integer(), nullable=False),
        sa.Column("recipient", sa.String(length=42), nullable=False),
        *_event_columns(),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("withdrawal_events")

    op.create_table(
        "liquidation_events",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("collateral_liquidated", _big_integer(), nullable=False),
        sa.Column("debt_repaid", _big_integer(), nullable=False),
        sa.Column("liquidator", sa.String(length=42), nullable=False),
        sa.Column("fee_in_yield", _big_integer(), nullable=True),
        sa.Column("fee_in_underlying", _big_integer(), nullable=True),
        *_event_columns(),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("liquidation_events")

    op.create_table(
        "loop_events",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("looper_data_id", sa.String(length=78), nullable=False),
        sa.Column("loop_number", sa.Integer(), nullable=False),
        sa.Column("borrow_amount", _big_integer(), nullable=False),
        sa.Column("usdc_received", _big_integer(), nullable=False),
        sa.Column("shares_deposited", _big_integer(), nullable=False),
        sa.Column("collateral_after", _big_integer(), nullable=False),
        sa.Column("debt_after", _big_integer(), nullable=False),
        sa.Column("ltv_after", _big_decimal(), nullable=False),
        *_event_columns(),
        sa.ForeignKeyConstraint(
            ["looper_data_id"],
            ["looper_position_data.id"],
        ),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("loop_events")
    with op.batch_alter_table("loop_events", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_loop_events_looper_data_id"), ["looper_data_id"], unique=False
        )

    op.create_table(
        "daily_position_snapshots",
        sa.Column("id", sa.String(length=96), nullable=False),
        sa.Column("position_id", sa.String(length=78), nullable=False),
        sa.Column("date", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.Integer(), nullable=False),
        sa.Column("collateral", _big_integer(), nullable=False),
        sa.Column("debt", _big_integer(), nullable=False),
        sa.Column("leverage", _big_decimal(), nullable=False),
        sa.Column("multiple", _big_decimal(), nullable=True),
        sa.ForeignKeyConstraint(
            ["position_id"],
            ["positions.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _create_position_index("daily_position_snapshots")
    with op.batch_alter_table("daily_position_snapshots", schema=None) as batch_op:
        batch_op.create_index(
            "ix_daily_position_snapshots_position_date",
            ["position_id", "date"],
            unique=True,
        )


def downgrade() -> None:
    """Downgrade schema."""
    msg = "Downgrade is not supported for this migration."
    raise NotImplementedError(msg)
