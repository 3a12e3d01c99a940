"""Initial schema for ProMan Property Management System

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for:
- Address hierarchy (addresses)
- Residents (residents)
- Expenses (expenses)
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # =====================
    # ADDRESSES (self-referencing tree)
    # =====================
    op.create_table(
        "addresses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("code", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("area", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_id"], ["addresses.id"]),
    )
    op.create_index("ix_addresses_parent", "addresses", ["parent_id"])
    op.create_index("ix_addresses_type", "addresses", ["type"])
    op.create_index("ix_addresses_is_active", "addresses", ["is_active"])

    # =====================
    # RESIDENTS (FK to addresses)
    # =====================
    op.create_table(
        "residents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("id_card", sa.String(18), nullable=True),
        sa.Column("address_id", sa.Integer(), nullable=False),
        sa.Column("resident_type", sa.String(50), nullable=False, server_default="owner"),
        sa.Column("move_in_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("move_out_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["address_id"], ["addresses.id"]),
    )
    op.create_index("ix_residents_address", "residents", ["address_id"])
    op.create_index("ix_residents_phone", "residents", ["phone"])
    op.create_index("ix_residents_is_active", "residents", ["is_active"])

    # =====================
    # EXPENSES (FK to addresses, residents)
    # =====================
    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("address_id", sa.Integer(), nullable=False),
        sa.Column("resident_id", sa.Integer(), nullable=True),
        sa.Column("expense_type", sa.String(50), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("period", sa.String(20), nullable=False),
        sa.Column("usage", sa.Numeric(10, 3), nullable=True),
        sa.Column("unit_price", sa.Numeric(10, 4), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="unpaid"),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["address_id"], ["addresses.id"]),
        sa.ForeignKeyConstraint(["resident_id"], ["residents.id"]),
    )
    op.create_index("ix_expenses_address", "expenses", ["address_id"])
    op.create_index("ix_expenses_resident", "expenses", ["resident_id"])
    op.create_index("ix_expenses_type", "expenses", ["expense_type"])
    op.create_index("ix_expenses_status", "expenses", ["status"])
    op.create_index("ix_expenses_period", "expenses", ["period"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("expenses")
    op.drop_table("residents")
    op.drop_table("addresses")
