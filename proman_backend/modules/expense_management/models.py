"""Expense management models for ProMan.

Expenses are recurring charges billed per period against an address and,
optionally, one of its residents.
"""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...database import Base, TimestampMixin, enum_values
from ..address_management.models import Address
from ..resident_management.models import Resident

# Common expense types; the column stays open-ended
EXPENSE_TYPES = ("water", "electricity", "gas", "property", "parking")


class ExpenseStatus(str, enum.Enum):
    """Payment lifecycle of an expense."""

    UNPAID = "unpaid"
    PAID = "paid"
    OVERDUE = "overdue"


class Expense(TimestampMixin, Base):
    """A billable charge for one period."""

    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    address_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("addresses.id"), nullable=False
    )
    resident_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("residents.id"), nullable=True
    )
    expense_type: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    period: Mapped[str] = mapped_column(String(20), nullable=False)  # YYYY-MM
    usage: Mapped[Decimal | None] = mapped_column(Numeric(10, 3), nullable=True)
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)
    status: Mapped[ExpenseStatus] = mapped_column(
        Enum(
            ExpenseStatus,
            name="expense_status",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        default=ExpenseStatus.UNPAID,
        nullable=False,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    address: Mapped["Address"] = relationship("Address")
    resident: Mapped["Resident | None"] = relationship("Resident")

    __table_args__ = (
        Index("ix_expenses_address", "address_id"),
        Index("ix_expenses_resident", "resident_id"),
        Index("ix_expenses_type", "expense_type"),
        Index("ix_expenses_status", "status"),
        Index("ix_expenses_period", "period"),
    )

    def __repr__(self) -> str:
        return (
            f"<Expense(id={self.id}, type={self.expense_type}, "
            f"period={self.period}, status={self.status})>"
        )
