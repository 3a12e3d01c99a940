"""Expense management schemas for ProMan."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from ..address_management.schemas import AddressSummary
from ..commons import CamelModel
from ..resident_management.schemas import ResidentSummary
from .models import EXPENSE_TYPES, ExpenseStatus

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
EXPENSE_TYPE_DESCRIPTION = f"Free text, commonly one of: {', '.join(EXPENSE_TYPES)}"

# ----- Expense Schemas -----


class ExpenseBase(CamelModel):
    """Base expense schema."""

    address_id: int
    resident_id: int | None = None
    expense_type: str = Field(
        ..., min_length=1, max_length=50, description=EXPENSE_TYPE_DESCRIPTION
    )
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)
    period: str = Field(..., pattern=PERIOD_PATTERN, description="YYYY-MM")
    usage: Decimal | None = Field(None, max_digits=10, decimal_places=3)
    unit_price: Decimal | None = Field(None, max_digits=10, decimal_places=4)
    description: str | None = None


class ExpenseCreate(ExpenseBase):
    """Schema for creating an expense; it always starts unpaid."""

    due_date: str | None = None


class ExpenseBatchCreate(CamelModel):
    """Schema for creating several expenses at once."""

    expenses: list[ExpenseCreate]


class ExpenseBatchResult(CamelModel):
    success: bool = True
    count: int


class ExpenseUpdate(CamelModel):
    """Schema for updating an expense. Only supplied fields change."""

    address_id: int | None = None
    resident_id: int | None = None
    expense_type: str | None = Field(
        None, min_length=1, max_length=50, description=EXPENSE_TYPE_DESCRIPTION
    )
    amount: Decimal | None = Field(None, max_digits=10, decimal_places=2)
    period: str | None = Field(None, pattern=PERIOD_PATTERN)
    usage: Decimal | None = Field(None, max_digits=10, decimal_places=3)
    unit_price: Decimal | None = Field(None, max_digits=10, decimal_places=4)
    status: ExpenseStatus | None = None
    due_date: str | None = None
    paid_date: str | None = None
    description: str | None = None


class ExpensePay(CamelModel):
    """Payment details; ``paid_date`` defaults to now."""

    paid_date: str | None = None
    payment_method: str | None = Field(None, max_length=50)
    notes: str | None = None


class ExpenseResponse(ExpenseBase):
    """Schema for expense response with address and resident summaries."""

    id: int
    status: ExpenseStatus
    due_date: datetime | None = None
    paid_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    address: AddressSummary | None = None
    resident: ResidentSummary | None = None


# ----- Statistics Schemas -----


class ExpenseTypeStats(CamelModel):
    expense_type: str
    amount: str
    count: int


class ExpensePeriodStats(CamelModel):
    period: str
    amount: str
    count: int


class ExpenseStats(CamelModel):
    """Aggregate amounts (decimal strings) and counts per status."""

    total_amount: str = "0"
    paid_amount: str = "0"
    unpaid_amount: str = "0"
    overdue_amount: str = "0"
    total_count: int = 0
    paid_count: int = 0
    unpaid_count: int = 0
    overdue_count: int = 0
    by_type: list[ExpenseTypeStats] = Field(default_factory=list)
    by_period: list[ExpensePeriodStats] = Field(default_factory=list)
