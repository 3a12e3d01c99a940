"""CRUD operations for expense management module."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ColumnElement, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from .models import Expense, ExpenseStatus

# Number of most recent periods reported in statistics
STATS_PERIOD_LIMIT = 12


class ExpenseCRUD(BaseCRUD[Expense]):
    search_fields = ["description"]
    default_relationships = ["address", "resident"]


expense_crud = ExpenseCRUD(Expense)


def expense_filters(
    search: str | None = None,
    address_id: int | None = None,
    resident_id: int | None = None,
    expense_type: str | None = None,
    status: ExpenseStatus | None = None,
    period: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[ColumnElement[bool]]:
    """Build expense predicates; date bounds apply to ``created_at`` inclusively."""
    filters: list[ColumnElement[bool]] = []
    search_clause = expense_crud.search_condition(search)
    if search_clause is not None:
        filters.append(search_clause)
    if address_id is not None:
        filters.append(Expense.address_id == address_id)
    if resident_id is not None:
        filters.append(Expense.resident_id == resident_id)
    if expense_type:
        filters.append(Expense.expense_type == expense_type)
    if status is not None:
        filters.append(Expense.status == status)
    if period:
        filters.append(Expense.period == period)
    if start_date is not None:
        filters.append(Expense.created_at >= start_date)
    if end_date is not None:
        filters.append(Expense.created_at <= end_date)
    return filters


async def get_expenses(
    db: AsyncSession,
    filters: list[ColumnElement[bool]],
    skip: int = 0,
    limit: int | None = 10,
) -> tuple[list[Expense], int]:
    """Get a page of expenses with address and resident, newest first."""
    items = await expense_crud.select(db, filters, limit=limit, offset=skip)
    total = await expense_crud.count(db, filters)
    return items, total


async def get_expense_by_id(db: AsyncSession, expense_id: int) -> Expense | None:
    """Get an expense by ID with its address and resident loaded."""
    return await expense_crud.get(db, expense_id)


# ----- Statistics -----


async def get_totals(
    db: AsyncSession, filters: list[ColumnElement[bool]]
) -> tuple[Decimal | None, int]:
    """Sum of amounts and row count over the filtered expenses."""
    query = select(func.sum(Expense.amount), func.count(Expense.id))
    if filters:
        query = query.where(and_(*filters))
    row = (await db.execute(query)).one()
    return row[0], row[1] or 0


async def get_totals_by_status(
    db: AsyncSession, filters: list[ColumnElement[bool]]
) -> dict[ExpenseStatus, tuple[Decimal | None, int]]:
    """Sum and count per status; statuses without rows are absent."""
    query = select(
        Expense.status, func.sum(Expense.amount), func.count(Expense.id)
    ).group_by(Expense.status)
    if filters:
        query = query.where(and_(*filters))
    result = await db.execute(query)
    return {
        ExpenseStatus(status): (amount, count) for status, amount, count in result.all()
    }


async def get_totals_by_type(
    db: AsyncSession, filters: list[ColumnElement[bool]]
) -> list[tuple[str, Decimal | None, int]]:
    """Sum and count per expense type, by type name."""
    query = (
        select(Expense.expense_type, func.sum(Expense.amount), func.count(Expense.id))
        .group_by(Expense.expense_type)
        .order_by(Expense.expense_type)
    )
    if filters:
        query = query.where(and_(*filters))
    result = await db.execute(query)
    return [tuple(row) for row in result.all()]


async def get_totals_by_period(
    db: AsyncSession,
    filters: list[ColumnElement[bool]],
    limit: int = STATS_PERIOD_LIMIT,
) -> list[tuple[str, Decimal | None, int]]:
    """Sum and count for the most recent periods, newest first."""
    query = (
        select(Expense.period, func.sum(Expense.amount), func.count(Expense.id))
        .group_by(Expense.period)
        .order_by(Expense.period.desc())
        .limit(limit)
    )
    if filters:
        query = query.where(and_(*filters))
    result = await db.execute(query)
    return [tuple(row) for row in result.all()]
