"""Expense management business logic services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError, database_operation
from ...core.logging import get_logger
from ...core.pagination import calculate_offset, normalize_pagination_params
from ...core.utils import (
    drop_null_fields,
    format_amount,
    parse_datetime,
    sanitize_string,
    utc_now,
)
from ..address_management.crud import address_crud
from ..commons import PaginatedResponse
from ..resident_management.crud import resident_crud
from . import crud
from .models import Expense, ExpenseStatus
from .schemas import (
    ExpenseBatchCreate,
    ExpenseBatchResult,
    ExpenseCreate,
    ExpensePay,
    ExpensePeriodStats,
    ExpenseResponse,
    ExpenseStats,
    ExpenseTypeStats,
    ExpenseUpdate,
)

logger = get_logger(__name__)


async def _require_expense(db: AsyncSession, expense_id: int) -> Expense:
    expense = await crud.get_expense_by_id(db, expense_id)
    if not expense:
        raise NotFoundError(f"Expense with ID {expense_id} not found")
    return expense


async def _validate_address(db: AsyncSession, address_id: int) -> None:
    if not await address_crud.exists(db, id=address_id):
        raise ValidationError("Address not found", field="addressId", value=address_id)


async def _validate_resident(db: AsyncSession, resident_id: int) -> None:
    if not await resident_crud.exists(db, id=resident_id):
        raise ValidationError(
            "Resident not found", field="residentId", value=resident_id
        )


def _expense_values(data: ExpenseCreate) -> dict:
    values = data.model_dump()
    values["due_date"] = parse_datetime(data.due_date, field="dueDate")
    values["status"] = ExpenseStatus.UNPAID
    return values


@database_operation("Failed to list expenses")
async def list_expenses(
    db: AsyncSession,
    search: str | None = None,
    address_id: int | None = None,
    resident_id: int | None = None,
    expense_type: str | None = None,
    status: ExpenseStatus | None = None,
    period: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> PaginatedResponse[ExpenseResponse]:
    """Get a page of expenses with address and resident summaries.

    ``start_date``/``end_date`` bound the creation time inclusively; a bare
    date as ``end_date`` covers that whole day.
    """
    page, limit = normalize_pagination_params(page, limit)
    filters = crud.expense_filters(
        search=sanitize_string(search),
        address_id=address_id,
        resident_id=resident_id,
        expense_type=expense_type,
        status=status,
        period=period,
        start_date=parse_datetime(start_date, field="startDate"),
        end_date=parse_datetime(end_date, field="endDate", end_of_day=True),
    )
    expenses, total = await crud.get_expenses(
        db, filters, skip=calculate_offset(page, limit), limit=limit
    )
    return PaginatedResponse[ExpenseResponse].from_items(
        items=[ExpenseResponse.model_validate(e) for e in expenses],
        total=total,
        page=page,
        limit=limit,
    )


@database_operation("Failed to load expense statistics")
async def get_expense_stats(
    db: AsyncSession,
    address_id: int | None = None,
    expense_type: str | None = None,
    period: str | None = None,
) -> ExpenseStats:
    """Aggregate expense amounts and counts, overall and per status/type/period."""
    filters = crud.expense_filters(
        address_id=address_id, expense_type=expense_type, period=period
    )

    total_amount, total_count = await crud.get_totals(db, filters)
    by_status = await crud.get_totals_by_status(db, filters)
    by_type = await crud.get_totals_by_type(db, filters)
    by_period = await crud.get_totals_by_period(db, filters)

    def status_totals(status: ExpenseStatus) -> tuple[str, int]:
        amount, count = by_status.get(status, (None, 0))
        return format_amount(amount), count

    paid_amount, paid_count = status_totals(ExpenseStatus.PAID)
    unpaid_amount, unpaid_count = status_totals(ExpenseStatus.UNPAID)
    overdue_amount, overdue_count = status_totals(ExpenseStatus.OVERDUE)

    return ExpenseStats(
        total_amount=format_amount(total_amount),
        paid_amount=paid_amount,
        unpaid_amount=unpaid_amount,
        overdue_amount=overdue_amount,
        total_count=total_count,
        paid_count=paid_count,
        unpaid_count=unpaid_count,
        overdue_count=overdue_count,
        by_type=[
            ExpenseTypeStats(
                expense_type=expense_type, amount=format_amount(amount), count=count
            )
            for expense_type, amount, count in by_type
        ],
        by_period=[
            ExpensePeriodStats(period=period, amount=format_amount(amount), count=count)
            for period, amount, count in by_period
        ],
    )


@database_operation("Failed to load expense")
async def get_expense(db: AsyncSession, expense_id: int) -> Expense:
    """Get an expense by ID with address and resident summaries."""
    return await _require_expense(db, expense_id)


@database_operation("Failed to load expenses")
async def get_expenses_by_address(
    db: AsyncSession,
    address_id: int,
    expense_type: str | None = None,
    status: ExpenseStatus | None = None,
    period: str | None = None,
) -> list[Expense]:
    """Get every expense of an address, newest first."""
    filters = crud.expense_filters(
        address_id=address_id, expense_type=expense_type, status=status, period=period
    )
    return await crud.expense_crud.select(db, filters)


@database_operation("Failed to create expense")
async def create_expense(db: AsyncSession, data: ExpenseCreate) -> Expense:
    """Create an unpaid expense.

    Raises:
        ValidationError: If the address or the given resident does not exist
    """
    await _validate_address(db, data.address_id)
    if data.resident_id is not None:
        await _validate_resident(db, data.resident_id)

    expense_id = await crud.expense_crud.insert(db, _expense_values(data))
    await db.commit()

    logger.info(
        f"Created expense {expense_id}",
        extra={
            "expense_id": expense_id,
            "address_id": data.address_id,
            "expense_type": data.expense_type,
            "period": data.period,
        },
    )
    return await _require_expense(db, expense_id)


@database_operation("Failed to create expenses")
async def create_expenses_batch(
    db: AsyncSession, data: ExpenseBatchCreate
) -> ExpenseBatchResult:
    """Create several unpaid expenses in one unit of work.

    Every distinct address and resident is checked before anything is
    written; nothing is stored unless all rows are.

    Raises:
        ValidationError: If the batch is empty or references a missing
            address or resident
    """
    if not data.expenses:
        raise ValidationError("Expense list cannot be empty")

    for address_id in sorted({e.address_id for e in data.expenses}):
        await _validate_address(db, address_id)
    resident_ids = {e.resident_id for e in data.expenses if e.resident_id is not None}
    for resident_id in sorted(resident_ids):
        await _validate_resident(db, resident_id)

    rows = [_expense_values(expense) for expense in data.expenses]
    ids = await crud.expense_crud.insert_many(db, rows)
    await db.commit()

    logger.info(f"Created {len(ids)} expenses in batch", extra={"count": len(ids)})
    return ExpenseBatchResult(success=True, count=len(ids))


@database_operation("Failed to update expense")
async def update_expense(
    db: AsyncSession, expense_id: int, data: ExpenseUpdate
) -> Expense:
    """Apply the supplied fields to an expense.

    Status may move between unpaid and overdue here; paying goes through
    ``pay_expense`` and a paid expense keeps its status.

    Raises:
        NotFoundError: If the expense does not exist
        ValidationError: If a new address or resident does not exist, or the
            status change is not allowed
    """
    expense = await _require_expense(db, expense_id)

    values = drop_null_fields(
        data.model_dump(exclude_unset=True),
        "address_id",
        "expense_type",
        "amount",
        "period",
        "status",
    )
    if "address_id" in values:
        await _validate_address(db, values["address_id"])
    if values.get("resident_id") is not None:
        await _validate_resident(db, values["resident_id"])

    new_status = values.get("status")
    if new_status is not None and new_status != expense.status:
        if expense.status == ExpenseStatus.PAID:
            raise ValidationError("A paid expense cannot change status")
        if new_status == ExpenseStatus.PAID:
            raise ValidationError("Use the pay action to mark an expense as paid")

    if "due_date" in values:
        values["due_date"] = parse_datetime(values["due_date"], field="dueDate")
    if "paid_date" in values:
        values["paid_date"] = parse_datetime(values["paid_date"], field="paidDate")

    await crud.expense_crud.update(db, expense_id, values)
    await db.commit()

    logger.info(
        f"Updated expense {expense_id}",
        extra={"expense_id": expense_id, "fields": sorted(values)},
    )
    return await _require_expense(db, expense_id)


@database_operation("Failed to pay expense")
async def pay_expense(db: AsyncSession, expense_id: int, data: ExpensePay) -> Expense:
    """Mark an unpaid or overdue expense as paid.

    Raises:
        NotFoundError: If the expense does not exist
        ValidationError: If it is already paid or the paid date is invalid
    """
    expense = await _require_expense(db, expense_id)
    if expense.status == ExpenseStatus.PAID:
        raise ValidationError("Expense has already been paid")

    paid_date = parse_datetime(data.paid_date, field="paidDate") or utc_now()
    await crud.expense_crud.update(
        db, expense_id, {"status": ExpenseStatus.PAID, "paid_date": paid_date}
    )
    await db.commit()

    logger.info(
        f"Expense {expense_id} paid",
        extra={
            "expense_id": expense_id,
            "amount": format_amount(expense.amount),
            "payment_method": data.payment_method,
            "notes": data.notes,
        },
    )
    return await _require_expense(db, expense_id)


@database_operation("Failed to delete expense")
async def delete_expense(db: AsyncSession, expense_id: int) -> None:
    """Permanently delete an expense."""
    await _require_expense(db, expense_id)

    await crud.expense_crud.delete(db, expense_id)
    await db.commit()
    logger.info(f"Deleted expense {expense_id}", extra={"expense_id": expense_id})
