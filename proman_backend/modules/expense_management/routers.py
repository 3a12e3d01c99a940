"""Expense management API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..commons import BaseResponse, PaginatedResponse, ok
from . import services
from .models import ExpenseStatus
from .schemas import (
    ExpenseBatchCreate,
    ExpenseBatchResult,
    ExpenseCreate,
    ExpensePay,
    ExpenseResponse,
    ExpenseStats,
    ExpenseUpdate,
)

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=BaseResponse[PaginatedResponse[ExpenseResponse]])
async def list_expenses(
    db: DB,
    search: str | None = Query(None, description="Substring of the description"),
    address_id: int | None = Query(None, alias="addressId"),
    resident_id: int | None = Query(None, alias="residentId"),
    expense_type: str | None = Query(None, alias="expenseType"),
    status: ExpenseStatus | None = Query(None),
    period: str | None = Query(None, description="YYYY-MM"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    page: int = Query(1),
    limit: int = Query(10),
):
    """Get expenses with pagination and filtering."""
    result = await services.list_expenses(
        db,
        search=search,
        address_id=address_id,
        resident_id=resident_id,
        expense_type=expense_type,
        status=status,
        period=period,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return ok(result)


@router.get("/stats", response_model=BaseResponse[ExpenseStats])
async def get_expense_stats(
    db: DB,
    address_id: int | None = Query(None, alias="addressId"),
    expense_type: str | None = Query(None, alias="expenseType"),
    period: str | None = Query(None),
):
    """Get expense statistics."""
    stats = await services.get_expense_stats(
        db, address_id=address_id, expense_type=expense_type, period=period
    )
    return ok(stats)


@router.get(
    "/by-address/{address_id}", response_model=BaseResponse[list[ExpenseResponse]]
)
async def get_expenses_by_address(
    address_id: int,
    db: DB,
    expense_type: str | None = Query(None, alias="expenseType"),
    status: ExpenseStatus | None = Query(None),
    period: str | None = Query(None),
):
    """Get the expenses of an address."""
    expenses = await services.get_expenses_by_address(
        db, address_id, expense_type=expense_type, status=status, period=period
    )
    return ok([ExpenseResponse.model_validate(e) for e in expenses])


@router.get("/{expense_id}", response_model=BaseResponse[ExpenseResponse])
async def get_expense(expense_id: int, db: DB):
    """Get an expense by ID."""
    expense = await services.get_expense(db, expense_id)
    return ok(ExpenseResponse.model_validate(expense))


@router.post("", response_model=BaseResponse[ExpenseResponse])
async def create_expense(data: ExpenseCreate, db: DB):
    """Create a new expense."""
    expense = await services.create_expense(db, data)
    return ok(ExpenseResponse.model_validate(expense), msg="Expense created successfully")


@router.post("/batch", response_model=BaseResponse[ExpenseBatchResult])
async def create_expenses_batch(data: ExpenseBatchCreate, db: DB):
    """Create several expenses at once."""
    result = await services.create_expenses_batch(db, data)
    return ok(result, msg="Expenses created successfully")


@router.put("/{expense_id}", response_model=BaseResponse[ExpenseResponse])
async def update_expense(expense_id: int, data: ExpenseUpdate, db: DB):
    """Update an expense."""
    expense = await services.update_expense(db, expense_id, data)
    return ok(ExpenseResponse.model_validate(expense), msg="Expense updated successfully")


@router.put("/{expense_id}/pay", response_model=BaseResponse[ExpenseResponse])
async def pay_expense(expense_id: int, db: DB, data: ExpensePay | None = None):
    """Mark an expense as paid."""
    expense = await services.pay_expense(db, expense_id, data or ExpensePay())
    return ok(ExpenseResponse.model_validate(expense), msg="Expense paid successfully")


@router.delete("/{expense_id}", response_model=BaseResponse[None])
async def delete_expense(expense_id: int, db: DB):
    """Delete an expense permanently."""
    await services.delete_expense(db, expense_id)
    return ok(msg="Expense deleted successfully")
