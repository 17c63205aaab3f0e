"""
Budgets API endpoints
Monthly spending limits, overall or per category
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_header_user_id
from dompet.validators import validate_amount, validate_period

router = APIRouter()


class BudgetCreate(ClientModel):
    category_id: Optional[str] = None
    amount: Optional[float] = None
    month: Optional[int] = None
    year: Optional[int] = None


class BudgetUpdate(ClientModel):
    amount: Optional[float] = None


def _check_amount(amount: float) -> None:
    valid, message = validate_amount(amount, allow_zero=True)
    if not valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@router.get("/")
async def get_budgets(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's budgets, latest period first"""
    return {"budgets": [fields.BUDGET.to_client(b) for b in db.budgets.list(user_id)]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget: BudgetCreate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Create the budget for a period, or replace the amount of the existing one"""
    require_fields(amount=budget.amount, month=budget.month, year=budget.year)
    _check_amount(budget.amount)
    valid, message = validate_period(budget.month, budget.year)
    if not valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    row = db.upsert_budget(user_id, budget.category_id, budget.amount, budget.month, budget.year)
    return fields.BUDGET.to_client(row)


@router.put("/{budget_id}")
async def update_budget(
    budget_id: str,
    budget: BudgetUpdate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Update budget amount"""
    updates = sparse_columns(budget, fields.BUDGET)
    _check_amount(updates['amount'])

    updated = db.budgets.update(budget_id, updates, user_id=user_id)
    if not updated:
        raise not_found("Budget")
    return fields.BUDGET.to_client(updated)


@router.delete("/{budget_id}")
async def delete_budget(
    budget_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Delete budget"""
    if not db.budgets.delete(budget_id, user_id=user_id):
        raise not_found("Budget")
    return {"message": "Budget deleted successfully"}
