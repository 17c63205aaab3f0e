"""
Reports API endpoints
Derived figures over the owner's stored records
"""
from datetime import date
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields, reports
from dompet.database import FinanceDatabase
from dompet.backend.dependencies import get_db, get_header_user_id
from dompet.validators import validate_period

router = APIRouter()


def _period(month: Optional[int], year: Optional[int]) -> Tuple[int, int]:
    """Requested month/year, defaulting to the current one."""
    current = date.today()
    if month is None:
        month = current.month
    if year is None:
        year = current.year
    valid, message = validate_period(month, year)
    if not valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return month, year


def _transactions(db: FinanceDatabase, user_id: str):
    return [fields.TRANSACTION.to_client(t) for t in db.transactions.list(user_id)]


@router.get("/monthly-summary")
async def monthly_summary(
    month: Optional[int] = None,
    year: Optional[int] = None,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Income, expense and balance for a month"""
    month, year = _period(month, year)
    return {"month": month, "year": year, **reports.monthly_stats(_transactions(db, user_id), month, year)}


@router.get("/budget-status")
async def budget_status(
    month: Optional[int] = None,
    year: Optional[int] = None,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Usage of the overall monthly budget"""
    month, year = _period(month, year)
    budgets = [fields.BUDGET.to_client(b) for b in db.budgets.list(user_id)]
    return reports.budget_status(_transactions(db, user_id), budgets, month, year)


@router.get("/category-breakdown")
async def category_breakdown(
    month: Optional[int] = None,
    year: Optional[int] = None,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Expense per category for a month, largest first"""
    month, year = _period(month, year)
    categories = [fields.CATEGORY.to_client(c) for c in db.categories.list(user_id)]
    breakdown = reports.category_breakdown(_transactions(db, user_id), categories, month, year)
    return {"month": month, "year": year, "categories": breakdown}


@router.get("/net-worth")
async def net_worth(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Calculate total net worth"""
    accounts = [fields.ACCOUNT.to_client(a) for a in db.get_active_accounts(user_id)]
    investments = [fields.INVESTMENT.to_client(i) for i in db.investments.list(user_id)]
    debts = [fields.DEBT.to_client(d) for d in db.debts.list(user_id)]
    return reports.net_worth(accounts, investments, debts)


@router.get("/debt-summary")
async def debt_summary(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Outstanding receivables and payables"""
    return reports.debt_summary([fields.DEBT.to_client(d) for d in db.debts.list(user_id)])


@router.get("/savings-summary")
async def savings_summary(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Progress over active savings goals"""
    goals = [fields.SAVINGS_GOAL.to_client(g) for g in db.savings_goals.list(user_id)]
    return reports.savings_summary(goals)


@router.get("/recurring-summary")
async def recurring_summary(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Estimated monthly cash flow of active recurring transactions"""
    recurring = [fields.RECURRING_TRANSACTION.to_client(r) for r in db.recurring.list(user_id)]
    return reports.recurring_summary(recurring)
