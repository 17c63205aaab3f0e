"""
Savings goals API endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields, reports
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_header_user_id
from dompet.validators import validate_amount, validate_date

router = APIRouter()


class SavingsGoalCreate(ClientModel):
    name: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    deadline: Optional[str] = None
    description: Optional[str] = None


class SavingsGoalUpdate(ClientModel):
    name: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    deadline: Optional[str] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None


def _check_goal(values: dict) -> None:
    if values.get('target_amount') is not None:
        valid, message = validate_amount(values['target_amount'], field_name="Target amount")
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    if values.get('current_amount') is not None:
        valid, message = validate_amount(values['current_amount'], field_name="Current amount", allow_zero=True)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    if values.get('deadline'):
        valid, message = validate_date(values['deadline'], field_name="Deadline")
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _with_progress(row: dict) -> dict:
    goal = fields.SAVINGS_GOAL.to_client(row)
    progress = reports.savings_progress(goal)
    goal['percentage'] = progress['percentage']
    goal['remaining'] = progress['remaining']
    return goal


@router.get("/")
async def get_savings_goals(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's savings goals with progress"""
    return {"savingsGoals": [_with_progress(g) for g in db.savings_goals.list(user_id)]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_savings_goal(
    goal: SavingsGoalCreate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Create new savings goal"""
    require_fields(name=goal.name, targetAmount=goal.target_amount)
    values = {
        'user_id': user_id,
        'name': goal.name.strip(),
        'target_amount': goal.target_amount,
        'current_amount': goal.current_amount or 0,
        'deadline': goal.deadline[:10] if goal.deadline else None,
        'description': goal.description or '',
        'is_completed': 0,
    }
    _check_goal(values)

    return _with_progress(db.savings_goals.add(values))


@router.put("/{goal_id}")
async def update_savings_goal(
    goal_id: str,
    goal: SavingsGoalUpdate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Update the fields present in the request, e.g. a new currentAmount"""
    updates = sparse_columns(goal, fields.SAVINGS_GOAL, nullable=('deadline',))
    _check_goal(updates)

    updated = db.savings_goals.update(goal_id, updates, user_id=user_id)
    if not updated:
        raise not_found("Savings goal")
    return _with_progress(updated)


@router.delete("/{goal_id}")
async def delete_savings_goal(
    goal_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Delete savings goal"""
    if not db.savings_goals.delete(goal_id, user_id=user_id):
        raise not_found("Savings goal")
    return {"message": "Savings goal deleted successfully"}
