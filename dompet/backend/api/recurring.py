"""
Recurring transactions API endpoints
Templates for income and expenses that repeat on a schedule
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_header_user_id
from dompet.validators import validate_amount, validate_date, validate_date_range

router = APIRouter()

Frequency = Literal["daily", "weekly", "monthly", "yearly"]


class RecurringCreate(ClientModel):
    category_id: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    frequency: Optional[Frequency] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class RecurringUpdate(ClientModel):
    category_id: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    frequency: Optional[Frequency] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_active: Optional[bool] = None
    last_processed: Optional[str] = None


def _check_schedule(values: dict, current: Optional[dict] = None) -> None:
    if values.get('amount') is not None:
        valid, message = validate_amount(values['amount'])
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    for column, label in (('start_date', 'Start date'), ('end_date', 'End date'), ('last_processed', 'Last processed')):
        if values.get(column):
            valid, message = validate_date(values[column], field_name=label)
            if not valid:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    merged = {**(current or {}), **values}
    if merged.get('start_date') and merged.get('end_date'):
        valid, message = validate_date_range(merged['start_date'][:10], merged['end_date'][:10])
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@router.get("/")
async def get_recurring_transactions(
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Get the owner's recurring transactions, newest first"""
    recurring = db.recurring.list(user_id)
    return {"recurringTransactions": [fields.RECURRING_TRANSACTION.to_client(r) for r in recurring]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_recurring_transaction(
    recurring: RecurringCreate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Create new recurring transaction"""
    require_fields(
        categoryId=recurring.category_id,
        type=recurring.type,
        amount=recurring.amount,
        frequency=recurring.frequency,
        startDate=recurring.start_date,
    )
    values = {
        'user_id': user_id,
        'category_id': recurring.category_id,
        'type': recurring.type,
        'amount': recurring.amount,
        'description': recurring.description or '',
        'frequency': recurring.frequency,
        'start_date': recurring.start_date[:10],
        'end_date': recurring.end_date[:10] if recurring.end_date else None,
        'is_active': 1,
    }
    _check_schedule(values)

    return fields.RECURRING_TRANSACTION.to_client(db.recurring.add(values))


@router.put("/{recurring_id}")
async def update_recurring_transaction(
    recurring_id: str,
    recurring: RecurringUpdate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Update the fields present in the request, e.g. pause with isActive=false"""
    updates = sparse_columns(recurring, fields.RECURRING_TRANSACTION, nullable=('endDate', 'lastProcessed'))
    current = db.recurring.get(recurring_id, user_id=user_id)
    if not current:
        raise not_found("Recurring transaction")
    _check_schedule(updates, current)

    updated = db.recurring.update(recurring_id, updates, user_id=user_id)
    if not updated:
        raise not_found("Recurring transaction")
    return fields.RECURRING_TRANSACTION.to_client(updated)


@router.delete("/{recurring_id}")
async def delete_recurring_transaction(
    recurring_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Delete recurring transaction"""
    if not db.recurring.delete(recurring_id, user_id=user_id):
        raise not_found("Recurring transaction")
    return {"message": "Recurring transaction deleted successfully"}
