"""
Debts API endpoints
Money lent (receivable) and borrowed (payable)
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_header_user_id
from dompet.validators import validate_amount, validate_date

router = APIRouter()

DebtType = Literal["receivable", "payable"]


class DebtCreate(ClientModel):
    type: Optional[DebtType] = None
    person_name: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    due_date: Optional[str] = None


class DebtUpdate(ClientModel):
    # Paid state only changes through POST /{id}/pay
    type: Optional[DebtType] = None
    person_name: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    due_date: Optional[str] = None


def _check_debt(amount: Optional[float], due_date: Optional[str]) -> None:
    if amount is not None:
        valid, message = validate_amount(amount)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    if due_date:
        valid, message = validate_date(due_date)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@router.get("/")
async def get_debts(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's debts, newest first"""
    return {"debts": [fields.DEBT.to_client(d) for d in db.debts.list(user_id)]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_debt(
    debt: DebtCreate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Create new debt"""
    require_fields(type=debt.type, personName=debt.person_name, amount=debt.amount)
    _check_debt(debt.amount, debt.due_date)

    row = db.debts.add({
        'user_id': user_id,
        'type': debt.type,
        'person_name': debt.person_name.strip(),
        'amount': debt.amount,
        'description': debt.description or '',
        'due_date': debt.due_date[:10] if debt.due_date else None,
        'is_paid': 0,
    })
    return fields.DEBT.to_client(row)


@router.put("/{debt_id}")
async def update_debt(
    debt_id: str,
    debt: DebtUpdate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Update the fields present in the request"""
    updates = sparse_columns(debt, fields.DEBT, nullable=('dueDate',))
    _check_debt(updates.get('amount'), updates.get('due_date'))

    updated = db.debts.update(debt_id, updates, user_id=user_id)
    if not updated:
        raise not_found("Debt")
    return fields.DEBT.to_client(updated)


@router.post("/{debt_id}/pay")
async def pay_debt(
    debt_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Mark debt as paid today"""
    debt = db.mark_debt_paid(debt_id, user_id)
    if not debt:
        raise not_found("Debt")
    return fields.DEBT.to_client(debt)


@router.delete("/{debt_id}")
async def delete_debt(
    debt_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Delete debt"""
    if not db.debts.delete(debt_id, user_id=user_id):
        raise not_found("Debt")
    return {"message": "Debt deleted successfully"}
