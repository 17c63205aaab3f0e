"""
Transactions API endpoints
Income and expense records
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_header_user_id
from dompet.validators import validate_amount, validate_date

router = APIRouter()

TransactionType = Literal["income", "expense"]


class TransactionCreate(ClientModel):
    category_id: Optional[str] = None
    type: Optional[TransactionType] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    date: Optional[str] = None


class TransactionUpdate(ClientModel):
    category_id: Optional[str] = None
    type: Optional[TransactionType] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    date: Optional[str] = None


def _check_amount_and_date(amount: Optional[float], date: Optional[str]) -> None:
    if amount is not None:
        valid, message = validate_amount(amount)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    if date is not None:
        valid, message = validate_date(date)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@router.get("/")
async def get_transactions(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's transactions, newest first"""
    transactions = db.transactions.list(user_id)
    return {"transactions": [fields.TRANSACTION.to_client(t) for t in transactions]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Create new transaction"""
    require_fields(
        categoryId=transaction.category_id,
        type=transaction.type,
        amount=transaction.amount,
        date=transaction.date,
    )
    _check_amount_and_date(transaction.amount, transaction.date)

    row = db.transactions.add({
        'user_id': user_id,
        'category_id': transaction.category_id,
        'type': transaction.type,
        'amount': transaction.amount,
        'description': transaction.description or '',
        'date': transaction.date[:10],
    })
    return fields.TRANSACTION.to_client(row)


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: str,
    transaction: TransactionUpdate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Update the fields present in the request"""
    updates = sparse_columns(transaction, fields.TRANSACTION)
    _check_amount_and_date(updates.get('amount'), updates.get('date'))
    if 'date' in updates:
        updates['date'] = updates['date'][:10]

    updated = db.transactions.update(transaction_id, updates, user_id=user_id)
    if not updated:
        raise not_found("Transaction")
    return fields.TRANSACTION.to_client(updated)


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Delete transaction"""
    if not db.transactions.delete(transaction_id, user_id=user_id):
        raise not_found("Transaction")
    return {"message": "Transaction deleted successfully"}
