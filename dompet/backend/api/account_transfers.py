"""
Account transfers API endpoints
Move money between two of a user's accounts
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, not_found
from dompet.backend.dependencies import get_db, get_query_user_id
from dompet.validators import validate_date

logger = logging.getLogger(__name__)

router = APIRouter()


class TransferCreate(ClientModel):
    user_id: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    date: Optional[str] = None


@router.get("/")
async def get_transfers(
    user_id: str = Depends(get_query_user_id),
    account_id: Optional[str] = Query(None, alias="accountId"),
    db: FinanceDatabase = Depends(get_db)
):
    """Get the owner's transfers, newest first"""
    transfers = db.get_transfers(user_id, account_id=account_id)
    return {"transfers": [fields.ACCOUNT_TRANSFER.to_client(t) for t in transfers]}


@router.get("/{transfer_id}")
async def get_transfer(transfer_id: str, db: FinanceDatabase = Depends(get_db)):
    """Get specific transfer by ID"""
    transfer = db.transfers.get(transfer_id)
    if not transfer:
        raise not_found("Transfer")
    return fields.ACCOUNT_TRANSFER.to_client(transfer)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_transfer(transfer: TransferCreate, db: FinanceDatabase = Depends(get_db)):
    """
    Create a transfer.

    Debits the source account, credits the destination and records the
    transfer atomically. Both accounts must be active and owned by userId.
    """
    require_fields(
        userId=transfer.user_id,
        fromAccountId=transfer.from_account_id,
        toAccountId=transfer.to_account_id,
        amount=transfer.amount,
    )
    if transfer.date:
        valid, message = validate_date(transfer.date)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    try:
        row = db.create_transfer(
            user_id=transfer.user_id,
            from_account_id=transfer.from_account_id,
            to_account_id=transfer.to_account_id,
            amount=transfer.amount,
            description=transfer.description,
            transfer_date=transfer.date,
        )
    except ValueError as e:
        logger.info(f"Rejected transfer for {transfer.user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return fields.ACCOUNT_TRANSFER.to_client(row)
