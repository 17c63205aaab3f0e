"""
Split bills API endpoints
Shared expenses divided between participants
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_query_user_id
from dompet.validators import validate_amount

router = APIRouter()


class ParticipantCreate(BaseModel):
    name: str
    amount: float


class SplitBillCreate(ClientModel):
    user_id: Optional[str] = None
    transaction_id: Optional[str] = None
    title: Optional[str] = None
    total_amount: Optional[float] = None
    participants: Optional[List[ParticipantCreate]] = None


class SplitBillUpdate(ClientModel):
    title: Optional[str] = None
    total_amount: Optional[float] = None
    transaction_id: Optional[str] = None


class ParticipantPayment(ClientModel):
    participant_id: Optional[str] = None


def split_bill_to_client(bill: dict) -> dict:
    result = fields.SPLIT_BILL.to_client(bill)
    result['participants'] = [
        fields.SPLIT_BILL_PARTICIPANT.to_client(p) for p in bill.get('participants', [])
    ]
    return result


@router.get("/")
async def get_split_bills(user_id: str = Depends(get_query_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's split bills with their participants"""
    return {"splitBills": [split_bill_to_client(b) for b in db.get_split_bills(user_id)]}


@router.get("/{bill_id}")
async def get_split_bill(bill_id: str, db: FinanceDatabase = Depends(get_db)):
    """Get specific split bill by ID"""
    bill = db.get_split_bill(bill_id)
    if not bill:
        raise not_found("Split bill")
    return split_bill_to_client(bill)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_split_bill(bill: SplitBillCreate, db: FinanceDatabase = Depends(get_db)):
    """Create a bill together with its participants"""
    require_fields(
        userId=bill.user_id,
        title=bill.title,
        totalAmount=bill.total_amount,
        participants=bill.participants,
    )
    valid, message = validate_amount(bill.total_amount, field_name="Total amount")
    if not valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    for participant in bill.participants:
        if not participant.name.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Participant name is required")
        valid, message = validate_amount(participant.amount, field_name="Participant amount", allow_zero=True)
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    created = db.add_split_bill(
        user_id=bill.user_id,
        title=bill.title.strip(),
        total_amount=bill.total_amount,
        participants=[{'name': p.name.strip(), 'amount': p.amount} for p in bill.participants],
        transaction_id=bill.transaction_id,
    )
    return split_bill_to_client(created)


@router.put("/{bill_id}")
async def update_split_bill(bill_id: str, bill: SplitBillUpdate, db: FinanceDatabase = Depends(get_db)):
    """Update bill title or total; participants are not edited here"""
    updates = sparse_columns(bill, fields.SPLIT_BILL, nullable=('transactionId',))
    if updates.get('total_amount') is not None:
        valid, message = validate_amount(updates['total_amount'], field_name="Total amount")
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    if not db.split_bills.update(bill_id, updates):
        raise not_found("Split bill")
    return split_bill_to_client(db.get_split_bill(bill_id))


@router.post("/{bill_id}/pay")
async def pay_participant(bill_id: str, payment: ParticipantPayment, db: FinanceDatabase = Depends(get_db)):
    """Mark one participant's share as paid"""
    require_fields(participantId=payment.participant_id)

    participant = db.pay_split_bill_participant(bill_id, payment.participant_id)
    if not participant:
        raise not_found("Participant")
    return fields.SPLIT_BILL_PARTICIPANT.to_client(participant)


@router.delete("/{bill_id}")
async def delete_split_bill(bill_id: str, db: FinanceDatabase = Depends(get_db)):
    """Delete bill and its participants"""
    if not db.delete_split_bill(bill_id):
        raise not_found("Split bill")
    return {"message": "Split bill deleted successfully"}
