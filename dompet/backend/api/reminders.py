"""
Reminders API endpoints
Bill and payment reminders
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_query_user_id
from dompet.validators import validate_date

router = APIRouter()

ReminderType = Literal["bill", "debt", "savings", "recurring", "other"]

UPCOMING_WINDOW_DAYS = 7


class ReminderCreate(ClientModel):
    user_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    due_date: Optional[str] = None
    reminder_date: Optional[str] = None
    type: Optional[ReminderType] = None
    related_id: Optional[str] = None


class ReminderUpdate(ClientModel):
    title: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    due_date: Optional[str] = None
    reminder_date: Optional[str] = None
    type: Optional[ReminderType] = None
    related_id: Optional[str] = None
    is_completed: Optional[bool] = None


def _check_dates(values: dict) -> None:
    for column, label in (('due_date', 'Due date'), ('reminder_date', 'Reminder date')):
        if values.get(column):
            valid, message = validate_date(values[column], field_name=label)
            if not valid:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@router.get("/")
async def get_reminders(
    user_id: str = Depends(get_query_user_id),
    upcoming: bool = Query(False),
    db: FinanceDatabase = Depends(get_db)
):
    """Open reminders, soonest first; upcoming=true limits to the next 7 days"""
    reminders = db.get_open_reminders(user_id, upcoming=upcoming, window_days=UPCOMING_WINDOW_DAYS)
    return {"reminders": [fields.REMINDER.to_client(r) for r in reminders]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_reminder(reminder: ReminderCreate, db: FinanceDatabase = Depends(get_db)):
    """Create new reminder"""
    require_fields(
        userId=reminder.user_id,
        title=reminder.title,
        dueDate=reminder.due_date,
        reminderDate=reminder.reminder_date,
        type=reminder.type,
    )
    values = {
        'user_id': reminder.user_id,
        'title': reminder.title.strip(),
        'description': reminder.description or '',
        'amount': reminder.amount or 0,
        'due_date': reminder.due_date[:10],
        'reminder_date': reminder.reminder_date[:10],
        'type': reminder.type,
        'related_id': reminder.related_id,
        'is_completed': 0,
    }
    _check_dates(values)

    return fields.REMINDER.to_client(db.reminders.add(values))


@router.put("/{reminder_id}")
async def update_reminder(reminder_id: str, reminder: ReminderUpdate, db: FinanceDatabase = Depends(get_db)):
    """Update reminder, including marking it completed"""
    updates = sparse_columns(reminder, fields.REMINDER, nullable=('relatedId',))
    _check_dates(updates)

    updated = db.reminders.update(reminder_id, updates)
    if not updated:
        raise not_found("Reminder")
    return fields.REMINDER.to_client(updated)


@router.delete("/{reminder_id}")
async def delete_reminder(reminder_id: str, db: FinanceDatabase = Depends(get_db)):
    """Delete reminder"""
    if not db.reminders.delete(reminder_id):
        raise not_found("Reminder")
    return {"message": "Reminder deleted successfully"}
