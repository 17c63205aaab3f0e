"""
Accounts API endpoints
Manage wallets, bank accounts and cards
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields
from dompet.config import settings
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_query_user_id

router = APIRouter()

AccountType = Literal["cash", "bank", "e-wallet", "credit-card"]


class AccountCreate(ClientModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[AccountType] = None
    balance: float = 0
    currency: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class AccountUpdate(ClientModel):
    name: Optional[str] = None
    type: Optional[AccountType] = None
    balance: Optional[float] = None
    currency: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None


@router.get("/")
async def get_accounts(user_id: str = Depends(get_query_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's active accounts and their total IDR balance"""
    accounts = [fields.ACCOUNT.to_client(row) for row in db.get_active_accounts(user_id)]
    total_balance = sum(a['balance'] for a in accounts if a['currency'] == 'IDR')
    return {"accounts": accounts, "totalBalance": total_balance}


@router.get("/{account_id}")
async def get_account(account_id: str, db: FinanceDatabase = Depends(get_db)):
    """Get specific account by ID, including deactivated ones"""
    account = db.accounts.get(account_id)
    if not account:
        raise not_found("Account")
    return fields.ACCOUNT.to_client(account)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_account(account: AccountCreate, db: FinanceDatabase = Depends(get_db)):
    """Create new account"""
    require_fields(userId=account.user_id, name=account.name, type=account.type)

    row = db.accounts.add({
        'user_id': account.user_id,
        'name': account.name.strip(),
        'type': account.type,
        'balance': account.balance,
        'currency': account.currency or settings.default_currency,
        'color': account.color or '#10b981',
        'icon': account.icon or 'Wallet',
        'is_active': 1,
    })
    return fields.ACCOUNT.to_client(row)


@router.put("/{account_id}")
async def update_account(account_id: str, account: AccountUpdate, db: FinanceDatabase = Depends(get_db)):
    """Update account"""
    updates = sparse_columns(account, fields.ACCOUNT)
    if 'name' in updates:
        updates['name'] = (updates['name'] or '').strip()
        if not updates['name']:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Account name cannot be empty"
            )

    updated = db.accounts.update(account_id, updates)
    if not updated:
        raise not_found("Account")
    return fields.ACCOUNT.to_client(updated)


@router.delete("/{account_id}")
async def delete_account(account_id: str, db: FinanceDatabase = Depends(get_db)):
    """Deactivate account (soft delete)"""
    if not db.deactivate_account(account_id):
        raise not_found("Account")
    return {"message": "Account deleted successfully"}
