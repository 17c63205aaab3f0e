"""
Investments API endpoints
Stock, fund, crypto and other positions with unrealised gain/loss
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields, reports
from dompet.config import settings
from dompet.database import FinanceDatabase, today
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_query_user_id
from dompet.validators import validate_amount, validate_date

router = APIRouter()

InvestmentType = Literal["stocks", "crypto", "mutual-funds", "gold", "bonds", "other"]


class InvestmentCreate(ClientModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[InvestmentType] = None
    symbol: Optional[str] = None
    quantity: Optional[float] = None
    buy_price: Optional[float] = None
    current_price: Optional[float] = None
    currency: Optional[str] = None
    purchase_date: Optional[str] = None
    notes: Optional[str] = None


class InvestmentUpdate(ClientModel):
    name: Optional[str] = None
    type: Optional[InvestmentType] = None
    symbol: Optional[str] = None
    quantity: Optional[float] = None
    buy_price: Optional[float] = None
    current_price: Optional[float] = None
    currency: Optional[str] = None
    purchase_date: Optional[str] = None
    notes: Optional[str] = None


def _check_numbers(values: dict) -> None:
    for column, label in (('quantity', 'Quantity'), ('buy_price', 'Buy price'), ('current_price', 'Current price')):
        if values.get(column) is not None:
            valid, message = validate_amount(values[column], field_name=label, allow_zero=True)
            if not valid:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    if values.get('purchase_date'):
        valid, message = validate_date(values['purchase_date'])
        if not valid:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _with_gain_loss(row: dict) -> dict:
    investment = fields.INVESTMENT.to_client(row)
    investment.update(reports.investment_gain_loss(investment))
    return investment


@router.get("/")
async def get_investments(user_id: str = Depends(get_query_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's positions with portfolio totals"""
    investments = [_with_gain_loss(row) for row in db.investments.list(user_id)]
    return {"investments": investments, **reports.portfolio_totals(investments)}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_investment(investment: InvestmentCreate, db: FinanceDatabase = Depends(get_db)):
    """Create new investment"""
    require_fields(
        userId=investment.user_id,
        name=investment.name,
        type=investment.type,
        buyPrice=investment.buy_price,
        currentPrice=investment.current_price,
    )
    values = {
        'user_id': investment.user_id,
        'name': investment.name.strip(),
        'type': investment.type,
        'symbol': investment.symbol or '',
        'quantity': investment.quantity or 0,
        'buy_price': investment.buy_price,
        'current_price': investment.current_price,
        'currency': investment.currency or settings.default_currency,
        'purchase_date': (investment.purchase_date or today())[:10],
        'notes': investment.notes or '',
    }
    _check_numbers(values)

    return _with_gain_loss(db.investments.add(values))


@router.put("/{investment_id}")
async def update_investment(
    investment_id: str,
    investment: InvestmentUpdate,
    db: FinanceDatabase = Depends(get_db)
):
    """Update position, typically currentPrice after a market move"""
    updates = sparse_columns(investment, fields.INVESTMENT)
    _check_numbers(updates)

    updated = db.investments.update(investment_id, updates)
    if not updated:
        raise not_found("Investment")
    return _with_gain_loss(updated)


@router.delete("/{investment_id}")
async def delete_investment(investment_id: str, db: FinanceDatabase = Depends(get_db)):
    """Delete investment"""
    if not db.investments.delete(investment_id):
        raise not_found("Investment")
    return {"message": "Investment deleted successfully"}
