"""
Dompet - Reporting Module
Pure aggregations over already-fetched collections (client field names)
"""
from datetime import date
from typing import Dict, List, Any, Optional

BUDGET_SAFE = 'safe'
BUDGET_NEAR_LIMIT = 'near_limit'
BUDGET_OVER = 'over_budget'

NEAR_LIMIT_PERCENTAGE = 80
OVER_BUDGET_PERCENTAGE = 100

# Occurrences per month used to estimate recurring cash flow
MONTHLY_FACTORS = {
    'daily': 30,
    'weekly': 52 / 12,
    'monthly': 1,
    'yearly': 1 / 12,
}

NET_WORTH_CURRENCY = 'IDR'


def _in_month(value: Optional[str], month: int, year: int) -> bool:
    if not value:
        return False
    parsed = date.fromisoformat(str(value)[:10])
    return parsed.month == month and parsed.year == year


def _amount(item: Dict[str, Any], key: str = 'amount') -> float:
    return float(item.get(key) or 0)


# ==================== MONTHLY STATS ====================

def monthly_stats(transactions: List[Dict[str, Any]], month: int, year: int) -> Dict[str, float]:
    """Income, expense and balance of the transactions dated in month/year."""
    monthly = [t for t in transactions if _in_month(t.get('date'), month, year)]
    income = sum(_amount(t) for t in monthly if t.get('type') == 'income')
    expense = sum(_amount(t) for t in monthly if t.get('type') == 'expense')
    return {'income': income, 'expense': expense, 'balance': income - expense}


def category_breakdown(transactions: List[Dict[str, Any]], categories: List[Dict[str, Any]],
                       month: int, year: int) -> List[Dict[str, Any]]:
    """Expense per category for a month, largest first, zero rows dropped."""
    expenses = [
        t for t in transactions
        if t.get('type') == 'expense' and _in_month(t.get('date'), month, year)
    ]
    total = sum(_amount(t) for t in expenses)

    breakdown = []
    for category in categories:
        if category.get('type') != 'expense':
            continue
        amount = sum(_amount(t) for t in expenses if t.get('categoryId') == category['id'])
        if amount <= 0:
            continue
        breakdown.append({
            'categoryId': category['id'],
            'categoryName': category.get('name'),
            'color': category.get('color'),
            'amount': amount,
            'percentage': (amount / total) * 100 if total > 0 else 0,
        })

    breakdown.sort(key=lambda row: row['amount'], reverse=True)
    return breakdown


# ==================== BUDGETS ====================

def budget_state(percentage: float) -> str:
    """Classify a spent/budget percentage."""
    if percentage >= OVER_BUDGET_PERCENTAGE:
        return BUDGET_OVER
    if percentage >= NEAR_LIMIT_PERCENTAGE:
        return BUDGET_NEAR_LIMIT
    return BUDGET_SAFE


def budget_status(transactions: List[Dict[str, Any]], budgets: List[Dict[str, Any]],
                  month: int, year: int) -> Dict[str, Any]:
    """
    Overall monthly budget usage.

    The monthly budget is the record without a category for month/year;
    spending is the month's expense total. A zero budget reports a
    percentage of 0.
    """
    monthly_budget = next(
        (b for b in budgets
         if b.get('month') == month and b.get('year') == year and b.get('categoryId') is None),
        None
    )
    budget = _amount(monthly_budget) if monthly_budget else 0.0
    spent = monthly_stats(transactions, month, year)['expense']
    percentage = (spent / budget) * 100 if budget > 0 else 0

    return {
        'month': month,
        'year': year,
        'budgetId': monthly_budget['id'] if monthly_budget else None,
        'budget': budget,
        'spent': spent,
        'remaining': budget - spent,
        'percentage': percentage,
        'state': budget_state(percentage),
    }


# ==================== INVESTMENTS ====================

def investment_gain_loss(investment: Dict[str, Any]) -> Dict[str, float]:
    """Value and unrealised gain of one position."""
    quantity = _amount(investment, 'quantity')
    current_value = _amount(investment, 'currentPrice') * quantity
    gain = (_amount(investment, 'currentPrice') - _amount(investment, 'buyPrice')) * quantity
    cost_basis = current_value - gain
    return {
        'currentValue': current_value,
        'gainLoss': gain,
        'gainLossPercentage': (gain / cost_basis) * 100 if cost_basis > 0 else 0,
    }


def portfolio_totals(investments: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Portfolio value and gain.

    The percentage uses totalValue - totalGainLoss as the cost basis, which
    only equals the purchase cost while quantities are unchanged since buying.
    """
    total_value = sum(investment_gain_loss(i)['currentValue'] for i in investments)
    total_gain = sum(investment_gain_loss(i)['gainLoss'] for i in investments)
    cost_basis = total_value - total_gain
    return {
        'totalValue': total_value,
        'totalGainLoss': total_gain,
        'totalGainLossPercentage': (total_gain / cost_basis) * 100 if total_value > 0 and cost_basis else 0,
    }


# ==================== DEBTS ====================

def debt_summary(debts: List[Dict[str, Any]], as_of: Optional[date] = None) -> Dict[str, Any]:
    """Outstanding receivables and payables."""
    as_of = as_of or date.today()
    unpaid = [d for d in debts if not d.get('isPaid')]
    receivable = sum(_amount(d) for d in unpaid if d.get('type') == 'receivable')
    payable = sum(_amount(d) for d in unpaid if d.get('type') == 'payable')
    overdue = [
        d for d in unpaid
        if d.get('dueDate') and date.fromisoformat(str(d['dueDate'])[:10]) < as_of
    ]
    return {
        'totalReceivable': receivable,
        'totalPayable': payable,
        'net': receivable - payable,
        'unpaidCount': len(unpaid),
        'paidCount': len(debts) - len(unpaid),
        'overdueCount': len(overdue),
    }


# ==================== NET WORTH ====================

def net_worth(accounts: List[Dict[str, Any]], investments: List[Dict[str, Any]],
              debts: List[Dict[str, Any]]) -> Dict[str, float]:
    """
    Assets minus liabilities.

    Only active accounts held in IDR count towards cash; there is no
    currency conversion.
    """
    cash = sum(
        _amount(a, 'balance') for a in accounts
        if a.get('isActive', True) and a.get('currency') == NET_WORTH_CURRENCY
    )
    invested = portfolio_totals(investments)['totalValue']
    debts_total = debt_summary(debts)
    total_assets = cash + invested + debts_total['totalReceivable']
    return {
        'accountsBalance': cash,
        'investmentsValue': invested,
        'totalAssets': total_assets,
        'totalLiabilities': debts_total['totalPayable'],
        'netWorth': total_assets - debts_total['totalPayable'],
    }


# ==================== SAVINGS ====================

def savings_progress(goal: Dict[str, Any]) -> Dict[str, Any]:
    target = _amount(goal, 'targetAmount')
    current = _amount(goal, 'currentAmount')
    percentage = (current / target) * 100 if target > 0 else 0
    return {
        'percentage': percentage,
        'remaining': max(target - current, 0),
        'isCompleted': bool(goal.get('isCompleted')) or percentage >= 100,
    }


def savings_summary(goals: List[Dict[str, Any]]) -> Dict[str, Any]:
    active = [g for g in goals if not g.get('isCompleted')]
    target = sum(_amount(g, 'targetAmount') for g in active)
    current = sum(_amount(g, 'currentAmount') for g in active)
    return {
        'activeCount': len(active),
        'completedCount': len(goals) - len(active),
        'totalTarget': target,
        'totalCurrent': current,
        'percentage': (current / target) * 100 if target > 0 else 0,
    }


# ==================== RECURRING ====================

def monthly_equivalent(recurring: Dict[str, Any]) -> float:
    """Estimated amount per month for one recurring transaction."""
    return _amount(recurring) * MONTHLY_FACTORS.get(recurring.get('frequency'), 1)


def recurring_summary(recurring: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Monthly cash-flow estimate of the active recurring transactions."""
    active = [r for r in recurring if r.get('isActive')]
    income = sum(monthly_equivalent(r) for r in active if r.get('type') == 'income')
    expense = sum(monthly_equivalent(r) for r in active if r.get('type') == 'expense')
    return {
        'activeCount': len(active),
        'inactiveCount': len(recurring) - len(active),
        'monthlyIncome': income,
        'monthlyExpense': expense,
        'netCashFlow': income - expense,
    }
