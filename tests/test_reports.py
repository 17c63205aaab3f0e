from datetime import date

import pytest

from dompet import reports


def expense(amount, day='2024-03-10', category_id='c1'):
    return {'type': 'expense', 'amount': amount, 'date': day, 'categoryId': category_id}


def income(amount, day='2024-03-01'):
    return {'type': 'income', 'amount': amount, 'date': day, 'categoryId': 'c0'}


def monthly_budget(amount, month=3, year=2024):
    return {'id': 'b1', 'categoryId': None, 'amount': amount, 'month': month, 'year': year}


def test_monthly_stats_only_counts_the_month():
    transactions = [income(5000), expense(1200), expense(300, day='2024-04-01')]

    assert reports.monthly_stats(transactions, 3, 2024) == {
        'income': 5000.0, 'expense': 1200.0, 'balance': 3800.0,
    }


@pytest.mark.parametrize("spent, state", [
    (799, reports.BUDGET_SAFE),
    (800, reports.BUDGET_NEAR_LIMIT),
    (1000, reports.BUDGET_OVER),
    (1001, reports.BUDGET_OVER),
])
def test_budget_status_thresholds(spent, state):
    status = reports.budget_status([expense(spent)], [monthly_budget(1000)], 3, 2024)

    assert status['state'] == state
    assert status['budget'] == 1000
    assert status['remaining'] == 1000 - spent


def test_budget_status_near_limit_percentage():
    status = reports.budget_status([expense(800)], [monthly_budget(1000)], 3, 2024)
    assert status['percentage'] == pytest.approx(80)


def test_budget_status_zero_budget_reports_zero_percentage():
    status = reports.budget_status([expense(500)], [], 3, 2024)

    assert status['budget'] == 0
    assert status['percentage'] == 0
    assert status['remaining'] == -500
    assert status['budgetId'] is None


def test_budget_status_ignores_category_budgets():
    budgets = [{'id': 'b2', 'categoryId': 'c1', 'amount': 100, 'month': 3, 'year': 2024}]
    status = reports.budget_status([expense(50)], budgets, 3, 2024)
    assert status['budget'] == 0


def test_category_breakdown_sorted_and_non_zero():
    categories = [
        {'id': 'c1', 'name': 'Makanan', 'type': 'expense', 'color': '#ef4444'},
        {'id': 'c2', 'name': 'Transportasi', 'type': 'expense', 'color': '#f97316'},
        {'id': 'c3', 'name': 'Hiburan', 'type': 'expense', 'color': '#84cc16'},
    ]
    transactions = [expense(100, category_id='c1'), expense(300, category_id='c2')]

    breakdown = reports.category_breakdown(transactions, categories, 3, 2024)

    assert [row['categoryName'] for row in breakdown] == ['Transportasi', 'Makanan']
    assert breakdown[0]['percentage'] == pytest.approx(75)


def test_investment_gain_loss_and_portfolio_totals():
    investments = [
        {'quantity': 10, 'buyPrice': 1000, 'currentPrice': 1200},
        {'quantity': 2, 'buyPrice': 500, 'currentPrice': 400},
    ]

    assert reports.investment_gain_loss(investments[0])['gainLoss'] == 2000
    totals = reports.portfolio_totals(investments)
    assert totals['totalValue'] == 12800
    assert totals['totalGainLoss'] == 1800
    assert totals['totalGainLossPercentage'] == pytest.approx(1800 / 11000 * 100)


def test_portfolio_totals_empty():
    assert reports.portfolio_totals([]) == {
        'totalValue': 0, 'totalGainLoss': 0, 'totalGainLossPercentage': 0,
    }


def test_net_worth_counts_active_idr_accounts_and_unpaid_debts():
    accounts = [
        {'balance': 1000, 'currency': 'IDR', 'isActive': True},
        {'balance': 50, 'currency': 'USD', 'isActive': True},
        {'balance': 999, 'currency': 'IDR', 'isActive': False},
    ]
    investments = [{'quantity': 1, 'buyPrice': 100, 'currentPrice': 300}]
    debts = [
        {'type': 'receivable', 'amount': 200, 'isPaid': False},
        {'type': 'payable', 'amount': 400, 'isPaid': False},
        {'type': 'payable', 'amount': 10000, 'isPaid': True},
    ]

    result = reports.net_worth(accounts, investments, debts)

    assert result['accountsBalance'] == 1000
    assert result['totalAssets'] == 1500
    assert result['totalLiabilities'] == 400
    assert result['netWorth'] == 1100


def test_debt_summary_counts_overdue():
    debts = [
        {'type': 'payable', 'amount': 100, 'isPaid': False, 'dueDate': '2024-01-01'},
        {'type': 'receivable', 'amount': 50, 'isPaid': False, 'dueDate': None},
        {'type': 'payable', 'amount': 70, 'isPaid': True, 'dueDate': '2023-01-01'},
    ]

    summary = reports.debt_summary(debts, as_of=date(2024, 2, 1))

    assert summary['net'] == -50
    assert summary['overdueCount'] == 1
    assert summary['paidCount'] == 1


def test_savings_progress():
    assert reports.savings_progress({'targetAmount': 0, 'currentAmount': 10})['percentage'] == 0
    progress = reports.savings_progress({'targetAmount': 200, 'currentAmount': 250})
    assert progress['isCompleted'] is True
    assert progress['remaining'] == 0


def test_recurring_summary_monthly_equivalents():
    recurring = [
        {'type': 'income', 'amount': 1200, 'frequency': 'yearly', 'isActive': True},
        {'type': 'expense', 'amount': 10, 'frequency': 'daily', 'isActive': True},
        {'type': 'expense', 'amount': 120, 'frequency': 'weekly', 'isActive': True},
        {'type': 'expense', 'amount': 999, 'frequency': 'monthly', 'isActive': False},
    ]

    summary = reports.recurring_summary(recurring)

    assert summary['activeCount'] == 3
    assert summary['monthlyIncome'] == pytest.approx(100)
    assert summary['monthlyExpense'] == pytest.approx(300 + 520)
    assert summary['netCashFlow'] == pytest.approx(100 - 820)
