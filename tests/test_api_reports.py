import pytest


@pytest.fixture
def march(client, owner, user_id, make_account):
    """A month of activity: 1,000 budget, 800 spent, 5,000 earned."""
    client.post("/api/budgets/", json={"amount": 1000, "month": 3, "year": 2024}, headers=owner)
    food = client.post("/api/categories/", json={"name": "Makanan", "type": "expense"}, headers=owner).json()
    for amount in (500, 300):
        client.post("/api/transactions/", json={
            "categoryId": food["id"], "type": "expense", "amount": amount, "date": "2024-03-10",
        }, headers=owner)
    client.post("/api/transactions/", json={
        "categoryId": "salary", "type": "income", "amount": 5000, "date": "2024-03-01",
    }, headers=owner)
    make_account(balance=2000)
    return food


def test_budget_status_near_limit(client, owner, march):
    status = client.get("/api/reports/budget-status", params={"month": 3, "year": 2024}, headers=owner).json()

    assert status["budget"] == 1000
    assert status["spent"] == 800
    assert status["percentage"] == pytest.approx(80)
    assert status["state"] == "near_limit"


def test_budget_status_without_budget(client, owner):
    status = client.get("/api/reports/budget-status", params={"month": 1, "year": 2020}, headers=owner).json()

    assert status["percentage"] == 0
    assert status["state"] == "safe"


def test_monthly_summary(client, owner, march):
    summary = client.get("/api/reports/monthly-summary", params={"month": 3, "year": 2024}, headers=owner).json()

    assert summary == {"month": 3, "year": 2024, "income": 5000, "expense": 800, "balance": 4200}


def test_category_breakdown(client, owner, march):
    body = client.get("/api/reports/category-breakdown", params={"month": 3, "year": 2024}, headers=owner).json()

    assert len(body["categories"]) == 1
    assert body["categories"][0]["categoryId"] == march["id"]
    assert body["categories"][0]["percentage"] == pytest.approx(100)


def test_net_worth(client, owner, user_id, march):
    client.post("/api/debts/", json={"type": "payable", "personName": "Andi", "amount": 500}, headers=owner)
    client.post("/api/investments/", json={
        "userId": user_id, "name": "Emas", "type": "gold", "quantity": 2, "buyPrice": 100, "currentPrice": 150,
    })

    result = client.get("/api/reports/net-worth", headers=owner).json()

    assert result["accountsBalance"] == 2000
    assert result["investmentsValue"] == 300
    assert result["netWorth"] == 1800


def test_summaries(client, owner):
    client.post("/api/recurring-transactions/", json={
        "categoryId": "c1", "type": "expense", "amount": 120, "frequency": "yearly", "startDate": "2024-01-01",
    }, headers=owner)
    client.post("/api/savings-goals/", json={"name": "Laptop", "targetAmount": 100, "currentAmount": 40}, headers=owner)
    client.post("/api/debts/", json={"type": "receivable", "personName": "Sari", "amount": 70}, headers=owner)

    recurring = client.get("/api/reports/recurring-summary", headers=owner).json()
    savings = client.get("/api/reports/savings-summary", headers=owner).json()
    debts = client.get("/api/reports/debt-summary", headers=owner).json()

    assert recurring["monthlyExpense"] == pytest.approx(10)
    assert savings["percentage"] == pytest.approx(40)
    assert debts["totalReceivable"] == 70


def test_reports_reject_bad_period_and_missing_header(client, owner):
    assert client.get("/api/reports/monthly-summary", params={"month": 13}, headers=owner).status_code == 400
    assert client.get("/api/reports/monthly-summary", params={"month": 0}, headers=owner).status_code == 400
    assert client.get("/api/reports/budget-status", params={"year": 0}, headers=owner).status_code == 400
    assert client.get("/api/reports/net-worth").status_code == 401
