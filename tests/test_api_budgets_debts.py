from datetime import date


# ==================== BUDGETS ====================

def test_budget_post_upserts_per_period(client, owner):
    first = client.post("/api/budgets/", json={"amount": 1000000, "month": 3, "year": 2024}, headers=owner)
    second = client.post("/api/budgets/", json={"amount": 1500000, "month": 3, "year": 2024}, headers=owner)

    assert first.status_code == 201
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["amount"] == 1500000
    assert second.json()["categoryId"] is None
    assert len(client.get("/api/budgets/", headers=owner).json()["budgets"]) == 1


def test_budget_rejects_invalid_month(client, owner):
    response = client.post("/api/budgets/", json={"amount": 1, "month": 13, "year": 2024}, headers=owner)

    assert response.status_code == 400
    assert response.json() == {"error": "Month must be between 1 and 12"}


def test_budget_put_only_changes_amount(client, owner):
    budget = client.post("/api/budgets/", json={"amount": 100, "month": 1, "year": 2024}, headers=owner).json()

    updated = client.put(f"/api/budgets/{budget['id']}", json={"amount": 250}, headers=owner)

    assert updated.json()["amount"] == 250
    assert updated.json()["month"] == 1
    assert client.put(f"/api/budgets/{budget['id']}", json={}, headers=owner).status_code == 400


def test_budget_delete(client, owner):
    budget = client.post("/api/budgets/", json={"amount": 100, "month": 1, "year": 2024}, headers=owner).json()

    assert client.delete(f"/api/budgets/{budget['id']}", headers=owner).status_code == 200
    assert client.delete(f"/api/budgets/{budget['id']}", headers=owner).status_code == 404


# ==================== DEBTS ====================

def create_debt(client, owner, **overrides):
    payload = {"type": "payable", "personName": "Andi", "amount": 50000, **overrides}
    response = client.post("/api/debts/", json=payload, headers=owner)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_debt_defaults_unpaid(client, owner):
    debt = create_debt(client, owner, dueDate="2024-12-31")

    assert debt["isPaid"] is False
    assert debt["paidDate"] is None
    assert debt["dueDate"] == "2024-12-31"
    assert debt["personName"] == "Andi"


def test_pay_debt_is_one_way(client, owner):
    debt = create_debt(client, owner)

    paid = client.post(f"/api/debts/{debt['id']}/pay", headers=owner).json()

    assert paid["isPaid"] is True
    assert paid["paidDate"] == date.today().isoformat()
    response = client.put(f"/api/debts/{debt['id']}", json={"isPaid": False}, headers=owner)
    assert response.status_code == 400
    again = client.post(f"/api/debts/{debt['id']}/pay", headers=owner).json()
    assert again["isPaid"] is True


def test_pay_unknown_debt_is_404(client, owner):
    assert client.post("/api/debts/missing/pay", headers=owner).status_code == 404


def test_debt_update_can_clear_due_date(client, owner):
    debt = create_debt(client, owner, dueDate="2024-12-31")

    updated = client.put(f"/api/debts/{debt['id']}", json={"dueDate": None, "amount": 60000}, headers=owner)

    assert updated.json()["dueDate"] is None
    assert updated.json()["amount"] == 60000


def test_debts_require_header(client):
    assert client.get("/api/debts/").status_code == 401
