import pytest


def transfer(client, user_id, source, target, amount, **extra):
    return client.post("/api/account-transfers/", json={
        "userId": user_id,
        "fromAccountId": source["id"],
        "toAccountId": target["id"],
        "amount": amount,
        **extra,
    })


def balance(client, account):
    return client.get(f"/api/accounts/{account['id']}").json()["balance"]


def test_transfer_end_to_end(client, db, user_id, make_account):
    a = make_account(name="A", balance=100000)
    b = make_account(name="B", balance=0)

    response = transfer(client, user_id, a, b, 40000, description="Top up", date="2024-03-10")

    assert response.status_code == 201
    created = response.json()
    assert created["amount"] == 40000
    assert created["fromAccountId"] == a["id"]
    assert created["description"] == "Top up"
    assert created["date"] == "2024-03-10"
    assert balance(client, a) == 60000
    assert balance(client, b) == 40000

    transfers = client.get("/api/account-transfers/", params={"userId": user_id}).json()["transfers"]
    assert len(transfers) == 1
    assert transfers[0]["amount"] == 40000


def test_transfer_to_same_account_is_400(client, user_id, make_account):
    a = make_account(balance=100)

    response = transfer(client, user_id, a, a, 10)

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot transfer to the same account"}
    assert balance(client, a) == 100


def test_non_positive_amount_is_400(client, user_id, make_account):
    a = make_account(balance=100)
    b = make_account()

    assert transfer(client, user_id, a, b, -1).status_code == 400
    assert transfer(client, user_id, a, b, 0).status_code == 400
    assert balance(client, a) == 100
    assert client.get("/api/account-transfers/", params={"userId": user_id}).json() == {"transfers": []}


def test_transfer_requires_fields(client, user_id):
    response = client.post("/api/account-transfers/", json={"userId": user_id, "amount": 10})

    assert response.status_code == 400
    assert response.json() == {"error": "fromAccountId, toAccountId are required"}


def test_transfer_from_someone_elses_account_is_404(client, user_id, make_account):
    mine = make_account(balance=100)
    theirs = make_account(balance=100, owner_id="other-user")

    response = transfer(client, user_id, theirs, mine, 10)

    assert response.status_code == 404
    assert balance(client, theirs) == 100


def test_invalid_date_is_400(client, user_id, make_account):
    a = make_account(balance=100)
    b = make_account()

    assert transfer(client, user_id, a, b, 10, date="31-12-2024").status_code == 400


def test_unknown_transfer_is_404(client):
    assert client.get("/api/account-transfers/missing").json() == {"error": "Transfer not found"}


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_amount_is_400(client, user_id, make_account, literal):
    a = make_account(balance=100)
    b = make_account()
    body = (
        f'{{"userId": "{user_id}", "fromAccountId": "{a["id"]}", '
        f'"toAccountId": "{b["id"]}", "amount": {literal}}}'
    )

    response = client.post(
        "/api/account-transfers/", content=body, headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert "amount" in response.json()["error"]
    assert balance(client, a) == 100
    assert balance(client, b) == 0
    assert client.get("/api/accounts/", params={"userId": user_id}).status_code == 200
    assert client.get("/api/account-transfers/", params={"userId": user_id}).json() == {"transfers": []}
