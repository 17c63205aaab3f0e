def create_transaction(client, owner, **overrides):
    payload = {"categoryId": "c1", "type": "expense", "amount": 25000, "date": "2024-03-05", **overrides}
    response = client.post("/api/transactions/", json=payload, headers=owner)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list_newest_first(client, owner):
    create_transaction(client, owner, date="2024-03-01", description="Sarapan")
    later = create_transaction(client, owner, date="2024-03-09")

    transactions = client.get("/api/transactions/", headers=owner).json()["transactions"]

    assert [t["id"] for t in transactions][0] == later["id"]
    assert transactions[1]["description"] == "Sarapan"
    assert later["description"] == ""


def test_create_requires_fields(client, owner):
    response = client.post("/api/transactions/", json={"type": "income"}, headers=owner)

    assert response.status_code == 400
    assert response.json() == {"error": "categoryId, amount, date are required"}


def test_create_rejects_negative_amount_and_bad_date(client, owner):
    base = {"categoryId": "c1", "type": "expense"}

    negative = client.post("/api/transactions/", json={**base, "amount": -1, "date": "2024-03-01"}, headers=owner)
    bad_date = client.post("/api/transactions/", json={**base, "amount": 1, "date": "soon"}, headers=owner)

    assert negative.status_code == 400
    assert bad_date.status_code == 400


def test_create_trims_timestamp_to_date(client, owner):
    transaction = create_transaction(client, owner, date="2024-03-05T14:30:00.000Z")
    assert transaction["date"] == "2024-03-05"


def test_sparse_update_is_owner_scoped(client, owner):
    transaction = create_transaction(client, owner)

    updated = client.put(f"/api/transactions/{transaction['id']}", json={"amount": 30000}, headers=owner)
    foreign = client.put(
        f"/api/transactions/{transaction['id']}", json={"amount": 1}, headers={"x-user-id": "other-user"}
    )

    assert updated.status_code == 200
    assert updated.json()["amount"] == 30000
    assert updated.json()["date"] == "2024-03-05"
    assert foreign.status_code == 404


def test_delete_is_owner_scoped(client, owner):
    transaction = create_transaction(client, owner)

    assert client.delete(f"/api/transactions/{transaction['id']}", headers={"x-user-id": "x"}).status_code == 404
    assert client.delete(f"/api/transactions/{transaction['id']}", headers=owner).json() == {
        "message": "Transaction deleted successfully"
    }


def test_create_rejects_non_finite_amount(client, owner):
    for literal in ("NaN", "Infinity"):
        body = f'{{"categoryId": "c1", "type": "expense", "amount": {literal}, "date": "2024-03-01"}}'
        response = client.post(
            "/api/transactions/", content=body,
            headers={**owner, "content-type": "application/json"}
        )

        assert response.status_code == 400
        assert "amount" in response.json()["error"]
    assert client.get("/api/transactions/", headers=owner).json() == {"transactions": []}
