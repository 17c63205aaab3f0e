def create_bill(client, user_id, **overrides):
    payload = {
        "userId": user_id,
        "title": "Makan malam",
        "totalAmount": 300000,
        "participants": [
            {"name": "Andi", "amount": 150000},
            {"name": "Sari", "amount": 150000},
        ],
        **overrides,
    }
    response = client.post("/api/split-bills/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_bill_with_participants(client, user_id):
    bill = create_bill(client, user_id)

    assert bill["title"] == "Makan malam"
    assert [p["name"] for p in bill["participants"]] == ["Andi", "Sari"]
    assert all(p["isPaid"] is False for p in bill["participants"])
    assert bill["participants"][0]["splitBillId"] == bill["id"]


def test_create_bill_requires_participants(client, user_id):
    response = client.post("/api/split-bills/", json={
        "userId": user_id, "title": "Kopi", "totalAmount": 50000, "participants": [],
    })

    assert response.status_code == 400
    assert response.json() == {"error": "participants is required"}


def test_list_bills_with_participants(client, user_id):
    create_bill(client, user_id)
    create_bill(client, "other-user")

    bills = client.get("/api/split-bills/", params={"userId": user_id}).json()["splitBills"]

    assert len(bills) == 1
    assert len(bills[0]["participants"]) == 2


def test_pay_participant(client, user_id):
    bill = create_bill(client, user_id)
    participant = bill["participants"][1]

    response = client.post(f"/api/split-bills/{bill['id']}/pay", json={"participantId": participant["id"]})

    assert response.status_code == 200
    assert response.json()["isPaid"] is True
    assert response.json()["paidDate"] is not None
    refreshed = client.get(f"/api/split-bills/{bill['id']}").json()
    assert [p["isPaid"] for p in refreshed["participants"]] == [False, True]


def test_pay_participant_of_another_bill_is_404(client, user_id):
    first = create_bill(client, user_id)
    second = create_bill(client, user_id, title="Bensin")

    response = client.post(
        f"/api/split-bills/{second['id']}/pay", json={"participantId": first["participants"][0]["id"]}
    )

    assert response.status_code == 404
    assert client.post(f"/api/split-bills/{second['id']}/pay", json={}).status_code == 400


def test_update_and_delete_bill(client, user_id):
    bill = create_bill(client, user_id)

    updated = client.put(f"/api/split-bills/{bill['id']}", json={"title": "Makan siang"}).json()
    assert updated["title"] == "Makan siang"
    assert updated["totalAmount"] == 300000
    assert len(updated["participants"]) == 2

    assert client.delete(f"/api/split-bills/{bill['id']}").status_code == 200
    assert client.get(f"/api/split-bills/{bill['id']}").status_code == 404


# ==================== TAGS ====================

def test_tags_sorted_by_name_with_default_color(client, user_id):
    for name in ("Liburan", "Anak", "Kantor"):
        assert client.post("/api/tags/", json={"userId": user_id, "name": name}).status_code == 201

    tags = client.get("/api/tags/", params={"userId": user_id}).json()["tags"]

    assert [t["name"] for t in tags] == ["Anak", "Kantor", "Liburan"]
    assert tags[0]["color"] == "#8b5cf6"


def test_tag_update_and_delete(client, user_id):
    tag = client.post("/api/tags/", json={"userId": user_id, "name": "Liburan"}).json()

    updated = client.put(f"/api/tags/{tag['id']}", json={"color": "#000000"}).json()
    assert updated == {**tag, "color": "#000000"}

    assert client.delete(f"/api/tags/{tag['id']}").json() == {"message": "Tag deleted successfully"}
    assert client.put(f"/api/tags/{tag['id']}", json={"name": "x"}).status_code == 404


def test_tag_requires_user_id(client):
    assert client.post("/api/tags/", json={"name": "x"}).json() == {"error": "userId is required"}
