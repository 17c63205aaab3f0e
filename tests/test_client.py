from datetime import date

import pytest

from dompet.client import ApiError, FinanceSession, SessionError


@pytest.fixture
def session(client):
    return FinanceSession(http=client)


def test_session_requires_login(session):
    with pytest.raises(SessionError):
        session.refresh()
    with pytest.raises(SessionError):
        session.budget_status()
    with pytest.raises(SessionError):
        session.net_worth()


def test_register_refresh_and_derive(session, client, db):
    user = session.register("budi@example.com", "rahasia", "Budi")
    today = date.today()
    db.accounts.add({'user_id': user['id'], 'name': 'BCA', 'type': 'bank', 'balance': 5000})
    client.post("/api/budgets/", json={"amount": 1000, "month": today.month, "year": today.year},
                headers={"x-user-id": user["id"]})
    client.post("/api/transactions/", json={
        "categoryId": "c1", "type": "expense", "amount": 900, "date": today.isoformat(),
    }, headers={"x-user-id": user["id"]})

    session.refresh()

    assert len(session.categories) == 12
    assert session.monthly_stats()["expense"] == 900
    assert session.budget_status()["state"] == "near_limit"
    assert session.net_worth()["netWorth"] == 5000


def test_logout_clears_state(session):
    session.register("budi@example.com", "rahasia", "Budi")
    session.refresh()

    session.logout()

    assert session.is_authenticated is False
    assert session.categories == []
    with pytest.raises(SessionError):
        session.user_id


def test_login_failure_raises_api_error(session):
    session.register("budi@example.com", "rahasia", "Budi")
    session.logout()

    with pytest.raises(ApiError) as excinfo:
        session.login("budi@example.com", "keliru")

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Email atau password salah"
    assert session.is_authenticated is False

    session.login("budi@example.com", "rahasia")
    assert session.is_authenticated is True
