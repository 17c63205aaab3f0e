import pytest
from fastapi.testclient import TestClient

from dompet.database import FinanceDatabase
from dompet.backend.dependencies import get_db
from dompet.backend.main import app


@pytest.fixture
def db(tmp_path):
    return FinanceDatabase(db_path=str(tmp_path / "finance.db"))


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_id():
    return "user-1"


@pytest.fixture
def owner(user_id):
    """Header identifying the caller on header-scoped routes."""
    return {"x-user-id": user_id}


@pytest.fixture
def make_account(db, user_id):
    """Insert an active cash account straight into the store."""
    def _make(name="Dompet", balance=0.0, currency="IDR", owner_id=None):
        return db.accounts.add({
            'user_id': owner_id or user_id,
            'name': name,
            'type': 'cash',
            'balance': balance,
            'currency': currency,
            'is_active': 1,
        })
    return _make
