"""
Dompet API client session

Holds the logged-in user and the collections fetched for them, and derives
dashboard figures locally. One FinanceSession per user; logout() drops all
state.
"""
import logging
from datetime import date
from typing import Dict, List, Any, Optional

import requests

from dompet import reports

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Session used before login, or after logout."""
    pass


class ApiError(Exception):
    """The API answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class FinanceSession:
    """
    Client-side session against the Dompet API.

    Usage:
        session = FinanceSession("http://localhost:8000")
        session.login("budi@example.com", "rahasia")
        session.refresh()
        print(session.budget_status())
        session.logout()

    Any client with requests.Session's request() signature can be
    passed as http (e.g. fastapi's TestClient).
    """

    REQUEST_TIMEOUT = 10  # seconds

    def __init__(self, base_url: str = "", http=None):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self._reset()

    def _reset(self):
        self.user: Optional[Dict[str, Any]] = None
        self.accounts: List[Dict[str, Any]] = []
        self.transactions: List[Dict[str, Any]] = []
        self.categories: List[Dict[str, Any]] = []
        self.budgets: List[Dict[str, Any]] = []
        self.debts: List[Dict[str, Any]] = []
        self.investments: List[Dict[str, Any]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _require_login(self):
        if self.user is None:
            raise SessionError("Not logged in")

    @property
    def user_id(self) -> str:
        self._require_login()
        return self.user["id"]

    # ==================== HTTP ====================

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        kwargs.setdefault("timeout", self.REQUEST_TIMEOUT)
        response = self.http.request(method, f"{self.base_url}{path}", **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            message = body.get("error", "Request failed") if isinstance(body, dict) else "Request failed"
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        return body

    def _owner_header(self) -> Dict[str, str]:
        return {"x-user-id": self.user_id}

    # ==================== AUTH ====================

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and remember the returned user."""
        body = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self._reset()
        self.user = body["user"]
        logger.info(f"Logged in as {self.user['id']}")
        return self.user

    def register(self, email: str, password: str, name: str) -> Dict[str, Any]:
        """Register a new user and start a session for them."""
        body = self._request(
            "POST", "/api/auth/register",
            json={"email": email, "password": password, "name": name}
        )
        self._reset()
        self.user = body["user"]
        return self.user

    def logout(self):
        """Forget the user and everything fetched for them."""
        self._reset()

    # ==================== DATA ====================

    def refresh(self):
        """Fetch the collections the dashboard needs."""
        user_id = self.user_id
        header = self._owner_header()
        owner_query = {"userId": user_id}

        self.accounts = self._request("GET", "/api/accounts/", params=owner_query)["accounts"]
        self.transactions = self._request("GET", "/api/transactions/", headers=header)["transactions"]
        self.categories = self._request("GET", "/api/categories/", headers=header)["categories"]
        self.budgets = self._request("GET", "/api/budgets/", headers=header)["budgets"]
        self.debts = self._request("GET", "/api/debts/", headers=header)["debts"]
        self.investments = self._request("GET", "/api/investments/", params=owner_query)["investments"]
        logger.debug(
            f"Refreshed session: {len(self.accounts)} accounts, {len(self.transactions)} transactions"
        )

    # ==================== DERIVED ====================

    def _period(self, month: Optional[int], year: Optional[int]):
        self._require_login()
        current = date.today()
        return (
            current.month if month is None else month,
            current.year if year is None else year,
        )

    def monthly_stats(self, month: Optional[int] = None, year: Optional[int] = None) -> Dict[str, float]:
        month, year = self._period(month, year)
        return reports.monthly_stats(self.transactions, month, year)

    def budget_status(self, month: Optional[int] = None, year: Optional[int] = None) -> Dict[str, Any]:
        month, year = self._period(month, year)
        return reports.budget_status(self.transactions, self.budgets, month, year)

    def net_worth(self) -> Dict[str, float]:
        self._require_login()
        return reports.net_worth(self.accounts, self.investments, self.debts)
