"""
Authentication module for Dompet
Handles user registration, password hashing and login
"""
import logging
from typing import Optional, Dict, Any, Tuple

from passlib.context import CryptContext

from dompet.database import FinanceDatabase, DatabaseIntegrityError
from dompet.validators import validate_email, validate_password_strength, validate_required_fields

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Seeded for every new user
DEFAULT_CATEGORIES = [
    # Income
    {"name": "Gaji", "type": "income", "color": "#22c55e", "icon": "Wallet"},
    {"name": "Bonus", "type": "income", "color": "#10b981", "icon": "Gift"},
    {"name": "Investasi", "type": "income", "color": "#14b8a6", "icon": "TrendingUp"},
    {"name": "Lainnya", "type": "income", "color": "#06b6d4", "icon": "Plus"},
    # Expense
    {"name": "Makanan", "type": "expense", "color": "#ef4444", "icon": "Utensils"},
    {"name": "Transportasi", "type": "expense", "color": "#f97316", "icon": "Car"},
    {"name": "Belanja", "type": "expense", "color": "#f59e0b", "icon": "ShoppingBag"},
    {"name": "Tagihan", "type": "expense", "color": "#eab308", "icon": "Receipt"},
    {"name": "Hiburan", "type": "expense", "color": "#84cc16", "icon": "Gamepad2"},
    {"name": "Kesehatan", "type": "expense", "color": "#ec4899", "icon": "Heart"},
    {"name": "Pendidikan", "type": "expense", "color": "#8b5cf6", "icon": "GraduationCap"},
    {"name": "Lainnya", "type": "expense", "color": "#6b7280", "icon": "MoreHorizontal"},
]

INVALID_CREDENTIALS = "Email atau password salah"


class AuthManager:
    """Manages user registration and password authentication."""

    def __init__(self, db: FinanceDatabase):
        self.db = db

    def register(self, email: str, password: str, name: str) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
        """
        Register a new user and seed their default categories.

        Returns:
            Tuple of (success, message, user_row)
        """
        valid, message = validate_required_fields({'email': email, 'password': password, 'name': name})
        if not valid:
            return False, "Semua field harus diisi", None

        email = email.strip().lower()
        valid, message = validate_email(email)
        if not valid:
            return False, message, None

        valid, errors = validate_password_strength(password)
        if not valid:
            return False, errors[0], None

        if self.db.get_user_by_email(email):
            return False, "Email sudah terdaftar", None

        try:
            user = self.db.create_user(
                email=email,
                name=name.strip(),
                password_hash=pwd_context.hash(password),
                default_categories=DEFAULT_CATEGORIES,
            )
        except DatabaseIntegrityError:
            # Lost a race with a concurrent registration of the same email
            return False, "Email sudah terdaftar", None

        return True, "User registered", user

    def authenticate(self, email: str, password: str) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
        """
        Check an email/password pair.

        Returns:
            Tuple of (success, message, user_row)
        """
        if not email or not password:
            return False, "Email dan password harus diisi", None

        user = self.db.get_user_by_email(email.strip().lower())
        if user is None or not pwd_context.verify(password, user['password_hash']):
            logger.warning(f"Failed login for {email}")
            return False, INVALID_CREDENTIALS, None

        logger.info(f"User {user['id']} logged in")
        return True, "Login successful", user
