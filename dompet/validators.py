"""
Validation utilities for Dompet.

Centralizes validation logic for consistent error handling across the API.
"""
import math
from datetime import date
from typing import Tuple, List, Dict, Any, Optional


def validate_amount(
    amount: float,
    field_name: str = "Amount",
    allow_zero: bool = False,
    allow_negative: bool = False,
    max_value: Optional[float] = None
) -> Tuple[bool, str]:
    """
    Validate amount value with configurable rules.

    Args:
        amount: The amount to validate
        field_name: Name of the field for error messages
        allow_zero: Whether zero is acceptable (default: False)
        allow_negative: Whether negative values are acceptable (default: False)
        max_value: Maximum allowed value (optional)

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_amount(100.0)
        (True, '')

        >>> validate_amount(0, allow_zero=True)
        (True, '')

        >>> validate_amount(-50)
        (False, 'Amount cannot be negative')

        >>> validate_amount(float("nan"))
        (False, 'Amount must be a finite number')
    """
    if amount is None:
        return False, f"{field_name} is required"

    if not math.isfinite(amount):
        return False, f"{field_name} must be a finite number"

    if not allow_zero and amount == 0:
        return False, f"{field_name} cannot be zero"

    if not allow_negative and amount < 0:
        return False, f"{field_name} cannot be negative"

    if max_value is not None and amount > max_value:
        return False, f"{field_name} cannot exceed {max_value}"

    return True, ""


def validate_required_fields(fields: Dict[str, Any]) -> Tuple[bool, str]:
    """
    Validate that all required fields have values.

    Field names are reported as given, so pass the client-facing names.

    Returns:
        Tuple of (all_valid, error_message)

    Examples:
        >>> validate_required_fields({'name': 'Dompet', 'type': 'cash'})
        (True, '')

        >>> validate_required_fields({'name': '', 'type': None})
        (False, 'name, type are required')

        >>> validate_required_fields({'name': 'x', 'amount': None})
        (False, 'amount is required')
    """
    missing = []
    for field_name, value in fields.items():
        if value is None:
            missing.append(field_name)
        elif isinstance(value, str) and not value.strip():
            missing.append(field_name)
        elif isinstance(value, (list, tuple)) and len(value) == 0:
            missing.append(field_name)

    if not missing:
        return True, ""
    verb = "is" if len(missing) == 1 else "are"
    return False, f"{', '.join(missing)} {verb} required"


def validate_date(value: str, field_name: str = "Date") -> Tuple[bool, str]:
    """
    Validate an ISO (YYYY-MM-DD) date string.

    Examples:
        >>> validate_date('2024-02-29')
        (True, '')

        >>> validate_date('2023-02-29')
        (False, 'Date must be a valid YYYY-MM-DD date')
    """
    try:
        date.fromisoformat(str(value)[:10])
        return True, ""
    except (ValueError, TypeError):
        return False, f"{field_name} must be a valid YYYY-MM-DD date"


def validate_date_range(
    start_date: str,
    end_date: str,
    start_label: str = "Start date",
    end_label: str = "End date"
) -> Tuple[bool, str]:
    """
    Validate that start_date is before or equal to end_date.

    Examples:
        >>> validate_date_range('2024-01-01', '2024-12-31')
        (True, '')

        >>> validate_date_range('2024-12-31', '2024-01-01')
        (False, 'Start date must be before or equal to End date')
    """
    if not start_date or not end_date:
        return False, "Both dates are required"

    if start_date > end_date:
        return False, f"{start_label} must be before or equal to {end_label}"
    return True, ""


def validate_period(month: int, year: int) -> Tuple[bool, str]:
    """
    Validate a budget period.

    Examples:
        >>> validate_period(12, 2024)
        (True, '')

        >>> validate_period(13, 2024)
        (False, 'Month must be between 1 and 12')
    """
    if month is None or not 1 <= month <= 12:
        return False, "Month must be between 1 and 12"
    if year is None or year < 1900:
        return False, "Year must be 1900 or later"
    return True, ""


def validate_email(email: str) -> Tuple[bool, str]:
    """
    Basic email validation.

    Examples:
        >>> validate_email('user@example.com')
        (True, '')

        >>> validate_email('invalid-email')
        (False, 'Invalid email format')
    """
    if not email or not email.strip():
        return False, "Email is required"

    email = email.strip()

    if email.count('@') != 1:
        return False, "Invalid email format"

    local, domain = email.split('@')
    if not local or '.' not in domain:
        return False, "Invalid email format"

    return True, ""


def validate_password_strength(password: str, min_length: int = 6) -> Tuple[bool, List[str]]:
    """
    Validate password length.

    Examples:
        >>> validate_password_strength('rahasia')
        (True, [])

        >>> validate_password_strength('abc')
        (False, ['Password minimal 6 karakter'])
    """
    if not password:
        return False, ["Password is required"]

    errors = []
    if len(password) < min_length:
        errors.append(f"Password minimal {min_length} karakter")

    return len(errors) == 0, errors
