from dompet.validators import (
    validate_amount,
    validate_date,
    validate_date_range,
    validate_email,
    validate_password_strength,
    validate_period,
    validate_required_fields,
)


def test_validate_amount_rules():
    assert validate_amount(100.0) == (True, "")
    assert validate_amount(0) == (False, "Amount cannot be zero")
    assert validate_amount(0, allow_zero=True) == (True, "")
    assert validate_amount(-5) == (False, "Amount cannot be negative")
    assert validate_amount(None)[0] is False
    assert validate_amount(11, max_value=10) == (False, "Amount cannot exceed 10")
    assert validate_amount(float("nan")) == (False, "Amount must be a finite number")
    assert validate_amount(float("inf"), allow_negative=True)[0] is False
    assert validate_amount(float("-inf"), allow_negative=True)[0] is False


def test_validate_required_fields_lists_missing_names():
    assert validate_required_fields({'name': 'Gaji', 'type': 'income'}) == (True, "")
    assert validate_required_fields({'name': ' ', 'type': None}) == (False, "name, type are required")
    assert validate_required_fields({'participants': []}) == (False, "participants is required")


def test_validate_date():
    assert validate_date('2024-02-29') == (True, "")
    assert validate_date('2023-02-29')[0] is False
    assert validate_date('kemarin')[0] is False


def test_validate_date_range():
    assert validate_date_range('2024-01-01', '2024-12-31') == (True, "")
    assert validate_date_range('2024-12-31', '2024-01-01')[0] is False


def test_validate_period():
    assert validate_period(1, 2024) == (True, "")
    assert validate_period(0, 2024)[0] is False
    assert validate_period(12, 1800)[0] is False


def test_validate_email_and_password():
    assert validate_email('budi@example.com') == (True, "")
    assert validate_email('budi@localhost') == (False, "Invalid email format")
    assert validate_password_strength('rahasia') == (True, [])
    assert validate_password_strength('abc') == (False, ["Password minimal 6 karakter"])
