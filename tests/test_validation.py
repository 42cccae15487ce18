from __future__ import annotations

import pytest

from krishi_sahayak.validation import (
    AuthMode,
    validate_auth_form,
    validate_email,
    validate_password,
    validate_phone,
)

VALID_SIGNUP = {
    "name": "Ram Kumar",
    "email": "ram@example.com",
    "phone": "9876543210",
    "password": "kisan123",
    "confirmPassword": "kisan123",
    "location": "Uttar Pradesh",
}


@pytest.mark.parametrize(
    ("email", "valid"),
    [
        ("ram@example.com", True),
        ("ram.kumar@krishi.gov.in", True),
        ("ram@example", False),
        ("ram example@x.com", False),
        ("", False),
        ("ram@farm.in\n", False),
        (" ram@farm.in", False),
    ],
)
def test_validate_email(email, valid) -> None:
    assert validate_email(email) is valid


@pytest.mark.parametrize(
    ("phone", "valid"),
    [
        ("9876543210", True),
        ("6000000000", True),
        ("5876543210", False),
        ("987654321", False),
        ("+919876543210", False),
        ("9876543210\n", False),
        ("9\u096e\u096d\u096c\u096b\u096a\u0969\u0968\u0967\u0966", False),
    ],
)
def test_validate_phone(phone, valid) -> None:
    assert validate_phone(phone) is valid


def test_password_strength_report() -> None:
    weak = validate_password("abc")
    strong = validate_password("Kisan@2024")

    assert weak.is_valid is False
    assert weak.score == 1
    assert strong.is_valid is True
    assert strong.score == 5


def test_valid_signup_and_login_forms() -> None:
    assert validate_auth_form(VALID_SIGNUP, AuthMode.SIGNUP).is_valid
    assert validate_auth_form(
        {"email": "ram@example.com", "password": "kisan123"}, "login"
    ).is_valid


def test_login_reports_missing_fields() -> None:
    result = validate_auth_form({"email": "  ", "password": ""}, AuthMode.LOGIN)

    assert result.errors == {"email": "Email required", "password": "Password required"}


def test_login_ignores_signup_only_fields() -> None:
    result = validate_auth_form({"email": "bad", "password": "12345"}, AuthMode.LOGIN)

    assert result.errors == {
        "email": "Invalid email format",
        "password": "Password must be at least 6 characters",
    }


def test_signup_reports_every_failing_field() -> None:
    form = {
        **VALID_SIGNUP,
        "name": " ",
        "phone": "12345",
        "location": "",
        "confirmPassword": "different",
    }

    result = validate_auth_form(form, AuthMode.SIGNUP)

    assert result.errors == {
        "name": "Name required",
        "phone": "Invalid phone number",
        "location": "State required",
        "confirmPassword": "Passwords do not match",
    }


def test_signup_missing_phone() -> None:
    result = validate_auth_form({**VALID_SIGNUP, "phone": ""}, AuthMode.SIGNUP)

    assert result.errors == {"phone": "Phone required"}
