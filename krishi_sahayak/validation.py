"""Form validation for the login and signup screens.

Validation runs entirely on the client before any request or state change;
field errors never reach the application store.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# Indian mobile numbers: ten digits starting with 6-9
PHONE_PATTERN = re.compile(r"[6-9][0-9]{9}")
SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
MIN_PASSWORD_LENGTH = 6


class AuthMode(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"


@dataclass
class ValidationResult:
    """Result of a form validation pass.

    Attributes:
        errors: Mapping of field name to error message
    """

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str) -> None:
        self.errors[field_name] = message


@dataclass
class PasswordStrength:
    """Character-class report for a password."""

    is_valid: bool
    has_min_length: bool
    has_upper_case: bool
    has_lower_case: bool
    has_number: bool
    has_special_char: bool

    @property
    def score(self) -> int:
        return sum(
            [
                self.has_min_length,
                self.has_upper_case,
                self.has_lower_case,
                self.has_number,
                self.has_special_char,
            ]
        )


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email or ""))


def validate_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.fullmatch(phone or ""))


def validate_password(password: str) -> PasswordStrength:
    """Report which strength rules ``password`` satisfies.

    Only the minimum length is required; the other flags feed the strength
    meter.
    """
    password = password or ""
    long_enough = len(password) >= MIN_PASSWORD_LENGTH
    return PasswordStrength(
        is_valid=long_enough,
        has_min_length=long_enough,
        has_upper_case=bool(re.search(r"[A-Z]", password)),
        has_lower_case=bool(re.search(r"[a-z]", password)),
        has_number=bool(re.search(r"[0-9]", password)),
        has_special_char=any(char in SPECIAL_CHARS for char in password),
    )


def _text(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    return "" if value is None else str(value)


def validate_auth_form(form: Mapping[str, Any], mode: AuthMode | str) -> ValidationResult:
    """Validate the login or signup form.

    Args:
        form: Field values keyed by name (``name``, ``email``, ``phone``,
            ``password``, ``confirmPassword``, ``location``)
        mode: ``login`` or ``signup``

    Returns:
        ValidationResult with one message per failing field
    """
    mode = AuthMode(mode)
    result = ValidationResult()

    if mode == AuthMode.SIGNUP:
        if not _text(form, "name").strip():
            result.add("name", "Name required")

        phone = _text(form, "phone")
        if not phone.strip():
            result.add("phone", "Phone required")
        elif not validate_phone(phone):
            result.add("phone", "Invalid phone number")

        if not _text(form, "location"):
            result.add("location", "State required")

        if _text(form, "password") != _text(form, "confirmPassword"):
            result.add("confirmPassword", "Passwords do not match")

    email = _text(form, "email")
    if not email.strip():
        result.add("email", "Email required")
    elif not validate_email(email):
        result.add("email", "Invalid email format")

    password = _text(form, "password")
    if not password:
        result.add("password", "Password required")
    elif not validate_password(password).is_valid:
        result.add(
            "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    return result
