"""
Authentication Exception Classes
Handles errors related to login, signup and the stored bearer token.
"""

from typing import Any

from .base import KrishiSahayakError


class AuthenticationError(KrishiSahayakError):
    """Base class for authentication-related errors."""

    def __init__(
        self,
        message: str,
        email: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        """
        Initialize authentication error.

        Args:
            message: Error message
            email: Account email involved (if applicable)
            status_code: HTTP status returned by the backend, if any
            **kwargs: Additional arguments for base class
        """
        self.email = email
        self.status_code = status_code

        context = kwargs.pop("context", {})
        if email:
            context["email"] = email
        if status_code is not None:
            context["status_code"] = status_code

        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        return "Authentication required"


class TokenError(AuthenticationError):
    """Raised when the stored bearer token is missing, malformed or expired."""

    def __init__(self, message: str, token_type: str = "access", **kwargs: Any):
        """
        Initialize token error.

        Args:
            message: Error message
            token_type: Kind of token that failed
            **kwargs: Additional arguments for base class
        """
        self.token_type = token_type

        context = kwargs.pop("context", {})
        context["token_type"] = token_type

        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        return "Your session has expired. Please log in again."
