"""
Base Exception Classes

Every client error carries a code, a context mapping for the logs and a
farmer-facing message. The provider copies that message into
``AppState.error``; the technical message only goes to the log.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class KrishiSahayakError(Exception):
    """
    Base exception class for all Krishi Sahayak client errors.

    Errors log themselves once, at ``log_level``, when constructed.
    """

    default_user_message = "An unexpected error occurred"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        user_message: str | None = None,
        log_level: int = logging.ERROR,
    ):
        """
        Args:
            message: Technical error message for logging
            error_code: Code for programmatic handling, defaults to the class name
            context: Debugging details added to the log line
            user_message: Overrides the message shown to the farmer
            log_level: Logging level for this error
        """
        super().__init__(message)
        self.error_code = error_code or type(self).__name__
        self.context = context or {}
        self.log_level = log_level
        self._user_message = user_message

        log_message = f"[{self.error_code}] {message}"
        if self.context:
            log_message += f" | Context: {self.context}"
        logger.log(log_level, log_message)

    @property
    def user_message(self) -> str:
        # Resolved on access so subclasses may derive it from their own fields
        return self._user_message or self._get_default_user_message()

    def _get_default_user_message(self) -> str:
        return self.default_user_message


class ValidationError(KrishiSahayakError):
    """Raised when a value is rejected before it reaches the store."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        self.field = field
        self.value = value

        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)

        kwargs.setdefault("log_level", logging.WARNING)
        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.field:
            return f"Invalid value provided for field '{self.field}'"
        return "Invalid input provided"


class ConfigurationError(KrishiSahayakError):
    """Raised when client configuration is invalid or a dependency is not wired."""

    default_user_message = "Application configuration error. Please contact support."

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        issues: list[str] | None = None,
        **kwargs: Any,
    ):
        """
        Args:
            message: Error message
            config_key: Configuration key or environment variable at fault
            issues: Every problem found by a validation pass
        """
        self.config_key = config_key
        self.issues = issues or []

        context = kwargs.pop("context", {})
        if config_key:
            context["config_key"] = config_key
        if issues:
            context["issues"] = issues

        super().__init__(message, context=context, **kwargs)


class ServiceError(KrishiSahayakError):
    """Raised when a backend-facing service operation fails."""

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        operation: str | None = None,
        **kwargs: Any,
    ):
        self.service_name = service_name
        self.operation = operation

        context = kwargs.pop("context", {})
        if service_name:
            context["service"] = service_name
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.operation:
            return f"Failed to complete {self.operation}. Please try again."
        return "Service operation failed. Please try again."
