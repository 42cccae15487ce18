"""
Service-specific Exception Classes
Handles errors raised while talking to the Krishi Sahayak backend.
"""

from typing import Any

from .base import ServiceError


class ApiError(ServiceError):
    """Raised when a REST call fails with an HTTP error or a network error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
        response_message: str | None = None,
        **kwargs: Any,
    ):
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code, None for network failures
            endpoint: Request path that failed
            response_message: ``message`` field of the error body, if present
            **kwargs: Additional arguments for base class
        """
        context = kwargs.pop("context", {})
        if status_code is not None:
            context["status_code"] = status_code
        if endpoint:
            context["endpoint"] = endpoint

        self.status_code = status_code
        self.endpoint = endpoint
        self.response_message = response_message
        super().__init__(message, service_name="ApiClient", context=context, **kwargs)

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None

    def _get_default_user_message(self) -> str:
        if self.is_network_error:
            return "Network error. Please check your connection."
        return self.response_message or "Something went wrong"


class TranslationError(ServiceError):
    """Raised when the translation backend cannot serve a request."""

    def __init__(
        self,
        message: str,
        source_language: str | None = None,
        target_language: str | None = None,
        **kwargs: Any,
    ):
        self.source_language = source_language
        self.target_language = target_language

        context = kwargs.pop("context", {})
        if source_language:
            context["source_language"] = source_language
        if target_language:
            context["target_language"] = target_language

        super().__init__(
            message, service_name="TranslationService", context=context, **kwargs
        )

    def _get_default_user_message(self) -> str:
        return "Translation is unavailable right now."
