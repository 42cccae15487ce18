"""
Storage Exception Classes
Handles errors related to the durable key-value preference storage.
"""

from typing import Any

from .base import KrishiSahayakError


class StorageError(KrishiSahayakError):
    """Raised when durable client storage is unavailable or holds corrupt data."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        path: str | None = None,
        operation: str | None = None,
        **kwargs: Any,
    ):
        """
        Initialize storage error.

        Args:
            message: Error message
            key: Storage key involved
            path: Backing file path, for file storage
            operation: Storage operation that failed
            **kwargs: Additional arguments for base class
        """
        self.key = key
        self.path = path
        self.operation = operation

        context = kwargs.pop("context", {})
        if key:
            context["key"] = key
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        super().__init__(message, context=context, **kwargs)

    def _get_default_user_message(self) -> str:
        if self.operation:
            return f"Failed to {self.operation} saved settings."
        return "Saved settings could not be read."
