"""
Exception Hierarchy for Krishi Sahayak
Provides standardized error handling with consistent exception types.
"""

from .auth import AuthenticationError, TokenError
from .base import (
    ConfigurationError,
    KrishiSahayakError,
    ServiceError,
    ValidationError,
)
from .service import ApiError, TranslationError
from .storage import StorageError

__all__ = [
    # Base exceptions
    "KrishiSahayakError",
    "ValidationError",
    "ConfigurationError",
    "ServiceError",
    # Authentication exceptions
    "AuthenticationError",
    "TokenError",
    # Service exceptions
    "ApiError",
    "TranslationError",
    # Storage exceptions
    "StorageError",
]
