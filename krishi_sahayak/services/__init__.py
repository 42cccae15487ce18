"""
Backend Services

REST client, authentication, translation and market data for the
Krishi Sahayak client.
"""

from .api_client import ApiClient, handle_api_error
from .auth import AuthService
from .market import MarketService
from .translation import (
    COMMON_PHRASES,
    TranslationService,
    format_indian_number,
    get_language_direction,
)

__all__ = [
    "ApiClient",
    "AuthService",
    "COMMON_PHRASES",
    "MarketService",
    "TranslationService",
    "format_indian_number",
    "get_language_direction",
    "handle_api_error",
]
