"""
Authentication Service

Login, signup and session bookkeeping on top of durable storage. The bearer
token and the user record are stored together; a session counts as
authenticated only when both are present.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

import jwt
from pydantic import ValidationError as PydanticValidationError

from krishi_sahayak.core.state import User
from krishi_sahayak.core.storage import PreferenceStore
from krishi_sahayak.exceptions import (
    AuthenticationError,
    ConfigurationError,
    KrishiSahayakError,
    StorageError,
    TokenError,
)

from .api_client import ApiClient

logger = logging.getLogger(__name__)

# Refresh when the token expires within this many seconds
TOKEN_REFRESH_THRESHOLD_SECONDS = 300


class AuthService:
    """Session management for the signed-in farmer."""

    def __init__(
        self,
        preferences: PreferenceStore,
        api_client: ApiClient | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.preferences = preferences
        self.api_client = api_client
        self._clock = clock

    def _require_client(self) -> ApiClient:
        if self.api_client is None:
            raise ConfigurationError(
                "AuthService needs an ApiClient for backend calls",
                config_key="api.base_url",
            )
        return self.api_client

    def _store_session(self, data: Any) -> tuple[str, User]:
        if not isinstance(data, dict) or not data.get("token") or "user" not in data:
            raise AuthenticationError("Authentication response is missing token or user")

        try:
            user = User.model_validate(data["user"])
        except PydanticValidationError as e:
            raise AuthenticationError(
                f"Authentication response has an invalid user record: {e.error_count()} error(s)"
            ) from e

        token = str(data["token"])
        self.preferences.save_token(token)
        self.preferences.save_user(user)
        return token, user

    async def login(self, credentials: dict[str, Any]) -> tuple[str, User]:
        """
        Log in with email and password.

        Args:
            credentials: ``{"email": ..., "password": ...}``

        Returns:
            Tuple of (token, user)
        """
        data = await self._require_client().login(credentials)
        token, user = self._store_session(data)
        logger.info(f"User {user.email or user.id} logged in")
        return token, user

    async def signup(self, user_data: dict[str, Any]) -> tuple[str, User]:
        """
        Register a new farmer account and start a session.

        Args:
            user_data: Signup form fields (name, email, phone, password, location,
                farmSize, primaryCrops)

        Returns:
            Tuple of (token, user)
        """
        data = await self._require_client().signup(user_data)
        token, user = self._store_session(data)
        logger.info(f"User {user.email or user.id} signed up")
        return token, user

    def logout(self) -> None:
        """Remove the stored token and user record."""
        self.preferences.remove_token()
        self.preferences.remove_user()
        logger.info("Session cleared")

    def get_current_user(self) -> User | None:
        try:
            return self.preferences.load_user()
        except StorageError as e:
            logger.error(f"Error parsing user data: {e}")
            return None

    def get_token(self) -> str | None:
        return self.preferences.load_token()

    def is_authenticated(self) -> bool:
        return bool(self.get_token() and self.get_current_user())

    async def refresh_token(self) -> str:
        """
        Exchange the current token for a fresh one.

        On failure the session is cleared and the error re-raised.
        """
        try:
            data = await self._require_client().refresh_token()
            if not isinstance(data, dict) or not data.get("token"):
                raise TokenError("Refresh response did not include a token")
        except KrishiSahayakError:
            self.logout()
            raise

        token = str(data["token"])
        self.preferences.save_token(token)
        return token

    async def check_and_refresh_token(self) -> bool:
        """
        Refresh the token when it expires within five minutes.

        The expiry claim is read without verifying the signature; the
        backend remains the authority on validity.

        Returns:
            True if a usable token is present afterwards, False otherwise
        """
        token = self.get_token()
        if not token:
            return False

        try:
            payload = jwt.decode(token, options={"verify_signature": False})
            expires_at = float(payload["exp"])
            if expires_at - self._clock() < TOKEN_REFRESH_THRESHOLD_SECONDS:
                await self.refresh_token()
            return True
        except (jwt.PyJWTError, KeyError, TypeError, ValueError, KrishiSahayakError) as e:
            logger.error(f"Token validation error: {e}")
            self.logout()
            return False
