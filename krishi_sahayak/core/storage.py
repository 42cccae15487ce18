"""
Durable Client Storage

A string key-value surface in the shape of browser ``localStorage``, with an
in-memory and a JSON-file implementation, plus ``PreferenceStore`` for typed
access to the keys the application persists.
"""

import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from krishi_sahayak.exceptions import StorageError

from .state import Preferences, User

logger = logging.getLogger(__name__)


class StorageKeys:
    """Keys written to durable storage."""

    TOKEN = "token"
    USER = "user"
    PREFERENCES = "userPreferences"
    LANGUAGE = "selectedLanguage"
    THEME = "selectedTheme"
    SEARCH_HISTORY = "searchHistory"


class KeyValueStorage(Protocol):
    """Durable string storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dictionary-backed storage for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage:
    """
    Storage persisted as one JSON object in a file.

    The file is read lazily on first access and rewritten atomically
    (temporary file + replace) on every change.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._items: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._items is not None:
            return self._items

        if not self.path.exists():
            self._items = {}
            return self._items

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(
                f"Failed to read storage file: {e}",
                path=str(self.path),
                operation="read",
            ) from e

        if not isinstance(raw, dict):
            raise StorageError(
                "Storage file does not contain a JSON object",
                path=str(self.path),
                operation="read",
            )

        self._items = {str(k): str(v) for k, v in raw.items()}
        logger.debug(f"Loaded {len(self._items)} storage keys from {self.path}")
        return self._items

    def _write(self, items: dict[str, str]) -> None:
        """Write ``items`` to disk, then make them the in-memory view."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(
                f"Failed to write storage file: {e}",
                path=str(self.path),
                operation="write",
            ) from e
        self._items = items

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._write({**self._load(), key: str(value)})

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            self._write({k: v for k, v in items.items() if k != key})


class PreferenceStore:
    """
    Typed access to the persisted application keys.

    Malformed JSON under a key raises ``StorageError`` so callers can turn it
    into an application error instead of silently resetting.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self._clock = clock

    # JSON helpers

    def read_json(self, key: str) -> Any:
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(
                f"Stored value for '{key}' is not valid JSON", key=key, operation="read"
            ) from e

    def write_json(self, key: str, value: Any) -> None:
        self.storage.set_item(key, json.dumps(value, ensure_ascii=False))

    # Authentication

    def load_token(self) -> str | None:
        return self.storage.get_item(StorageKeys.TOKEN) or None

    def save_token(self, token: str) -> None:
        self.storage.set_item(StorageKeys.TOKEN, token)

    def remove_token(self) -> None:
        self.storage.remove_item(StorageKeys.TOKEN)

    def load_user(self) -> User | None:
        data = self.read_json(StorageKeys.USER)
        if data is None:
            return None
        try:
            return User.model_validate(data)
        except PydanticValidationError as e:
            raise StorageError(
                f"Stored user record is invalid: {e.error_count()} error(s)",
                key=StorageKeys.USER,
                operation="read",
            ) from e

    def save_user(self, user: User) -> None:
        self.write_json(StorageKeys.USER, user.to_storage())

    def remove_user(self) -> None:
        self.storage.remove_item(StorageKeys.USER)

    # Preferences

    def load_preferences(self) -> dict[str, Any] | None:
        data = self.read_json(StorageKeys.PREFERENCES)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise StorageError(
                "Stored preferences are not an object",
                key=StorageKeys.PREFERENCES,
                operation="read",
            )
        return data

    def save_preferences(self, preferences: Preferences) -> None:
        self.write_json(StorageKeys.PREFERENCES, preferences.to_storage())

    # Language and theme

    def load_language(self) -> str | None:
        return self.storage.get_item(StorageKeys.LANGUAGE)

    def save_language(self, language: str) -> None:
        self.storage.set_item(StorageKeys.LANGUAGE, language)

    def load_theme(self) -> str | None:
        return self.storage.get_item(StorageKeys.THEME)

    def save_theme(self, theme: str) -> None:
        self.storage.set_item(StorageKeys.THEME, getattr(theme, "value", theme))

    # Search history

    def load_search_history(self) -> list[str]:
        data = self.read_json(StorageKeys.SEARCH_HISTORY)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(
                "Stored search history is not a list",
                key=StorageKeys.SEARCH_HISTORY,
                operation="read",
            )
        return [str(query) for query in data]

    def save_search_history(self, history) -> None:
        self.write_json(StorageKeys.SEARCH_HISTORY, list(history))

    def remove_search_history(self) -> None:
        self.storage.remove_item(StorageKeys.SEARCH_HISTORY)

    # Timed items

    def set_timed_item(self, key: str, value: Any, expiry: float | None = None) -> None:
        """Store ``value`` with a write timestamp and optional expiry in seconds."""
        self.write_json(
            key, {"value": value, "timestamp": self._clock(), "expiry": expiry}
        )

    def get_timed_item(self, key: str) -> Any:
        """
        Read a value written by ``set_timed_item``.

        Expired items are removed and reported absent. Unreadable items are
        logged and reported absent.
        """
        try:
            item = self.read_json(key)
        except StorageError:
            logger.warning(f"Discarding unreadable timed item '{key}'")
            return None

        if not isinstance(item, dict):
            return None

        expiry = item.get("expiry")
        if expiry and self._clock() > item.get("timestamp", 0) + expiry:
            self.storage.remove_item(key)
            return None

        return item.get("value")

    def remove_item(self, key: str) -> None:
        self.storage.remove_item(key)
