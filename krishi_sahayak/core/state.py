"""
Application State Model

Typed records for the single application state tree owned by the store:
the signed-in farmer, preferences, bounded search history, the TTL cache,
transient notifications and connectivity.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES: dict[str, dict[str, str]] = {
    "en": {"name": "English", "native": "English", "code": "en"},
    "hi": {"name": "Hindi", "native": "हिंदी", "code": "hi"},
    "te": {"name": "Telugu", "native": "తెలుగు", "code": "te"},
    "ta": {"name": "Tamil", "native": "தமிழ்", "code": "ta"},
    "bn": {"name": "Bengali", "native": "বাংলা", "code": "bn"},
    "gu": {"name": "Gujarati", "native": "ગુજરાતી", "code": "gu"},
    "mr": {"name": "Marathi", "native": "मराठी", "code": "mr"},
    "pa": {"name": "Punjabi", "native": "ਪੰਜਾਬੀ", "code": "pa"},
}

MAX_SEARCH_HISTORY = 10
MAX_RECENT_QUERIES = 5
MAX_NOTIFICATIONS = 50
DEFAULT_CACHE_EXPIRY_SECONDS = 5 * 60


def is_supported_language(code: Any) -> bool:
    return isinstance(code, str) and code in SUPPORTED_LANGUAGES


class Theme(str, Enum):
    """UI colour themes."""

    LIGHT = "light"
    DARK = "dark"


class CacheNamespace(str, Enum):
    """Namespaces of the in-state TTL cache."""

    PRICES = "prices"
    CROPS = "crops"
    DISEASES = "diseases"


class NotificationType(str, Enum):
    """Severity of a transient notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class User(BaseModel):
    """Signed-in farmer profile as returned by ``/auth/login`` and ``/auth/signup``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int | str | None = None
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    farm_size: float | str | None = Field(None, alias="farmSize")
    primary_crops: list[str] = Field(default_factory=list, alias="primaryCrops")

    def to_storage(self) -> dict[str, Any]:
        """Serialize with the backend's camelCase keys."""
        return self.model_dump(by_alias=True)


# camelCase keys written by the web front-end -> dataclass field names
_PREFERENCE_ALIASES = {
    "autoTranslate": "auto_translate",
    "voiceEnabled": "voice_enabled",
    "favoriteCrops": "favorite_crops",
}


@dataclass(frozen=True)
class Preferences:
    """Per-user application preferences."""

    auto_translate: bool = True
    voice_enabled: bool = True
    notifications: bool = True
    location: str = ""
    favorite_crops: tuple[str, ...] = ()

    def to_storage(self) -> dict[str, Any]:
        return {
            "autoTranslate": self.auto_translate,
            "voiceEnabled": self.voice_enabled,
            "notifications": self.notifications,
            "location": self.location,
            "favoriteCrops": list(self.favorite_crops),
        }


def normalize_preference_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map a partial preferences payload onto ``Preferences`` field names.

    Accepts both snake_case and the stored camelCase keys. Unknown keys are
    dropped with a warning; favourite crops are de-duplicated in order.
    """
    known = {f.name for f in fields(Preferences)}
    normalized: dict[str, Any] = {}

    for key, value in changes.items():
        name = _PREFERENCE_ALIASES.get(key, key)
        if name not in known:
            logger.warning(f"Ignoring unknown preference '{key}'")
            continue
        if name == "favorite_crops":
            if isinstance(value, str):
                value = (value,) if value else ()
            value = tuple(dict.fromkeys(value or ()))
        normalized[name] = value

    return normalized


@dataclass(frozen=True)
class CacheEntry:
    """Cached payload with its write time and time-to-live, both in seconds."""

    data: Any
    timestamp: float
    expiry: float = DEFAULT_CACHE_EXPIRY_SECONDS

    def is_valid(self, now: float) -> bool:
        return now - self.timestamp < self.expiry


@dataclass(frozen=True)
class Notification:
    """Transient user-facing message."""

    id: int
    timestamp: float
    type: NotificationType
    title: str
    message: str | None = None


def empty_cache() -> dict[str, dict[str, CacheEntry]]:
    return {namespace.value: {} for namespace in CacheNamespace}


@dataclass(frozen=True)
class AppState:
    """
    Root application state.

    Instances are never mutated; the reducer derives a new state for every
    action. ``is_authenticated`` is derived from ``user``.
    """

    user: User | None = None
    is_loading: bool = True
    language: str = DEFAULT_LANGUAGE
    translations: dict[str, dict[str, str]] = field(default_factory=dict)
    theme: Theme = Theme.LIGHT
    preferences: Preferences = field(default_factory=Preferences)
    search_history: tuple[str, ...] = ()
    recent_queries: tuple[str, ...] = ()
    cache: dict[str, dict[str, CacheEntry]] = field(default_factory=empty_cache)
    notifications: tuple[Notification, ...] = ()
    error: str | None = None
    is_online: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def supported_languages(self) -> dict[str, dict[str, str]]:
        return SUPPORTED_LANGUAGES
