"""
State Actions

One immutable record per kind of state change. ``Action`` is the closed
union of them; the reducer handles every member.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .state import CacheNamespace, NotificationType, Theme, User


@dataclass(frozen=True)
class SetUser:
    user: User | None


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class SetLanguage:
    language: str


@dataclass(frozen=True)
class SetTranslations:
    language: str
    translations: Mapping[str, str]


@dataclass(frozen=True)
class SetTheme:
    theme: Theme


@dataclass(frozen=True)
class UpdatePreferences:
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class AddFavoriteCrop:
    crop: str


@dataclass(frozen=True)
class RemoveFavoriteCrop:
    crop: str


@dataclass(frozen=True)
class AddSearchQuery:
    query: str


@dataclass(frozen=True)
class ClearSearchHistory:
    pass


@dataclass(frozen=True)
class UpdateCache:
    """Write ``data`` under ``namespace``/``key``; ``expiry`` is in seconds."""

    namespace: CacheNamespace | str
    key: str
    data: Any
    expiry: float | None = None


@dataclass(frozen=True)
class ClearCache:
    namespace: CacheNamespace | str | None = None


@dataclass(frozen=True)
class AddNotification:
    """
    Enqueue a notification.

    ``id`` is normally filled in by the store from its monotonic counter.
    """

    type: NotificationType
    title: str
    message: str | None = None
    id: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class RemoveNotification:
    id: int


@dataclass(frozen=True)
class ClearNotifications:
    pass


@dataclass(frozen=True)
class SetError:
    error: str


@dataclass(frozen=True)
class ClearError:
    pass


@dataclass(frozen=True)
class SetOnlineStatus:
    is_online: bool


Action = Union[
    SetUser,
    SetLoading,
    Logout,
    SetLanguage,
    SetTranslations,
    SetTheme,
    UpdatePreferences,
    AddFavoriteCrop,
    RemoveFavoriteCrop,
    AddSearchQuery,
    ClearSearchHistory,
    UpdateCache,
    ClearCache,
    AddNotification,
    RemoveNotification,
    ClearNotifications,
    SetError,
    ClearError,
    SetOnlineStatus,
]

ACTION_TYPES: tuple[type, ...] = Action.__args__
