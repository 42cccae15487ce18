"""
Application State Reducer

``reduce(state, action)`` computes the next ``AppState``. It performs no I/O
and never raises: unknown actions and malformed payloads leave the state
unchanged.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import replace

from .actions import (
    Action,
    AddFavoriteCrop,
    AddNotification,
    AddSearchQuery,
    ClearCache,
    ClearError,
    ClearNotifications,
    ClearSearchHistory,
    Logout,
    RemoveFavoriteCrop,
    RemoveNotification,
    SetError,
    SetLanguage,
    SetLoading,
    SetOnlineStatus,
    SetTheme,
    SetTranslations,
    SetUser,
    UpdateCache,
    UpdatePreferences,
)
from .state import (
    DEFAULT_CACHE_EXPIRY_SECONDS,
    MAX_NOTIFICATIONS,
    MAX_RECENT_QUERIES,
    MAX_SEARCH_HISTORY,
    AppState,
    CacheEntry,
    Notification,
    NotificationType,
    Preferences,
    Theme,
    empty_cache,
    normalize_preference_changes,
)

logger = logging.getLogger(__name__)

Handler = Callable[[AppState, Action, float], AppState]

_HANDLERS: dict[type, Handler] = {}


def _handles(action_type: type) -> Callable[[Handler], Handler]:
    def register(func: Handler) -> Handler:
        _HANDLERS[action_type] = func
        return func

    return register


def _move_to_front(items: tuple[str, ...], item: str, limit: int) -> tuple[str, ...]:
    return ((item,) + tuple(existing for existing in items if existing != item))[:limit]


def _namespace_key(namespace) -> str:
    return getattr(namespace, "value", namespace)


@_handles(SetUser)
def _set_user(state: AppState, action: SetUser, now: float) -> AppState:
    return replace(state, user=action.user, is_loading=False)


@_handles(SetLoading)
def _set_loading(state: AppState, action: SetLoading, now: float) -> AppState:
    return replace(state, is_loading=bool(action.is_loading))


@_handles(Logout)
def _logout(state: AppState, action: Logout, now: float) -> AppState:
    return replace(
        state,
        user=None,
        preferences=Preferences(),
        cache=empty_cache(),
        search_history=(),
        recent_queries=(),
    )


@_handles(SetLanguage)
def _set_language(state: AppState, action: SetLanguage, now: float) -> AppState:
    return replace(state, language=action.language)


@_handles(SetTranslations)
def _set_translations(
    state: AppState, action: SetTranslations, now: float
) -> AppState:
    merged = {**state.translations.get(action.language, {}), **action.translations}
    return replace(state, translations={**state.translations, action.language: merged})


@_handles(SetTheme)
def _set_theme(state: AppState, action: SetTheme, now: float) -> AppState:
    return replace(state, theme=Theme(action.theme))


@_handles(UpdatePreferences)
def _update_preferences(
    state: AppState, action: UpdatePreferences, now: float
) -> AppState:
    changes = normalize_preference_changes(action.changes)
    if not changes:
        return state
    return replace(state, preferences=replace(state.preferences, **changes))


@_handles(AddFavoriteCrop)
def _add_favorite_crop(
    state: AppState, action: AddFavoriteCrop, now: float
) -> AppState:
    crops = state.preferences.favorite_crops
    if action.crop in crops:
        return state
    preferences = replace(state.preferences, favorite_crops=crops + (action.crop,))
    return replace(state, preferences=preferences)


@_handles(RemoveFavoriteCrop)
def _remove_favorite_crop(
    state: AppState, action: RemoveFavoriteCrop, now: float
) -> AppState:
    crops = state.preferences.favorite_crops
    if action.crop not in crops:
        return state
    remaining = tuple(crop for crop in crops if crop != action.crop)
    return replace(state, preferences=replace(state.preferences, favorite_crops=remaining))


@_handles(AddSearchQuery)
def _add_search_query(
    state: AppState, action: AddSearchQuery, now: float
) -> AppState:
    return replace(
        state,
        search_history=_move_to_front(
            state.search_history, action.query, MAX_SEARCH_HISTORY
        ),
        recent_queries=_move_to_front(
            state.recent_queries, action.query, MAX_RECENT_QUERIES
        ),
    )


@_handles(ClearSearchHistory)
def _clear_search_history(
    state: AppState, action: ClearSearchHistory, now: float
) -> AppState:
    return replace(state, search_history=(), recent_queries=())


@_handles(UpdateCache)
def _update_cache(state: AppState, action: UpdateCache, now: float) -> AppState:
    namespace = _namespace_key(action.namespace)
    expiry = action.expiry if action.expiry else DEFAULT_CACHE_EXPIRY_SECONDS
    entry = CacheEntry(data=action.data, timestamp=now, expiry=expiry)
    entries = {**state.cache.get(namespace, {}), action.key: entry}
    return replace(state, cache={**state.cache, namespace: entries})


@_handles(ClearCache)
def _clear_cache(state: AppState, action: ClearCache, now: float) -> AppState:
    if action.namespace is None:
        return replace(state, cache=empty_cache())
    return replace(state, cache={**state.cache, _namespace_key(action.namespace): {}})


@_handles(AddNotification)
def _add_notification(
    state: AppState, action: AddNotification, now: float
) -> AppState:
    notification_id = action.id
    if notification_id is None:
        notification_id = max((n.id for n in state.notifications), default=0) + 1

    notification = Notification(
        id=notification_id,
        timestamp=now,
        type=NotificationType(action.type),
        title=action.title,
        message=action.message,
    )
    notifications = ((notification,) + state.notifications)[:MAX_NOTIFICATIONS]
    return replace(state, notifications=notifications)


@_handles(RemoveNotification)
def _remove_notification(
    state: AppState, action: RemoveNotification, now: float
) -> AppState:
    remaining = tuple(n for n in state.notifications if n.id != action.id)
    if len(remaining) == len(state.notifications):
        return state
    return replace(state, notifications=remaining)


@_handles(ClearNotifications)
def _clear_notifications(
    state: AppState, action: ClearNotifications, now: float
) -> AppState:
    return replace(state, notifications=())


@_handles(SetError)
def _set_error(state: AppState, action: SetError, now: float) -> AppState:
    return replace(state, error=action.error)


@_handles(ClearError)
def _clear_error(state: AppState, action: ClearError, now: float) -> AppState:
    return replace(state, error=None)


@_handles(SetOnlineStatus)
def _set_online_status(
    state: AppState, action: SetOnlineStatus, now: float
) -> AppState:
    return replace(state, is_online=bool(action.is_online))


def reduce(state: AppState, action: Action, *, now: float | None = None) -> AppState:
    """
    Compute the next application state.

    Args:
        state: Current state, left untouched
        action: Action record describing the change
        now: Clock value in seconds for timestamps, defaults to ``time.time()``

    Returns:
        The next state, or ``state`` itself for unknown actions and no-ops
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.debug(f"Ignoring unknown action {type(action).__name__}")
        return state

    try:
        return handler(state, action, time.time() if now is None else now)
    except Exception as e:
        logger.error(f"Rejected malformed {type(action).__name__} action: {e}")
        return state
