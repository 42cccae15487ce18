"""
Hook Facade

Narrow, purpose-specific views over the provider. Each ``use_*`` function
returns a snapshot of the relevant state slice together with the bound
action creators for it.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from krishi_sahayak.core.state import Notification, Preferences, Theme, User
from krishi_sahayak.exceptions import ConfigurationError

from .provider import AppProvider


def _require_provider(provider: AppProvider | None, hook_name: str) -> AppProvider:
    if provider is None:
        raise ConfigurationError(f"{hook_name} must be used within an AppProvider")
    return provider


@dataclass(frozen=True)
class AuthView:
    user: User | None
    is_authenticated: bool
    is_loading: bool
    set_user: Callable[..., None]
    logout: Callable[[], None]


@dataclass(frozen=True)
class LanguageView:
    language: str
    supported_languages: dict[str, dict[str, str]]
    translations: dict[str, dict[str, str]]
    set_language: Callable[[str], Any]
    translate: Callable[..., str]


@dataclass(frozen=True)
class ThemeView:
    theme: Theme
    set_theme: Callable[[Theme | str], None]


@dataclass(frozen=True)
class PreferencesView:
    preferences: Preferences
    update_preferences: Callable[[dict[str, Any]], None]
    add_favorite_crop: Callable[[str], None]
    remove_favorite_crop: Callable[[str], None]
    is_favorite_crop: Callable[[str], bool]


@dataclass(frozen=True)
class NotificationsView:
    notifications: tuple[Notification, ...]
    show_notification: Callable[..., int]
    remove_notification: Callable[[int], None]
    clear_notifications: Callable[[], None]


def use_auth(provider: AppProvider | None) -> AuthView:
    provider = _require_provider(provider, "use_auth")
    state = provider.state
    return AuthView(
        user=state.user,
        is_authenticated=state.is_authenticated,
        is_loading=state.is_loading,
        set_user=provider.set_user,
        logout=provider.logout,
    )


def use_language(provider: AppProvider | None) -> LanguageView:
    provider = _require_provider(provider, "use_language")
    state = provider.state
    return LanguageView(
        language=state.language,
        supported_languages=state.supported_languages,
        translations=state.translations,
        set_language=provider.set_language,
        translate=provider.translate,
    )


def use_theme(provider: AppProvider | None) -> ThemeView:
    provider = _require_provider(provider, "use_theme")
    return ThemeView(theme=provider.state.theme, set_theme=provider.set_theme)


def use_preferences(provider: AppProvider | None) -> PreferencesView:
    provider = _require_provider(provider, "use_preferences")
    return PreferencesView(
        preferences=provider.state.preferences,
        update_preferences=provider.update_preferences,
        add_favorite_crop=provider.add_favorite_crop,
        remove_favorite_crop=provider.remove_favorite_crop,
        is_favorite_crop=provider.is_favorite_crop,
    )


def use_notifications(provider: AppProvider | None) -> NotificationsView:
    provider = _require_provider(provider, "use_notifications")
    return NotificationsView(
        notifications=provider.state.notifications,
        show_notification=provider.show_notification,
        remove_notification=provider.remove_notification,
        clear_notifications=provider.clear_notifications,
    )


def use_app_context(provider: AppProvider | None) -> AppProvider:
    return _require_provider(provider, "use_app_context")
