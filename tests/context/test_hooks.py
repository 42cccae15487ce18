from __future__ import annotations

import pytest

from krishi_sahayak.context import (
    AppProvider,
    use_app_context,
    use_auth,
    use_language,
    use_notifications,
    use_preferences,
    use_theme,
)
from krishi_sahayak.core.state import SUPPORTED_LANGUAGES, NotificationType, Theme
from krishi_sahayak.exceptions import ConfigurationError


@pytest.mark.parametrize(
    "hook",
    [use_auth, use_language, use_theme, use_preferences, use_notifications, use_app_context],
)
def test_hooks_require_a_provider(hook) -> None:
    with pytest.raises(ConfigurationError, match="must be used within an AppProvider"):
        hook(None)


def test_use_auth(provider: AppProvider) -> None:
    provider.initialize()

    view = use_auth(provider)
    assert view.is_authenticated is False
    assert view.is_loading is False

    view.set_user({"id": 5, "name": "Gita"})
    view = use_auth(provider)
    assert view.is_authenticated is True
    assert view.user.name == "Gita"

    view.logout()
    assert use_auth(provider).user is None


def test_use_language(provider: AppProvider) -> None:
    view = use_language(provider)

    assert view.language == "en"
    assert view.supported_languages == SUPPORTED_LANGUAGES
    assert view.translate("Weather", "te") == "వాతావరణం"

    view.set_language("bn")
    assert use_language(provider).language == "bn"


def test_use_theme(provider: AppProvider) -> None:
    use_theme(provider).set_theme(Theme.DARK)

    assert use_theme(provider).theme == Theme.DARK


def test_use_preferences(provider: AppProvider) -> None:
    view = use_preferences(provider)
    view.add_favorite_crop("Cotton")
    view.update_preferences({"voice_enabled": False})

    view = use_preferences(provider)
    assert view.is_favorite_crop("Cotton") is True
    assert view.preferences.voice_enabled is False


def test_use_notifications(provider: AppProvider) -> None:
    view = use_notifications(provider)
    notification_id = view.show_notification(NotificationType.SUCCESS, "Saved")

    assert [n.id for n in use_notifications(provider).notifications] == [notification_id]

    view.remove_notification(notification_id)
    assert use_notifications(provider).notifications == ()


def test_use_app_context_returns_provider(provider: AppProvider) -> None:
    assert use_app_context(provider) is provider
