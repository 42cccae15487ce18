from __future__ import annotations

import itertools

import pytest

from krishi_sahayak.core.actions import (
    ACTION_TYPES,
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
from krishi_sahayak.core.reducer import _HANDLERS, reduce
from krishi_sahayak.core.state import (
    MAX_NOTIFICATIONS,
    MAX_RECENT_QUERIES,
    MAX_SEARCH_HISTORY,
    AppState,
    CacheNamespace,
    NotificationType,
    Preferences,
    Theme,
    User,
)

NOW = 1_000.0


def apply(state: AppState, *actions) -> AppState:
    for action in actions:
        state = reduce(state, action, now=NOW)
    return state


@pytest.fixture
def ram() -> User:
    return User(id=1, name="Ram")


def test_set_user_marks_authenticated_and_finishes_loading(ram: User) -> None:
    state = apply(AppState(), SetUser(ram))

    assert state.user == ram
    assert state.is_authenticated is True
    assert state.is_loading is False


def test_set_user_none_is_unauthenticated() -> None:
    state = apply(AppState(), SetUser(None))

    assert state.is_authenticated is False
    assert state.is_loading is False


def test_set_loading() -> None:
    assert apply(AppState(), SetLoading(False)).is_loading is False


def test_logout_resets_session_but_keeps_language_and_theme(ram: User) -> None:
    state = apply(
        AppState(),
        SetUser(ram),
        SetLanguage("hi"),
        SetTheme(Theme.DARK),
        AddSearchQuery("wheat price"),
        UpdateCache(CacheNamespace.PRICES, "wheat", {"modal": 2100}),
        AddFavoriteCrop("Rice"),
        Logout(),
    )

    assert state.user is None
    assert state.is_authenticated is False
    assert state.search_history == ()
    assert state.recent_queries == ()
    assert state.cache == {"prices": {}, "crops": {}, "diseases": {}}
    assert state.preferences == Preferences()
    assert state.language == "hi"
    assert state.theme == Theme.DARK


def test_logout_restores_default_location(ram: User) -> None:
    state = apply(
        AppState(),
        SetUser(ram),
        UpdatePreferences({"location": "Punjab"}),
        Logout(),
    )

    assert state.preferences.location == ""


def test_search_history_is_bounded_and_unique() -> None:
    queries = ["wheat", "rice", "onion", "tomato", "cotton", "maize", "potato"]
    state = AppState()

    for query in itertools.islice(itertools.cycle(queries), 40):
        state = reduce(state, AddSearchQuery(query), now=NOW)
        assert len(state.search_history) <= MAX_SEARCH_HISTORY
        assert len(state.recent_queries) <= MAX_RECENT_QUERIES
        assert len(set(state.search_history)) == len(state.search_history)
        assert len(set(state.recent_queries)) == len(state.recent_queries)


def test_search_history_drops_oldest_on_overflow() -> None:
    state = apply(AppState(), *(AddSearchQuery(f"q{i}") for i in range(12)))

    assert state.search_history == tuple(f"q{i}" for i in range(11, 1, -1))
    assert state.recent_queries == ("q11", "q10", "q9", "q8", "q7")


def test_repeated_search_moves_to_front() -> None:
    state = apply(
        AppState(),
        AddSearchQuery("wheat"),
        AddSearchQuery("rice"),
        AddSearchQuery("wheat"),
    )

    assert state.search_history == ("wheat", "rice")
    assert state.recent_queries == ("wheat", "rice")


def test_clear_search_history() -> None:
    state = apply(AppState(), AddSearchQuery("wheat"), ClearSearchHistory())

    assert state.search_history == ()
    assert state.recent_queries == ()


def test_add_favorite_crop_is_idempotent() -> None:
    once = apply(AppState(), AddFavoriteCrop("Wheat"))
    twice = apply(once, AddFavoriteCrop("Wheat"))

    assert once.preferences.favorite_crops == ("Wheat",)
    assert twice.preferences.favorite_crops == once.preferences.favorite_crops


def test_remove_favorite_crop() -> None:
    state = apply(
        AppState(),
        AddFavoriteCrop("Wheat"),
        AddFavoriteCrop("Rice"),
        RemoveFavoriteCrop("Wheat"),
    )

    assert state.preferences.favorite_crops == ("Rice",)


def test_update_preferences_merges_and_accepts_stored_keys() -> None:
    state = apply(
        AppState(),
        UpdatePreferences({"location": "Punjab"}),
        UpdatePreferences({"voiceEnabled": False, "favoriteCrops": ["Wheat", "Wheat", "Rice"]}),
    )

    assert state.preferences.location == "Punjab"
    assert state.preferences.voice_enabled is False
    assert state.preferences.auto_translate is True
    assert state.preferences.favorite_crops == ("Wheat", "Rice")


def test_update_preferences_ignores_unknown_keys() -> None:
    state = AppState()
    assert apply(state, UpdatePreferences({"colour": "green"})) is state


def test_set_translations_merges_phrases() -> None:
    state = apply(
        AppState(),
        SetTranslations("hi", {"Price": "कीमत"}),
        SetTranslations("hi", {"Crop": "फसल"}),
        SetTranslations("ta", {"Price": "விலை"}),
    )

    assert state.translations == {
        "hi": {"Price": "कीमत", "Crop": "फसल"},
        "ta": {"Price": "விலை"},
    }


def test_set_theme_accepts_plain_string() -> None:
    assert apply(AppState(), SetTheme("dark")).theme == Theme.DARK


def test_update_cache_overwrites_same_key() -> None:
    state = apply(
        AppState(),
        UpdateCache(CacheNamespace.PRICES, "wheat", {"modal": 2000}),
        UpdateCache("prices", "wheat", {"modal": 2150}, expiry=60),
    )

    entries = state.cache["prices"]
    assert list(entries) == ["wheat"]
    assert entries["wheat"].data == {"modal": 2150}
    assert entries["wheat"].timestamp == NOW
    assert entries["wheat"].expiry == 60


def test_update_cache_defaults_to_five_minutes() -> None:
    state = apply(AppState(), UpdateCache(CacheNamespace.CROPS, "rice", {"season": "kharif"}))

    assert state.cache["crops"]["rice"].expiry == 300


def test_clear_cache_single_namespace_and_all() -> None:
    state = apply(
        AppState(),
        UpdateCache(CacheNamespace.PRICES, "wheat", 1),
        UpdateCache(CacheNamespace.CROPS, "rice", 2),
    )

    partial = apply(state, ClearCache(CacheNamespace.PRICES))
    assert partial.cache["prices"] == {}
    assert "rice" in partial.cache["crops"]

    cleared = apply(state, ClearCache())
    assert cleared.cache == {"prices": {}, "crops": {}, "diseases": {}}


def test_notifications_keep_fifty_most_recent_first() -> None:
    state = AppState()
    for i in range(60):
        state = reduce(
            state,
            AddNotification(NotificationType.INFO, f"n{i}", id=i + 1),
            now=NOW,
        )

    assert len(state.notifications) == MAX_NOTIFICATIONS
    assert state.notifications[0].title == "n59"
    assert state.notifications[-1].title == "n10"


def test_notifications_without_id_get_unique_ids() -> None:
    state = apply(
        AppState(),
        AddNotification(NotificationType.INFO, "first"),
        AddNotification(NotificationType.WARNING, "second"),
    )

    ids = [n.id for n in state.notifications]
    assert len(set(ids)) == 2
    assert state.notifications[0].timestamp == NOW


def test_remove_and_clear_notifications() -> None:
    state = apply(
        AppState(),
        AddNotification(NotificationType.INFO, "a", id=1),
        AddNotification(NotificationType.INFO, "b", id=2),
    )

    removed = apply(state, RemoveNotification(1))
    assert [n.id for n in removed.notifications] == [2]
    assert apply(removed, RemoveNotification(99)) is removed
    assert apply(state, ClearNotifications()).notifications == ()


def test_error_and_online_status() -> None:
    state = apply(AppState(), SetError("Failed"), SetOnlineStatus(False))
    assert state.error == "Failed"
    assert state.is_online is False

    state = apply(state, ClearError(), SetOnlineStatus(True))
    assert state.error is None
    assert state.is_online is True


def test_unknown_action_is_a_no_op() -> None:
    class Unknown:
        pass

    state = AppState()
    assert reduce(state, Unknown()) is state


def test_malformed_payload_leaves_state_unchanged() -> None:
    state = AppState()
    assert reduce(state, UpdatePreferences(None)) is state


def test_reducer_does_not_mutate_input(ram: User) -> None:
    original = AppState()
    apply(
        original,
        SetUser(ram),
        AddSearchQuery("wheat"),
        UpdateCache(CacheNamespace.PRICES, "wheat", 1),
        AddNotification(NotificationType.INFO, "hello"),
    )

    assert original == AppState()


def test_every_action_type_has_a_handler() -> None:
    missing = {action.__name__ for action in ACTION_TYPES} - {
        action.__name__ for action in _HANDLERS
    }
    assert missing == set()


def test_single_favorite_crop_string_is_not_split() -> None:
    state = apply(AppState(), UpdatePreferences({"favoriteCrops": "wheat"}))
    assert state.preferences.favorite_crops == ("wheat",)

    state = apply(state, UpdatePreferences({"favorite_crops": ""}))
    assert state.preferences.favorite_crops == ()
