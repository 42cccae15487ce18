from __future__ import annotations

import json
import os

import pytest

from krishi_sahayak.core.state import Preferences, Theme, User
from krishi_sahayak.core.storage import (
    JsonFileStorage,
    MemoryStorage,
    PreferenceStore,
    StorageKeys,
)
from krishi_sahayak.exceptions import StorageError


class TestJsonFileStorage:
    def test_missing_file_reads_as_empty(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")

        assert storage.get_item("token") is None

    def test_writes_survive_a_new_instance(self, tmp_path) -> None:
        path = tmp_path / "nested" / "state.json"
        JsonFileStorage(path).set_item("selectedLanguage", "hi")

        reopened = JsonFileStorage(path)

        assert reopened.get_item("selectedLanguage") == "hi"
        assert json.loads(path.read_text(encoding="utf-8")) == {"selectedLanguage": "hi"}

    def test_remove_item(self, tmp_path) -> None:
        path = tmp_path / "state.json"
        storage = JsonFileStorage(path)
        storage.set_item("token", "abc")

        storage.remove_item("token")
        storage.remove_item("never-written")

        assert JsonFileStorage(path).get_item("token") is None

    def test_corrupt_file_raises_storage_error(self, tmp_path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileStorage(path).get_item("token")

    def test_non_object_file_raises_storage_error(self, tmp_path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileStorage(path).get_item("token")

    def test_failed_write_leaves_disk_and_memory_unchanged(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "state.json"
        storage = JsonFileStorage(path)
        storage.set_item("selectedLanguage", "hi")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(StorageError) as exc_info:
            storage.set_item("selectedLanguage", "ta")

        assert exc_info.value.operation == "write"
        assert storage.get_item("selectedLanguage") == "hi"
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]
        assert json.loads(path.read_text(encoding="utf-8")) == {"selectedLanguage": "hi"}


class TestPreferenceStore:
    def test_user_round_trip_uses_backend_keys(self, preference_store, storage) -> None:
        user = User(id=7, name="Lakshmi", farm_size=2.5, primary_crops=["Rice"])

        preference_store.save_user(user)

        stored = json.loads(storage.get_item(StorageKeys.USER))
        assert stored["farmSize"] == 2.5
        assert stored["primaryCrops"] == ["Rice"]
        assert preference_store.load_user() == user

    def test_invalid_user_json_raises(self, preference_store, storage) -> None:
        storage.set_item(StorageKeys.USER, "{broken")

        with pytest.raises(StorageError):
            preference_store.load_user()

    def test_invalid_user_record_raises(self, preference_store, storage) -> None:
        storage.set_item(StorageKeys.USER, json.dumps({"primaryCrops": "Rice"}))

        with pytest.raises(StorageError):
            preference_store.load_user()

    def test_preferences_saved_in_camel_case(self, preference_store, storage) -> None:
        preference_store.save_preferences(
            Preferences(location="Punjab", favorite_crops=("Wheat",))
        )

        assert json.loads(storage.get_item(StorageKeys.PREFERENCES)) == {
            "autoTranslate": True,
            "voiceEnabled": True,
            "notifications": True,
            "location": "Punjab",
            "favoriteCrops": ["Wheat"],
        }

    def test_preferences_must_be_an_object(self, preference_store, storage) -> None:
        storage.set_item(StorageKeys.PREFERENCES, "[]")

        with pytest.raises(StorageError):
            preference_store.load_preferences()

    def test_language_and_theme_are_plain_strings(self, preference_store, storage) -> None:
        preference_store.save_language("ta")
        preference_store.save_theme(Theme.DARK)

        assert storage.get_item(StorageKeys.LANGUAGE) == "ta"
        assert storage.get_item(StorageKeys.THEME) == "dark"

    def test_search_history(self, preference_store, storage) -> None:
        assert preference_store.load_search_history() == []

        preference_store.save_search_history(("onion", "wheat"))
        assert preference_store.load_search_history() == ["onion", "wheat"]

        preference_store.remove_search_history()
        assert storage.get_item(StorageKeys.SEARCH_HISTORY) is None

    def test_search_history_must_be_a_list(self, preference_store, storage) -> None:
        storage.set_item(StorageKeys.SEARCH_HISTORY, '"wheat"')

        with pytest.raises(StorageError):
            preference_store.load_search_history()

    def test_token_round_trip(self, preference_store) -> None:
        assert preference_store.load_token() is None

        preference_store.save_token("jwt-token")
        assert preference_store.load_token() == "jwt-token"

        preference_store.remove_token()
        assert preference_store.load_token() is None


class TestTimedItems:
    def test_item_without_expiry_never_expires(self, preference_store, clock) -> None:
        preference_store.set_timed_item("banner", {"seen": True})
        clock.advance(10 * 365 * 24 * 3600)

        assert preference_store.get_timed_item("banner") == {"seen": True}

    def test_expired_item_is_removed(self, preference_store, storage, clock) -> None:
        preference_store.set_timed_item("otp", "123456", expiry=60)

        clock.advance(30)
        assert preference_store.get_timed_item("otp") == "123456"

        clock.advance(31)
        assert preference_store.get_timed_item("otp") is None
        assert storage.get_item("otp") is None

    def test_unreadable_item_is_absent(self, clock) -> None:
        store = PreferenceStore(MemoryStorage({"otp": "{oops"}), clock=clock)

        assert store.get_timed_item("otp") is None
        assert store.get_timed_item("missing") is None
