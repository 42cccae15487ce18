"""
Application Provider

Owns the store for one application session and layers the side effects
around the pure reducer:
- startup rehydration of the session, preferences, language, theme and
  search history from durable storage
- persistence of user, preferences, language and theme on change
- mirroring language and theme onto the document surface
- connectivity transitions and transient notifications
- lazy loading of phrase translations when the language changes
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from krishi_sahayak.config import ClientConfig
from krishi_sahayak.core import actions
from krishi_sahayak.core.cache import get_cached_data
from krishi_sahayak.core.notifications import NotificationQueue
from krishi_sahayak.core.state import (
    DEFAULT_LANGUAGE,
    AppState,
    CacheNamespace,
    NotificationType,
    Theme,
    User,
    is_supported_language,
)
from krishi_sahayak.core.storage import KeyValueStorage, PreferenceStore
from krishi_sahayak.core.store import AppStore
from krishi_sahayak.exceptions import StorageError, ValidationError
from krishi_sahayak.services.auth import AuthService
from krishi_sahayak.services.translation import (
    TranslationService,
    get_fallback_translation,
    get_language_direction,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth"
INIT_ERROR_MESSAGE = "Failed to initialize app"


@dataclass
class DocumentSurface:
    """Document-level attributes the UI renders from."""

    lang: str = DEFAULT_LANGUAGE
    class_name: str = Theme.LIGHT.value
    dir: str = "ltr"


class AppProvider:
    """
    {
        "name": "AppProvider",
        "version": "1.0.0",
        "description": "Session owner wiring storage, services and effects around the app store.",
        "dependencies": ["AppStore", "PreferenceStore", "AuthService", "TranslationService"],
        "interface": {
            "inputs": ["actions via action creators", "connectivity events"],
            "outputs": "AppState snapshots, persisted preferences, notifications"
        }
    }
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        auth_service: AuthService | None = None,
        translation_service: TranslationService | None = None,
        config: ClientConfig | None = None,
        document: DocumentSurface | None = None,
        navigate: Callable[[str], None] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or ClientConfig()
        self.preferences = PreferenceStore(storage, clock=clock)
        self.store = AppStore(clock=clock)
        self.auth_service = auth_service or AuthService(self.preferences, clock=clock)
        self.translation_service = translation_service or TranslationService()
        self.document = document or DocumentSurface()
        self.navigate = navigate
        self.notifications = NotificationQueue(
            self.store,
            default_delay=self.config.notifications.default_delay_seconds,
        )

        self._translation_tasks: dict[str, asyncio.Task] = {}
        self._hydrating = False
        self._closed = False
        self._unsubscribe = self.store.subscribe(self._sync_effects)

    @property
    def state(self) -> AppState:
        return self.store.state

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, action: actions.Action) -> AppState:
        return self.store.dispatch(action)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def initialize(self) -> AppState:
        """
        Rehydrate the session from durable storage.

        Any failure is recorded as the application error and loading is
        always finished, so the UI never stays on the loading screen.
        """
        self._hydrating = True
        try:
            if self.auth_service.is_authenticated():
                self.dispatch(actions.SetUser(self.auth_service.get_current_user()))
                saved_preferences = self.preferences.load_preferences()
                if saved_preferences:
                    self.dispatch(actions.UpdatePreferences(saved_preferences))
            else:
                self.dispatch(actions.SetLoading(False))

            saved_language = self.preferences.load_language()
            if is_supported_language(saved_language):
                self.dispatch(actions.SetLanguage(saved_language))

            saved_theme = self.preferences.load_theme()
            if saved_theme:
                if saved_theme in {theme.value for theme in Theme}:
                    self.dispatch(actions.SetTheme(Theme(saved_theme)))
                else:
                    logger.warning(f"Ignoring unknown stored theme '{saved_theme}'")

            # Stored most-recent-first; replay oldest first to keep that order
            for query in reversed(self.preferences.load_search_history()):
                self.dispatch(actions.AddSearchQuery(query))

        except Exception as e:
            logger.error(f"App initialization error: {e}")
            self.dispatch(actions.SetError(INIT_ERROR_MESSAGE))
            self.dispatch(actions.SetLoading(False))
        finally:
            self._hydrating = False

        self._apply_document(self.state)
        if self.state.language not in (DEFAULT_LANGUAGE, *self.state.translations):
            self._start_translation_load(self.state.language)
        logger.info(
            f"App initialized (authenticated={self.state.is_authenticated}, "
            f"language={self.state.language})"
        )
        return self.state

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _apply_document(self, state: AppState) -> None:
        self.document.lang = state.language
        self.document.dir = get_language_direction(state.language)
        self.document.class_name = Theme(state.theme).value

    def _sync_effects(
        self, new_state: AppState, old_state: AppState, action: actions.Action
    ) -> None:
        if new_state.language != old_state.language or new_state.theme != old_state.theme:
            self._apply_document(new_state)

        if self._hydrating:
            return

        try:
            if new_state.user is not None and (
                new_state.preferences != old_state.preferences
                or new_state.user != old_state.user
            ):
                self.preferences.save_preferences(new_state.preferences)
                self.preferences.save_user(new_state.user)

            if new_state.language != old_state.language:
                self.preferences.save_language(new_state.language)

            if new_state.theme != old_state.theme:
                self.preferences.save_theme(new_state.theme)
        except StorageError as e:
            self.dispatch(actions.SetError(e.user_message))

    def handle_online(self) -> None:
        self.dispatch(actions.SetOnlineStatus(True))
        self.show_notification(
            NotificationType.INFO, "Connection Restored", "You are back online!"
        )

    def handle_offline(self) -> None:
        self.dispatch(actions.SetOnlineStatus(False))
        self.show_notification(
            NotificationType.WARNING,
            "Connection Lost",
            "You are offline. Some features may not work.",
        )

    def handle_before_unload(self) -> None:
        """Flush the search history to storage."""
        try:
            self.preferences.save_search_history(self.state.search_history)
        except StorageError as e:
            logger.error(f"Could not save search history: {e}")

    # ------------------------------------------------------------------
    # Action creators
    # ------------------------------------------------------------------

    def set_user(self, user: User | dict[str, Any] | None) -> None:
        if isinstance(user, dict):
            user = User.model_validate(user)
        self.dispatch(actions.SetUser(user))

    def logout(self) -> None:
        """Clear the stored session, reset session state and go to the login page."""
        try:
            self.auth_service.logout()
        except StorageError as e:
            self.dispatch(actions.SetError(e.user_message))
        self.dispatch(actions.Logout())
        if self.navigate is not None:
            self.navigate(LOGIN_PATH)

    def set_language(self, language: str) -> asyncio.Task | None:
        """
        Switch the UI language.

        The switch is immediate; phrase translations for a language seen for
        the first time load in the background.

        Returns:
            The loader task, which callers may await or ignore, or None when
            nothing needs loading or no event loop is running

        Raises:
            ValidationError: If ``language`` is not a supported code
        """
        if not is_supported_language(language):
            raise ValidationError(
                f"Unsupported language '{language}'", field="language", value=language
            )

        self.dispatch(actions.SetLanguage(language))

        if language == DEFAULT_LANGUAGE or language in self.state.translations:
            return None
        return self._start_translation_load(language)

    def _start_translation_load(self, language: str) -> asyncio.Task | None:
        pending = self._translation_tasks.get(language)
        if pending is not None and not pending.done():
            return pending

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop; translations for {language} not loaded")
            return None

        task = loop.create_task(self.load_translations(language))
        self._translation_tasks[language] = task

        def _forget(finished: asyncio.Task) -> None:
            if self._translation_tasks.get(language) is finished:
                del self._translation_tasks[language]

        task.add_done_callback(_forget)
        return task

    async def load_translations(self, language: str) -> dict[str, str] | None:
        """Translate the common phrases and store them, unless the provider closed."""
        try:
            translations = await self.translation_service.load_common_translations(
                language
            )
        except Exception as e:
            logger.error(f"Translation loading error: {e}")
            return None

        if self._closed:
            logger.debug(f"Provider closed; dropping {language} translations")
            return None

        self.dispatch(actions.SetTranslations(language, translations))
        return translations

    def set_theme(self, theme: Theme | str) -> None:
        self.dispatch(actions.SetTheme(Theme(theme)))

    def update_preferences(self, preferences: dict[str, Any]) -> None:
        self.dispatch(actions.UpdatePreferences(preferences))

    def add_favorite_crop(self, crop: str) -> None:
        if not self.is_favorite_crop(crop):
            self.dispatch(actions.AddFavoriteCrop(crop))

    def remove_favorite_crop(self, crop: str) -> None:
        self.dispatch(actions.RemoveFavoriteCrop(crop))

    def add_search_query(self, query: str) -> None:
        query = query.strip()
        if query:
            self.dispatch(actions.AddSearchQuery(query))

    def clear_search_history(self) -> None:
        self.dispatch(actions.ClearSearchHistory())
        try:
            self.preferences.remove_search_history()
        except StorageError as e:
            self.dispatch(actions.SetError(e.user_message))

    def update_cache(
        self,
        namespace: CacheNamespace | str,
        key: str,
        data: Any,
        expiry: float | None = None,
    ) -> None:
        self.dispatch(
            actions.UpdateCache(
                namespace,
                key,
                data,
                expiry or self.config.cache.default_expiry_seconds,
            )
        )

    def get_cached_data(self, namespace: CacheNamespace | str, key: str) -> Any:
        return get_cached_data(self.state, namespace, key, now=self.store.now())

    def clear_cache(self, namespace: CacheNamespace | str | None = None) -> None:
        self.dispatch(actions.ClearCache(namespace))

    def show_notification(
        self,
        type: NotificationType | str,
        title: str,
        message: str | None = None,
        *,
        auto_remove: bool = True,
        delay: float | None = None,
    ) -> int:
        return self.notifications.show(
            type, title, message, auto_remove=auto_remove, delay=delay
        )

    def show_alert(
        self,
        title: str,
        message: str | None = None,
        type: NotificationType | str = NotificationType.WARNING,
    ) -> int:
        """Show a higher-severity notification that stays up longer."""
        return self.notifications.show(
            type, title, message, delay=self.config.notifications.alert_delay_seconds
        )

    def remove_notification(self, notification_id: int) -> None:
        self.notifications.remove(notification_id)

    def clear_notifications(self) -> None:
        self.notifications.clear()

    def set_error(self, error: str) -> None:
        self.dispatch(actions.SetError(error))

    def clear_error(self) -> None:
        self.dispatch(actions.ClearError())

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    def translate(self, text: str, target_language: str | None = None) -> str:
        """
        Look up the UI translation of ``text``.

        Uses loaded translations first, then the static phrase table, and
        finally the original text.
        """
        target = target_language or self.state.language
        if target == DEFAULT_LANGUAGE:
            return text

        loaded = self.state.translations.get(target, {}).get(text)
        return loaded or get_fallback_translation(text, target) or text

    def is_online(self) -> bool:
        return self.state.is_online

    def is_favorite_crop(self, crop: str) -> bool:
        return crop in self.state.preferences.favorite_crops

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """
        Tear down the session.

        Pending translation loads and notification timers are cancelled and
        the search history is flushed; nothing is dispatched afterwards.
        """
        if self._closed:
            return
        self._closed = True

        for task in list(self._translation_tasks.values()):
            task.cancel()
        self._translation_tasks.clear()

        self.notifications.close()
        self.handle_before_unload()
        self._unsubscribe()
        logger.info("AppProvider closed")
