"""
Application Composition Root

Builds one client session: configuration, durable storage, backend services
and the provider, with the API client's 401 hook wired to forced logout.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from krishi_sahayak.config import ClientConfig, setup_logging
from krishi_sahayak.context import AppProvider, DocumentSurface
from krishi_sahayak.core.storage import JsonFileStorage, KeyValueStorage, PreferenceStore
from krishi_sahayak.services import ApiClient, AuthService, MarketService, TranslationService

logger = logging.getLogger(__name__)


@dataclass
class KrishiSahayakApp:
    """Everything one session needs, built and torn down together."""

    config: ClientConfig
    storage: KeyValueStorage
    api_client: ApiClient
    auth_service: AuthService
    translation_service: TranslationService
    market_service: MarketService
    provider: AppProvider

    async def aclose(self) -> None:
        self.provider.close()
        await self.api_client.aclose()


def create_app(
    config: ClientConfig | None = None,
    *,
    storage: KeyValueStorage | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    document: DocumentSurface | None = None,
    navigate: Callable[[str], None] | None = None,
    configure_logging: bool = True,
) -> KrishiSahayakApp:
    """
    Build and initialize a client session.

    Args:
        config: Client configuration, defaults to ``ClientConfig.from_environment()``
        storage: Durable storage, defaults to the configured JSON state file
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        document: Document surface to mirror language and theme onto
        navigate: Callback used to redirect to the login page on logout
        configure_logging: Install the root log handlers from ``config.logging``

    Returns:
        The initialized application
    """
    config = config or ClientConfig.from_environment()
    config.validate()
    if configure_logging:
        setup_logging(config.logging)

    storage = storage if storage is not None else JsonFileStorage(config.storage.state_file)
    preferences = PreferenceStore(storage)

    api_client = ApiClient(config.api, preferences, transport=transport)
    auth_service = AuthService(preferences, api_client)
    translation_service = TranslationService(api_client)
    market_service = MarketService(
        api_client,
        preferences,
        fallback_max_age=config.cache.market_fallback_max_age_seconds,
    )

    provider = AppProvider(
        storage,
        auth_service=auth_service,
        translation_service=translation_service,
        config=config,
        document=document,
        navigate=navigate,
    )
    api_client.on_unauthorized = provider.logout
    provider.initialize()

    logger.info(f"{config.app_name} {config.app_version} ready ({config.environment.value})")
    return KrishiSahayakApp(
        config=config,
        storage=storage,
        api_client=api_client,
        auth_service=auth_service,
        translation_service=translation_service,
        market_service=market_service,
        provider=provider,
    )
