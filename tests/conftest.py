"""Shared fixtures for the Krishi Sahayak test suite."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from krishi_sahayak.config import ApiConfig
from krishi_sahayak.context import AppProvider, DocumentSurface
from krishi_sahayak.core.storage import MemoryStorage, PreferenceStore
from krishi_sahayak.services import ApiClient

TEST_API_URL = "http://testserver/api"


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def preference_store(storage: MemoryStorage, clock: FakeClock) -> PreferenceStore:
    return PreferenceStore(storage, clock=clock)


@pytest.fixture
def document() -> DocumentSurface:
    return DocumentSurface()


@pytest.fixture
def navigations() -> list[str]:
    return []


@pytest.fixture
def provider(
    storage: MemoryStorage,
    clock: FakeClock,
    document: DocumentSurface,
    navigations: list[str],
) -> AppProvider:
    app_provider = AppProvider(
        storage, document=document, navigate=navigations.append, clock=clock
    )
    yield app_provider
    app_provider.close()


@pytest.fixture
def make_api_client(
    preference_store: PreferenceStore,
) -> Callable[..., ApiClient]:
    """Build an ApiClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> ApiClient:
        return ApiClient(
            ApiConfig(base_url=TEST_API_URL),
            preference_store,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make
