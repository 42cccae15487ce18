"""
Market Price Service

Mandi prices, trends and selling advice from the backend. Every call degrades
instead of failing: prices fall back to the last stored copy (up to six hours
old) and then to a static payload, trends to a synthetic series, advice to
a conservative "hold".
"""

import logging
import math
import random
import time
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

from krishi_sahayak.core.storage import PreferenceStore
from krishi_sahayak.exceptions import KrishiSahayakError, StorageError

from .api_client import ApiClient

logger = logging.getLogger(__name__)

FALLBACK_MAX_AGE_SECONDS = 6 * 60 * 60
SYNTHETIC_BASE_PRICE = 1200

FALLBACK_PRICES: dict[str, Any] = {
    "minPrice": 1000,
    "modalPrice": 1200,
    "maxPrice": 1400,
    "minPriceChange": 0,
    "modalPriceChange": 0,
    "maxPriceChange": 0,
    "weeklyHigh": 1500,
    "weeklyLow": 900,
    "monthlyAvg": 1150,
    "volatility": 10,
    "markets": [
        {"name": "Local Market", "price": 1200, "change": 0, "updatedAt": "Data unavailable"}
    ],
}

FALLBACK_RECOMMENDATION: dict[str, Any] = {
    "recommendation": "hold",
    "confidence": 70,
    "reason": "Unable to fetch current market data",
    "expectedTrend": "uncertain",
    "bestTime": "monitor prices daily",
}


def price_cache_key(crop: str, state: str) -> str:
    return f"prices_{crop}_{state}"


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class MarketService:
    """Market data with layered fallbacks."""

    def __init__(
        self,
        api_client: ApiClient,
        preferences: PreferenceStore,
        *,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
        fallback_max_age: float = FALLBACK_MAX_AGE_SECONDS,
    ):
        self.api_client = api_client
        self.preferences = preferences
        self._clock = clock
        self._rng = rng or random.Random()
        self.fallback_max_age = fallback_max_age

    def _store_prices(self, crop: str, state: str, data: Any) -> None:
        try:
            self.preferences.write_json(
                price_cache_key(crop, state), {"data": data, "timestamp": self._clock()}
            )
        except StorageError as e:
            logger.warning(f"Could not store prices for {crop}/{state}: {e}")

    def get_cached_prices(self, crop: str, state: str) -> dict[str, Any]:
        """Return the stored copy if fresh enough, else the static fallback."""
        try:
            cached = self.preferences.read_json(price_cache_key(crop, state))
            if isinstance(cached, dict) and "timestamp" in cached:
                if self._clock() - float(cached["timestamp"]) < self.fallback_max_age:
                    return {"data": cached.get("data"), "source": "cache"}
        except (StorageError, TypeError, ValueError) as e:
            logger.error(f"Cache retrieval error: {e}")

        return {"data": dict(FALLBACK_PRICES), "source": "fallback"}

    async def get_market_prices(self, crop: str, state: str) -> dict[str, Any]:
        try:
            payload = await self.api_client.get_market_prices(crop, state)
        except KrishiSahayakError as e:
            logger.error(f"Market prices fetch error: {e}")
            return self.get_cached_prices(crop, state)

        data = _unwrap(payload)
        self._store_prices(crop, state, data)
        return {"data": data, "source": "live"}

    def generate_synthetic_trends(self, crop: str, days: int) -> dict[str, Any]:
        """Build a plausible price series around a base price."""
        today = date.fromtimestamp(self._clock())
        trends = []

        for i in range(days - 1, -1, -1):
            day = today - timedelta(days=i)
            random_change = (self._rng.random() - 0.5) * 0.1
            seasonal_factor = math.sin((i / days) * math.pi * 2) * 0.05
            price = round(SYNTHETIC_BASE_PRICE * (1 + random_change + seasonal_factor))
            trends.append(
                {
                    "date": f"{day.day} {day:%b}",
                    "modalPrice": price,
                    "minPrice": round(price * 0.9),
                    "maxPrice": round(price * 1.1),
                }
            )

        return {"data": trends, "source": "synthetic"}

    async def get_price_trends(self, crop: str, state: str, days: int = 30) -> dict[str, Any]:
        try:
            payload = await self.api_client.get_market_trends(crop, state, days)
        except KrishiSahayakError as e:
            logger.error(f"Price trends fetch error: {e}")
            return self.generate_synthetic_trends(crop, days)
        return {"data": _unwrap(payload), "source": "live"}

    async def get_optimal_selling_time(self, crop: str, state: str) -> dict[str, Any]:
        try:
            payload = await self.api_client.get_market_recommendations(crop, state)
        except KrishiSahayakError as e:
            logger.error(f"Selling recommendations fetch error: {e}")
            return {"data": dict(FALLBACK_RECOMMENDATION), "source": "fallback"}
        return {"data": _unwrap(payload), "source": "live"}
