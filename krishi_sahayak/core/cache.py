"""
TTL Cache Accessor

Reads through the in-state cache written by ``UpdateCache``. Expired
entries are hidden, never purged; they stay in memory until overwritten
or their namespace is cleared.
"""

import time
from typing import Any

from .state import AppState, CacheEntry, CacheNamespace


def get_cache_entry(
    state: AppState, namespace: CacheNamespace | str, key: str
) -> CacheEntry | None:
    """Return the raw entry regardless of expiry."""
    namespace = getattr(namespace, "value", namespace)
    return state.cache.get(namespace, {}).get(key)


def get_cached_data(
    state: AppState,
    namespace: CacheNamespace | str,
    key: str,
    *,
    now: float | None = None,
) -> Any:
    """
    Return cached data while its entry is unexpired.

    Validity is recomputed against the clock on every call.

    Args:
        state: Application state holding the cache
        namespace: Cache namespace, e.g. ``CacheNamespace.PRICES``
        key: Entry key within the namespace
        now: Clock value in seconds, defaults to ``time.time()``

    Returns:
        Cached data, or None if absent or expired
    """
    entry = get_cache_entry(state, namespace, key)
    if entry is None:
        return None
    if not entry.is_valid(time.time() if now is None else now):
        return None
    return entry.data
