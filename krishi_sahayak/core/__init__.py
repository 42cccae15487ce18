"""
Core State Components

This package contains the state layer shared by every page of the client.

Key Components:
- AppState: Immutable application state tree
- reduce: Pure reducer over the closed set of actions
- AppStore: State container with observers
- NotificationQueue: Transient messages with timed removal
- PreferenceStore: Typed access to durable client storage
"""

from .cache import get_cached_data
from .notifications import NotificationQueue
from .reducer import reduce
from .state import AppState
from .storage import JsonFileStorage, MemoryStorage, PreferenceStore
from .store import AppStore

__all__ = [
    "AppState",
    "AppStore",
    "JsonFileStorage",
    "MemoryStorage",
    "NotificationQueue",
    "PreferenceStore",
    "get_cached_data",
    "reduce",
]
