"""
Configuration Management

Environment detection, typed client configuration and logging setup.
"""

from .client_config import (
    ApiConfig,
    CacheConfig,
    ClientConfig,
    LoggingConfig,
    NotificationConfig,
    StorageConfig,
)
from .environment import Environment, get_current_environment
from .logging_setup import setup_logging

__all__ = [
    "ApiConfig",
    "CacheConfig",
    "ClientConfig",
    "Environment",
    "LoggingConfig",
    "NotificationConfig",
    "StorageConfig",
    "get_current_environment",
    "setup_logging",
]
