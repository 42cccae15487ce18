"""
Unified Client Configuration

Type-safe configuration for the Krishi Sahayak client: backend API,
durable storage, notification timing, cache expiry and logging.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from krishi_sahayak.exceptions import ConfigurationError

from .environment import Environment, get_current_environment

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"


@dataclass
class ApiConfig:
    """Backend REST API settings."""

    base_url: str = DEFAULT_API_URL
    timeout_seconds: float = 30.0
    upload_timeout_seconds: float = 60.0
    market_timeout_seconds: float = 15.0

    def validate(self, environment: Environment) -> list[str]:
        """Validate API configuration for current environment."""
        issues = []

        parsed = urlparse(self.base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            issues.append(f"Invalid API base URL: {self.base_url}")
        elif environment.is_production() and parsed.scheme != "https":
            issues.append("API base URL must use HTTPS in production")

        if self.timeout_seconds <= 0 or self.upload_timeout_seconds <= 0:
            issues.append("API timeouts must be positive")

        return issues


@dataclass
class StorageConfig:
    """Durable client storage settings."""

    state_file: str = str(Path.home() / ".krishi_sahayak" / "storage.json")

    def validate(self, environment: Environment) -> list[str]:
        issues = []
        if not self.state_file:
            issues.append("storage: state_file must not be empty")
        return issues


@dataclass
class NotificationConfig:
    """Auto-removal delays for transient notifications."""

    default_delay_seconds: float = 5.0
    alert_delay_seconds: float = 10.0

    def validate(self, environment: Environment) -> list[str]:
        issues = []
        if self.default_delay_seconds <= 0 or self.alert_delay_seconds <= 0:
            issues.append("notifications: delays must be positive")
        return issues


@dataclass
class CacheConfig:
    """In-state TTL cache settings."""

    default_expiry_seconds: float = 5 * 60
    market_fallback_max_age_seconds: float = 6 * 60 * 60

    def validate(self, environment: Environment) -> list[str]:
        issues = []
        if self.default_expiry_seconds <= 0:
            issues.append("cache: default_expiry_seconds must be positive")
        return issues


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json_format: bool = False
    file_path: str | None = None
    max_file_size_mb: int = 10
    backup_count: int = 5

    def validate(self, environment: Environment) -> list[str]:
        """Validate logging configuration."""
        issues = []

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            issues.append(f"Invalid logging level: {self.level}")

        if environment.is_production() and self.level.upper() == "DEBUG":
            issues.append("Debug logging should not be used in production")

        return issues


@dataclass
class ClientConfig:
    """
    Unified client configuration.

    Every section validates itself against the detected environment;
    ``validate`` collects the issues and raises once.
    """

    environment: Environment = Environment.DEVELOPMENT
    api: ApiConfig = field(default_factory=ApiConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    app_name: str = "Krishi Sahayak"
    app_version: str = "1.0.0"

    @classmethod
    def from_environment(cls) -> "ClientConfig":
        """Create configuration from environment variables."""
        config = cls(environment=get_current_environment())

        config._load_api_config()
        config._load_storage_config()
        config._load_notification_config()
        config._load_logging_config()

        return config

    def _load_api_config(self) -> None:
        base_url = os.getenv("KRISHI_API_URL") or os.getenv("VITE_API_URL")
        self.api = ApiConfig(
            base_url=(base_url or DEFAULT_API_URL).rstrip("/"),
            timeout_seconds=_env_float("KRISHI_API_TIMEOUT", 30.0),
            upload_timeout_seconds=_env_float("KRISHI_UPLOAD_TIMEOUT", 60.0),
        )

    def _load_storage_config(self) -> None:
        state_file = os.getenv("KRISHI_STATE_FILE")
        if state_file:
            self.storage = StorageConfig(state_file=state_file)

    def _load_notification_config(self) -> None:
        self.notifications = NotificationConfig(
            default_delay_seconds=_env_float("KRISHI_NOTIFICATION_DELAY", 5.0),
            alert_delay_seconds=_env_float("KRISHI_ALERT_DELAY", 10.0),
        )

    def _load_logging_config(self) -> None:
        default_level = "DEBUG" if self.environment.is_development() else "INFO"
        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", default_level).upper(),
            json_format=os.getenv("LOG_FORMAT", "").lower() == "json",
            file_path=os.getenv("LOG_FILE"),
        )

    def validate(self) -> None:
        """
        Validate every configuration section.

        Raises:
            ConfigurationError: If any section reports issues
        """
        issues: list[str] = []
        for section in (self.api, self.storage, self.notifications, self.cache, self.logging):
            issues.extend(section.validate(self.environment))

        if issues:
            raise ConfigurationError(
                f"Configuration validation failed with {len(issues)} issue(s)",
                issues=issues,
            )
        logger.info(f"Configuration validated for {self.environment.value}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Environment variable {name} must be a number", config_key=name
        ) from e
