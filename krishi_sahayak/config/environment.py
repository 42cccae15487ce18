"""
Environment Detection

Provides unified environment detection for the client configuration.
"""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Application environment types with validation."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, env_str: str) -> "Environment":
        """Convert string to Environment enum, defaulting to development."""
        if not env_str:
            return cls.DEVELOPMENT

        env_mapping = {
            "dev": cls.DEVELOPMENT,
            "develop": cls.DEVELOPMENT,
            "development": cls.DEVELOPMENT,
            "test": cls.TESTING,
            "testing": cls.TESTING,
            "stage": cls.STAGING,
            "staging": cls.STAGING,
            "prod": cls.PRODUCTION,
            "production": cls.PRODUCTION,
        }

        return env_mapping.get(env_str.lower().strip(), cls.DEVELOPMENT)

    def is_production(self) -> bool:
        """Check if current environment is production."""
        return self == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if current environment is development."""
        return self == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if current environment is testing."""
        return self == Environment.TESTING


def get_current_environment() -> Environment:
    """
    Detect current environment from environment variables.

    Checks, in order: ENVIRONMENT, ENV, APP_ENV, NODE_ENV. CI markers
    select testing when none of them is set.

    Returns:
        Environment enum value
    """
    for env_var in ["ENVIRONMENT", "ENV", "APP_ENV", "NODE_ENV"]:
        env_value = os.getenv(env_var)
        if env_value:
            environment = Environment.from_string(env_value)
            logger.debug(f"Environment detected from {env_var}: {environment.value}")
            return environment

    if any(os.getenv(ci_var) for ci_var in ["CI", "GITHUB_ACTIONS", "BUILD_ID"]):
        logger.debug("Environment detected from CI variables: testing")
        return Environment.TESTING

    logger.debug("Environment defaulted to: development")
    return Environment.DEVELOPMENT
