"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Remote operations
    command_timeout: int = field(default=30)
    connect_timeout: int = field(default=15)

    # Session registry
    idle_timeout: int = field(default=0)
    max_sessions: int = field(default=100)

    # Gateway
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=3001)
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SHELLFINDER_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            command_timeout=cls._get_int("SHELLFINDER_COMMAND_TIMEOUT", 30),
            connect_timeout=cls._get_int("SHELLFINDER_CONNECT_TIMEOUT", 15),
            idle_timeout=cls._get_int("SHELLFINDER_IDLE_TIMEOUT", 0),
            max_sessions=cls._get_int("SHELLFINDER_MAX_SESSIONS", 100),
            http_host=os.getenv("SHELLFINDER_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("SHELLFINDER_HTTP_PORT", 3001),
            cors_origins=cls._get_list("SHELLFINDER_CORS_ORIGINS", ["*"]),
            log_level=os.getenv("SHELLFINDER_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("SHELLFINDER_LOG_COLORS", True),
            include_traceback=cls._get_bool("SHELLFINDER_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_list(key: str, default: list[str]) -> list[str]:
        """Get comma-separated list from environment."""
        value = os.getenv(key, "").strip()
        if not value:
            return list(default)
        return [item.strip() for item in value.split(",") if item.strip()]
