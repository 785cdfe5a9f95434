"""Application configuration.

Delegates to specialized components:
- HostKeyVerifier: Manages known_hosts
- Settings: Environment variables
"""

import os
from dataclasses import dataclass

from shellfinder.config.host_keys import HostKeyVerifier
from shellfinder.config.settings import Settings


@dataclass
class Config:
    """Application configuration.

    Aggregates settings and host key policy.
    """

    settings: Settings
    host_keys: HostKeyVerifier

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment.

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()
        host_keys = HostKeyVerifier(
            known_hosts_path=os.getenv("SHELLFINDER_KNOWN_HOSTS"),
            strict_checking=Settings._get_bool("SHELLFINDER_STRICT_HOST_KEY_CHECKING", False),
        )
        return cls(settings=settings, host_keys=host_keys)

    @property
    def command_timeout(self) -> int:
        """Command timeout in seconds (0 disables)."""
        return self.settings.command_timeout

    @property
    def connect_timeout(self) -> int:
        """Connect/auth timeout in seconds."""
        return self.settings.connect_timeout

    @property
    def idle_timeout(self) -> int:
        """Session idle timeout in seconds (0 disables)."""
        return self.settings.idle_timeout

    @property
    def max_sessions(self) -> int:
        """Maximum number of open sessions."""
        return self.settings.max_sessions

    @property
    def http_host(self) -> str:
        """HTTP server bind address."""
        return self.settings.http_host

    @property
    def http_port(self) -> int:
        """HTTP server port."""
        return self.settings.http_port

    @property
    def known_hosts_path(self) -> str | None:
        """Path to known_hosts file or None if disabled."""
        return self.host_keys.get_known_hosts_path()
