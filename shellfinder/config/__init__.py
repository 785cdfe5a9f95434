"""Configuration module for shellfinder.

- Config: Main configuration class (aggregates all components)
- HostKeyVerifier: Manages SSH host key verification
- Settings: Environment variable configuration
"""

from shellfinder.config.host_keys import HostKeyVerifier
from shellfinder.config.main import Config
from shellfinder.config.settings import Settings

__all__ = ["Config", "HostKeyVerifier", "Settings"]
