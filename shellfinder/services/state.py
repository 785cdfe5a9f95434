"""Global state management for shellfinder."""

from shellfinder.config import Config
from shellfinder.services.registry import SessionRegistry

# Global state (initialized on first access)
_config: Config | None = None
_registry: SessionRegistry | None = None


def get_config() -> Config:
    """Get or create config."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def get_registry() -> SessionRegistry:
    """Get or create the session registry."""
    global _registry
    if _registry is None:
        config = get_config()
        _registry = SessionRegistry(
            idle_timeout=config.idle_timeout,
            max_sessions=config.max_sessions,
            known_hosts=config.known_hosts_path,
            connect_timeout=config.connect_timeout,
            command_timeout=config.command_timeout,
        )
    return _registry


def reset_state() -> None:
    """Reset global state for testing.

    Clears the singleton instances so tests start with fresh state.
    """
    global _config, _registry
    _config = None
    _registry = None


def set_config(config: Config) -> None:
    """Set the global config instance.

    Args:
        config: Config instance to use globally.
    """
    global _config
    _config = config


def set_registry(registry: SessionRegistry) -> None:
    """Set the global registry instance.

    Args:
        registry: SessionRegistry instance to use globally.
    """
    global _registry
    _registry = registry
