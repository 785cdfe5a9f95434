"""Services for shellfinder."""

from shellfinder.services.executor import execute
from shellfinder.services.files import read_file, write_file
from shellfinder.services.listing import list_directory, parse_listing
from shellfinder.services.registry import SessionRegistry
from shellfinder.services.state import (
    get_config,
    get_registry,
    reset_state,
    set_config,
    set_registry,
)

__all__ = [
    "SessionRegistry",
    "execute",
    "get_config",
    "get_registry",
    "list_directory",
    "parse_listing",
    "read_file",
    "reset_state",
    "set_config",
    "set_registry",
    "write_file",
]
