"""Utilities for shellfinder."""

from shellfinder.utils.console import ColorfulFormatter
from shellfinder.utils.mime import get_file_type, get_mime_type
from shellfinder.utils.shell import build_command, quote_path
from shellfinder.utils.validation import (
    validate_connection_params,
    validate_host,
    validate_path,
    validate_port,
)

__all__ = [
    "build_command",
    "ColorfulFormatter",
    "get_file_type",
    "get_mime_type",
    "quote_path",
    "validate_connection_params",
    "validate_host",
    "validate_path",
    "validate_port",
]
