"""Path and input validation utilities."""

import re
from typing import Final

from shellfinder.errors import ValidationError
from shellfinder.models import ConnectionParams

# C0 control characters and DEL; a newline in a path would also break
# line-oriented parsing of remote output.
CONTROL_CHARS: Final[re.Pattern[str]] = re.compile(r"[\x00-\x1f\x7f]")

SUSPICIOUS_HOST_CHARS: Final[list[str]] = [
    "/", "\\", ";", "&", "|", "$", "`", " ", "\n", "\r", "\x00",
]


def validate_path(path: str | None, field_name: str = "path") -> str:
    """Validate a remote path before it is put on a command line.

    Args:
        path: The path to validate
        field_name: Request field name used in error messages

    Returns:
        The path, unchanged

    Raises:
        ValidationError: If the path is empty or contains control characters
    """
    if not path:
        raise ValidationError(f"{field_name} is required")

    if CONTROL_CHARS.search(path):
        raise ValidationError(f"{field_name} contains control characters: {path!r}")

    return path


def validate_host(host: str | None) -> str:
    """Validate a host name.

    Args:
        host: The host name to validate

    Returns:
        Validated host name

    Raises:
        ValidationError: If host name is invalid
    """
    if not host:
        raise ValidationError("host is required")

    if len(host) > 253:
        raise ValidationError(f"Host name too long: {len(host)} chars")

    for char in SUSPICIOUS_HOST_CHARS:
        if char in host:
            raise ValidationError(f"Host contains invalid characters: {host!r}")

    return host


def validate_port(port: int | str | None) -> int:
    """Validate an SSH port, defaulting to 22.

    Raises:
        ValidationError: If the port is not an integer in 1-65535
    """
    if port is None or port == "":
        return 22
    try:
        value = int(port)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid port: {port!r}") from e
    if not 1 <= value <= 65535:
        raise ValidationError(f"Port out of range: {value}")
    return value


def validate_connection_params(
    host: str | None,
    username: str | None,
    port: int | str | None = None,
    password: str | None = None,
    private_key: str | None = None,
    passphrase: str | None = None,
) -> ConnectionParams:
    """Validate connect request fields.

    Raises:
        ValidationError: If host or username is missing, or neither a
            password nor a private key is given
    """
    host = validate_host(host)
    if not username:
        raise ValidationError("username is required")
    if not password and not private_key:
        raise ValidationError("password or privateKey is required")

    return ConnectionParams(
        host=host,
        username=username,
        port=validate_port(port),
        password=password or None,
        private_key=None if password else private_key,
        passphrase=passphrase or None,
    )
