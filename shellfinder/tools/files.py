"""MCP tools exposing the session and file operations."""

import logging
from typing import Any

from fastmcp.exceptions import ToolError

from shellfinder.errors import ShellFinderError
from shellfinder.services import (
    get_config,
    get_registry,
    list_directory,
    read_file,
    write_file,
)
from shellfinder.utils.validation import validate_connection_params

logger = logging.getLogger(__name__)


def _tool_error(e: ShellFinderError) -> ToolError:
    """Fold the remote diagnostic into the tool error message."""
    if e.stderr:
        return ToolError(f"{e.message}: {e.stderr.strip()}")
    return ToolError(e.message)


async def ssh_connect(
    host: str,
    username: str,
    port: int = 22,
    password: str | None = None,
    private_key: str | None = None,
    passphrase: str | None = None,
) -> dict[str, str]:
    """Open an SSH session.

    Args:
        host: Remote host name or address.
        username: Login user.
        port: SSH port (default: 22).
        password: Password; takes precedence over private_key.
        private_key: Private key text (OpenSSH or PEM).
        passphrase: Passphrase for an encrypted private key.

    Returns:
        sessionId and homeDir of the new session.
    """
    try:
        params = validate_connection_params(
            host, username, port, password, private_key, passphrase
        )
        session = await get_registry().create(params)
    except ShellFinderError as e:
        raise _tool_error(e) from e
    return {"sessionId": session.id, "homeDir": session.home_directory}


async def ssh_list(
    session_id: str,
    path: str = "",
    show_hidden: bool = False,
) -> list[dict[str, Any]]:
    """List a remote directory.

    Args:
        session_id: Session returned by ssh_connect.
        path: Directory to list (default: the session's home directory).
        show_hidden: Include dot-files.

    Returns:
        Entries with name, isDirectory and path, in `ls` order.
    """
    try:
        session = await get_registry().get(session_id)
        entries = await list_directory(
            session,
            path or session.home_directory,
            include_hidden=show_hidden,
            timeout=get_config().command_timeout,
        )
    except ShellFinderError as e:
        raise _tool_error(e) from e
    return [
        {"name": e.name, "isDirectory": e.is_directory, "path": e.path}
        for e in entries
    ]


async def ssh_read(session_id: str, path: str) -> dict[str, str]:
    """Read a remote text file.

    Returns:
        content, fileName, fileType and contentType.
    """
    try:
        session = await get_registry().get(session_id)
        file = await read_file(session, path, timeout=get_config().command_timeout)
    except ShellFinderError as e:
        raise _tool_error(e) from e
    return {
        "content": file.content,
        "fileName": file.file_name,
        "fileType": file.file_type,
        "contentType": file.content_type,
    }


async def ssh_write(session_id: str, path: str, content: str) -> str:
    """Replace a remote file's content atomically."""
    try:
        session = await get_registry().get(session_id)
        await write_file(session, path, content, timeout=get_config().command_timeout)
    except ShellFinderError as e:
        raise _tool_error(e) from e
    return f"Saved {path}"


async def ssh_disconnect(session_id: str) -> str:
    """Close an SSH session. Unknown sessions are ignored."""
    await get_registry().remove(session_id)
    return "Disconnected successfully"
