"""Remote file read and write."""

import logging
import posixpath
import secrets

from shellfinder.errors import (
    FileReadError,
    FileWriteError,
    ShellFinderError,
    ValidationError,
)
from shellfinder.models import FileContent, Session
from shellfinder.services.executor import execute
from shellfinder.utils.mime import get_file_type, get_mime_type
from shellfinder.utils.shell import build_command, quote_path
from shellfinder.utils.validation import validate_path

logger = logging.getLogger(__name__)


def temp_path_for(path: str) -> str:
    """Pick a unique staging path next to the target.

    The staging file shares the target's directory so the final `mv` is a
    rename within one filesystem.
    """
    directory, name = posixpath.split(path)
    return posixpath.join(directory, f".{name}.{secrets.token_hex(8)}.tmp")


def relocate_command(temp_path: str, path: str) -> str:
    """Build the command that renames the staging file onto the target.

    `mv` onto an existing directory moves the file into it and exits 0, so
    the rename only runs when the target is not a directory. The `[` test
    fails without printing anything.
    """
    guard = build_command("[", "!", "-d", path, "]")
    return f"{guard} && {build_command('mv', '-f', '--', temp_path, path)}"


async def read_file(
    session: Session,
    path: str,
    timeout: float | None = None,
) -> FileContent:
    """Read a remote text file.

    Args:
        session: Session to read through
        path: Remote file path
        timeout: Command timeout in seconds

    Returns:
        FileContent with name, extension and MIME type derived from the path

    Raises:
        ValidationError: If the path contains control characters
        FileReadError: If `cat` exits non-zero; carries the remote stderr
    """
    path = validate_path(path)
    result = await execute(session, build_command("cat", "--", path), timeout=timeout)

    if result.returncode != 0:
        raise FileReadError(
            "Failed to read file",
            stderr=result.error,
            returncode=result.returncode,
        )

    file_type = get_file_type(path)
    return FileContent(
        content=result.output,
        file_name=posixpath.basename(path),
        file_type=file_type,
        content_type=get_mime_type(file_type),
    )


async def write_file(
    session: Session,
    path: str,
    content: str,
    timeout: float | None = None,
) -> None:
    """Replace a remote file's content.

    The content is streamed to a staging file on stdin, then renamed onto
    the target, so readers see either the old or the new file and never a
    partial one. Concurrent writers to one path race only at the rename.

    Args:
        session: Session to write through
        path: Remote file path
        content: New file content, written verbatim
        timeout: Timeout for each of the two commands, in seconds

    Raises:
        ValidationError: If the path contains control characters
        FileWriteError: With stage 'stage' if the staging file could not be
            written, or stage 'relocate' if the rename failed or the
            target is a directory
    """
    path = validate_path(path)
    if not posixpath.basename(path):
        raise ValidationError(f"path must name a file: {path!r}")
    temp_path = temp_path_for(path)

    staged = await execute(
        session,
        f"cat > {quote_path(temp_path)}",
        input=content,
        timeout=timeout,
    )
    if staged.returncode != 0:
        raise FileWriteError(
            "Failed to create temp file",
            stage="stage",
            stderr=staged.error,
            returncode=staged.returncode,
        )

    moved = await execute(
        session,
        relocate_command(temp_path, path),
        timeout=timeout,
    )
    if moved.returncode != 0:
        await _discard(session, temp_path, timeout)
        raise FileWriteError(
            "Failed to save file",
            stage="relocate",
            stderr=moved.error or f"{path}: Is a directory",
            returncode=moved.returncode,
        )

    logger.info("Saved %s (%d chars) on session %s", path, len(content), session.id[:8])


async def _discard(session: Session, temp_path: str, timeout: float | None) -> None:
    """Remove a staging file after a failed rename."""
    try:
        result = await execute(
            session, build_command("rm", "-f", "--", temp_path), timeout=timeout
        )
    except ShellFinderError as e:
        logger.warning("Could not remove staging file %s: %s", temp_path, e)
        return
    if result.returncode != 0:
        logger.warning("Could not remove staging file %s: %s", temp_path, result.error.strip())
