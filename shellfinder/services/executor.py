"""Remote command execution on a session's connection."""

import asyncio
import logging
import time

import asyncssh

from shellfinder.errors import CommandTimeout, TransportError
from shellfinder.models import CommandResult, Session

logger = logging.getLogger(__name__)


def _to_text(data: str | bytes | None) -> str:
    """Normalize process output to text."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


async def execute(
    session: Session,
    command: str,
    input: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run one command on the session's connection.

    Commands on the same session are serialized by the session lock.
    asyncssh drains stdout and stderr concurrently until the channel
    closes, so a full stderr pipe can never stall stdout.

    The channel runs in binary mode: input is sent as UTF-8 and output is
    decoded here with replacement, so a file that is not valid UTF-8 reads
    with U+FFFD in place of bad bytes instead of failing the connection.
    stdin is closed right after the input, or immediately when there is
    none, so commands that read stdin always see EOF.

    Args:
        session: Session whose connection runs the command
        command: Complete command line; callers quote every interpolated value
        input: Text written to the command's stdin, then EOF (may be empty)
        timeout: Seconds to wait for the command to exit, None or 0 for no limit

    Returns:
        CommandResult with stdout, stderr, and exit status

    Raises:
        CommandTimeout: If the command did not exit in time (the channel is closed)
        TransportError: If the connection failed while the command was running
    """
    async with session.lock:
        start = time.perf_counter()
        try:
            result = await session.connection.run(
                command,
                input=input.encode("utf-8") if input else None,
                stdin=asyncssh.DEVNULL,
                check=False,
                timeout=timeout or None,
                encoding=None,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "Command timed out on session %s after %ss",
                session.id[:8],
                timeout,
            )
            raise CommandTimeout(f"Command timed out after {timeout}s") from e
        except (asyncssh.Error, OSError) as e:
            logger.error("Transport failure on session %s: %s", session.id[:8], e)
            raise TransportError(f"Connection failure: {e}") from e
        finally:
            session.touch()

    returncode = result.returncode if result.returncode is not None else -1
    logger.debug(
        "Command on session %s exited %d [%.1fms]",
        session.id[:8],
        returncode,
        (time.perf_counter() - start) * 1000,
    )
    return CommandResult(
        output=_to_text(result.stdout),
        error=_to_text(result.stderr),
        returncode=returncode,
    )
