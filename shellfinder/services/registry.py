"""SSH session registry.

Locking Strategy:
- `_lock`: Protects the `_sessions` mapping. Held only for dictionary
  operations, never across network I/O.
- Per-session locks (`Session.lock`): Serialize command execution on one
  connection, see services.executor.

Connections are opened and closed outside `_lock` so a slow handshake to
one host never blocks lookups for other sessions.
"""

import asyncio
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any

import asyncssh

from shellfinder.errors import ConnectionError, SessionNotFound, ShellFinderError
from shellfinder.models import ConnectionParams, Session
from shellfinder.services.executor import execute

logger = logging.getLogger(__name__)

HOME_FALLBACK = "/"


def new_session_id() -> str:
    """Generate an unpredictable session identifier."""
    return secrets.token_urlsafe(24)


class SessionRegistry:
    """Maps session ids to live SSH connections."""

    def __init__(
        self,
        idle_timeout: int = 0,
        max_sessions: int = 100,
        known_hosts: str | None = None,
        connect_timeout: int = 15,
        command_timeout: int = 30,
    ) -> None:
        """Initialize an empty registry.

        Args:
            idle_timeout: Seconds before unused sessions are closed, 0 to never expire
            max_sessions: Maximum number of open sessions (must be > 0)
            known_hosts: Path to known_hosts file, or None to disable verification
            connect_timeout: Seconds allowed for the connect/auth handshake
            command_timeout: Seconds allowed for each remote command, 0 for no limit

        Raises:
            ValueError: If max_sessions is not positive
        """
        if max_sessions <= 0:
            raise ValueError(f"max_sessions must be > 0, got {max_sessions}")

        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self.connect_timeout = connect_timeout
        self.command_timeout = command_timeout
        self._known_hosts = known_hosts
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()
        self._cleanup_task: asyncio.Task[Any] | None = None

        logger.info(
            "SessionRegistry initialized (idle_timeout=%ds, max_sessions=%d, "
            "host_key_verification=%s)",
            idle_timeout,
            max_sessions,
            "on" if known_hosts else "off",
        )

    async def _open_connection(
        self, params: ConnectionParams
    ) -> asyncssh.SSHClientConnection:
        """Open and authenticate a connection with exactly one credential kind."""
        auth: dict[str, Any]
        if params.uses_password:
            auth = {"password": params.password, "client_keys": None}
        else:
            try:
                key = asyncssh.import_private_key(
                    params.private_key or "", params.passphrase
                )
            except (asyncssh.KeyImportError, ValueError) as e:
                raise ConnectionError(params.host, f"Invalid private key: {e}") from e
            auth = {"client_keys": [key]}

        logger.info(
            "Opening SSH connection to %s@%s:%d",
            params.username,
            params.host,
            params.port,
        )
        try:
            return await asyncssh.connect(
                params.host,
                port=params.port,
                username=params.username,
                known_hosts=self._known_hosts,
                connect_timeout=self.connect_timeout or None,
                **auth,
            )
        except asyncio.TimeoutError as e:
            raise ConnectionError(params.host, "connection timed out") from e
        except (asyncssh.Error, OSError) as e:
            raise ConnectionError(params.host, e) from e

    async def _probe_home(self, session: Session) -> str:
        """Read the remote home directory, falling back to '/'."""
        try:
            result = await execute(
                session, "echo $HOME", timeout=self.command_timeout
            )
        except ShellFinderError as e:
            logger.warning("Could not determine home directory: %s", e)
            return HOME_FALLBACK

        home = result.output.strip().splitlines()[0] if result.output.strip() else ""
        if result.returncode != 0 or not home:
            logger.warning(
                "Could not determine home directory (exit=%d), using %s",
                result.returncode,
                HOME_FALLBACK,
            )
            return HOME_FALLBACK
        return home

    async def create(self, params: ConnectionParams) -> Session:
        """Open a connection and register a new session for it.

        Args:
            params: Host, port, username and one credential

        Returns:
            The registered session with its home directory resolved

        Raises:
            ConnectionError: If the host is unreachable, authentication fails,
                or the registry is full
        """
        async with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise ConnectionError(
                    params.host,
                    f"session limit reached ({self.max_sessions})",
                )

        conn = await self._open_connection(params)

        session_id = new_session_id()
        session = Session(id=session_id, connection=conn)
        session.home_directory = await self._probe_home(session)

        async with self._lock:
            if len(self._sessions) >= self.max_sessions:
                full = True
            else:
                full = False
                while session.id in self._sessions:
                    session.id = new_session_id()
                self._sessions[session.id] = session

        if full:
            conn.close()
            raise ConnectionError(
                params.host, f"session limit reached ({self.max_sessions})"
            )

        logger.info(
            "Session %s opened to %s@%s:%d, home=%s (sessions=%d)",
            session.id[:8],
            params.username,
            params.host,
            params.port,
            session.home_directory,
            len(self._sessions),
        )

        if self.idle_timeout > 0 and (
            self._cleanup_task is None or self._cleanup_task.done()
        ):
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.debug("Started session cleanup task")

        return session

    async def get(self, session_id: str) -> Session:
        """Look up a session.

        Raises:
            SessionNotFound: If no session has this id
        """
        async with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        session.touch()
        return session

    async def remove(self, session_id: str) -> bool:
        """Close a session's connection and forget it.

        Safe to call for unknown or already removed ids.

        Returns:
            True if a session was removed
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is None:
            logger.debug("No session to remove for %s", session_id[:8])
            return False

        session.close()
        logger.info(
            "Closed session %s (sessions=%d)",
            session_id[:8],
            len(self._sessions),
        )
        return True

    async def close_all(self) -> None:
        """Close every session and clear the registry."""
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()

        if sessions:
            logger.info("Closing all %d session(s)", len(sessions))
        for session in sessions:
            session.close()

        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            logger.debug("Cleanup task cancelled")

    async def _cleanup_loop(self) -> None:
        """Periodically close idle sessions."""
        interval = max(self.idle_timeout // 2, 1)
        logger.debug("Cleanup loop started (interval=%ds)", interval)
        while True:
            await asyncio.sleep(interval)
            await self._cleanup_idle()

            if not self._sessions:
                logger.debug("Cleanup loop stopped - no sessions remaining")
                break

    async def _cleanup_idle(self) -> None:
        """Close sessions that were idle too long or whose connection dropped."""
        cutoff = datetime.now() - timedelta(seconds=self.idle_timeout)
        expired: list[Session] = []

        async with self._lock:
            for session_id, session in list(self._sessions.items()):
                if session.lock.locked():
                    continue
                if session.last_used < cutoff or session.is_closed:
                    expired.append(self._sessions.pop(session_id))

        for session in expired:
            reason = "closed" if session.is_closed else "idle"
            logger.info("Expiring %s session %s", reason, session.id[:8])
            session.close()

    @property
    def session_count(self) -> int:
        """Return the number of open sessions."""
        return len(self._sessions)

    @property
    def session_ids(self) -> list[str]:
        """Return ids of open sessions."""
        return list(self._sessions.keys())
