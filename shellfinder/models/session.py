"""SSH session data models."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import asyncssh


@dataclass
class ConnectionParams:
    """Parameters for opening a new SSH session.

    Exactly one credential kind is used: the password when present,
    otherwise the private key.
    """

    host: str
    username: str
    port: int = 22
    password: str | None = None
    private_key: str | None = None
    passphrase: str | None = None

    @property
    def uses_password(self) -> bool:
        """Whether password authentication is used."""
        return bool(self.password)

    def __repr__(self) -> str:
        return (
            f"ConnectionParams(host={self.host!r}, port={self.port}, "
            f"username={self.username!r}, "
            f"auth={'password' if self.uses_password else 'key'})"
        )


@dataclass
class Session:
    """A connected SSH session.

    The session owns its connection: closing the session closes the
    connection. ``lock`` serializes command execution on the connection.
    """

    id: str
    connection: "asyncssh.SSHClientConnection"
    home_directory: str = "/"
    created_at: datetime = field(default_factory=datetime.now)
    last_used: datetime = field(default_factory=datetime.now)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def touch(self) -> None:
        """Update last-used timestamp."""
        self.last_used = datetime.now()

    @property
    def is_closed(self) -> bool:
        """Check if the underlying connection was closed."""
        return bool(self.connection.is_closed())

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()
