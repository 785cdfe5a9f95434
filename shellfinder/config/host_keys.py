"""SSH host key verification.

Resolves which known_hosts file asyncssh checks server keys against.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class HostKeyVerifier:
    """SSH host key verification manager.

    Users connect to arbitrary hosts, so a missing known_hosts file only
    disables verification unless strict checking is requested.
    """

    def __init__(
        self,
        known_hosts_path: str | None = None,
        strict_checking: bool = False,
    ):
        """Initialize host key verifier.

        Args:
            known_hosts_path: Path to known_hosts file or 'none' to disable
            strict_checking: Fail instead of disabling verification when
                the known_hosts file is missing

        Raises:
            FileNotFoundError: If strict mode and file missing
        """
        self.strict_checking = strict_checking
        self._known_hosts = self._resolve_known_hosts(known_hosts_path)

    def _resolve_known_hosts(self, env_value: str | None) -> str | None:
        """Resolve known_hosts path.

        Returns:
            Path to known_hosts file or None to disable verification

        Raises:
            FileNotFoundError: If strict mode and file missing
        """
        if env_value and env_value.lower() == "none":
            logger.warning(
                "SSH host key verification DISABLED (SHELLFINDER_KNOWN_HOSTS=none). "
                "Connections are vulnerable to MITM attacks."
            )
            return None

        if env_value:
            path = Path(os.path.expanduser(env_value))
        else:
            path = Path.home() / ".ssh" / "known_hosts"

        if not path.exists():
            if self.strict_checking:
                raise FileNotFoundError(
                    f"SSH host key verification required but known_hosts "
                    f"not found at {path}.\n\n"
                    f"Add host keys with: ssh-keyscan <hostname> >> {path}\n"
                    f"or disable verification (NOT RECOMMENDED): "
                    f"SHELLFINDER_KNOWN_HOSTS=none"
                )
            logger.warning(
                "known_hosts not found at %s, host key verification disabled",
                path,
            )
            return None

        return str(path)

    def get_known_hosts_path(self) -> str | None:
        """Get path to known_hosts file, or None if verification is disabled."""
        return self._known_hosts

    def is_enabled(self) -> bool:
        """Check if host key verification is enabled."""
        return self._known_hosts is not None
