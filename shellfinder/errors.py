"""Error taxonomy for session and file operations.

Every error carries the HTTP status the gateway answers with, so the
routes never have to know which layer raised it.
"""


class ShellFinderError(Exception):
    """Base class for all shellfinder errors."""

    status_code = 500

    def __init__(self, message: str, stderr: str | None = None):
        """Initialize error.

        Args:
            message: Human-readable error message
            stderr: Diagnostic text captured from the remote side, if any
        """
        self.message = message
        self.stderr = stderr
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        """Serialize to the ``{error, stderr?}`` response body."""
        body = {"error": self.message}
        if self.stderr is not None:
            body["stderr"] = self.stderr
        return body


class ValidationError(ShellFinderError, ValueError):
    """Missing or ill-formed request field. No remote call was made."""

    status_code = 400


class SessionNotFound(ShellFinderError, KeyError):
    """Unknown or expired session id."""

    status_code = 404

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("Session not found or expired")

    def __str__(self) -> str:
        return self.message


class ConnectionError(ShellFinderError):
    """Failed to establish an SSH connection."""

    def __init__(self, host: str, original_error: Exception | str):
        """Initialize connection error.

        Args:
            host: Host the connection was attempted to
            original_error: Transport error or diagnostic that caused the failure
        """
        self.host = host
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host}: {original_error}")


class CommandFailure(ShellFinderError):
    """A remote command exited with a non-zero status."""

    def __init__(self, message: str, stderr: str = "", returncode: int = 1):
        self.returncode = returncode
        super().__init__(message, stderr=stderr)


class FileReadError(CommandFailure):
    """The remote read command failed."""


class FileWriteError(CommandFailure):
    """A step of the stage-then-relocate write failed.

    ``stage`` is ``"stage"`` when writing the temporary file failed and
    ``"relocate"`` when moving it onto the target failed.
    """

    def __init__(self, message: str, stage: str, stderr: str = "", returncode: int = 1):
        self.stage = stage
        super().__init__(message, stderr=stderr, returncode=returncode)

    def to_dict(self) -> dict[str, str]:
        body = super().to_dict()
        body["stage"] = self.stage
        return body


class TransportError(ShellFinderError):
    """The connection failed while a command was running."""


class CommandTimeout(TransportError):
    """A remote command did not finish within the configured timeout."""

    status_code = 504
