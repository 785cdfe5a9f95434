"""Error handling middleware for MCP requests."""

import logging
import traceback
from collections import defaultdict
from typing import Any

from fastmcp.server.middleware import Middleware, MiddlewareContext

from shellfinder.errors import ShellFinderError


class ErrorHandlingMiddleware(Middleware):
    """Logs and counts errors, then re-raises them.

    Expected failures (ShellFinderError and the ToolErrors wrapping them)
    are logged at WARNING without a traceback; anything else is a bug and
    is logged at ERROR.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback for unexpected errors.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.include_traceback = include_traceback
        self._error_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Get error counts keyed by exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        """Reset error statistics."""
        self._error_counts.clear()

    @staticmethod
    def _is_expected(error: Exception) -> bool:
        return isinstance(error, ShellFinderError) or isinstance(
            error.__cause__, ShellFinderError
        )

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Pass the request on, logging any exception before re-raising it."""
        try:
            return await call_next(context)
        except Exception as e:
            error_type = type(e).__name__
            self._error_counts[error_type] += 1

            if self._is_expected(e):
                self.logger.warning("%s failed: %s: %s", context.method, error_type, e)
            elif self.include_traceback:
                self.logger.error(
                    "Error in %s: %s: %s\n%s",
                    context.method,
                    error_type,
                    e,
                    traceback.format_exc(),
                )
            else:
                self.logger.error("Error in %s: %s: %s", context.method, error_type, e)
            raise
