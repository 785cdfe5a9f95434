"""Logging middleware for MCP tool calls."""

import logging
import time
from typing import Any

from fastmcp.server.middleware import Middleware, MiddlewareContext

# Arguments never written to the log
REDACTED_ARGS = frozenset({"password", "private_key", "passphrase", "content"})


class LoggingMiddleware(Middleware):
    """Logs each tool call with its (redacted) arguments and duration."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        slow_threshold_ms: float = 1000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            slow_threshold_ms: Calls slower than this are logged at WARNING.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.slow_threshold_ms = slow_threshold_ms

    def _format_args(self, args: dict[str, Any] | None) -> str:
        """Format tool arguments, hiding credentials and file content."""
        if not args:
            return "()"
        parts = []
        for key, value in args.items():
            if key in REDACTED_ARGS and value:
                value = "***"
            elif isinstance(value, str) and len(value) > 50:
                value = value[:50] + "..."
            parts.append(f"{key}={value!r}")
        return f"({', '.join(parts)})"

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log tool calls with name, arguments, and timing."""
        start = time.perf_counter()
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, self._format_args(args))

        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! TOOL: %s -> %s: %s [%s]",
                tool_name,
                type(e).__name__,
                e,
                self._format_duration(duration_ms),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO
        self.logger.log(
            level,
            "<<< TOOL: %s [%s]",
            tool_name,
            self._format_duration(duration_ms),
        )
        return result
