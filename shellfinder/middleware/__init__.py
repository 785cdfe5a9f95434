"""shellfinder middleware components."""

from shellfinder.middleware.errors import ErrorHandlingMiddleware
from shellfinder.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
]
