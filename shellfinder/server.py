"""shellfinder server.

Wires the HTTP gateway routes and the MCP tools to the session services.
All business logic lives in services/.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Mount, Route

from shellfinder.config import Settings
from shellfinder.gateway import ROUTES
from shellfinder.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from shellfinder.services import get_config, get_registry
from shellfinder.tools import (
    ssh_connect,
    ssh_disconnect,
    ssh_list,
    ssh_read,
    ssh_write,
)
from shellfinder.utils.console import ColorfulFormatter


def _configure_logging(settings: Settings | None = None) -> None:
    """Configure colorful logging for the shellfinder package.

    Called at module load time so logging is configured before any
    loggers are used, regardless of how the server is started.

    Args:
        settings: Settings to apply, defaults to the environment
    """
    settings = settings or Settings.from_env()
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("shellfinder")
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    if not package_logger.handlers:
        package_logger.addHandler(logging.StreamHandler(sys.stderr))
        package_logger.propagate = False
    for handler in package_logger.handlers:
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))

    for noisy_logger in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "asyncssh",
        "fastmcp",
        "mcp",
        "starlette",
        "anyio",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


def configure_middleware(server: FastMCP) -> None:
    """Add MCP middleware: ErrorHandling (innermost) then Logging."""
    settings = get_config().settings
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(LoggingMiddleware())


def create_server() -> FastMCP:
    """Create the MCP server with its tools and middleware."""
    server = FastMCP("shellfinder")

    configure_middleware(server)

    for tool in (ssh_connect, ssh_list, ssh_read, ssh_write, ssh_disconnect):
        server.tool()(tool)

    return server


async def health_check(request: Request) -> PlainTextResponse:
    """Health check endpoint."""
    client_host = request.client.host if request.client else "unknown"
    logger.debug("Health check from %s", client_host)
    return PlainTextResponse("OK")


async def close_sessions() -> None:
    """Close every open SSH session."""
    registry = get_registry()
    if registry.session_count > 0:
        logger.info("Closing %d open session(s)", registry.session_count)
    await registry.close_all()


def create_app(server: FastMCP | None = None) -> Starlette:
    """Build the ASGI app: REST routes, /health, and MCP under /mcp.

    Args:
        server: MCP server to mount, defaults to a new one

    Returns:
        Starlette application whose shutdown closes all sessions
    """
    server = server or create_server()
    config = get_config()
    mcp_app = server.http_app(path="/mcp")

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info("shellfinder starting up")
        async with mcp_app.lifespan(app):
            try:
                logger.info("shellfinder ready to accept connections")
                yield
            finally:
                logger.info("shellfinder shutting down")
                await close_sessions()
                logger.info("shellfinder shutdown complete")

    routes: list[Route | Mount] = [
        Route(path, endpoint, methods=methods) for path, endpoint, methods in ROUTES
    ]
    routes.append(Route("/health", health_check, methods=["GET"]))
    routes.append(Mount("/", app=mcp_app))

    return Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=config.settings.cors_origins,
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            )
        ],
        lifespan=lifespan,
    )


# Default server instance
mcp = create_server()
