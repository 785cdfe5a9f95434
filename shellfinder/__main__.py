"""Entry point for the shellfinder server."""

import logging

import uvicorn

from shellfinder.server import create_app, mcp
from shellfinder.services import get_config

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the HTTP gateway (REST routes plus MCP under /mcp)."""
    config = get_config()
    logger.info(
        "Starting shellfinder (host=%s, port=%d, command_timeout=%ds)",
        config.http_host,
        config.http_port,
        config.command_timeout,
    )
    uvicorn.run(
        create_app(mcp),
        host=config.http_host,
        port=config.http_port,
        log_level="warning",
    )


if __name__ == "__main__":
    run_server()
