"""HTTP routes for the file browser client.

Thin JSON wrappers around the registry and file services. Every
ShellFinderError becomes a ``{error, stderr?}`` body with the error's
status code.
"""

import functools
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from shellfinder.errors import ShellFinderError, ValidationError
from shellfinder.models import DirectoryEntry
from shellfinder.services import (
    get_config,
    get_registry,
    list_directory,
    read_file,
    write_file,
)
from shellfinder.utils.validation import validate_connection_params

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]


def json_errors(endpoint: Endpoint) -> Endpoint:
    """Translate raised errors into JSON error responses."""

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        try:
            return await endpoint(request)
        except ShellFinderError as e:
            logger.warning(
                "%s %s -> %d %s",
                request.method,
                request.url.path,
                e.status_code,
                e.message,
            )
            return JSONResponse(e.to_dict(), status_code=e.status_code)
        except Exception as e:
            logger.exception("%s %s failed", request.method, request.url.path)
            return JSONResponse({"error": str(e) or type(e).__name__}, status_code=500)

    return wrapper


async def _json_body(request: Request) -> dict[str, Any]:
    """Parse a JSON object request body."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be JSON") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _command_timeout() -> int:
    return get_config().command_timeout


def format_tree(entries: list[DirectoryEntry]) -> dict[str, dict[str, Any]]:
    """Key entries by path in the shape the tree view consumes.

    Directories get an empty ``children`` list, filled when expanded.
    """
    tree: dict[str, dict[str, Any]] = {}
    for entry in entries:
        item: dict[str, Any] = {
            "index": entry.path,
            "isFolder": entry.is_directory,
            "data": {
                "name": entry.name,
                "isDirectory": entry.is_directory,
                "path": entry.path,
            },
        }
        if entry.is_directory:
            item["children"] = []
        tree[entry.path] = item
    return tree


@json_errors
async def connect(request: Request) -> Response:
    """POST /api/connect"""
    body = await _json_body(request)
    params = validate_connection_params(
        host=body.get("host"),
        username=body.get("username"),
        port=body.get("port"),
        password=body.get("password"),
        private_key=body.get("privateKey"),
        passphrase=body.get("passphrase"),
    )
    session = await get_registry().create(params)
    return JSONResponse(
        {
            "sessionId": session.id,
            "homeDir": session.home_directory,
            "message": "Connected successfully",
        }
    )


@json_errors
async def list_files(request: Request) -> Response:
    """GET /api/files?sessionId=&path=&showHidden="""
    session_id = request.query_params.get("sessionId")
    if not session_id:
        raise ValidationError("Session ID is required")

    session = await get_registry().get(session_id)
    path = request.query_params.get("path") or session.home_directory or "/"
    show_hidden = request.query_params.get("showHidden", "").lower() == "true"

    entries = await list_directory(
        session, path, include_hidden=show_hidden, timeout=_command_timeout()
    )
    return JSONResponse(format_tree(entries))


@json_errors
async def get_file(request: Request) -> Response:
    """GET /api/file?sessionId=&path="""
    session_id = request.query_params.get("sessionId")
    path = request.query_params.get("path")
    if not session_id or not path:
        raise ValidationError("Session ID and file path are required")

    session = await get_registry().get(session_id)
    file = await read_file(session, path, timeout=_command_timeout())
    return JSONResponse(
        {
            "content": file.content,
            "fileName": file.file_name,
            "fileType": file.file_type,
            "contentType": file.content_type,
        }
    )


@json_errors
async def save_file(request: Request) -> Response:
    """POST /api/file"""
    body = await _json_body(request)
    session_id = body.get("sessionId")
    path = body.get("path")
    content = body.get("content")
    if not session_id or not path or content is None:
        raise ValidationError("Session ID, file path, and content are required")
    if not isinstance(content, str):
        raise ValidationError("content must be a string")

    session = await get_registry().get(session_id)
    await write_file(session, path, content, timeout=_command_timeout())
    return JSONResponse({"message": "File saved successfully"})


@json_errors
async def disconnect(request: Request) -> Response:
    """POST /api/disconnect"""
    body = await _json_body(request)
    session_id = body.get("sessionId")
    if not session_id:
        raise ValidationError("Session ID is required")

    await get_registry().remove(session_id)
    return JSONResponse({"message": "Disconnected successfully"})


# (path, endpoint, methods)
ROUTES: list[tuple[str, Endpoint, list[str]]] = [
    ("/api/connect", connect, ["POST"]),
    ("/api/files", list_files, ["GET"]),
    ("/api/file", get_file, ["GET"]),
    ("/api/file", save_file, ["POST"]),
    ("/api/disconnect", disconnect, ["POST"]),
]
