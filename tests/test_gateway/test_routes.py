"""Tests for the HTTP gateway routes."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest
from starlette.applications import Starlette
from starlette.routing import Route
from starlette.testclient import TestClient

from shellfinder.gateway import ROUTES
from shellfinder.services import SessionRegistry, set_registry

from conftest import FakeRemote

CONNECT_BODY = {"host": "files.example.com", "username": "alice", "password": "pw"}


@pytest.fixture
def registry() -> SessionRegistry:
    registry = SessionRegistry()
    set_registry(registry)
    return registry


@pytest.fixture
def mock_connect(remote: FakeRemote) -> Iterator[AsyncMock]:
    with patch("asyncssh.connect", new_callable=AsyncMock) as mock:
        mock.side_effect = lambda *a, **kw: remote.connect()
        yield mock


@pytest.fixture
def client(registry: SessionRegistry, mock_connect: AsyncMock) -> Iterator[TestClient]:
    app = Starlette(
        routes=[Route(path, endpoint, methods=methods) for path, endpoint, methods in ROUTES]
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_id(client: TestClient) -> str:
    response = client.post("/api/connect", json=CONNECT_BODY)
    assert response.status_code == 200
    return response.json()["sessionId"]


class TestConnect:
    """Tests for POST /api/connect."""

    def test_connect_returns_session(self, client: TestClient, mock_connect: AsyncMock) -> None:
        response = client.post("/api/connect", json={**CONNECT_BODY, "port": 2222})

        assert response.status_code == 200
        body = response.json()
        assert body["homeDir"] == "/home/alice"
        assert body["message"] == "Connected successfully"
        assert body["sessionId"]
        assert mock_connect.call_args.kwargs["port"] == 2222

    @pytest.mark.parametrize(
        "body",
        [
            {"username": "alice", "password": "pw"},
            {"host": "h", "password": "pw"},
            {"host": "h", "username": "alice"},
        ],
    )
    def test_connect_missing_params(
        self, client: TestClient, mock_connect: AsyncMock, body: dict[str, str]
    ) -> None:
        response = client.post("/api/connect", json=body)

        assert response.status_code == 400
        assert "error" in response.json()
        mock_connect.assert_not_called()

    def test_connect_rejects_non_json(self, client: TestClient) -> None:
        response = client.post("/api/connect", content=b"host=h")

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be JSON"}

    def test_connect_failure(self, client: TestClient, mock_connect: AsyncMock) -> None:
        mock_connect.side_effect = OSError("Connection refused")

        response = client.post("/api/connect", json=CONNECT_BODY)

        assert response.status_code == 500
        assert "Connection refused" in response.json()["error"]


class TestListFiles:
    """Tests for GET /api/files."""

    def test_list_returns_tree_items(
        self, client: TestClient, remote: FakeRemote, session_id: str
    ) -> None:
        remote.add_file("/home/alice/a.txt", "x")
        remote.add_dir("/home/alice/sub")

        response = client.get(
            "/api/files",
            params={"sessionId": session_id, "path": "/home/alice", "showHidden": "false"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "/home/alice/a.txt": {
                "index": "/home/alice/a.txt",
                "isFolder": False,
                "data": {"name": "a.txt", "isDirectory": False, "path": "/home/alice/a.txt"},
            },
            "/home/alice/sub": {
                "index": "/home/alice/sub",
                "isFolder": True,
                "data": {"name": "sub", "isDirectory": True, "path": "/home/alice/sub"},
                "children": [],
            },
        }

    def test_list_defaults_to_home_and_hidden_flag(
        self, client: TestClient, remote: FakeRemote, session_id: str
    ) -> None:
        remote.add_file("/home/alice/.profile", "x")

        hidden = client.get("/api/files", params={"sessionId": session_id, "showHidden": "true"})
        visible = client.get("/api/files", params={"sessionId": session_id})

        assert list(hidden.json()) == ["/home/alice/.profile"]
        assert visible.json() == {}

    def test_list_unknown_session(self, client: TestClient) -> None:
        response = client.get("/api/files", params={"sessionId": "nope", "path": "/"})

        assert response.status_code == 404
        assert response.json() == {"error": "Session not found or expired"}

    def test_list_missing_session_id(self, client: TestClient) -> None:
        response = client.get("/api/files", params={"path": "/"})

        assert response.status_code == 400

    def test_list_command_failure(self, client: TestClient, session_id: str) -> None:
        response = client.get("/api/files", params={"sessionId": session_id, "path": "/nope"})

        assert response.status_code == 500
        assert "No such file or directory" in response.json()["stderr"]


class TestFileAccess:
    """Tests for GET and POST /api/file."""

    def test_read_file(self, client: TestClient, remote: FakeRemote, session_id: str) -> None:
        remote.add_file("/home/alice/index.html", "<h1>hi</h1>")

        response = client.get(
            "/api/file", params={"sessionId": session_id, "path": "/home/alice/index.html"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "content": "<h1>hi</h1>",
            "fileName": "index.html",
            "fileType": "html",
            "contentType": "text/html",
        }

    def test_read_missing_file(self, client: TestClient, session_id: str) -> None:
        response = client.get(
            "/api/file", params={"sessionId": session_id, "path": "/home/alice/nope"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to read file"
        assert body["stderr"]

    def test_read_requires_path(self, client: TestClient, session_id: str) -> None:
        response = client.get("/api/file", params={"sessionId": session_id})

        assert response.status_code == 400

    def test_write_then_read(self, client: TestClient, session_id: str) -> None:
        content = "echo \"$HOME\" `id`\nsecond line\n"

        saved = client.post(
            "/api/file",
            json={"sessionId": session_id, "path": "/home/alice/run.sh", "content": content},
        )
        read = client.get(
            "/api/file", params={"sessionId": session_id, "path": "/home/alice/run.sh"}
        )

        assert saved.status_code == 200
        assert saved.json() == {"message": "File saved successfully"}
        assert read.json()["content"] == content
        assert read.json()["contentType"] == "text/x-sh"

    def test_write_requires_content(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            "/api/file", json={"sessionId": session_id, "path": "/home/alice/x"}
        )

        assert response.status_code == 400

    def test_write_unknown_session(self, client: TestClient) -> None:
        response = client.post(
            "/api/file", json={"sessionId": "nope", "path": "/tmp/x", "content": ""}
        )

        assert response.status_code == 404

    def test_write_failure_reports_stage(self, client: TestClient, session_id: str) -> None:
        response = client.post(
            "/api/file",
            json={"sessionId": session_id, "path": "/missing/x.txt", "content": "x"},
        )

        assert response.status_code == 500
        assert response.json()["stage"] == "stage"
        assert response.json()["stderr"]


class TestDisconnect:
    """Tests for POST /api/disconnect."""

    def test_disconnect_twice(
        self, client: TestClient, registry: SessionRegistry, session_id: str
    ) -> None:
        first = client.post("/api/disconnect", json={"sessionId": session_id})
        second = client.post("/api/disconnect", json={"sessionId": session_id})

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json() == {"message": "Disconnected successfully"}
        assert registry.session_count == 0

    def test_disconnect_requires_session_id(self, client: TestClient) -> None:
        response = client.post("/api/disconnect", json={})

        assert response.status_code == 400
