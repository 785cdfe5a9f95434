"""Shared fixtures.

FakeRemote is an in-memory host that answers shellfinder's commands.
LoopbackHost is a real asyncssh server on 127.0.0.1 that replays canned
bytes, for behaviour that depends on asyncssh's channel handling.
"""

import asyncio
import posixpath
import shlex
from collections.abc import AsyncIterator, Iterator
from types import SimpleNamespace

import asyncssh
import pytest
import pytest_asyncio

from shellfinder.models import ConnectionParams, Session
from shellfinder.services import SessionRegistry, reset_state


class FakeRemote:
    """In-memory filesystem behind one or more fake SSH connections.

    Understands exactly the command shapes shellfinder sends: the home
    probe, `cat --`, `cat >`, `mv -f --` (optionally behind a `[ ! -d ]`
    guard), `rm -f --` and `LC_ALL=C ls`.
    """

    def __init__(self, home: str = "/home/alice") -> None:
        self.home = home
        self.files: dict[str, str] = {}
        self.dirs: set[str] = {"/", "/home", home}
        self.commands: list[str] = []

    def connect(self) -> "FakeConnection":
        return FakeConnection(self)

    def add_file(self, path: str, content: str = "") -> None:
        self.files[path] = content

    def add_dir(self, path: str) -> None:
        self.dirs.add(path)

    def _ok(self, stdout: str = "") -> SimpleNamespace:
        return SimpleNamespace(stdout=stdout, stderr="", returncode=0)

    def _fail(self, stderr: str, returncode: int = 1) -> SimpleNamespace:
        return SimpleNamespace(stdout="", stderr=stderr, returncode=returncode)

    async def run(self, command: str, input: str | None = None) -> SimpleNamespace:
        self.commands.append(command)
        argv = shlex.split(command)

        if argv == ["echo", "$HOME"]:
            return self._ok(f"{self.home}\n")

        if argv[:2] == ["cat", "--"]:
            path = argv[2]
            if path in self.dirs:
                return self._fail(f"cat: {path}: Is a directory\n")
            if path not in self.files:
                return self._fail(f"cat: {path}: No such file or directory\n")
            return self._ok(self.files[path])

        if argv[:2] == ["cat", ">"]:
            path = argv[2]
            if posixpath.dirname(path) not in self.dirs:
                return self._fail(f"sh: 1: cannot create {path}: Directory nonexistent\n", 2)
            data = input or ""
            # Written in two steps so a partial file is observable.
            self.files[path] = data[: len(data) // 2]
            await asyncio.sleep(0)
            self.files[path] = data
            return self._ok()

        if argv[:3] == ["[", "!", "-d"] and argv[4:6] == ["]", "&&"]:
            if argv[3] in self.dirs:
                # `[` prints nothing when the test is false
                return self._fail("")
            argv = argv[6:]

        if argv[:3] == ["mv", "-f", "--"]:
            src, dst = argv[3], argv[4]
            if src not in self.files:
                return self._fail(f"mv: cannot stat '{src}': No such file or directory\n")
            if dst in self.dirs:
                # Like POSIX mv: an existing directory receives the file.
                dst = posixpath.join(dst, posixpath.basename(src))
            if posixpath.dirname(dst) not in self.dirs:
                return self._fail(f"mv: cannot move '{src}' to '{dst}'\n")
            self.files[dst] = self.files.pop(src)
            return self._ok()

        if argv[:3] == ["rm", "-f", "--"]:
            self.files.pop(argv[3], None)
            return self._ok()

        if argv[:2] == ["LC_ALL=C", "ls"]:
            return self._ls(argv[3] if argv[3] != "--" else argv[4], "a" in argv[2])

        return self._fail(f"sh: 1: {argv[0]}: not found\n", 127)

    def _ls(self, path: str, show_all: bool) -> SimpleNamespace:
        if path not in self.dirs:
            return self._fail(
                f"ls: cannot access '{path}': No such file or directory\n", 2
            )

        children: list[tuple[str, bool, int]] = []
        for d in self.dirs:
            if d != path and posixpath.dirname(d) == path:
                children.append((posixpath.basename(d), True, 4096))
        for f, content in self.files.items():
            if posixpath.dirname(f) == path:
                children.append((posixpath.basename(f), False, len(content)))
        if show_all:
            children += [(".", True, 4096), ("..", True, 4096)]
        else:
            children = [c for c in children if not c[0].startswith(".")]

        lines = [f"total {len(children) * 4}"]
        for name, is_dir, size in sorted(children):
            mode = "drwxr-xr-x" if is_dir else "-rw-r--r--"
            lines.append(f"{mode} 2 alice alice {size:>5} Oct 17 09:30 {name}")
        return self._ok("\n".join(lines) + "\n")


class FakeConnection:
    """Stands in for asyncssh.SSHClientConnection."""

    def __init__(self, remote: FakeRemote) -> None:
        self.remote = remote
        self.closed = False

    async def run(
        self,
        command: str,
        input: bytes | None = None,
        stdin: object = None,
        check: bool = False,
        timeout: float | None = None,
        encoding: str | None = "utf-8",
    ) -> SimpleNamespace:
        if self.closed:
            raise OSError("connection closed")
        if isinstance(input, bytes):
            input = input.decode("utf-8")
        result = await self.remote.run(command, input=input)
        if encoding is None:
            result.stdout = result.stdout.encode("utf-8")
            result.stderr = result.stderr.encode("utf-8")
        return result

    def is_closed(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_state() -> Iterator[None]:
    """Give every test fresh global config and registry."""
    reset_state()
    yield
    reset_state()


@pytest.fixture
def remote() -> FakeRemote:
    """A fake remote host with an empty home directory."""
    return FakeRemote()


@pytest.fixture
def session(remote: FakeRemote) -> Session:
    """A session connected to the fake remote host."""
    return Session(id="session-a", connection=remote.connect(), home_directory=remote.home)


class LoopbackHost:
    """Replays raw bytes per exact command line and records what arrived on stdin."""

    def __init__(self) -> None:
        self.outputs: dict[str, bytes] = {"echo $HOME": b"/home/alice\n"}
        self.stdin: dict[str, bytes] = {}
        self.port = 0

    async def handle(self, process: asyncssh.SSHServerProcess) -> None:
        command = process.command or ""
        # Waits for EOF, so a client that never closes stdin hangs here.
        self.stdin[command] = await process.stdin.read()
        process.stdout.write(self.outputs.get(command, b""))
        process.exit(0)


class _PasswordServer(asyncssh.SSHServer):
    def password_auth_supported(self) -> bool:
        return True

    def validate_password(self, username: str, password: str) -> bool:
        return password == "pw"


@pytest_asyncio.fixture
async def loopback() -> AsyncIterator[LoopbackHost]:
    """A listening asyncssh server in binary mode."""
    host = LoopbackHost()
    server = await asyncssh.create_server(
        _PasswordServer,
        "127.0.0.1",
        0,
        server_host_keys=[asyncssh.generate_private_key("ssh-ed25519")],
        process_factory=host.handle,
        encoding=None,
    )
    host.port = server.get_port()
    yield host
    server.close()
    await server.wait_closed()


@pytest_asyncio.fixture
async def loopback_session(loopback: LoopbackHost) -> AsyncIterator[Session]:
    """A session opened through the registry against the loopback server."""
    registry = SessionRegistry()
    session = await registry.create(
        ConnectionParams(
            host="127.0.0.1", port=loopback.port, username="alice", password="pw"
        )
    )
    yield session
    await registry.close_all()
