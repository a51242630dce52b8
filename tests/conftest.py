"""Shared fixtures: archive builders and a local HTTP server."""

from __future__ import annotations

import io
import logging
import tarfile
import threading
import time
import zipfile
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Mapping, Tuple, Union

import pytest

from flagdash_bootstrap.core import logging as fd_logging
from flagdash_bootstrap.core.logging import ROOT_LOGGER_NAME

# name -> content, or name -> (content, mode)
ArchiveEntries = Mapping[str, Union[bytes, Tuple[bytes, int]]]

FLAGDASH_ENV_VARS = (
    "FLAGDASH_REPO",
    "FLAGDASH_VERSION",
    "FLAGDASH_INSTALL_DIR",
    "FLAGDASH_RELEASE_HOST",
)


@pytest.fixture(autouse=True)
def isolated_flagdash_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the real ~/.flagdash and FLAGDASH_* settings."""
    home = tmp_path_factory.mktemp("flagdash-home")
    monkeypatch.setenv("FLAGDASH_HOME", str(home))
    for var in FLAGDASH_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop the handler configure_logging installs so it never holds a stale stream."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if fd_logging._handler is not None:
        root.removeHandler(fd_logging._handler)
        fd_logging._handler = None
    root.setLevel(logging.NOTSET)
    root.propagate = True


def _entry(value: Union[bytes, Tuple[bytes, int]]) -> Tuple[bytes, int]:
    if isinstance(value, tuple):
        return value
    return value, 0o755


def build_tar_gz(entries: ArchiveEntries) -> bytes:
    """Build a gzip-compressed tarball in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, value in entries.items():
            content, mode = _entry(value)
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = mode
            info.mtime = int(time.time())
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def build_zip(entries: ArchiveEntries) -> bytes:
    """Build a zip archive in memory, recording unix modes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, value in entries.items():
            content, mode = _entry(value)
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, content)
    return buffer.getvalue()


@pytest.fixture
def tar_gz_factory() -> Callable[[ArchiveEntries], bytes]:
    return build_tar_gz


@pytest.fixture
def zip_factory() -> Callable[[ArchiveEntries], bytes]:
    return build_zip


@dataclass
class RecordedRequest:
    path: str
    headers: Dict[str, str]


@dataclass
class LocalServer:
    """Handle on a running test server."""

    base_url: str
    routes: Dict[str, Tuple[int, Dict[str, str], bytes]] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def add(
        self,
        path: str,
        body: bytes = b"",
        status: int = 200,
        headers: Union[Dict[str, str], None] = None,
    ) -> None:
        self.routes[path] = (status, headers or {}, body)

    def redirect(self, path: str, location: str, status: int = 302) -> None:
        self.routes[path] = (status, {"Location": location}, b"")

    def paths_requested(self) -> List[str]:
        return [r.path for r in self.requests]


@pytest.fixture
def http_server() -> Iterator[LocalServer]:
    """Serve canned responses from 127.0.0.1 on a random port."""

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            state.requests.append(RecordedRequest(self.path, dict(self.headers)))
            route = state.routes.get(self.path)
            if route is None:
                status, headers, body = 404, {}, b'{"message": "Not Found"}'
            else:
                status, headers, body = route
            self.send_response(status)
            for key, value in headers.items():
                self.send_header(key, value)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    host, port = server.server_address[:2]
    state = LocalServer(base_url=f"http://{host}:{port}")

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield state
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
