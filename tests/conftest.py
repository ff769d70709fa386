"""Shared fixtures: a local release server and signal handler cleanup.

All tests are offline-safe; HTTP goes to a server bound to 127.0.0.1.
"""

import http.server
import signal
import threading
from dataclasses import dataclass, field

import pytest

from .archives import sha256_hex

PROXY_VARS = ["http_proxy", "https_proxy", "all_proxy", "HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "no_proxy", "NO_PROXY"]


# ---------------------------------------------------------------------------
# Release server
# ---------------------------------------------------------------------------


@dataclass
class Route:
    body: bytes = b""
    status: int = 200
    # Content-Length overrides for HEAD and GET answers
    head_length: int | None = None
    get_length: int | None = None


@dataclass
class ReleaseServer:
    url: str
    routes: dict[str, Route] = field(default_factory=dict)
    requests: list[tuple[str, str, dict[str, str]]] = field(default_factory=list)

    def add_release(self, filename: str, archive: bytes, checksum: str | None = None) -> None:
        """Publish an archive and its .sha256 sidecar."""
        self.routes["/" + filename] = Route(archive)
        digest = checksum if checksum is not None else sha256_hex(archive)
        self.routes["/" + filename + ".sha256"] = Route(f"{digest}\n".encode())

    def calls(self, method: str | None = None) -> list[str]:
        return [path for m, path, _ in self.requests if method is None or m == method]


class _ReleaseHandler(http.server.BaseHTTPRequestHandler):
    release: ReleaseServer

    def do_HEAD(self) -> None:
        self._respond(head=True)

    def do_GET(self) -> None:
        self._respond(head=False)

    def _respond(self, head: bool) -> None:
        self.release.requests.append((self.command, self.path, {k.lower(): v for k, v in self.headers.items()}))
        route = self.release.routes.get(self.path)
        if route is None:
            route = Route(b"not found", status=404)
        override = route.head_length if head else route.get_length
        self.send_response(route.status)
        self.send_header("Content-Length", str(len(route.body) if override is None else override))
        self.end_headers()
        if not head:
            self.wfile.write(route.body)

    def log_message(self, format, *args) -> None:
        pass


@pytest.fixture
def release_server(monkeypatch):
    """Serve releases from memory and point the download base at them."""
    for var in PROXY_VARS:
        monkeypatch.delenv(var, raising=False)

    release = ReleaseServer(url="")
    handler = type("Handler", (_ReleaseHandler,), {"release": release})
    server = http.server.ThreadingHTTPServer(("127.0.0.1", 0), handler)
    release.url = f"http://127.0.0.1:{server.server_address[1]}"
    monkeypatch.setenv("GODL_DOWNLOAD_BASE", release.url + "/")

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield release
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    """Put back handlers the launcher replaces so pytest keeps its Ctrl+C behaviour."""
    sigs = [signal.SIGINT]
    if hasattr(signal, "SIGQUIT"):
        sigs.append(signal.SIGQUIT)
    saved = {sig: signal.getsignal(sig) for sig in sigs}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)
