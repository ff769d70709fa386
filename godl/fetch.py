"""
HTTP access to the Go release server.

A Fetcher owns one urllib opener, built from the environment's proxy
settings, and tags every request with a User-Agent naming the running
interpreter. It performs the three requests an install needs:

1. HEAD on the archive URL to learn whether it exists and its size
2. GET of the archive body, streamed to disk with progress output
3. GET of the small ".sha256" file published next to the archive
"""

import http
import http.client
import platform
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from . import config
from .errors import DownloadSizeMismatch, NetworkError, ServerError
from .progress import UNKNOWN_TOTAL, copy_with_progress

# Errors raised by urllib/http.client for transport-level failures
TRANSPORT_ERRORS = (urllib.error.URLError, http.client.HTTPException, ConnectionError, TimeoutError)


def interpreter_version() -> str:
    """Return the Python version, or "devel" for pre-release and locally modified builds."""
    version = platform.python_version()
    if sys.version_info.releaselevel != "final" or "+" in version:
        # Keep the header a single well-formed token
        return config.DEVEL_VERSION
    return version


def default_user_agent() -> str:
    return f"{config.USER_AGENT_PRODUCT}/{interpreter_version()}"


def status_text(code: int) -> str:
    """Return "404 Not Found" style text for a status code."""
    try:
        return f"{code} {http.HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


def content_length(headers) -> int:
    value = headers.get("Content-Length")
    if value is None:
        return UNKNOWN_TOTAL
    try:
        return int(value)
    except ValueError:
        return UNKNOWN_TOTAL


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a HEAD request."""

    status: int
    content_length: int


class Fetcher:
    """Perform the HTTP requests of an installation through one configured client."""

    def __init__(
        self,
        user_agent: str | None = None,
        opener: urllib.request.OpenerDirector | None = None,
        output: TextIO | None = None,
    ):
        """
        Args:
            user_agent: User-Agent header value (default: golang-dl/<python version>)
            opener: urllib opener to send requests through (default: one that
                honours http_proxy/https_proxy/no_proxy)
            output: Stream for download progress (default: stderr)
        """
        self.user_agent = user_agent or default_user_agent()
        self.opener = opener or urllib.request.build_opener(urllib.request.ProxyHandler())
        self.output = output

    def _request(self, url: str, method: str = "GET", headers: dict[str, str] | None = None) -> urllib.request.Request:
        try:
            request = urllib.request.Request(url, method=method)
        except ValueError as e:
            raise NetworkError(f"invalid URL {url}: {e}") from e
        request.add_header("User-Agent", self.user_agent)
        for key, value in (headers or {}).items():
            request.add_header(key, value)
        return request

    def probe(self, url: str) -> ProbeResult:
        """
        Send a HEAD request.

        Non-2xx statuses are returned, not raised, so the caller can tell
        a missing release apart from other server failures.

        Raises:
            NetworkError: If the server could not be reached
        """
        try:
            with self.opener.open(self._request(url, method="HEAD")) as response:
                return ProbeResult(response.status, content_length(response.headers))
        except urllib.error.HTTPError as e:
            e.close()
            return ProbeResult(e.code, content_length(e.headers))
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"checking size of {url}: {e}") from e

    def download(self, url: str, destination: Path | str) -> int:
        """
        Download url into destination, printing progress.

        Compression is refused and the connection is not reused, since the
        archive is already compressed and the byte count must match the
        advertised length. A failed download leaves no file behind.

        Returns:
            Number of bytes written

        Raises:
            ServerError: If the server does not answer 200
            DownloadSizeMismatch: If the body length differs from Content-Length
            NetworkError: On any transport failure
        """
        destination = Path(destination)
        total = UNKNOWN_TOTAL
        request = self._request(url, headers={"Accept-Encoding": "identity", "Connection": "close"})
        try:
            with open(destination, "wb") as f:
                with self.opener.open(request) as response:
                    if response.status != http.HTTPStatus.OK:
                        raise ServerError(status_text(response.status), url)
                    total = content_length(response.headers)
                    written = copy_with_progress(response, f, total=total, output=self.output)
            if total != UNKNOWN_TOTAL and written != total:
                raise DownloadSizeMismatch(str(destination), written, total)
        except urllib.error.HTTPError as e:
            e.close()
            destination.unlink(missing_ok=True)
            raise ServerError(status_text(e.code), url) from e
        except http.client.IncompleteRead as e:
            written = destination.stat().st_size if destination.exists() else 0
            destination.unlink(missing_ok=True)
            raise DownloadSizeMismatch(str(destination), written, total) from e
        except TRANSPORT_ERRORS as e:
            destination.unlink(missing_ok=True)
            raise NetworkError(f"error downloading {url}: {e}") from e
        except (KeyboardInterrupt, Exception):
            destination.unlink(missing_ok=True)
            raise
        return written

    def fetch_text(self, url: str) -> str:
        """
        GET a small text resource and return it decoded.

        Undecodable bytes are replaced rather than raised on, so a garbled
        checksum file fails verification instead of decoding.

        Raises:
            ServerError: If the server does not answer 200
            NetworkError: On any transport failure
        """
        try:
            with self.opener.open(self._request(url)) as response:
                if response.status != http.HTTPStatus.OK:
                    raise ServerError(status_text(response.status), url)
                return response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            e.close()
            raise ServerError(status_text(e.code), url) from e
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"reading {url}: {e}") from e
