"""
Exceptions raised by the download, unpack and run pipeline.

Every failure is fatal for the current invocation; the command line layer
reports the message on stderr and exits non-zero.
"""


class GodlError(RuntimeError):
    """Base class for all launcher errors."""


class ResolutionError(GodlError):
    """The installation directory could not be determined."""


class NetworkError(GodlError):
    """A metadata probe, sidecar fetch or body download failed."""


class PlatformNotAvailable(NetworkError):
    """The server has no binary release for this OS/architecture."""

    def __init__(self, version: str, goos: str, goarch: str, url: str):
        super().__init__(f"no binary release of {version} for {goos}/{goarch} at {url}")
        self.version = version
        self.goos = goos
        self.goarch = goarch
        self.url = url


class ServerError(NetworkError):
    """The server answered with an unexpected status."""

    def __init__(self, status: str, url: str, action: str = "fetching"):
        super().__init__(f"server returned {status} {action} {url}")
        self.status = status
        self.url = url


class DownloadSizeMismatch(GodlError):
    """The downloaded byte count differs from the advertised length."""

    def __init__(self, path: str, actual: int, expected: int):
        super().__init__(f"downloaded file {path} size {actual} doesn't match server size {expected}")
        self.path = path
        self.actual = actual
        self.expected = expected


class ChecksumMismatch(GodlError):
    """A file's SHA256 digest differs from the published one."""

    def __init__(self, path: str, expected: str, actual: str):
        super().__init__(f"{path} corrupt? does not have expected SHA-256 of {expected} (got {actual})")
        self.path = path
        self.expected = expected
        self.actual = actual


class ArchiveError(GodlError):
    """Base class for archive extraction failures."""


class UnsafeArchiveEntry(ArchiveError):
    def __init__(self, name: str):
        super().__init__(f"archive contained invalid name {name!r}")
        self.name = name


class UnsupportedEntryType(ArchiveError):
    def __init__(self, name: str, entry_type: str):
        super().__init__(f"archive entry {name} contained unsupported file type {entry_type}")
        self.name = name
        self.entry_type = entry_type


class UnsupportedArchiveFormat(ArchiveError):
    def __init__(self, path: str):
        super().__init__(f"unsupported archive file: {path}")
        self.path = path


class ShortWrite(ArchiveError):
    def __init__(self, path: str, written: int, expected: int):
        super().__init__(f"only wrote {written} bytes to {path}; expected {expected}")
        self.path = path
        self.written = written
        self.expected = expected


class ExtractionFailed(GodlError):
    """Unpacking a downloaded archive failed; wraps the underlying error."""

    def __init__(self, archive: str, cause: Exception):
        super().__init__(f"extracting archive {archive}: {cause}")
        self.archive = archive


class NotInstalled(GodlError):
    """Delegation was attempted before a successful download."""

    def __init__(self, version: str, root: str):
        super().__init__(f"not downloaded. Run '{version} download' to install to {root}")
        self.version = version
        self.root = root


class DelegateSpawnFailure(GodlError):
    """The delegated executable is missing or could not be started."""
