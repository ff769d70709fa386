"""
Download, verify and unpack a Go release into an installation directory.

install() is idempotent: once the ".unpacked-success" marker exists it
returns without touching the network. Otherwise it runs every step again,
reusing a previously downloaded archive whose size matches the server's.
The marker is written last, and atomically, so it is only ever present
after a fully verified and unpacked archive.

No lock is taken: two concurrent installs of the same version may both
download the archive, and the last writer wins.
"""

import http
import os
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from urllib.parse import urlsplit

from . import config, platforms
from .checksums import verify_sha256
from .errors import ArchiveError, DownloadSizeMismatch, ExtractionFailed, PlatformNotAvailable, ServerError
from .expand_archive import unpack_archive
from .fetch import Fetcher, status_text


def is_installed(target_dir: Path | str) -> bool:
    return (Path(target_dir) / config.UNPACKED_OKAY).exists()


def write_sentinel(target_dir: Path) -> Path:
    """Create the zero-byte success marker via a temporary file and rename."""
    sentinel = target_dir / config.UNPACKED_OKAY
    fd, tmp_name = tempfile.mkstemp(prefix=config.UNPACKED_OKAY + ".", dir=target_dir)
    os.close(fd)
    try:
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, sentinel)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return sentinel


def install(
    target_dir: Path | str,
    version: str,
    fetcher: Fetcher | None = None,
    goos: str | None = None,
    goarch: str | None = None,
) -> None:
    """
    Install a Go version to target_dir, creating the directory as needed.

    Args:
        target_dir: Installation directory for this version
        version: Release identifier (e.g., "go1.24.3")
        fetcher: HTTP client to use (default: a new Fetcher)
        goos: Go OS name (default: running OS)
        goarch: Go architecture name (default: running architecture)

    Raises:
        PlatformNotAvailable: If no release exists for this OS/architecture
        ServerError: If the server answers anything else but 200
        NetworkError: If the server cannot be reached
        DownloadSizeMismatch: If the downloaded archive has the wrong size
        ChecksumMismatch: If the archive does not match its published SHA256
        ExtractionFailed: If the archive cannot be unpacked
        OSError: On local file system failures
    """
    target_dir = Path(target_dir)
    if is_installed(target_dir):
        print(f"{version}: already downloaded in {target_dir}", file=sys.stderr)
        return

    fetcher = fetcher or Fetcher()
    goos = goos or platforms.get_os()
    goarch = goarch or platforms.get_arch()
    go_url = platforms.version_archive_url(version, goos, goarch)

    probe = fetcher.probe(go_url)
    if probe.status == http.HTTPStatus.NOT_FOUND:
        raise PlatformNotAvailable(version, goos, goarch, go_url)
    if probe.status != http.HTTPStatus.OK:
        raise ServerError(status_text(probe.status), go_url, action="checking size of")

    # Created only once the release is known to exist
    target_dir.mkdir(mode=0o755, parents=True, exist_ok=True)

    archive_file = target_dir / Path(urlsplit(go_url).path).name
    if not archive_file.exists() or archive_file.stat().st_size != probe.content_length:
        fetcher.download(go_url, archive_file)
        size = archive_file.stat().st_size
        if size != probe.content_length:
            raise DownloadSizeMismatch(str(archive_file), size, probe.content_length)

    want_sha = fetcher.fetch_text(go_url + config.CHECKSUM_SUFFIX)
    verify_sha256(archive_file, want_sha.strip())

    print(f"Unpacking {archive_file} ...", file=sys.stderr)
    try:
        unpack_archive(target_dir, archive_file)
    except (ArchiveError, tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as e:
        raise ExtractionFailed(str(archive_file), e) from e

    write_sentinel(target_dir)
    print(f"Success. You may now run '{version}'", file=sys.stderr)
