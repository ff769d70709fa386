"""
Expand a Go release archive into an installation directory.

Release archives wrap everything in a top-level "go/" directory; that
prefix is stripped, so "go/bin/go" lands at "<target>/bin/go". Two
formats are supported, chosen by file name:

- .tar.gz: entries are streamed in order; the first unsafe or unsupported
  entry aborts the extraction
- .zip: entries are read from the central directory and checked one by one

Extraction is not transactional. A failure leaves the entries written so
far in place; a later run overwrites them file by file.
"""

import os
import stat
import sys
import tarfile
import time
import zipfile
from pathlib import Path
from typing import BinaryIO

from . import config, platforms
from .errors import ShortWrite, UnsafeArchiveEntry, UnsupportedArchiveFormat, UnsupportedEntryType

COPY_CHUNK_SIZE = 1024 * 1024


def is_valid_rel_path(name: str) -> bool:
    """Return False for empty, absolute, backslashed or parent-traversing entry names."""
    if not name or "\\" in name or name.startswith("/"):
        return False
    # Drive-relative on Windows
    if ":" in name and platforms.is_windows():
        return False
    return ".." not in name.split("/")


def strip_root_prefix(name: str) -> str:
    """Remove the archive's wrapping "go/" directory from an entry name."""
    root = config.ARCHIVE_ROOT_PREFIX
    if name == root.rstrip("/"):
        return ""
    return name.removeprefix(root)


def resolve_entry(target_dir: Path, name: str, is_dir: bool = False) -> Path:
    """
    Map an archive entry name to its destination under target_dir.

    Only a directory entry may resolve to target_dir itself.

    Raises:
        UnsafeArchiveEntry: If the name could escape target_dir
    """
    if not is_valid_rel_path(name):
        raise UnsafeArchiveEntry(name)
    rel = strip_root_prefix(name).rstrip("/")
    if not rel:
        if not is_dir:
            raise UnsafeArchiveEntry(name)
        return target_dir
    if not is_valid_rel_path(rel):
        raise UnsafeArchiveEntry(name)
    return target_dir.joinpath(*rel.split("/"))


def _write_file(path: Path, source: BinaryIO, size: int, mode: int) -> None:
    """Create or truncate path with mode and copy exactly size bytes into it."""
    fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0), mode)
    written = 0
    with os.fdopen(fd, "wb") as out:
        for chunk in iter(lambda: source.read(COPY_CHUNK_SIZE), b""):
            out.write(chunk)
            written += len(chunk)
    if written != size:
        raise ShortWrite(str(path), written, size)


def _set_mtime(path: Path, mtime: float) -> None:
    if not mtime:
        return
    try:
        os.utime(path, (mtime, mtime))
    except OSError as e:
        # Non-fatal
        print(f"error changing modtime: {e}", file=sys.stderr)


def unpack_tar_gz(target_dir: Path, archive_file: Path) -> None:
    """Stream a .tar.gz archive into target_dir."""
    made_dirs: set[Path] = set()
    with tarfile.open(archive_file, "r|gz") as tar:
        for member in tar:
            path = resolve_entry(target_dir, member.name, is_dir=member.isdir())
            if member.isreg():
                if path.parent not in made_dirs:
                    path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
                    made_dirs.add(path.parent)
                source = tar.extractfile(member)
                _write_file(path, source, member.size, member.mode & 0o777)
                _set_mtime(path, member.mtime)
            elif member.isdir():
                path.mkdir(mode=0o755, parents=True, exist_ok=True)
                made_dirs.add(path)
            else:
                raise UnsupportedEntryType(member.name, _tar_type_name(member))


def _tar_type_name(member: tarfile.TarInfo) -> str:
    if member.issym():
        return "symlink"
    if member.islnk():
        return "hardlink"
    if member.ischr():
        return "character device"
    if member.isblk():
        return "block device"
    if member.isfifo():
        return "fifo"
    return f"type {member.type!r}"


def unpack_zip(target_dir: Path, archive_file: Path) -> None:
    """Extract a .zip archive into target_dir."""
    with zipfile.ZipFile(archive_file) as zf:
        for info in zf.infolist():
            path = resolve_entry(target_dir, info.filename, is_dir=info.is_dir())
            if info.is_dir():
                path.mkdir(mode=0o755, parents=True, exist_ok=True)
                continue

            unix_mode = info.external_attr >> 16
            if unix_mode and stat.S_ISLNK(unix_mode):
                raise UnsupportedEntryType(info.filename, "symlink")
            mode = (unix_mode & 0o777) or 0o644
            path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)

            with zf.open(info) as source:
                _write_file(path, source, info.file_size, mode)
            _set_mtime(path, time.mktime(info.date_time + (0, 0, -1)))


def unpack_archive(target_dir: Path | str, archive_file: Path | str) -> None:
    """
    Unpack a .zip or .tar.gz Go release archive into target_dir.

    Args:
        target_dir: Installation directory (created if missing)
        archive_file: Path to the downloaded archive

    Raises:
        UnsupportedArchiveFormat: If the file name is neither .zip nor .tar.gz
        UnsafeArchiveEntry: If an entry name could escape target_dir
        UnsupportedEntryType: If an entry is neither a file nor a directory
        ShortWrite: If an entry's data is shorter than its declared size
    """
    target_dir = Path(target_dir)
    archive_file = Path(archive_file)
    name = archive_file.name
    if name.endswith(".zip"):
        unpack = unpack_zip
    elif name.endswith(".tar.gz"):
        unpack = unpack_tar_gz
    else:
        raise UnsupportedArchiveFormat(str(archive_file))
    target_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    unpack(target_dir, archive_file)
