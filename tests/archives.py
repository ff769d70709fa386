"""Build small Go-release-shaped archives in memory."""

import hashlib
import io
import stat
import tarfile
import time
import zipfile

# (name, data, mode); data None means a directory
Entry = tuple[str, bytes | None, int]

GO_TREE: list[Entry] = [
    ("go/", None, 0o755),
    ("go/bin/", None, 0o755),
    ("go/bin/go", b"#!/bin/sh\necho go\n", 0o755),
    ("go/lib/foo.txt", b"foo contents\n", 0o644),
    ("go/pkg/", None, 0o755),
]

ENTRY_MTIME = 1_600_000_000


def make_tar_gz(entries: list[Entry]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data, mode in entries:
            info = tarfile.TarInfo(name)
            info.mode = mode
            info.mtime = ENTRY_MTIME
            if data is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def make_tar_gz_with_symlink(name: str, target: str) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        info = tarfile.TarInfo(name)
        info.type = tarfile.SYMTYPE
        info.linkname = target
        tar.addfile(info)
    return buf.getvalue()


def make_zip(entries: list[Entry]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data, mode in entries:
            info = zipfile.ZipInfo(name, date_time=time.localtime(ENTRY_MTIME)[:6])
            if data is None:
                info.external_attr = (stat.S_IFDIR | mode) << 16 | 0x10
                zf.writestr(info, b"")
            else:
                info.external_attr = (stat.S_IFREG | mode) << 16
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, data)
    return buf.getvalue()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
