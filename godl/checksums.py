"""
SHA256 verification of downloaded release archives.
"""

import hashlib
from pathlib import Path

from .errors import ChecksumMismatch


def compute_sha256(file_path: Path | str) -> str:
    """
    Compute SHA256 checksum of a file.

    Args:
        file_path: Path to the file

    Returns:
        SHA256 checksum as lowercase hex string
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        # Read file in chunks to handle large files
        for byte_block in iter(lambda: f.read(4096 * 1024), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()


def verify_sha256(file_path: Path | str, expected_checksum: str) -> None:
    """
    Verify the full contents of a file against an expected SHA256 digest.

    The hex comparison ignores case.

    Args:
        file_path: Path to the file to verify
        expected_checksum: Expected SHA256 checksum as hex

    Raises:
        ChecksumMismatch: If the digests differ
    """
    actual_checksum = compute_sha256(file_path)
    if actual_checksum != expected_checksum.lower():
        raise ChecksumMismatch(str(file_path), expected_checksum, actual_checksum)
