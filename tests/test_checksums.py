"""Tests for SHA256 verification."""

import hashlib

import pytest

from godl.checksums import compute_sha256, verify_sha256
from godl.errors import ChecksumMismatch

DATA = b"go release archive bytes" * 1000


@pytest.fixture
def archive(tmp_path):
    path = tmp_path / "go1.24.3.linux-amd64.tar.gz"
    path.write_bytes(DATA)
    return path


def test_compute_sha256_reads_whole_file(archive):
    assert compute_sha256(archive) == hashlib.sha256(DATA).hexdigest()


def test_verify_accepts_matching_digest(archive):
    verify_sha256(archive, hashlib.sha256(DATA).hexdigest())


def test_verify_ignores_hex_case(archive):
    verify_sha256(archive, hashlib.sha256(DATA).hexdigest().upper())


def test_verify_rejects_other_digest(archive):
    wrong = hashlib.sha256(b"something else").hexdigest()
    with pytest.raises(ChecksumMismatch) as excinfo:
        verify_sha256(archive, wrong)

    err = excinfo.value
    assert err.path == str(archive)
    assert err.expected == wrong
    assert err.actual == hashlib.sha256(DATA).hexdigest()
    assert str(archive) in str(err)
    assert wrong in str(err)


def test_verify_rejects_empty_digest(archive):
    with pytest.raises(ChecksumMismatch):
        verify_sha256(archive, "")


def test_verify_missing_file_raises_oserror(tmp_path):
    with pytest.raises(FileNotFoundError):
        verify_sha256(tmp_path / "missing.tar.gz", "00")
