"""Tests for the OS/architecture to archive URL mapping."""

import pytest

from godl import platforms


@pytest.fixture(autouse=True)
def default_base(monkeypatch):
    monkeypatch.delenv("GODL_DOWNLOAD_BASE", raising=False)


@pytest.mark.parametrize(
    "goos, goarch, expected",
    [
        ("linux", "amd64", "https://dl.google.com/go/go1.24.3.linux-amd64.tar.gz"),
        ("linux", "arm", "https://dl.google.com/go/go1.24.3.linux-armv6l.tar.gz"),
        ("darwin", "arm64", "https://dl.google.com/go/go1.24.3.darwin-arm64.tar.gz"),
        ("windows", "amd64", "https://dl.google.com/go/go1.24.3.windows-amd64.zip"),
        ("freebsd", "arm", "https://dl.google.com/go/go1.24.3.freebsd-arm.tar.gz"),
        ("windows", "mips", "https://dl.google.com/go/go1.24.3.windows-mips.zip"),
    ],
)
def test_version_archive_url(goos, goarch, expected):
    assert platforms.version_archive_url("go1.24.3", goos, goarch) == expected


def test_download_base_override(monkeypatch):
    monkeypatch.setenv("GODL_DOWNLOAD_BASE", "http://mirror.example/golang")

    url = platforms.version_archive_url("go1.21rc3", "linux", "amd64")

    assert url == "http://mirror.example/golang/go1.21rc3.linux-amd64.tar.gz"


@pytest.mark.parametrize(
    "system, machine, goos, goarch",
    [
        ("Linux", "x86_64", "linux", "amd64"),
        ("Linux", "aarch64", "linux", "arm64"),
        ("Linux", "armv7l", "linux", "arm"),
        ("Darwin", "arm64", "darwin", "arm64"),
        ("Windows", "AMD64", "windows", "amd64"),
        ("Linux", "i686", "linux", "386"),
    ],
)
def test_running_platform_names(monkeypatch, system, machine, goos, goarch):
    monkeypatch.setattr(platforms.platform, "system", lambda: system)
    monkeypatch.setattr(platforms.platform, "machine", lambda: machine)

    assert platforms.get_os() == goos
    assert platforms.get_arch() == goarch


def test_exe_suffix():
    assert platforms.exe_suffix("windows") == ".exe"
    assert platforms.exe_suffix("linux") == ""
