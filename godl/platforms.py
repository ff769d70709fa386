"""
Mapping from the running OS/architecture to Go release archive names.

Go publishes one archive per (os, arch) pair:
    https://dl.google.com/go/go1.24.3.linux-amd64.tar.gz
    https://dl.google.com/go/go1.24.3.windows-amd64.zip
"""

import platform

from . import config

TAR_GZ = ".tar.gz"
ZIP = ".zip"

# Python platform.system() values -> Go GOOS names
OS_NAMES: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "dragonfly": "dragonfly",
    "sunos": "solaris",
    "aix": "aix",
}

# Python platform.machine() values -> Go GOARCH names
ARCH_NAMES: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "arm": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
    "mips64": "mips64",
}

# (goos, goarch) -> (archive arch label, archive suffix)
PLATFORM_ARCHIVES: dict[tuple[str, str], tuple[str, str]] = {
    ("linux", "amd64"): ("amd64", TAR_GZ),
    ("linux", "386"): ("386", TAR_GZ),
    ("linux", "arm64"): ("arm64", TAR_GZ),
    ("linux", "arm"): ("armv6l", TAR_GZ),
    ("linux", "ppc64le"): ("ppc64le", TAR_GZ),
    ("linux", "ppc64"): ("ppc64", TAR_GZ),
    ("linux", "s390x"): ("s390x", TAR_GZ),
    ("linux", "riscv64"): ("riscv64", TAR_GZ),
    ("linux", "loong64"): ("loong64", TAR_GZ),
    ("linux", "mips64"): ("mips64", TAR_GZ),
    ("darwin", "amd64"): ("amd64", TAR_GZ),
    ("darwin", "arm64"): ("arm64", TAR_GZ),
    ("windows", "amd64"): ("amd64", ZIP),
    ("windows", "386"): ("386", ZIP),
    ("windows", "arm64"): ("arm64", ZIP),
    ("freebsd", "amd64"): ("amd64", TAR_GZ),
    ("freebsd", "386"): ("386", TAR_GZ),
    ("freebsd", "arm64"): ("arm64", TAR_GZ),
    ("openbsd", "amd64"): ("amd64", TAR_GZ),
    ("netbsd", "amd64"): ("amd64", TAR_GZ),
    ("dragonfly", "amd64"): ("amd64", TAR_GZ),
    ("solaris", "amd64"): ("amd64", TAR_GZ),
    ("aix", "ppc64"): ("ppc64", TAR_GZ),
}


def get_os() -> str:
    """Return the Go name of the running operating system."""
    system = platform.system().lower()
    return OS_NAMES.get(system, system)


def get_arch() -> str:
    """Return the Go name of the running machine architecture."""
    machine = platform.machine().lower()
    return ARCH_NAMES.get(machine, machine)


def is_windows(goos: str | None = None) -> bool:
    return (goos or get_os()) == "windows"


def exe_suffix(goos: str | None = None) -> str:
    return ".exe" if is_windows(goos) else ""


def version_archive_url(version: str, goos: str | None = None, goarch: str | None = None) -> str:
    """
    Build the download URL of the release archive for a version.

    Args:
        version: Release identifier (e.g., "go1.24.3")
        goos: Go OS name (default: running OS)
        goarch: Go architecture name (default: running architecture)

    Returns:
        Absolute URL of the .tar.gz or .zip archive
    """
    goos = goos or get_os()
    goarch = goarch or get_arch()
    default = ZIP if is_windows(goos) else TAR_GZ
    arch_label, suffix = PLATFORM_ARCHIVES.get((goos, goarch), (goarch, default))
    return f"{config.download_base()}{version}.{goos}-{arch_label}{suffix}"
