"""
Configuration for the Go toolchain launcher.

Constants describe the layout of an installation and the remote release
server; the few environment lookups live here so every module reads them
the same way.
"""

import os

# ============================================================================
# Configuration
# ============================================================================

# Default release server for Go binary distributions
DEFAULT_DOWNLOAD_BASE = "https://dl.google.com/go/"

# Environment variable overriding the release server (mirrors, offline tests)
DOWNLOAD_BASE_ENV = "GODL_DOWNLOAD_BASE"

# Environment variable whose value (if set) roots the installations
ROOT_ENV = "GOPATH"

# Sub-directory under the root that holds one directory per version
SDK_NAMESPACE = "sdk"

# Zero-byte marker written once a version is downloaded, verified and unpacked
UNPACKED_OKAY = ".unpacked-success"

# Top-level directory every Go release archive wraps its contents in
ARCHIVE_ROOT_PREFIX = "go/"

# Suffix of the plaintext SHA256 file published next to each archive
CHECKSUM_SUFFIX = ".sha256"

# Value sent in place of a pre-release interpreter version
DEVEL_VERSION = "devel"

USER_AGENT_PRODUCT = "golang-dl"


def download_base() -> str:
    """Return the release server base URL, always ending in a slash."""
    base = os.environ.get(DOWNLOAD_BASE_ENV) or DEFAULT_DOWNLOAD_BASE
    if not base.endswith("/"):
        base += "/"
    return base
