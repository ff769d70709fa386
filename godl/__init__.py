"""
Install and run specific versions of the Go toolchain.

This package provides:
- Downloading official Go binary releases for the running platform
- Verifying them against the published SHA256 checksums
- Unpacking .tar.gz and .zip releases with path-traversal checks
- Running the installed go command with GOROOT and PATH set up

Main modules:
- launcher: Per-version entry point (download or delegate)
- install: Idempotent fetch, verify and unpack pipeline
- fetch: HTTP client for the release server
- expand_archive: Safe archive extraction
- checksums: SHA256 verification
- progress: Download progress reporting
"""

from .install import install
from .launcher import run

__version__ = "0.1.0"

__all__ = ["install", "run", "__version__"]
