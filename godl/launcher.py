"""
Run the go command of a specific Go version.

run("go1.24.3") is all a per-version entry point needs:

    $ go1.24.3 download      # install to ~/sdk/go1.24.3
    $ go1.24.3 build ./...   # run ~/sdk/go1.24.3/bin/go build ./...

The delegated go command gets the wrapper's arguments, standard streams
and environment, with GOROOT set to the installation and its bin
directory first on PATH. Its exit code becomes the wrapper's.
"""

import os
import signal
import subprocess
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import NoReturn

from . import config, platforms
from .errors import DelegateSpawnFailure, GodlError, NotInstalled, ResolutionError
from .install import install, is_installed


def homedir(goos: str | None = None) -> Path:
    """
    Return the current user's home directory.

    $HOME is preferred over the password database; Windows uses %USERPROFILE%.

    Raises:
        ResolutionError: If no home directory can be found
    """
    if platforms.is_windows(goos):
        profile = os.environ.get("USERPROFILE")
        if profile:
            return Path(profile)
        raise ResolutionError("can't find user home directory; %USERPROFILE% is empty")

    home = os.environ.get("HOME")
    if home:
        return Path(home)

    import pwd

    try:
        pw_dir = pwd.getpwuid(os.getuid()).pw_dir
    except KeyError:
        pw_dir = ""
    if pw_dir:
        return Path(pw_dir)
    raise ResolutionError("can't find user home directory; $HOME is empty")


def goroot(version: str, goos: str | None = None) -> Path:
    """Return the installation directory of a version: $GOPATH/sdk/<version> or ~/sdk/<version>."""
    if version in ("", ".", "..") or "/" in version or "\\" in version:
        raise ResolutionError(f"invalid version name {version!r}")
    root = os.environ.get(config.ROOT_ENV)
    if root:
        return Path(root) / config.SDK_NAMESPACE / version
    try:
        home = homedir(goos)
    except ResolutionError as e:
        raise ResolutionError(f"failed to get home directory: {e}") from e
    return home / config.SDK_NAMESPACE / version


def dedup_env(case_insensitive: bool, env: Iterable[str]) -> list[str]:
    """
    Return a copy of env with duplicate keys removed in favor of later values.

    Items are "KEY=VALUE" strings. A duplicate replaces the earlier entry in
    place. Items with no "=" after the first character are kept as-is.
    If case_insensitive is true, the case of keys is ignored.
    """
    out: list[str] = []
    saw: dict[str, int] = {}  # key -> index in out
    for kv in env:
        eq = kv.find("=")
        if eq < 1:
            out.append(kv)
            continue
        key = kv[:eq]
        if case_insensitive:
            key = key.lower()
        if key in saw:
            out[saw[key]] = kv
        else:
            saw[key] = len(out)
            out.append(kv)
    return out


def env_mapping(env: Iterable[str]) -> dict[str, str]:
    """Convert "KEY=VALUE" strings to the mapping subprocess expects."""
    mapping: dict[str, str] = {}
    for kv in env:
        # Windows keeps per-drive entries such as "=C:=C:\\"
        eq = kv.find("=", 1)
        if eq < 0:
            continue
        mapping[kv[:eq]] = kv[eq + 1 :]
    return mapping


def delegate_env(root: Path, goos: str | None = None) -> list[str]:
    """Build the go command's environment: the inherited one plus GOROOT and PATH."""
    new_path = str(root / "bin")
    path = os.environ.get("PATH")
    if path:
        new_path += os.pathsep + path
    inherited = [f"{key}={value}" for key, value in os.environ.items()]
    return dedup_env(platforms.is_windows(goos), [*inherited, f"GOROOT={root}", f"PATH={new_path}"])


def _discard_signal(signum, frame) -> None:
    pass


def signals_to_ignore() -> list[signal.Signals]:
    sigs = [signal.SIGINT]
    if hasattr(signal, "SIGQUIT"):
        sigs.append(signal.SIGQUIT)
    return sigs


def handle_signals() -> dict:
    """
    Leave signals meant for the go command to the go command.

    A no-op handler is installed instead of SIG_IGN: ignored dispositions
    survive exec, handled ones are reset to default in the child. The
    handlers stay until this process exits.

    Returns:
        The previous handlers, keyed by signal
    """
    return {sig: signal.signal(sig, _discard_signal) for sig in signals_to_ignore()}


def run_go(root: Path | str, args: list[str], goos: str | None = None) -> int:
    """
    Run root/bin/go with args and wait for it.

    Returns:
        The go command's exit code, or 1 if it was killed by a signal

    Raises:
        DelegateSpawnFailure: If the executable cannot be started
    """
    root = Path(root)
    gobin = root / "bin" / ("go" + platforms.exe_suffix(goos))
    env = env_mapping(delegate_env(root, goos))

    handle_signals()

    try:
        completed = subprocess.run([str(gobin), *args], env=env, check=False)
    except OSError as e:
        raise DelegateSpawnFailure(f"running {gobin}: {e}") from e
    if completed.returncode < 0:
        return 1
    return completed.returncode


def fatal(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    sys.exit(1)


def run(version: str, args: list[str] | None = None) -> NoReturn:
    """
    Entry point of a per-version command: install or delegate, then exit.

    Args:
        version: Release identifier (e.g., "go1.24.3")
        args: Command line arguments (default: sys.argv[1:])
    """
    args = sys.argv[1:] if args is None else list(args)

    try:
        root = goroot(version)
    except ResolutionError as e:
        fatal(f"{version}: {e}")

    if args == ["download"]:
        try:
            install(root, version)
        except (GodlError, OSError) as e:
            fatal(f"{version}: download failed: {e}")
        sys.exit(0)

    if not is_installed(root):
        fatal(f"{version}: {NotInstalled(version, str(root))}")

    try:
        code = run_go(root, args)
    except DelegateSpawnFailure as e:
        fatal(f"{version}: {e}")
    sys.exit(code)
