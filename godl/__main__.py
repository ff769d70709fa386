"""
Entry point for running a Go version from the command line.

Usage:
    python -m godl go1.24.3 download
    python -m godl go1.24.3 version
"""

import argparse

from .launcher import run


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="godl",
        description="Install and run a specific Go version",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  godl go1.24.3 download       # install to ~/sdk/go1.24.3
  godl go1.24.3 build ./...    # run that version's go command
        """,
    )
    parser.add_argument("version", help="Go release to run (e.g., go1.24.3)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="'download', or arguments for the go command")

    args = parser.parse_args(argv)
    run(args.version, args.args)


if __name__ == "__main__":
    main()
