"""
Progress reporting for streamed downloads.

ProgressWriter wraps a writable sink; each write is forwarded and counted,
and a progress line is printed at most once per wall-clock second, plus one
final line when the copy finishes.
"""

import shutil
import sys
import time
from collections.abc import Callable
from typing import BinaryIO, TextIO

KILOBYTE = 1024
MEGABYTE = 1024 * 1024

# Total passed when the server did not report a content length
UNKNOWN_TOTAL = -1


def format_size(size: int) -> str:
    """Format a byte count as B, KB or MB with one decimal ("1.5 KB", "3 MB")."""
    unit = "B"
    value = float(size)
    if size >= MEGABYTE:
        unit = "MB"
        value = value / MEGABYTE
    elif size >= KILOBYTE:
        unit = "KB"
        value = value / KILOBYTE
    formatted = f"{value:.1f}".removesuffix(".0")
    return f"{formatted} {unit}"


class ProgressWriter:
    """Forward writes to a sink while reporting progress against a known total."""

    def __init__(
        self,
        sink: BinaryIO,
        total: int = UNKNOWN_TOTAL,
        output: TextIO | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            sink: Destination the bytes are written to
            total: Expected byte count, or UNKNOWN_TOTAL
            output: Stream progress lines go to (default: stderr)
            clock: Wall-clock source, in seconds
        """
        self.sink = sink
        self.total = total
        self.output = output
        self.clock = clock
        self.written = 0
        self._last_second: int | None = None

    def write(self, data: bytes) -> int:
        n = self.sink.write(data)
        if n is None:
            n = len(data)
        self.written += n
        second = int(self.clock())
        if second != self._last_second:
            self.update()
            self._last_second = second
        return n

    def update(self) -> None:
        """Print one progress line."""
        end = "" if self.written == self.total else " ..."
        if self.total < 0:
            line = f"Downloaded {format_size(self.written)}{end}"
        else:
            percent = 100.0 * self.written / self.total if self.total > 0 else 100.0
            detail = f"{format_size(self.written)} / {format_size(self.total)}"
            line = f"Downloaded {percent:5.1f}% ({detail}){end}"
        print(line, file=self.output or sys.stderr, flush=True)

    def finish(self) -> None:
        """Print the closing progress line once the last byte is written."""
        if self.total < 0:
            self.total = self.written
        self.update()


def copy_with_progress(
    source: BinaryIO,
    destination: BinaryIO,
    total: int = UNKNOWN_TOTAL,
    output: TextIO | None = None,
) -> int:
    """
    Stream source into destination, reporting progress.

    Returns:
        Number of bytes copied
    """
    writer = ProgressWriter(destination, total=total, output=output)
    shutil.copyfileobj(source, writer)
    writer.finish()
    return writer.written
