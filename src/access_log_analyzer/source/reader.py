"""Bounded-memory line streaming from NDJSON files."""

import logging
import threading
from collections.abc import Iterator

from access_log_analyzer.errors import LineTooLongError, SourceIOError
from access_log_analyzer.source.types import (
    BUFFER_SIZE,
    MAX_LINE_LENGTH,
    NumberedLine,
    SourceStats,
)

logger = logging.getLogger(__name__)


def strip_terminator(raw_line: bytes) -> bytes:
    """Remove a trailing "\\n" or "\\r\\n"."""
    if raw_line.endswith(b"\n"):
        raw_line = raw_line[:-1]
        if raw_line.endswith(b"\r"):
            raw_line = raw_line[:-1]
    return raw_line


def stream_lines(
    input_path: str,
    max_line_length: int = MAX_LINE_LENGTH,
    stats: SourceStats | None = None,
    cancel_event: threading.Event | None = None,
) -> Iterator[NumberedLine]:
    """
    Lazily yield (line_no, content) pairs from a file.

    Each content is a fresh bytes object, so nothing downstream aliases the
    read buffer. Empty lines are skipped but still advance line_no. At most
    one line (plus the 1MB buffer) is held in memory at a time.

    Raises:
        SourceIOError: the file cannot be opened or a read fails.
        LineTooLongError: a line is longer than max_line_length bytes.
    """
    if stats is None:
        stats = SourceStats()

    try:
        handle = open(input_path, "rb", buffering=BUFFER_SIZE)  # noqa: SIM115
    except OSError as exc:
        raise SourceIOError(f"failed to open file: {exc.strerror or exc}", context={"path": input_path}) from exc

    with handle:
        line_no = 0
        while cancel_event is None or not cancel_event.is_set():
            try:
                # Room for the limit plus a "\r\n" terminator.
                raw_line = handle.readline(max_line_length + 2)
            except OSError as exc:
                raise SourceIOError(
                    f"error reading file: {exc.strerror or exc}",
                    context={"path": input_path, "line": line_no + 1},
                ) from exc

            if not raw_line:
                return

            line_no += 1
            stats.lines_read += 1
            line = strip_terminator(raw_line)

            if len(line) > max_line_length:
                raise LineTooLongError(
                    context={"line": line_no, "max_line_length": max_line_length}
                )

            if not line:
                stats.empty_lines += 1
                continue

            stats.lines_forwarded += 1
            yield line_no, line

        stats.cancelled = True
        logger.info("Line source cancelled after %d lines", line_no)
