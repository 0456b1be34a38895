"""Shared constants and metadata structures for line streaming."""

from dataclasses import dataclass
from typing import TypeAlias

# 1MB buffer for efficient I/O.
BUFFER_SIZE = 1024 * 1024

# Longest accepted line, terminator excluded (16MB).
MAX_LINE_LENGTH = 16 * 1024 * 1024

# (1-based line number, line content without terminator)
NumberedLine: TypeAlias = tuple[int, bytes]


@dataclass
class SourceStats:
    """Statistics from a stream_lines pass."""

    lines_read: int = 0
    empty_lines: int = 0
    lines_forwarded: int = 0
    cancelled: bool = False
