"""Shared fixtures for analyzer tests."""

import errno
from collections.abc import Callable
from pathlib import Path

import pytest

from access_log_analyzer.source import reader

EXAMPLE_LINES = [
    '{"timestamp":"2025-01-01T10:15:00Z","http_status":200,"response_time_ms":50}',
    '{"timestamp":"2025-01-01T10:20:00Z","http_status":200,"response_time_ms":150}',
    '{"timestamp":"2025-01-01T23:00:00Z","http_status":404,"response_time_ms":null}',
]

EXAMPLE_SUMMARY = {
    "total_requests": 3,
    "average_response_time_ms": 100.0,
    "status_code_counts": {"200": 2, "404": 1},
    "busiest_hour": 10,
}


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[[list[str]], str]:
    """Return a helper that writes lines to a fresh log file and returns its path."""
    counter = 0

    def _write(lines: list[str]) -> str:
        nonlocal counter
        counter += 1
        path = tmp_path / f"access_{counter}.log"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def example_log(write_log) -> str:
    return write_log(EXAMPLE_LINES)


@pytest.fixture
def example_summary() -> dict:
    return dict(EXAMPLE_SUMMARY)


class _FlakyHandle:
    """Binary handle whose readline fails with EIO after fail_after lines."""

    def __init__(self, lines: list[bytes], fail_after: int):
        self._lines = iter(lines)
        self._remaining = fail_after

    def __enter__(self) -> "_FlakyHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        return None

    def readline(self, size: int = -1) -> bytes:
        if self._remaining == 0:
            raise OSError(errno.EIO, "Input/output error")
        self._remaining -= 1
        return next(self._lines, b"")


@pytest.fixture
def fail_reads_after(monkeypatch) -> Callable[[list[bytes], int], None]:
    """Make the line source read the given lines, then fail with an OSError."""

    def _patch(lines: list[bytes], fail_after: int) -> None:
        monkeypatch.setattr(
            reader, "open", lambda *args, **kwargs: _FlakyHandle(lines, fail_after), raising=False
        )

    return _patch
