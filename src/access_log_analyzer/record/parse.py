"""Decoding utilities for raw log lines and their timestamps."""

import re
from datetime import UTC, datetime

from pydantic import ValidationError

from access_log_analyzer.errors import RecordParseError, TimestampError
from access_log_analyzer.record.types import LogRecord

# date "T" time [fraction] ("Z" | offset), as in RFC 3339 section 5.6.
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_record_line(raw_line: bytes | str) -> LogRecord:
    """
    Decode one NDJSON line into a LogRecord.

    Raises:
        RecordParseError: the line is not a JSON object matching the schema.
    """
    try:
        return LogRecord.model_validate_json(raw_line)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "line"
        raise RecordParseError(f"{location}: {first['msg']}") from exc


def parse_timestamp(value: str | None) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Raises:
        TimestampError: the value is missing, empty or not RFC 3339.
    """
    if not value:
        raise TimestampError("missing timestamp")

    if RFC3339_PATTERN.fullmatch(value) is None:
        raise TimestampError(f"not an RFC 3339 timestamp: {value!r}")

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise TimestampError(f"invalid timestamp {value!r}: {exc}") from exc

    try:
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError) as exc:
        # Offsets can push the first or last representable day out of range.
        raise TimestampError(f"timestamp {value!r} out of range in UTC") from exc


def parse_timestamp_hour(value: str | None) -> int:
    """Return the UTC hour of day (0-23) for an RFC 3339 timestamp."""
    return parse_timestamp(value).hour
