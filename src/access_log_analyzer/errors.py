"""Exception hierarchy for access log analysis failures."""

from collections.abc import Mapping
from typing import Any


class AnalyzerError(Exception):
    """Base class for all errors raised by the analyzer."""

    default_message = "Access log analysis failed"

    def __init__(self, message: str | None = None, *, context: Mapping[str, Any] | None = None):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.context:
            details = ", ".join(f"{key}={value}" for key, value in self.context.items())
            return f"{self.message} ({details})"
        return self.message


class SourceIOError(AnalyzerError):
    """Input or output file could not be opened, read or created."""

    default_message = "I/O error"


class LineTooLongError(AnalyzerError):
    """An input line exceeded the configured maximum length."""

    default_message = "Line exceeds maximum length"


class AnalysisCancelledError(AnalyzerError):
    """The run was cancelled before the input was fully consumed."""

    default_message = "Analysis cancelled"


class ArgumentError(AnalyzerError, ValueError):
    """An option value was rejected before any processing started."""

    default_message = "Invalid argument"


class RecordParseError(AnalyzerError, ValueError):
    """A line is not valid JSON or does not match the record schema."""

    default_message = "Malformed log record"


class TimestampError(AnalyzerError, ValueError):
    """A record timestamp is missing or is not RFC 3339."""

    default_message = "Unparseable timestamp"
