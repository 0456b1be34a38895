"""Mutable accumulators folded from decoded log records."""

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field

from access_log_analyzer.errors import TimestampError
from access_log_analyzer.record.parse import parse_timestamp_hour
from access_log_analyzer.record.types import HOURS_PER_DAY, LogRecord

logger = logging.getLogger(__name__)


def _empty_hours() -> list[int]:
    return [0] * HOURS_PER_DAY


@dataclass(slots=True)
class AggregateState:
    """
    Running totals for one worker shard or for a whole run.

    Only add() mutates a state while workers are running; merging and
    reporting read it after the workers have joined.
    """

    total_requests: int = 0
    response_sum: float = 0.0
    response_count: int = 0
    status_code_counts: Counter[str] = field(default_factory=Counter)
    hour_counts: list[int] = field(default_factory=_empty_hours)

    def add(self, record: LogRecord, line_no: int | None = None) -> None:
        """Fold one record into the totals."""
        self.total_requests += 1

        if record.response_time_ms is not None:
            self.response_sum += record.response_time_ms
            self.response_count += 1

        self.status_code_counts[record.status_key] += 1

        try:
            hour = parse_timestamp_hour(record.timestamp)
        except TimestampError as exc:
            logger.warning("Line %s: %s", line_no if line_no is not None else "?", exc)
            return
        self.hour_counts[hour] += 1

    def merged_with(self, other: "AggregateState") -> "AggregateState":
        """Return a new state holding the sum of self and other."""
        return AggregateState(
            total_requests=self.total_requests + other.total_requests,
            response_sum=self.response_sum + other.response_sum,
            response_count=self.response_count + other.response_count,
            status_code_counts=self.status_code_counts + other.status_code_counts,
            hour_counts=[a + b for a, b in zip(self.hour_counts, other.hour_counts, strict=True)],
        )

    def copy(self) -> "AggregateState":
        return AggregateState(
            total_requests=self.total_requests,
            response_sum=self.response_sum,
            response_count=self.response_count,
            status_code_counts=Counter(self.status_code_counts),
            hour_counts=list(self.hour_counts),
        )


class SharedAggregate:
    """A single AggregateState guarded by one lock, shared by all workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = AggregateState()

    def add(self, record: LogRecord, line_no: int | None = None) -> None:
        with self._lock:
            self._state.add(record, line_no)

    def snapshot(self) -> AggregateState:
        """Return a copy of the guarded state."""
        with self._lock:
            return self._state.copy()
