"""Derived metrics and their JSON rendering."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from access_log_analyzer.aggregate.state import AggregateState


@dataclass(frozen=True, slots=True)
class Summary:
    """Final metrics of one run."""

    total_requests: int
    average_response_time_ms: float
    status_code_counts: dict[str, int]
    busiest_hour: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "average_response_time_ms": self.average_response_time_ms,
            "status_code_counts": dict(self.status_code_counts),
            "busiest_hour": self.busiest_hour,
        }


def busiest_hour(hour_counts: Sequence[int]) -> int | None:
    """
    Return the hour with the highest count, or None if every count is zero.

    Ties go to the lowest hour.
    """
    best_hour: int | None = None
    best_count = 0
    for hour, count in enumerate(hour_counts):
        if count > best_count:
            best_hour, best_count = hour, count
    return best_hour


def build_summary(state: AggregateState) -> Summary:
    average = state.response_sum / state.response_count if state.response_count else 0.0
    return Summary(
        total_requests=state.total_requests,
        average_response_time_ms=average,
        status_code_counts=dict(state.status_code_counts),
        busiest_hour=busiest_hour(state.hour_counts),
    )


def render_summary(summary: Summary, indent: int | None = 2) -> str:
    """Serialize a summary as the output JSON document."""
    return json.dumps(summary.to_dict(), indent=indent)
