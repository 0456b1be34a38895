"""Tests for the worker loop."""

import logging

from access_log_analyzer.aggregate.state import AggregateState
from access_log_analyzer.pipeline.queue import LineQueue
from access_log_analyzer.pipeline.worker import consume_lines


def test_consume_lines_skips_malformed(caplog) -> None:
    line_queue = LineQueue(capacity=8)
    line_queue.put((1, b'{"timestamp":"2025-01-01T10:15:00Z","http_status":200,"response_time_ms":50}'))
    line_queue.put((2, b"{broken"))
    line_queue.put((3, b'{"timestamp":"2025-01-01T11:00:00Z","http_status":404}'))
    line_queue.close()

    state = AggregateState()
    with caplog.at_level(logging.WARNING):
        stats = consume_lines(line_queue, state, worker_id=5)

    assert stats.worker_id == 5
    assert stats.lines_consumed == 3
    assert stats.records_added == 2
    assert stats.malformed_lines == 1
    assert state.total_requests == 2
    assert state.status_code_counts == {"200": 1, "404": 1}
    assert "Line 2: skipping invalid JSON (worker 5)" in caplog.text


def test_consume_lines_returns_on_closed_empty_queue() -> None:
    line_queue = LineQueue(capacity=1)
    line_queue.close()

    stats = consume_lines(line_queue, AggregateState())

    assert stats.lines_consumed == 0
