"""Worker loop: decode queued lines and fold them into an accumulator."""

import logging
from dataclasses import dataclass
from typing import Protocol

from access_log_analyzer.errors import RecordParseError
from access_log_analyzer.pipeline.queue import LineQueue
from access_log_analyzer.record.parse import parse_record_line
from access_log_analyzer.record.types import LogRecord

logger = logging.getLogger(__name__)


class Accumulator(Protocol):
    def add(self, record: LogRecord, line_no: int | None = None) -> None: ...


@dataclass
class WorkerStats:
    """Statistics from one consume_lines call."""

    worker_id: int
    lines_consumed: int = 0
    records_added: int = 0
    malformed_lines: int = 0


def consume_lines(line_queue: LineQueue, accumulator: Accumulator, worker_id: int = 0) -> WorkerStats:
    """
    Drain line_queue until it is closed, adding each decodable record.

    Malformed lines are logged and skipped; they never stop the worker.
    """
    stats = WorkerStats(worker_id)

    for line_no, content in line_queue:
        stats.lines_consumed += 1
        try:
            record = parse_record_line(content)
        except RecordParseError as exc:
            stats.malformed_lines += 1
            logger.warning("Line %d: skipping invalid JSON (worker %d): %s", line_no, worker_id, exc)
            continue

        accumulator.add(record, line_no)
        stats.records_added += 1

    return stats
