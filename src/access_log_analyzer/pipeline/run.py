import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from access_log_analyzer.aggregate.merge import merge_states
from access_log_analyzer.aggregate.state import AggregateState, SharedAggregate
from access_log_analyzer.aggregate.summary import Summary, build_summary, render_summary
from access_log_analyzer.errors import AnalysisCancelledError
from access_log_analyzer.pipeline.execution import (
    AggregationStrategy,
    describe_strategy,
    get_strategy,
    is_gil_enabled,
)
from access_log_analyzer.pipeline.queue import DEFAULT_QUEUE_CAPACITY, LineQueue, QueueAbortedError
from access_log_analyzer.pipeline.worker import Accumulator, WorkerStats, consume_lines
from access_log_analyzer.source.reader import stream_lines
from access_log_analyzer.source.types import MAX_LINE_LENGTH, SourceStats

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


def _abort_on_failure(line_queue: LineQueue):
    """Done-callback that releases the producer when a worker dies."""

    def callback(future: Future) -> None:
        if not future.cancelled() and future.exception() is not None:
            line_queue.abort()

    return callback


def analyze(
    input_path: str,
    workers: int = DEFAULT_WORKERS,
    strategy: str | AggregationStrategy | None = None,
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY,
    max_line_length: int = MAX_LINE_LENGTH,
    cancel_event: threading.Event | None = None,
) -> Summary:
    """
    Compute summary metrics for one NDJSON access log.

    Stages:
    1. Streaming: the calling thread feeds a bounded LineQueue while a pool
       of worker threads decodes and aggregates
    2. Draining: the queue is closed and the workers are joined
    3. Merging: per-worker shards are summed (identity for "shared")
    4. Reporting: derive the Summary

    Source failures (SourceIOError, LineTooLongError) are raised only after
    every already-queued line has been drained and the workers have joined.
    If a worker raises, the queue is aborted so the producer and the other
    workers stop, and the worker's exception is re-raised.
    """
    total_start = time.perf_counter()
    input_file = Path(input_path)

    if workers <= 0:
        logger.debug("workers=%d coerced to 1", workers)
        workers = 1

    selected = get_strategy(strategy)
    gil_status = "enabled" if is_gil_enabled() else "disabled"
    logger.info(
        f"Starting: file={input_file.name}, workers={workers}, "
        f"strategy={describe_strategy(selected)}, queue={queue_capacity}, GIL={gil_status}"
    )

    line_queue = LineQueue(queue_capacity, consumers=workers)
    source_stats = SourceStats()

    shared: SharedAggregate | None = None
    shards: list[AggregateState] = []
    accumulators: list[Accumulator]
    if selected is AggregationStrategy.SHARED:
        shared = SharedAggregate()
        accumulators = [shared] * workers
    else:
        shards = [AggregateState() for _ in range(workers)]
        accumulators = list(shards)

    # Streaming and draining.
    t1_start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="log-worker") as executor:
        futures = [
            executor.submit(consume_lines, line_queue, accumulator, worker_id)
            for worker_id, accumulator in enumerate(accumulators)
        ]
        for future in futures:
            future.add_done_callback(_abort_on_failure(line_queue))

        try:
            for item in stream_lines(str(input_file), max_line_length, source_stats, cancel_event):
                line_queue.put(item)
        except QueueAbortedError:
            logger.error("A worker failed, stopping the line source")
        finally:
            line_queue.close()

        worker_stats: list[WorkerStats] = [future.result() for future in futures]

    t1 = time.perf_counter() - t1_start
    malformed = sum(stats.malformed_lines for stats in worker_stats)
    records = sum(stats.records_added for stats in worker_stats)

    if malformed > 0:
        logger.warning(
            "%d malformed lines skipped (read=%d, empty=%d, records=%d)",
            malformed,
            source_stats.lines_read,
            source_stats.empty_lines,
            records,
        )
    logger.info("Streaming done: %d lines, %d records in %.2fs", source_stats.lines_read, records, t1)

    for stats in worker_stats:
        logger.debug(
            "Worker %d: consumed=%d, added=%d, malformed=%d",
            stats.worker_id,
            stats.lines_consumed,
            stats.records_added,
            stats.malformed_lines,
        )

    if source_stats.cancelled:
        raise AnalysisCancelledError(context={"lines_read": source_stats.lines_read})

    # Merging.
    t2_start = time.perf_counter()
    if shared is not None:
        final_state = shared.snapshot()
    else:
        final_state = merge_states(shards)
    t2 = time.perf_counter() - t2_start

    # Reporting.
    summary = build_summary(final_state)

    total_time = time.perf_counter() - total_start
    logger.debug("Timing breakdown: streaming=%.2fs, merge=%.4fs", t1, t2)
    logger.info(
        "Result: %d requests, busiest hour %s (total %.2fs)",
        summary.total_requests,
        summary.busiest_hour,
        total_time,
    )
    return summary


def main_analyze(
    input_path: str,
    workers: int = DEFAULT_WORKERS,
    strategy: str | AggregationStrategy | None = None,
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY,
) -> None:
    """Main entry point that prints the summary JSON to stdout."""
    summary = analyze(input_path, workers=workers, strategy=strategy, queue_capacity=queue_capacity)
    print(render_summary(summary))
