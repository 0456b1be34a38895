"""Command-line interface for the access log analyzer."""

import argparse
import logging
import sys
from collections.abc import Sequence

from access_log_analyzer.errors import AnalyzerError, ArgumentError
from access_log_analyzer.pipeline.execution import AggregationStrategy
from access_log_analyzer.pipeline.queue import DEFAULT_QUEUE_CAPACITY
from access_log_analyzer.pipeline.run import DEFAULT_WORKERS, main_analyze

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure logging to write to stderr."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="access-log-analyzer",
        description="Analyze newline-delimited JSON access logs and print metrics as JSON.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the access log (one JSON object per line)",
    )

    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"Number of worker threads parsing lines, values <= 0 mean 1 (default: {DEFAULT_WORKERS})",
    )

    parser.add_argument(
        "--strategy",
        choices=[s.value for s in AggregationStrategy],
        default=None,
        help="Aggregation strategy (default: $ALA_STRATEGY or sharded)",
    )

    parser.add_argument(
        "--queue-capacity",
        type=int,
        default=DEFAULT_QUEUE_CAPACITY,
        help=f"Lines buffered ahead of the workers (default: {DEFAULT_QUEUE_CAPACITY})",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on --log-level
    log_level = getattr(logging, args.log_level)
    configure_logging(log_level)

    if args.queue_capacity < 1:
        parser.error(f"--queue-capacity must be at least 1, got {args.queue_capacity}")

    workers = args.workers if args.workers > 0 else 1

    try:
        main_analyze(
            input_path=args.input_file,
            workers=workers,
            strategy=args.strategy,
            queue_capacity=args.queue_capacity,
        )
    except ArgumentError as exc:
        parser.error(str(exc))
    except AnalyzerError as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
