"""
Synthetic NDJSON access log generator for tests and benchmarks.

Writes one JSON object per line with a realistic status mix, a response-time
distribution with a small long tail, occasional null response times and
timestamps spread uniformly over a day range. One seeded random.Random is
threaded through every draw, so a fixed seed reproduces the file byte for byte.
"""

import argparse
import json
import logging
import random
import sys
from collections.abc import Sequence
from datetime import UTC, date, datetime, timedelta

from access_log_analyzer.errors import AnalyzerError, ArgumentError, SourceIOError
from access_log_analyzer.source.types import BUFFER_SIZE

logger = logging.getLogger(__name__)

STATUS_CODES = (200, 404, 500, 302, 503)
STATUS_WEIGHTS = (0.85, 0.08, 0.02, 0.03, 0.02)

# Base response time is uniform in [MIN, MAX).
RESPONSE_MS_MIN = 20
RESPONSE_MS_MAX = 400
LONG_TAIL_PROBABILITY = 0.01
LONG_TAIL_MAX_MS = 3000
NULL_RESPONSE_PROBABILITY = 0.02

SECONDS_PER_DAY = 24 * 60 * 60


def pick_weighted_status(rng: random.Random) -> int:
    """Draw a status code by cumulative weight."""
    p = rng.random() * sum(STATUS_WEIGHTS)
    acc = 0.0
    for status, weight in zip(STATUS_CODES, STATUS_WEIGHTS, strict=True):
        acc += weight
        if p <= acc:
            return status
    return STATUS_CODES[-1]


def random_response_ms(rng: random.Random) -> int:
    """Mostly 20-399ms, with a rare long tail of up to +3s."""
    base = rng.randrange(RESPONSE_MS_MIN, RESPONSE_MS_MAX)
    if rng.random() < LONG_TAIL_PROBABILITY:
        base += rng.randrange(LONG_TAIL_MAX_MS)
    return base


def random_user_id(rng: random.Random, max_users: int) -> str:
    return f"u{rng.randrange(max_users) + 1:03d}"


def parse_start_date(value: str | None) -> datetime:
    """
    Parse a YYYY-MM-DD start date as midnight UTC.

    None means today (UTC).
    """
    if value is None or value == "":
        today = datetime.now(UTC).date()
    else:
        try:
            today = date.fromisoformat(value)
        except ValueError as exc:
            raise ArgumentError(f"cannot parse start date {value!r}, expected YYYY-MM-DD") from exc
    return datetime(today.year, today.month, today.day, tzinfo=UTC)


def generate_record(rng: random.Random, start: datetime, days: int, users: int) -> dict:
    """Draw one log record. Draw order is fixed so seeded output is stable."""
    offset = rng.randrange(days * SECONDS_PER_DAY)
    timestamp = (start + timedelta(seconds=offset)).strftime("%Y-%m-%dT%H:%M:%SZ")

    status = pick_weighted_status(rng)

    response_ms: int | None = None
    if rng.random() >= NULL_RESPONSE_PROBABILITY:
        response_ms = random_response_ms(rng)

    return {
        "timestamp": timestamp,
        "user_id": random_user_id(rng, users),
        "response_time_ms": response_ms,
        "http_status": status,
    }


def generate_access_log(
    output_path: str,
    lines: int = 1000,
    start: str | None = None,
    days: int = 1,
    users: int = 100,
    seed: int | None = None,
) -> int:
    """
    Generate a synthetic access log.

    Streams output line-by-line to avoid memory issues.

    Args:
        output_path: Path to output file (overwritten).
        lines: Number of lines to write.
        start: First day as YYYY-MM-DD; today (UTC) when None.
        days: Number of days the timestamps span (>= 1).
        users: Number of distinct user ids (>= 1).
        seed: Random seed; None draws a fresh seed from the OS.

    Returns:
        Total number of lines written.
    """
    if lines < 0:
        raise ArgumentError(f"lines must be >= 0, got {lines}")
    if days < 1:
        raise ArgumentError(f"days must be >= 1, got {days}")
    if users < 1:
        raise ArgumentError(f"users must be >= 1, got {users}")

    start_at = parse_start_date(start)
    rng = random.Random(seed)

    try:
        with open(output_path, "w", encoding="utf-8", buffering=BUFFER_SIZE) as f:
            for _ in range(lines):
                record = generate_record(rng, start_at, days, users)
                f.write(json.dumps(record, separators=(",", ":")))
                f.write("\n")
    except OSError as exc:
        raise SourceIOError(
            f"failed to write output file: {exc.strerror or exc}", context={"path": output_path}
        ) from exc

    return lines


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="access-log-generate",
        description="Generate a synthetic NDJSON access log.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1M lines over one week, reproducible
  access-log-generate --out data/access.log --lines 1000000 --start 2025-01-01 --days 7 --seed 42
""",
    )
    parser.add_argument("--lines", type=int, default=1000, help="Number of lines (default: 1000)")
    parser.add_argument("--out", default="access.log", help="Output file path (default: access.log)")
    parser.add_argument("--start", default=None, help="Start date YYYY-MM-DD (default: today, UTC)")
    parser.add_argument("--days", type=int, default=1, help="Days spanned by timestamps (default: 1)")
    parser.add_argument("--users", type=int, default=100, help="Distinct user ids, from u001 (default: 100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: random)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the generator CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s", stream=sys.stderr)

    try:
        written = generate_access_log(
            output_path=args.out,
            lines=args.lines,
            start=args.start,
            days=args.days,
            users=args.users,
            seed=args.seed,
        )
    except ArgumentError as exc:
        parser.error(str(exc))
    except AnalyzerError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Done: wrote %d lines to %s (seed=%s)", written, args.out, args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
