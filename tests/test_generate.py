"""Tests for the synthetic log generator."""

import json
import random
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

import pytest

from access_log_analyzer import generate
from access_log_analyzer.errors import ArgumentError, SourceIOError
from access_log_analyzer.generate import (
    STATUS_CODES,
    generate_access_log,
    pick_weighted_status,
    random_response_ms,
    random_user_id,
)


class TestGenerateAccessLog:
    """Test cases for generate_access_log function."""

    def test_same_seed_is_byte_identical(self, tmp_path: Path) -> None:
        first = tmp_path / "a.log"
        second = tmp_path / "b.log"

        generate_access_log(str(first), lines=500, start="2025-01-01", days=3, users=20, seed=99)
        generate_access_log(str(second), lines=500, start="2025-01-01", days=3, users=20, seed=99)

        assert first.read_bytes() == second.read_bytes()

    def test_different_seed_differs(self, tmp_path: Path) -> None:
        first = tmp_path / "a.log"
        second = tmp_path / "b.log"

        generate_access_log(str(first), lines=200, start="2025-01-01", seed=1)
        generate_access_log(str(second), lines=200, start="2025-01-01", seed=2)

        assert first.read_bytes() != second.read_bytes()

    def test_record_schema_and_ranges(self, tmp_path: Path) -> None:
        """Test that every line matches the input contract."""
        path = tmp_path / "access.log"
        written = generate_access_log(str(path), lines=2000, start="2025-03-10", days=2, users=7, seed=5)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert written == len(lines) == 2000

        start = datetime(2025, 3, 10, tzinfo=UTC)
        end = datetime(2025, 3, 12, tzinfo=UTC)
        for line in lines:
            record = json.loads(line)
            assert list(record) == ["timestamp", "user_id", "response_time_ms", "http_status"]
            assert start <= datetime.fromisoformat(record["timestamp"]) < end
            assert record["timestamp"].endswith("Z")
            assert record["http_status"] in STATUS_CODES
            assert record["user_id"] in {f"u{i:03d}" for i in range(1, 8)}
            response = record["response_time_ms"]
            assert response is None or 20 <= response < 400 + 3000

    def test_distribution_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "access.log"
        generate_access_log(str(path), lines=20000, start="2025-01-01", seed=3)

        records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        statuses = Counter(record["http_status"] for record in records)
        nulls = sum(1 for record in records if record["response_time_ms"] is None)

        assert 0.82 < statuses[200] / len(records) < 0.88
        assert 0.005 < nulls / len(records) < 0.04

    def test_zero_lines_creates_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.log"
        assert generate_access_log(str(path), lines=0, seed=1) == 0
        assert path.read_bytes() == b""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"start": "01/02/2025"},
            {"start": "2025-02-30"},
            {"days": 0},
            {"users": 0},
            {"lines": -1},
        ],
    )
    def test_invalid_options(self, tmp_path: Path, kwargs: dict) -> None:
        with pytest.raises(ArgumentError):
            generate_access_log(str(tmp_path / "x.log"), **kwargs)

    def test_unwritable_output(self, tmp_path: Path) -> None:
        with pytest.raises(SourceIOError):
            generate_access_log(str(tmp_path / "missing_dir" / "x.log"), lines=1, seed=1)


def test_helpers_use_supplied_rng() -> None:
    draws = [
        (pick_weighted_status(rng), random_response_ms(rng), random_user_id(rng, 100))
        for rng in (random.Random(42), random.Random(42))
    ]
    assert draws[0] == draws[1]
    assert 20 <= draws[0][1] < 3400
    assert draws[0][2].startswith("u") and len(draws[0][2]) == 4


def test_cli_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "cli.log"
    exit_code = generate.main(["--out", str(out), "--lines", "10", "--start", "2025-01-01", "--seed", "8"])

    assert exit_code == 0
    assert len(out.read_text(encoding="utf-8").splitlines()) == 10


def test_cli_rejects_bad_start(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        generate.main(["--out", str(tmp_path / "x.log"), "--start", "tomorrow"])
    assert excinfo.value.code == 2
