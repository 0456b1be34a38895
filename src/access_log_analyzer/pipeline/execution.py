"""Aggregation strategy policy and selection utilities."""

import os
import sys
from enum import Enum

from access_log_analyzer.errors import ArgumentError

# Environment variable to override strategy selection.
ALA_STRATEGY_ENV = "ALA_STRATEGY"


class AggregationStrategy(str, Enum):
    """How worker threads share aggregation state."""

    # One private AggregateState per worker, merged after join.
    SHARDED = "sharded"
    # One AggregateState behind a lock.
    SHARED = "shared"


DEFAULT_STRATEGY = AggregationStrategy.SHARDED


def is_gil_enabled() -> bool:
    """Check if GIL is enabled."""
    try:
        return sys._is_gil_enabled()
    except AttributeError:
        return True


def get_strategy(requested: str | AggregationStrategy | None = None) -> AggregationStrategy:
    """
    Select the aggregation strategy.

    Priority:
    1. Explicit request (argument or CLI option)
    2. ALA_STRATEGY env var ("sharded" or "shared")
    3. DEFAULT_STRATEGY
    """
    if isinstance(requested, AggregationStrategy):
        return requested

    name = requested or os.environ.get(ALA_STRATEGY_ENV, "")
    if not name:
        return DEFAULT_STRATEGY

    try:
        return AggregationStrategy(name.lower())
    except ValueError:
        choices = ", ".join(s.value for s in AggregationStrategy)
        raise ArgumentError(
            f"unknown aggregation strategy {name!r}", context={"choices": choices}
        ) from None


def describe_strategy(strategy: AggregationStrategy) -> str:
    """Convert a strategy into a readable policy name."""
    if strategy is AggregationStrategy.SHARED:
        return "shared (locked)"
    return "sharded (merge after join)"
