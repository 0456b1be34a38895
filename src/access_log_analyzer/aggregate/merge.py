"""Merging of per-worker aggregate shards."""

from collections.abc import Sequence
from functools import reduce

from access_log_analyzer.aggregate.state import AggregateState


def merge_states(states: Sequence[AggregateState]) -> AggregateState:
    """
    Combine partial states into one, field by field.

    Counters and hour cells are summed and status maps are unioned with
    additive counts, so the result does not depend on the order or grouping
    of the inputs. The inputs are left untouched.

    Raises:
        ValueError: states is empty.
    """
    if not states:
        raise ValueError("merge_states requires at least one state")

    return reduce(AggregateState.merged_with, states[1:], states[0].copy())
