# src/combinadic/normalize.py
from __future__ import annotations

from collections.abc import MutableSequence, Sequence
from itertools import pairwise

from combinadic.errors import InvalidCombinationError, RankOutOfRangeError


def sort_descending(values: MutableSequence[int]) -> MutableSequence[int]:
    """Sort `values` in place into descending order and return it."""
    values[:] = sorted(values, reverse=True)
    return values


def is_strictly_descending(values: Sequence[int]) -> bool:
    return all(a > b for a, b in pairwise(values))


def validate_combination(values: Sequence[int], n: int, k: int) -> None:
    """
    Check a combination already in descending order against N and K.

    Raises InvalidCombinationError for a wrong length, non-integers or
    repeated members, RankOutOfRangeError for a member outside [0, N).
    """
    if len(values) != k:
        raise InvalidCombinationError(f"expected {k} values, got {len(values)}")
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidCombinationError(f"combination members must be integers, got {v!r}")
        if not 0 <= v < n:
            raise RankOutOfRangeError(f"value {v} outside [0, {n})")
    if not is_strictly_descending(values):
        if len(set(values)) != len(values):
            raise InvalidCombinationError(f"duplicate values in {list(values)}")
        raise InvalidCombinationError(f"{list(values)} is not in descending order")
