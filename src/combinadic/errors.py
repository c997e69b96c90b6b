# src/combinadic/errors.py
from __future__ import annotations


class UserInputError(Exception):
    """Raised for user-facing errors (bad CLI input, unreadable profile)."""


class CombinadicError(Exception):
    """Base class for every error raised by the combinadic core."""


class InvalidArgumentError(CombinadicError, ValueError):
    """N/K pair (or width name) that cannot describe an engine."""


class CombinadicOverflowError(CombinadicError, OverflowError):
    """C(N, K) does not fit the integer width of the engine."""

    def __init__(self, n: int, k: int, value: int, limit: int, width: str):
        self.n = n
        self.k = k
        self.value = value
        self.limit = limit
        self.width = width
        super().__init__(
            f"C({n}, {k}) = {value} exceeds the {width} limit of {limit}"
        )


class RankOutOfRangeError(CombinadicError, IndexError):
    """Rank outside [0, total) or combination member outside its row."""


class InvalidCombinationError(CombinadicError, ValueError):
    """Combination with the wrong length, duplicates or non-integer members."""


class TableInvariantError(CombinadicError, AssertionError):
    """A built index table cell differs from C(j, K - i)."""

    def __init__(self, row: int, col: int, got: int, expected: int):
        self.row = row
        self.col = col
        self.got = got
        self.expected = expected
        super().__init__(f"tables[{row}][{col}] = {got}, expected {expected}")
