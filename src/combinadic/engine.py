# -----------------------------------------------------------------------------
#  engine.py
#  Rank / unrank K-combinations of N items (combinatorial number system).
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterator, MutableSequence, Sequence

from combinadic.binomial import INT32, INT64, Width, checked_binomial, resolve_width
from combinadic.errors import InvalidArgumentError, InvalidCombinationError, RankOutOfRangeError
from combinadic.normalize import sort_descending, validate_combination
from combinadic.tables import IndexTables, build_index_tables


class BinCoeff:
    """
    Maps each K-combination of {0..N-1} to its index in the sorted binomial
    coefficient table and back.

    Combinations are written in descending order. For 13 choose 5 (poker
    hand ranks), AKQJT is [12, 11, 10, 9, 8] and has index 1286, the last
    of the 1287 entries; [4, 3, 2, 1, 0] has index 0.

    The instance is read-only once built and may be shared between threads.
    """

    default_width: Width = INT32
    width_locked = False  # subclasses only run at their default width

    def __init__(self, n: int, k: int, width: Width | str | None = None, *, verify: bool = False):
        width = resolve_width(width) if width is not None else self.default_width
        if self.width_locked and width is not self.default_width:
            raise InvalidArgumentError(
                f"{type(self).__name__} is fixed to {self.default_width}, got width {width}"
            )
        if k < 1:
            raise InvalidArgumentError(f"group size K must be >= 1, got {k}")
        if n <= k:
            raise InvalidArgumentError(f"item count N must be > K, got N={n}, K={k}")

        # Raises before any table is allocated.
        total = checked_binomial(n, k, width)

        self._n = n
        self._k = k
        self._width = width
        self._total = total
        self._tables = build_index_tables(n, k, width)
        if verify and self._tables is not None:
            self._tables.verify()

    # --- properties ---------------------------------------------------------

    @property
    def item_count(self) -> int:
        return self._n

    @property
    def group_size(self) -> int:
        return self._k

    @property
    def width(self) -> Width:
        return self._width

    @property
    def total_combinations(self) -> int:
        return self._total

    def tables(self) -> IndexTables | None:
        """Read-only index tables (None for N choose 1)."""
        return self._tables

    # --- rank ---------------------------------------------------------------

    def rank(self, combination: Sequence[int], already_sorted: bool = False) -> int:
        """
        Index of `combination` in the sorted table.

        Pass already_sorted=True only when the values are in descending
        order; otherwise a sorted copy is ranked and the caller's sequence
        is left untouched.
        """
        values = list(combination) if not already_sorted else combination
        if not already_sorted:
            sort_descending(values)
        return self._rank_sorted(values)

    def rank_inplace(self, combination: MutableSequence[int], already_sorted: bool = False) -> int:
        """Like rank(), but sorts `combination` itself into descending order."""
        if not already_sorted:
            sort_descending(combination)
        return self._rank_sorted(combination)

    def _rank_sorted(self, values: Sequence[int]) -> int:
        validate_combination(values, self._n, self._k)
        if self._k == 1:
            return values[0]
        last = self._k - 1
        index = 0
        for i in range(last):
            index += self._tables.get(i, values[i])
        return index + values[last]

    # --- unrank -------------------------------------------------------------

    def unrank(self, index: int, out: MutableSequence[int] | None = None) -> MutableSequence[int]:
        """
        The combination (descending) at `index`. Fills and returns `out`
        when given, otherwise a new list.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidCombinationError(f"index must be an integer, got {index!r}")
        if not 0 <= index < self._total:
            raise RankOutOfRangeError(f"index {index} outside [0, {self._total})")
        k = self._k
        if out is None:
            out = [0] * k
        elif len(out) != k:
            raise InvalidCombinationError(f"output buffer must hold {k} values, got {len(out)}")

        if k == 1:
            out[0] = index
            return out

        remaining = index
        for i in range(k - 1):
            row = self._tables.row(i)
            # Rows are non-decreasing along j: largest j with row[j] <= remaining.
            for j in range(len(row) - 1, -1, -1):
                if remaining >= row[j]:
                    out[i] = j
                    remaining -= row[j]
                    break
        out[k - 1] = remaining
        return out

    # --- iteration ----------------------------------------------------------

    def combinations(self, ascending: bool = True) -> Iterator[list[int]]:
        """Every combination in table order (or reversed)."""
        rng = range(self._total) if ascending else range(self._total - 1, -1, -1)
        for i in rng:
            yield self.unrank(i)

    def __len__(self) -> int:
        return self._total

    def __iter__(self) -> Iterator[list[int]]:
        return self.combinations()

    def __contains__(self, combination: object) -> bool:
        try:
            self.rank(combination)  # type: ignore[arg-type]
        except (TypeError, InvalidCombinationError, RankOutOfRangeError):
            return False
        return True

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(n={self._n}, k={self._k}, width={self._width}, "
                f"total={self._total})")


class BinCoeff32(BinCoeff):
    """32-bit engine: total combinations up to 2**31 - 1."""
    default_width = INT32
    width_locked = True


class BinCoeff64(BinCoeff):
    """64-bit engine: total combinations up to 2**63 - 1 (e.g. 66 choose 33)."""
    default_width = INT64
    width_locked = True


def create(n: int, k: int, width: Width | str | None = None, *, verify: bool = False) -> BinCoeff:
    """Build the engine class matching `width` (default int32)."""
    w = resolve_width(width)
    cls = BinCoeff64 if w is INT64 else BinCoeff32
    return cls(n, k, w, verify=verify)
