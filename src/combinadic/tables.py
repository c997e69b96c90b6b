# -----------------------------------------------------------------------------
#  tables.py
#  Prefix-sum index tables of the combinatorial number system.
# -----------------------------------------------------------------------------

from __future__ import annotations

from array import array
from collections.abc import Iterator

from sympy import binomial

from combinadic.binomial import INT32, Width, resolve_width
from combinadic.errors import InvalidArgumentError, TableInvariantError


class IndexTables:
    """
    K-1 rows of binomial coefficients stored in one flat arena.

    Row i (0 = most significant) has N-i cells and holds C(j, K-i) at
    column j. Cells are written once by build_index_tables() and exposed
    only through read-only memoryviews afterwards.
    """

    __slots__ = ("_arena", "_lengths", "_offsets", "_view", "group_size", "item_count", "width")

    def __init__(self, n: int, k: int, width: Width):
        self.item_count = n
        self.group_size = k
        self.width = width
        rows = k - 1
        self._lengths = tuple(n - i for i in range(rows))
        offsets = []
        pos = 0
        for ln in self._lengths:
            offsets.append(pos)
            pos += ln
        self._offsets = tuple(offsets)
        self._arena = array(width.typecode, [0]) * pos
        self._view: memoryview | None = None

    # --- construction (builder only) --------------------------------------

    def _set(self, i: int, j: int, value: int) -> None:
        self._arena[self._offsets[i] + j] = value

    def _freeze(self) -> None:
        self._view = memoryview(self._arena).toreadonly()

    # --- read access -------------------------------------------------------

    @property
    def row_count(self) -> int:
        return len(self._lengths)

    def row_length(self, i: int) -> int:
        return self._lengths[i]

    def row(self, i: int) -> memoryview:
        """Read-only view of row i."""
        if not 0 <= i < self.row_count:
            raise IndexError(f"row {i} out of range (0..{self.row_count - 1})")
        off = self._offsets[i]
        view = self._view if self._view is not None else memoryview(self._arena).toreadonly()
        return view[off:off + self._lengths[i]]

    def get(self, i: int, j: int) -> int:
        if not 0 <= j < self._lengths[i]:
            raise IndexError(f"column {j} out of range for row {i} (0..{self._lengths[i] - 1})")
        return self._arena[self._offsets[i] + j]

    def rows(self) -> Iterator[memoryview]:
        for i in range(self.row_count):
            yield self.row(i)

    def to_lists(self) -> list[list[int]]:
        return [r.tolist() for r in self.rows()]

    @property
    def nbytes(self) -> int:
        return self._arena.itemsize * len(self._arena)

    def verify(self) -> None:
        """Raise TableInvariantError unless every cell equals C(j, K-i)."""
        k = self.group_size
        for i in range(self.row_count):
            r = self.row(i)
            for j in range(len(r)):
                expected = int(binomial(j, k - i)) if j >= k - i else 0
                if r[j] != expected:
                    raise TableInvariantError(i, j, r[j], expected)

    def __len__(self) -> int:
        return self.row_count

    def __getitem__(self, i: int) -> memoryview:
        return self.row(i)

    def __iter__(self) -> Iterator[memoryview]:
        return self.rows()

    def __repr__(self) -> str:
        return (f"IndexTables(n={self.item_count}, k={self.group_size}, "
                f"rows={self.row_count}, width={self.width})")


def build_index_tables(n: int, k: int, width: Width | str = INT32) -> IndexTables | None:
    """
    Build the index tables for N choose K. Returns None when K == 1,
    where rank and unrank are the identity.

    The last row is seeded with the triangular numbers C(j, 2); every row
    above it follows Pascal's rule C(j, m) = C(j-1, m) + C(j-1, m-1), reading
    the previous cell of its own row and the cell one column back in the
    row below.
    """
    width = resolve_width(width)
    if k < 1:
        raise InvalidArgumentError(f"group size K must be >= 1, got {k}")
    if n <= k:
        raise InvalidArgumentError(f"item count N must be > K, got N={n}, K={k}")
    if k == 1:
        return None

    t = IndexTables(n, k, width)
    last = k - 2

    # C(j, 2): 0, 0, 1, 3, 6, 10, ...
    value, inc = 1, 2
    for j in range(2, t.row_length(last)):
        t._set(last, j, value)
        value += inc
        inc += 1

    start = 3
    end = n - (k - 3)
    for i in range(k - 3, -1, -1):
        below = i + 1
        t._set(i, start, 1)
        prev = 1
        for j in range(start + 1, end):
            prev = prev + t._arena[t._offsets[below] + j - 1]
            t._set(i, j, prev)
        start += 1
        end += 1

    t._freeze()
    return t
