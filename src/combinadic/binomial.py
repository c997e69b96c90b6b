# -----------------------------------------------------------------------------
#  binomial.py
#  Binomial coefficients under fixed integer widths.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass

import gmpy2

from combinadic.errors import CombinadicOverflowError, InvalidArgumentError


@dataclass(frozen=True)
class Width:
    """A signed two's-complement integer width an engine is bound to."""
    name: str
    bits: int
    typecode: str  # array.array typecode able to hold max_value

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1))

    def wrap(self, x: int) -> int:
        """Reduce x to this width the way fixed-width hardware arithmetic does."""
        mask = (1 << self.bits) - 1
        x &= mask
        return x - (1 << self.bits) if x > self.max_value else x

    def __str__(self) -> str:
        return self.name


INT32 = Width("int32", 32, "i")
INT64 = Width("int64", 64, "q")

_WIDTH_ALIASES = {
    "int32": INT32, "32": INT32, "int": INT32, "i32": INT32,
    "int64": INT64, "64": INT64, "long": INT64, "i64": INT64,
}


def resolve_width(width: Width | str | int | None) -> Width:
    """Accept a Width, a name ('int32', 'long', ...) or a bit count (32/64)."""
    if width is None:
        return INT32
    if isinstance(width, Width):
        return width
    key = str(width).strip().lower()
    try:
        return _WIDTH_ALIASES[key]
    except KeyError:
        raise InvalidArgumentError(
            f"unknown integer width {width!r} (expected one of: int32, int64)"
        ) from None


def fits(value: int, width: Width) -> bool:
    return width.min_value <= value <= width.max_value


def _trunc_div(a: int, b: int) -> int:
    # Integer division rounding toward zero, as fixed-width division does.
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def binomial_bounded(n: int, k: int, width: Width = INT32) -> int:
    """
    Fast multiplicative C(n, k) = (n-k+1)(n-k+2)...n / k! at a fixed width.

    Every product is wrapped to `width`, so the result is only meaningful
    when the caller already knows it fits (see checked_binomial). No
    overflow is detected here.
    """
    if k < 0:
        return 0
    if k == 0:
        return 1
    if k == 1:
        return n
    start = n - k + 1
    total = start
    for i in range(start + 1, n + 1):
        total = width.wrap(total * i)
    divisor = 2
    for i in range(3, k + 1):
        divisor = width.wrap(divisor * i)
    if divisor == 0:
        return 0
    return width.wrap(_trunc_div(total, divisor))


def binomial_wide(n: int, k: int) -> int:
    """
    Overflow-resistant iterative C(n, k).

    Interleaves multiply and divide every step so intermediates stay close
    to the final magnitude; each division is exact. Returns 0 if k > n.
    """
    if k > n or k < 0:
        return 0
    r = gmpy2.mpz(1)
    for d in range(1, k + 1):
        r = r * (n - d + 1) // d
    return int(r)


def checked_binomial(n: int, k: int, width: Width | str = INT32) -> int:
    """
    C(n, k) guaranteed to fit `width`, or CombinadicOverflowError.

    The wide value is compared against gmpy2's exact comb() and the width
    ceiling. Never returns a truncated or negative total.
    """
    width = resolve_width(width)
    if n < 0:
        raise InvalidArgumentError(f"n must be non-negative, got {n}")
    exact = int(gmpy2.comb(n, k)) if 0 <= k <= n else 0
    wide = binomial_wide(n, k)
    if wide != exact or not fits(wide, width):
        raise CombinadicOverflowError(n, k, exact, width.max_value, width.name)
    return wide


def checked_binomial_bounded(n: int, k: int, width: Width | str = INT32) -> int:
    """
    Fast-path C(n, k), trusted only when it matches the wide computation.

    A wrapped running product shows up as a mismatch and is reported as
    CombinadicOverflowError, even when the true value would fit.
    """
    width = resolve_width(width)
    wide = checked_binomial(n, k, width)
    if k < 1:
        return wide
    fast = binomial_bounded(n, k, width)
    if fast != wide:
        raise CombinadicOverflowError(n, k, wide, width.max_value, width.name)
    return fast
