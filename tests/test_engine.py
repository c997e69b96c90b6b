# tests/test_engine.py
"""
Rank/unrank behaviour of the combinadic engine.

Run: pytest -v
"""

from __future__ import annotations

import itertools
import random
import threading

import pytest
from sympy import binomial

from combinadic import BinCoeff, BinCoeff32, BinCoeff64, create
from combinadic.binomial import INT32, INT64
from combinadic.errors import (
    CombinadicOverflowError,
    InvalidArgumentError,
    InvalidCombinationError,
    RankOutOfRangeError,
)

# (n, k) pairs small enough to enumerate completely
SMALL = [(2, 1), (5, 1), (5, 2), (6, 3), (7, 3), (8, 4), (9, 8), (10, 5), (13, 5)]


def _descending_subsets(n: int, k: int) -> set[tuple[int, ...]]:
    return {tuple(sorted(c, reverse=True)) for c in itertools.combinations(range(n), k)}


# ---------- construction ------------------------------------------------------

def test_thirteen_choose_five():
    eng = create(13, 5)
    assert eng.total_combinations == 1287
    assert len(eng) == 1287
    assert eng.rank([12, 11, 10, 9, 8], True) == 1286
    assert eng.unrank(1286) == [12, 11, 10, 9, 8]
    assert eng.unrank(0) == [4, 3, 2, 1, 0]


def test_create_picks_engine_class():
    assert type(create(7, 3)) is BinCoeff32
    assert type(create(7, 3, "int64")) is BinCoeff64
    assert BinCoeff64(7, 3).width is INT64
    assert BinCoeff(7, 3).width is INT32


def test_fixed_width_engines_reject_other_width():
    with pytest.raises(InvalidArgumentError):
        BinCoeff32(7, 3, "int64")
    with pytest.raises(InvalidArgumentError):
        BinCoeff64(7, 3, INT32)
    assert BinCoeff64(7, 3, "int64").tables().width is INT64
    assert BinCoeff32(7, 3, "32").width is INT32
    assert BinCoeff(7, 3, "int64").width is INT64


@pytest.mark.parametrize("n,k", [(5, 0), (5, -1), (5, 5), (4, 6)])
def test_invalid_arguments(n, k):
    with pytest.raises(InvalidArgumentError):
        create(n, k)
    with pytest.raises(ValueError):
        BinCoeff64(n, k)


def test_overflow_rejected_per_width():
    with pytest.raises(CombinadicOverflowError):
        create(34, 17)
    assert create(34, 17, INT64).total_combinations == 2333606220
    with pytest.raises(OverflowError):
        create(67, 33, INT64)


def test_verify_flag_checks_tables():
    eng = create(20, 6, verify=True)
    assert eng.tables().row_count == 5


# ---------- round trip and ordering --------------------------------------------

@pytest.mark.parametrize("n,k", SMALL)
def test_round_trip_and_bijection(n, k):
    eng = create(n, k)
    assert eng.total_combinations == int(binomial(n, k))
    seen = set()
    for r in range(eng.total_combinations):
        combo = eng.unrank(r)
        assert all(a > b for a, b in itertools.pairwise(combo))
        assert eng.rank(combo, already_sorted=True) == r
        seen.add(tuple(combo))
    assert seen == _descending_subsets(n, k)


@pytest.mark.parametrize("n,k", SMALL)
def test_boundaries(n, k):
    eng = create(n, k)
    assert eng.unrank(0) == list(range(k - 1, -1, -1))
    assert eng.unrank(eng.total_combinations - 1) == list(range(n - 1, n - k - 1, -1))


def test_seven_choose_three_enumeration_is_ordered():
    eng = create(7, 3)
    assert eng.total_combinations == 35
    combos = list(eng.combinations())
    assert len(combos) == 35
    assert len({tuple(c) for c in combos}) == 35
    for a, b in itertools.pairwise(combos):
        assert a < b
    assert list(eng.combinations(ascending=False)) == combos[::-1]
    assert list(iter(eng)) == combos


def test_normalization_of_permutations():
    eng = create(13, 5)
    expected = eng.rank([12, 11, 10, 9, 8], already_sorted=True)
    for perm in itertools.permutations([8, 9, 10, 11, 12]):
        assert eng.rank(perm) == expected


def test_rank_leaves_input_untouched():
    eng = create(7, 3)
    combo = [0, 5, 3]
    r = eng.rank(combo)
    assert combo == [0, 5, 3]
    assert eng.unrank(r) == [5, 3, 0]


def test_rank_inplace_sorts_caller_list():
    eng = create(7, 3)
    combo = [0, 5, 3]
    assert eng.rank_inplace(combo) == eng.rank([5, 3, 0], True)
    assert combo == [5, 3, 0]


def test_unrank_fills_output_buffer():
    eng = create(13, 5)
    buf = [0] * 5
    out = eng.unrank(1286, buf)
    assert out is buf
    assert buf == [12, 11, 10, 9, 8]
    with pytest.raises(InvalidCombinationError):
        eng.unrank(3, [0] * 4)


# ---------- N choose 1 ------------------------------------------------------

def test_k_equals_one_is_identity():
    eng = create(6, 1)
    assert eng.tables() is None
    assert eng.total_combinations == 6
    for v in range(6):
        assert eng.rank([v], True) == v
        assert eng.unrank(v) == [v]
    with pytest.raises(RankOutOfRangeError):
        eng.rank([6])


# ---------- invalid input ------------------------------------------------------

def test_out_of_range_rank():
    eng = create(7, 3)
    for bad in (-1, 35, 10**6):
        with pytest.raises(RankOutOfRangeError):
            eng.unrank(bad)
    with pytest.raises(IndexError):
        eng.unrank(35)


def test_non_integer_rank():
    eng = create(7, 3)
    with pytest.raises(InvalidCombinationError):
        eng.unrank(1.5)
    with pytest.raises(InvalidCombinationError):
        eng.unrank(True)


@pytest.mark.parametrize("combo,err", [
    ([3, 3, 1], InvalidCombinationError),     # duplicate
    ([6, 5], InvalidCombinationError),        # too short
    ([6, 5, 4, 3], InvalidCombinationError),  # too long
    ([7, 1, 0], RankOutOfRangeError),         # outside [0, N)
    ([4, -1, 0], RankOutOfRangeError),
    ([4, 2.0, 0], InvalidCombinationError),   # not an int
])
def test_invalid_combinations(combo, err):
    eng = create(7, 3)
    with pytest.raises(err):
        eng.rank(combo)


def test_already_sorted_flag_is_checked():
    eng = create(7, 3)
    with pytest.raises(InvalidCombinationError):
        eng.rank([0, 3, 5], already_sorted=True)


def test_contains():
    eng = create(7, 3)
    assert [5, 3, 0] in eng
    assert (0, 3, 5) in eng
    assert [5, 5, 0] not in eng
    assert [9, 1, 0] not in eng
    assert 3 not in eng


# ---------- 64-bit engine ----------------------------------------------------

def test_sixty_six_choose_thirty_three():
    eng = create(66, 33, "int64")
    total = eng.total_combinations
    assert total == 7219428434016265740
    top = list(range(65, 32, -1))
    assert eng.unrank(total - 1) == top
    assert eng.rank(top, True) == total - 1
    assert eng.unrank(0) == list(range(32, -1, -1))
    rng = random.Random(1234)
    for _ in range(200):
        r = rng.randrange(total)
        assert eng.rank(eng.unrank(r), True) == r


def test_random_round_trip_fifty_two_choose_seven():
    eng = create(52, 7)
    assert eng.total_combinations == 133784560
    rng = random.Random(7)
    for _ in range(500):
        hand = rng.sample(range(52), 7)
        r = eng.rank(hand)
        assert eng.unrank(r) == sorted(hand, reverse=True)


def test_shared_engine_across_threads():
    eng = create(20, 6)
    errors: list[int] = []

    def worker(start: int) -> None:
        for r in range(start, eng.total_combinations, 97):
            if eng.rank(eng.unrank(r), True) != r:
                errors.append(r)

    threads = [threading.Thread(target=worker, args=(s,)) for s in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
