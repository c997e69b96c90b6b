# src/combinadic/payload.py
from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Generic, TypeVar

from combinadic.engine import BinCoeff
from combinadic.errors import RankOutOfRangeError

T = TypeVar("T")


class RankedTable(Generic[T]):
    """
    Caller-owned payload store addressed by combination rank.

    A thin growable list: append in rank order, or write by index / by
    combination. Writing past the end pads every new slot with the same
    object, so a table can be filled out of order.
    """

    def __init__(self, engine: BinCoeff, fill: T | None = None, *, prefill: bool = False):
        self.engine = engine
        self._data: list[T] = [fill] * engine.total_combinations if prefill else []  # type: ignore[list-item]

    def _check(self, index: int) -> None:
        if not 0 <= index < self.engine.total_combinations:
            raise RankOutOfRangeError(
                f"index {index} outside [0, {self.engine.total_combinations})"
            )

    def append(self, obj: T) -> int:
        """Add `obj` at the next rank; returns that rank."""
        self._check(len(self._data))
        self._data.append(obj)
        return len(self._data) - 1

    def set_item(self, index: int, obj: T) -> None:
        self._check(index)
        size = len(self._data)
        if index >= size:
            self._data.extend([obj] * (index - size + 1))
        else:
            self._data[index] = obj

    def set_by_combination(self, combination: Sequence[int], obj: T, already_sorted: bool = False) -> int:
        index = self.engine.rank(combination, already_sorted)
        self.set_item(index, obj)
        return index

    def get_item(self, index: int) -> T:
        self._check(index)
        return self._data[index]

    def get_by_combination(self, combination: Sequence[int], already_sorted: bool = False) -> T:
        return self.get_item(self.engine.rank(combination, already_sorted))

    def items(self) -> Iterator[tuple[list[int], T]]:
        """(combination, payload) pairs for every stored slot, in rank order."""
        for i, obj in enumerate(self._data):
            yield self.engine.unrank(i), obj

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index: int) -> T:
        return self.get_item(index)

    def __setitem__(self, index: int, obj: T) -> None:
        self.set_item(index, obj)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)
