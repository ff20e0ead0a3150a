from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from AnnealTSP.base import InvalidInput
from AnnealTSP.points import PointSet


class Tour:
    """
    Cyclic visiting order over a point set, stored as a permutation of ``0..n-1``.

    The edge set is ``{(tour[i], tour[(i + 1) % n])}``. Instances are mutated in
    place by accepted moves; use :meth:`copy` to take a snapshot.
    """

    __slots__ = ("_order",)

    def __init__(self, order: Iterable[int]):
        self._order: List[int] = [int(v) for v in order]
        if not is_permutation(self._order):
            raise InvalidInput(f"Tour must be a permutation of 0..{len(self._order) - 1}: {self._order}")

    @classmethod
    def identity(cls, n: int) -> "Tour":
        return cls(range(n))

    def reverse_segment(self, start: int, stop: int) -> None:
        """Reverse positions ``start..stop`` inclusive, in place."""
        order = self._order
        while start < stop:
            order[start], order[stop] = order[stop], order[start]
            start += 1
            stop -= 1

    def copy(self) -> "Tour":
        clone = self.__class__.__new__(self.__class__)
        clone._order = self._order[:]
        return clone

    def tolist(self) -> List[int]:
        return self._order[:]

    def __len__(self) -> int:
        return len(self._order)

    def __getitem__(self, index: int) -> int:
        return self._order[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Tour):
            return self._order == other._order
        if isinstance(other, (list, tuple)):
            return self._order == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Tour({self._order})"


def is_permutation(order: Sequence[int]) -> bool:
    return sorted(order) == list(range(len(order)))


def create_tour(points: PointSet) -> Tour:
    """Identity tour ``[0, 1, ..., n-1]`` over ``points``."""
    return Tour.identity(len(points))


__all__ = ["Tour", "create_tour", "is_permutation"]
