from __future__ import annotations

from typing import Any, NamedTuple

from AnnealTSP.energy import edge_length
from AnnealTSP.points import PointSet
from AnnealTSP.tour import Tour


class Move(NamedTuple):
    """
    A 2-opt move between tour positions ``i`` and ``j``.

    Committing it reverses ``tour[min(i, j) + 1 .. max(i, j)]``, which drops
    edges ``(i, i+1)`` and ``(j, j+1)`` and links ``(i, j)`` and ``(i+1, j+1)``.
    ``delta`` is old length minus new length, so positive means shorter.
    """

    i: int
    j: int
    delta: float


def move_delta(points: PointSet, tour: Tour, i: int, j: int) -> float:
    if i == j:
        return 0.0
    return (
        edge_length(points, tour, i, i + 1)
        + edge_length(points, tour, j, j + 1)
        - edge_length(points, tour, i, j)
        - edge_length(points, tour, i + 1, j + 1)
    )


def propose_move(points: PointSet, tour: Tour, rng: Any) -> Move:
    """Draw two positions uniformly and independently and price the swap."""
    n = len(tour)
    i, j = (int(v) for v in rng.integers(0, n, size=2))
    return Move(i, j, move_delta(points, tour, i, j))


def apply_move(tour: Tour, i: int, j: int) -> None:
    if j < i:
        i, j = j, i
    tour.reverse_segment(i + 1, j)


class TwoOptMoveGenerator:
    """Random 2-opt neighbourhood over a fixed point set."""

    def __init__(self, points: PointSet, rng: Any):
        self.points = points
        self.rng = rng

    def propose(self, tour: Tour) -> Move:
        return propose_move(self.points, tour, self.rng)

    def apply(self, tour: Tour, move: Move) -> None:
        apply_move(tour, move.i, move.j)


__all__ = ["Move", "TwoOptMoveGenerator", "apply_move", "move_delta", "propose_move"]
