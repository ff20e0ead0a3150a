from __future__ import annotations

from AnnealTSP.points import PointSet
from AnnealTSP.tour import Tour


def edge_length(points: PointSet, tour: Tour, i: int, j: int) -> float:
    """Distance between the points at tour positions ``i`` and ``j`` (mod n)."""
    n = len(tour)
    return points.distance(tour[i % n], tour[j % n])


def total_energy(points: PointSet, tour: Tour) -> float:
    """Compute tour length (including return leg)."""
    energy = 0.0
    for i in range(len(tour)):
        energy += edge_length(points, tour, i, i + 1)
    return energy


__all__ = ["edge_length", "total_energy"]
