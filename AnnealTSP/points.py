from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

import numpy as np

from AnnealTSP.base import InvalidInput


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)

    def distance_to(self, other: "Point") -> float:
        return self.distance(other.x, other.y)


class PointSet:
    """Immutable, ordered set of 2-D points; positions double as point ids."""

    __slots__ = ("_coords", "_rows")

    def __init__(self, coordinates: Iterable[Sequence[float]] | np.ndarray):
        try:
            coords = np.array(
                [(p.x, p.y) if isinstance(p, Point) else p for p in coordinates], dtype=float
            )
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Coordinates must be numeric (x, y) pairs: {exc}") from exc
        if coords.ndim != 2 or coords.shape[1] != 2:
            raise InvalidInput(f"Expected (n, 2) coordinates, got shape {coords.shape}.")
        if coords.shape[0] < 2:
            raise InvalidInput(f"A tour needs at least 2 points, got {coords.shape[0]}.")
        if not np.all(np.isfinite(coords)):
            raise InvalidInput("Coordinates must be finite.")
        coords.setflags(write=False)
        self._coords = coords
        diff = coords[:, None, :] - coords[None, :, :]
        # Plain nested lists index much faster than numpy scalars in the move loop.
        self._rows: List[List[float]] = np.linalg.norm(diff, axis=-1).tolist()

    @property
    def coordinates(self) -> np.ndarray:
        """Read-only ``(n, 2)`` array of coordinates."""
        return self._coords

    def distance(self, a: int, b: int) -> float:
        return self._rows[a][b]

    def distance_matrix(self) -> np.ndarray:
        return np.asarray(self._rows, dtype=float)

    def __len__(self) -> int:
        return self._coords.shape[0]

    def __getitem__(self, index: int) -> Point:
        x, y = self._coords[index]
        return Point(float(x), float(y))

    def __iter__(self) -> Iterator[Point]:
        for index in range(len(self)):
            yield self[index]

    def __repr__(self) -> str:
        return f"<PointSet [{len(self)} points]>"


__all__ = ["Point", "PointSet"]
