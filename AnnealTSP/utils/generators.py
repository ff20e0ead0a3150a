from __future__ import annotations

from typing import Optional

import numpy as np

from AnnealTSP.base import InvalidInput
from AnnealTSP.points import PointSet
from AnnealTSP.utils.taxonomy import PointLayout


def random_points(
    n: int,
    width: float,
    height: float,
    padding: float = 10,
    rng: Optional[np.random.Generator] = None,
) -> PointSet:
    """Integer points drawn uniformly inside the padded ``width x height`` area."""
    if rng is None:
        rng = np.random.default_rng()
    u = rng.random((n, 2))
    xs = np.trunc(u[:, 0] * (width - padding * 2)) + padding
    ys = np.trunc(u[:, 1] * (height - padding * 2)) + padding
    return PointSet(np.column_stack([xs, ys]))


def circle_points(
    n: int,
    width: float,
    height: float,
    padding: float = 10,
    rng: Optional[np.random.Generator] = None,
) -> PointSet:
    """Integer points at random angles on the largest circle fitting the padded area."""
    if rng is None:
        rng = np.random.default_rng()
    cx = width / 2 - padding
    cy = height / 2 - padding
    radius = cx if width < height else cy
    angles = rng.random(n) * 2 * np.pi
    xs = np.trunc(cx + np.sin(angles) * radius) + padding
    ys = np.trunc(cy + np.cos(angles) * radius) + padding
    return PointSet(np.column_stack([xs, ys]))


def generate_points(
    layout: PointLayout | str,
    n: int,
    width: float = 800.0,
    height: float = 600.0,
    padding: float = 10,
    rng: Optional[np.random.Generator] = None,
) -> PointSet:
    try:
        layout = PointLayout(layout)
    except ValueError as exc:
        raise InvalidInput(f"Unknown point layout: {layout}") from exc
    if n < 2:
        raise InvalidInput(f"A tour needs at least 2 points, got {n}.")
    if width <= padding * 2 or height <= padding * 2:
        raise InvalidInput(f"Area {width}x{height} leaves no room inside padding {padding}.")
    if layout is PointLayout.CIRCLE:
        return circle_points(n, width, height, padding, rng)
    return random_points(n, width, height, padding, rng)


__all__ = ["circle_points", "generate_points", "random_points"]
