from __future__ import annotations

from enum import Enum


class RunState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"


class PointLayout(str, Enum):
    RANDOM = "random"
    CIRCLE = "circle"


__all__ = ["PointLayout", "RunState"]
