from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence


@dataclass
class AlgorithmResult:
    """Container capturing the outcome of an annealing run."""

    name: str
    path: List[int] | None
    cost: float | None
    elapsed: float
    status: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class AnnealingError(Exception):
    """Base class for errors raised by the optimizer."""


class InvalidInput(AnnealingError, ValueError):
    """Raised for point sets or tours the optimizer cannot work with."""


class InvalidConfiguration(AnnealingError, ValueError):
    """Raised when annealing parameters are out of range."""


class ConvergedError(AnnealingError, RuntimeError):
    """Raised when stepping a run that has already converged."""


class TimeLimitExpired(Exception):
    """Raised when a run exceeds the allotted wall clock budget."""


def current_time() -> float:
    return time.perf_counter()


def remaining_budget(start_time: float, time_limit: float) -> float:
    return time_limit - (current_time() - start_time)


def enforce_time_budget(start_time: float, time_limit: float | None) -> None:
    if time_limit is None:
        return
    if remaining_budget(start_time, time_limit) <= 0:
        raise TimeLimitExpired("Time budget exhausted")


def best_cycle(points: Sequence[int]) -> List[int]:
    cycle = list(points)
    if cycle and cycle[0] != cycle[-1]:
        cycle.append(cycle[0])
    return cycle


__all__ = [
    "AlgorithmResult",
    "AnnealingError",
    "ConvergedError",
    "InvalidConfiguration",
    "InvalidInput",
    "TimeLimitExpired",
    "best_cycle",
    "current_time",
    "enforce_time_budget",
    "remaining_budget",
]
