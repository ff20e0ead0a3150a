from __future__ import annotations

import math
from typing import Any

FROZEN_THRESHOLD = 1e-4


def accept(temperature: float, delta: float, rng: Any, frozen_threshold: float = FROZEN_THRESHOLD) -> bool:
    """
    Metropolis rule for a move whose length change is ``delta`` (old - new).

    Below ``frozen_threshold`` only strict improvements pass and no random
    number is drawn. Otherwise exactly one uniform draw is consumed and the move
    is accepted with probability ``min(1, exp(delta / temperature))``.
    """
    if temperature < frozen_threshold:
        return delta > 0.0
    draw = rng.random()
    if delta >= 0.0:
        return True
    return draw < math.exp(delta / temperature)


class MetropolisCriterion:
    def __init__(self, rng: Any, frozen_threshold: float = FROZEN_THRESHOLD):
        self.rng = rng
        self.frozen_threshold = frozen_threshold

    def __call__(self, temperature: float, delta: float) -> bool:
        return accept(temperature, delta, self.rng, self.frozen_threshold)


__all__ = ["FROZEN_THRESHOLD", "MetropolisCriterion", "accept"]
