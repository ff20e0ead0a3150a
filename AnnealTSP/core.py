from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Iterable

import numpy as np

from AnnealTSP.annealing import AnnealingConfig, AnnealingController, Observer
from AnnealTSP.base import (
    AlgorithmResult,
    InvalidInput,
    TimeLimitExpired,
    best_cycle,
    current_time,
    enforce_time_budget,
)
from AnnealTSP.points import PointSet

logger = logging.getLogger(__name__)


class AnnealTSP:
    """End-to-end driver: coordinates -> annealing controller -> result."""

    name = "simulated_annealing"

    def __init__(
        self,
        config: AnnealingConfig | None = None,
        observers: Iterable[Observer] = (),
        rng: np.random.Generator | None = None,
    ):
        self.config = (config or AnnealingConfig()).validate()
        self.observers = list(observers)
        self.rng = rng

    def solve(
        self,
        problem_data: Dict[str, Any],
        time_budget: float | None = None,
        max_sweeps: int | None = None,
    ) -> AlgorithmResult:
        start_time = current_time()
        points = self._to_points(problem_data)
        config = self._merge_config(problem_data.get("config"))
        controller = AnnealingController(
            points,
            config=config,
            tour=problem_data.get("initial_tour"),
            rng=self.rng,
            observers=self.observers,
        )
        initial_energy = controller.energy
        logger.info(
            "Annealing %d points: E0=%.6g, T0=%.6g, cooling=%.4g, plateau_limit=%d",
            len(points),
            initial_energy,
            config.initial_temperature,
            config.cooling_rate,
            config.plateau_limit,
        )

        status = "complete"
        try:
            while not controller.converged:
                if max_sweeps is not None and controller.sweeps >= max_sweeps:
                    status = "sweep_limit"
                    break
                enforce_time_budget(start_time, time_budget)
                controller.step()
        except TimeLimitExpired:
            status = "timeout"

        elapsed = current_time() - start_time
        logger.info(
            "Annealing finished (%s) after %d sweeps in %.3fs: best=%.6g",
            status,
            controller.sweeps,
            elapsed,
            controller.best.energy,
        )
        return AlgorithmResult(
            name=self.name,
            path=best_cycle(controller.best.tour),
            cost=controller.best.energy,
            elapsed=elapsed,
            status=status,
            metadata={
                "sweeps": controller.sweeps,
                "accepted": controller.accepted_moves,
                "initial_energy": initial_energy,
                "final_energy": controller.energy,
                "initial_temperature": config.initial_temperature,
                "final_temperature": controller.temperature,
                "plateau_counter": controller.plateau_counter,
                "moves_per_sweep": config.sweep_length(len(points)),
                "budget_requested": time_budget,
            },
        )

    def _merge_config(self, overrides: Dict[str, Any] | None) -> AnnealingConfig:
        if not overrides:
            return self.config
        values = asdict(self.config)
        values.update(overrides)
        return AnnealingConfig.from_mapping(values)

    def _to_points(self, problem_data: Dict[str, Any]) -> PointSet:
        if "coordinates" not in problem_data or problem_data["coordinates"] is None:
            raise InvalidInput("Problem data must contain 'coordinates'.")
        return PointSet(problem_data["coordinates"])


__all__ = ["AnnealTSP"]
