from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from AnnealTSP.acceptance import FROZEN_THRESHOLD, MetropolisCriterion
from AnnealTSP.base import ConvergedError, InvalidConfiguration, InvalidInput
from AnnealTSP.energy import total_energy
from AnnealTSP.moves import TwoOptMoveGenerator
from AnnealTSP.points import PointSet
from AnnealTSP.tour import Tour, create_tour
from AnnealTSP.utils.taxonomy import RunState

logger = logging.getLogger(__name__)


@dataclass
class AnnealingConfig:
    """Hyper-parameters for the annealing run."""

    initial_temperature: float = 10.0
    cooling_rate: float = 0.99
    plateau_limit: int = 50
    moves_per_sweep: Optional[int] = None  # None -> n * n
    frozen_threshold: float = FROZEN_THRESHOLD
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> "AnnealingConfig":
        if not 0.0 < self.cooling_rate < 1.0:
            raise InvalidConfiguration(f"cooling_rate must be in (0, 1), got {self.cooling_rate}")
        if self.plateau_limit < 1:
            raise InvalidConfiguration(f"plateau_limit must be >= 1, got {self.plateau_limit}")
        if not self.initial_temperature > 0.0:
            raise InvalidConfiguration(f"initial_temperature must be positive, got {self.initial_temperature}")
        if self.moves_per_sweep is not None and self.moves_per_sweep < 1:
            raise InvalidConfiguration(f"moves_per_sweep must be >= 1, got {self.moves_per_sweep}")
        if self.frozen_threshold < 0.0:
            raise InvalidConfiguration(f"frozen_threshold must be >= 0, got {self.frozen_threshold}")
        return self

    def sweep_length(self, n: int) -> int:
        return self.moves_per_sweep if self.moves_per_sweep is not None else n * n

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "AnnealingConfig":
        values = dict(values or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidConfiguration(f"Unknown annealing options: {', '.join(unknown)}")
        return cls(**values)


@dataclass
class BestSolution:
    """Best tour seen so far; never shares storage with the live tour."""

    tour: Tour
    energy: float

    @classmethod
    def from_tour(cls, points: PointSet, tour: Tour) -> "BestSolution":
        return cls(tour=tour.copy(), energy=total_energy(points, tour))

    def update(self, tour: Tour, energy: float) -> None:
        self.tour = tour.copy()
        self.energy = float(energy)


@dataclass(frozen=True)
class StepOutcome:
    temperature: float
    plateau_counter: int
    state: RunState
    energy: float
    accepted: int


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a run after a sweep, handed to observers."""

    sweep: int
    tour: List[int]
    energy: float
    best_tour: List[int]
    best_energy: float
    temperature: float
    plateau_counter: int
    state: RunState
    accepted: int


Observer = Callable[[Snapshot], None]


def step(
    points: PointSet,
    tour: Tour,
    temperature: float,
    best: BestSolution,
    plateau_counter: int,
    rng: Any,
    config: AnnealingConfig | None = None,
) -> StepOutcome:
    """
    Run one sweep of 2-opt proposals at a fixed ``temperature``.

    ``tour`` and ``best`` are updated in place. The temperature only cools, and
    the plateau counter only grows, when the sweep fails to beat ``best``.
    ``rng`` belongs to the run and must be reused across sweeps.
    """
    if config is None:
        config = AnnealingConfig()
    return _sweep(
        tour,
        temperature,
        best,
        plateau_counter,
        config,
        TwoOptMoveGenerator(points, rng),
        MetropolisCriterion(rng, config.frozen_threshold),
    )


def _sweep(
    tour: Tour,
    temperature: float,
    best: BestSolution,
    plateau_counter: int,
    config: AnnealingConfig,
    moves: TwoOptMoveGenerator,
    criterion: MetropolisCriterion,
) -> StepOutcome:
    # Fields may have been reassigned since construction.
    config.validate()

    accepted = 0
    for _ in range(config.sweep_length(len(tour))):
        move = moves.propose(tour)
        if criterion(temperature, move.delta):
            moves.apply(tour, move)
            accepted += 1

    energy = total_energy(moves.points, tour)
    if energy < best.energy:
        best.update(tour, energy)
        plateau_counter = 0
    else:
        temperature *= config.cooling_rate
        plateau_counter += 1

    state = RunState.CONVERGED if plateau_counter >= config.plateau_limit else RunState.RUNNING
    return StepOutcome(
        temperature=temperature,
        plateau_counter=plateau_counter,
        state=state,
        energy=energy,
        accepted=accepted,
    )


class AnnealingController:
    """
    Owns one annealing run: the live tour, temperature, best solution and
    plateau counter. Each :meth:`step` performs a single sweep; the caller
    decides the cadence.

    Example usage:

    .. code-block:: python

        controller = AnnealingController(points)
        for snapshot in controller:
            draw(snapshot.tour)
    """

    def __init__(
        self,
        points: PointSet,
        config: AnnealingConfig | None = None,
        tour: Tour | Sequence[int] | None = None,
        rng: Any = None,
        observers: Iterable[Observer] = (),
    ) -> None:
        self.config = (config or AnnealingConfig()).validate()
        self.points = points
        if tour is None:
            self._tour = create_tour(points)
        else:
            self._tour = tour.copy() if isinstance(tour, Tour) else Tour(tour)
        if len(self._tour) != len(points):
            raise InvalidInput(f"Tour visits {len(self._tour)} points but the point set has {len(points)}.")
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.observers: List[Observer] = list(observers)
        self.moves = TwoOptMoveGenerator(points, self.rng)
        self.criterion = MetropolisCriterion(self.rng, self.config.frozen_threshold)

        self._temperature = float(self.config.initial_temperature)
        self._best = BestSolution.from_tour(points, self._tour)
        self._energy = self._best.energy
        self._plateau_counter = 0
        self._state = RunState.RUNNING
        self._sweeps = 0
        self._accepted = 0
        self._last_accepted = 0

    @property
    def tour(self) -> Tour:
        return self._tour

    @property
    def best(self) -> BestSolution:
        return self._best

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def plateau_counter(self) -> int:
        return self._plateau_counter

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def converged(self) -> bool:
        return self._state is RunState.CONVERGED

    @property
    def sweeps(self) -> int:
        return self._sweeps

    @property
    def energy(self) -> float:
        return self._energy

    @property
    def accepted_moves(self) -> int:
        return self._accepted

    def add_observer(self, observer: Observer) -> None:
        self.observers.append(observer)

    def step(self) -> StepOutcome:
        if self.converged:
            raise ConvergedError(f"Run converged after {self._sweeps} sweeps; start a new controller.")

        outcome = _sweep(
            self._tour,
            self._temperature,
            self._best,
            self._plateau_counter,
            self.config,
            self.moves,
            self.criterion,
        )
        self._temperature = outcome.temperature
        self._plateau_counter = outcome.plateau_counter
        self._state = outcome.state
        self._energy = outcome.energy
        self._last_accepted = outcome.accepted
        self._accepted += outcome.accepted
        self._sweeps += 1

        logger.debug(
            "sweep=%d energy=%.6g best=%.6g T=%.6g plateau=%d accepted=%d",
            self._sweeps,
            self._energy,
            self._best.energy,
            self._temperature,
            self._plateau_counter,
            outcome.accepted,
        )
        if self.converged:
            logger.info(
                "Converged after %d sweeps: best=%.6g, T=%.6g",
                self._sweeps,
                self._best.energy,
                self._temperature,
            )

        if self.observers:
            snapshot = self.snapshot()
            for observer in self.observers:
                observer(snapshot)
        return outcome

    def snapshot(self) -> Snapshot:
        return Snapshot(
            sweep=self._sweeps,
            tour=self._tour.tolist(),
            energy=self._energy,
            best_tour=self._best.tour.tolist(),
            best_energy=self._best.energy,
            temperature=self._temperature,
            plateau_counter=self._plateau_counter,
            state=self._state,
            accepted=self._last_accepted,
        )

    def run(self, max_sweeps: int | None = None) -> Snapshot:
        """Step until convergence or until ``max_sweeps`` sweeps have run in this call."""
        done = 0
        while not self.converged and (max_sweeps is None or done < max_sweeps):
            self.step()
            done += 1
        return self.snapshot()

    def __iter__(self) -> Iterator[Snapshot]:
        while not self.converged:
            self.step()
            yield self.snapshot()

    def with_progress_bar(self):
        """
        Wraps the sweeps in a tqdm progress bar. Requires the ``tqdm`` package.
        """
        from tqdm.auto import tqdm

        return tqdm(self, unit="sweep")

    def __repr__(self) -> str:
        return "<AnnealingController [{} points, {} sweeps, {}]>".format(
            len(self.points), self._sweeps, self._state.value
        )


__all__ = [
    "AnnealingConfig",
    "AnnealingController",
    "BestSolution",
    "Observer",
    "Snapshot",
    "StepOutcome",
    "step",
]
