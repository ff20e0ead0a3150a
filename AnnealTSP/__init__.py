from AnnealTSP.base import (
    AlgorithmResult,
    AnnealingError,
    ConvergedError,
    InvalidConfiguration,
    InvalidInput,
    TimeLimitExpired,
)
from AnnealTSP.points import Point, PointSet
from AnnealTSP.tour import Tour, create_tour
from AnnealTSP.energy import edge_length, total_energy
from AnnealTSP.moves import Move, TwoOptMoveGenerator, apply_move, propose_move
from AnnealTSP.acceptance import MetropolisCriterion, accept
from AnnealTSP.annealing import (
    AnnealingConfig,
    AnnealingController,
    BestSolution,
    Snapshot,
    StepOutcome,
    step,
)
from AnnealTSP.callbacks import logging_observer, make_history
from AnnealTSP.core import AnnealTSP
from AnnealTSP.utils.generators import circle_points, generate_points, random_points
from AnnealTSP.utils.taxonomy import PointLayout, RunState

__all__ = [
    "AlgorithmResult",
    "AnnealTSP",
    "AnnealingConfig",
    "AnnealingController",
    "AnnealingError",
    "BestSolution",
    "ConvergedError",
    "InvalidConfiguration",
    "InvalidInput",
    "MetropolisCriterion",
    "Move",
    "Point",
    "PointLayout",
    "PointSet",
    "RunState",
    "Snapshot",
    "StepOutcome",
    "TimeLimitExpired",
    "Tour",
    "TwoOptMoveGenerator",
    "accept",
    "apply_move",
    "circle_points",
    "create_tour",
    "edge_length",
    "generate_points",
    "logging_observer",
    "make_history",
    "propose_move",
    "random_points",
    "step",
    "total_energy",
]
