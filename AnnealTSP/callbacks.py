from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from AnnealTSP.annealing import Observer, Snapshot


def make_history() -> Tuple[Dict[str, List[Any]], Observer]:
    history: Dict[str, List[Any]] = {
        "sweep": [],          # [1, 2, 3, ...]
        "energy": [],         # live tour length after the sweep
        "best_energy": [],
        "temperature": [],
        "best_tour": [],
    }

    def cb(snapshot: Snapshot) -> None:
        history["sweep"].append(snapshot.sweep)
        history["energy"].append(float(snapshot.energy))
        history["best_energy"].append(float(snapshot.best_energy))
        history["temperature"].append(float(snapshot.temperature))
        history["best_tour"].append(snapshot.best_tour[:])

    return history, cb


def logging_observer(logger: logging.Logger, level: int = logging.INFO) -> Observer:
    """Observer that reports each sweep through ``logger``."""

    def cb(snapshot: Snapshot) -> None:
        logger.log(
            level,
            "sweep %d / E: %.6g / best: %.6g / T: %.6g / plateau: %d",
            snapshot.sweep,
            snapshot.energy,
            snapshot.best_energy,
            snapshot.temperature,
            snapshot.plateau_counter,
        )

    return cb


__all__ = ["logging_observer", "make_history"]
