#!/usr/bin/env python3
from __future__ import annotations

import argparse
import hashlib
import json
import logging
import pathlib
import sys
from dataclasses import asdict
from typing import Iterable, Iterator

import numpy as np
from tqdm import tqdm

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from AnnealTSP import AlgorithmResult, AnnealingConfig, AnnealTSP, AnnealingError

logger = logging.getLogger("AnnealTSP.scripts.run_annealing")


def parse_args(raw_args: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run simulated annealing on generated point sets.")
    parser.add_argument(
        "--problems",
        type=pathlib.Path,
        default=pathlib.Path("data/problems.jsonl"),
        help="JSONL file containing problem instances.",
    )
    parser.add_argument(
        "--results",
        type=pathlib.Path,
        default=pathlib.Path("data/results.jsonl"),
        help="Destination JSONL file for run outcomes.",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Per-problem time budget in seconds (default: run to convergence).",
    )
    parser.add_argument("--max-sweeps", type=int, default=None, help="Stop after this many sweeps.")
    parser.add_argument("--initial-temperature", type=float, default=10.0)
    parser.add_argument("--cooling-rate", type=float, default=0.99)
    parser.add_argument("--plateau-limit", type=int, default=50)
    parser.add_argument(
        "--moves-per-sweep",
        type=int,
        default=None,
        help="Move proposals per sweep (default: n squared).",
    )
    parser.add_argument("--frozen-threshold", type=float, default=1e-4)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for every run.")
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Re-run problems that already have results.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return parser.parse_args(raw_args)


def config_from_args(args: argparse.Namespace) -> AnnealingConfig:
    return AnnealingConfig(
        initial_temperature=args.initial_temperature,
        cooling_rate=args.cooling_rate,
        plateau_limit=args.plateau_limit,
        moves_per_sweep=args.moves_per_sweep,
        frozen_threshold=args.frozen_threshold,
        seed=args.seed,
    ).validate()


def iter_jsonl(path: pathlib.Path) -> Iterator[dict]:
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            yield json.loads(line)


def load_existing_results(path: pathlib.Path) -> dict[str, dict]:
    records: dict[str, dict] = {}
    if not path.exists():
        return records
    for row in iter_jsonl(path):
        pid = row.get("problem_id")
        if not pid:
            continue
        records[pid] = row
    return records


def ensure_problem_id(problem: dict) -> str:
    if "problem_id" in problem:
        return problem["problem_id"]
    coords = np.asarray(problem.get("coordinates"), dtype=float)
    digest = hashlib.sha1(coords.tobytes()).hexdigest()
    problem["problem_id"] = digest
    return digest


def serialize_result(problem: dict, result: AlgorithmResult) -> dict:
    record = asdict(result)
    record.update(
        {
            "algorithm": result.name,
            "problem_id": problem["problem_id"],
            "num_cities": problem.get("num_cities", len(problem.get("coordinates") or [])),
        }
    )
    return record


def main(raw_args: Iterable[str] | None = None) -> int:
    args = parse_args(raw_args)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    if not args.problems.exists():
        raise SystemExit(f"Problem file not found: {args.problems}")

    solver = AnnealTSP(config=config_from_args(args))
    existing = load_existing_results(args.results)
    problems = list(iter_jsonl(args.problems))
    appended = 0
    reused = 0
    args.results.parent.mkdir(parents=True, exist_ok=True)

    with args.results.open("a", encoding="utf-8") as out:
        for problem in tqdm(problems, desc="Annealing", unit="problem"):
            problem_id = ensure_problem_id(problem)
            if not args.overwrite and problem_id in existing:
                reused += 1
                logger.info("Problem %s -> cached (%s)", problem_id, existing[problem_id].get("status"))
                continue
            try:
                result = solver.solve(problem, time_budget=args.time_limit, max_sweeps=args.max_sweeps)
                record = serialize_result(problem, result)
            except AnnealingError as exc:
                logger.error("Problem %s rejected: %s", problem_id, exc)
                record = {
                    "algorithm": solver.name,
                    "problem_id": problem_id,
                    "num_cities": problem.get("num_cities"),
                    "status": "invalid",
                    "reason": type(exc).__name__,
                    "error": str(exc),
                }
            out.write(json.dumps(record))
            out.write("\n")
            existing[problem_id] = record
            appended += 1
            logger.info("Problem %s -> %s (cost=%s)", problem_id, record.get("status"), record.get("cost"))

    print(f"Completed {appended} new runs. Reused {reused} cached results.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
