#!/usr/bin/env python3
from __future__ import annotations

import argparse
import hashlib
import json
import logging
import pathlib
import sys
from datetime import datetime, timezone
from typing import Iterable

import numpy as np

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from AnnealTSP.utils.generators import generate_points
from AnnealTSP.utils.taxonomy import PointLayout

logger = logging.getLogger("AnnealTSP.scripts.generate_problems")


def create_instance(
    num_cities: int,
    layout: PointLayout,
    rng: np.random.Generator,
    width: float,
    height: float,
    padding: float,
) -> dict:
    points = generate_points(layout, num_cities, width=width, height=height, padding=padding, rng=rng)
    coordinates = points.coordinates
    digest = hashlib.sha1(coordinates.tobytes()).hexdigest()
    return {
        "num_cities": num_cities,
        "problem_id": digest,
        "layout": layout.value,
        "coordinates": coordinates.tolist(),
        "width": width,
        "height": height,
    }


def parse_args(raw_args: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate point sets for the annealing optimizer.")
    parser.add_argument(
        "--counts",
        nargs="+",
        type=int,
        default=[10, 20, 50, 100, 200],
        help="Point counts to generate.",
    )
    parser.add_argument(
        "--instances-per-count",
        type=int,
        default=5,
        help="How many instances to generate per point count.",
    )
    parser.add_argument(
        "--layouts",
        nargs="+",
        choices=[layout.value for layout in PointLayout],
        default=[PointLayout.RANDOM.value],
        help="Point placements to generate (default: random).",
    )
    parser.add_argument("--width", type=float, default=800.0, help="Area width (default: 800).")
    parser.add_argument("--height", type=float, default=600.0, help="Area height (default: 600).")
    parser.add_argument("--padding", type=float, default=10.0, help="Margin kept free at the border.")
    parser.add_argument(
        "--output",
        type=pathlib.Path,
        default=pathlib.Path("data/problems.jsonl"),
        help="Destination JSONL file.",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42).")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return parser.parse_args(raw_args)


def main(raw_args: Iterable[str] | None = None) -> None:
    args = parse_args(raw_args)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    rng = np.random.default_rng(args.seed)

    timestamp = datetime.now(timezone.utc).isoformat()
    args.output.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with args.output.open("w", encoding="utf-8") as fh:
        for layout_name in args.layouts:
            layout = PointLayout(layout_name)
            for count in args.counts:
                for _ in range(args.instances_per_count):
                    instance = create_instance(count, layout, rng, args.width, args.height, args.padding)
                    record = {
                        "created_at": timestamp,
                        "seed": args.seed,
                        **instance,
                    }
                    fh.write(json.dumps(record))
                    fh.write("\n")
                    written += 1
    logger.info("Wrote %d problem instances to %s", written, args.output)


if __name__ == "__main__":
    main()
