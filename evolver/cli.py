#!/usr/bin/env python3
"""
Command-line driver for the bundled example problems.

Usage:
    evolver --problem scalar --rounds 10 --generations 1
    evolver --problem polynomial --rounds 10 --generations 20
    evolver --problem noisy-poly --config my_run.yaml --seed 3 --history
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from evolver.candidates import NoisyPolynomial, Polynomial, ScalarTarget, as_points
from evolver.exceptions import EvolverError
from evolver.optimizer import Optimizer
from evolver.settings import OptimizerSettings, RunSettings, Settings, load_validated_settings

logger = logging.getLogger(__name__)

REFERENCE_POINTS = [
    (0.0, 0.1),
    (1.0, 1.4),
    (2.0, 4.0),
    (3.0, 8.4),
    (4.0, 16.5),
]

# Settings used when no --config file is given
PROBLEM_PRESETS: Dict[str, Dict[str, Any]] = {
    "scalar": {
        "optimizer": {},
        "run": {"rounds": 10, "generations": 1},
    },
    "polynomial": {
        "optimizer": {"population": 100, "survive": 8, "bad_survive": 2, "prob_mutate": 0.9},
        "run": {"rounds": 10, "generations": 20},
    },
    "noisy-poly": {
        "optimizer": {
            "population": 500,
            "survive": 7,
            "bad_survive": 3,
            "prob_mutate": 0.9,
            "selection_strategy": "stochastic",
            "smoothing_window": 4,
        },
        "run": {"rounds": 10, "generations": 100},
    },
}


def _seed_items(problem: str, seed: Optional[int]) -> List[Any]:
    """Initial candidates for ``problem``."""
    if problem == "scalar":
        return [ScalarTarget(rng=random.Random(seed))]
    points = as_points(REFERENCE_POINTS)
    rng = np.random.default_rng(seed)
    if problem == "polynomial":
        return [Polynomial(points, rng=rng)]
    # more seeds make learning on a noisy score steadier
    return [NoisyPolynomial(points, rng=rng), NoisyPolynomial(points, rng=rng)]


def build_settings(problem: str, config_path: Optional[str]) -> Settings:
    """Settings from ``config_path`` or the problem's preset."""
    if config_path:
        return load_validated_settings(config_path, force_reload=True)
    preset = PROBLEM_PRESETS[problem]
    return Settings(
        optimizer=OptimizerSettings(**preset["optimizer"]),
        run=RunSettings(**preset["run"]),
    )


def run(
    problem: str,
    settings: Settings,
    seed: Optional[int] = None,
    echo: Callable[[str], None] = print,
) -> Optimizer:
    """Run ``problem`` for the configured rounds and return the optimizer."""
    if seed is None:
        seed = settings.optimizer.random_seed
    opt = Optimizer(config=settings.optimizer.to_config(), random_seed=seed)
    for item in _seed_items(problem, seed):
        opt.add_item(item)

    n = settings.run.generations
    logger.info(f"Running {problem}: {settings.run.rounds} rounds of {n} generations, seed={seed}")
    for i in range(settings.run.rounds):
        score = opt.optimize(n)
        echo(f"Score after {(i + 1) * n:5} iterations: {score}")
    return opt


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Evolve a bundled example problem and print the best candidate'
    )
    parser.add_argument(
        '--problem',
        choices=sorted(PROBLEM_PRESETS),
        default='scalar',
        help='Example problem to optimize (default: scalar)'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='YAML settings file (default: built-in preset for the problem)'
    )
    parser.add_argument(
        '--rounds',
        type=int,
        help='Number of optimize() calls, a score is printed after each'
    )
    parser.add_argument(
        '--generations',
        type=int,
        help='Generations per round'
    )
    parser.add_argument(
        '--seed',
        type=int,
        help='Random seed for reproducible runs'
    )
    parser.add_argument(
        '--history',
        action='store_true',
        help='Print the per-generation convergence table at the end'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)'
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        settings = build_settings(args.problem, args.config)
        if args.rounds is not None or args.generations is not None:
            settings.run = RunSettings(
                rounds=args.rounds if args.rounds is not None else settings.run.rounds,
                generations=args.generations if args.generations is not None else settings.run.generations,
            )
        opt = run(args.problem, settings, seed=args.seed)
    except (EvolverError, ValueError) as e:
        # ValueError: pydantic rejecting --rounds/--generations
        print(f"Error: {e}", file=sys.stderr)
        return 2

    best = opt.get_best_ref()
    print(best.format() if hasattr(best, "format") else repr(best))

    if args.history:
        print(opt.history_frame().to_string())

    return 0


if __name__ == "__main__":
    sys.exit(main())
