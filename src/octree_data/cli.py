#!/usr/bin/env python3
"""Generate ray-box intersection fixtures.

Writes one brace-initializer block per iteration to a text file. Each block
holds a random box, its octants and diagonal, a ray that misses the box, a
ray that hits it, and the hit's reflected ray, octant and distance.

Usage:
    python -m src.octree_data [output] [iterations] [options]

Arguments:
    output              Output file path (default: intersection_data.txt)
    iterations          Number of fixtures (default: 10)

Options:
    --seed SEED         Random seed (default: current Unix time)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --batch-size SIZE   Candidate rays per kernel launch (default: 64)
    --max-attempts N    Candidate budget per rejection loop (default: 100000)
    --quiet             Suppress progress output

Example:
    python -m src.octree_data fixtures.txt 25 --seed 7
"""

import argparse
import sys
import time
from collections.abc import Iterator
from pathlib import Path

from src.octree_data.config import (
    DEFAULT_ITERATIONS,
    DEFAULT_OUTPUT_PATH,
    GeneratorConfig,
    init_taichi,
)
from src.octree_data.export.fixture_writer import write_fixtures
from src.octree_data.fixtures.generator import Fixture, generate_fixtures
from src.octree_data.sampling.sampler import DEFAULT_BATCH_SIZE, DEFAULT_MAX_ATTEMPTS


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate ray-box intersection fixtures.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_OUTPUT_PATH,
        help=f"Output file path (default: {DEFAULT_OUTPUT_PATH})",
    )
    parser.add_argument(
        "iterations",
        nargs="?",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Number of fixtures (default: {DEFAULT_ITERATIONS})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: current Unix time)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Candidate rays per kernel launch (default: {DEFAULT_BATCH_SIZE})",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help=f"Candidate budget per rejection loop (default: {DEFAULT_MAX_ATTEMPTS})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    """Build a GeneratorConfig from parsed arguments."""
    return GeneratorConfig(
        output_path=args.output,
        iterations=args.iterations,
        seed=args.seed,
        arch=args.arch,
        batch_size=args.batch_size,
        max_attempts=args.max_attempts,
        quiet=args.quiet,
    )


def generate_intersection_data(config: GeneratorConfig) -> Path | None:
    """Generate fixtures and write them to ``config.output_path``.

    Taichi must already be initialized. An unset config.seed is replaced by
    the wall-clock seed actually used.

    Args:
        config: Run settings.

    Returns:
        Path to the written file, or None if it could not be opened.

    Raises:
        ValueError: If the configuration is invalid.
        SamplingError: If a rejection loop exhausts its attempt budget.
    """
    config.validate()
    seed = config.resolved_seed()
    config.seed = seed
    rng = config.make_rng()
    start_time = time.time()

    def with_progress(fixtures: Iterator[Fixture]) -> Iterator[Fixture]:
        # Only runs once the output file is open
        if not config.quiet:
            print(f"Generating {config.iterations} fixtures (seed {seed})...")
        for current, fixture in enumerate(fixtures, start=1):
            if not config.quiet:
                print(f"\r  Progress: {current}/{config.iterations} fixtures", end="", flush=True)
            yield fixture
        if not config.quiet and config.iterations > 0:
            print()  # Newline after progress

    fixtures = generate_fixtures(
        rng,
        config.iterations,
        batch_size=config.batch_size,
        max_attempts=config.max_attempts,
    )
    written = write_fixtures(with_progress(fixtures), config.output_path)
    if written is None:
        return None

    output_file = Path(config.output_path)
    if not config.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = config_from_args(args)

    backend = init_taichi(config.arch)
    if not config.quiet:
        print(f"Using {backend.upper()} backend")

    try:
        generate_intersection_data(config)
        return 0
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
