"""Generator configuration and Taichi runtime setup."""

import time
from dataclasses import dataclass
from typing import Literal

import numpy as np
import taichi as ti

from src.octree_data.sampling.sampler import DEFAULT_BATCH_SIZE, DEFAULT_MAX_ATTEMPTS

DEFAULT_OUTPUT_PATH = "intersection_data.txt"
DEFAULT_ITERATIONS = 10

Arch = Literal["cpu", "gpu"]


@dataclass
class GeneratorConfig:
    """Settings for one fixture generation run.

    Attributes:
        output_path: File the fixture blocks are written to.
        iterations: Number of fixture blocks.
        seed: Seed for the random generator. None seeds from wall-clock time.
        arch: Preferred Taichi backend.
        batch_size: Candidate rays tested per kernel launch.
        max_attempts: Candidate budget for each rejection loop.
        quiet: Suppress progress output.
    """

    output_path: str = DEFAULT_OUTPUT_PATH
    iterations: int = DEFAULT_ITERATIONS
    seed: int | None = None
    arch: Arch = "cpu"
    batch_size: int = DEFAULT_BATCH_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    quiet: bool = False

    def validate(self) -> None:
        """Check the settings.

        Raises:
            ValueError: If a setting is out of range.
        """
        if self.iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {self.iterations}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")
        if self.arch not in ("cpu", "gpu"):
            raise ValueError(f"Unknown arch: {self.arch}")

    def resolved_seed(self) -> int:
        """Return the configured seed, or the current Unix time if unset."""
        return self.seed if self.seed is not None else int(time.time())

    def make_rng(self) -> np.random.Generator:
        """Create the generator that drives every sampling call of the run."""
        return np.random.default_rng(self.resolved_seed())


def init_taichi(arch: Arch = "cpu") -> str:
    """Initialize Taichi for single-precision geometry.

    fast_math is disabled because the slab test relies on IEEE infinities.

    Args:
        arch: Preferred backend. "gpu" falls back to CPU when unavailable.

    Returns:
        The backend actually used ("gpu" or "cpu").
    """
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu, default_fp=ti.f32, fast_math=False)
            return "gpu"
        except Exception:
            pass
    ti.init(arch=ti.cpu, default_fp=ti.f32, fast_math=False)
    return "cpu"
