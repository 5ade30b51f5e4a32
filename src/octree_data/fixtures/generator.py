"""Fixture generation for ray-box intersection tests.

One fixture bundles a random box, its eight octants, its diagonal, a ray
that misses it, a ray that hits it and the hit's reflected ray, octant and
distance. Sampling ranges widen linearly with the iteration index so later
fixtures cover larger coordinates.

Example:
    >>> import numpy as np
    >>> from src.octree_data.fixtures.generator import generate_fixtures
    >>> rng = np.random.default_rng(1)
    >>> fixtures = list(generate_fixtures(rng, 3))
    >>> len(fixtures[0].children)
    8
"""

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from src.octree_data.core.ray import RayInfo
from src.octree_data.geometry.box import BoxInfo, get_box_children, get_box_diagonal
from src.octree_data.sampling.sampler import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_ATTEMPTS,
    sample_box,
    sample_hit_ray,
    sample_miss_ray,
)

# Per-unit-scale sampling bounds
BOX_MIN_CORNER_RANGE = (-10.0, -5.0)
BOX_MAX_CORNER_RANGE = (5.0, 10.0)
RAY_ORIGIN_RANGE = (-100.0, 100.0)
RAY_DIRECTION_RANGE = (-1.0, 1.0)


@dataclass(frozen=True)
class Fixture:
    """One self-validating ray-box test case.

    Attributes:
        box: The sampled box.
        children: The box's octants in index order.
        diagonal: The box's diagonal length.
        miss_ray: A ray with intersection distance <= 0.
        hit_ray: A ray with intersection distance > 0.
        reflected_ray: hit_ray reflected off the entry face at the entry point.
        intersected_child: Octant index reported for the entry point.
        hit_distance: hit_ray's entry distance.
    """

    box: BoxInfo
    children: tuple[BoxInfo, ...]
    diagonal: float
    miss_ray: RayInfo
    hit_ray: RayInfo
    reflected_ray: RayInfo
    intersected_child: int
    hit_distance: float


@dataclass(frozen=True)
class IterationRanges:
    """Sampling bounds for one fixture.

    Attributes:
        box_min: Lower bounds for the box corners.
        box_max: Upper bounds for the box corners.
        ray_min: Lower bounds for ray origin and direction.
        ray_max: Upper bounds for ray origin and direction.
    """

    box_min: BoxInfo
    box_max: BoxInfo
    ray_min: RayInfo
    ray_max: RayInfo


def _splat(value: float) -> tuple[float, float, float]:
    return (value, value, value)


def iteration_ranges(index: int) -> IterationRanges:
    """Compute the sampling bounds for iteration ``index``.

    With scale s = index + 1, box min corners come from [-10s, -5s], box max
    corners from [5s, 10s], ray origins from [-100s, 100s] and directions
    from [-1, 1] on every axis.

    Args:
        index: Zero-based iteration index.

    Returns:
        The bounds for this iteration.
    """
    scale = float(index + 1)
    return IterationRanges(
        box_min=BoxInfo(
            min_corner=_splat(BOX_MIN_CORNER_RANGE[0] * scale),
            max_corner=_splat(BOX_MAX_CORNER_RANGE[0] * scale),
        ),
        box_max=BoxInfo(
            min_corner=_splat(BOX_MIN_CORNER_RANGE[1] * scale),
            max_corner=_splat(BOX_MAX_CORNER_RANGE[1] * scale),
        ),
        ray_min=RayInfo(
            origin=_splat(RAY_ORIGIN_RANGE[0] * scale),
            direction=_splat(RAY_DIRECTION_RANGE[0]),
        ),
        ray_max=RayInfo(
            origin=_splat(RAY_ORIGIN_RANGE[1] * scale),
            direction=_splat(RAY_DIRECTION_RANGE[1]),
        ),
    )


def generate_fixture(
    rng: np.random.Generator,
    ranges: IterationRanges,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Fixture:
    """Generate one fixture.

    The box is sampled first, then a miss-ray, then a hit-ray, all from the
    same generator.

    Args:
        rng: The random generator to consume.
        ranges: Sampling bounds.
        batch_size: Candidate rays tested per kernel launch.
        max_attempts: Candidate budget for each rejection loop.

    Returns:
        The fixture.

    Raises:
        ValueError: If the ranges or limits are invalid.
        SamplingError: If a rejection loop exhausts max_attempts.
    """
    box = sample_box(rng, ranges.box_min, ranges.box_max)
    miss_ray = sample_miss_ray(
        rng, box, ranges.ray_min, ranges.ray_max, batch_size=batch_size, max_attempts=max_attempts
    )
    hit_ray, hit = sample_hit_ray(
        rng, box, ranges.ray_min, ranges.ray_max, batch_size=batch_size, max_attempts=max_attempts
    )
    return Fixture(
        box=box,
        children=tuple(get_box_children(box)),
        diagonal=get_box_diagonal(box),
        miss_ray=miss_ray,
        hit_ray=hit_ray,
        reflected_ray=hit.reflected_ray,
        intersected_child=hit.intersected_child,
        hit_distance=hit.distance,
    )


def generate_fixtures(
    rng: np.random.Generator,
    iterations: int,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Iterator[Fixture]:
    """Lazily generate ``iterations`` fixtures with widening ranges.

    Args:
        rng: The random generator to consume.
        iterations: Number of fixtures.
        batch_size: Candidate rays tested per kernel launch.
        max_attempts: Candidate budget for each rejection loop.

    Yields:
        One fixture per iteration index, in order.
    """
    for index in range(iterations):
        yield generate_fixture(
            rng, iteration_ranges(index), batch_size=batch_size, max_attempts=max_attempts
        )
