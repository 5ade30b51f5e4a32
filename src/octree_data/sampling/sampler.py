"""Rejection sampling of boxes and rays.

Every function takes a caller-owned ``numpy.random.Generator`` so runs are
reproducible from a seed and independent generators never share state.

Rays are drawn in batches and tested against the target box in one kernel
launch per batch. The first candidate in draw order that satisfies the
predicate wins. The rest of the winning batch is discarded, so the batch
size changes how much of the generator stream a call consumes.

All rejection loops are bounded by ``max_attempts``. Running out raises
SamplingError instead of spinning forever on a range that cannot produce a
qualifying sample.

Example:
    >>> import numpy as np
    >>> from src.octree_data.core.ray import RayInfo
    >>> from src.octree_data.geometry.box import BoxInfo
    >>> rng = np.random.default_rng(42)
    >>> box = BoxInfo(min_corner=(-1.0, -1.0, -1.0), max_corner=(1.0, 1.0, 1.0))
    >>> ray_min = RayInfo(origin=(-10.0, -10.0, -10.0), direction=(-1.0, -1.0, -1.0))
    >>> ray_max = RayInfo(origin=(10.0, 10.0, 10.0), direction=(1.0, 1.0, 1.0))
    >>> ray, hit = sample_hit_ray(rng, box, ray_min, ray_max)
    >>> hit.distance > 0
    True
"""

from collections.abc import Callable

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.octree_data.core.ray import RayInfo
from src.octree_data.core.vector import as_vec3, length, normalize, random_in_range, vec3
from src.octree_data.geometry.box import BoxInfo
from src.octree_data.geometry.intersection import BoxHit, intersect_rays

# Candidates tested per kernel launch
DEFAULT_BATCH_SIZE = 64

# Upper bound on candidates drawn by one rejection loop
DEFAULT_MAX_ATTEMPTS = 100_000

# Predicate over an array of entry distances
DistancePredicate = Callable[[npt.NDArray[np.float32]], npt.NDArray[np.bool_]]


class SamplingError(RuntimeError):
    """Raised when a rejection loop exhausts its attempt budget."""


def _check_limits(batch_size: int, max_attempts: int) -> None:
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    if max_attempts <= 0:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")


def sample_box(rng: np.random.Generator, box_min: BoxInfo, box_max: BoxInfo) -> BoxInfo:
    """Sample a box with corners drawn between two bounding boxes.

    The min corner is drawn from [box_min.min_corner, box_max.min_corner] and
    the max corner from [box_min.max_corner, box_max.max_corner]. The caller
    picks ranges that keep min_corner <= max_corner; this is not enforced.

    Args:
        rng: The random generator to consume.
        box_min: Lower bounds for both corners.
        box_max: Upper bounds for both corners.

    Returns:
        The sampled box.

    Raises:
        ValueError: If a lower bound exceeds its upper bound.
    """
    min_corner = random_in_range(rng, box_min.min_corner, box_max.min_corner)
    max_corner = random_in_range(rng, box_min.max_corner, box_max.max_corner)
    return BoxInfo(min_corner=as_vec3(min_corner), max_corner=as_vec3(max_corner))


@ti.kernel
def _normalize_kernel(
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    lengths: ti.types.ndarray(dtype=ti.f32, ndim=1),
):
    for i in range(directions.shape[0]):
        d = vec3(directions[i, 0], directions[i, 1], directions[i, 2])
        n = length(d)
        lengths[i] = n
        if n > 0.0:
            unit = normalize(d)
            for axis in ti.static(range(3)):
                directions[i, axis] = unit[axis]


def _sample_directions(
    rng: np.random.Generator,
    lo: npt.ArrayLike,
    hi: npt.ArrayLike,
    count: int,
    max_attempts: int,
) -> npt.NDArray[np.float32]:
    """Draw ``count`` unit directions, re-drawing zero-length candidates."""
    lo_arr = np.asarray(lo, dtype=np.float32)
    hi_arr = np.asarray(hi, dtype=np.float32)
    if not np.any(lo_arr) and not np.any(hi_arr):
        raise ValueError("Direction range collapses to the zero vector")

    accepted = [np.empty((0, 3), dtype=np.float32)]
    found = 0
    draws = 0
    while found < count:
        if draws >= max_attempts:
            raise SamplingError(
                f"Could not draw a non-zero direction from [{lo_arr}, {hi_arr}] "
                f"after {draws} attempts"
            )
        n = min(count - found, max_attempts - draws)
        candidates = random_in_range(rng, lo_arr, hi_arr, size=n)
        draws += n
        lengths = np.zeros(n, dtype=np.float32)
        _normalize_kernel(candidates, lengths)
        keep = candidates[lengths > 0.0]
        accepted.append(keep)
        found += len(keep)
    return np.concatenate(accepted)


def sample_rays(
    rng: np.random.Generator,
    ray_min: RayInfo,
    ray_max: RayInfo,
    count: int,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32]]:
    """Sample a batch of rays with unit directions.

    Directions are drawn first from [ray_min.direction, ray_max.direction],
    re-drawing any candidate whose single-precision length is zero, then
    normalized. Origins are drawn from [ray_min.origin, ray_max.origin].

    Args:
        rng: The random generator to consume.
        ray_min: Lower bounds for origin and direction.
        ray_max: Upper bounds for origin and direction.
        count: Number of rays.
        max_attempts: Maximum number of direction draws.

    Returns:
        Tuple of (origins, directions), each a float32 array of shape (count, 3).

    Raises:
        ValueError: If a range is inverted or the direction range is zero.
        SamplingError: If max_attempts direction draws yield too few
            non-zero directions.
    """
    directions = _sample_directions(rng, ray_min.direction, ray_max.direction, count, max_attempts)
    origins = random_in_range(rng, ray_min.origin, ray_max.origin, size=count)
    return origins, directions


def sample_ray(
    rng: np.random.Generator,
    ray_min: RayInfo,
    ray_max: RayInfo,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> RayInfo:
    """Sample a single ray with a unit direction. See sample_rays."""
    origins, directions = sample_rays(rng, ray_min, ray_max, 1, max_attempts=max_attempts)
    return RayInfo(origin=as_vec3(origins[0]), direction=as_vec3(directions[0]))


def _sample_conditioned_ray(
    rng: np.random.Generator,
    box: BoxInfo,
    ray_min: RayInfo,
    ray_max: RayInfo,
    accept: DistancePredicate,
    description: str,
    batch_size: int,
    max_attempts: int,
) -> tuple[RayInfo, BoxHit]:
    """Draw rays until one satisfies ``accept`` against ``box``."""
    _check_limits(batch_size, max_attempts)

    attempts = 0
    while attempts < max_attempts:
        n = min(batch_size, max_attempts - attempts)
        origins, directions = sample_rays(rng, ray_min, ray_max, n, max_attempts=max_attempts)
        attempts += n

        batch = intersect_rays(origins, directions, box)
        matches = np.flatnonzero(accept(batch.distances))
        if matches.size > 0:
            i = int(matches[0])
            ray = RayInfo(origin=as_vec3(origins[i]), direction=as_vec3(directions[i]))
            return ray, batch.get(i)

    raise SamplingError(f"No {description} ray found for {box} after {attempts} attempts")


def sample_miss_ray(
    rng: np.random.Generator,
    box: BoxInfo,
    ray_min: RayInfo,
    ray_max: RayInfo,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> RayInfo:
    """Sample a ray whose intersection distance with ``box`` is <= 0.

    Args:
        rng: The random generator to consume.
        box: The box the ray must miss.
        ray_min: Lower bounds for origin and direction.
        ray_max: Upper bounds for origin and direction.
        batch_size: Candidates tested per kernel launch.
        max_attempts: Maximum number of candidates.

    Returns:
        The first qualifying ray.

    Raises:
        ValueError: If a range or limit is invalid.
        SamplingError: If no candidate qualifies within max_attempts.
    """
    ray, _ = _sample_conditioned_ray(
        rng,
        box,
        ray_min,
        ray_max,
        lambda distances: distances <= 0.0,
        "missing",
        batch_size,
        max_attempts,
    )
    return ray


def sample_hit_ray(
    rng: np.random.Generator,
    box: BoxInfo,
    ray_min: RayInfo,
    ray_max: RayInfo,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> tuple[RayInfo, BoxHit]:
    """Sample a ray that enters ``box`` at a positive distance.

    The ranges must make the box a plausible target; a box far outside the
    reachable origins and directions exhausts max_attempts.

    Args:
        rng: The random generator to consume.
        box: The box the ray must hit.
        ray_min: Lower bounds for origin and direction.
        ray_max: Upper bounds for origin and direction.
        batch_size: Candidates tested per kernel launch.
        max_attempts: Maximum number of candidates.

    Returns:
        Tuple of (ray, hit) for the first qualifying ray.

    Raises:
        ValueError: If a range or limit is invalid.
        SamplingError: If no candidate qualifies within max_attempts.
    """
    return _sample_conditioned_ray(
        rng,
        box,
        ray_min,
        ray_max,
        lambda distances: distances > 0.0,
        "hitting",
        batch_size,
        max_attempts,
    )
