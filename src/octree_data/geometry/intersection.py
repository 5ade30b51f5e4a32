"""Slab-method ray-box intersection.

The test follows Williams et al., "An Efficient and Robust Ray-Box
Intersection Algorithm": per axis, the ray's parametric entry and exit
values are computed with the reciprocal of the direction component and the
running [tmin, tmax] interval is narrowed X, then Y, then Z.

A direction component of exactly zero is legal. Its reciprocal is an
IEEE-754 infinity and the slab bounds come out as +/-inf, which keeps the
interval test correct without a special case. Taichi must therefore be
initialized with ``fast_math=False``.

A miss is reported as distance 0. A genuine grazing hit at distance 0 is
indistinguishable from a miss, and negative distances (box behind the
origin, or origin inside the box) are treated as misses by the sampler.

Example:
    >>> from src.octree_data.core.ray import RayInfo
    >>> from src.octree_data.geometry.box import BoxInfo
    >>> from src.octree_data.geometry.intersection import intersect
    >>> ray = RayInfo(origin=(-5.0, 0.5, 0.5), direction=(1.0, 0.0, 0.0))
    >>> box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(1.0, 1.0, 1.0))
    >>> hit = intersect(ray, box)
    >>> hit.distance, hit.reflected_ray.direction
    (5.0, (-1.0, 0.0, 0.0))
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.octree_data.core.ray import Ray, RayInfo, ray_at
from src.octree_data.core.vector import vec3
from src.octree_data.geometry.box import Box, BoxInfo, box_half

# Entry axis reported for rays that miss
NO_AXIS = -1


@ti.dataclass
class BoxHitRecord:
    """Record of a ray-box intersection.

    Attributes:
        t: Entry distance in units of the ray direction's length. 0 on a miss.
        axis: Axis whose near plane determined the entry (0=X, 1=Y, 2=Z).
            -1 on a miss.
        child: Octant index of the entry point. Only valid on a hit.
        reflect_origin: The entry point. Only valid on a hit.
        reflect_direction: The ray direction mirrored off the entry face.
            Only valid on a hit.
    """

    t: ti.f32
    axis: ti.i32
    child: ti.i32
    reflect_origin: vec3
    reflect_direction: vec3


@ti.func
def _slab(lo: ti.f32, hi: ti.f32, origin: ti.f32, direction: ti.f32):
    """Compute the parametric interval a ray spends between two planes.

    Returns:
        Tuple of (near, far) with near <= far for non-NaN inputs.
    """
    inv = 1.0 / direction
    near = 0.0
    far = 0.0
    if inv >= 0.0:
        near = (lo - origin) * inv
        far = (hi - origin) * inv
    else:
        near = (hi - origin) * inv
        far = (lo - origin) * inv
    return near, far


@ti.func
def intersected_child(box: Box, point: vec3) -> ti.i32:
    """Locate the octant of ``box`` that contains ``point``.

    Each coordinate is compared against the box's half extent rather than
    its center, so the result only matches the geometric octant when
    min_corner is at the origin. Existing fixture consumers depend on these
    values, so the comparison is kept as is.

    Args:
        box: The box that was hit.
        point: The entry point.

    Returns:
        Octant index in [0, 7] using the same bit layout as box_child.
    """
    half = box_half(box)
    index = 0
    if not point.x < half.x:
        index += 1
    if not point.y < half.y:
        index += 2
    if not point.z < half.z:
        index += 4
    return index


@ti.func
def intersect_box(ray: Ray, box: Box) -> BoxHitRecord:
    """Intersect a ray with an axis-aligned box.

    Args:
        ray: The ray. Its direction need not be normalized but must not be
            the zero vector.
        box: The box to test.

    Returns:
        A BoxHitRecord. A miss has t == 0 and axis == -1.
    """
    result = BoxHitRecord(
        t=0.0,
        axis=NO_AXIS,
        child=0,
        reflect_origin=vec3(0.0, 0.0, 0.0),
        reflect_direction=vec3(0.0, 0.0, 0.0),
    )

    tmin, tmax = _slab(box.min_corner.x, box.max_corner.x, ray.origin.x, ray.direction.x)
    axis = 0

    tymin, tymax = _slab(box.min_corner.y, box.max_corner.y, ray.origin.y, ray.direction.y)
    missed = tmin > tymax or tymin > tmax
    if not missed:
        if tymin > tmin:
            tmin = tymin
            axis = 1
        if tymax < tmax:
            tmax = tymax

        tzmin, tzmax = _slab(box.min_corner.z, box.max_corner.z, ray.origin.z, ray.direction.z)
        missed = tmin > tzmax or tzmin > tmax
        if not missed:
            if tzmin > tmin:
                tmin = tzmin
                axis = 2

            point = ray_at(ray, tmin)
            flip = ti.Vector([axis == 0, axis == 1, axis == 2])
            result = BoxHitRecord(
                t=tmin,
                axis=axis,
                child=intersected_child(box, point),
                reflect_origin=point,
                reflect_direction=ti.select(flip, -ray.direction, ray.direction),
            )

    return result


# =============================================================================
# Host-side API
# =============================================================================


@dataclass(frozen=True)
class BoxHit:
    """Host-side result of a single ray-box test.

    Attributes:
        distance: Entry distance. Values <= 0 are misses.
        reflected_ray: Ray starting at the entry point with the entry axis
            component of the direction negated.
        intersected_child: Octant index of the entry point.
        entry_axis: Axis of the entry face, or -1 on a slab miss.
    """

    distance: float
    reflected_ray: RayInfo
    intersected_child: int
    entry_axis: int

    @property
    def is_hit(self) -> bool:
        """Whether the ray enters the box in front of its origin."""
        return self.distance > 0.0


@dataclass
class BoxHitBatch:
    """Intersection results for many rays against one box.

    Attributes:
        distances: Entry distances, shape (N,).
        axes: Entry axes, shape (N,).
        children: Octant indices, shape (N,).
        reflected: Reflected rays as [origin, direction], shape (N, 2, 3).
    """

    distances: npt.NDArray[np.float32]
    axes: npt.NDArray[np.int32]
    children: npt.NDArray[np.int32]
    reflected: npt.NDArray[np.float32]

    def __len__(self) -> int:
        return len(self.distances)

    def get(self, index: int) -> BoxHit:
        """Extract the result for one ray."""
        return BoxHit(
            distance=float(self.distances[index]),
            reflected_ray=RayInfo.from_array(self.reflected[index]),
            intersected_child=int(self.children[index]),
            entry_axis=int(self.axes[index]),
        )


@ti.kernel
def _intersect_kernel(
    origins: ti.types.ndarray(dtype=ti.f32, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    box_arr: ti.types.ndarray(dtype=ti.f32, ndim=2),
    distances: ti.types.ndarray(dtype=ti.f32, ndim=1),
    axes: ti.types.ndarray(dtype=ti.i32, ndim=1),
    children: ti.types.ndarray(dtype=ti.i32, ndim=1),
    reflected: ti.types.ndarray(dtype=ti.f32, ndim=3),
):
    for i in range(origins.shape[0]):
        box = Box(
            min_corner=vec3(box_arr[0, 0], box_arr[0, 1], box_arr[0, 2]),
            max_corner=vec3(box_arr[1, 0], box_arr[1, 1], box_arr[1, 2]),
        )
        ray = Ray(
            origin=vec3(origins[i, 0], origins[i, 1], origins[i, 2]),
            direction=vec3(directions[i, 0], directions[i, 1], directions[i, 2]),
        )
        rec = intersect_box(ray, box)
        distances[i] = rec.t
        axes[i] = rec.axis
        children[i] = rec.child
        for axis in ti.static(range(3)):
            reflected[i, 0, axis] = rec.reflect_origin[axis]
            reflected[i, 1, axis] = rec.reflect_direction[axis]


def intersect_rays(
    origins: npt.ArrayLike,
    directions: npt.ArrayLike,
    box: BoxInfo,
) -> BoxHitBatch:
    """Intersect a batch of rays with one box in a single kernel launch.

    Args:
        origins: Ray origins, shape (N, 3).
        directions: Ray directions, shape (N, 3).
        box: The box to test.

    Returns:
        A BoxHitBatch with one entry per ray.

    Raises:
        ValueError: If origins and directions do not have matching (N, 3) shapes.
    """
    origins_arr = np.ascontiguousarray(origins, dtype=np.float32)
    directions_arr = np.ascontiguousarray(directions, dtype=np.float32)
    if origins_arr.ndim != 2 or origins_arr.shape[1] != 3 or origins_arr.shape != directions_arr.shape:
        raise ValueError(
            f"Expected matching (N, 3) arrays, got {origins_arr.shape} and {directions_arr.shape}"
        )

    n = origins_arr.shape[0]
    batch = BoxHitBatch(
        distances=np.zeros(n, dtype=np.float32),
        axes=np.full(n, NO_AXIS, dtype=np.int32),
        children=np.zeros(n, dtype=np.int32),
        reflected=np.zeros((n, 2, 3), dtype=np.float32),
    )
    if n > 0:
        _intersect_kernel(
            origins_arr,
            directions_arr,
            box.as_array(),
            batch.distances,
            batch.axes,
            batch.children,
            batch.reflected,
        )
    return batch


def intersect(ray: RayInfo, box: BoxInfo) -> BoxHit:
    """Intersect a single ray with a box.

    Args:
        ray: The ray to test.
        box: The box to test.

    Returns:
        The BoxHit for this ray.
    """
    arr = ray.as_array()
    return intersect_rays(arr[0:1], arr[1:2], box).get(0)
