"""Ray data structure for kernel and host code.

The kernel-side ``Ray`` is a Taichi dataclass; ``RayInfo`` is its host-side
counterpart used by the sampler and the fixture writer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> origin = ti.math.vec3(-5.0, 0.5, 0.5)
    >>> direction = ti.math.vec3(1.0, 0.0, 0.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> # ray_at(ray, 5.0) inside a kernel gives (0.0, 0.5, 0.5)
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from .vector import Vec3, as_vec3, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Distances along the
            ray are measured in units of its length; sampled rays are
            normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


@dataclass(frozen=True)
class RayInfo:
    """Host-side ray value.

    Attributes:
        origin: The ray origin.
        direction: The ray direction.
    """

    origin: Vec3
    direction: Vec3

    def as_array(self) -> npt.NDArray[np.float32]:
        """Return the ray as a float32 array of shape (2, 3): [origin, direction]."""
        return np.array([self.origin, self.direction], dtype=np.float32)

    @classmethod
    def from_array(cls, values: npt.ArrayLike) -> "RayInfo":
        """Build a ray from a (2, 3) array laid out as [origin, direction]."""
        arr = np.asarray(values, dtype=np.float32).reshape(2, 3)
        return cls(origin=as_vec3(arr[0]), direction=as_vec3(arr[1]))
