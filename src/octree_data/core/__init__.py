"""Core value types and vector math.

Components:
    vector: vec3 alias, length/normalize Taichi functions, host random draws
    ray: Ray dataclass (kernel side) and RayInfo (host side)
"""

from .ray import Ray, RayInfo, make_ray, ray_at
from .vector import Vec3, as_vec3, length, normalize, random_in_range, vec3

__all__ = [
    "Ray",
    "RayInfo",
    "make_ray",
    "ray_at",
    "Vec3",
    "vec3",
    "as_vec3",
    "length",
    "normalize",
    "random_in_range",
]
