"""Single-precision 3-component vector utilities.

Kernel-side helpers are Taichi functions usable inside ``@ti.kernel`` code.
Random generation happens on the host with a caller-owned
``numpy.random.Generator`` so that fixture runs are reproducible from a seed.

Example:
    >>> import numpy as np
    >>> rng = np.random.default_rng(7)
    >>> random_in_range(rng, (0.0, 0.0, 0.0), (1.0, 2.0, 3.0))
    array([...], dtype=float32)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Host-side vector representation
Vec3 = tuple[float, float, float]


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector.

    Args:
        v: The input vector.

    Returns:
        sqrt(x^2 + y^2 + z^2).
    """
    return ti.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    The result is undefined for a zero-length input; callers reject those
    before normalizing.

    Args:
        v: The input vector.

    Returns:
        v / length(v).
    """
    return v / length(v)


def as_vec3(values: npt.ArrayLike) -> Vec3:
    """Convert a 3-element sequence to a host-side tuple of float32 values."""
    arr = np.asarray(values, dtype=np.float32).reshape(3)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


def random_in_range(
    rng: np.random.Generator,
    lo: npt.ArrayLike,
    hi: npt.ArrayLike,
    size: int | None = None,
) -> npt.NDArray[np.float32]:
    """Draw vectors uniformly, each axis independently from [lo, hi].

    Args:
        rng: The random generator to consume.
        lo: Per-axis lower bounds (3 values).
        hi: Per-axis upper bounds (3 values).
        size: Number of vectors to draw. None draws a single vector.

    Returns:
        A float32 array of shape (3,) or (size, 3).

    Raises:
        ValueError: If lo exceeds hi on any axis.
    """
    lo_arr = np.asarray(lo, dtype=np.float32).reshape(3)
    hi_arr = np.asarray(hi, dtype=np.float32).reshape(3)
    if np.any(lo_arr > hi_arr):
        raise ValueError(f"Invalid range: lower bound {lo_arr} exceeds upper bound {hi_arr}")

    shape = (3,) if size is None else (size, 3)
    values = rng.uniform(lo_arr, hi_arr, size=shape).astype(np.float32)
    # float64 draws may round up past hi after the float32 cast
    return np.clip(values, lo_arr, hi_arr)
