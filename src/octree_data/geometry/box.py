"""Axis-aligned box primitive with octant subdivision.

A box is defined by two corners:
- min_corner: The lowest coordinate on every axis
- max_corner: The highest coordinate on every axis

Octant indices encode which half of the parent a child occupies along each
axis. Bit 0 selects the upper X half, bit 1 the upper Y half and bit 2 the
upper Z half:

    index  x      y      z
    0      lower  lower  lower
    1      upper  lower  lower
    2      lower  upper  lower
    ...
    7      upper  upper  upper

The eight children tile the parent exactly. Each upper child keeps the
parent's max coordinate and each lower child keeps the parent's min
coordinate, so the outer faces are reproduced bit for bit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.octree_data.geometry.box import BoxInfo, get_box_child, get_box_diagonal
    >>> box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(2.0, 2.0, 2.0))
    >>> get_box_child(box, 7)
    BoxInfo(min_corner=(1.0, 1.0, 1.0), max_corner=(2.0, 2.0, 2.0))
    >>> get_box_diagonal(box)  # sqrt(12)
    3.464...
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.octree_data.core.vector import Vec3, as_vec3, length, vec3

# Number of octants a box splits into
CHILD_COUNT = 8


@ti.dataclass
class Box:
    """An axis-aligned box.

    Attributes:
        min_corner: The minimum corner (vec3). Must not exceed max_corner on
            any axis; this is not checked.
        max_corner: The maximum corner (vec3).
    """

    min_corner: vec3
    max_corner: vec3


@ti.func
def make_box(min_corner: vec3, max_corner: vec3) -> Box:
    """Create a box from its corners inside a kernel."""
    return Box(min_corner=min_corner, max_corner=max_corner)


@ti.func
def box_half(box: Box) -> vec3:
    """Compute half the box extent along each axis.

    Args:
        box: The box to measure.

    Returns:
        (max_corner - min_corner) / 2.
    """
    return (box.max_corner - box.min_corner) / 2.0


@ti.func
def box_diagonal(box: Box) -> ti.f32:
    """Compute the length of the box's main diagonal.

    Args:
        box: The box to measure.

    Returns:
        length(max_corner - min_corner).
    """
    return length(box.max_corner - box.min_corner)


@ti.func
def box_child(box: Box, index: ti.i32) -> Box:
    """Compute the sub-box occupying octant ``index``.

    For each axis, a clear bit keeps [min, max - half] and a set bit keeps
    [min + half, max].

    Args:
        box: The parent box.
        index: Octant index in [0, 7].

    Returns:
        The child box, or the parent unchanged when index is out of range.
    """
    result = box
    if 0 <= index < CHILD_COUNT:
        half = box_half(box)
        upper = ti.Vector([index & 1, (index >> 1) & 1, (index >> 2) & 1])
        result = Box(
            min_corner=ti.select(upper == 1, box.min_corner + half, box.min_corner),
            max_corner=ti.select(upper == 1, box.max_corner, box.max_corner - half),
        )
    return result


# =============================================================================
# Host-side API
# =============================================================================


@dataclass(frozen=True)
class BoxInfo:
    """Host-side box value.

    Attributes:
        min_corner: The minimum corner.
        max_corner: The maximum corner.
    """

    min_corner: Vec3
    max_corner: Vec3

    def as_array(self) -> npt.NDArray[np.float32]:
        """Return the box as a float32 array of shape (2, 3): [min, max]."""
        return np.array([self.min_corner, self.max_corner], dtype=np.float32)

    @classmethod
    def from_array(cls, values: npt.ArrayLike) -> "BoxInfo":
        """Build a box from a (2, 3) array laid out as [min, max]."""
        arr = np.asarray(values, dtype=np.float32).reshape(2, 3)
        return cls(min_corner=as_vec3(arr[0]), max_corner=as_vec3(arr[1]))


@ti.kernel
def _box_child_kernel(
    box_arr: ti.types.ndarray(dtype=ti.f32, ndim=2),
    index: ti.i32,
    out: ti.types.ndarray(dtype=ti.f32, ndim=2),
):
    box = Box(
        min_corner=vec3(box_arr[0, 0], box_arr[0, 1], box_arr[0, 2]),
        max_corner=vec3(box_arr[1, 0], box_arr[1, 1], box_arr[1, 2]),
    )
    child = box_child(box, index)
    for axis in ti.static(range(3)):
        out[0, axis] = child.min_corner[axis]
        out[1, axis] = child.max_corner[axis]


@ti.kernel
def _box_children_kernel(
    box_arr: ti.types.ndarray(dtype=ti.f32, ndim=2),
    out: ti.types.ndarray(dtype=ti.f32, ndim=3),
):
    for index in range(CHILD_COUNT):
        box = Box(
            min_corner=vec3(box_arr[0, 0], box_arr[0, 1], box_arr[0, 2]),
            max_corner=vec3(box_arr[1, 0], box_arr[1, 1], box_arr[1, 2]),
        )
        child = box_child(box, index)
        for axis in ti.static(range(3)):
            out[index, 0, axis] = child.min_corner[axis]
            out[index, 1, axis] = child.max_corner[axis]


@ti.kernel
def _box_diagonal_kernel(box_arr: ti.types.ndarray(dtype=ti.f32, ndim=2)) -> ti.f32:
    box = Box(
        min_corner=vec3(box_arr[0, 0], box_arr[0, 1], box_arr[0, 2]),
        max_corner=vec3(box_arr[1, 0], box_arr[1, 1], box_arr[1, 2]),
    )
    return box_diagonal(box)


def get_box_child(box: BoxInfo, index: int) -> BoxInfo:
    """Compute one octant of a box on the host.

    Args:
        box: The parent box.
        index: Octant index. Values outside [0, 7] return the parent.

    Returns:
        The child box.
    """
    out = np.zeros((2, 3), dtype=np.float32)
    _box_child_kernel(box.as_array(), index, out)
    return BoxInfo.from_array(out)


def get_box_children(box: BoxInfo) -> list[BoxInfo]:
    """Compute all eight octants of a box, in index order."""
    out = np.zeros((CHILD_COUNT, 2, 3), dtype=np.float32)
    _box_children_kernel(box.as_array(), out)
    return [BoxInfo.from_array(child) for child in out]


def get_box_diagonal(box: BoxInfo) -> float:
    """Compute the diagonal length of a box on the host."""
    return float(_box_diagonal_kernel(box.as_array()))
