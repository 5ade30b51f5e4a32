"""Geometry module for boxes and ray-box intersection.

Components:
    box: Axis-aligned box, octant subdivision and diagonal length
    intersection: Slab-method ray-box test with entry face reflection

Kernel-side functions (@ti.func) are meant for use inside Taichi kernels.
The get_* and intersect* functions are their host-side entry points.
"""

from .box import (
    CHILD_COUNT,
    Box,
    BoxInfo,
    box_child,
    box_diagonal,
    box_half,
    get_box_child,
    get_box_children,
    get_box_diagonal,
    make_box,
)
from .intersection import (
    BoxHit,
    BoxHitBatch,
    BoxHitRecord,
    intersect,
    intersect_box,
    intersect_rays,
    intersected_child,
)

__all__ = [
    "CHILD_COUNT",
    "Box",
    "BoxInfo",
    "make_box",
    "box_half",
    "box_child",
    "box_diagonal",
    "get_box_child",
    "get_box_children",
    "get_box_diagonal",
    "BoxHit",
    "BoxHitBatch",
    "BoxHitRecord",
    "intersect",
    "intersect_box",
    "intersect_rays",
    "intersected_child",
]
