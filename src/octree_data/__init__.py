"""Randomized ray/box intersection fixtures for octree-style structures.

This package manufactures self-validating test data for a ray versus
axis-aligned bounding box routine. Geometry runs in single precision inside
Taichi kernels; sampling is driven by a caller-owned NumPy generator.

Subpackages:
    core: Vector math and the Ray value type
    geometry: Box subdivision and slab-method ray-box intersection
    sampling: Rejection sampling of boxes, miss-rays and hit-rays
    fixtures: Per-iteration fixture generation
    export: Literal text serialization of fixtures
"""

__version__ = "0.1.0"
