"""Unit tests for box subdivision and diagonal length.

Tests cover:
- Octant children of a concrete box
- Children tiling the parent for random boxes
- Out-of-range octant indices returning the parent
- Diagonal length
"""

import math

import numpy as np
import pytest
import taichi as ti


def _random_box(rng):
    from src.octree_data.geometry.box import BoxInfo

    lo = rng.uniform(-50.0, 0.0, size=3)
    hi = lo + rng.uniform(0.0, 50.0, size=3)
    return BoxInfo.from_array(np.stack([lo, hi]))


class TestBoxChild:
    """Tests for octant subdivision."""

    def test_lowest_child(self):
        """Test child 0 of the [0, 2] box is [0, 1]."""
        from src.octree_data.geometry.box import BoxInfo, get_box_child

        box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(2.0, 2.0, 2.0))
        child = get_box_child(box, 0)

        assert child.min_corner == (0.0, 0.0, 0.0)
        assert child.max_corner == (1.0, 1.0, 1.0)

    def test_highest_child(self):
        """Test child 7 of the [0, 2] box is [1, 2]."""
        from src.octree_data.geometry.box import BoxInfo, get_box_child

        box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(2.0, 2.0, 2.0))
        child = get_box_child(box, 7)

        assert child.min_corner == (1.0, 1.0, 1.0)
        assert child.max_corner == (2.0, 2.0, 2.0)

    def test_bit_layout(self):
        """Test index 5 selects upper X, lower Y, upper Z."""
        from src.octree_data.geometry.box import BoxInfo, get_box_child

        box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(2.0, 4.0, 6.0))
        child = get_box_child(box, 5)

        assert child.min_corner == (1.0, 0.0, 3.0)
        assert child.max_corner == (2.0, 2.0, 6.0)

    @pytest.mark.parametrize("index", [-1, 8, 9, 255])
    def test_out_of_range_index_returns_parent(self, index):
        """Test that invalid indices fall back to the parent box."""
        from src.octree_data.geometry.box import BoxInfo, get_box_child

        box = BoxInfo(min_corner=(-1.5, 2.0, 3.0), max_corner=(4.0, 5.5, 9.0))
        assert get_box_child(box, index) == box

    def test_children_match_single_child(self, rng):
        """Test get_box_children agrees with get_box_child for every index."""
        from src.octree_data.geometry.box import get_box_child, get_box_children

        box = _random_box(rng)
        children = get_box_children(box)

        assert len(children) == 8
        for index, child in enumerate(children):
            assert child == get_box_child(box, index)

    def test_kernel_child_returns_parent_for_invalid_index(self):
        """Test box_child inside a kernel with an out-of-range index."""
        from src.octree_data.core.vector import vec3
        from src.octree_data.geometry.box import Box, box_child

        result_min = ti.field(dtype=ti.math.vec3, shape=())
        result_max = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(min_corner=vec3(1.0, 2.0, 3.0), max_corner=vec3(4.0, 5.0, 6.0))
            child = box_child(box, 12)
            result_min[None] = child.min_corner
            result_max[None] = child.max_corner

        test_kernel()
        assert result_min[None].to_numpy().tolist() == [1.0, 2.0, 3.0]
        assert result_max[None].to_numpy().tolist() == [4.0, 5.0, 6.0]


class TestChildrenTileParent:
    """Tests that the eight children partition the parent box."""

    @pytest.mark.parametrize("seed", range(5))
    def test_union_reconstructs_parent(self, seed):
        """Test the coordinate-wise union of children is exactly the parent."""
        from src.octree_data.geometry.box import get_box_children

        box = _random_box(np.random.default_rng(seed))
        children = np.array([c.as_array() for c in get_box_children(box)])
        parent = box.as_array()

        assert np.array_equal(children[:, 0].min(axis=0), parent[0])
        assert np.array_equal(children[:, 1].max(axis=0), parent[1])

    @pytest.mark.parametrize("seed", range(5))
    def test_shared_faces_match(self, seed):
        """Test lower and upper halves meet on each axis within float precision."""
        from src.octree_data.geometry.box import get_box_children

        box = _random_box(np.random.default_rng(seed))
        children = get_box_children(box)
        extent = np.abs(box.as_array()).max()

        for index in range(8):
            for axis in range(3):
                bit = 1 << axis
                if index & bit:
                    continue
                lower = children[index]
                upper = children[index | bit]
                assert lower.max_corner[axis] == pytest.approx(
                    upper.min_corner[axis], abs=1e-6 * extent
                )

    @pytest.mark.parametrize("seed", range(5))
    def test_children_do_not_overlap(self, seed):
        """Test the children's volumes sum to the parent volume."""
        from src.octree_data.geometry.box import get_box_children

        box = _random_box(np.random.default_rng(seed))
        parent = box.as_array().astype(np.float64)
        parent_volume = np.prod(parent[1] - parent[0])

        total = 0.0
        for child in get_box_children(box):
            arr = child.as_array().astype(np.float64)
            assert np.all(arr[0] <= arr[1])
            total += np.prod(arr[1] - arr[0])

        assert total == pytest.approx(parent_volume, rel=1e-5)


class TestBoxDiagonal:
    """Tests for the diagonal length."""

    def test_concrete_diagonal(self):
        """Test the [0, 2] box has diagonal sqrt(12)."""
        from src.octree_data.geometry.box import BoxInfo, get_box_diagonal

        box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(2.0, 2.0, 2.0))
        assert get_box_diagonal(box) == pytest.approx(math.sqrt(12.0), abs=1e-5)

    def test_degenerate_box_has_zero_diagonal(self):
        """Test a point-sized box has diagonal 0."""
        from src.octree_data.geometry.box import BoxInfo, get_box_diagonal

        box = BoxInfo(min_corner=(3.0, 3.0, 3.0), max_corner=(3.0, 3.0, 3.0))
        assert get_box_diagonal(box) == 0.0

    def test_diagonal_equals_length_of_extent(self):
        """Test box_diagonal is exactly length(max - min) in a kernel."""
        from src.octree_data.core.vector import length, vec3
        from src.octree_data.geometry.box import Box, box_diagonal

        diagonal = ti.field(dtype=ti.f32, shape=())
        extent_length = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            box = Box(min_corner=vec3(-7.3, 1.1, -0.2), max_corner=vec3(5.9, 8.4, 3.3))
            diagonal[None] = box_diagonal(box)
            extent_length[None] = length(box.max_corner - box.min_corner)

        test_kernel()
        assert diagonal[None] == extent_length[None]

    def test_host_diagonal_matches_numpy(self, rng):
        """Test the host wrapper against a float64 reference."""
        from src.octree_data.geometry.box import get_box_diagonal

        box = _random_box(rng)
        arr = box.as_array().astype(np.float64)
        expected = np.linalg.norm(arr[1] - arr[0])

        assert get_box_diagonal(box) == pytest.approx(expected, rel=1e-5)


class TestBoxInfo:
    """Tests for the host-side box value."""

    def test_round_trip_through_array(self):
        """Test from_array inverts as_array."""
        from src.octree_data.geometry.box import BoxInfo

        box = BoxInfo(min_corner=(-1.0, -2.0, -3.0), max_corner=(1.0, 2.0, 3.0))
        assert BoxInfo.from_array(box.as_array()) == box
