"""Tests for the fixture text export.

This module tests:
- C %f float formatting
- Vector, box and ray literals
- The full fixture block layout
- Writing to disk and the silent no-op on unopenable paths
"""

import pytest


def _make_fixture():
    from src.octree_data.core.ray import RayInfo
    from src.octree_data.fixtures.generator import Fixture
    from src.octree_data.geometry.box import BoxInfo, get_box_children

    box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(2.0, 2.0, 2.0))
    return Fixture(
        box=box,
        children=tuple(get_box_children(box)),
        diagonal=3.464102,
        miss_ray=RayInfo(origin=(5.0, 5.0, 5.0), direction=(1.0, 0.0, 0.0)),
        hit_ray=RayInfo(origin=(-5.0, 0.5, 0.5), direction=(1.0, 0.0, 0.0)),
        reflected_ray=RayInfo(origin=(0.0, 0.5, 0.5), direction=(-1.0, 0.0, 0.0)),
        intersected_child=0,
        hit_distance=5.0,
    )


EXPECTED_BLOCK = """{
  {{0.000000, 0.000000, 0.000000}, {2.000000, 2.000000, 2.000000}},
  {
    {{0.000000, 0.000000, 0.000000}, {1.000000, 1.000000, 1.000000}},
    {{1.000000, 0.000000, 0.000000}, {2.000000, 1.000000, 1.000000}},
    {{0.000000, 1.000000, 0.000000}, {1.000000, 2.000000, 1.000000}},
    {{1.000000, 1.000000, 0.000000}, {2.000000, 2.000000, 1.000000}},
    {{0.000000, 0.000000, 1.000000}, {1.000000, 1.000000, 2.000000}},
    {{1.000000, 0.000000, 1.000000}, {2.000000, 1.000000, 2.000000}},
    {{0.000000, 1.000000, 1.000000}, {1.000000, 2.000000, 2.000000}},
    {{1.000000, 1.000000, 1.000000}, {2.000000, 2.000000, 2.000000}},
  },
  3.464102,
  {{5.000000, 5.000000, 5.000000}, {1.000000, 0.000000, 0.000000}},
  {{-5.000000, 0.500000, 0.500000}, {1.000000, 0.000000, 0.000000}},
  {{0.000000, 0.500000, 0.500000}, {-1.000000, 0.000000, 0.000000}},
  0,
  5.000000
},
"""


class TestFormatting:
    """Test literal formatting of scalars and structures."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0.0, "0.000000"),
            (1.0, "1.000000"),
            (-2.5, "-2.500000"),
            (3.4641016, "3.464102"),
            (-0.0, "-0.000000"),
            (123456.75, "123456.750000"),
        ],
    )
    def test_format_float(self, value, expected):
        """Test floats use six decimal places like %f."""
        from src.octree_data.export.fixture_writer import format_float

        assert format_float(value) == expected

    def test_format_uint(self):
        """Test octant indices render as plain integers."""
        from src.octree_data.export.fixture_writer import format_uint

        assert format_uint(7) == "7"

    def test_format_vector(self):
        """Test vectors render as {x, y, z}."""
        from src.octree_data.export.fixture_writer import format_vector

        assert format_vector((1.0, -2.5, 0.0)) == "{1.000000, -2.500000, 0.000000}"

    def test_format_box(self):
        """Test boxes render as {min, max}."""
        from src.octree_data.export.fixture_writer import format_box
        from src.octree_data.geometry.box import BoxInfo

        box = BoxInfo(min_corner=(0.0, 0.0, 0.0), max_corner=(1.0, 1.0, 1.0))
        assert format_box(box) == (
            "{{0.000000, 0.000000, 0.000000}, {1.000000, 1.000000, 1.000000}}"
        )

    def test_format_ray(self):
        """Test rays render as {origin, direction}."""
        from src.octree_data.core.ray import RayInfo
        from src.octree_data.export.fixture_writer import format_ray

        ray = RayInfo(origin=(-5.0, 0.5, 0.5), direction=(1.0, 0.0, 0.0))
        assert format_ray(ray) == (
            "{{-5.000000, 0.500000, 0.500000}, {1.000000, 0.000000, 0.000000}}"
        )

    def test_format_fixture_block(self):
        """Test the complete block layout."""
        from src.octree_data.export.fixture_writer import format_fixture

        assert format_fixture(_make_fixture()) == EXPECTED_BLOCK


class TestWriteFixtures:
    """Test writing fixture blocks to disk."""

    def test_writes_all_blocks(self, tmp_path):
        """Test every fixture is written in order."""
        from src.octree_data.export.fixture_writer import write_fixtures

        output = tmp_path / "intersection_data.txt"
        fixture = _make_fixture()
        written = write_fixtures([fixture, fixture, fixture], output)

        assert written == 3
        assert output.read_text(encoding="utf-8") == EXPECTED_BLOCK * 3

    def test_empty_input_creates_empty_file(self, tmp_path):
        """Test zero fixtures still produce the file."""
        from src.octree_data.export.fixture_writer import write_fixtures

        output = tmp_path / "empty.txt"
        assert write_fixtures([], output) == 0
        assert output.read_text(encoding="utf-8") == ""

    def test_overwrites_existing_file(self, tmp_path):
        """Test existing content is replaced."""
        from src.octree_data.export.fixture_writer import write_fixtures

        output = tmp_path / "data.txt"
        output.write_text("stale", encoding="utf-8")
        write_fixtures([_make_fixture()], str(output))

        assert output.read_text(encoding="utf-8") == EXPECTED_BLOCK

    def test_unopenable_path_is_silent_noop(self, tmp_path):
        """Test a missing directory returns None without consuming fixtures."""
        from src.octree_data.export.fixture_writer import write_fixtures

        consumed = []

        def fixtures():
            consumed.append(True)
            yield _make_fixture()

        output = tmp_path / "missing" / "data.txt"
        assert write_fixtures(fixtures(), output) is None
        assert not consumed
        assert not output.exists()
