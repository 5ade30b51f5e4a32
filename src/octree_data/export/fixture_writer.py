"""Literal text export for fixtures.

Fixtures are written as brace-initializer blocks meant to be pasted into a
downstream test suite, not parsed back:

    {
      {{minx, miny, minz}, {maxx, maxy, maxz}},
      {
        <child0>,
        ...
        <child7>,
      },
      <diagonal>,
      <miss ray>,
      <hit ray>,
      <reflected ray>,
      <intersected child>,
      <hit distance>
    },

Floats use C ``%f`` formatting (six decimal places). Rays render as
``{{px, py, pz}, {dx, dy, dz}}``.

Example:
    >>> from src.octree_data.export.fixture_writer import format_vector
    >>> format_vector((1.0, -2.5, 0.0))
    '{1.000000, -2.500000, 0.000000}'
"""

from collections.abc import Iterable
from pathlib import Path

from src.octree_data.core.ray import RayInfo
from src.octree_data.core.vector import Vec3
from src.octree_data.fixtures.generator import Fixture
from src.octree_data.geometry.box import BoxInfo

INDENT = "  "


def format_float(value: float) -> str:
    """Format a float like C's ``%f``."""
    return f"{value:f}"


def format_uint(value: int) -> str:
    """Format an unsigned integer in decimal."""
    return f"{value:d}"


def format_vector(value: Vec3) -> str:
    """Format a vector as ``{x, y, z}``."""
    return "{" + ", ".join(format_float(c) for c in value) + "}"


def format_box(value: BoxInfo) -> str:
    """Format a box as ``{<min>, <max>}``."""
    return "{" + format_vector(value.min_corner) + ", " + format_vector(value.max_corner) + "}"


def format_ray(value: RayInfo) -> str:
    """Format a ray as ``{<origin>, <direction>}``."""
    return "{" + format_vector(value.origin) + ", " + format_vector(value.direction) + "}"


def format_fixture(fixture: Fixture) -> str:
    """Render one fixture block, including its trailing ``},`` line."""
    lines = ["{"]
    lines.append(INDENT + format_box(fixture.box) + ",")
    lines.append(INDENT + "{")
    for child in fixture.children:
        lines.append(INDENT * 2 + format_box(child) + ",")
    lines.append(INDENT + "},")
    lines.append(INDENT + format_float(fixture.diagonal) + ",")
    lines.append(INDENT + format_ray(fixture.miss_ray) + ",")
    lines.append(INDENT + format_ray(fixture.hit_ray) + ",")
    lines.append(INDENT + format_ray(fixture.reflected_ray) + ",")
    lines.append(INDENT + format_uint(fixture.intersected_child) + ",")
    lines.append(INDENT + format_float(fixture.hit_distance))
    lines.append("},")
    return "\n".join(lines) + "\n"


def write_fixtures(fixtures: Iterable[Fixture], filepath: str | Path) -> int | None:
    """Write fixture blocks to a file.

    The file is opened before ``fixtures`` is consumed, so a lazy generator
    does no work when the file cannot be created.

    Args:
        fixtures: The fixtures to write, possibly generated lazily.
        filepath: Output file path. Existing content is replaced.

    Returns:
        Number of fixtures written, or None if the file could not be opened.
    """
    try:
        handle = open(filepath, "w", encoding="utf-8")
    except OSError:
        return None

    count = 0
    with handle:
        for fixture in fixtures:
            handle.write(format_fixture(fixture))
            count += 1
    return count
