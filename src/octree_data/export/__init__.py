"""Export module for fixture text output."""

from .fixture_writer import (
    format_box,
    format_fixture,
    format_float,
    format_ray,
    format_uint,
    format_vector,
    write_fixtures,
)

__all__ = [
    "format_box",
    "format_fixture",
    "format_float",
    "format_ray",
    "format_uint",
    "format_vector",
    "write_fixtures",
]
