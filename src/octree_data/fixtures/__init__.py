"""Fixture generation module."""

from .generator import (
    Fixture,
    IterationRanges,
    generate_fixture,
    generate_fixtures,
    iteration_ranges,
)

__all__ = [
    "Fixture",
    "IterationRanges",
    "generate_fixture",
    "generate_fixtures",
    "iteration_ranges",
]
