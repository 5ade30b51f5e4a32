"""Sampling module for boxes, miss-rays and hit-rays."""

from .sampler import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_ATTEMPTS,
    SamplingError,
    sample_box,
    sample_hit_ray,
    sample_miss_ray,
    sample_ray,
    sample_rays,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_ATTEMPTS",
    "SamplingError",
    "sample_box",
    "sample_ray",
    "sample_rays",
    "sample_miss_ray",
    "sample_hit_ray",
]
