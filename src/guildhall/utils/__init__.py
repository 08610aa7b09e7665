"""Utility functions for the guild simulation."""

from guildhall.utils.rng import (
    Sampler,
    generate_seed,
    sampler_for,
    weighted_choice,
)

__all__ = [
    "Sampler",
    "generate_seed",
    "sampler_for",
    "weighted_choice",
]
