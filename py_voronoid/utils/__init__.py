"""Utility helpers."""

from .random import RandomSource, make_rng

__all__ = ['RandomSource', 'make_rng']
