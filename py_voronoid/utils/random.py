"""
Random number generation utilities.

Seed placement is the only randomized stage of a layout. It draws from
an injected source so tests can reproduce exact positions.
"""

import zlib
from typing import Optional, Protocol, Union

import numpy as np


class RandomSource(Protocol):
    """Anything producing floats in [0, 1), e.g. numpy.random.Generator."""

    def random(self) -> float:
        ...


def make_rng(seed: Optional[Union[int, str]] = None) -> np.random.Generator:
    """
    Create a numpy Generator for seed placement.

    Args:
        seed: None for fresh entropy, an int, or a string (hashed with CRC32)

    Returns:
        numpy.random.Generator
    """
    if isinstance(seed, str):
        seed = zlib.crc32(seed.encode("utf-8"))
    return np.random.default_rng(seed)
