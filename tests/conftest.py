"""Shared fixtures for layout tests."""

import pytest

from py_voronoid.core.dataset import prepare_sites
from py_voronoid.core.power_diagram import get_bounds


class ScriptedRandom:
    """Random source replaying fixed values, cycling when exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


# Per site: angle fraction, then radius fraction
NEAR_ONE = 0.999999


@pytest.fixture
def square_bounds():
    """Bounds of a 1000x1000 canvas with the default padding."""
    return get_bounds(1000, 1000, 40)


@pytest.fixture
def twin_sites():
    """Two equal items in one category."""
    return prepare_sites([
        {"label": "Left", "value": 1, "category": "oncology"},
        {"label": "Right", "value": 1, "category": "oncology"},
    ])


@pytest.fixture
def twin_rng():
    """Places twin sites symmetrically 90px east and west of the center."""
    return ScriptedRandom([0.0, NEAR_ONE, 0.5, NEAR_ONE])


@pytest.fixture
def three_sites():
    """Three items, each in its own category."""
    return prepare_sites([
        {"label": "Cancer", "value": 60, "category": "oncology"},
        {"label": "Dementia", "value": 30, "category": "degenerative"},
        {"label": "Liver", "value": 10, "category": "digestive"},
    ])


@pytest.fixture
def three_rng():
    """Pushes each of the three sites 90px outward from its category center."""
    return ScriptedRandom([0.0, NEAR_ONE, 0.38197, NEAR_ONE, 0.76394, NEAR_ONE])


@pytest.fixture
def scripted_random():
    """Factory for random sources with a fixed sequence."""
    return ScriptedRandom
