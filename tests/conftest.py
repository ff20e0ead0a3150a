import numpy as np
import pytest

from AnnealTSP import PointSet


class ScriptedRng:
    """Stand-in random source returning pre-set position pairs and uniforms."""

    def __init__(self, pairs=(), draws=()):
        self.pairs = list(pairs)
        self.draws = list(draws)
        self.integer_calls = 0
        self.random_calls = 0

    def integers(self, low, high=None, size=None):
        self.integer_calls += 1
        return np.array(self.pairs.pop(0))

    def random(self):
        self.random_calls += 1
        if not self.draws:
            raise AssertionError("unexpected uniform draw")
        return self.draws.pop(0)


class CountingRng:
    def __init__(self, seed=0):
        self._rng = np.random.default_rng(seed)
        self.integer_calls = 0
        self.random_calls = 0
        self.drawn = []

    def integers(self, *args, **kwargs):
        self.integer_calls += 1
        values = self._rng.integers(*args, **kwargs)
        self.drawn.append(tuple(int(v) for v in values))
        return values

    def random(self, *args, **kwargs):
        self.random_calls += 1
        return self._rng.random(*args, **kwargs)


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def counting_rng():
    return CountingRng


@pytest.fixture
def unit_square():
    return PointSet([(0, 0), (1, 0), (1, 1), (0, 1)])


@pytest.fixture
def two_points():
    return PointSet([(0, 0), (3, 4)])


@pytest.fixture
def random_points_30():
    rng = np.random.default_rng(2025)
    return PointSet(rng.random((30, 2)) * 100.0)
