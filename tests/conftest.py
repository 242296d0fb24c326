import numpy as np
import pytest

from nmsearch.optimization.benchmarks import coupled_parabola, shifted_quadratic


class CountingObjective:
    """记录调用次数和每次调用的点"""

    def __init__(self, func):
        self.func = func
        self.calls = 0
        self.points = []

    def __call__(self, x):
        self.calls += 1
        self.points.append(np.array(x, dtype=float))
        return self.func(x)


@pytest.fixture
def quadratic():
    return shifted_quadratic([1.0, -2.0])


@pytest.fixture
def counting():
    return CountingObjective


@pytest.fixture
def coupled():
    return coupled_parabola
