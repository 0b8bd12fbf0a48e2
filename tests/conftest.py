import random

import pytest

from stream_histogram import BoundedHistogram


@pytest.fixture
def lopsided_histogram():
    """Bins (0, 1) and (10, 3)."""
    histogram = BoundedHistogram(10)
    histogram.extend([0.0, 10.0, 10.0, 10.0])
    return histogram


@pytest.fixture
def sequential_histogram():
    """1..100 squeezed into 10 bins."""
    histogram = BoundedHistogram(10)
    histogram.extend(range(1, 101))
    return histogram


@pytest.fixture
def normal_shards():
    rng = random.Random(7)
    return [[rng.gauss(10.0, 10.0) for _ in range(500)] for _ in range(3)]
