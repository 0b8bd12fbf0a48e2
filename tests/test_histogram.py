import math
from dataclasses import FrozenInstanceError

import pytest

from stream_histogram import Bin, BoundedHistogram, HistogramError, InvalidCapacity, InvalidInput


class TestConstruction:
    def test_starts_empty(self):
        histogram = BoundedHistogram(10)
        assert histogram.capacity == 10
        assert histogram.total_count == 0
        assert len(histogram) == 0
        assert list(histogram) == []
        assert histogram.min is None
        assert histogram.max is None

    def test_default_capacity(self):
        assert BoundedHistogram().capacity == 100

    @pytest.mark.parametrize("capacity", [0, -1, 2.5, True, "10", None])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(InvalidCapacity):
            BoundedHistogram(capacity)

    def test_invalid_capacity_is_a_value_error(self):
        with pytest.raises(ValueError):
            BoundedHistogram(0)
        with pytest.raises(HistogramError):
            BoundedHistogram(0)


class TestInsert:
    def test_compresses_leftmost_of_equal_gaps(self):
        histogram = BoundedHistogram(3)
        for value in (1, 2, 3):
            histogram.insert(value)
        assert list(histogram) == [(1.0, 1.0), (2.0, 1.0), (3.0, 1.0)]

        histogram.insert(4)
        assert list(histogram) == [(1.5, 2.0), (3.0, 1.0), (4.0, 1.0)]
        assert histogram.total_count == 4

    def test_compresses_smallest_gap(self):
        histogram = BoundedHistogram(3)
        histogram.extend([0, 10, 11, 20])
        assert list(histogram) == [(0.0, 1.0), (10.5, 2.0), (20.0, 1.0)]

    def test_fold_uses_weighted_mean(self):
        histogram = BoundedHistogram(2)
        histogram.extend([0, 0, 0, 4, 100])
        assert list(histogram) == [(1.0, 4.0), (100.0, 1.0)]

    def test_fold_across_overflowing_gap(self):
        histogram = BoundedHistogram(1)
        histogram.extend([-1.5e308, 1.5e308])
        assert list(histogram) == [(0.0, 2.0)]
        assert histogram.mean() == 0.0

    def test_repeated_value_stays_one_bin(self):
        histogram = BoundedHistogram(1)
        for _ in range(5):
            histogram.insert(7.25)
        assert list(histogram) == [(7.25, 5.0)]
        assert histogram.total_count == 5

    def test_finds_existing_centroid_after_growth(self):
        histogram = BoundedHistogram(100)
        histogram.extend(range(50))
        histogram.insert(25)
        assert len(histogram) == 50
        assert dict(histogram)[25.0] == 2.0

    def test_unsorted_input_stays_sorted(self):
        histogram = BoundedHistogram(100)
        histogram.extend([5, -3, 8, 0, 2.5])
        centroids = [centroid for centroid, _ in histogram]
        assert centroids == [-3.0, 0.0, 2.5, 5.0, 8.0]

    def test_sequential_values(self, sequential_histogram):
        assert sequential_histogram.total_count == 100
        assert len(sequential_histogram) == 10
        assert sequential_histogram.capacity == 10
        assert sequential_histogram.min == 1.0
        assert sequential_histogram.max == 100.0

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "abc", None, "nan"])
    def test_rejects_invalid_value(self, value):
        histogram = BoundedHistogram(2)
        histogram.extend([1, 2])
        before = list(histogram)
        with pytest.raises(InvalidInput):
            histogram.insert(value)
        assert list(histogram) == before
        assert histogram.total_count == 2
        assert histogram.max == 2.0

    def test_extend_is_all_or_nothing(self):
        histogram = BoundedHistogram(5)
        with pytest.raises(InvalidInput):
            histogram.extend([1.0, 2.0, math.nan, 3.0])
        assert histogram.total_count == 0
        assert len(histogram) == 0


class TestIntrospection:
    def test_bins_are_immutable(self, lopsided_histogram):
        bins = lopsided_histogram.bins
        assert bins == (Bin(0.0, 1.0), Bin(10.0, 3.0))
        with pytest.raises(FrozenInstanceError):
            bins[0].count = 5

    def test_copy_is_independent(self, lopsided_histogram):
        clone = lopsided_histogram.copy()
        clone.insert(5)
        assert clone.total_count == 5
        assert lopsided_histogram.total_count == 4
        assert list(lopsided_histogram) == [(0.0, 1.0), (10.0, 3.0)]

    def test_repr(self, lopsided_histogram):
        assert repr(lopsided_histogram) == "BoundedHistogram(capacity=10, bins=2, total_count=4)"


class TestStatistics:
    def test_empty(self):
        histogram = BoundedHistogram(10)
        assert histogram.mean() is None
        assert histogram.variance() is None
        assert histogram.cdf(1.0) is None
        assert histogram.quantile(0.5) is None

    def test_mean_and_variance(self, lopsided_histogram):
        assert lopsided_histogram.mean() == 7.5
        assert lopsided_histogram.variance() == 18.75

    def test_mean_survives_compression(self, sequential_histogram):
        assert sequential_histogram.mean() == pytest.approx(50.5)

    def test_cdf(self, lopsided_histogram):
        assert lopsided_histogram.cdf(-1.0) == 0.0
        assert lopsided_histogram.cdf(5.0) == pytest.approx(1.25 / 4)
        assert lopsided_histogram.cdf(10.0) == 1.0
