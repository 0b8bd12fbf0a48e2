import logging
import math
import numbers
from bisect import bisect_left, bisect_right
from typing import Iterable, Iterator, Optional

from stream_histogram.common import Bin
from stream_histogram.errors import InvalidCapacity, InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


def _centroid(bin: Bin) -> float:
    return bin.centroid


def _validate(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as err:
        raise InvalidInput(f"value must be a real number, got {value!r}") from err
    if not math.isfinite(value):
        raise InvalidInput(f"value must be finite, got {value!r}")
    return value


def _closest_pair(bins: list[Bin]) -> int:
    """Index of the left bin of the adjacent pair with the smallest gap.

    Ties go to the leftmost pair.
    """
    best = 0
    best_gap = math.inf
    for i in range(len(bins) - 1):
        gap = bins[i + 1].centroid - bins[i].centroid
        if gap < best_gap:
            best = i
            best_gap = gap
    return best


def _fraction(point: float, left: float, right: float) -> float:
    """Position of ``point`` between ``left`` and ``right``, in [0, 1]."""
    gap = right - left
    if math.isfinite(gap):
        t = (point - left) / gap
    else:
        # halved operands cannot overflow
        t = (point / 2 - left / 2) / (right / 2 - left / 2)
    return min(max(t, 0.0), 1.0)


def _interpolate(left: float, right: float, t: float) -> float:
    if t == 0.0:
        return left
    gap = right - left
    if math.isfinite(gap):
        point = left + gap * t
    else:
        point = 2 * (left / 2 + (right / 2 - left / 2) * t)
    return min(max(point, left), right)


def _combine(left: list[Bin], right: list[Bin]) -> list[Bin]:
    # linear merge of two sorted runs, folding equal centroids as they meet
    out: list[Bin] = []
    i = j = 0
    while i < len(left) or j < len(right):
        if j == len(right) or (i < len(left) and left[i].centroid <= right[j].centroid):
            bin = left[i]
            i += 1
        else:
            bin = right[j]
            j += 1
        if out and out[-1].centroid == bin.centroid:
            out[-1] = Bin(bin.centroid, out[-1].count + bin.count)
        else:
            out.append(bin)
    return out


class BoundedHistogram:
    """Streaming histogram holding at most ``capacity`` (centroid, count) bins.

    Bins are kept strictly ordered by centroid. Each new value either lands on
    an existing centroid or becomes a bin of its own; when that pushes the
    histogram over capacity, the two adjacent bins with the smallest gap are
    folded into one at their weighted mean.

    A histogram is not thread safe. Build one per shard of data and combine
    them with :meth:`merge`, which leaves both inputs untouched. Merging is
    associative only approximately: which pairs get compressed depends on the
    order, so different groupings agree on ``total_count`` exactly but on
    centroids only within a small tolerance.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if isinstance(capacity, bool) or not isinstance(capacity, numbers.Integral) or capacity < 1:
            raise InvalidCapacity(f"capacity must be a positive integer, got {capacity!r}")
        self._capacity = int(capacity)
        self._bins: list[Bin] = []
        self._total = 0.0
        self._min: Optional[float] = None
        self._max: Optional[float] = None

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total_count(self) -> float:
        return self._total

    @property
    def bins(self) -> tuple[Bin, ...]:
        return tuple(self._bins)

    @property
    def min(self) -> Optional[float]:
        """Smallest value ever inserted, exact."""
        return self._min

    @property
    def max(self) -> Optional[float]:
        """Largest value ever inserted, exact."""
        return self._max

    def __len__(self) -> int:
        return len(self._bins)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for bin in self._bins:
            yield bin.centroid, bin.count

    def __repr__(self) -> str:
        return (
            f"BoundedHistogram(capacity={self._capacity}, bins={len(self._bins)}, "
            f"total_count={self._total:g})"
        )

    def copy(self) -> "BoundedHistogram":
        clone = BoundedHistogram(self._capacity)
        clone._bins = list(self._bins)
        clone._total = self._total
        clone._min = self._min
        clone._max = self._max
        return clone

    def insert(self, value: float) -> None:
        """Add one observation of ``value``.

        Raises :class:`InvalidInput` for NaN, infinities and anything that is
        not a real number; the histogram is left unchanged in that case.
        """
        value = _validate(value)
        self._add(value)

    def extend(self, values: Iterable[float]) -> None:
        """Insert every value, or none of them if any is invalid."""
        checked = [_validate(value) for value in values]
        for value in checked:
            self._add(value)

    def _add(self, value: float) -> None:
        bins = self._bins
        i = bisect_left(bins, value, key=_centroid)
        if i < len(bins) and bins[i].centroid == value:
            bins[i] = Bin(value, bins[i].count + 1)
        else:
            bins.insert(i, Bin(value, 1.0))
            self._compress()
        self._total += 1
        if self._min is None or value < self._min:
            self._min = value
        if self._max is None or value > self._max:
            self._max = value

    def _compress(self) -> None:
        bins = self._bins
        while len(bins) > self._capacity:
            i = _closest_pair(bins)
            bins[i:i + 2] = [bins[i].fold(bins[i + 1])]

    def merge(self, other: "BoundedHistogram", capacity: Optional[int] = None) -> "BoundedHistogram":
        """Return a new histogram summarizing both ``self`` and ``other``.

        The result holds at most ``capacity`` bins, ``self.capacity`` by
        default. Neither input is modified.
        """
        if not isinstance(other, BoundedHistogram):
            raise TypeError(f"cannot merge BoundedHistogram with {type(other).__name__}")
        merged = BoundedHistogram(self._capacity if capacity is None else capacity)
        merged._bins = _combine(self._bins, other._bins)
        combined = len(merged._bins)
        merged._compress()
        merged._total = self._total + other._total
        extremes = [v for v in (self._min, self._max, other._min, other._max) if v is not None]
        if extremes:
            merged._min = min(extremes)
            merged._max = max(extremes)
        logger.debug(
            "merged %d + %d bins: %d distinct, %d kept",
            len(self._bins), len(other._bins), combined, len(merged._bins),
        )
        return merged

    def _marks(self) -> list[float]:
        # estimated count at or below each centroid: all bins to its left plus half its own
        marks = []
        running = 0.0
        for bin in self._bins:
            marks.append(running + bin.count / 2)
            running += bin.count
        return marks

    def sum(self, point: float) -> float:
        """Estimated number of observations less than or equal to ``point``.

        Counts are interpolated linearly between neighbouring centroids and
        integrated with the trapezoid rule, each bin contributing half of its
        count on either side of its centroid. The estimate is 0 below the
        first centroid, ``total_count`` from the last centroid on, and
        non-decreasing in between.
        """
        bins = self._bins
        if not bins or not point >= bins[0].centroid:
            return 0.0
        if point >= bins[-1].centroid:
            return self._total

        i = bisect_right(bins, point, key=_centroid) - 1
        left, right = bins[i], bins[i + 1]
        prefix = 0.0
        for bin in bins[:i]:
            prefix += bin.count
        t = _fraction(point, left.centroid, right.centroid)
        height = left.count + (right.count - left.count) * t
        area = (left.count + height) / 2 * t

        lower = prefix + left.count / 2
        upper = prefix + left.count + right.count / 2
        estimate = min(max(lower + area, lower), upper)
        return min(estimate, self._total)

    def _solve(self, target: float, marks: list[float]) -> float:
        """Point where the interpolated cumulative count reaches ``target``."""
        bins = self._bins
        if target <= marks[0]:
            return bins[0].centroid
        if target >= marks[-1]:
            return bins[-1].centroid

        i = bisect_right(marks, target) - 1
        left, right = bins[i], bins[i + 1]
        d = target - marks[i]
        a = right.count - left.count
        # root of left.count * t + a * t**2 / 2 == d, in the form without cancellation
        root = math.sqrt(max(left.count * left.count + 2 * a * d, 0.0))
        t = min(max(2 * d / (left.count + root), 0.0), 1.0)
        return _interpolate(left.centroid, right.centroid, t)

    def uniform(self, buckets: int) -> list[float]:
        """Split points dividing the observations into ``buckets`` groups of
        roughly equal count.

        Returns at most ``buckets - 1`` strictly increasing values between the
        smallest and the largest centroid. Fewer come back when the histogram
        holds too few bins to tell the splits apart; nothing comes back for an
        empty histogram or ``buckets <= 1``.
        """
        if buckets <= 1 or not self._bins:
            return []
        marks = self._marks()
        points: list[float] = []
        for k in range(1, buckets):
            point = self._solve(k * self._total / buckets, marks)
            if not points or point > points[-1]:
                points.append(point)
        return points

    def quantile(self, q: float) -> Optional[float]:
        if not 0.0 <= q <= 1.0:
            raise InvalidInput(f"q must be in [0, 1], got {q!r}")
        if not self._bins:
            return None
        return self._solve(q * self._total, self._marks())

    def cdf(self, x: float) -> Optional[float]:
        if not self._total:
            return None
        return self.sum(x) / self._total

    def mean(self) -> Optional[float]:
        if not self._total:
            return None
        return sum(bin.centroid * (bin.count / self._total) for bin in self._bins)

    def variance(self) -> Optional[float]:
        mean = self.mean()
        if mean is None:
            return None
        return sum(bin.count * (bin.centroid - mean) ** 2 for bin in self._bins) / self._total


def merge_histograms(
    histograms: Iterable[BoundedHistogram], capacity: Optional[int] = None
) -> BoundedHistogram:
    """Fold ``histograms`` together left to right.

    The capacity defaults to that of the first histogram.
    """
    histograms = list(histograms)
    if not histograms:
        raise ValueError("no histograms to merge")
    if capacity is None:
        capacity = histograms[0].capacity
    result = BoundedHistogram(capacity)
    for histogram in histograms:
        result = result.merge(histogram)
    return result
