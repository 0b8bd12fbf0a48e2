import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Bin:
    centroid: float
    count: float

    def fold(self, other: "Bin") -> "Bin":
        """Weighted-mean merge of two bins, ``self`` being the left one."""
        count = self.count + other.count
        gap = other.centroid - self.centroid
        if math.isfinite(gap):
            centroid = self.centroid + gap * (other.count / count)
        else:
            centroid = self.centroid * (self.count / count) + other.centroid * (other.count / count)
        # stays inside [self.centroid, other.centroid] under rounding
        centroid = min(max(centroid, self.centroid), other.centroid)
        return Bin(centroid, count)


@dataclass
class HistogramReport:
    total: float
    mean: float
    min: float
    max: float
    percent50: float
    percent90: float
    percent99: float
