import shutil
from typing import Optional

from stream_histogram.common import HistogramReport
from stream_histogram.histogram import BoundedHistogram


def summarize(histogram: BoundedHistogram) -> Optional[HistogramReport]:
    if not histogram.total_count:
        return None
    return HistogramReport(
        total=histogram.total_count,
        mean=histogram.mean(),
        min=histogram.min,
        max=histogram.max,
        percent50=histogram.quantile(0.50),
        percent90=histogram.quantile(0.90),
        percent99=histogram.quantile(0.99),
    )


def render(histogram: BoundedHistogram, width: int = 50, char: str = ".") -> str:
    """One line per bin: the centroid, then a bar scaled to the largest count."""
    lines = [f"Total: {histogram.total_count:g}"]
    if not len(histogram):
        return "\n".join(lines)
    largest = max(count for _, count in histogram)
    cols = shutil.get_terminal_size((80, 20)).columns
    bar_max = max(min(width, cols - 20), 1)
    for centroid, count in histogram:
        bar_len = int(count / largest * bar_max)
        lines.append(f"{centroid:12.4f} | {char * bar_len} ({count:g})")
    return "\n".join(lines)
