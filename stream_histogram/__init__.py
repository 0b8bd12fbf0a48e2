from stream_histogram.common import Bin, HistogramReport
from stream_histogram.errors import HistogramError, IncompatibleMerge, InvalidCapacity, InvalidInput
from stream_histogram.histogram import DEFAULT_CAPACITY, BoundedHistogram, merge_histograms
from stream_histogram.report import render, summarize
