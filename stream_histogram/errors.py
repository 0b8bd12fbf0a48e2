class HistogramError(Exception):
    pass


class InvalidCapacity(HistogramError, ValueError):
    pass


class InvalidInput(HistogramError, ValueError):
    pass


class IncompatibleMerge(HistogramError):
    """Reserved for merge policies that refuse some pairs of histograms."""
