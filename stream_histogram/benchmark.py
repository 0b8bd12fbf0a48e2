import argparse
import logging
import random
import time

from stream_histogram.histogram import BoundedHistogram

logger = logging.getLogger(__name__)

CAPACITIES = [10, 20, 40, 60, 80, 100]


def measure_inserts(capacity: int, samples: int, seed=None) -> float:
    """Inserts per second of uniform random values into one histogram."""
    rng = random.Random(seed)
    values = [rng.random() for _ in range(samples)]
    histogram = BoundedHistogram(capacity)
    start_time = time.perf_counter()
    for value in values:
        histogram.insert(value)
    elapsed = time.perf_counter() - start_time
    logger.debug("capacity %d: %d inserts in %.4fs", capacity, samples, elapsed)
    return samples / elapsed if elapsed > 0 else float("inf")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Measure histogram insertion throughput.")
    parser.add_argument("--samples", type=int, default=100_000, help="Values inserted per capacity")
    parser.add_argument("--capacity", type=int, action="append", help="Capacity to measure, repeatable")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[PID: %(process)d] [%(levelname)s] %(message)s",
    )

    for capacity in args.capacity or CAPACITIES:
        rate = measure_inserts(capacity, args.samples, seed=args.seed)
        print(f"capacity {capacity:4d}: {rate:,.0f} inserts/sec")


if __name__ == "__main__":
    main()
