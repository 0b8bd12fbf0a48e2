import argparse
import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor

from stream_histogram.errors import InvalidInput
from stream_histogram.histogram import DEFAULT_CAPACITY, BoundedHistogram, merge_histograms
from stream_histogram.report import render, summarize

logger = logging.getLogger(__name__)


def load_shards(file_path: str) -> list[list[float]]:
    with open(file_path) as file:
        return json.load(file)


def build_histogram(values, capacity: int) -> BoundedHistogram:
    histogram = BoundedHistogram(capacity)
    histogram.extend(values)
    return histogram


def build_histograms(shards, capacity: int, workers: int = 1) -> list[BoundedHistogram]:
    # each worker owns the histogram it builds; only finished ones are handed back
    if workers <= 1:
        return [build_histogram(shard, capacity) for shard in shards]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda shard: build_histogram(shard, capacity), shards))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Summarize each shard of a JSON file as a histogram and merge them into one."
    )
    parser.add_argument("file", help="JSON file containing a list of shards")
    parser.add_argument("--capacity", type=int, default=DEFAULT_CAPACITY, help="Maximum bins per histogram")
    parser.add_argument("--buckets", type=int, default=10, help="Number of equal-count groups to split into")
    parser.add_argument("--workers", type=int, default=1, help="Threads used to build shard histograms")
    parser.add_argument("--show-bins", action="store_true", help="Print the merged bins")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[PID: %(process)d] [%(levelname)s] %(message)s",
    )

    shards = load_shards(args.file)
    if not shards:
        parser.error(f"{args.file} contains no shards")
    try:
        histograms = build_histograms(shards, args.capacity, workers=args.workers)
    except InvalidInput as err:
        parser.error(f"{args.file}: {err}")
    logger.info("built %d shard histograms", len(histograms))

    start_time = time.time()
    result = merge_histograms(histograms)
    end_time = time.time()

    print(f"Merging histograms took {end_time - start_time:.2f} seconds.")
    print("Split points: ", result.uniform(args.buckets))
    print("Report: ", summarize(result))
    if args.show_bins:
        print(render(result))


if __name__ == "__main__":
    main()
