import argparse
import json
import logging
import random

logger = logging.getLogger(__name__)


def generate_random_shards(
    mean: float, stddev: float, num_shards: int, shard_size: int, seed=None
) -> list[list[float]]:
    rng = random.Random(seed)
    return [
        [rng.gauss(mean, stddev) for _ in range(shard_size)]
        for _ in range(num_shards)
    ]


def save_shards_to_json(shards, filename):
    with open(filename, "w") as f:
        json.dump(shards, f, indent=4)
    logger.info("wrote %d shards to %s", len(shards), filename)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate random numeric shards and save them as a JSON file."
    )
    parser.add_argument("mean", type=float, help="Mean of the sampled values")
    parser.add_argument("stddev", type=float, help="Standard deviation of the sampled values")
    parser.add_argument("num_shards", type=int, help="Number of shards to generate")
    parser.add_argument("shard_size", type=int, help="Number of values in each shard")
    parser.add_argument("output_file", type=str, help="Output file name for the JSON data")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[PID: %(process)d] [%(levelname)s] %(message)s",
    )

    shards = generate_random_shards(
        args.mean, args.stddev, args.num_shards, args.shard_size, seed=args.seed
    )
    save_shards_to_json(shards, args.output_file)


if __name__ == "__main__":
    main()
