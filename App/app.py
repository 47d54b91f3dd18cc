"""kquant - reduce an image to k colors with k-means. Main entry point."""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from config_manager import ConfigManager
from image_processing import ImageProcessor, InvalidArgumentError
from models import CONFIG_FILE, QuantizationMethod


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kquant",
        description="Simple program to reduce an image into <k> colors using "
        "the k-means algorithm",
    )
    parser.add_argument("input", nargs="?", help="In file path")
    parser.add_argument("-o", "--output", help="Out file path")
    parser.add_argument(
        "-k",
        "--k-number",
        dest="k",
        help="Number of colors in the final image",
    )
    parser.add_argument(
        "--method",
        choices=[m.value for m in QuantizationMethod],
        help="Quantization backend (default: kmeans)",
    )
    parser.add_argument("--iterations", type=int, help="K-means iterations")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument(
        "--tolerance",
        type=float,
        help="Stop early once no centroid moves further than this",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help="Configuration file (default: ~/.kquant_config.json)",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Store the effective settings as new defaults",
    )
    return parser


def parse_k(value) -> int:
    """Parse k, raising InvalidArgumentError unless it is a positive integer."""
    try:
        k = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError("k must be a positive integer") from None
    if k <= 0:
        raise InvalidArgumentError("k must be a positive integer")
    return k


def main(argv=None) -> int:
    """Run the command-line tool; returns the process exit code."""
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager(args.config)
    config = config_manager.load()

    if not args.input or not Path(args.input).is_file():
        print("No valid input file specified", file=sys.stderr)
        return 1

    try:
        k = parse_k(args.k if args.k is not None else config.num_colors)
    except InvalidArgumentError as e:
        print(e, file=sys.stderr)
        return 1

    # CLI flags override stored defaults
    config = replace(
        config,
        num_colors=k,
        output_path=args.output or config.output_path,
        method=args.method or config.method,
        iterations=args.iterations if args.iterations is not None else config.iterations,
        seed=args.seed if args.seed is not None else config.seed,
        tolerance=args.tolerance if args.tolerance is not None else config.tolerance,
    )

    if args.save_config:
        ok, error = config_manager.save(config)
        if ok:
            print(f"✓ Saved configuration to {config_manager.config_path}")
        else:
            print(f"Warning: Could not save config file: {error}", file=sys.stderr)

    processor = ImageProcessor(config)
    try:
        processor.process(args.input, config.output_path)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
