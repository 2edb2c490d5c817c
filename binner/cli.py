"""Command-line entry point: build a histogram for one column of a tabular file."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .config import get_settings
from .data.reader import list_columns
from .exceptions import BinnerError, ConfigurationError
from .logging_utils import log_binning_action, setup_logging
from .pipeline import run
from .schemas import BinningAlgorithm, BinningRequest

logger = logging.getLogger(__name__)

ALGORITHM_CHOICES = [algorithm.value for algorithm in BinningAlgorithm]


def _split_bins(raw: str) -> List[str]:
    return raw.split(",")


def build_argument_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="binner",
        description=(
            "A CLI tool that reads numeric data from Parquet (or CSV, JSON, Excel) files and "
            "creates histogram bins using classification algorithms like Jenks, Quantile, "
            "Equal Interval, Standard Deviation, and Head-Tail. Output is provided as structured JSON."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-f",
        "--file",
        required=True,
        help="Path to the input Parquet file",
    )
    parser.add_argument(
        "-c",
        "--column",
        help="Name of the numeric column to create histogram bins for",
    )
    parser.add_argument(
        "-a",
        "--algorithm",
        choices=ALGORITHM_CHOICES,
        help="Algorithm for calculating bin boundaries",
    )
    parser.add_argument(
        "-n",
        "--num-bins",
        type=int,
        default=settings.DEFAULT_NUM_BINS,
        help="Target number of bins to create (not used by head-tail or standard-deviation)",
    )
    parser.add_argument(
        "--std-dev-size",
        type=float,
        default=settings.DEFAULT_STD_DEV_SIZE,
        help="Number of standard deviations per bin (standard-deviation only)",
    )
    parser.add_argument(
        "--bins",
        type=_split_bins,
        help=(
            "Custom bin boundaries (comma-separated). "
            f"Use '{settings.NULL_TOKEN}' to include a bin for null values"
        ),
    )
    parser.add_argument(
        "-o",
        "--output",
        help="File path to write JSON results (prints to stdout if not specified)",
    )
    parser.add_argument(
        "--list-columns",
        action="store_true",
        help="Show available columns in the file and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Console log level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def _print_columns(path: str) -> None:
    columns = list_columns(path)
    print(f"Available columns in {path}:")
    for i, name in enumerate(columns, start=1):
        print(f"  {i}. {name}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(
        log_level=settings.LOG_LEVEL,
        console_log_level=args.log_level or settings.CONSOLE_LOG_LEVEL,
        log_file=settings.LOG_FILE,
        max_bytes=settings.LOG_MAX_BYTES,
        backup_count=settings.LOG_BACKUP_COUNT,
    )

    try:
        if args.list_columns:
            _print_columns(args.file)
            return 0

        if not args.column:
            raise ConfigurationError("Column name is required when not listing columns", option="column")

        if args.bins is not None and args.algorithm:
            logger.warning("Custom bins were supplied; ignoring --algorithm")

        request = BinningRequest(
            algorithm=BinningAlgorithm(args.algorithm) if args.algorithm and args.bins is None else None,
            custom_bins=args.bins,
            num_bins=args.num_bins,
            std_dev_size=args.std_dev_size,
        )
        run(args.file, args.column, request, output=args.output, settings=settings)
    except BinnerError as e:
        log_binning_action("histogram", column=args.column, success=False, error=type(e).__name__)
        logger.debug(f"Failed with detail: {e.detail}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.output:
        print(f"Results written to {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
