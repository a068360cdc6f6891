"""
Groups ``key=value`` pairs from the command line under their keys and writes them as CSV.

    python scripts/group_values.py colour=red size=L colour=blue colour=red -u
"""

import argparse
import csv
import logging
import os
import sys
from typing import Iterable, TextIO

from tqdm import tqdm

from multivalue.util import multidict

logger = logging.getLogger(__name__)
logging.basicConfig(format="%(asctime)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s",
                    level=os.getenv("LOG_LEVEL", "INFO").upper())


def split_pair(pair: str) -> tuple[str, str]:
    key, sep, value = pair.partition("=")
    if not sep or not key:
        raise ValueError(f"Expected key=value, got {pair!r}")
    return key, value


def parse_arguments(argv: list[str] | None = None):
    """Parses command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Group key=value pairs by key, keeping every value in the order given."
    )
    parser.add_argument("pairs", nargs="+", metavar="PAIR", help="A key=value pair.")
    parser.add_argument(
        "-u",
        "--unique",
        action="store_true",
        help="Drop values already recorded under the same key.",
    )
    parser.add_argument(
        "-i",
        "--ignore-case",
        action="store_true",
        help="Like --unique, but values differing only in case count as duplicates.",
    )
    args = parser.parse_args(argv)
    try:
        args.pairs = [split_pair(pair) for pair in args.pairs]
    except ValueError as e:
        parser.error(str(e))
    return args


def group_pairs(pairs: Iterable[tuple[str, str]], unique: bool = False, ignore_case: bool = False) -> multidict:
    if ignore_case:
        grouped = multidict(unique=lambda existing, new: existing.casefold() == new.casefold())
    elif unique:
        grouped = multidict(unique=True)
    else:
        grouped = multidict()

    for key, value in tqdm(pairs, desc="Grouping values", unit="pair", disable=None):
        grouped[key] = value
    return grouped


def write_csv(grouped: multidict, out: TextIO) -> None:
    writer = csv.writer(out)
    writer.writerow(["Key", "Value(s)"])
    for key, values in grouped.items():
        # Join multiple values with a semicolon
        writer.writerow([key, "; ".join(values)])


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)
    grouped = group_pairs(args.pairs, unique=args.unique, ignore_case=args.ignore_case)
    logger.info(f"Grouped {len(args.pairs)} pairs under {len(grouped)} keys.")
    write_csv(grouped, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
