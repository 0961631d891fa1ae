"""
CLI argument utilities.

This module provides helpers for adding the report-related command-line
arguments to argparse parsers.
"""

import argparse

from .. import config


def add_report_args(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """
    Add report-related command-line arguments to an argparse parser.

    Args:
        parser: The argument parser to add arguments to

    Returns:
        The parser with added arguments
    """
    parser.add_argument(
        "--sort",
        choices=["calls", "time"],
        default=config.DEFAULT_SORT_KEY,
        help=f"Metric used to rank functions (default: {config.DEFAULT_SORT_KEY})"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=config.DEFAULT_REPORT_LIMIT,
        help=f"Number of functions to report, 0 for all (default: {config.DEFAULT_REPORT_LIMIT})"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write the report to this file instead of standard output"
    )
    return parser


def add_filter_args(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """
    Add filtering and aggregation arguments to an argparse parser.

    Args:
        parser: The argument parser to add arguments to

    Returns:
        The parser with added arguments
    """
    parser.add_argument(
        "--mode",
        choices=["all", "Python", "C", "internal"],
        default="all",
        help="Which functions to observe: all, only Python or C functions, or the profiler itself"
    )
    parser.add_argument(
        "--no-combine",
        action="store_true",
        help="Keep records of the same function from distinct objects separate"
    )
    return parser
