"""
Configuration module for callprof.

This module contains default configuration values used across the profiler,
including the default clock, placeholder labels, query defaults and the
fixed layout of the text report.
"""

import time
from typing import List, Tuple

# Timing
DEFAULT_CLOCK = time.perf_counter
"""Callable: Default clock used to time function activations.

Any zero-argument callable returning a monotonic non-decreasing number of
seconds can replace it through ``Profiler.set_clock``.
"""

# Placeholders for missing introspection data
ANONYMOUS_LABEL = "?"
"""str: Label substituted for anonymous functions when grouping records."""

UNKNOWN_SITE = "?:0"
"""str: Definition site used when the source location cannot be determined."""

NATIVE_SOURCE = "[C]"
"""str: Source locator reported for built-in (native) functions."""

NATIVE_LINE = -1
"""int: Line number reported for built-in (native) functions."""

# Query defaults
DEFAULT_SORT_KEY = "calls"
"""str: Metric used to rank functions when no sort key is given."""

DEFAULT_REPORT_LIMIT = 20
"""int: Number of rows printed by the ``callprof-run`` command by default."""

# Report layout
REPORT_TITLE = "Profiling report:"
"""str: First line of every rendered report."""

REPORT_COLUMNS: List[Tuple[str, int]] = [
    ("#", 3),
    ("Function", 32),
    ("Calls", 8),
    ("Time", 24),
    ("Code", 32),
]
"""List[Tuple[str, int]]: Header and fixed width of each report column."""

REPORT_SEPARATOR = " | "
"""str: Text placed between two report cells."""


def get_column_widths() -> List[int]:
    """
    Get the fixed width of every report column.

    Returns:
        List of column widths, in display order
    """
    return [width for _, width in REPORT_COLUMNS]
