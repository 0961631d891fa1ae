"""
Fixed-width text report of ranked functions.

Each column has a fixed width: longer values keep their trailing characters
so long paths and qualified names show their tail, shorter values are padded
with spaces on the right.
"""

from typing import Any, Iterable, List

from . import config
from .query import QueryRow


def fit_cell(value: Any, width: int) -> str:
    """
    Fit a value into a cell of exactly ``width`` characters.

    Args:
        value: Value to render; converted with str()
        width: Column width

    Returns:
        The value truncated from the left or right-padded with spaces
    """
    text = str(value)
    if len(text) > width:
        return text[len(text) - width:]
    return text.ljust(width)


def _frame_row(cells: List[str]) -> str:
    return " |" + " " + config.REPORT_SEPARATOR.join(cells) + " | \n"


def border_row() -> str:
    """Horizontal border matching the column layout."""
    return " +" + "+".join("-" * (width + 2) for width in config.get_column_widths()) + "+ \n"


def header_row() -> str:
    return _frame_row([fit_cell(title, width) for title, width in config.REPORT_COLUMNS])


def format_row(rank: int, row: QueryRow) -> str:
    """Render one ranked function as a table row."""
    values = (rank, row.name, row.calls, row.elapsed, row.site)
    return _frame_row([fit_cell(value, width) for value, width in zip(values, config.get_column_widths())])


def render_report(rows: Iterable[QueryRow]) -> str:
    """
    Render ranked functions as a text table.

    Args:
        rows: Ranked rows, highest rank first

    Returns:
        Report text: title, border, header, border, one line per row, border
    """
    border = border_row()
    lines = [config.REPORT_TITLE + "\n", border, header_row(), border]
    for rank, row in enumerate(rows, start=1):
        lines.append(format_row(rank, row))
    lines.append(border)
    return "".join(lines)
