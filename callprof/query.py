"""
Ranking of registry records.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, NamedTuple

from . import config
from .errors import InvalidArgumentError
from .registry import FunctionRecord, FunctionRegistry


class SortKey(Enum):
    """Metric used to rank functions."""

    CALLS = "calls"
    TIME = "time"


class QueryRow(NamedTuple):
    """One ranked function: display name, calls, elapsed seconds and site."""

    name: str
    calls: int
    elapsed: float
    site: str


_SORT_KEY_ALIASES = {"call": SortKey.CALLS, "calls": SortKey.CALLS, "time": SortKey.TIME}


def parse_sort_key(sort_key: Any) -> SortKey:
    """
    Normalize a sort key given as a SortKey, a string or None.

    Raises:
        InvalidArgumentError: If the key names no known metric
    """
    if sort_key is None:
        sort_key = config.DEFAULT_SORT_KEY
    if isinstance(sort_key, SortKey):
        return sort_key
    try:
        return _SORT_KEY_ALIASES[str(sort_key).lower()]
    except KeyError:
        raise InvalidArgumentError(f"unknown sort key: {sort_key!r}") from None


def rank_records(records: list[FunctionRecord], sort_key: SortKey) -> list[FunctionRecord]:
    """
    Order records by the chosen metric, highest first.

    Ties on the chosen metric are broken by the other metric, lowest first.
    """
    if sort_key is SortKey.TIME:
        return sorted(records, key=lambda r: (-r.elapsed, r.call_count))
    return sorted(records, key=lambda r: (-r.call_count, r.elapsed))


def query_records(registry: FunctionRegistry, sort_key: Any = None, limit: int | None = None) -> Iterator[QueryRow]:
    """
    Lazily iterate ranked functions.

    The ranking snapshot is taken when iteration starts. The returned
    iterator is single pass; run a new query to rank again. Consuming two
    queries in an interleaved fashion is not supported.

    Args:
        registry: Registry to rank
        sort_key: SortKey, 'calls' or 'time' (default: calls)
        limit: Maximum number of rows to yield (default: all)

    Returns:
        Iterator of QueryRow, highest rank first
    """
    key = parse_sort_key(sort_key)

    def _iterate() -> Iterator[QueryRow]:
        ranked = rank_records(registry.records(), key)
        if limit is not None:
            ranked = ranked[:max(int(limit), 0)]
        for record in ranked:
            yield QueryRow(record.display_name, record.call_count, record.elapsed, record.site)

    return _iterate()
