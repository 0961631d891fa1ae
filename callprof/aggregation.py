"""
Merging of records that represent one logical function.

Several host objects can describe the same source function, for instance
code objects recompiled from the same source or the functions of a reloaded
module. They end up as separate records sharing a label and a
definition site. ``combine_records`` folds each such group into a single
record. The operation is destructive and is meant to run once, after the
profiled calls and before querying.
"""

import logging
from typing import Dict, Tuple

from . import config
from .registry import FunctionRecord, FunctionRegistry

logger = logging.getLogger(__name__)


def group_key(record: FunctionRecord) -> Tuple[str, str]:
    """Key under which records are merged: (label or placeholder, site)."""
    label = record.label if record.label is not None else config.ANONYMOUS_LABEL
    return label, record.site


def combine_records(registry: FunctionRegistry) -> int:
    """
    Merge records sharing the same label and definition site.

    The first record of each group in registry order is kept; call counts and
    elapsed times of the others are added to it and their handles are merged
    into it, keeping their hook states.

    Args:
        registry: Registry to compact in place

    Returns:
        Number of records removed
    """
    canonical: Dict[Tuple[str, str], FunctionRecord] = {}
    absorbed = []
    for record in registry.records():
        key = group_key(record)
        target = canonical.get(key)
        if target is None:
            canonical[key] = record
            continue
        target.call_count += record.call_count
        target.elapsed += record.elapsed
        absorbed.append((record.id, target.id))

    for function_id, into in absorbed:
        registry.merge(function_id, into)

    if absorbed:
        logger.debug(f"Combined {len(absorbed)} duplicate records into {len(canonical)} functions")
    return len(absorbed)
