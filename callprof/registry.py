"""
Function registry.

The registry owns one ``FunctionRecord`` per tracked function together with
the opaque handles that identify functions and their explicit hook state.
Handles are assigned the first time a host object is seen and are never
reused. Host objects are matched by identity, not equality, so two distinct
functions stay apart even when their code compares equal, until they are
merged by the aggregation step. A merged handle keeps its hook state and
resolves to the record that absorbed it.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, NewType, Optional

from .introspection import FunctionInfo, FunctionKind

FunctionId = NewType("FunctionId", int)

logger = logging.getLogger(__name__)


class HookState(Enum):
    """Explicit inclusion state of a function."""

    UNSET = "unset"
    INCLUDED = "included"
    EXCLUDED = "excluded"


@dataclass
class FunctionRecord:
    """
    Counters and metadata for one tracked function.

    ``depth`` and ``entered_at`` are transient: ``entered_at`` is set only
    while a timing window is open for the outermost activation.
    """
    id: FunctionId
    label: Optional[str]
    site: str
    kind: FunctionKind
    call_count: int = 0
    elapsed: float = 0.0
    depth: int = 0
    entered_at: Optional[float] = None

    @property
    def display_name(self) -> str:
        return self.label if self.label is not None else self.site

    def clear_counters(self) -> None:
        """Zero the counters and drop any open timing window."""
        self.call_count = 0
        self.elapsed = 0.0
        self.depth = 0
        self.entered_at = None


class FunctionRegistry:
    """Per-profiler store of function handles, hook states and records."""

    def __init__(self) -> None:
        self._next_id = itertools.count(1)
        # id() of the host object -> handle; _keys holds the objects so an id
        # cannot be reused while it is mapped
        self._ids: Dict[int, FunctionId] = {}
        self._keys: Dict[FunctionId, Any] = {}
        self._hooks: Dict[FunctionId, HookState] = {}
        self._records: Dict[FunctionId, FunctionRecord] = {}
        self._aliases: Dict[FunctionId, FunctionId] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FunctionRecord]:
        return iter(self._records.values())

    def __contains__(self, function_id: FunctionId) -> bool:
        return function_id in self._records

    def identify(self, key: Any) -> FunctionId:
        """
        Get the handle for a host object, assigning a new one if needed.

        Args:
            key: Host object identifying a function

        Returns:
            Stable handle for that object
        """
        function_id = self._ids.get(id(key))
        if function_id is None:
            function_id = FunctionId(next(self._next_id))
            self._ids[id(key)] = function_id
            self._keys[function_id] = key
        return function_id

    def lookup(self, key: Any) -> Optional[FunctionId]:
        """Get the handle for a host object without assigning one."""
        return self._ids.get(id(key))

    def resolve(self, function_id: FunctionId) -> FunctionId:
        """Follow merges to the handle that owns the record."""
        while function_id in self._aliases:
            function_id = self._aliases[function_id]
        return function_id

    def get(self, function_id: FunctionId) -> Optional[FunctionRecord]:
        return self._records.get(self.resolve(function_id))

    def ensure(self, function_id: FunctionId, info: FunctionInfo) -> FunctionRecord:
        """
        Get the record for a handle, creating it from ``info`` on first use.

        Label and site are taken from ``info`` only when the record is created.
        A merged handle yields the record that absorbed it.
        """
        function_id = self.resolve(function_id)
        record = self._records.get(function_id)
        if record is None:
            record = FunctionRecord(function_id, info.name, info.site, info.kind)
            self._records[function_id] = record
        return record

    def hook_state(self, function_id: FunctionId) -> HookState:
        return self._hooks.get(function_id, HookState.UNSET)

    def set_hook_state(self, function_id: FunctionId, state: HookState) -> None:
        self._hooks[function_id] = state

    def merge(self, function_id: FunctionId, into: FunctionId) -> None:
        """
        Drop the record of ``function_id`` and route the handle to ``into``.

        The handle keeps its host mapping and hook state, so later events for
        the same host object accumulate in the surviving record.
        """
        into = self.resolve(into)
        if function_id == into:
            return
        self._records.pop(function_id, None)
        self._aliases[function_id] = into

    def records(self) -> List[FunctionRecord]:
        """Snapshot of all live records in registration order."""
        return list(self._records.values())

    def close_windows(self, now: float) -> int:
        """
        Close every open timing window at ``now`` and clear recursion depth.

        Counters are preserved and the closed span is added to ``elapsed``.

        Returns:
            Number of windows that were open
        """
        closed = 0
        for record in self._records.values():
            if record.entered_at is not None:
                record.elapsed += max(now - record.entered_at, 0.0)
                record.entered_at = None
                closed += 1
            record.depth = 0
        return closed

    def clear_counters(self) -> None:
        """Zero every record's counters, keeping labels and sites."""
        for record in self._records.values():
            record.clear_counters()
        logger.debug(f"Cleared counters of {len(self._records)} records")
