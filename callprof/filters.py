"""
Filter policy deciding which call/return events are observed.
"""

import logging
from enum import Enum
from typing import Any, Optional, Set, Tuple

from .introspection import FunctionKind
from .registry import FunctionId, FunctionRegistry, HookState

logger = logging.getLogger(__name__)


class FilterMode(Enum):
    """Active filtering policy."""

    UNRESTRICTED = "all"
    HOOKED = "hooked"
    INTERNAL = "internal"
    BY_KIND = "kind"


def parse_filter_mode(mode: Any) -> Tuple[FilterMode, Optional[str]]:
    """
    Normalize the accepted spellings of a filter mode.

    Names are matched case-insensitively. A string that names neither a mode
    nor a known function kind selects a kind filter that observes nothing.

    Args:
        mode: A FilterMode, a FunctionKind, None, or a string such as
              'all', 'hooked', 'internal', 'Python' or 'C'

    Returns:
        Tuple of (mode, kind); kind is only set for FilterMode.BY_KIND
    """
    if mode is None:
        return FilterMode.UNRESTRICTED, None
    if isinstance(mode, FunctionKind):
        return FilterMode.BY_KIND, mode.value
    if isinstance(mode, FilterMode):
        if mode is FilterMode.BY_KIND:
            logger.warning("Kind filter selected without a kind, no function will be observed")
        return mode, None
    text = str(mode).strip()
    for candidate in (FilterMode.UNRESTRICTED, FilterMode.HOOKED, FilterMode.INTERNAL):
        if text.lower() == candidate.value:
            return candidate, None
    for kind in FunctionKind:
        if text.lower() == kind.value.lower():
            return FilterMode.BY_KIND, kind.value
    logger.warning(f"Unknown function kind '{text}', no function will be observed")
    return FilterMode.BY_KIND, text


class FilterPolicy:
    """
    Decides whether an event for a given function is observed.

    Explicit exclusion always wins. Otherwise the active mode is consulted:
    UNRESTRICTED accepts everything, HOOKED only explicitly included
    functions, INTERNAL only the profiler's own routines and BY_KIND only
    functions of the selected kind.
    """

    def __init__(self, registry: FunctionRegistry):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._registry = registry
        self.mode = FilterMode.UNRESTRICTED
        self.kind: Optional[str] = None
        self._internal: Set[FunctionId] = set()

    def set_mode(self, mode: FilterMode, kind: Optional[str] = None) -> None:
        self.mode = mode
        self.kind = kind if mode is FilterMode.BY_KIND else None
        self.logger.debug(f"Filter mode set to {mode.value}" + (f" ({kind})" if self.kind else ""))

    def mark_internal(self, function_id: FunctionId) -> None:
        self._internal.add(function_id)

    def is_internal(self, function_id: FunctionId) -> bool:
        return function_id in self._internal

    def include(self, function_id: FunctionId) -> None:
        """Mark a function as explicitly included and narrow to hooked functions."""
        self._registry.set_hook_state(function_id, HookState.INCLUDED)
        self.set_mode(FilterMode.HOOKED)

    def exclude(self, function_id: FunctionId) -> None:
        self._registry.set_hook_state(function_id, HookState.EXCLUDED)

    def accepts(self, function_id: Optional[FunctionId], kind: FunctionKind) -> bool:
        """
        Check whether events for a function should be observed.

        Args:
            function_id: Handle of the function, or None if it has none yet
            kind: Introspected kind of the function

        Returns:
            True if the event passes the policy
        """
        state = HookState.UNSET if function_id is None else self._registry.hook_state(function_id)
        if state is HookState.EXCLUDED:
            return False
        if self.mode is FilterMode.UNRESTRICTED:
            return True
        if self.mode is FilterMode.HOOKED:
            return state is HookState.INCLUDED
        if self.mode is FilterMode.INTERNAL:
            return function_id in self._internal
        return kind.value == self.kind
