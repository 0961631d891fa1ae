"""
Hook dispatcher and timing model.

The dispatcher receives every call/return event of the monitored thread,
consults the filter policy and updates the registry. Elapsed time is measured
only for the outermost activation of each function: a timing window opens on
the first call, stays open while recursive activations nest inside it and
closes when the last of them returns.

Because the hook runs inline on every call and return of the host program it
never raises; internal inconsistencies are clamped and unexpected failures
are logged and dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from .filters import FilterPolicy
from .introspection import FunctionInfo, describe_frame
from .registry import FunctionRecord, FunctionRegistry


class EventKind(Enum):
    """Kind of a dispatched event."""

    CALL = "call"
    RETURN = "return"


HOST_EVENTS = {
    "call": EventKind.CALL,
    "c_call": EventKind.CALL,
    "return": EventKind.RETURN,
    "c_return": EventKind.RETURN,
    "c_exception": EventKind.RETURN,
}
"""Mapping of ``sys.setprofile`` event names to dispatched event kinds."""


class HookDispatcher:
    """
    Profile hook updating call counts and elapsed time.

    Instances are callable with the ``sys.setprofile`` signature, and
    ``on_event`` accepts already-resolved events for explicit
    instrumentation and tests.

    Args:
        registry: Registry receiving the counters
        policy: Filter policy consulted for every event
        clock: Zero-argument callable returning the current time in seconds
    """

    def __init__(self, registry: FunctionRegistry, policy: FilterPolicy, clock: Callable[[], float]):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.registry = registry
        self.policy = policy
        self.clock = clock

    def __call__(self, frame: Any, event: str, arg: Any) -> None:
        try:
            kind = HOST_EVENTS.get(event)
            if kind is None:
                return
            self.on_event(kind, describe_frame(frame, event, arg))
        except Exception as e:
            self.logger.debug(f"Dropped {event} event: {e!r}")

    def on_event(self, event: EventKind, info: FunctionInfo) -> None:
        """
        Dispatch a resolved call or return event.

        Args:
            event: EventKind.CALL or EventKind.RETURN
            info: Description of the function entering or leaving
        """
        try:
            function_id = self.registry.lookup(info.key)
            if not self.policy.accepts(function_id, info.kind):
                return
            if function_id is None:
                function_id = self.registry.identify(info.key)
            record = self.registry.ensure(function_id, info)
            if event is EventKind.CALL:
                self._enter(record)
            else:
                self._leave(record)
        except Exception as e:
            self.logger.debug(f"Dropped {event.value} event for {info.site}: {e!r}")

    def _enter(self, record: FunctionRecord) -> None:
        record.call_count += 1
        record.depth += 1
        # the timer only starts on the outermost activation
        if record.entered_at is None:
            record.entered_at = self.clock()

    def _leave(self, record: FunctionRecord) -> None:
        depth = record.depth
        if depth == 1 and record.entered_at is not None:
            record.elapsed += max(self.clock() - record.entered_at, 0.0)
            record.entered_at = None
        if depth > 0:
            record.depth = depth - 1
