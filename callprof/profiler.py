"""
Call-level profiler.

``Profiler`` is the public entry point. It owns a function registry, a filter
policy and a hook dispatcher, installs the dispatcher with ``sys.setprofile``
and exposes the query and report pipeline over the collected data.

Example:
    profiler = Profiler()
    with profiler:
        run_workload()
    profiler.combine()
    print(profiler.report("time", 10))

Only the thread that calls ``start()`` is observed; events of other threads
are not recorded.
"""

from __future__ import annotations

import gc
import logging
import sys
from collections.abc import Callable
from typing import Any, Iterator

from . import config
from .aggregation import combine_records
from .dispatcher import HookDispatcher
from .errors import InvalidArgumentError
from .filters import FilterMode, FilterPolicy, parse_filter_mode
from .introspection import describe_callable
from .query import QueryRow, query_records
from .registry import FunctionId, FunctionRecord, FunctionRegistry, HookState
from .report import render_report


class Profiler:
    """
    Collects call counts and elapsed time per function.

    Args:
        clock: Zero-argument callable returning seconds (default: time.perf_counter)
    """

    def __init__(self, clock: Callable[[], float] | None = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.registry = FunctionRegistry()
        self.policy = FilterPolicy(self.registry)
        self.dispatcher = HookDispatcher(self.registry, self.policy, config.DEFAULT_CLOCK)
        self._running = False
        if clock is not None:
            self.set_clock(clock)
        self._register_internal_routines()

    def __enter__(self) -> Profiler:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def filter_mode(self) -> FilterMode:
        return self.policy.mode

    def _register_internal_routines(self) -> None:
        # the profiler stays out of its own reports unless asked for
        for routine in INTERNAL_ROUTINES:
            info = describe_callable(routine)
            function_id = self.registry.identify(info.key)
            self.policy.mark_internal(function_id)
            self.policy.exclude(function_id)

    def set_clock(self, clock: Callable[[], float]) -> None:
        """
        Replace the clock used to time activations.

        Args:
            clock: Zero-argument callable returning a monotonic number of seconds

        Raises:
            InvalidArgumentError: If ``clock`` is not callable
        """
        if not callable(clock):
            raise InvalidArgumentError("clock must be a function")
        self.dispatcher.clock = clock

    def start(self) -> None:
        """Start observing call and return events of the current thread."""
        if self._running:
            return
        self._running = True
        self.logger.debug("Profiler started")
        sys.setprofile(self.dispatcher)

    def stop(self) -> None:
        """
        Stop observing events.

        Activations still in flight are closed at the current clock reading
        and recursion depths are cleared; counts and times are kept.
        """
        sys.setprofile(None)
        was_running = self._running
        self._running = False
        closed = self.registry.close_windows(self.dispatcher.clock())
        if was_running:
            self.logger.debug(f"Profiler stopped, closed {closed} open activations")
        gc.collect()

    def reset(self) -> None:
        """Zero all counters while keeping function labels and sites."""
        self.registry.clear_counters()
        gc.collect()

    def combine(self) -> int:
        """
        Merge records sharing a label and definition site.

        Returns:
            Number of records merged away
        """
        return combine_records(self.registry)

    def include(self, func: Any, label: str | None = None) -> None:
        """
        Profile a function explicitly and narrow the filter to included functions.

        Args:
            func: Function, method, code object or built-in to include
            label: Display name; defaults to the function's own name

        Raises:
            InvalidArgumentError: If ``func`` is not a function or ``label`` not a string
        """
        if label is not None and not isinstance(label, str):
            raise InvalidArgumentError("function label must be a string")
        function_id = self._register(func, label)
        self.policy.include(function_id)

    def _register(self, func: Any, label: str | None = None) -> FunctionId:
        # create the record eagerly; an existing label is never replaced
        info = describe_callable(func)
        function_id = self.registry.identify(info.key)
        created = self.registry.get(function_id) is None
        record = self.registry.ensure(function_id, info)
        if created and label is not None:
            record.label = label
        elif record.label is None:
            record.label = label if label is not None else info.name
        self.registry.set_hook_state(function_id, HookState.INCLUDED)
        return function_id

    def exclude(self, func: Any) -> None:
        """
        Ignore events of a function. Collected counters are kept.

        Raises:
            InvalidArgumentError: If ``func`` is not a function
        """
        info = describe_callable(func)
        function_id = self.registry.identify(info.key)
        self.policy.exclude(function_id)
        record = self.registry.get(function_id)
        if record is not None:
            record.label = None

    def set_filter_mode(self, mode: Any = None) -> None:
        """
        Select which functions are observed.

        Args:
            mode: FilterMode, FunctionKind, None/'all', 'hooked', 'internal',
                  or a kind name such as 'Python' or 'C'
        """
        mode, kind = parse_filter_mode(mode)
        if mode is FilterMode.INTERNAL:
            for routine in INTERNAL_ROUTINES:
                self._register(routine)
        self.policy.set_mode(mode, kind)

    def records(self) -> list[FunctionRecord]:
        """Snapshot of the live records in registration order."""
        return self.registry.records()

    def query(self, sort_key: Any = None, limit: int | None = None) -> Iterator[QueryRow]:
        """
        Iterate functions ranked by 'calls' or 'time', highest first.

        See ``query.query_records`` for ordering and iteration rules.
        """
        return query_records(self.registry, sort_key, limit)

    def report(self, sort_key: Any = None, limit: int | None = None) -> str:
        """Render the ranked functions as a fixed-width text table."""
        return render_report(self.query(sort_key, limit))


INTERNAL_ROUTINES = (
    Profiler.__init__,
    Profiler.__enter__,
    Profiler.__exit__,
    Profiler._register_internal_routines,
    Profiler._register,
    Profiler.set_clock,
    Profiler.start,
    Profiler.stop,
    Profiler.reset,
    Profiler.combine,
    Profiler.include,
    Profiler.exclude,
    Profiler.set_filter_mode,
    Profiler.records,
    Profiler.query,
    Profiler.report,
    combine_records,
    query_records,
    render_report,
    sys.setprofile,
    gc.collect,
)
"""Routines making up the profiler, observed only in the 'internal' filter mode."""
