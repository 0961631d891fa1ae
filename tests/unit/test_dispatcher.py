"""
Unit tests for the hook dispatcher and its timing model.
"""

import os
import sys
from types import SimpleNamespace

import pytest

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from callprof import config
from callprof.dispatcher import EventKind, HookDispatcher
from callprof.filters import FilterMode, FilterPolicy
from callprof.introspection import FunctionKind
from callprof.registry import HookState
from tests.helpers import FakeClock, make_info, timed_call


class TestTimingModel:
    """Test cases for call counting and elapsed time accounting."""

    def test_non_recursive_calls_sum_each_span(self, dispatcher, registry, clock):
        """Test N call/return pairs give N calls and the sum of the spans."""
        info = make_info("leaf")
        for duration in (0.25, 0.5, 1.0):
            timed_call(dispatcher, info, clock, duration)
            clock.advance(10.0)  # time between calls is not counted

        record = registry.get(registry.lookup(info.key))
        assert record.call_count == 3
        assert record.elapsed == pytest.approx(1.75)
        assert record.depth == 0
        assert record.entered_at is None

    def test_recursion_accrues_outer_span_once(self, dispatcher, registry, clock):
        """Test recursive activations count every call but time only the outer span."""
        info = make_info("recurse")
        depth = 4
        for _ in range(depth):
            dispatcher.on_event(EventKind.CALL, info)
            clock.advance(1.0)
        for _ in range(depth):
            dispatcher.on_event(EventKind.RETURN, info)
            clock.advance(1.0)

        record = registry.get(registry.lookup(info.key))
        assert record.call_count == depth
        # outer span: 4 s descending + 3 s unwinding before the last return
        assert record.elapsed == pytest.approx(7.0)
        assert record.depth == 0

    def test_window_stays_open_while_nested(self, dispatcher, registry, clock):
        """Test an inner return does not close the outer timing window."""
        info = make_info("nested")
        dispatcher.on_event(EventKind.CALL, info)
        dispatcher.on_event(EventKind.CALL, info)
        clock.advance(2.0)
        dispatcher.on_event(EventKind.RETURN, info)

        record = registry.get(registry.lookup(info.key))
        assert record.depth == 1
        assert record.entered_at == 0.0
        assert record.elapsed == 0.0

    def test_unmatched_return_is_clamped(self, dispatcher, registry, clock):
        """Test a return without a call leaves depth at zero and adds no time."""
        info = make_info("orphan")
        dispatcher.on_event(EventKind.RETURN, info)
        dispatcher.on_event(EventKind.RETURN, info)

        record = registry.get(registry.lookup(info.key))
        assert record.call_count == 0
        assert record.depth == 0
        assert record.elapsed == 0.0

    def test_backwards_clock_never_produces_negative_time(self, dispatcher, registry, clock):
        """Test a non-monotonic clock cannot make elapsed time negative."""
        info = make_info("skewed")
        timed_call(dispatcher, info, clock, -5.0)

        record = registry.get(registry.lookup(info.key))
        assert record.elapsed == 0.0

    def test_distinct_functions_are_independent(self, dispatcher, registry, clock):
        """Test interleaved functions keep separate windows."""
        outer, inner = make_info("outer"), make_info("inner")
        dispatcher.on_event(EventKind.CALL, outer)
        clock.advance(1.0)
        timed_call(dispatcher, inner, clock, 2.0)
        clock.advance(1.0)
        dispatcher.on_event(EventKind.RETURN, outer)

        assert registry.get(registry.lookup(outer.key)).elapsed == pytest.approx(4.0)
        assert registry.get(registry.lookup(inner.key)).elapsed == pytest.approx(2.0)

    def test_label_fixed_at_creation(self, dispatcher, registry, clock):
        """Test later events never revise a record's label or site."""
        first = make_info("original", "a.py:1")
        later = make_info("renamed", "b.py:9", key=first.key)
        timed_call(dispatcher, first, clock, 1.0)
        timed_call(dispatcher, later, clock, 1.0)

        record = registry.get(registry.lookup(first.key))
        assert record.label == "original"
        assert record.site == "a.py:1"
        assert record.call_count == 2


class TestDispatcherFiltering:
    """Test cases for filter consultation in the dispatcher."""

    def test_rejected_event_creates_nothing(self, registry, clock):
        """Test an event failing the filter leaves the registry untouched."""
        policy = FilterPolicy(registry)
        policy.set_mode(FilterMode.HOOKED)
        dispatcher = HookDispatcher(registry, policy, clock)

        info = make_info("ignored")
        timed_call(dispatcher, info, clock, 1.0)

        assert len(registry) == 0
        assert registry.lookup(info.key) is None

    def test_excluded_function_is_ignored(self, dispatcher, registry, clock):
        """Test an explicitly excluded function keeps its counters unchanged."""
        info = make_info("noisy")
        timed_call(dispatcher, info, clock, 1.0)
        function_id = registry.lookup(info.key)
        registry.set_hook_state(function_id, HookState.EXCLUDED)

        timed_call(dispatcher, info, clock, 1.0)

        record = registry.get(function_id)
        assert record.call_count == 1
        assert record.elapsed == pytest.approx(1.0)


class TestHostAdapter:
    """Test cases for the sys.setprofile-compatible entry point."""

    def test_python_events_resolve_through_code(self, dispatcher, registry, clock):
        """Test 'call' and 'return' events are keyed by the frame's code object."""
        def sample():
            pass

        frame = SimpleNamespace(f_code=sample.__code__)
        dispatcher(frame, "call", None)
        clock.advance(0.5)
        dispatcher(frame, "return", None)

        record = registry.get(registry.lookup(sample.__code__))
        assert record.call_count == 1
        assert record.elapsed == pytest.approx(0.5)
        assert record.kind is FunctionKind.PYTHON
        assert record.label.endswith("sample")

    def test_native_events_resolve_through_arg(self, dispatcher, registry, clock):
        """Test 'c_call' and 'c_return' events are keyed by the built-in."""
        frame = SimpleNamespace(f_code=None)
        dispatcher(frame, "c_call", len)
        clock.advance(0.25)
        dispatcher(frame, "c_exception", len)

        record = registry.get(registry.lookup(len))
        assert record.call_count == 1
        assert record.elapsed == pytest.approx(0.25)
        assert record.kind is FunctionKind.NATIVE
        assert record.site == f"{config.NATIVE_SOURCE}:{config.NATIVE_LINE}"

    def test_unknown_event_is_ignored(self, dispatcher, registry):
        """Test events other than calls and returns are ignored."""
        dispatcher(SimpleNamespace(f_code=None), "line", None)
        assert len(registry) == 0

    def test_broken_frame_never_raises(self, dispatcher, registry):
        """Test malformed host data is dropped instead of propagated."""
        dispatcher(object(), "call", None)
        assert len(registry) == 0

    def test_failing_clock_never_raises(self, registry):
        """Test a clock that raises does not escape the dispatcher."""
        def broken_clock():
            raise RuntimeError("clock failure")

        dispatcher = HookDispatcher(registry, FilterPolicy(registry), broken_clock)
        info = make_info("victim")
        dispatcher.on_event(EventKind.CALL, info)
        dispatcher.on_event(EventKind.RETURN, info)

        record = registry.get(registry.lookup(info.key))
        assert record.call_count == 1
        assert record.elapsed == 0.0
