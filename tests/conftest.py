"""
Pytest configuration and fixtures for callprof tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from callprof.dispatcher import HookDispatcher
from callprof.filters import FilterPolicy
from callprof.profiler import Profiler
from callprof.registry import FunctionRegistry
from tests.helpers import FakeClock


@pytest.fixture
def clock():
    """Deterministic clock starting at zero."""
    return FakeClock()


@pytest.fixture
def registry():
    """Empty function registry."""
    return FunctionRegistry()


@pytest.fixture
def dispatcher(registry, clock):
    """Dispatcher with an unrestricted filter policy and the fake clock."""
    return HookDispatcher(registry, FilterPolicy(registry), clock)


@pytest.fixture
def profiler(clock):
    """Profiler using the fake clock, always uninstalled after the test."""
    prof = Profiler(clock=clock)
    yield prof
    prof.stop()


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory as a string path."""
    return str(tmp_path)
