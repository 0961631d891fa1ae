"""
Test helpers package for callprof.

Provides utilities, fixtures, and helper functions for testing.
"""

from .test_utils import (
    FakeClock,
    make_info,
    timed_call,
    record_for,
    seed_record,
    suppress_logging,
    MockArgsNamespace
)

__all__ = [
    'FakeClock',
    'make_info',
    'timed_call',
    'record_for',
    'seed_record',
    'suppress_logging',
    'MockArgsNamespace'
]
