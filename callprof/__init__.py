"""
Call-level execution profiler.

Tracks call counts and elapsed wall time per function, handling recursion,
and renders ranked fixed-width reports.
"""

from .errors import InvalidArgumentError
from .filters import FilterMode
from .introspection import FunctionKind
from .profiler import Profiler
from .query import QueryRow, SortKey

__all__ = [
    'Profiler',
    'FilterMode',
    'FunctionKind',
    'SortKey',
    'QueryRow',
    'InvalidArgumentError',
]
