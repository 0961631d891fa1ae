"""
Function introspection helpers.

This module turns the objects the interpreter hands to a profile hook (frames,
code objects and built-in callables) into ``FunctionInfo`` descriptions. Any
missing or unexpected data degrades to the placeholders defined in
``config`` instead of raising.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any

from . import config
from .errors import InvalidArgumentError


class FunctionKind(str, Enum):
    """Implementation kind of a profiled function."""

    PYTHON = "Python"
    NATIVE = "C"


@dataclass(frozen=True)
class FunctionInfo:
    """
    Description of one callable entity as seen by the profiler.

    Attributes:
        key: Host object identifying the function (code object or built-in)
        name: Declared name, or None for anonymous code
        site: Definition site formatted as ``source:line``
        kind: Implementation kind
    """
    key: Any
    name: str | None
    site: str
    kind: FunctionKind


def _clean_name(name: Any) -> str | None:
    # Synthetic code names such as <lambda> or <module> count as anonymous
    if not isinstance(name, str) or not name:
        return None
    if name.startswith("<") and name.endswith(">"):
        return None
    return name


def _display_name(short_name: Any, qualified_name: Any) -> str | None:
    # anonymity is decided by the short name; the qualified one is for display
    if _clean_name(short_name) is None:
        return None
    return _clean_name(qualified_name) or short_name


def _native_key(func: Any) -> Any:
    # bound built-in methods are keyed by their type's routine, not the bound object
    owner = getattr(func, "__self__", None)
    if owner is None or inspect.ismodule(owner) or inspect.isclass(owner):
        return func
    routine = getattr(type(owner), getattr(func, "__name__", ""), None)
    return routine if inspect.isroutine(routine) else func


def format_site(source: Any, line: Any) -> str:
    """Format a definition site, falling back to the unknown-site placeholder."""
    if not source or not isinstance(line, int):
        return config.UNKNOWN_SITE
    return f"{source}:{line}"


def describe_code(code: Any) -> FunctionInfo:
    """
    Describe an interpreted function from its code object.

    Args:
        code: Code object of the function

    Returns:
        FunctionInfo keyed by the code object
    """
    name = _display_name(getattr(code, "co_name", None), getattr(code, "co_qualname", None))
    site = format_site(
        getattr(code, "co_filename", None), getattr(code, "co_firstlineno", None)
    )
    return FunctionInfo(code, name, site, FunctionKind.PYTHON)


def describe_native(func: Any) -> FunctionInfo:
    """
    Describe a built-in function or method.

    Args:
        func: The built-in callable reported by the interpreter

    Returns:
        FunctionInfo keyed by the built-in, or by its type's routine when
        the built-in is bound to an instance
    """
    name = _display_name(getattr(func, "__name__", None), getattr(func, "__qualname__", None))
    site = format_site(config.NATIVE_SOURCE, config.NATIVE_LINE)
    return FunctionInfo(_native_key(func), name, site, FunctionKind.NATIVE)


def describe_frame(frame: Any, event: str, arg: Any) -> FunctionInfo:
    """
    Describe the function a profile event refers to.

    Args:
        frame: Frame passed to the profile hook
        event: Event name ('call', 'return', 'c_call', 'c_return', 'c_exception')
        arg: Event argument; the called built-in for ``c_*`` events

    Returns:
        FunctionInfo for the function entering or leaving
    """
    if event.startswith("c_"):
        return describe_native(arg)
    return describe_code(frame.f_code)


def describe_callable(func: Any) -> FunctionInfo:
    """
    Describe a callable passed explicitly by a user.

    Args:
        func: Python function, bound method, code object or built-in routine

    Returns:
        FunctionInfo for the callable

    Raises:
        InvalidArgumentError: If the object is not a profilable function
    """
    if inspect.ismethod(func):
        func = func.__func__
    if inspect.isfunction(func):
        return describe_code(func.__code__)
    if inspect.iscode(func):
        return describe_code(func)
    if inspect.isroutine(func):
        return describe_native(func)
    raise InvalidArgumentError(f"cannot profile a non-function: {func!r}")
