"""
Exceptions raised by the profiler's public operations.
"""


class InvalidArgumentError(TypeError):
    """Raised when a public operation receives an argument of the wrong kind."""
    pass
