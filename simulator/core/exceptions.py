"""
Exceptions raised by the elevator bank core.

Both derive from built-in exception types so callers that already catch
ValueError / RuntimeError keep working.
"""


class InvalidArgumentError(ValueError):
    """Malformed input: out-of-range floor, equal start/end floor, bad size"""


class IllegalStateError(RuntimeError):
    """Operation not allowed in the current system or car state"""
