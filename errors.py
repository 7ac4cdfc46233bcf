"""
errors.py — Typed Failure Taxonomy
===================================
Every failure the core can report is one of these classes.  They are
raised synchronously and the operation that raised them leaves the
previous state untouched.

    VisualizerError
      ├── InvalidInputError      empty input handed to a generator
      ├── IndexOutOfRangeError   jump target outside the step list
      ├── InvalidArgumentError   speed out of range, unknown key, bad bundle
      ├── StateConflictError     operation not allowed in the current state
      └── NotFoundError          unknown snapshot id

Each class also derives from the closest builtin so callers that only
know about ValueError / IndexError still catch them.
"""


class VisualizerError(Exception):
    """Base class for every error raised by the visualizer core."""

    status_code: int = 400


class InvalidInputError(VisualizerError, ValueError):
    pass


class IndexOutOfRangeError(VisualizerError, IndexError):
    pass


class InvalidArgumentError(VisualizerError, ValueError):
    pass


class StateConflictError(VisualizerError, RuntimeError):
    status_code = 409


class NotFoundError(VisualizerError, LookupError):
    status_code = 404


__all__ = [
    "VisualizerError",
    "InvalidInputError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "StateConflictError",
    "NotFoundError",
]
