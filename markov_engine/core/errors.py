"""
Exception hierarchy for the Markov engine.

Invalid arguments derive from ValueError (and IndexError for class lookups)
so callers that already catch the builtin types keep working.  Numerical
non-convergence is never an exception; it is reported on the result object.
"""

from __future__ import annotations


class MarkovEngineError(Exception):
    """Base class for every error raised by markov_engine."""


class InvalidArgumentError(MarkovEngineError, ValueError):
    """A size, state id, probability or link set is not acceptable."""


class DimensionMismatchError(InvalidArgumentError):
    """Two matrices that must share a dimension do not."""


class ClassIndexError(InvalidArgumentError, IndexError):
    """A class index is out of range or names an empty class."""


class GraphFormatError(MarkovEngineError, ValueError):
    """Malformed graph description text.

    Attributes:
        line: 1-based line number of the offending token, if known.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class DuplicateEdgeError(GraphFormatError):
    """The same (source, target) pair appears twice under the reject policy."""


class InvariantViolation(MarkovEngineError, AssertionError):
    """A structural invariant does not hold; indicates a logic defect."""
