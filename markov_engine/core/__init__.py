"""Core data model: graph, partition containers, matrices, parameters, errors."""
from .errors import (
    ClassIndexError,
    DimensionMismatchError,
    InvalidArgumentError,
    InvariantViolation,
    MarkovEngineError,
)
from .graph import Edge, MarkovGraph, create_graph
from .parameters import SolverParameters
from .partition import ClassLink, ClassLinkSet, Partition, StateClass

__all__ = [
    "MarkovEngineError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "ClassIndexError",
    "InvariantViolation",
    "Edge",
    "MarkovGraph",
    "create_graph",
    "SolverParameters",
    "ClassLink",
    "ClassLinkSet",
    "Partition",
    "StateClass",
]
