"""
Markov engine — structural decomposition and stationary analysis of finite
discrete-time Markov chains.

Pipeline:
    MarkovGraph -> tarjan -> condensation / Hasse diagram -> classifier
    MarkovGraph -> transition matrix -> class submatrix -> period -> stationary

Public API:
    MarkovGraph         — weighted adjacency lists over states 1..N
    SolverParameters    — immutable numerical configuration
    Partition           — strongly connected classes
    ClassLinkSet        — deduplicated inter-class links
    tarjan              — SCC decomposition
    analyze_chain       — run every stage, return a ChainAnalysis
    solve_stationary    — stationary distribution of one class
"""

from .core.errors import (
    ClassIndexError,
    DimensionMismatchError,
    DuplicateEdgeError,
    GraphFormatError,
    InvalidArgumentError,
    InvariantViolation,
    MarkovEngineError,
)
from .core.graph import Edge, MarkovGraph, create_graph
from .core.parameters import SolverParameters
from .core.partition import ClassLink, ClassLinkSet, Partition, StateClass
from .core.matrix import (
    LimitResult,
    copy_matrix,
    create_empty,
    difference,
    from_graph,
    identity,
    limit_matrix,
    matrix_power,
    mix,
    multiply,
    submatrix_for_class,
)
from .systems.tarjan import tarjan
from .systems.condensation import class_links, transitive_reduction, vertex_to_class
from .systems.classifier import (
    ClassKind,
    classify_classes,
    is_absorbing,
    is_irreducible,
    is_persistent,
    is_transient,
)
from .systems.periodicity import period
from .systems.stationary import StationaryResult, lazy_chain, power_iterate, solve_stationary
from .analysis.pipeline import ChainAnalysis, ClassSolution, analyze_chain
from .analysis.convergence_log import ConvergenceLog
from .loader import load_parameters, parse_graph, read_graph

__all__ = [
    "MarkovEngineError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "ClassIndexError",
    "GraphFormatError",
    "DuplicateEdgeError",
    "InvariantViolation",
    "Edge",
    "MarkovGraph",
    "create_graph",
    "SolverParameters",
    "StateClass",
    "Partition",
    "ClassLink",
    "ClassLinkSet",
    "LimitResult",
    "create_empty",
    "identity",
    "from_graph",
    "copy_matrix",
    "multiply",
    "difference",
    "mix",
    "matrix_power",
    "limit_matrix",
    "submatrix_for_class",
    "tarjan",
    "vertex_to_class",
    "class_links",
    "transitive_reduction",
    "ClassKind",
    "is_transient",
    "is_persistent",
    "is_absorbing",
    "is_irreducible",
    "classify_classes",
    "period",
    "StationaryResult",
    "lazy_chain",
    "power_iterate",
    "solve_stationary",
    "ChainAnalysis",
    "ClassSolution",
    "analyze_chain",
    "ConvergenceLog",
    "parse_graph",
    "read_graph",
    "load_parameters",
]
