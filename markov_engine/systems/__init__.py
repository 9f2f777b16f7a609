"""Systems: SCC decomposition, condensation, classification, periods, stationary solver."""
from .tarjan import tarjan
from .condensation import class_links, transitive_reduction, vertex_to_class
from .classifier import (
    ClassKind,
    absorbing_states,
    classify,
    classify_classes,
    is_absorbing,
    is_irreducible,
    is_persistent,
    is_transient,
)
from .periodicity import period, return_times
from .stationary import StationaryResult, lazy_chain, power_iterate, solve_stationary

__all__ = [
    "tarjan",
    "vertex_to_class",
    "class_links",
    "transitive_reduction",
    "ClassKind",
    "absorbing_states",
    "classify",
    "classify_classes",
    "is_absorbing",
    "is_irreducible",
    "is_persistent",
    "is_transient",
    "period",
    "return_times",
    "StationaryResult",
    "lazy_chain",
    "power_iterate",
    "solve_stationary",
]
