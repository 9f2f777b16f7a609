"""Analysis: end-to-end pipeline, reports, Mermaid export, cross-checks."""
from .convergence_log import ConvergenceLog
from .pipeline import ChainAnalysis, ClassSolution, analyze_chain

__all__ = [
    "ConvergenceLog",
    "ChainAnalysis",
    "ClassSolution",
    "analyze_chain",
]
