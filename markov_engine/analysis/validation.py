"""
Independent cross-checks of pipeline artifacts.

  cross_check_partition(graph, partition)   compare against SciPy's strong components
  stationary_residual(S, pi)                |pi . S - pi|_1
  check_stationary(S, pi, tolerance)        probability vector + fixed point test

These do not feed back into the pipeline; the CLI's ``--verify`` flag and
the test suite use them to confirm the hand-written stages.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np
from numpy.typing import NDArray
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from ..core.graph import MarkovGraph
from ..core.matrix import Matrix, as_square
from ..core.partition import Partition

logger = logging.getLogger("markov_engine.validation")


def reference_components(graph: MarkovGraph) -> List[frozenset]:
    """Strongly connected classes computed by SciPy, as sets of state ids."""
    n = graph.n_states
    rows, cols = [], []
    for edge in graph.edges():
        rows.append(edge.source - 1)
        cols.append(edge.target - 1)
    adjacency = csr_matrix(
        (np.ones(len(rows)), (rows, cols)), shape=(n, n)
    )
    n_components, labels = connected_components(
        adjacency, directed=True, connection="strong"
    )
    groups: List[set] = [set() for _ in range(n_components)]
    for state_index, label in enumerate(labels):
        groups[label].add(state_index + 1)
    return [frozenset(group) for group in groups]


def cross_check_partition(graph: MarkovGraph, partition: Partition) -> bool:
    """True iff ``partition`` has the same classes as SciPy finds."""
    ours = set(partition.as_sets())
    theirs = set(reference_components(graph))
    if ours != theirs:
        logger.warning(
            f"partition mismatch: {len(ours)} classes vs {len(theirs)} from scipy"
        )
        return False
    return True


def stationary_residual(submatrix: Matrix, distribution: NDArray[np.float64]) -> float:
    """L1 norm of ``pi . S - pi``."""
    S = as_square(submatrix)
    pi = np.asarray(distribution, dtype=np.float64)
    return float(np.abs(pi @ S - pi).sum())


def check_stationary(
    submatrix: Matrix,
    distribution: NDArray[np.float64],
    tolerance: float = 1e-4,
) -> bool:
    """True iff ``distribution`` is a probability vector fixed by ``submatrix``."""
    pi = np.asarray(distribution, dtype=np.float64)
    if np.any(pi < 0.0) or abs(pi.sum() - 1.0) > tolerance:
        return False
    return stationary_residual(submatrix, pi) <= tolerance
