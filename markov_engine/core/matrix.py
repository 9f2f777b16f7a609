"""
Dense square matrix engine.

Matrices are plain ``numpy`` float64 arrays of shape (n, n).  Every operation
returns a freshly allocated array; nothing here hands out views into its
inputs, so callers own what they receive.

Operations:
  create_empty(n)                 n x n zeros
  identity(n)                     n x n identity
  from_graph(graph)               full transition matrix, duplicates accumulated
  copy_matrix(m)                  independent copy
  multiply(a, b)                  dense O(n^3) product
  difference(a, b)                sum of absolute entrywise differences
  submatrix_for_class(m, p, c)    rows/cols of class c in member order
  mix(a, b, alpha)                alpha*a + (1 - alpha)*b
  matrix_power(m, k)              m^k by repeated multiplication
  limit_matrix(m, eps, cap)       M^k until successive powers stabilise
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .errors import ClassIndexError, DimensionMismatchError, InvalidArgumentError
from .graph import MarkovGraph
from .partition import Partition

logger = logging.getLogger("markov_engine.matrix")

Matrix = NDArray[np.float64]


def _check_size(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
        raise InvalidArgumentError(f"matrix size must be a positive integer, got {n!r}")


def as_square(m: Matrix, name: str = "matrix") -> Matrix:
    arr = np.asarray(m, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise InvalidArgumentError(f"{name} must be square, got shape {arr.shape}")
    return arr


def _check_same_size(a: Matrix, b: Matrix) -> None:
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"matrix sizes differ: {a.shape[0]} vs {b.shape[0]}"
        )


# --------------------------------------------------------------------------- #
# Construction                                                                  #
# --------------------------------------------------------------------------- #


def create_empty(n: int) -> Matrix:
    """Return an n x n matrix of zeros."""
    _check_size(n)
    return np.zeros((n, n), dtype=np.float64)


def identity(n: int) -> Matrix:
    """Return the n x n identity matrix."""
    _check_size(n)
    return np.eye(n, dtype=np.float64)


def from_graph(graph: MarkovGraph) -> Matrix:
    """Full transition matrix ``M[i][j]`` of ``graph`` (0-based indices).

    Repeated ``(i -> j)`` edges accumulate, so row sums always equal the
    outgoing sums that :meth:`MarkovGraph.is_markov` checks.
    """
    M = create_empty(graph.n_states)
    for edge in graph.edges():
        M[edge.source - 1, edge.target - 1] += edge.probability
    return M


def copy_matrix(m: Matrix) -> Matrix:
    """Return an independent copy of ``m``."""
    return as_square(m).copy()


# --------------------------------------------------------------------------- #
# Arithmetic                                                                    #
# --------------------------------------------------------------------------- #


def multiply(a: Matrix, b: Matrix) -> Matrix:
    """Dense product ``a @ b``.

    Raises:
        DimensionMismatchError: if the sizes differ.
    """
    a = as_square(a, "a")
    b = as_square(b, "b")
    _check_same_size(a, b)
    return a @ b


def difference(a: Matrix, b: Matrix) -> float:
    """Sum of absolute entrywise differences (convergence metric)."""
    a = as_square(a, "a")
    b = as_square(b, "b")
    _check_same_size(a, b)
    return float(np.abs(a - b).sum())


def mix(a: Matrix, b: Matrix, alpha: float) -> Matrix:
    """Affine combination ``alpha*a + (1 - alpha)*b``."""
    a = as_square(a, "a")
    b = as_square(b, "b")
    _check_same_size(a, b)
    return alpha * a + (1.0 - alpha) * b


def matrix_power(m: Matrix, k: int) -> Matrix:
    """Return ``m^k`` (k >= 1) by repeated multiplication."""
    m = as_square(m)
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise InvalidArgumentError(f"power must be an integer >= 1, got {k!r}")
    result = m.copy()
    for _ in range(k - 1):
        result = multiply(result, m)
    return result


# --------------------------------------------------------------------------- #
# Restriction to a class                                                        #
# --------------------------------------------------------------------------- #


def submatrix_for_class(m: Matrix, partition: Partition, class_index: int) -> Matrix:
    """Restrict ``m`` to the member states of one class.

    Rows and columns follow the class's member order.  The result is a new
    array of size ``len(members)``.

    Args:
        m:           Full transition matrix (N x N).
        partition:   Partition whose classes hold 1-based state ids.
        class_index: 0-based class index.

    Raises:
        ClassIndexError: if the index is out of range or the class is empty.
    """
    m = as_square(m)
    if not 0 <= class_index < len(partition):
        raise ClassIndexError(
            f"class index {class_index} out of range (n_classes={len(partition)})"
        )
    members = partition[class_index].members
    if not members:
        raise ClassIndexError(f"class {partition[class_index].name} has no members")
    idx = np.asarray(members, dtype=np.intp) - 1
    if idx.min() < 0 or idx.max() >= m.shape[0]:
        raise DimensionMismatchError(
            f"class {partition[class_index].name} references states outside "
            f"a {m.shape[0]}x{m.shape[0]} matrix"
        )
    # Fancy indexing copies.
    return m[np.ix_(idx, idx)]


# --------------------------------------------------------------------------- #
# Limit matrix                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class LimitResult:
    """Outcome of the ``M^k`` limit search.

    Attributes:
        matrix:    Last computed power.
        power:     Exponent of ``matrix``.
        residual:  difference(M^(k-1), M^k) at exit.
        converged: True iff residual dropped below epsilon before the cap.
    """

    matrix: Matrix
    power: int
    residual: float
    converged: bool


def limit_matrix(m: Matrix, epsilon: float = 1e-4, max_power: int = 100) -> LimitResult:
    """Raise ``m`` to successive powers until two in a row differ by < epsilon.

    Periodic chains never settle; they come back with ``converged=False``
    once ``max_power`` is reached.
    """
    m = as_square(m)
    current = m.copy()
    following = multiply(current, m)
    residual = difference(current, following)
    power = 2
    while residual >= epsilon and power < max_power:
        current, following = following, multiply(following, m)
        residual = difference(current, following)
        power += 1
        logger.debug(f"power {power}: residual {residual:.6g}")

    converged = residual < epsilon
    if not converged:
        logger.warning(
            f"M^k did not stabilise within {max_power} powers "
            f"(residual={residual:.6g})"
        )
    return LimitResult(matrix=following, power=power, residual=residual, converged=converged)
