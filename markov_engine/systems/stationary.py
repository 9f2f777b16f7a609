"""
Stationary distribution of a persistent class by power iteration.

Iteration pipeline per step:
  1. pi' = pi . S'            (row vector times matrix)
  2. Clamp negative entries of pi' to 0.
  3. Renormalise so that sum(pi') = 1.
  4. residual = |pi' - pi|_1, then pi <- pi'.
  5. Stop once residual < epsilon or the iteration cap is reached.

S' is the class matrix itself for an aperiodic class.  A periodic class
(period d > 1) never settles under plain iteration: mass keeps rotating
between its cyclic subclasses, so it is replaced by the lazy chain
0.5*S + 0.5*I, which is aperiodic and has the same stationary distribution.

Running out of iterations is not an error: the result carries an explicit
``converged`` flag and iteration count and the caller decides what to trust.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np
from numpy.typing import NDArray

from ..core.errors import InvalidArgumentError
from ..core.matrix import Matrix, as_square, identity, mix
from ..core.parameters import SolverParameters
from .periodicity import period as compute_period

logger = logging.getLogger("markov_engine.stationary")

# hook(iteration, residual) -> None, called after every step.
IterationHook = Callable[[int, float], None]


@dataclass(frozen=True)
class StationaryResult:
    """Approximate stationary distribution plus convergence status.

    Attributes:
        distribution: Probability vector (entries >= 0, sum 1) in class member order.
        converged:    True iff the residual fell below epsilon within the cap.
        iterations:   Number of iteration steps performed.
        residual:     L1 distance between the last two iterates.
        period:       Period of the class (0 if unknown / not computed).
        lazy:         True iff the lazy chain was iterated instead of S.
    """

    distribution: NDArray[np.float64]
    converged: bool
    iterations: int
    residual: float
    period: int = 0
    lazy: bool = False

    def __len__(self) -> int:
        return len(self.distribution)


def lazy_chain(submatrix: Matrix, alpha: float = 0.5) -> Matrix:
    """Damped matrix ``alpha*S + (1 - alpha)*I``."""
    S = as_square(submatrix)
    return mix(S, identity(S.shape[0]), alpha)


def power_iterate(
    matrix: Matrix,
    epsilon: float = 1e-6,
    max_iterations: int = 10000,
    initial: Optional[Iterable[float]] = None,
    hooks: Iterable[IterationHook] = (),
) -> StationaryResult:
    """Run power iteration on ``matrix`` exactly as given (no damping).

    Args:
        matrix:         Square transition matrix S'.
        epsilon:        Stopping threshold on the L1 residual.
        max_iterations: Iteration cap.
        initial:        Starting vector (default uniform); normalised first.
        hooks:          Callables invoked as ``hook(iteration, residual)``.

    Returns:
        StationaryResult with ``period=0`` and ``lazy=False``.
    """
    S = as_square(matrix)
    n = S.shape[0]
    if n == 0:
        raise InvalidArgumentError("cannot iterate an empty matrix")
    hooks = list(hooks)

    if initial is None:
        pi = np.full(n, 1.0 / n)
    else:
        pi = np.asarray(list(initial), dtype=np.float64)
        if (
            pi.shape != (n,)
            or not np.all(np.isfinite(pi))
            or np.any(pi < 0.0)
            or pi.sum() <= 0.0
        ):
            raise InvalidArgumentError(
                f"initial vector must be finite, non-negative, of length {n} "
                "and with positive mass"
            )
        pi = pi / pi.sum()

    residual = float("inf")
    iterations = 0
    while iterations < max_iterations:
        nxt = pi @ S
        np.maximum(nxt, 0.0, out=nxt)
        total = nxt.sum()
        iterations += 1
        if total <= 0.0:
            logger.warning(f"probability mass vanished at iteration {iterations}")
            return StationaryResult(
                distribution=pi, converged=False, iterations=iterations, residual=residual
            )
        nxt /= total
        residual = float(np.abs(nxt - pi).sum())
        pi = nxt
        for hook in hooks:
            hook(iterations, residual)
        if residual < epsilon:
            break

    converged = residual < epsilon
    logger.debug(
        f"power iteration: n={n} iterations={iterations} "
        f"residual={residual:.3g} converged={converged}"
    )
    return StationaryResult(
        distribution=pi, converged=converged, iterations=iterations, residual=residual
    )


def solve_stationary(
    submatrix: Matrix,
    period: Optional[int] = None,
    params: Optional[SolverParameters] = None,
    hooks: Iterable[IterationHook] = (),
) -> StationaryResult:
    """Stationary distribution of one persistent class.

    Args:
        submatrix: Class transition matrix in member order.
        period:    Class period; computed from ``submatrix`` when omitted.
        params:    Solver parameters (epsilon, cap, lazy weight).
        hooks:     Per-iteration callbacks forwarded to power_iterate.

    Returns:
        StationaryResult.  A singleton class returns ``[1.0]`` without iterating.
    """
    if params is None:
        params = SolverParameters()
    S = as_square(submatrix)
    n = S.shape[0]
    if n == 0:
        raise InvalidArgumentError("cannot solve an empty class")
    if period is None:
        period = compute_period(S)

    if n == 1:
        return StationaryResult(
            distribution=np.ones(1), converged=True, iterations=0,
            residual=0.0, period=period, lazy=False,
        )

    lazy = period > 1
    if lazy:
        logger.debug(f"class is periodic (d={period}); iterating the lazy chain")
        working = lazy_chain(S, params.lazy_alpha)
    else:
        working = S

    result = power_iterate(
        working,
        epsilon=params.epsilon,
        max_iterations=params.max_iterations,
        hooks=hooks,
    )
    if not result.converged:
        logger.warning(
            f"stationary solver stopped after {result.iterations} iterations "
            f"without reaching epsilon={params.epsilon} (residual={result.residual:.3g})"
        )
    return StationaryResult(
        distribution=result.distribution,
        converged=result.converged,
        iterations=result.iterations,
        residual=result.residual,
        period=period,
        lazy=lazy,
    )
