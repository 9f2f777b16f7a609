"""
Period of a class.

The period is the gcd of every k in 1..n for which P^k has a positive
diagonal entry, i.e. some state of the class can return to itself in exactly
k steps.  Powers are taken of the 0/1 support matrix so that products of
small probabilities cannot underflow to zero; only the pattern of positive
entries matters.  Cost is O(n^4) for an n-state class.
"""

from __future__ import annotations

from functools import reduce
from math import gcd
from typing import List

import numpy as np

from ..core.matrix import Matrix, as_square, multiply


def return_times(submatrix: Matrix) -> List[int]:
    """Every k in 1..n with a positive diagonal entry in P^k."""
    P = as_square(submatrix)
    n = P.shape[0]
    support = (P > 0.0).astype(np.float64)
    power = support.copy()
    times: List[int] = []
    for k in range(1, n + 1):
        if np.any(np.diagonal(power) > 0.0):
            times.append(k)
        if k < n:
            power = np.minimum(multiply(power, support), 1.0)
    return times


def period(submatrix: Matrix) -> int:
    """Period of the class restricted to ``submatrix``.

    Returns:
        1 for an aperiodic class, d > 1 for a periodic one, and 0 when the
        matrix is empty or no state can return to itself.
    """
    times = return_times(submatrix)
    if not times:
        return 0
    return reduce(gcd, times)


def is_periodic(submatrix: Matrix) -> bool:
    return period(submatrix) > 1
