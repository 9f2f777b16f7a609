"""
Residual trace of the stationary solver.

power_iterate() calls each hook with ``(iteration, residual)`` after every
step.  ConvergenceLog is such a hook: it keeps the L1 residuals so a caller
can see how fast a class settled, or why it hit the iteration cap.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple


class ConvergenceLog:
    """Residual history of one or more power-iteration runs.

        log = ConvergenceLog()
        solve_stationary(S, hooks=[log.record])
        log.residuals()   # one L1 distance per step

    Attributes:
        max_records: Number of most recent steps kept (None keeps all).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[Tuple[int, float]] = []

    def record(self, iteration: int, residual: float) -> None:
        """Iteration hook: store the residual reached at ``iteration``."""
        self._records.append((iteration, float(residual)))
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)

    def records(self) -> List[Tuple[int, float]]:
        return list(self._records)

    def residuals(self) -> List[float]:
        """Residuals in step order; the last one decides convergence."""
        return [residual for _, residual in self._records]

    def clear(self) -> None:
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """``{"iteration": k, "residual": r}`` per kept step, for JSON output."""
        return [
            {"iteration": iteration, "residual": residual}
            for iteration, residual in self._records
        ]
