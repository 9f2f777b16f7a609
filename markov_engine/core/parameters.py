"""
Solver parameters for the Markov engine.

All numerical knobs of the pipeline live in one immutable, validated pack:

  - epsilon / max_iterations   power-iteration stopping rule
  - lazy_alpha                 weight of S in the lazy chain alpha*S + (1-alpha)*I
  - markov_tolerance           accepted deviation of outgoing sums from 1
  - limit_epsilon / limit_max_power
                               stopping rule of the M^k limit-matrix search
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class SolverParameters:
    """Immutable, validated numerical configuration."""

    # ------------------------------------------------------------------ #
    # Power iteration                                                      #
    # ------------------------------------------------------------------ #
    epsilon: float = 1e-6
    """L1 distance between successive iterates below which iteration stops (> 0)."""

    max_iterations: int = 10000
    """Iteration cap; the only bounded-time guarantee of the solver (>= 1)."""

    lazy_alpha: float = 0.5
    """Weight of the class matrix in the lazy chain, in (0, 1)."""

    # ------------------------------------------------------------------ #
    # Graph validation                                                     #
    # ------------------------------------------------------------------ #
    markov_tolerance: float = 0.01
    """Outgoing sums in [1 - tol, 1 + tol] are accepted (>= 0)."""

    # ------------------------------------------------------------------ #
    # Limit matrix  M^k                                                    #
    # ------------------------------------------------------------------ #
    limit_epsilon: float = 1e-4
    limit_max_power: int = 100

    def __post_init__(self) -> None:
        """Validate every field."""
        strictly_positive = {
            "epsilon": self.epsilon,
            "limit_epsilon": self.limit_epsilon,
        }
        for name, value in strictly_positive.items():
            if not value > 0.0:
                raise ValueError(f"{name} must be > 0, got {value}")

        for name in ("max_iterations", "limit_max_power"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be an integer >= 1, got {value!r}")

        if not 0.0 < self.lazy_alpha < 1.0:
            raise ValueError(f"lazy_alpha must be in (0, 1), got {self.lazy_alpha}")

        if self.markov_tolerance < 0.0:
            raise ValueError(
                f"markov_tolerance must be >= 0, got {self.markov_tolerance}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize parameters to a plain dictionary."""
        return {
            name: getattr(self, name)
            for name in self.__dataclass_fields__  # type: ignore[attr-defined]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SolverParameters":
        """Deserialize parameters from a plain dictionary."""
        return cls(**data)
