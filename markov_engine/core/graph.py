"""
MarkovGraph — directed, probability-weighted adjacency structure.

States are identified by integers in [1, N].  Each state owns one adjacency
list; new edges are inserted at the head of the list, so successors are
iterated newest-first.  The graph never merges repeated (source, target)
pairs: how duplicates are folded is decided by the consumer (the matrix
engine accumulates them, the text loader may reject them).

Markov validity (outgoing probabilities summing to 1) is a query, not a
construction invariant.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterator, List

from .errors import InvalidArgumentError

DEFAULT_MARKOV_TOLERANCE = 0.01


@dataclass(frozen=True)
class Edge:
    """One directed transition ``source -> target`` with its probability."""

    source: int
    target: int
    probability: float


class MarkovGraph:
    """Adjacency-list graph over states ``1..n``.

    Attributes:
        n_states: Number of states N.
    """

    def __init__(self, n_states: int) -> None:
        """Create an empty graph.

        Args:
            n_states: Number of states (must be > 0).

        Raises:
            InvalidArgumentError: if ``n_states <= 0``.
        """
        if isinstance(n_states, bool) or not isinstance(n_states, int):
            raise InvalidArgumentError(
                f"n_states must be an integer, got {n_states!r}"
            )
        if n_states <= 0:
            raise InvalidArgumentError(f"n_states must be > 0, got {n_states}")
        self.n_states: int = n_states
        self._adjacency: List[Deque[Edge]] = [deque() for _ in range(n_states)]

    # ------------------------------------------------------------------ #
    # Construction                                                          #
    # ------------------------------------------------------------------ #

    def add_edge(self, source: int, target: int, probability: float) -> Edge:
        """Insert ``source -> target`` at the head of ``source``'s list.

        Args:
            source:      Origin state id in [1, N].
            target:      Destination state id in [1, N].
            probability: Transition probability (finite, >= 0).

        Returns:
            The stored Edge.

        Raises:
            InvalidArgumentError: on out-of-range ids or a negative / non-finite
                probability.
        """
        self._check_state(source, "source")
        self._check_state(target, "target")
        probability = float(probability)
        if not math.isfinite(probability) or probability < 0.0:
            raise InvalidArgumentError(
                f"probability must be finite and >= 0, got {probability} "
                f"for edge {source} -> {target}"
            )
        edge = Edge(source=source, target=target, probability=probability)
        self._adjacency[source - 1].appendleft(edge)
        return edge

    def _check_state(self, state: int, role: str) -> None:
        if isinstance(state, bool) or not isinstance(state, int):
            raise InvalidArgumentError(f"{role} must be an integer, got {state!r}")
        if not 1 <= state <= self.n_states:
            raise InvalidArgumentError(
                f"{role} state {state} out of range [1, {self.n_states}]"
            )

    # ------------------------------------------------------------------ #
    # Read access                                                           #
    # ------------------------------------------------------------------ #

    def out_edges(self, state: int) -> Deque[Edge]:
        """Outgoing edges of ``state`` in list order (newest first)."""
        self._check_state(state, "state")
        return self._adjacency[state - 1]

    def successors(self, state: int) -> Iterator[int]:
        """Target ids of ``state``'s outgoing edges, in list order."""
        return (edge.target for edge in self.out_edges(state))

    def edges(self) -> Iterator[Edge]:
        """Every edge, grouped by source state in ascending order."""
        for adjacency in self._adjacency:
            yield from adjacency

    @property
    def n_edges(self) -> int:
        return sum(len(adjacency) for adjacency in self._adjacency)

    def __len__(self) -> int:
        return self.n_states

    def __repr__(self) -> str:
        return f"MarkovGraph(n_states={self.n_states}, n_edges={self.n_edges})"

    # ------------------------------------------------------------------ #
    # Markov validity                                                       #
    # ------------------------------------------------------------------ #

    def out_sums(self) -> List[float]:
        """Sum of outgoing probabilities for each state (index 0 = state 1)."""
        return [
            math.fsum(edge.probability for edge in adjacency)
            for adjacency in self._adjacency
        ]

    def markov_violations(
        self, tolerance: float = DEFAULT_MARKOV_TOLERANCE
    ) -> Dict[int, float]:
        """States whose outgoing sum lies outside ``[1 - tol, 1 + tol]``.

        Returns:
            Mapping ``state id -> outgoing sum`` (empty for a valid chain).
        """
        if tolerance < 0.0:
            raise InvalidArgumentError(f"tolerance must be >= 0, got {tolerance}")
        low, high = 1.0 - tolerance, 1.0 + tolerance
        return {
            state: total
            for state, total in enumerate(self.out_sums(), start=1)
            if not low <= total <= high
        }

    def is_markov(self, tolerance: float = DEFAULT_MARKOV_TOLERANCE) -> bool:
        """True iff every state's outgoing probabilities sum to 1 ± tolerance."""
        return not self.markov_violations(tolerance)


def create_graph(n_states: int) -> MarkovGraph:
    """Return an empty graph with ``n_states`` states and no edges."""
    return MarkovGraph(n_states)
