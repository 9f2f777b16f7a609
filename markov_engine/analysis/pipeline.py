"""
End-to-end chain analysis.

Data flow:
    MarkovGraph -> tarjan -> vertex_to_class -> class_links -> transitive_reduction
                -> classify_classes
    MarkovGraph -> from_graph -> submatrix_for_class (persistent classes)
                -> period -> solve_stationary

analyze_chain() runs every stage once and keeps every artifact on a frozen
ChainAnalysis so presentation code never recomputes anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..core.graph import MarkovGraph
from ..core.matrix import Matrix, from_graph, submatrix_for_class
from ..core.parameters import SolverParameters
from ..core.partition import ClassLinkSet, Partition
from ..systems.classifier import ClassKind, classify_classes, is_irreducible
from ..systems.condensation import class_links, transitive_reduction, vertex_to_class
from ..systems.periodicity import period
from ..systems.stationary import IterationHook, StationaryResult, solve_stationary
from ..systems.tarjan import tarjan

logger = logging.getLogger("markov_engine.pipeline")


@dataclass(frozen=True)
class ClassSolution:
    """Long-run behaviour of one persistent class."""

    class_index: int
    members: Tuple[int, ...]
    submatrix: Matrix
    period: int
    result: StationaryResult

    @property
    def converged(self) -> bool:
        return self.result.converged

    def as_dict(self) -> dict:
        """State id -> stationary probability."""
        return {
            state: float(p) for state, p in zip(self.members, self.result.distribution)
        }


@dataclass(frozen=True)
class ChainAnalysis:
    """Every artifact derived from one graph."""

    graph: MarkovGraph
    params: SolverParameters
    is_markov: bool
    partition: Partition
    vertex_to_class: NDArray[np.intp]
    links: ClassLinkSet
    hasse: ClassLinkSet
    kinds: List[ClassKind]
    transition_matrix: Matrix
    solutions: List[ClassSolution] = field(default_factory=list)

    @property
    def irreducible(self) -> bool:
        return is_irreducible(self.partition)

    @property
    def all_converged(self) -> bool:
        return all(solution.converged for solution in self.solutions)

    def solution_for(self, class_index: int) -> Optional[ClassSolution]:
        for solution in self.solutions:
            if solution.class_index == class_index:
                return solution
        return None


def analyze_chain(
    graph: MarkovGraph,
    params: Optional[SolverParameters] = None,
    hooks: Iterable[IterationHook] = (),
) -> ChainAnalysis:
    """Run the full decomposition and solution pipeline on ``graph``."""
    if params is None:
        params = SolverParameters()
    hooks = list(hooks)

    markov = graph.is_markov(params.markov_tolerance)
    if not markov:
        logger.warning(
            f"outgoing probabilities do not sum to 1 ± {params.markov_tolerance}; "
            "results describe the weighted graph, not a Markov chain"
        )

    partition = tarjan(graph)
    mapping = vertex_to_class(partition, graph.n_states)
    links = class_links(graph, mapping)
    hasse = transitive_reduction(links)
    kinds = classify_classes(partition, links)
    logger.info(
        f"{graph.n_states} states, {len(partition)} classes, "
        f"{len(links)} links ({len(hasse)} after reduction)"
    )

    M = from_graph(graph)
    solutions: List[ClassSolution] = []
    for class_index, kind in enumerate(kinds):
        if kind == ClassKind.TRANSIENT:
            continue
        sub = submatrix_for_class(M, partition, class_index)
        d = period(sub)
        result = solve_stationary(sub, period=d, params=params, hooks=hooks)
        solutions.append(
            ClassSolution(
                class_index=class_index,
                members=partition[class_index].members,
                submatrix=sub,
                period=d,
                result=result,
            )
        )

    return ChainAnalysis(
        graph=graph,
        params=params,
        is_markov=markov,
        partition=partition,
        vertex_to_class=mapping,
        links=links,
        hasse=hasse,
        kinds=kinds,
        transition_matrix=M,
        solutions=solutions,
    )
