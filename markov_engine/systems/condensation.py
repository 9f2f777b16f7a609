"""
Condensation of the state graph onto its classes.

  vertex_to_class(partition, n)     dense state -> class lookup
  class_links(graph, v2c)           deduplicated inter-class links
  transitive_reduction(links)       Hasse diagram of the class DAG

Class links are a boolean reachability summary: no multiplicity and no
probability mass is carried at this level.

The transitive reduction decides every removal against a frozen copy of the
input (its reachability closure), never against the set being shrunk, so
the result does not depend on link order and reducing twice changes nothing.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Dict, List

import numpy as np
from numpy.typing import NDArray

from ..core.errors import InvalidArgumentError, InvariantViolation
from ..core.graph import MarkovGraph
from ..core.partition import ClassLinkSet, Partition

logger = logging.getLogger("markov_engine.condensation")

UNASSIGNED = -1


def vertex_to_class(partition: Partition, n_states: int) -> NDArray[np.intp]:
    """Map each 0-based state index to its 0-based class index.

    Raises:
        InvalidArgumentError: if ``n_states`` disagrees with the partition.
        InvariantViolation: if a member lies outside ``[1, n_states]`` or some
            state is left unassigned.
    """
    expected = getattr(partition, "n_states", n_states)
    if n_states != expected:
        raise InvalidArgumentError(
            f"n_states={n_states} but the partition covers {expected} states"
        )
    mapping = np.full(n_states, UNASSIGNED, dtype=np.intp)
    for class_index, cls in enumerate(partition):
        for state in cls.members:
            if not 1 <= state <= n_states:
                raise InvariantViolation(
                    f"{cls.name} holds state {state} outside [1, {n_states}]"
                )
            mapping[state - 1] = class_index

    unassigned = np.flatnonzero(mapping == UNASSIGNED)
    if unassigned.size:
        raise InvariantViolation(
            f"states not assigned to any class: {(unassigned + 1).tolist()}"
        )
    return mapping


def class_links(graph: MarkovGraph, mapping: NDArray[np.intp]) -> ClassLinkSet:
    """Collect one link per ordered pair of distinct classes joined by an edge."""
    links = ClassLinkSet()
    for edge in graph.edges():
        source_class = int(mapping[edge.source - 1])
        dest_class = int(mapping[edge.target - 1])
        if source_class != dest_class:
            links.add(source_class, dest_class)
    return links


def _reverse_topological_order(successors: Dict[int, List[int]]) -> List[int]:
    """Kahn's algorithm, reversed; raises if the links contain a cycle."""
    indegree = {node: 0 for node in successors}
    for targets in successors.values():
        for target in targets:
            indegree[target] += 1
    ready = deque(node for node, degree in indegree.items() if degree == 0)
    order: List[int] = []
    while ready:
        node = ready.popleft()
        order.append(node)
        for target in successors[node]:
            indegree[target] -= 1
            if indegree[target] == 0:
                ready.append(target)
    if len(order) != len(successors):
        cyclic = sorted(node for node, degree in indegree.items() if degree > 0)
        raise InvalidArgumentError(f"class links contain a cycle through {cyclic}")
    order.reverse()
    return order


def transitive_reduction(links: ClassLinkSet) -> ClassLinkSet:
    """Remove every link implied by a longer path.

    A link ``A -> C`` is dropped iff another successor ``B`` of ``A`` (in the
    original set) reaches ``C``.  On an acyclic link set this is the unique
    transitive reduction (the Hasse diagram); the surviving links keep their
    original relative order.

    Reachability is held as one integer bitmask per class and filled in
    reverse topological order, so each link is visited once.

    Raises:
        InvalidArgumentError: if the links contain a cycle (the reduction of a
            cyclic relation is not unique, and condensation links never form one).
    """
    pairs = links.pairs()
    successors: Dict[int, List[int]] = {}
    for source, dest in pairs:
        successors.setdefault(source, []).append(dest)
        successors.setdefault(dest, [])

    reach: Dict[int, int] = {}
    for node in _reverse_topological_order(successors):
        mask = 0
        for target in successors[node]:
            mask |= (1 << target) | reach[target]
        reach[node] = mask

    # via[a]: classes reachable from a through one of its successors.
    via = {node: 0 for node in successors}
    for source, dest in pairs:
        via[source] |= reach[dest]

    reduced = ClassLinkSet(
        (source, dest) for source, dest in pairs if not (via[source] >> dest) & 1
    )
    logger.debug(f"transitive reduction: {len(links)} -> {len(reduced)} links")
    return reduced
