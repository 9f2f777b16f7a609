"""
Strongly connected classes via Tarjan's algorithm.

The depth-first search runs on an explicit work stack of
``(state, successor iterator)`` frames instead of the call stack, so chains
with very long simple paths cannot exhaust Python's recursion limit.

Per-state bookkeeping:
  index     discovery order (-1 = undiscovered)
  lowlink   smallest index reachable through the DFS subtree + one back edge
  on_stack  membership in Tarjan's component stack

When a state finishes with ``lowlink == index`` it is the root of a class:
the component stack is popped down to and including it, and the popped
states (in pop order) become the members of the next class ``C1, C2, ...``.
Complexity O(V + E).
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

from ..core.graph import MarkovGraph
from ..core.partition import Partition, StateClass

logger = logging.getLogger("markov_engine.tarjan")

_UNDISCOVERED = -1


def class_name(position: int) -> str:
    """Label of the class completed at 0-based ``position``."""
    return f"C{position + 1}"


def tarjan(graph: MarkovGraph) -> Partition:
    """Decompose ``graph`` into strongly connected classes.

    Args:
        graph: Markov graph over states 1..N.

    Returns:
        Partition whose classes are ordered by root completion.
    """
    n = graph.n_states
    index = [_UNDISCOVERED] * n
    lowlink = [0] * n
    on_stack = [False] * n
    component_stack: List[int] = []
    classes: List[StateClass] = []
    counter = 0

    for root in range(n):
        if index[root] != _UNDISCOVERED:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        component_stack.append(root)
        on_stack[root] = True
        work: List[Tuple[int, Iterator[int]]] = [(root, _successors(graph, root))]

        while work:
            v, neighbours = work[-1]
            descended = False
            for w in neighbours:
                if index[w] == _UNDISCOVERED:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    component_stack.append(w)
                    on_stack[w] = True
                    work.append((w, _successors(graph, w)))
                    descended = True
                    break
                if on_stack[w]:
                    lowlink[v] = min(lowlink[v], index[w])
            if descended:
                continue

            # v is finished.
            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[v])

            if lowlink[v] == index[v]:
                members: List[int] = []
                while True:
                    w = component_stack.pop()
                    on_stack[w] = False
                    members.append(w + 1)
                    if w == v:
                        break
                classes.append(StateClass(class_name(len(classes)), tuple(members)))

    logger.debug(f"tarjan: {n} states -> {len(classes)} classes")
    return Partition(classes=tuple(classes), n_states=n)


def _successors(graph: MarkovGraph, v: int) -> Iterator[int]:
    """0-based successor indices of 0-based state ``v``."""
    return (target - 1 for target in graph.successors(v + 1))
