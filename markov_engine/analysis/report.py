"""
Plain-text report of a ChainAnalysis.

Each section is a separate function returning a list of lines so the CLI
and tests can pick what they need; format_report() joins them all.
"""

from __future__ import annotations

from typing import List

import numpy as np

from ..core.graph import MarkovGraph
from ..core.partition import ClassLinkSet, Partition
from ..systems.classifier import ClassKind
from .pipeline import ChainAnalysis


def adjacency_lines(graph: MarkovGraph) -> List[str]:
    lines = ["Adjacency list:"]
    for state in range(1, graph.n_states + 1):
        cells = " -> ".join(
            f"({edge.target}, {edge.probability:.2f})"
            for edge in graph.out_edges(state)
        )
        line = f"  List for vertex {state}: [head @]"
        if cells:
            line += f" -> {cells}"
        lines.append(line)
    return lines


def markov_lines(graph: MarkovGraph, tolerance: float = 0.01) -> List[str]:
    violations = graph.markov_violations(tolerance)
    if not violations:
        return ["The graph is a Markov graph"]
    lines = ["The graph is not a Markov graph"]
    for state, total in violations.items():
        lines.append(f"  the sum of the probabilities of vertex {state} is {total:.2f}")
    return lines


def component_lines(partition: Partition) -> List[str]:
    return [
        f"Component {cls.name}: {{{','.join(str(s) for s in cls.members)}}}"
        for cls in partition
    ]


def link_lines(partition: Partition, links: ClassLinkSet, title: str) -> List[str]:
    lines = [title]
    for link in links:
        lines.append(f"  {partition[link.source].name} --> {partition[link.dest].name}")
    return lines


def characteristics_lines(analysis: ChainAnalysis) -> List[str]:
    partition, kinds = analysis.partition, analysis.kinds
    lines = ["For classes:"]
    for i, (cls, kind) in enumerate(zip(partition, kinds), start=1):
        members = ", ".join(str(s) for s in cls.members)
        label = "transient" if kind == ClassKind.TRANSIENT else "persistent"
        lines.append(f"  Class {cls.name} (Class #{i}) {{{members}}}: {label}")

    lines.append("For states:")
    for i, (cls, kind) in enumerate(zip(partition, kinds), start=1):
        for state in cls.members:
            if kind == ClassKind.TRANSIENT:
                label = "transient"
            elif kind == ClassKind.ABSORBING:
                label = "persistent, absorbing"
            else:
                label = "persistent"
            lines.append(f"  State {state} (in {cls.name}, Class #{i}): {label}")

    absorbing = [
        (cls, i) for i, (cls, kind) in enumerate(zip(partition, kinds), start=1)
        if kind == ClassKind.ABSORBING
    ]
    lines.append("Absorbing states:")
    if absorbing:
        for cls, i in absorbing:
            lines.append(f"  State {cls.members[0]} (in {cls.name}, Class #{i}) is absorbing")
    else:
        lines.append("  No absorbing states")

    verdict = "irreducible" if analysis.irreducible else "reducible"
    lines.append(f"The Markov graph is {verdict}")
    return lines


def stationary_lines(analysis: ChainAnalysis) -> List[str]:
    lines = ["Stationary distributions:"]
    if not analysis.solutions:
        lines.append("  No persistent classes")
    for solution in analysis.solutions:
        cls = analysis.partition[solution.class_index]
        result = solution.result
        if solution.period == 0:
            period_text = "period undefined (no return path)"
        else:
            period_text = f"period {solution.period}"
        lines.append(
            f"  Class {cls.name} ({', '.join(str(s) for s in cls.members)}): "
            + period_text
            + (" (lazy walk)" if result.lazy else "")
        )
        values = np.array2string(result.distribution, precision=4, floatmode="fixed")
        status = "converged" if result.converged else "NOT converged"
        lines.append(f"    {values}  {status} after {result.iterations} iterations")
    return lines


def format_report(analysis: ChainAnalysis) -> str:
    """Full human-readable report."""
    sections = [
        adjacency_lines(analysis.graph),
        markov_lines(analysis.graph, analysis.params.markov_tolerance),
        component_lines(analysis.partition),
        link_lines(analysis.partition, analysis.links, "Links between classes:"),
        link_lines(analysis.partition, analysis.hasse,
                   "Links after removing transitive ones:"),
        characteristics_lines(analysis),
        stationary_lines(analysis),
    ]
    return "\n\n".join("\n".join(section) for section in sections) + "\n"
