"""
Mermaid flowchart export.

  vertex_label(i)                   1 -> "A", 26 -> "Z", 27 -> "AA"
  graph_to_mermaid(graph)           state graph, one node per state, weighted edges
  hasse_to_mermaid(partition, L)    class diagram, one box per class
  write_mermaid(text, path)         save to disk

Every function returns a new string; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from ..core.errors import InvalidArgumentError
from ..core.graph import MarkovGraph
from ..core.partition import ClassLinkSet, Partition

logger = logging.getLogger("markov_engine.mermaid")

_FRONT_MATTER = (
    "---\n"
    "config:\n"
    "   layout: elk\n"
    "   theme: neo\n"
    "   look: neo\n"
    "---\n"
)


def vertex_label(index: int) -> str:
    """Spreadsheet-style letters for a 1-based vertex index."""
    if index < 1:
        raise InvalidArgumentError(f"vertex index must be >= 1, got {index}")
    letters: List[str] = []
    i = index - 1
    while i >= 0:
        letters.append(chr(ord("A") + i % 26))
        i = i // 26 - 1
    return "".join(reversed(letters))


def graph_to_mermaid(graph: MarkovGraph) -> str:
    """Left-to-right flowchart of the state graph."""
    lines = [_FRONT_MATTER, "flowchart LR"]
    for state in range(1, graph.n_states + 1):
        lines.append(f"{vertex_label(state)}(({state}))")
    lines.append("")
    for edge in graph.edges():
        lines.append(
            f"{vertex_label(edge.source)} -->|{edge.probability:.2f}|"
            f"{vertex_label(edge.target)}"
        )
    return "\n".join(lines) + "\n"


def hasse_to_mermaid(partition: Partition, links: ClassLinkSet) -> str:
    """Top-down flowchart of the classes and the links between them."""
    lines = [_FRONT_MATTER, "flowchart TD"]
    for position, cls in enumerate(partition, start=1):
        members = ", ".join(str(state) for state in cls.members)
        lines.append(f'  C{position}["{members}"]')
    for link in links:
        lines.append(f"  C{link.source + 1} --> C{link.dest + 1}")
    return "\n".join(lines) + "\n"


def write_mermaid(text: str, path: Union[str, Path]) -> Path:
    """Write ``text`` to ``path`` (parents created) and return the path."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info(f"mermaid file written to {output}")
    return output
