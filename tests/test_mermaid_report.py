"""Tests for the Mermaid exporter and the text report."""

import pytest

from markov_engine.analysis.mermaid import (
    graph_to_mermaid,
    hasse_to_mermaid,
    vertex_label,
    write_mermaid,
)
from markov_engine.analysis.pipeline import analyze_chain
from markov_engine.analysis.report import (
    adjacency_lines,
    characteristics_lines,
    component_lines,
    format_report,
    markov_lines,
    stationary_lines,
)
from markov_engine.core.errors import InvalidArgumentError
from markov_engine.core.graph import MarkovGraph


def _graph(n, edges):
    graph = MarkovGraph(n)
    for source, target, p in edges:
        graph.add_edge(source, target, p)
    return graph


@pytest.fixture
def chain():
    return _graph(3, [(1, 2, 1.0), (2, 3, 1.0), (3, 3, 1.0)])


@pytest.mark.parametrize("index, label", [
    (1, "A"), (26, "Z"), (27, "AA"), (28, "AB"), (52, "AZ"), (53, "BA"), (703, "AAA"),
])
def test_vertex_label(index, label):
    assert vertex_label(index) == label


def test_vertex_label_rejects_zero():
    with pytest.raises(InvalidArgumentError):
        vertex_label(0)


def test_graph_to_mermaid(chain):
    text = graph_to_mermaid(chain)
    assert text.startswith("---\nconfig:\n")
    assert "flowchart LR" in text
    for line in ("A((1))", "B((2))", "C((3))", "A -->|1.00|B", "C -->|1.00|C"):
        assert line in text.splitlines()


def test_hasse_to_mermaid(chain):
    analysis = analyze_chain(chain)
    text = hasse_to_mermaid(analysis.partition, analysis.hasse)
    lines = text.splitlines()
    assert "flowchart TD" in lines
    # Classes complete deepest first: C1 = {3}, C2 = {2}, C3 = {1}.
    assert '  C1["3"]' in lines
    assert "  C3 --> C2" in lines
    assert "  C2 --> C1" in lines
    assert sum("-->" in line for line in lines) == 2


def test_write_mermaid_creates_parents(tmp_path, chain):
    target = tmp_path / "out" / "graph.mmd"
    path = write_mermaid(graph_to_mermaid(chain), target)
    assert path == target
    assert target.read_text().count("-->") == 3


def test_adjacency_lines_head_first():
    graph = _graph(2, [(1, 1, 0.25), (1, 2, 0.75), (2, 2, 1.0)])
    lines = adjacency_lines(graph)
    assert lines[1] == "  List for vertex 1: [head @] -> (2, 0.75) -> (1, 0.25)"


def test_markov_lines():
    assert markov_lines(_graph(1, [(1, 1, 1.0)])) == ["The graph is a Markov graph"]
    lines = markov_lines(_graph(2, [(1, 2, 0.5), (2, 2, 1.0)]))
    assert lines[0] == "The graph is not a Markov graph"
    assert "vertex 1 is 0.50" in lines[1]


def test_characteristics_and_components(chain):
    analysis = analyze_chain(chain)
    assert component_lines(analysis.partition)[0] == "Component C1: {3}"
    lines = characteristics_lines(analysis)
    assert "  State 3 (in C1, Class #1): persistent, absorbing" in lines
    assert "  State 3 (in C1, Class #1) is absorbing" in lines
    assert lines[-1] == "The Markov graph is reducible"


def test_irreducible_report():
    analysis = analyze_chain(_graph(2, [(1, 2, 1.0), (2, 1, 1.0)]))
    lines = characteristics_lines(analysis)
    assert "  No absorbing states" in lines
    assert lines[-1] == "The Markov graph is irreducible"
    stationary = stationary_lines(analysis)
    assert "(lazy walk)" in stationary[1]
    assert "converged" in stationary[2]


def test_format_report_sections(chain):
    report = format_report(analyze_chain(chain))
    for heading in (
        "Adjacency list:",
        "The graph is a Markov graph",
        "Links between classes:",
        "Links after removing transitive ones:",
        "For classes:",
        "Stationary distributions:",
    ):
        assert heading in report


def test_sink_without_return_path_has_undefined_period():
    analysis = analyze_chain(_graph(3, [(1, 2, 1.0), (2, 3, 1.0)]))
    lines = stationary_lines(analysis)
    assert lines[1] == "  Class C1 (3): period undefined (no return path)"
    assert "period 0" not in "\n".join(lines)
