"""Tests for vertex_to_class, class links and the transitive reduction."""

import random

import numpy as np
import pytest

from markov_engine.core.errors import InvalidArgumentError, InvariantViolation
from markov_engine.core.graph import MarkovGraph
from markov_engine.core.partition import ClassLinkSet, StateClass
from markov_engine.systems.condensation import (
    class_links,
    transitive_reduction,
    vertex_to_class,
)
from markov_engine.systems.tarjan import tarjan


def _graph(n, edges):
    graph = MarkovGraph(n)
    for source, target, p in edges:
        graph.add_edge(source, target, p)
    return graph


@pytest.fixture
def linear_chain():
    return _graph(3, [(1, 2, 1.0), (2, 3, 1.0), (3, 3, 1.0)])


def _random_dag_links(rng, n_classes, density):
    """Links only go from lower to higher index, so the set is acyclic."""
    pairs = [
        (a, b)
        for a in range(n_classes)
        for b in range(a + 1, n_classes)
        if rng.random() < density
    ]
    rng.shuffle(pairs)
    return pairs


# ---------------------------------------------------------------------------
# vertex_to_class / class_links
# ---------------------------------------------------------------------------

def test_vertex_to_class_covers_all_states(linear_chain):
    partition = tarjan(linear_chain)
    mapping = vertex_to_class(partition, 3)
    for state in (1, 2, 3):
        assert state in partition[mapping[state - 1]].members


def test_vertex_to_class_flags_unassigned_state():
    """A partial partition is a logic defect, not a normal error."""
    partial = [StateClass("C1", (1,))]
    with pytest.raises(InvariantViolation):
        vertex_to_class(partial, 2)


def test_vertex_to_class_rejects_wrong_size(linear_chain):
    """A state count that disagrees with the partition is refused, not truncated."""
    partition = tarjan(linear_chain)
    with pytest.raises(InvalidArgumentError):
        vertex_to_class(partition, 2)
    with pytest.raises(InvalidArgumentError):
        vertex_to_class(partition, 4)


def test_vertex_to_class_rejects_out_of_range_member():
    classes = [StateClass("C1", (1,)), StateClass("C2", (2, 3))]
    with pytest.raises(InvariantViolation):
        vertex_to_class(classes, 2)


def test_linear_chain_links(linear_chain):
    partition = tarjan(linear_chain)
    mapping = vertex_to_class(partition, 3)
    links = class_links(linear_chain, mapping)
    c1, c2, c3 = (partition.class_of(s) for s in (1, 2, 3))
    assert set(links.pairs()) == {(c1, c2), (c2, c3)}

    reduced = transitive_reduction(links)
    assert set(reduced.pairs()) == {(c1, c2), (c2, c3)}


def test_links_are_deduplicated():
    """Two edges from {1, 2} into {3} give a single class link."""
    graph = _graph(3, [
        (1, 2, 0.5), (1, 3, 0.5),
        (2, 1, 0.5), (2, 3, 0.5),
        (3, 3, 1.0),
    ])
    partition = tarjan(graph)
    links = class_links(graph, vertex_to_class(partition, 3))
    assert links.pairs() == [(partition.class_of(1), partition.class_of(3))]


def test_no_links_for_irreducible_chain():
    graph = _graph(2, [(1, 2, 1.0), (2, 1, 1.0)])
    partition = tarjan(graph)
    assert len(class_links(graph, vertex_to_class(partition, 2))) == 0


# ---------------------------------------------------------------------------
# transitive_reduction
# ---------------------------------------------------------------------------

def test_reduction_removes_shortcut():
    links = ClassLinkSet([(0, 1), (1, 2), (0, 2)])
    assert transitive_reduction(links).pairs() == [(0, 1), (1, 2)]


def test_reduction_removes_long_shortcut():
    """A shortcut over a path of length 3 is implied too."""
    links = ClassLinkSet([(0, 3), (0, 1), (1, 2), (2, 3)])
    assert set(transitive_reduction(links).pairs()) == {(0, 1), (1, 2), (2, 3)}


def test_reduction_keeps_diamond():
    links = ClassLinkSet([(0, 1), (0, 2), (1, 3), (2, 3)])
    assert set(transitive_reduction(links).pairs()) == {(0, 1), (0, 2), (1, 3), (2, 3)}


def test_reduction_of_empty_set():
    assert len(transitive_reduction(ClassLinkSet())) == 0


def test_reduction_rejects_cycles():
    with pytest.raises(InvalidArgumentError):
        transitive_reduction(ClassLinkSet([(0, 1), (1, 2), (2, 0)]))


def test_reduction_is_idempotent_on_random_dags():
    rng = random.Random(11)
    for _ in range(50):
        pairs = _random_dag_links(rng, rng.randint(2, 12), rng.uniform(0.1, 0.8))
        once = transitive_reduction(ClassLinkSet(pairs))
        twice = transitive_reduction(once)
        assert once == twice


def test_reduction_is_order_independent():
    rng = random.Random(5)
    for _ in range(50):
        pairs = _random_dag_links(rng, rng.randint(2, 12), rng.uniform(0.1, 0.8))
        shuffled = list(pairs)
        rng.shuffle(shuffled)
        assert transitive_reduction(ClassLinkSet(pairs)) == transitive_reduction(
            ClassLinkSet(shuffled)
        )


def test_reduction_preserves_reachability():
    """The Hasse diagram reaches exactly what the original links reach."""
    rng = random.Random(3)

    def closure(pairs, n):
        reach = np.zeros((n, n), dtype=bool)
        for a, b in pairs:
            reach[a, b] = True
        for k in range(n):
            reach |= reach[:, k:k + 1] & reach[k:k + 1, :]
        return reach

    for _ in range(30):
        n = rng.randint(2, 10)
        pairs = _random_dag_links(rng, n, rng.uniform(0.2, 0.9))
        reduced = transitive_reduction(ClassLinkSet(pairs)).pairs()
        assert np.array_equal(closure(pairs, n), closure(reduced, n))
        # Minimality: dropping any surviving link loses reachability.
        for link in reduced:
            rest = [p for p in reduced if p != link]
            assert not np.array_equal(closure(rest, n), closure(reduced, n))


def test_link_set_membership():
    links = ClassLinkSet([(0, 1), (1, 2)])
    assert (0, 1) in links
    assert (1, 0) not in links
    assert (1, 1) not in links
    assert (-1, 0) not in links
    assert next(iter(links)) in links
