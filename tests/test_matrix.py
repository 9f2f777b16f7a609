"""Tests for the dense matrix engine."""

import numpy as np
import pytest

from markov_engine.core.errors import (
    ClassIndexError,
    DimensionMismatchError,
    InvalidArgumentError,
)
from markov_engine.core.graph import MarkovGraph
from markov_engine.core.matrix import (
    copy_matrix,
    create_empty,
    difference,
    from_graph,
    identity,
    limit_matrix,
    matrix_power,
    mix,
    multiply,
    submatrix_for_class,
)
from markov_engine.core.partition import Partition, StateClass
from markov_engine.systems.tarjan import tarjan


@pytest.fixture
def weather_graph():
    """Three-state aperiodic chain."""
    graph = MarkovGraph(3)
    for source, target, p in [
        (1, 1, 0.5), (1, 2, 0.3), (1, 3, 0.2),
        (2, 1, 0.2), (2, 2, 0.6), (2, 3, 0.2),
        (3, 1, 0.3), (3, 2, 0.3), (3, 3, 0.4),
    ]:
        graph.add_edge(source, target, p)
    return graph


def test_create_empty_and_identity():
    assert np.array_equal(create_empty(2), np.zeros((2, 2)))
    assert np.array_equal(identity(3), np.eye(3))
    for bad in (0, -1):
        with pytest.raises(InvalidArgumentError):
            create_empty(bad)
        with pytest.raises(InvalidArgumentError):
            identity(bad)


def test_from_graph_places_probabilities(weather_graph):
    M = from_graph(weather_graph)
    assert M.shape == (3, 3)
    assert M[0, 1] == pytest.approx(0.3)
    assert M[2, 2] == pytest.approx(0.4)
    np.testing.assert_allclose(M.sum(axis=1), 1.0)


def test_from_graph_accumulates_duplicates():
    graph = MarkovGraph(2)
    graph.add_edge(1, 2, 0.25)
    graph.add_edge(1, 2, 0.25)
    graph.add_edge(1, 1, 0.5)
    graph.add_edge(2, 2, 1.0)
    M = from_graph(graph)
    assert M[0, 1] == pytest.approx(0.5)
    np.testing.assert_allclose(M.sum(axis=1), graph.out_sums())


def test_multiply_matches_numpy(weather_graph):
    M = from_graph(weather_graph)
    np.testing.assert_allclose(multiply(M, M), M @ M)
    np.testing.assert_allclose(multiply(M, identity(3)), M)


def test_multiply_rejects_mismatched_sizes():
    with pytest.raises(DimensionMismatchError):
        multiply(identity(2), identity(3))
    with pytest.raises(DimensionMismatchError):
        mix(identity(2), identity(3), 0.5)
    with pytest.raises(DimensionMismatchError):
        difference(identity(2), identity(3))


def test_difference_is_l1_distance():
    a = np.array([[0.0, 1.0], [0.5, 0.5]])
    b = np.array([[0.5, 0.5], [0.5, 0.5]])
    assert difference(a, b) == pytest.approx(1.0)
    assert difference(a, a) == 0.0


def test_copy_is_independent(weather_graph):
    M = from_graph(weather_graph)
    C = copy_matrix(M)
    C[0, 0] = 99.0
    assert M[0, 0] == pytest.approx(0.5)


def test_mix_is_affine_combination():
    S = np.array([[0.0, 1.0], [1.0, 0.0]])
    np.testing.assert_allclose(mix(S, identity(2), 0.5), [[0.5, 0.5], [0.5, 0.5]])
    np.testing.assert_allclose(mix(S, identity(2), 1.0), S)


def test_submatrix_follows_member_order():
    M = np.arange(16, dtype=float).reshape(4, 4)
    partition = Partition(
        classes=(StateClass("C1", (4, 2)), StateClass("C2", (1,)), StateClass("C3", (3,))),
        n_states=4,
    )
    sub = submatrix_for_class(M, partition, 0)
    np.testing.assert_array_equal(sub, [[M[3, 3], M[3, 1]], [M[1, 3], M[1, 1]]])
    sub[0, 0] = -1.0
    assert M[3, 3] == 15.0


def test_submatrix_rejects_bad_index(weather_graph):
    M = from_graph(weather_graph)
    partition = tarjan(weather_graph)
    with pytest.raises(ClassIndexError):
        submatrix_for_class(M, partition, len(partition))
    with pytest.raises(ClassIndexError):
        submatrix_for_class(M, partition, -1)


def test_matrix_power(weather_graph):
    M = from_graph(weather_graph)
    np.testing.assert_allclose(matrix_power(M, 3), M @ M @ M)
    with pytest.raises(InvalidArgumentError):
        matrix_power(M, 0)


def test_limit_matrix_converges_for_aperiodic_chain(weather_graph):
    result = limit_matrix(from_graph(weather_graph), epsilon=1e-4, max_power=100)
    assert result.converged
    # Every row of the limit is the stationary distribution.
    np.testing.assert_allclose(result.matrix[0], result.matrix[1], atol=1e-3)


def test_limit_matrix_reports_periodic_chain():
    S = np.array([[0.0, 1.0], [1.0, 0.0]])
    result = limit_matrix(S, epsilon=1e-4, max_power=50)
    assert not result.converged
    assert result.power == 50
