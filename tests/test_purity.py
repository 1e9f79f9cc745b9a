"""Tests for the pure-edge statistic."""

import networkx as nx
import numpy as np
import pandas as pd
import pytest

from graphpermtest.errors import ConfigurationError
from graphpermtest.stats.purity import (
    MIXED,
    PURE,
    annotate_edge_types,
    count_pure_edges,
    edge_index,
    encode_labels,
)


@pytest.fixture
def square_graph():
    """4-cycle a-b-c-d-a with labels A, A, B, B."""
    G = nx.Graph()
    G.add_nodes_from(["a", "b", "c", "d"])
    G.add_edges_from([("a", "b"), ("b", "c"), ("c", "d"), ("d", "a")])
    labels = pd.Series(["A", "A", "B", "B"], index=["a", "b", "c", "d"])
    return G, labels


def test_edge_index_positions(square_graph):
    G, labels = square_graph
    u, v = edge_index(G, labels.index)
    pairs = {frozenset((int(i), int(j))) for i, j in zip(u, v)}
    assert pairs == {frozenset(p) for p in [(0, 1), (1, 2), (2, 3), (3, 0)]}


def test_count_pure_edges(square_graph):
    G, labels = square_graph
    u, v = edge_index(G, labels.index)
    assert count_pure_edges(u, v, encode_labels(labels)) == 2


def test_count_on_empty_edge_list():
    empty = np.array([], dtype=np.intp)
    assert count_pure_edges(empty, empty, np.array([0, 1])) == 0


def test_encode_labels_shares_codes():
    codes = encode_labels(["x", "y", "x", 3])
    assert codes[0] == codes[2]
    assert len(set(codes.tolist())) == 3


def test_encode_labels_missing():
    with pytest.raises(ConfigurationError, match="missing"):
        encode_labels(["x", None, "y"])


def test_annotate_edge_types(square_graph):
    G, labels = square_graph
    n_pure = annotate_edge_types(G, labels)
    assert n_pure == 2
    assert G.edges["a", "b"]["edgetype"] == PURE
    assert G.edges["b", "c"]["edgetype"] == MIXED
    assert G.nodes["c"]["sampletype"] == "B"
