"""
Proximity graph construction from a pairwise distance matrix.

A proximity graph links samples that are "close" under one of four
connectivity rules. The rules form a closed set dispatched through a
registry, so the permutation engine only ever sees the common contract::

    DistanceMatrix + rule parameters -> networkx.Graph

Connectivity Rules:
    mst
        Minimum spanning tree of the complete weighted graph (Prim).
        Always N-1 edges; zero distances are kept as real edges so
        duplicate samples cannot disconnect the tree.
    knn
        Each sample links to its k nearest other samples; the directed
        relation is symmetrised by logical OR.
    threshold.value
        Every pair with distance <= max_dist.
    threshold.nedges
        threshold.value with max_dist set to the nedges-th smallest
        pairwise distance (each unordered pair counted once).

Tie Handling (knn):
    Distances to the other N-1 samples are ranked with average ties
    (``scipy.stats.rankdata(method="average")``) and a sample is a neighbour
    iff its rank is strictly below k + 1. A tied block that straddles
    position k is therefore included as a whole when its mean position is
    below k + 1 and dropped otherwise, so the out-degree before
    symmetrisation can be larger or smaller than k under ties. Without ties
    it is exactly k.

Every edge carries a ``distance`` attribute; the rule name and parameter
are recorded in ``graph.graph``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

import networkx as nx
import numpy as np
from scipy.stats import rankdata

from graphpermtest.core.distance import DistanceMatrix
from graphpermtest.errors import InvalidInputError, InvalidParameterError

logger = logging.getLogger(__name__)

__all__ = [
    "ConnectivityRule",
    "build_proximity_graph",
    "knn_neighbor_matrix",
    "validate_rule_parameters",
    "drop_isolates",
    "DEFAULT_MAX_DIST",
    "DEFAULT_KNN",
]

DEFAULT_MAX_DIST = 0.4
DEFAULT_KNN = 1


class ConnectivityRule(str, Enum):
    """Closed set of rules for turning distances into graph edges."""

    MST = "mst"
    KNN = "knn"
    THRESHOLD_VALUE = "threshold.value"
    THRESHOLD_NEDGES = "threshold.nedges"

    @classmethod
    def parse(cls, name: "str | ConnectivityRule") -> "ConnectivityRule":
        """Resolve a rule from its name, raising InvalidInputError if unknown."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(r.value for r in cls)
            raise InvalidInputError(
                f"Unknown connectivity rule {name!r}; expected one of: {valid}"
            ) from None


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def validate_rule_parameters(
    rule: ConnectivityRule,
    n_samples: int,
    max_dist: float = DEFAULT_MAX_DIST,
    knn: int = DEFAULT_KNN,
    nedges: int | None = None,
) -> None:
    """
    Check the parameter belonging to ``rule`` against the sample count.

    Only the parameter used by the selected rule is checked.

    Raises:
        InvalidParameterError: If the parameter is out of range.
    """
    if rule is ConnectivityRule.KNN:
        if not _is_int(knn):
            raise InvalidParameterError(f"knn must be an integer, got {knn!r}")
        if knn < 1 or knn >= n_samples:
            raise InvalidParameterError(
                f"knn must satisfy 1 <= knn < n_samples ({n_samples}), got {knn}"
            )
    elif rule is ConnectivityRule.THRESHOLD_VALUE:
        if not isinstance(max_dist, (int, float, np.number)) or np.isnan(max_dist):
            raise InvalidParameterError(f"max_dist must be a number, got {max_dist!r}")
        if max_dist < 0:
            raise InvalidParameterError(f"max_dist must be non-negative, got {max_dist}")
    elif rule is ConnectivityRule.THRESHOLD_NEDGES:
        n_pairs = n_samples * (n_samples - 1) // 2
        nedges = min(n_samples, n_pairs) if nedges is None else nedges
        if not _is_int(nedges):
            raise InvalidParameterError(f"nedges must be an integer, got {nedges!r}")
        if nedges < 1 or nedges > n_pairs:
            raise InvalidParameterError(
                f"nedges must satisfy 1 <= nedges <= {n_pairs} "
                f"(number of sample pairs), got {nedges}"
            )


def _empty_graph(distance: DistanceMatrix) -> nx.Graph:
    G = nx.Graph()
    G.add_nodes_from(distance.sample_ids)
    return G


def _add_pair_edges(G: nx.Graph, distance: DistanceMatrix, mask: np.ndarray) -> None:
    """Add condensed-order pairs selected by ``mask`` as edges."""
    ids = distance.sample_ids
    rows, cols = distance.pairs()
    d = distance.condensed()
    G.add_edges_from(
        (ids[i], ids[j], {"distance": float(w)})
        for i, j, w in zip(rows[mask], cols[mask], d[mask])
    )


def _build_mst(distance: DistanceMatrix, **params) -> nx.Graph:
    complete = _empty_graph(distance)
    _add_pair_edges(complete, distance, np.ones(len(distance.condensed()), dtype=bool))
    tree = nx.minimum_spanning_tree(complete, weight="distance", algorithm="prim")
    tree.graph.update(connectivity=ConnectivityRule.MST.value)
    return tree


def _build_threshold(
    distance: DistanceMatrix, max_dist: float = DEFAULT_MAX_DIST, **params
) -> nx.Graph:
    G = _empty_graph(distance)
    _add_pair_edges(G, distance, distance.condensed() <= max_dist)
    G.graph.update(
        connectivity=ConnectivityRule.THRESHOLD_VALUE.value,
        threshold=float(max_dist),
    )
    return G


def _build_threshold_nedges(
    distance: DistanceMatrix, nedges: int | None = None, **params
) -> nx.Graph:
    if nedges is None:
        nedges = min(distance.n_samples, len(distance.condensed()))
    threshold = float(np.sort(distance.condensed())[nedges - 1])
    G = _build_threshold(distance, max_dist=threshold)
    G.graph.update(
        connectivity=ConnectivityRule.THRESHOLD_NEDGES.value,
        threshold=threshold,
        nedges=int(nedges),
    )
    if G.number_of_edges() > nedges:
        logger.info(
            f"Ties at threshold {threshold:.4g}: {G.number_of_edges()} edges "
            f"realized for nedges={nedges}"
        )
    return G


def knn_neighbor_matrix(distance: DistanceMatrix, knn: int) -> np.ndarray:
    """
    Directed k-nearest-neighbour relation as a boolean (n, n) matrix.

    Row i marks the samples that i selects as neighbours. Self is never
    selected, even when another sample sits at distance zero.
    """
    n = distance.n_samples
    neighbors = np.zeros((n, n), dtype=bool)
    index = np.arange(n)
    for i in range(n):
        others = index[index != i]
        ranks = rankdata(distance.values[i, others], method="average")
        neighbors[i, others[ranks < knn + 1]] = True
    return neighbors


def _build_knn(distance: DistanceMatrix, knn: int = DEFAULT_KNN, **params) -> nx.Graph:
    directed = knn_neighbor_matrix(distance, knn)
    undirected = directed | directed.T
    mutual = directed & directed.T

    ids = distance.sample_ids
    G = _empty_graph(distance)
    rows, cols = np.nonzero(np.triu(undirected, k=1))
    G.add_edges_from(
        (
            ids[i],
            ids[j],
            {"distance": float(distance.values[i, j]), "mutual": bool(mutual[i, j])},
        )
        for i, j in zip(rows, cols)
    )
    G.graph.update(connectivity=ConnectivityRule.KNN.value, knn=int(knn))

    out_degree = directed.sum(axis=1)
    if np.any(out_degree != knn):
        logger.debug(
            f"knn={knn}: distance ties gave out-degrees in "
            f"[{out_degree.min()}, {out_degree.max()}]"
        )
    return G


_BUILDERS: dict[ConnectivityRule, Callable[..., nx.Graph]] = {
    ConnectivityRule.MST: _build_mst,
    ConnectivityRule.KNN: _build_knn,
    ConnectivityRule.THRESHOLD_VALUE: _build_threshold,
    ConnectivityRule.THRESHOLD_NEDGES: _build_threshold_nedges,
}


def build_proximity_graph(
    distance: DistanceMatrix,
    rule: "str | ConnectivityRule" = ConnectivityRule.MST,
    *,
    max_dist: float = DEFAULT_MAX_DIST,
    knn: int = DEFAULT_KNN,
    nedges: int | None = None,
) -> nx.Graph:
    """
    Build the proximity graph for ``rule``.

    Args:
        distance: Validated distance matrix; its sample order becomes the
            node order of the graph.
        rule: Connectivity rule or its name.
        max_dist: Maximum distance for "threshold.value".
        knn: Number of neighbours for "knn".
        nedges: Requested edge count for "threshold.nedges"
            (default: number of samples).

    Returns:
        Undirected graph with one node per sample and a ``distance``
        attribute on every edge.

    Raises:
        InvalidInputError: Unknown rule name.
        InvalidParameterError: Parameter out of range for the rule.

    Examples:
        >>> G = build_proximity_graph(d, "knn", knn=2)
        >>> G.graph["connectivity"]
        'knn'
    """
    rule = ConnectivityRule.parse(rule)
    validate_rule_parameters(rule, distance.n_samples, max_dist, knn, nedges)

    G = _BUILDERS[rule](distance, max_dist=max_dist, knn=knn, nedges=nedges)
    logger.debug(
        f"Built {rule.value} graph: {G.number_of_nodes()} nodes, "
        f"{G.number_of_edges()} edges"
    )
    return G


def drop_isolates(G: nx.Graph) -> nx.Graph:
    """
    Copy of ``G`` without degree-zero nodes.

    Node, edge and graph attributes of the remaining elements are kept
    unchanged.
    """
    keep = [node for node, degree in G.degree() if degree > 0]
    H = G.subgraph(keep).copy()
    n_removed = G.number_of_nodes() - H.number_of_nodes()
    if n_removed:
        logger.debug(f"Dropped {n_removed} isolated nodes")
    return H
