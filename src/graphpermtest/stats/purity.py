"""
Pure-edge statistic for a labelled proximity graph.

An edge is *pure* when both endpoints carry the same label and *mixed*
otherwise. The number of pure edges is the test statistic: labels that
track the graph structure produce more pure edges than random labels.

The statistic is evaluated hundreds of times per test, so the graph is
reduced once to integer endpoint arrays and labels to integer codes; each
evaluation is then a single vectorised comparison.
"""

from __future__ import annotations

import numpy as np
import networkx as nx
import pandas as pd
from numpy.typing import NDArray

from graphpermtest.errors import ConfigurationError

__all__ = [
    "PURE",
    "MIXED",
    "edge_index",
    "encode_labels",
    "count_pure_edges",
    "annotate_edge_types",
]

PURE = "pure"
MIXED = "mixed"


def edge_index(G: nx.Graph, sample_ids: pd.Index) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """Endpoint positions (u, v) of every edge of ``G`` in ``sample_ids`` order."""
    position = {sample: i for i, sample in enumerate(sample_ids)}
    edges = list(G.edges())
    u = np.fromiter((position[a] for a, _ in edges), dtype=np.intp, count=len(edges))
    v = np.fromiter((position[b] for _, b in edges), dtype=np.intp, count=len(edges))
    return u, v


def encode_labels(labels) -> NDArray[np.intp]:
    """
    Integer codes for categorical labels (equal labels share a code).

    Raises:
        ConfigurationError: If any label is missing.
    """
    codes, _ = pd.factorize(np.asarray(labels), use_na_sentinel=True)
    if np.any(codes < 0):
        raise ConfigurationError("Sample labels contain missing values")
    return codes.astype(np.intp)


def count_pure_edges(u: NDArray[np.intp], v: NDArray[np.intp], codes: NDArray) -> int:
    """Number of edges whose endpoints have equal label codes."""
    return int(np.count_nonzero(codes[u] == codes[v]))


def annotate_edge_types(G: nx.Graph, labels: pd.Series) -> int:
    """
    Tag nodes with ``sampletype`` and edges with ``edgetype``.

    Args:
        G: Graph to annotate in place.
        labels: Label per sample id (index must cover every node).

    Returns:
        Number of pure edges.
    """
    nx.set_node_attributes(G, {node: labels.loc[node] for node in G.nodes}, "sampletype")
    n_pure = 0
    for a, b, data in G.edges(data=True):
        pure = labels.loc[a] == labels.loc[b]
        data["edgetype"] = PURE if pure else MIXED
        n_pure += int(pure)
    return n_pure
