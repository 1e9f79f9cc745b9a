"""Immutable result of a graph-based permutation test."""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx
import numpy as np
import pandas as pd
from numpy.typing import NDArray

from graphpermtest.graph.builder import ConnectivityRule

__all__ = ["GraphTestResult"]


@dataclass(frozen=True)
class GraphTestResult:
    """Result of ``graph_perm_test``.

    Attributes:
        observed: Number of pure edges under the observed labels.
        perm: Number of pure edges for each permutation (read-only).
        pval: Permutation p-value, (#{perm >= observed} + 1) / (M + 1).
        graph: Graph used for testing (frozen). Nodes carry ``sampletype``;
            edges carry ``distance`` and ``edgetype`` ("pure"/"mixed")
            from the observed labelling.
        sampletype: Original label per sample id.
        connectivity: Connectivity rule used to build the graph.
    """

    observed: int
    perm: NDArray[np.int64]
    pval: float
    graph: nx.Graph
    sampletype: pd.Series
    connectivity: ConnectivityRule

    @property
    def n_edges(self) -> int:
        return self.graph.number_of_edges()

    @property
    def n_permutations(self) -> int:
        return len(self.perm)

    @property
    def null_mean(self) -> float:
        return float(np.mean(self.perm))

    @property
    def null_std(self) -> float:
        return float(np.std(self.perm, ddof=1)) if len(self.perm) > 1 else 0.0

    def summary(self) -> str:
        """Observed statistic, total edges and p-value, in that order."""
        lines = [
            "Output from graph_perm_test",
            "---------------------------",
            f"Observed test statistic: {self.observed} pure edges",
            f"{self.n_edges} total edges in the graph",
            f"Permutation p-value: {self.pval:.6g}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()

    def edge_frame(self) -> pd.DataFrame:
        """Edge list with endpoints, distance and pure/mixed classification."""
        rows = [
            {
                "source": a,
                "target": b,
                "distance": data.get("distance", np.nan),
                "edgetype": data.get("edgetype"),
            }
            for a, b, data in self.graph.edges(data=True)
        ]
        return pd.DataFrame(rows, columns=["source", "target", "distance", "edgetype"])

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict."""
        return {
            "observed": self.observed,
            "pval": self.pval,
            "connectivity": self.connectivity.value,
            "n_edges": self.n_edges,
            "n_nodes": self.graph.number_of_nodes(),
            "n_permutations": self.n_permutations,
            "null_mean": self.null_mean,
            "null_std": self.null_std,
            "null_quantiles": {
                "q05": float(np.percentile(self.perm, 5)),
                "q50": float(np.percentile(self.perm, 50)),
                "q95": float(np.percentile(self.perm, 95)),
            },
            "perm": [int(x) for x in self.perm],
        }
