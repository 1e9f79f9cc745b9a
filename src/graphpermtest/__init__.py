"""
graphpermtest - Graph-based permutation tests for sample labels

Tests whether a categorical sample label is associated with similarity
among samples: a proximity graph is built from a pairwise distance matrix,
the edges joining samples with the same label ("pure" edges) are counted,
and the count is compared against a label-permutation null distribution
that respects repeated-measures grouping.
"""

__version__ = "0.1.0"

from graphpermtest.core.distance import DistanceMatrix
from graphpermtest.errors import ConfigurationError, InvalidInputError
from graphpermtest.graph.builder import ConnectivityRule, build_proximity_graph
from graphpermtest.stats.graph_test import graph_perm_test
from graphpermtest.stats.result import GraphTestResult

__all__ = [
    "DistanceMatrix",
    "ConnectivityRule",
    "build_proximity_graph",
    "graph_perm_test",
    "GraphTestResult",
    "ConfigurationError",
    "InvalidInputError",
]
