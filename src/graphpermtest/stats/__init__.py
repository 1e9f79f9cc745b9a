"""
Statistical testing module for graph-based label association.

Exports core functions for:
- Repeated-measures grouping validation
- Pure-edge statistic
- Group-level label permutation and the permutation test
"""

from .grouping import check_grouping, resolve_grouping, valid_grouping
from .purity import annotate_edge_types, count_pure_edges
from .label_permutation import permute_grouped_labels
from .graph_test import graph_perm_test, permutation_pvalue, run_permutation_null
from .result import GraphTestResult

__all__ = [
    "check_grouping",
    "resolve_grouping",
    "valid_grouping",
    "annotate_edge_types",
    "count_pure_edges",
    "permute_grouped_labels",
    "graph_perm_test",
    "permutation_pvalue",
    "run_permutation_null",
    "GraphTestResult",
]
