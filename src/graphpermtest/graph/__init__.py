"""Proximity graph construction from distance matrices."""

from graphpermtest.graph.builder import (
    ConnectivityRule,
    build_proximity_graph,
    drop_isolates,
    validate_rule_parameters,
)

__all__ = [
    "ConnectivityRule",
    "build_proximity_graph",
    "drop_isolates",
    "validate_rule_parameters",
]
