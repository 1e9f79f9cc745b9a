"""Core data structures: the validated distance matrix over samples."""

from graphpermtest.core.distance import DistanceMatrix, as_distance_matrix

__all__ = ["DistanceMatrix", "as_distance_matrix"]
