"""Loading distance matrices and sample metadata from disk."""

from graphpermtest.io.loaders import (
    load_abundance_table,
    load_distance_matrix,
    load_sample_metadata,
)
from graphpermtest.io.distances import compute_sample_distances

__all__ = [
    "load_abundance_table",
    "load_distance_matrix",
    "load_sample_metadata",
    "compute_sample_distances",
]
