"""
Adapter to an external distance provider.

Computing distances is not part of the test itself; this module forwards an
opaque method name to ``scipy.spatial.distance.pdist`` so a distance matrix
can be produced from a samples x features abundance table. Method names are
passed through unchanged (e.g. "jaccard", "braycurtis", "euclidean").
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist

from graphpermtest.core.distance import DistanceMatrix
from graphpermtest.errors import InvalidInputError

__all__ = ["compute_sample_distances"]

_BOOLEAN_METRICS = (
    "jaccard", "dice", "rogerstanimoto", "russellrao",
    "sokalmichener", "sokalsneath", "yule",
)


def compute_sample_distances(
    abundance: pd.DataFrame,
    method: str = "jaccard",
    samples_as_rows: bool = True,
) -> DistanceMatrix:
    """
    Pairwise sample distances from an abundance table.

    Args:
        abundance: Feature abundances, samples as rows (or as columns when
            ``samples_as_rows=False``).
        method: Any metric name accepted by ``scipy.spatial.distance.pdist``.
        samples_as_rows: Orientation of ``abundance``.

    Returns:
        DistanceMatrix labelled with the sample ids.

    Raises:
        InvalidInputError: Unknown method, non-numeric table, or a distance
            that is undefined for some pair (e.g. cosine on an all-zero sample).
    """
    table = abundance if samples_as_rows else abundance.T
    try:
        values = table.to_numpy(dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Abundance table must be numeric: {e}") from e

    # Boolean metrics need presence/absence input
    boolean = method in _BOOLEAN_METRICS
    if boolean:
        values = values > 0

    try:
        condensed = pdist(values, metric=method)
    except ValueError as e:
        raise InvalidInputError(f"Distance method {method!r} failed: {e}") from e

    if boolean:
        # Two all-absent samples give 0/0 under presence/absence metrics
        condensed = np.nan_to_num(condensed, nan=0.0)
    elif np.isnan(condensed).any():
        rows, cols = np.triu_indices(len(table), k=1)
        bad = np.flatnonzero(np.isnan(condensed))[:5]
        pairs = [(table.index[rows[i]], table.index[cols[i]]) for i in bad]
        raise InvalidInputError(
            f"Distance method {method!r} is undefined for some sample pairs "
            f"(e.g. all-zero samples): {pairs}"
        )
    return DistanceMatrix.from_condensed(condensed, sample_ids=table.index)
