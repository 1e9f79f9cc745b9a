"""
Validated pairwise distance matrix over an ordered set of samples.

The distance matrix is the only quantitative input of a graph test. It is
produced by an external distance provider and consumed read-only here.
The row order of the matrix defines the SampleSet order that the graph, the
label vector and the grouping vector are all aligned to.

Design:
    - Immutable: the underlying array is flagged read-only
    - Validation is eager and complete (shape, finiteness, sign, symmetry)
    - No metric assumptions: triangle inequality violations are fine
    - Condensed view follows scipy's ``squareform`` convention, so each
      unordered pair appears exactly once

Examples:
    >>> import numpy as np
    >>> from graphpermtest.core.distance import DistanceMatrix
    >>> d = DistanceMatrix.from_array(
    ...     np.array([[0.0, 1.0], [1.0, 0.0]]), sample_ids=["s1", "s2"]
    ... )
    >>> d.n_samples
    2
    >>> d.condensed()
    array([1.])
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy.spatial.distance import squareform

from graphpermtest.errors import InvalidDistanceInputError

logger = logging.getLogger(__name__)

__all__ = ["DistanceMatrix", "as_distance_matrix"]


def _validate_values(values: NDArray[np.float64], atol: float) -> None:
    if values.ndim != 2 or values.shape[0] != values.shape[1]:
        raise InvalidDistanceInputError(
            f"Distance matrix must be square, got shape {values.shape}"
        )
    n = values.shape[0]
    if n < 2:
        raise InvalidDistanceInputError(
            f"Distance matrix needs at least 2 samples, got {n}"
        )
    if not np.all(np.isfinite(values)):
        raise InvalidDistanceInputError(
            "Distance matrix contains NaN or infinite values"
        )
    if np.any(values < 0):
        raise InvalidDistanceInputError("Distance matrix contains negative values")
    if not np.allclose(values, values.T, rtol=0.0, atol=atol):
        max_asym = float(np.max(np.abs(values - values.T)))
        raise InvalidDistanceInputError(
            f"Distance matrix is not symmetric (max |d_ij - d_ji| = {max_asym:.3g})"
        )


@dataclass(frozen=True)
class DistanceMatrix:
    """
    Symmetric, non-negative N x N distances between samples.

    Attributes:
        values: Read-only float64 array of shape (n_samples, n_samples).
        sample_ids: Unique sample identifiers in matrix order.

    Use the ``from_*`` constructors rather than instantiating directly;
    they copy, validate and freeze the input.
    """

    values: NDArray[np.float64]
    sample_ids: pd.Index

    @classmethod
    def from_array(
        cls,
        values,
        sample_ids: Sequence | None = None,
        atol: float = 1e-8,
    ) -> "DistanceMatrix":
        """
        Build from a square array.

        Args:
            values: Array-like of shape (n, n).
            sample_ids: Identifiers in row order. Defaults to 0..n-1.
            atol: Absolute tolerance for the symmetry check.

        Raises:
            InvalidDistanceInputError: If the matrix or ids are unusable.
        """
        try:
            arr = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidDistanceInputError(
                f"Distance matrix must be numeric: {e}"
            ) from e
        _validate_values(arr, atol)

        n = arr.shape[0]
        if sample_ids is None:
            ids = pd.RangeIndex(n)
        else:
            ids = pd.Index(sample_ids)
        if len(ids) != n:
            raise InvalidDistanceInputError(
                f"Got {len(ids)} sample ids for a {n}x{n} distance matrix"
            )
        if not ids.is_unique:
            dupes = ids[ids.duplicated()].unique().tolist()
            raise InvalidDistanceInputError(f"Duplicate sample ids: {dupes[:10]}")

        if np.any(np.diag(arr) != 0):
            logger.debug("Non-zero diagonal in distance matrix is ignored")

        # Exact symmetry so both triangles agree downstream
        arr = (arr + arr.T) / 2.0
        arr.setflags(write=False)
        return cls(values=arr, sample_ids=ids)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, atol: float = 1e-8) -> "DistanceMatrix":
        """
        Build from a labelled DataFrame (index and columns are sample ids).

        Columns are reordered to match the row order.
        """
        if set(df.index) != set(df.columns) or len(df.index) != len(df.columns):
            raise InvalidDistanceInputError(
                "Distance DataFrame must have identical row and column labels"
            )
        if not df.index.is_unique:
            raise InvalidDistanceInputError("Distance DataFrame has duplicate labels")
        return cls.from_array(
            df.loc[:, df.index].to_numpy(), sample_ids=df.index, atol=atol
        )

    @classmethod
    def from_condensed(
        cls, condensed, sample_ids: Sequence | None = None
    ) -> "DistanceMatrix":
        """Build from a scipy-style condensed vector of pairwise distances."""
        try:
            square = squareform(np.asarray(condensed, dtype=np.float64), checks=False)
        except ValueError as e:
            raise InvalidDistanceInputError(f"Invalid condensed distances: {e}") from e
        return cls.from_array(square, sample_ids=sample_ids)

    @property
    def n_samples(self) -> int:
        return self.values.shape[0]

    def condensed(self) -> NDArray[np.float64]:
        """Upper-triangle distances, one entry per unordered pair."""
        return squareform(self.values, checks=False)

    def pairs(self) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
        """Index arrays (i, j), i < j, in the same order as ``condensed()``."""
        return np.triu_indices(self.n_samples, k=1)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.values, index=self.sample_ids, columns=self.sample_ids)


def as_distance_matrix(distance) -> DistanceMatrix:
    """Coerce a DistanceMatrix, labelled DataFrame or square array."""
    if isinstance(distance, DistanceMatrix):
        return distance
    if isinstance(distance, pd.DataFrame):
        return DistanceMatrix.from_frame(distance)
    return DistanceMatrix.from_array(distance)
