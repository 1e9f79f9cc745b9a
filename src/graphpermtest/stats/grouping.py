"""
Repeated-measures grouping for restricted label permutation.

A grouping partitions samples into units that must be permuted together,
e.g. several samples taken from the same subject. Permuting at the group
level only makes sense when every member of a group carries the same label,
which is what ``valid_grouping`` checks before any test is run.

Accepted grouping specifications:
    - ``None``: each sample is its own group (unrestricted permutation)
    - a column name of the sample metadata table
    - a per-sample vector (list, ndarray, ``pandas.Categorical`` or
      ``pandas.Series``; a Series indexed by sample id is aligned to the
      metadata index)
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from graphpermtest.errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ["resolve_grouping", "valid_grouping", "check_grouping"]


def _require_column(metadata: pd.DataFrame, sampletype: str) -> None:
    if sampletype not in metadata.columns:
        raise ConfigurationError(
            f"'sampletype' must be a column name of the sample data; "
            f"{sampletype!r} not in {list(metadata.columns)}"
        )


def resolve_grouping(
    metadata: pd.DataFrame,
    grouping=None,
    n_samples: int | None = None,
) -> NDArray:
    """
    Normalise a grouping specification to one group id per sample.

    Args:
        metadata: Sample metadata, one row per sample in test order.
        grouping: None, a column name, or a per-sample vector.
        n_samples: Expected number of samples (default: ``len(metadata)``).

    Returns:
        1-D array of group ids aligned to the metadata rows.

    Raises:
        ConfigurationError: If the grouping is neither a column nor a
            vector of the right length, or has missing values.
    """
    n = len(metadata) if n_samples is None else n_samples

    if grouping is None:
        return np.arange(n)

    if isinstance(grouping, str):
        if grouping not in metadata.columns:
            raise ConfigurationError(
                f"'grouping' must be either a column name of the sample data or a "
                f"vector with number of elements equal to the number of samples; "
                f"{grouping!r} is not a column"
            )
        groups = metadata[grouping].to_numpy()
    elif isinstance(grouping, pd.Series) and grouping.index.isin(metadata.index).all() \
            and metadata.index.isin(grouping.index).all() and grouping.index.is_unique:
        groups = grouping.reindex(metadata.index).to_numpy()
    else:
        groups = np.asarray(grouping)
        if groups.ndim != 1:
            raise ConfigurationError(
                f"'grouping' must be one-dimensional, got shape {groups.shape}"
            )

    if len(groups) != n:
        raise ConfigurationError(
            f"'grouping' has {len(groups)} elements but there are {n} samples"
        )
    if pd.isna(groups).any():
        raise ConfigurationError("'grouping' contains missing values")
    return groups


def _labels_per_group(labels: NDArray, groups: NDArray) -> pd.Series:
    frame = pd.DataFrame({"label": labels, "group": groups})
    return frame.groupby("group", sort=False)["label"].nunique(dropna=False)


def valid_grouping(metadata: pd.DataFrame, sampletype: str, grouping=None) -> bool:
    """
    Check that every group holds a single value of ``sampletype``.

    The default singleton grouping is always valid.

    Raises:
        ConfigurationError: If ``sampletype`` is not a metadata column or
            the grouping cannot be resolved.
    """
    _require_column(metadata, sampletype)
    groups = resolve_grouping(metadata, grouping)
    if grouping is None:
        return True
    counts = _labels_per_group(metadata[sampletype].to_numpy(), groups)
    return bool((counts == 1).all())


def check_grouping(metadata: pd.DataFrame, sampletype: str, grouping=None) -> NDArray:
    """
    Resolve the grouping and fail if any group mixes labels.

    Returns:
        Per-sample group ids.

    Raises:
        ConfigurationError: Naming up to ten offending groups.
    """
    if not valid_grouping(metadata, sampletype, grouping):
        groups = resolve_grouping(metadata, grouping)
        counts = _labels_per_group(metadata[sampletype].to_numpy(), groups)
        offending = counts.index[counts > 1].tolist()
        raise ConfigurationError(
            f"Not a valid grouping, all values of {sampletype!r} must be the same "
            f"within each level of grouping; mixed groups: {offending[:10]}"
        )
    groups = resolve_grouping(metadata, grouping)
    logger.debug(f"Grouping: {len(pd.unique(groups))} groups over {len(groups)} samples")
    return groups
