"""
Group-level label permutation for repeated-measures designs.

Free permutation shuffles labels across individual samples. When several
samples come from the same subject they are not exchangeable, so labels are
instead shuffled across *groups* and then broadcast to every member:

    1. Build the group -> label map (each group has exactly one label)
    2. Shuffle the labels over the distinct groups
    3. Look up each sample's group in the shuffled map

Samples sharing a group therefore always receive the same permuted label.
With the default singleton grouping this reduces to free permutation.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import NDArray

__all__ = [
    "group_label_map",
    "permute_grouped_labels",
    "GroupedLabels",
    "permute_label_codes",
]


def group_label_map(labels: NDArray, groups: NDArray) -> pd.Series:
    """
    Map each distinct group to its label.

    Groups are listed in order of first appearance; the label of a group is
    that of its first member.
    """
    frame = pd.DataFrame({"label": np.asarray(labels), "group": np.asarray(groups)})
    return frame.groupby("group", sort=False)["label"].first()


def permute_grouped_labels(
    labels: NDArray,
    groups: NDArray,
    rng: np.random.Generator,
) -> NDArray:
    """
    Permute labels over groups and broadcast back to samples.

    Label-valued form of ``permute_label_codes``: for the same generator
    state both produce the same permutation.

    Args:
        labels: Label per sample (n_samples,).
        groups: Group id per sample (n_samples,). Every group must be
            label-constant (see ``stats.grouping.check_grouping``).
        rng: NumPy random generator.

    Returns:
        New label array; the input is not modified.

    Examples:
        >>> rng = np.random.default_rng(0)
        >>> labels = np.array(["A", "A", "B", "B"])
        >>> groups = np.array(["s1", "s1", "s2", "s2"])
        >>> perm = permute_grouped_labels(labels, groups, rng)
        >>> perm[0] == perm[1] and perm[2] == perm[3]
        True
    """
    mapping = group_label_map(labels, groups)
    shuffled = pd.Series(rng.permutation(mapping.to_numpy()), index=mapping.index)
    return shuffled.loc[np.asarray(groups)].to_numpy()


class GroupedLabels:
    """
    Integer form of a label/grouping pair for repeated permutation.

    Precomputes, once, the code of each group's label and each sample's
    group position, so one permutation is a shuffle of ``group_codes``
    followed by a fancy-index lookup.

    Attributes:
        codes: Label code per sample.
        group_index: Position of each sample's group in ``group_codes``.
        group_codes: Label code per distinct group.
    """

    def __init__(self, codes: NDArray, groups: NDArray):
        codes = np.asarray(codes)
        self.group_index, uniques = pd.factorize(np.asarray(groups))
        self.group_codes = np.empty(len(uniques), dtype=codes.dtype)
        self.group_codes[self.group_index] = codes
        self.codes = codes

    @property
    def n_groups(self) -> int:
        return len(self.group_codes)


def permute_label_codes(grouped: GroupedLabels, rng: np.random.Generator) -> NDArray:
    """Permuted label codes per sample; same semantics as ``permute_grouped_labels``."""
    return rng.permutation(grouped.group_codes)[grouped.group_index]
