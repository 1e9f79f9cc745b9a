"""
Visual conventions for graph-test figures.

- Pure edges solid, mixed edges dotted
- Observed statistic marked in red on the permutation histogram
- Labels coloured from a colorblind-safe categorical palette
"""

from __future__ import annotations

from dataclasses import dataclass

import seaborn as sns


@dataclass(frozen=True)
class Palette:
    """
    Colours and line styles for graph-test figures.

    Attributes
    ----------
    edge : str
        Edge colour.
    pure_style : str
        Matplotlib line style for pure edges.
    mixed_style : str
        Matplotlib line style for mixed edges.
    observed : str
        Colour of the observed-statistic marker.
    histogram : str
        Fill colour of the permutation histogram.
    categorical : str
        Seaborn palette name for label colours.
    """
    edge: str = "#4b5563"          # Gray-600
    pure_style: str = "solid"
    mixed_style: str = "dotted"
    observed: str = "#dc2626"      # Red-600
    histogram: str = "#6b7280"     # Gray-500
    categorical: str = "colorblind"

    def for_labels(self, labels: list) -> dict:
        """Colour per distinct label, in order of first appearance."""
        distinct = list(dict.fromkeys(labels))
        colors = sns.color_palette(self.categorical, max(len(distinct), 1)).as_hex()
        return {label: colors[i % len(colors)] for i, label in enumerate(distinct)}


PALETTES = {
    "default": Palette(),
    "print": Palette(
        edge="#1a1a1a",
        observed="#000000",
        histogram="#b3b3b3",
        categorical="Greys",
    ),
}
