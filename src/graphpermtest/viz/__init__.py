"""
Visualization for graph permutation test results.

Examples
--------
>>> from graphpermtest.viz import plot_test_network, plot_permutations
>>> plot_test_network(result).save("network.png")
>>> plot_permutations(result, bins=20).save("permutations.pdf")
"""

from graphpermtest.viz.core import Figure
from graphpermtest.viz.styles import Palette, PALETTES
from graphpermtest.viz.plots import plot_test_network, plot_permutations

__all__ = [
    "Figure",
    "Palette",
    "PALETTES",
    "plot_test_network",
    "plot_permutations",
]
