"""
Plots for graph permutation test results.

Both functions are pure consumers of ``GraphTestResult``:

- ``plot_test_network``: the tested graph, nodes coloured by label and
  edges styled pure/mixed. Layout is delegated to networkx, Kamada-Kawai
  for spanning trees and Fruchterman-Reingold (``spring_layout``) for
  everything else.
- ``plot_permutations``: histogram of the null distribution with the
  observed number of pure edges marked.
"""

from __future__ import annotations

import logging

import matplotlib.pyplot as plt
import networkx as nx
import seaborn as sns
from matplotlib.lines import Line2D

from graphpermtest.graph.builder import ConnectivityRule
from graphpermtest.stats.purity import MIXED, PURE
from graphpermtest.stats.result import GraphTestResult
from graphpermtest.viz.core import Figure
from graphpermtest.viz.styles import PALETTES, Palette

logger = logging.getLogger(__name__)

__all__ = ["plot_test_network", "plot_permutations"]


def _resolve_palette(palette: str | Palette) -> Palette:
    if isinstance(palette, str):
        return PALETTES.get(palette, PALETTES["default"])
    return palette


def _layout(G: nx.Graph, connectivity: ConnectivityRule, seed: int | None) -> dict:
    if G.number_of_nodes() == 0:
        return {}
    if connectivity is ConnectivityRule.MST and G.number_of_nodes() > 1:
        return nx.kamada_kawai_layout(G, weight=None)
    return nx.spring_layout(G, seed=seed)


def plot_test_network(
    result: GraphTestResult,
    palette: str | Palette = "default",
    node_size: float = 60,
    figsize: tuple[float, float] = (8, 7),
    seed: int | None = 0,
) -> Figure:
    """
    Draw the graph used for testing.

    Parameters
    ----------
    result : GraphTestResult
        Output of ``graph_perm_test``.
    palette : str or Palette
        Palette name or instance.
    node_size : float
        Marker size for samples.
    figsize : tuple
        Figure size.
    seed : int, optional
        Seed for the force-directed layout.

    Returns
    -------
    Figure
    """
    pal = _resolve_palette(palette)
    G = result.graph
    pos = _layout(G, result.connectivity, seed)

    labels = [G.nodes[n].get("sampletype") for n in G.nodes]
    colors = pal.for_labels(labels)

    fig, ax = plt.subplots(figsize=figsize)
    for edgetype, style in ((PURE, pal.pure_style), (MIXED, pal.mixed_style)):
        edges = [(a, b) for a, b, t in G.edges(data="edgetype") if t == edgetype]
        if edges:
            nx.draw_networkx_edges(
                G, pos, edgelist=edges, style=style, edge_color=pal.edge, ax=ax
            )
    if G.number_of_nodes():
        nx.draw_networkx_nodes(
            G, pos, node_color=[colors[label] for label in labels],
            node_size=node_size, ax=ax,
        )

    handles = [
        Line2D([0], [0], marker="o", linestyle="", color=color, label=str(label))
        for label, color in colors.items()
    ]
    handles += [
        Line2D([0], [0], color=pal.edge, linestyle=pal.pure_style, label=PURE),
        Line2D([0], [0], color=pal.edge, linestyle=pal.mixed_style, label=MIXED),
    ]
    ax.legend(handles=handles, loc="best", frameon=False)
    ax.set_axis_off()
    title = f"{result.connectivity.value} graph: {result.observed}/{result.n_edges} pure edges"
    ax.set_title(title)

    return Figure(
        fig=fig,
        title=title,
        description="Proximity graph with nodes coloured by label and edges marked pure/mixed",
        metadata={"connectivity": result.connectivity.value, "n_edges": result.n_edges},
    )


def plot_permutations(
    result: GraphTestResult,
    bins: int = 30,
    palette: str | Palette = "default",
    figsize: tuple[float, float] = (6, 4),
) -> Figure:
    """
    Histogram of the permutation distribution with the observed statistic.

    Parameters
    ----------
    result : GraphTestResult
        Output of ``graph_perm_test``.
    bins : int, default 30
        Number of histogram bins.
    palette : str or Palette
        Palette name or instance.
    figsize : tuple
        Figure size.

    Returns
    -------
    Figure
    """
    pal = _resolve_palette(palette)
    fig, ax = plt.subplots(figsize=figsize)
    sns.histplot(x=result.perm, bins=bins, color=pal.histogram, ax=ax)

    ymax = ax.get_ylim()[1]
    marker_top = ymax / 10
    ax.plot([result.observed, result.observed], [0, marker_top], color=pal.observed)
    ax.scatter([result.observed], [marker_top], color=pal.observed, zorder=3)
    ax.set_xlabel("Number of pure edges")
    ax.set_ylabel("Permutations")
    ax.set_title(f"Permutation p-value: {result.pval:.4g}")

    return Figure(
        fig=fig,
        title="Permutation distribution",
        description="Null distribution of pure-edge counts; red marks the observed count",
        metadata={"bins": bins, "n_permutations": result.n_permutations},
    )
