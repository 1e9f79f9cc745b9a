"""Tests for graph-test figures."""

import matplotlib.pyplot as plt
import pytest

from graphpermtest import graph_perm_test
from graphpermtest.viz import PALETTES, Figure, Palette, plot_permutations, plot_test_network


@pytest.fixture
def mst_result(two_clusters):
    distance, metadata = two_clusters
    return graph_perm_test(distance, metadata, "sampletype", nperm=50, rng=0)


@pytest.fixture
def knn_result(two_clusters):
    distance, metadata = two_clusters
    return graph_perm_test(distance, metadata, "sampletype", connectivity="knn", nperm=50, rng=0)


def test_plot_test_network(mst_result, tmp_path):
    figure = plot_test_network(mst_result)
    assert isinstance(figure, Figure)
    assert "8/9 pure edges" in figure.title
    path = figure.save(tmp_path / "network.png")
    assert path.exists()
    figure.close()


def test_plot_test_network_spring_layout(knn_result, tmp_path):
    figure = plot_test_network(knn_result, palette="print")
    assert figure.metadata["connectivity"] == "knn"
    figure.save(tmp_path / "network.svg")
    assert (tmp_path / "network.svg").exists()
    figure.close()


def test_plot_permutations(mst_result, tmp_path):
    figure = plot_permutations(mst_result, bins=10)
    ax = figure.fig.axes[0]
    assert ax.get_xlabel() == "Number of pure edges"
    assert figure.metadata["n_permutations"] == 50
    figure.save(tmp_path / "perm.pdf")
    assert (tmp_path / "perm.pdf").exists()
    figure.close()


def test_unknown_extension_falls_back_to_png(mst_result, tmp_path):
    figure = plot_permutations(mst_result)
    path = figure.save(tmp_path / "perm.figure")
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    figure.close()


def test_palette_for_labels():
    colors = Palette().for_labels(["b", "a", "b", "c"])
    assert list(colors) == ["b", "a", "c"]
    assert len(set(colors.values())) == 3
    assert PALETTES["print"].categorical == "Greys"


def test_figures_closed(mst_result):
    before = len(plt.get_fignums())
    plot_permutations(mst_result).close()
    assert len(plt.get_fignums()) == before
