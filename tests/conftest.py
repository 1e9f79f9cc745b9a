"""
Pytest configuration and shared fixtures for graph test suites.

Distance matrices are generated from 1-D positions or seeded Gaussian point
clouds so that graph structure (and hence the expected statistic) is known.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
from scipy.spatial.distance import pdist, squareform


def line_distance_frame(positions: dict) -> pd.DataFrame:
    """Distance DataFrame for samples placed on a line (|x_i - x_j|)."""
    ids = list(positions)
    x = np.array([positions[s] for s in ids], dtype=float)
    return pd.DataFrame(np.abs(x[:, None] - x[None, :]), index=ids, columns=ids)


def generate_clustered_samples(
    n_per_cluster: int = 5,
    n_clusters: int = 2,
    separation: float = 20.0,
    seed: int = 42,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Gaussian clusters in 2-D, one label per cluster.

    Returns:
        (distance DataFrame, metadata DataFrame with 'sampletype' and 'subject')
    """
    rng = np.random.default_rng(seed)
    points = []
    labels = []
    for c in range(n_clusters):
        center = np.array([c * separation, 0.0])
        points.append(center + rng.standard_normal((n_per_cluster, 2)))
        labels += [f"type{c}"] * n_per_cluster
    points = np.vstack(points)

    ids = [f"S{i:02d}" for i in range(len(points))]
    distance = pd.DataFrame(squareform(pdist(points)), index=ids, columns=ids)
    metadata = pd.DataFrame(
        {
            "sampletype": labels,
            # Two consecutive samples per subject; label-constant when n_per_cluster is even
            "subject": [f"subj{i // 2}" for i in range(len(ids))],
        },
        index=ids,
    )
    return distance, metadata


@pytest.fixture
def separable_line():
    """
    Six samples on a line whose minimum spanning tree is the path
    s1-s2-s4-s5-s6-s3: three pure edges (s1-s2, s4-s5, s5-s6) and two
    mixed edges (s2-s4, s6-s3).
    """
    distance = line_distance_frame(
        {"s1": 0, "s2": 1, "s3": 5, "s4": 2, "s5": 3, "s6": 4}
    )
    metadata = pd.DataFrame(
        {"sampletype": ["A", "A", "A", "B", "B", "B"]},
        index=["s1", "s2", "s3", "s4", "s5", "s6"],
    )
    return distance, metadata


@pytest.fixture
def two_clusters():
    """Two well separated clusters of five samples each."""
    return generate_clustered_samples(n_per_cluster=5, n_clusters=2)


@pytest.fixture
def paired_clusters():
    """Two clusters of six samples; subjects contribute two samples each."""
    return generate_clustered_samples(n_per_cluster=6, n_clusters=2, seed=7)


@pytest.fixture
def random_points_distance():
    """Twelve random 2-D points: distinct pairwise distances with probability 1."""
    rng = np.random.default_rng(123)
    points = rng.uniform(size=(12, 2))
    ids = [f"P{i}" for i in range(12)]
    return pd.DataFrame(squareform(pdist(points)), index=ids, columns=ids)
