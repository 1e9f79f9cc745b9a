"""Tests for tabular loaders and the distance provider adapter."""

import numpy as np
import pandas as pd
import pytest

from graphpermtest.core.distance import DistanceMatrix
from graphpermtest.errors import InvalidDistanceInputError, InvalidInputError
from graphpermtest.io import (
    compute_sample_distances,
    load_abundance_table,
    load_distance_matrix,
    load_sample_metadata,
)


@pytest.fixture
def distance_csv(tmp_path):
    df = pd.DataFrame(
        [[0.0, 0.4, 0.7], [0.4, 0.0, 0.5], [0.7, 0.5, 0.0]],
        index=["S1", "S2", "S3"],
        columns=["S1", "S2", "S3"],
    )
    path = tmp_path / "dist.csv"
    df.to_csv(path)
    return path


class TestLoaders:
    """Tests for load_distance_matrix() and load_sample_metadata()."""

    def test_load_distance_matrix(self, distance_csv):
        d = load_distance_matrix(distance_csv)
        assert isinstance(d, DistanceMatrix)
        assert list(d.sample_ids) == ["S1", "S2", "S3"]
        assert d.values[0, 2] == pytest.approx(0.7)

    def test_tab_delimited(self, tmp_path):
        path = tmp_path / "dist.tsv"
        path.write_text("\tx\ty\nx\t0\t2\ny\t2\t0\n")
        d = load_distance_matrix(path)
        assert d.values[0, 1] == 2.0

    def test_numeric_ids_become_strings(self, tmp_path):
        path = tmp_path / "dist.csv"
        path.write_text(",1,2\n1,0,3\n2,3,0\n")
        d = load_distance_matrix(path)
        assert list(d.sample_ids) == ["1", "2"]

    def test_invalid_matrix(self, tmp_path):
        path = tmp_path / "dist.csv"
        path.write_text(",a,b\na,0,1\nb,2,0\n")
        with pytest.raises(InvalidInputError, match="symmetric"):
            load_distance_matrix(path)

    def test_mismatched_labels(self, tmp_path):
        path = tmp_path / "dist.csv"
        path.write_text(",a,c\na,0,1\nb,1,0\n")
        with pytest.raises(InvalidDistanceInputError):
            load_distance_matrix(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_distance_matrix(tmp_path / "nope.csv")

    def test_load_sample_metadata(self, tmp_path):
        path = tmp_path / "samples.csv"
        path.write_text("sample,SeqTech,Subject\nS1,Sanger,p1\nS2,454,p2\n")
        metadata = load_sample_metadata(path)
        assert list(metadata.index) == ["S1", "S2"]
        assert metadata.loc["S2", "SeqTech"] == "454"

    def test_load_abundance_table(self, tmp_path):
        path = tmp_path / "counts.csv"
        path.write_text("sample,otu1,otu2\nS1,3,0\nS2,0,5\n")
        abundance = load_abundance_table(path)
        assert abundance.shape == (2, 2)


class TestComputeSampleDistances:
    """Tests for compute_sample_distances()."""

    @pytest.fixture
    def abundance(self):
        return pd.DataFrame(
            {"otu1": [5, 2, 0], "otu2": [0, 7, 0], "otu3": [1, 0, 0]},
            index=["a", "b", "c"],
        )

    def test_jaccard_uses_presence(self, abundance):
        d = compute_sample_distances(abundance, method="jaccard")
        # a = {otu1, otu3}, b = {otu1, otu2}: 2 of 3 present features differ
        assert d.to_frame().loc["a", "b"] == pytest.approx(2 / 3)

    def test_empty_samples_get_zero(self):
        abundance = pd.DataFrame({"x": [0, 0], "y": [0, 0]}, index=["a", "b"])
        d = compute_sample_distances(abundance, method="jaccard")
        assert d.values[0, 1] == 0.0

    def test_undefined_distance_rejected(self):
        abundance = pd.DataFrame([[0, 0], [0, 0], [1, 2]], index=["a", "b", "c"])
        with pytest.raises(InvalidInputError, match="undefined"):
            compute_sample_distances(abundance, method="cosine")

    def test_euclidean(self, abundance):
        d = compute_sample_distances(abundance, method="euclidean")
        expected = np.sqrt(3**2 + 7**2 + 1**2)
        assert d.to_frame().loc["a", "b"] == pytest.approx(expected)

    def test_samples_as_columns(self, abundance):
        d = compute_sample_distances(abundance.T, method="braycurtis", samples_as_rows=False)
        assert list(d.sample_ids) == ["a", "b", "c"]

    def test_unknown_method(self, abundance):
        with pytest.raises(InvalidInputError, match="not-a-metric"):
            compute_sample_distances(abundance, method="not-a-metric")

    def test_non_numeric(self):
        abundance = pd.DataFrame({"x": ["a", "b"]}, index=["s1", "s2"])
        with pytest.raises(InvalidInputError, match="numeric"):
            compute_sample_distances(abundance)
