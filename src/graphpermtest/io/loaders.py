"""
Tabular loaders for distance matrices and sample metadata.

Expected formats:
    Distance matrix: square CSV/TSV, sample ids in the first column and in
    the header row, e.g.::

        "",S1,S2,S3
        S1,0,0.4,0.7
        S2,0.4,0,0.5
        S3,0.7,0.5,0

    Sample metadata: one row per sample, sample ids in the first column,
    one column per annotation (labels, subject ids, ...).

The delimiter is chosen from the file suffix (``.tsv``/``.txt`` → tab,
anything else → comma).
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from graphpermtest.core.distance import DistanceMatrix

logger = logging.getLogger(__name__)

__all__ = ["load_distance_matrix", "load_sample_metadata", "load_abundance_table"]


def _delimiter(path: Path) -> str:
    return "\t" if path.suffix.lower() in (".tsv", ".txt", ".tab") else ","


def _read_table(path: Path | str) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    df = pd.read_csv(path, sep=_delimiter(path), index_col=0)
    df.index = df.index.astype(str)
    return df


def load_distance_matrix(path: Path | str) -> DistanceMatrix:
    """
    Load a labelled square distance matrix.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidDistanceInputError: If the table is not a valid distance matrix.
    """
    df = _read_table(path)
    df.columns = df.columns.astype(str)
    distance = DistanceMatrix.from_frame(df)
    logger.info(f"Loaded {distance.n_samples}x{distance.n_samples} distance matrix from {path}")
    return distance


def load_sample_metadata(path: Path | str) -> pd.DataFrame:
    """Load sample metadata indexed by sample id."""
    metadata = _read_table(path)
    logger.info(
        f"Loaded metadata for {len(metadata)} samples with columns: {list(metadata.columns)}"
    )
    return metadata


def load_abundance_table(path: Path | str) -> pd.DataFrame:
    """Load a samples x features abundance table (samples in the first column)."""
    abundance = _read_table(path)
    logger.info(f"Loaded abundance table: {abundance.shape[0]} samples x {abundance.shape[1]} features")
    return abundance
