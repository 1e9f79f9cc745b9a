"""
Figure wrapper for graph-test visualizations.

Keeps the matplotlib figure together with a title, a description and the
parameters it was drawn from, so the CLI can save a batch of figures
without knowing how each one was built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

import matplotlib.figure
import matplotlib.pyplot as plt

OutputFormat = Literal["png", "pdf", "svg"]


@dataclass
class Figure:
    """
    A matplotlib figure with descriptive metadata.

    Attributes
    ----------
    fig : matplotlib.figure.Figure
        The underlying figure.
    title : str
        Human-readable title.
    description : str
        What the figure shows.
    metadata : dict
        Creation time and plotting parameters.

    Examples
    --------
    >>> fig = plot_permutations(result)
    >>> fig.save("permutations.pdf")
    >>> fig.close()
    """
    fig: matplotlib.figure.Figure
    title: str
    description: str
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if "created_at" not in self.metadata:
            self.metadata["created_at"] = datetime.now().isoformat()

    def save(
        self,
        path: Path | str,
        format: Optional[OutputFormat] = None,
        dpi: int = 300,
        **kwargs
    ) -> Path:
        """
        Save figure to file.

        Parameters
        ----------
        path : Path or str
            Output path. Format inferred from the extension if not given;
            unknown extensions fall back to png.
        format : str, optional
            Output format.
        dpi : int, default 300
            DPI for raster output.

        Returns
        -------
        Path
            The path written.
        """
        path = Path(path)
        if format is None:
            format = path.suffix.lstrip(".").lower()
            if format not in ("png", "pdf", "svg"):
                format = "png"

        path.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(
            path,
            format=format,
            dpi=dpi,
            bbox_inches="tight",
            facecolor="white",
            **kwargs
        )
        return path

    def close(self):
        """Close the figure to free memory."""
        plt.close(self.fig)
