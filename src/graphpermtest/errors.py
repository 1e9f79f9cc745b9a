"""
Error taxonomy for graph-based permutation testing.

Two families of failures are distinguished:

- ``ConfigurationError``: the caller asked for something that cannot be
  tested (unknown label column, grouping that mixes labels, non-positive
  permutation count, out-of-range connectivity parameters).
- ``InvalidInputError``: the supplied data is unusable (distance matrix not
  square/symmetric, samples that do not line up with the metadata table,
  unrecognized connectivity rule).

Both derive from ``ValueError`` so callers that already guard argument
errors with ``except ValueError`` keep working. All of them are raised
before any permutation work starts.
"""

from __future__ import annotations

__all__ = [
    "GraphTestError",
    "ConfigurationError",
    "InvalidInputError",
    "InvalidDistanceInputError",
    "InvalidParameterError",
]


class GraphTestError(Exception):
    """Base class for all errors raised by graphpermtest."""
    pass


class ConfigurationError(GraphTestError, ValueError):
    """Raised when test settings or the grouping design are invalid."""
    pass


class InvalidInputError(GraphTestError, ValueError):
    """Raised when the distance matrix or sample tables cannot be used."""
    pass


class InvalidDistanceInputError(InvalidInputError):
    """Raised when a distance matrix is not square, symmetric or finite."""
    pass


class InvalidParameterError(ConfigurationError):
    """Raised when a connectivity-rule parameter is out of range."""
    pass
