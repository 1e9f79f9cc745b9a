"""Shared argparse type validators for CLI parameter bounds checking.

These validators produce clear error messages when users pass invalid
values (e.g., ``--nperm 0``, ``--max-dist -1``).  They are intended to be
used as the ``type=`` argument in ``add_argument()``.
"""

from __future__ import annotations

import argparse


def _positive_int(value: str) -> int:
    """argparse type for positive integers (> 0)."""
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return ivalue


def _non_negative_float(value: str) -> float:
    """argparse type for non-negative floats (>= 0)."""
    fvalue = float(value)
    if not fvalue >= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a non-negative number")
    return fvalue
