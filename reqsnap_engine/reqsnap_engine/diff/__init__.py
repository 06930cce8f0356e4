"""Deterministic structural diff engine for JSON response values."""

from reqsnap_engine.diff.structural_diff import ROOT_PATH, diff_values

__all__ = [
    "ROOT_PATH",
    "diff_values",
]
