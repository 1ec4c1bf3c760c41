"""Datasets used for example and testing."""

from ._samples_generator import make_helix

__all__ = ["make_helix"]
