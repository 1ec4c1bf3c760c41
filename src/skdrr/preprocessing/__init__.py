"""Scaling, centering and rotation methods."""

from ._data import LinearPreprocessor, StandardFlexibleScaler

__all__ = ["StandardFlexibleScaler", "LinearPreprocessor"]
