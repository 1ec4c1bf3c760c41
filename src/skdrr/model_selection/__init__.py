"""Hyperparameter search for the regressions of each DRR axis."""

from ._search import build_param_grid, check_cv_config, select_hyperparameters

__all__ = ["build_param_grid", "check_cv_config", "select_hyperparameters"]
