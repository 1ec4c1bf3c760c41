r"""
In the archetypal method for dimensionality reduction, principal components
analysis (PCA), features are rotated into the latent space which best preserves the
variance of the original data, and the leading components are kept.

This module provides Dimensionality Reduction via Regression (DRR), as introduced by
[Laparra2015]_, a nonlinear generalisation of PCA. Each principal component is
replaced by the residual of a kernel ridge regression on the components of higher
variance, which removes the nonlinear dependencies PCA leaves between its
components. Like PCA, DRR is invertible.

The module includes:

* :class:`DRR` the estimator, with ``transform`` and ``inverse_transform``.
* :func:`drr` a functional interface returning the fitted quantities and the
  forward and inverse maps as a bundle.
"""

from ._drr import DRR, drr

__all__ = ["DRR", "drr"]
