"""Measures of how well data are recovered from a truncated reduced representation.

DRR orders its coordinates like PCA does, so keeping the first `k` coordinates and
inverting gives a reconstruction of the data whose error decreases with `k`:

* :func:`pointwise_reconstruction_error` the error of each sample.
* :func:`reconstruction_error` the root mean square error over the samples.
* :func:`truncated_reconstruction_errors` the error for every `k`, useful to
  choose the dimension of the reduced representation.
"""

from ._reconstruction_measures import (
    pointwise_reconstruction_error,
    reconstruction_error,
    truncated_reconstruction_errors,
)

__all__ = [
    "pointwise_reconstruction_error",
    "reconstruction_error",
    "truncated_reconstruction_errors",
]
