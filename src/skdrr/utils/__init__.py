"""
The :mod:`skdrr.utils` module includes functions which are
used by multiple packages
"""

from ._kernels import resolve_kernel

from ._progress_bar import (
    get_progress_bar,
    no_progress_bar,
)

from ._validation import (
    check_integer,
    check_regressor,
)

__all__ = [
    "get_progress_bar",
    "no_progress_bar",
    "resolve_kernel",
    "check_integer",
    "check_regressor",
]
