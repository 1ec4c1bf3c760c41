import numbers

import numpy as np


def check_integer(value, name, min_value=None):
    """Checks that ``value`` is integral and at least ``min_value``.

    Integral floats such as ``4.0`` are accepted and converted, any other
    non-integral value raises a :py:class:`ValueError`.

    Parameters
    ----------
    value : object
        The value to check.
    name : str
        Name of the parameter, used in the error messages.
    min_value : int, default=None
        Smallest admissible value. Not checked if None.

    Returns
    -------
    value : int
    """
    if isinstance(value, (bool, np.bool_)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        value = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        value = int(value)
    else:
        raise ValueError(f"{name} must be an integer, got {value!r}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")
    return value


def check_regressor(regressor):
    """Checks that ``regressor`` offers the scikit-learn regressor interface."""
    missing = [
        method
        for method in ["fit", "predict", "get_params", "set_params"]
        if not callable(getattr(regressor, method, None))
    ]
    if missing:
        raise ValueError(
            f"regressor must implement fit/predict/get_params/set_params, "
            f"{type(regressor).__name__} lacks {', '.join(missing)}"
        )
    return regressor
