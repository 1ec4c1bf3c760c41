from sklearn.metrics.pairwise import PAIRWISE_KERNEL_FUNCTIONS


# kernlab kernel names and how their parameters map onto ``pairwise_kernels``
_KERNLAB_KERNELS = {
    "rbfdot": ("rbf", {"sigma": "gamma"}),
    "polydot": (
        "polynomial",
        {"degree": "degree", "scale": "gamma", "offset": "coef0"},
    ),
    "vanilladot": ("linear", {}),
    "tanhdot": ("sigmoid", {"scale": "gamma", "offset": "coef0"}),
}


def resolve_kernel(kernel, kernel_params=None):
    r"""Translates a kernel specification into a scikit-learn kernel name.

    Kernel names understood by :func:`sklearn.metrics.pairwise.pairwise_kernels`
    are passed through, as are callables. The kernlab names ``"rbfdot"``,
    ``"polydot"``, ``"vanilladot"`` and ``"tanhdot"`` are mapped to ``"rbf"``,
    ``"polynomial"``, ``"linear"`` and ``"sigmoid"``, and their parameters renamed
    accordingly, e.g. ``sigma`` becomes ``gamma`` since kernlab's
    :math:`\exp(-\sigma \|x - x'\|^2)` is scikit-learn's RBF kernel.

    Parameters
    ----------
    kernel : str or callable
        Kernel name or callable.
    kernel_params : dict, default=None
        Kernel parameters keyed by name. The values are not inspected, so
        they may be scalars or lists of candidates.

    Returns
    -------
    kernel : str or callable
        The scikit-learn kernel.
    kernel_params : dict
        A new dictionary with the parameters renamed for scikit-learn.

    Examples
    --------
    >>> from skdrr.utils import resolve_kernel
    >>> resolve_kernel("rbfdot", {"sigma": [0.1, 1.0]})
    ('rbf', {'gamma': [0.1, 1.0]})
    >>> resolve_kernel("laplacian", {"gamma": 0.5})
    ('laplacian', {'gamma': 0.5})
    """
    kernel_params = {} if kernel_params is None else dict(kernel_params)

    if callable(kernel):
        return kernel, kernel_params

    if kernel in _KERNLAB_KERNELS:
        name, renames = _KERNLAB_KERNELS[kernel]
        unknown = set(kernel_params) - set(renames)
        if unknown:
            raise ValueError(
                f"Unknown parameters {sorted(unknown)} for kernel '{kernel}', "
                f"expected a subset of {sorted(renames)}"
            )
        return name, {renames[key]: value for key, value in kernel_params.items()}

    if kernel not in PAIRWISE_KERNEL_FUNCTIONS:
        raise ValueError(
            f"Unknown kernel '{kernel}'. Use one of "
            f"{sorted(PAIRWISE_KERNEL_FUNCTIONS) + sorted(_KERNLAB_KERNELS)} "
            "or a callable."
        )
    return kernel, kernel_params
