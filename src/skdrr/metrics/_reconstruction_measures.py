import numpy as np
from sklearn.utils.validation import check_array, check_is_fitted


def _check_n_components(estimator, n_components):
    if n_components is None:
        return estimator.n_components_
    if not 1 <= n_components <= estimator.n_components_:
        raise ValueError(
            f"n_components must be within [1, {estimator.n_components_}], "
            f"got {n_components}"
        )
    return n_components


def pointwise_reconstruction_error(estimator, X, n_components=None):
    r"""Computes the reconstruction error of each sample from its leading
    reduced coordinates:

    .. math::
        RE^{(i)} = \|x_i - g(f(x_i)_{1:k})\|

    where :math:`f` is the ``transform`` and :math:`g` the ``inverse_transform``
    of ``estimator``, and the coordinates beyond :math:`k` are dropped.

    Parameters
    ----------
    estimator : fitted :class:`skdrr.decomposition.DRR`
        Any fitted transformer with ``n_components_``, ``transform`` and an
        ``inverse_transform`` accepting truncated coordinates.
    X : numpy.ndarray of shape (n_samples, n_features)
        Data to reconstruct.
    n_components : int, default=None
        Number of leading coordinates kept, all of them if None.

    Returns
    -------
    pointwise_reconstruction_error : numpy.ndarray of shape (n_samples,)
    """
    check_is_fitted(estimator)
    X = check_array(X)
    n_components = _check_n_components(estimator, n_components)

    T = estimator.transform(X)[:, :n_components]
    return np.linalg.norm(X - estimator.inverse_transform(T), axis=1)


def reconstruction_error(estimator, X, n_components=None):
    r"""Computes the root mean square of the pointwise reconstruction errors,

    .. math::
        RE = \sqrt{\frac{1}{n} \sum_i \|x_i - g(f(x_i)_{1:k})\|^2}

    See :func:`pointwise_reconstruction_error` for the parameters.

    Returns
    -------
    reconstruction_error : float
    """
    errors = pointwise_reconstruction_error(estimator, X, n_components=n_components)
    return float(np.linalg.norm(errors) / np.sqrt(len(errors)))


def truncated_reconstruction_errors(estimator, X):
    """Computes :func:`reconstruction_error` for every number of kept coordinates.

    Parameters
    ----------
    estimator : fitted :class:`skdrr.decomposition.DRR`
        The fitted transformer.
    X : numpy.ndarray of shape (n_samples, n_features)
        Data to reconstruct.

    Returns
    -------
    errors : numpy.ndarray of shape (n_components_,)
        ``errors[k - 1]`` is the error when keeping ``k`` coordinates.
    """
    check_is_fitted(estimator)
    return np.array(
        [
            reconstruction_error(estimator, X, n_components=k)
            for k in range(1, estimator.n_components_ + 1)
        ]
    )
