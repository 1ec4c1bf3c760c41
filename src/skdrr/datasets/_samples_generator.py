import numpy as np
from sklearn.utils import check_random_state


def make_helix(n_samples=200, noise=(0.1, 1.4), shuffle=True, random_state=None):
    r"""Generates a noisy helix in three dimensions.

    The points

    .. math::
        (3 \cos t, 3 \sin t, 2 t), \qquad t \in [0, 4\pi]

    are sampled at evenly spaced :math:`t` and perturbed by Gaussian noise whose
    standard deviation grows linearly along the helix, a one-dimensional curve
    that PCA cannot summarise with a single component.

    Parameters
    ----------
    n_samples : int, default=200
        Number of points.
    noise : tuple of two floats, default=(0.1, 1.4)
        Standard deviation of the noise at the start and at the end of the helix.
    shuffle : bool, default=True
        Whether to shuffle the samples. The k-fold search of
        :class:`skdrr.decomposition.DRR` does not shuffle, so unshuffled points
        give poorly balanced folds.
    random_state : int or :class:`numpy.random.RandomState` instance, default=None
        Determines the noise and the shuffling. Pass an int for reproducible
        output across multiple function calls.

    Returns
    -------
    X : numpy.ndarray of shape (n_samples, 3)
        The points.
    t : numpy.ndarray of shape (n_samples,)
        The position of each point along the helix.

    Examples
    --------
    >>> from skdrr.datasets import make_helix
    >>> X, t = make_helix(n_samples=50, random_state=0)
    >>> X.shape, t.shape
    ((50, 3), (50,))
    """
    generator = check_random_state(random_state)

    t = np.linspace(0, 4 * np.pi, n_samples)
    sd = np.linspace(noise[0], noise[1], n_samples)

    X = np.column_stack([3 * np.cos(t), 3 * np.sin(t), 2 * t])
    X += generator.normal(size=X.shape) * sd[:, np.newaxis]

    if shuffle:
        order = generator.permutation(n_samples)
        X, t = X[order], t[order]

    return X, t
