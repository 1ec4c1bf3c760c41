import numpy as np
from sklearn.base import BaseEstimator, MultiOutputMixin, RegressorMixin
from sklearn.kernel_ridge import KernelRidge
from sklearn.model_selection import KFold
from sklearn.utils.validation import check_is_fitted, validate_data

from ..utils import check_integer


class FastKernelRidge(MultiOutputMixin, RegressorMixin, BaseEstimator):
    r"""Block-approximate kernel ridge regression.

    The training samples are partitioned into ``n_blocks`` disjoint blocks of
    (almost) equal size. On each block :math:`b` an independent kernel ridge
    regression is fitted,

    .. math::

        \mathbf{w}_b = (\mathbf{K}_b + \lambda \mathbf{I})^{-1} \mathbf{y}_b,

    and predictions are the average over the blocks,

    .. math::

        \hat{y}(x) = \frac{1}{B} \sum_{b=1}^{B} \mathbf{k}_b(x)^T \mathbf{w}_b .

    Solving :math:`B` systems of size :math:`n/B` instead of one of size :math:`n`
    divides the cost of the fit by roughly :math:`B^2`, at the price of some
    accuracy. With ``n_blocks=1`` this is exactly
    :class:`sklearn.kernel_ridge.KernelRidge`.

    Parameters
    ----------
    alpha : float, default=1.0
        Regularization strength :math:`\lambda` of each block.
    kernel : str or callable, default="rbf"
        Kernel, see :func:`sklearn.metrics.pairwise.pairwise_kernels`.
    gamma : float, default=None
        Kernel coefficient for rbf, laplacian, polynomial, sigmoid and chi2
        kernels.
    degree : int, default=3
        Degree of the polynomial kernel.
    coef0 : float, default=1
        Zero coefficient for polynomial and sigmoid kernels.
    kernel_params : dict, default=None
        Additional parameters for a callable kernel.
    n_blocks : int, default=1
        Number of blocks, at most the number of training samples.
    shuffle : bool, default=True
        Whether to shuffle the samples before splitting them into blocks.
    random_state : int or :class:`numpy.random.RandomState` instance, default=None
        Controls the shuffling. Pass an int for reproducible output across
        multiple function calls.

    Attributes
    ----------
    estimators_ : list of :class:`sklearn.kernel_ridge.KernelRidge`
        The fitted regressor of each block.
    blocks_ : list of numpy.ndarray
        Training sample indices of each block.

    Examples
    --------
    >>> import numpy as np
    >>> from skdrr.linear_model import FastKernelRidge
    >>> X = np.linspace(0, 1, 40).reshape(-1, 1)
    >>> y = np.sin(2 * np.pi * X[:, 0])
    >>> krr = FastKernelRidge(alpha=1e-3, gamma=10.0, n_blocks=2, random_state=0)
    >>> krr.fit(X, y).predict(X).shape
    (40,)
    >>> [len(block) for block in krr.blocks_]
    [20, 20]
    """

    def __init__(
        self,
        alpha=1.0,
        kernel="rbf",
        gamma=None,
        degree=3,
        coef0=1,
        kernel_params=None,
        n_blocks=1,
        shuffle=True,
        random_state=None,
    ):
        self.alpha = alpha
        self.kernel = kernel
        self.gamma = gamma
        self.degree = degree
        self.coef0 = coef0
        self.kernel_params = kernel_params
        self.n_blocks = n_blocks
        self.shuffle = shuffle
        self.random_state = random_state

    def fit(self, X, y):
        """
        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            Training data, where n_samples is the number of samples
            and n_features is the number of features.
        y : numpy.ndarray of shape (n_samples,) or (n_samples, n_targets)
            Target values.

        Returns
        -------
        self : object
            Returns the instance itself.
        """
        X, y = validate_data(self, X, y, y_numeric=True, multi_output=True)
        self.n_samples_in_ = X.shape[0]

        n_blocks = check_integer(self.n_blocks, "n_blocks", min_value=1)
        if n_blocks > self.n_samples_in_:
            raise ValueError(
                f"n_blocks={n_blocks} cannot be larger than the number of "
                f"samples ({self.n_samples_in_})"
            )

        if n_blocks == 1:
            self.blocks_ = [np.arange(self.n_samples_in_)]
        else:
            splitter = KFold(
                n_splits=n_blocks,
                shuffle=self.shuffle,
                random_state=self.random_state if self.shuffle else None,
            )
            self.blocks_ = [block for _, block in splitter.split(X)]

        self.estimators_ = [
            KernelRidge(
                alpha=self.alpha,
                kernel=self.kernel,
                gamma=self.gamma,
                degree=self.degree,
                coef0=self.coef0,
                kernel_params=self.kernel_params,
            ).fit(X[block], y[block])
            for block in self.blocks_
        ]
        return self

    def predict(self, X):
        """Averages the predictions of the block regressors.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            Samples to predict.

        Returns
        -------
        y : numpy.ndarray of shape (n_samples,) or (n_samples, n_targets)
        """
        check_is_fitted(self, ["estimators_"])
        X = validate_data(self, X, reset=False)

        return np.mean([estimator.predict(X) for estimator in self.estimators_], axis=0)
