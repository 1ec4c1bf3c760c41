import logging
import warnings

import numpy as np
from joblib import Parallel, delayed
from sklearn.base import BaseEstimator, TransformerMixin, clone
from sklearn.utils import Bunch, check_array
from sklearn.utils.validation import FLOAT_DTYPES, check_is_fitted, validate_data

from ..linear_model import FastKernelRidge
from ..model_selection import build_param_grid, check_cv_config, select_hyperparameters
from ..preprocessing import LinearPreprocessor
from ..utils import check_integer, check_regressor, get_progress_bar, resolve_kernel


logger = logging.getLogger(__name__)


def _fit_axis(regressor, param_grid, alpha, alpha_test, axis, search_params):
    """Tunes and fits the regression of ``alpha[:, axis]`` on the preceding axes.

    Returns the fitted model, the selected parameters, their validation score and
    the residual column of the embedding.
    """
    X, y = alpha[:, :axis], alpha[:, axis]
    if alpha_test is None:
        X_test = y_test = None
    else:
        X_test, y_test = alpha_test[:, :axis], alpha_test[:, axis]

    best_params, best_score = select_hyperparameters(
        regressor, param_grid, X, y, X_test=X_test, y_test=y_test, **search_params
    )

    model = clone(regressor).set_params(**best_params).fit(X, y)
    return model, best_params, best_score, y - model.predict(X)


class DRR(TransformerMixin, BaseEstimator):
    r"""Dimensionality Reduction via Regression, as described in [Laparra2015]_.

    The data are first rotated into their principal component basis,
    :math:`\alpha = ((x - c) / s) V`. PCA keeps :math:`\alpha` as the reduced
    representation, DRR instead removes from every component what can be
    predicted from the components of higher variance,

    .. math::

        y_i = \alpha_i - f_i(\alpha_1, \ldots, \alpha_{i-1}), \qquad i = 2, \ldots, d

    where each :math:`f_i` is a kernel ridge regression whose hyperparameters are
    selected by cross-validation over the grid spanned by ``alphas`` and
    ``kernel_params``. The reduced representation is
    :math:`(\alpha_1, y_2, \ldots, y_d)`. Since the regressions only depend on
    lower axes, the transformation is inverted axis by axis,

    .. math::

        \alpha_i = y_i + f_i(\alpha_1, \ldots, \alpha_{i-1}),

    followed by the inverse rotation. If fewer dimensions than features are
    estimated (``n_components < n_features``), there are fewer regression
    functions than components and the inverse is incomplete.

    Parameters
    ----------
    n_components : int, default=None
        Number of output dimensions, i.e. of regression functions plus one. At
        most ``min(n_samples, n_features)``. If None, all features are kept.

    alphas : array-like, default=(0, 1e-3, 1e-2, 1e-1, 1, 10, 100)
        Candidate regularization strengths of the kernel ridge regressions.

    kernel : str or callable, default="rbf"
        Kernel of the regressions. Besides the names understood by
        :func:`sklearn.metrics.pairwise.pairwise_kernels`, the kernlab names
        ``"rbfdot"``, ``"polydot"``, ``"vanilladot"`` and ``"tanhdot"`` are
        accepted, see :func:`skdrr.utils.resolve_kernel`. Ignored if a
        ``regressor`` is given.

    kernel_params : dict, default=None
        Candidate values of the kernel parameters, e.g.
        ``{"gamma": [0.1, 1.0, 10.0]}``. Every combination with ``alphas`` is
        cross-validated. If None, ``gamma`` takes the values ``10**(-3..4)`` for
        the RBF kernel and no parameters are searched otherwise.

    pca : bool, default=True
        Whether to rotate the data into the principal component basis first.

    pca_center : bool, default=True
        Whether to center the data before the principal component analysis.

    pca_scale : bool, default=False
        Whether to scale the data to unit variance before the principal
        component analysis.

    fast_cv : bool, default=False
        If True, hyperparameters are chosen on a single holdout set instead of
        by k-fold cross-validation.

    cv_folds : int, default=5
        Number of folds of the k-fold cross-validation, larger than one unless
        ``fast_cv`` is set. The folds are not shuffled, so shuffle the data if
        their order is not random.

    fast_cv_test : numpy.ndarray of shape (n_test_samples, n_features), default=None
        Separate validation data in the original feature space for the holdout
        search. Projected with the fitted preprocessing, it provides the
        validation set of every axis. Only used if ``fast_cv`` is True.

    holdout_size : float or int, default=0.25
        Size of the random holdout used by the fast search when no
        ``fast_cv_test`` is given.

    n_blocks : int, default=4
        Number of blocks of :class:`skdrr.linear_model.FastKernelRidge`. Higher
        numbers are faster to compute but less accurate.

    regressor : object implementing fit/predict, default=None
        Regressor used for every axis. Its parameters named in ``alphas``
        (``alpha``), ``kernel_params`` and, if it has one, ``n_blocks`` are
        searched. If None, :class:`skdrr.linear_model.FastKernelRidge` is used.

    verbose : bool, default=False
        If True, progress is logged at ``INFO`` level, otherwise at ``DEBUG``
        level, through the ``skdrr.decomposition._drr`` logger.

    progress_bar : bool, default=False
        Option to use `tqdm <https://tqdm.github.io/>`_ progress bar to monitor
        the construction of the axes.

    n_jobs : int, default=None
        Number of axes built in parallel. The axes only depend on the rotated
        data, not on each other.
        :obj:`None` means 1 unless in a :obj:`joblib.parallel_backend` context.
        ``-1`` means using all processors.

    random_state : int or :class:`numpy.random.RandomState` instance, default=None
        Controls the block partition of the regressions and the random holdout.
        Pass an int for reproducible output across multiple function calls.

    Attributes
    ----------
    n_components_ : int
        Number of output dimensions.

    center_ : numpy.ndarray of shape (n_features,)
        The center subtracted before the rotation.

    scale_ : numpy.ndarray of shape (n_features,)
        The scale divided out before the rotation.

    rotation_ : numpy.ndarray of shape (n_features, n_rotations)
        The rotation into the principal component basis.

    preprocessor_ : :class:`skdrr.preprocessing.LinearPreprocessor`
        The fitted linear preprocessing holding ``center_``, ``scale_`` and
        ``rotation_``.

    models_ : list of length n_components_
        The regressor of each axis. The first entry is None, as the first axis is
        passed through unchanged.

    best_params_ : list of length n_components_
        The hyperparameters selected for each axis, None for the first one.

    best_scores_ : numpy.ndarray of shape (n_components_,)
        Validation score (negative mean squared error) of the selected
        hyperparameters, NaN for the first axis.

    embedding_ : numpy.ndarray of shape (n_samples, n_components_)
        The training data in reduced dimensions.

    Examples
    --------
    >>> import numpy as np
    >>> from skdrr.datasets import make_helix
    >>> from skdrr.decomposition import DRR
    >>> X, _ = make_helix(n_samples=60, random_state=0)
    >>> drr = DRR(
    ...     n_components=3,
    ...     alphas=[1e-2, 1e-1],
    ...     kernel_params={"gamma": [0.1, 1.0]},
    ...     cv_folds=3,
    ...     n_blocks=2,
    ...     random_state=0,
    ... ).fit(X)
    >>> drr.embedding_.shape
    (60, 3)
    >>> drr.models_[0] is None
    True
    >>> X_reconstructed = drr.inverse_transform(drr.transform(X))
    >>> bool(np.allclose(X_reconstructed, X))
    True
    """

    def __init__(
        self,
        n_components=None,
        alphas=(0.0, 1e-3, 1e-2, 1e-1, 1.0, 10.0, 100.0),
        kernel="rbf",
        kernel_params=None,
        pca=True,
        pca_center=True,
        pca_scale=False,
        fast_cv=False,
        cv_folds=5,
        fast_cv_test=None,
        holdout_size=0.25,
        n_blocks=4,
        regressor=None,
        verbose=False,
        progress_bar=False,
        n_jobs=None,
        random_state=None,
    ):
        self.n_components = n_components
        self.alphas = alphas
        self.kernel = kernel
        self.kernel_params = kernel_params
        self.pca = pca
        self.pca_center = pca_center
        self.pca_scale = pca_scale
        self.fast_cv = fast_cv
        self.cv_folds = cv_folds
        self.fast_cv_test = fast_cv_test
        self.holdout_size = holdout_size
        self.n_blocks = n_blocks
        self.regressor = regressor
        self.verbose = verbose
        self.progress_bar = progress_bar
        self.n_jobs = n_jobs
        self.random_state = random_state

    def _check_regressor(self, n_blocks):
        if self.regressor is not None:
            regressor = clone(check_regressor(self.regressor))
            kernel_params = self.kernel_params
        else:
            kernel, kernel_params = resolve_kernel(self.kernel, self.kernel_params)
            if self.kernel_params is None and kernel == "rbf":
                kernel_params = {"gamma": [10.0**k for k in range(-3, 5)]}
            regressor = FastKernelRidge(
                kernel=kernel, n_blocks=n_blocks, random_state=self.random_state
            )

        param_grid = build_param_grid(
            self.alphas,
            kernel_params,
            n_blocks=n_blocks if "n_blocks" in regressor.get_params() else None,
        )
        return regressor, param_grid

    def fit(self, X, y=None):
        """Builds the regression of every axis.

        All parameters are validated before any computation starts.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            Training data. The k-fold search does not shuffle, so the rows
            should be in random order.

        y : None
            Ignored.

        Returns
        -------
        self : object
            Returns the instance itself.
        """
        X = validate_data(self, X, dtype=FLOAT_DTYPES)
        n_samples, n_features = X.shape

        if self.n_components is None:
            n_components = n_features
        else:
            n_components = check_integer(
                self.n_components, "n_components", min_value=1
            )
        if n_components > min(n_samples, n_features):
            raise ValueError(
                f"n_components={n_components} is too large, the maximum number of "
                f"dimensions is min(n_samples, n_features) = "
                f"{min(n_samples, n_features)}"
            )

        cv_folds, n_blocks = check_cv_config(self.fast_cv, self.cv_folds, self.n_blocks)
        regressor, param_grid = self._check_regressor(n_blocks)

        X_test = None
        if self.fast_cv and self.fast_cv_test is not None:
            X_test = check_array(self.fast_cv_test, dtype=FLOAT_DTYPES)
            if X_test.shape[1] != n_features:
                raise ValueError(
                    f"fast_cv_test has {X_test.shape[1]} features, but DRR is "
                    f"fitted on {n_features} features"
                )

        report_progress = get_progress_bar(self.progress_bar)

        if n_components < n_features:
            warnings.warn(
                "n_components < n_features, the inverse functions will be "
                "incomplete!",
                stacklevel=2,
            )

        preprocessor = LinearPreprocessor(
            rotate=self.pca, center=self.pca_center, scale=self.pca_scale
        ).fit(X)
        alpha = preprocessor.transform(X)
        alpha_test = None if X_test is None else preprocessor.transform(X_test)

        level = logging.INFO if self.verbose else logging.DEBUG
        axes = list(range(n_components - 1, 0, -1))

        def announce(axes):
            for axis in axes:
                logger.log(
                    level,
                    "Constructing axis %d/%d",
                    n_components - axis,
                    n_components,
                )
                yield axis

        search_params = dict(
            cv_folds=cv_folds,
            fast_cv=self.fast_cv,
            holdout_size=self.holdout_size,
            random_state=self.random_state,
        )
        results = Parallel(n_jobs=self.n_jobs)(
            delayed(_fit_axis)(
                regressor, param_grid, alpha, alpha_test, axis, search_params
            )
            for axis in report_progress(announce(axes), total=len(axes))
        )

        models = [None] * n_components
        best_params = [None] * n_components
        best_scores = np.full(n_components, np.nan)
        embedding = np.empty((n_samples, n_components))

        for axis, (model, params, score, residual) in zip(axes, results):
            logger.log(
                level,
                "Axis %d/%d: predictors %s, dependent %d, selected %s (score %.6g)",
                n_components - axis,
                n_components,
                list(range(axis)),
                axis,
                params,
                score,
            )
            models[axis] = model
            best_params[axis] = params
            best_scores[axis] = score
            embedding[:, axis] = residual

        # the first axis has no regression
        logger.log(level, "Constructing axis %d/%d", n_components, n_components)
        embedding[:, 0] = alpha[:, 0]

        self.n_components_ = n_components
        self.preprocessor_ = preprocessor
        self.center_ = preprocessor.center_
        self.scale_ = preprocessor.scale_
        self.rotation_ = preprocessor.rotation_
        self.models_ = models
        self.best_params_ = best_params
        self.best_scores_ = best_scores
        self.embedding_ = embedding
        return self

    def fit_transform(self, X, y=None):
        """Fits the model and returns the embedding of ``X``.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            Training data.

        y : None
            Ignored.

        Returns
        -------
        T : numpy.ndarray of shape (n_samples, n_components_)
        """
        return self.fit(X).embedding_.copy()

    def transform(self, X):
        """Maps data into the reduced dimensions.

        For every axis :math:`i > 1` the prediction of its regression on the lower
        axes is subtracted, the first axis is kept.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            New data, where n_samples is the number of samples
            and n_features is the number of features.

        Returns
        -------
        T : numpy.ndarray of shape (n_samples, n_components_)
        """
        check_is_fitted(self, ["preprocessor_", "models_"])
        X = validate_data(self, X, reset=False, dtype=FLOAT_DTYPES)

        alpha = self.preprocessor_.transform(X)

        T = np.empty((X.shape[0], self.n_components_))
        for axis in range(self.n_components_ - 1, 0, -1):
            T[:, axis] = alpha[:, axis] - self.models_[axis].predict(alpha[:, :axis])
        T[:, 0] = alpha[:, 0]

        return T

    def inverse_transform(self, T):
        r"""Transforms reduced data back to the original space.

        Reconstructs :math:`\alpha_i = y_i + f_i(\alpha_1, \ldots, \alpha_{i-1})`
        for increasing :math:`i` and reverses the rotation, scaling and
        centering. Columns missing from ``T`` are taken to be zero, i.e. the
        corresponding residuals are assumed to vanish, so truncated data are
        mapped onto the learned manifold. Components beyond ``n_components_`` have
        no regression and are taken from ``T`` unchanged.

        Parameters
        ----------
        T : numpy.ndarray of shape (n_samples, k)
            Reduced data, ``k`` at most the number of columns of ``rotation_``.

        Returns
        -------
        X : numpy.ndarray of shape (n_samples, n_features)
        """
        check_is_fitted(self, ["preprocessor_", "models_"])
        T = check_array(T, dtype=FLOAT_DTYPES)

        n_rotations = self.rotation_.shape[1]
        if T.shape[1] > n_rotations:
            raise ValueError(
                f"Got {T.shape[1]} components, but the model has at most "
                f"{n_rotations}"
            )
        T = np.pad(T, [(0, 0), (0, n_rotations - T.shape[1])])

        alpha = T.copy()
        for axis in range(1, self.n_components_):
            alpha[:, axis] = T[:, axis] + self.models_[axis].predict(alpha[:, :axis])

        return self.preprocessor_.inverse_transform(alpha)


def drr(X, **params):
    """Fits :class:`DRR` and returns the result as a bundle.

    Parameters
    ----------
    X : numpy.ndarray of shape (n_samples, n_features)
        Input data.
    **params
        Parameters of :class:`DRR`.

    Returns
    -------
    result : :class:`sklearn.utils.Bunch`
        Dictionary-like object, with the following attributes:

        fitted_data : `numpy.ndarray` --
        the data in reduced dimensions.

        pca_means : `numpy.ndarray` --
        the means used to center the original data.

        pca_scale : `numpy.ndarray` --
        the standard deviations used to scale the original data.

        pca_rotation : `numpy.ndarray` --
        the rotation matrix of the PCA.

        models : `list` --
        the regression of each dimension, None for the first one.

        apply : `callable` --
        maps new data to the reduced dimensions.

        inverse : `callable` --
        maps (possibly truncated) reduced data back to the original space.

        estimator : :class:`DRR` --
        the fitted estimator.
    """
    estimator = DRR(**params).fit(X)
    return Bunch(
        fitted_data=estimator.embedding_,
        pca_means=estimator.center_,
        pca_scale=estimator.scale_,
        pca_rotation=estimator.rotation_,
        models=estimator.models_,
        apply=estimator.transform,
        inverse=estimator.inverse_transform,
        estimator=estimator,
    )
