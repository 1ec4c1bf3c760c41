import numpy as np
from sklearn.model_selection import (
    GridSearchCV,
    KFold,
    PredefinedSplit,
    ShuffleSplit,
)
from sklearn.utils.validation import check_array

from ..utils import check_integer


def _as_candidates(name, values):
    if isinstance(values, np.ndarray):
        candidates = values.ravel().tolist()
    elif isinstance(values, (list, tuple)):
        candidates = list(values)
    else:
        candidates = [values]
    if len(candidates) == 0:
        raise ValueError(f"No candidate values given for {name}")
    return candidates


def build_param_grid(alphas, kernel_params=None, n_blocks=None):
    """Builds the hyperparameter grid searched for every axis.

    The grid is the cross product of the regularization values, every kernel
    parameter and the block count. Scalars are promoted to single candidates.

    Parameters
    ----------
    alphas : float or array-like
        Candidate regularization strengths.
    kernel_params : dict, default=None
        Candidate values of each kernel parameter, keyed by the parameter
        name of the regressor, e.g. ``{"gamma": [0.1, 1.0]}``.
    n_blocks : int, default=None
        Number of blocks of :class:`skdrr.linear_model.FastKernelRidge`. Left
        out of the grid if None.

    Returns
    -------
    param_grid : dict of str to list
        Suitable for :class:`sklearn.model_selection.GridSearchCV`.

    Examples
    --------
    >>> from skdrr.model_selection import build_param_grid
    >>> build_param_grid([0.1, 1.0], {"gamma": 2.0}, n_blocks=4)
    {'alpha': [0.1, 1.0], 'gamma': [2.0], 'n_blocks': [4]}
    """
    param_grid = {"alpha": [float(alpha) for alpha in _as_candidates("alpha", alphas)]}

    for name, values in (kernel_params or {}).items():
        if name in ("alpha", "n_blocks"):
            raise ValueError(f"'{name}' cannot be used as a kernel parameter")
        param_grid[name] = _as_candidates(name, values)

    if n_blocks is not None:
        param_grid["n_blocks"] = [n_blocks]

    return param_grid


def check_cv_config(fast_cv, cv_folds, n_blocks):
    """Validates the cross-validation configuration.

    Parameters
    ----------
    fast_cv : bool
        Whether the single holdout search is used. Otherwise ``cv_folds`` must
        be larger than one.
    cv_folds : int
        Number of folds of the k-fold search, has to be integral in any case.
    n_blocks : int
        Number of blocks of the fast kernel ridge regression, at least one.

    Returns
    -------
    cv_folds, n_blocks : int
        The validated values.
    """
    cv_folds = check_integer(cv_folds, "cv_folds")
    if not fast_cv and cv_folds <= 1:
        raise ValueError("need more than one fold for cross-validation")

    n_blocks = check_integer(n_blocks, "n_blocks", min_value=1)
    return cv_folds, n_blocks


def select_hyperparameters(
    estimator,
    param_grid,
    X,
    y,
    cv_folds=5,
    fast_cv=False,
    X_test=None,
    y_test=None,
    holdout_size=0.25,
    random_state=None,
):
    r"""Selects the grid point with the smallest cross-validated squared error.

    Two strategies are available:

    * k-fold cross-validation (``fast_cv=False``) on unshuffled
      :class:`sklearn.model_selection.KFold` splits. Shuffle the data
      beforehand if its order is not random.
    * a single holdout (``fast_cv=True``). If ``X_test`` and ``y_test`` are given,
      the models are trained on all of ``X`` and validated on the test set,
      otherwise a random fraction ``holdout_size`` of ``X`` is held out.

    Ties are resolved in favour of the first grid point in
    :class:`sklearn.model_selection.ParameterGrid` order. Errors of the
    estimator are raised, not scored.

    Parameters
    ----------
    estimator : object implementing fit/predict
        The scikit-learn compatible regressor to tune.
    param_grid : dict of str to list
        Parameter names of ``estimator`` and their candidate values.
    X : numpy.ndarray of shape (n_samples, n_features)
        Training features.
    y : numpy.ndarray of shape (n_samples,)
        Training targets.
    cv_folds : int, default=5
        Number of folds of the k-fold search.
    fast_cv : bool, default=False
        Whether to use a single holdout.
    X_test : numpy.ndarray of shape (n_test_samples, n_features), default=None
        Separate validation features for the holdout search.
    y_test : numpy.ndarray of shape (n_test_samples,), default=None
        Separate validation targets for the holdout search.
    holdout_size : float or int, default=0.25
        Size of the random holdout if no test set is given.
    random_state : int or :class:`numpy.random.RandomState` instance, default=None
        Controls the random holdout split.

    Returns
    -------
    best_params : dict
        The selected parameters.
    best_score : float
        The validation score of ``best_params``, a negative mean squared error.
    """
    if not fast_cv:
        cv = KFold(n_splits=cv_folds)
    elif X_test is None:
        cv = ShuffleSplit(
            n_splits=1, test_size=holdout_size, random_state=random_state
        )
    else:
        if y_test is None:
            raise ValueError("y_test is required together with X_test")
        X_test = check_array(X_test)
        y_test = check_array(y_test, ensure_2d=False)
        test_fold = np.concatenate(
            [np.full(X.shape[0], -1), np.zeros(X_test.shape[0], dtype=int)]
        )
        X = np.concatenate([X, X_test])
        y = np.concatenate([y, y_test])
        cv = PredefinedSplit(test_fold)

    search = GridSearchCV(
        estimator,
        param_grid,
        scoring="neg_mean_squared_error",
        cv=cv,
        refit=False,
        error_score="raise",
    ).fit(X, y)

    return search.best_params_, float(search.best_score_)
