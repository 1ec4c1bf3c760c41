import numpy as np
from scipy import linalg
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils import check_array
from sklearn.utils.extmath import svd_flip
from sklearn.utils.validation import FLOAT_DTYPES, check_is_fitted, validate_data


class StandardFlexibleScaler(TransformerMixin, BaseEstimator):
    """Standardize features by removing the mean and scaling to unit variance.

    The standard score of a sample `x` is calculated as:

        z = (x - u) / s

    where `u` is the mean of the samples if `with_mean`, otherwise zero,
    and `s` is the standard deviation of the samples if `with_std` or one.

    The statistics are computed either for each feature separately
    (`column_wise=True`), as :class:`sklearn.preprocessing.StandardScaler` does,
    or for the whole matrix (`column_wise=False`), which preserves the ratio
    between the scales of the features.

    Parameters
    ----------
    with_mean: bool, default=True
        If True, center the data before scaling. If False, keep the mean intact

    with_std: bool, default=True
        If True, scale the data to unit variance. If False, keep the variance intact

    column_wise: bool, default=False
        If True, normalize each column separately. If False, normalize the whole
        matrix with respect to its total variance.

    ddof: int, default=0
        Delta degrees of freedom of the variance. ``ddof=1`` gives the sample
        standard deviation used by R's ``prcomp``.

    rtol: float, default=0
        The relative tolerance for the optimization: variance is
        considered zero when it is less than abs(mean) * rtol + atol.

    atol: float, default=1.0E-12
        The absolute tolerance for the optimization: variance is
        considered zero when it is less than abs(mean) * rtol + atol.

    Attributes
    ----------
    n_samples_in_: int
        Number of samples in the reference ndarray

    n_features_in_: int
        Number of features in the reference ndarray

    mean_ : numpy.ndarray of shape (n_features,)
        The mean value for each feature in the training set.
        Equal to ndarray of zeros shape (n_features,) when ``with_mean=False``.

    scale_ : numpy.ndarray of shape (n_features,)
        The scaling factor of each feature. All entries are equal when
        ``column_wise=False`` and equal to one when ``with_std=False``.

    Examples
    --------
    >>> import numpy as np
    >>> from skdrr.preprocessing import StandardFlexibleScaler
    >>> X = np.array([[1.0, -2.0, 2.0], [-2.0, 1.0, 3.0], [4.0, 1.0, -2.0]])
    >>> scaler = StandardFlexibleScaler(column_wise=True).fit(X)
    >>> scaler.mean_
    array([1., 0., 1.])
    >>> np.allclose(scaler.inverse_transform(scaler.transform(X)), X)
    True
    """

    def __init__(
        self,
        with_mean=True,
        with_std=True,
        column_wise=False,
        ddof=0,
        rtol=0,
        atol=1e-12,
    ):
        self.with_mean = with_mean
        self.with_std = with_std
        self.column_wise = column_wise
        self.ddof = ddof
        self.rtol = rtol
        self.atol = atol

    def fit(self, X, y=None):
        """Compute mean and scaling to be applied for subsequent normalization.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            The data used to compute the mean and standard deviation
            used for later scaling along the features axis.

        y: None
            Ignored.

        Returns
        -------
        self : object
            Fitted scaler.
        """
        X = validate_data(
            self,
            X,
            dtype=FLOAT_DTYPES,
            ensure_min_samples=1 + self.ddof if self.with_std else 1,
        )
        self.n_samples_in_, self.n_features_in_ = X.shape

        X_mean = X.mean(axis=0)
        if self.with_mean:
            self.mean_ = X_mean
        else:
            self.mean_ = np.zeros(self.n_features_in_)

        self.scale_ = np.ones(self.n_features_in_)
        if self.with_std:
            var = ((X - X_mean) ** 2).sum(axis=0) / (self.n_samples_in_ - self.ddof)

            if self.column_wise:
                if np.any(var < self.atol + abs(X_mean) * self.rtol):
                    raise ValueError("Cannot normalize a feature with zero variance")
                self.scale_ = np.sqrt(var)
            else:
                var_sum = var.sum()
                if var_sum < abs(np.average(X_mean)) * self.rtol + self.atol:
                    raise ValueError("Cannot normalize a matrix with zero variance")
                self.scale_ *= np.sqrt(var_sum)

        return self

    def transform(self, X, y=None):
        """Normalize a matrix based on previously computed mean and scaling."""
        check_is_fitted(self, attributes=["mean_", "scale_"])
        X = validate_data(self, X, reset=False, dtype=FLOAT_DTYPES)
        return (X - self.mean_) / self.scale_

    def inverse_transform(self, X_tr):
        """Scale back the data to the original representation."""
        check_is_fitted(self, attributes=["mean_", "scale_"])
        X_tr = check_array(X_tr, dtype=FLOAT_DTYPES)
        return X_tr * self.scale_ + self.mean_


class LinearPreprocessor(TransformerMixin, BaseEstimator):
    r"""Centers, scales and rotates data into its principal component basis.

    This is the linear first stage of DRR, :math:`\alpha = ((x - c) / s) V`,
    where :math:`c` and :math:`s` are the per-feature center and scale and
    :math:`V` are the right singular vectors of the standardized training data.
    Scaling uses the sample standard deviation, as R's ``prcomp`` does.

    With ``rotate=False`` the preprocessor is the identity: the center is zero,
    the scale is one and the rotation is the identity matrix.

    Parameters
    ----------
    rotate : bool, default=True
        Whether to rotate into the principal component basis. If False,
        ``center`` and ``scale`` are ignored as well.
    center : bool, default=True
        Whether to subtract the feature means before the decomposition.
    scale : bool, default=False
        Whether to divide by the feature standard deviations before the
        decomposition.

    Attributes
    ----------
    center_ : numpy.ndarray of shape (n_features,)
        The subtracted center, zeros if ``center=False``.
    scale_ : numpy.ndarray of shape (n_features,)
        The dividing scale, ones if ``scale=False``.
    rotation_ : numpy.ndarray of shape (n_features, n_rotations)
        Orthonormal columns spanning the principal directions, ordered by
        decreasing variance. ``n_rotations`` is ``min(n_samples, n_features)``
        when rotating and ``n_features`` otherwise.
    singular_values_ : numpy.ndarray of shape (n_rotations,)
        Singular values of the standardized data, only set when rotating.
    explained_variance_ : numpy.ndarray of shape (n_rotations,)
        Variance along each principal direction, only set when rotating.
    explained_variance_ratio_ : numpy.ndarray of shape (n_rotations,)
        Fraction of the total variance along each principal direction, only set
        when rotating.

    Examples
    --------
    >>> import numpy as np
    >>> from skdrr.preprocessing import LinearPreprocessor
    >>> X = np.array([[1.0, -2.0, 2.0], [-2.0, 1.0, 3.0], [4.0, 1.0, -2.0]])
    >>> preprocessor = LinearPreprocessor().fit(X)
    >>> preprocessor.rotation_.shape
    (3, 3)
    >>> np.allclose(preprocessor.rotation_.T @ preprocessor.rotation_, np.eye(3))
    True
    >>> np.allclose(preprocessor.inverse_transform(preprocessor.transform(X)), X)
    True
    """

    def __init__(self, rotate=True, center=True, scale=False):
        self.rotate = rotate
        self.center = center
        self.scale = scale

    def fit(self, X, y=None):
        """Computes the center, scale and rotation.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            Training data.

        y: None
            Ignored.

        Returns
        -------
        self : object
            Fitted preprocessor.
        """
        X = validate_data(self, X, dtype=FLOAT_DTYPES)
        self.n_samples_in_, self.n_features_in_ = X.shape

        if not self.rotate:
            self.center_ = np.zeros(self.n_features_in_)
            self.scale_ = np.ones(self.n_features_in_)
            self.rotation_ = np.eye(self.n_features_in_)
            return self

        scaler = StandardFlexibleScaler(
            with_mean=self.center, with_std=self.scale, column_wise=True, ddof=1
        ).fit(X)
        self.center_ = scaler.mean_
        self.scale_ = scaler.scale_

        U, S, Vt = linalg.svd(
            (X - self.center_) / self.scale_, full_matrices=False, check_finite=False
        )
        # deterministic output of SVD
        U, Vt = svd_flip(U, Vt)

        self.rotation_ = Vt.T
        self.singular_values_ = S
        self.explained_variance_ = S**2 / max(self.n_samples_in_ - 1, 1)
        total_variance = self.explained_variance_.sum()
        if total_variance > 0:
            self.explained_variance_ratio_ = self.explained_variance_ / total_variance
        else:
            self.explained_variance_ratio_ = np.zeros_like(self.explained_variance_)

        return self

    def transform(self, X):
        """Projects ``X`` into the principal component basis.

        Parameters
        ----------
        X : numpy.ndarray of shape (n_samples, n_features)
            New data.

        Returns
        -------
        alpha : numpy.ndarray of shape (n_samples, n_rotations)
        """
        check_is_fitted(self, ["center_", "scale_", "rotation_"])
        X = validate_data(self, X, reset=False, dtype=FLOAT_DTYPES, copy=True)

        if not self.rotate:
            return X
        return ((X - self.center_) / self.scale_) @ self.rotation_

    def inverse_transform(self, alpha):
        """Maps (possibly truncated) principal coordinates back to feature space.

        Parameters
        ----------
        alpha : numpy.ndarray of shape (n_samples, k)
            Coordinates in the principal component basis, ``k`` at most
            ``n_rotations``. Missing trailing columns are taken to be zero.

        Returns
        -------
        X : numpy.ndarray of shape (n_samples, n_features)
        """
        check_is_fitted(self, ["center_", "scale_", "rotation_"])
        alpha = check_array(alpha, dtype=FLOAT_DTYPES)

        n_rotations = self.rotation_.shape[1]
        if alpha.shape[1] > n_rotations:
            raise ValueError(
                f"Got {alpha.shape[1]} coordinates, but the rotation only has "
                f"{n_rotations} components"
            )
        alpha = np.pad(alpha, [(0, 0), (0, n_rotations - alpha.shape[1])])

        return (alpha @ self.rotation_.T) * self.scale_ + self.center_
