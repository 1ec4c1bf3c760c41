import unittest

import numpy as np

from skdrr.datasets import make_helix
from skdrr.decomposition import DRR
from skdrr.metrics import (
    pointwise_reconstruction_error,
    reconstruction_error,
    truncated_reconstruction_errors,
)


class ReconstructionErrorTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.X, _ = make_helix(n_samples=60, random_state=0)
        cls.drr = DRR(
            alphas=[1e-2, 1.0],
            kernel_params={"gamma": [0.01, 0.1]},
            cv_folds=3,
            n_blocks=1,
        ).fit(cls.X)
        cls.eps = 1e-8

    def test_pointwise_shape(self):
        errors = pointwise_reconstruction_error(self.drr, self.X, n_components=1)
        self.assertEqual(errors.shape, (self.X.shape[0],))
        self.assertTrue(np.all(errors >= 0))

    def test_full_reconstruction(self):
        err = reconstruction_error(self.drr, self.X)
        self.assertLessEqual(
            err, self.eps, f"error {err} surpasses threshold for zero {self.eps}"
        )

    def test_rms_of_pointwise(self):
        pointwise = pointwise_reconstruction_error(self.drr, self.X, n_components=2)
        self.assertAlmostEqual(
            reconstruction_error(self.drr, self.X, n_components=2),
            np.sqrt(np.mean(pointwise**2)),
        )

    def test_truncated_errors(self):
        errors = truncated_reconstruction_errors(self.drr, self.X)
        self.assertEqual(errors.shape, (3,))
        self.assertAlmostEqual(
            errors[0], reconstruction_error(self.drr, self.X, n_components=1)
        )
        self.assertLessEqual(errors[-1], self.eps)

    def test_invalid_n_components(self):
        for n_components in [0, 4]:
            with self.subTest(n_components=n_components):
                with self.assertRaises(ValueError):
                    reconstruction_error(self.drr, self.X, n_components=n_components)


if __name__ == "__main__":
    unittest.main()
