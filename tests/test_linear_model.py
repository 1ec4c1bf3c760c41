import unittest

import numpy as np
from parameterized import parameterized
from sklearn.kernel_ridge import KernelRidge
from sklearn.utils import check_random_state

from skdrr.linear_model import FastKernelRidge


class FastKernelRidgeTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        random_state = check_random_state(0)
        cls.X = random_state.uniform(-1, 1, size=(60, 2))
        cls.y = np.sin(3 * cls.X[:, 0]) + cls.X[:, 1] ** 2
        cls.eps = 1e-10

    def test_single_block_is_kernel_ridge(self):
        # with one block the regression is exact kernel ridge regression
        krr = KernelRidge(alpha=1e-2, kernel="rbf", gamma=2.0).fit(self.X, self.y)
        fast_krr = FastKernelRidge(alpha=1e-2, kernel="rbf", gamma=2.0, n_blocks=1)
        fast_krr.fit(self.X, self.y)
        err = np.max(np.abs(krr.predict(self.X) - fast_krr.predict(self.X)))
        self.assertLessEqual(err, self.eps)

    def test_blocks_partition_samples(self):
        fast_krr = FastKernelRidge(n_blocks=4, random_state=0).fit(self.X, self.y)
        self.assertEqual(len(fast_krr.blocks_), 4)
        self.assertEqual(len(fast_krr.estimators_), 4)
        self.assertTrue(
            np.array_equal(
                np.sort(np.concatenate(fast_krr.blocks_)), np.arange(self.X.shape[0])
            )
        )
        self.assertEqual([len(block) for block in fast_krr.blocks_], [15] * 4)

    def test_prediction_is_block_average(self):
        fast_krr = FastKernelRidge(alpha=1e-2, gamma=2.0, n_blocks=3, random_state=0)
        fast_krr.fit(self.X, self.y)
        expected = np.mean(
            [
                KernelRidge(alpha=1e-2, kernel="rbf", gamma=2.0)
                .fit(self.X[block], self.y[block])
                .predict(self.X)
                for block in fast_krr.blocks_
            ],
            axis=0,
        )
        self.assertTrue(np.allclose(fast_krr.predict(self.X), expected))

    def test_unshuffled_blocks_are_contiguous(self):
        fast_krr = FastKernelRidge(n_blocks=3, shuffle=False).fit(self.X, self.y)
        self.assertTrue(np.array_equal(fast_krr.blocks_[0], np.arange(20)))

    def test_deterministic(self):
        predictions = [
            FastKernelRidge(n_blocks=3, random_state=0).fit(self.X, self.y).predict(self.X)
            for _ in range(2)
        ]
        self.assertTrue(np.array_equal(*predictions))

    def test_multi_output(self):
        Y = np.column_stack([self.y, 2 * self.y])
        prediction = FastKernelRidge(n_blocks=2, random_state=0).fit(self.X, Y).predict(self.X)
        self.assertEqual(prediction.shape, Y.shape)

    def test_fits_smooth_function(self):
        fast_krr = FastKernelRidge(alpha=1e-3, gamma=2.0, n_blocks=2, random_state=0)
        fast_krr.fit(self.X, self.y)
        residual = self.y - fast_krr.predict(self.X)
        self.assertLess(np.linalg.norm(residual), 0.2 * np.linalg.norm(self.y))

    @parameterized.expand([("zero", 0), ("fractional", 2.5), ("too_many", 61)])
    def test_invalid_n_blocks(self, _, n_blocks):
        with self.assertRaises(ValueError):
            FastKernelRidge(n_blocks=n_blocks).fit(self.X, self.y)

    def test_predict_wrong_features(self):
        fast_krr = FastKernelRidge().fit(self.X, self.y)
        with self.assertRaises(ValueError):
            fast_krr.predict(self.X[:, :1])


if __name__ == "__main__":
    unittest.main()
