import unittest

import numpy as np
from parameterized import parameterized
from sklearn.kernel_ridge import KernelRidge
from sklearn.linear_model import Ridge
from sklearn.metrics import mean_squared_error
from sklearn.utils import check_random_state

from skdrr.model_selection import (
    build_param_grid,
    check_cv_config,
    select_hyperparameters,
)


class ParamGridTests(unittest.TestCase):
    def test_cross_product_keys(self):
        param_grid = build_param_grid([0.1, 1.0], {"gamma": [1.0, 2.0, 3.0]}, 4)
        self.assertEqual(
            param_grid,
            {"alpha": [0.1, 1.0], "gamma": [1.0, 2.0, 3.0], "n_blocks": [4]},
        )

    def test_scalars_promoted(self):
        param_grid = build_param_grid(0.5, {"degree": 3})
        self.assertEqual(param_grid, {"alpha": [0.5], "degree": [3]})

    def test_numpy_candidates(self):
        param_grid = build_param_grid(10.0 ** np.arange(-2, 1), {"gamma": np.ones(2)})
        self.assertTrue(np.allclose(param_grid["alpha"], [0.01, 0.1, 1.0]))
        self.assertIsInstance(param_grid["alpha"], list)
        self.assertEqual(param_grid["gamma"], [1.0, 1.0])

    def test_without_kernel_params(self):
        self.assertEqual(build_param_grid([1.0]), {"alpha": [1.0]})

    @parameterized.expand(
        [
            ("no_alphas", [], None),
            ("no_gamma", [1.0], {"gamma": []}),
            ("alpha_as_kernel_param", [1.0], {"alpha": [1.0]}),
        ]
    )
    def test_invalid(self, _, alphas, kernel_params):
        with self.assertRaises(ValueError):
            build_param_grid(alphas, kernel_params)


class CVConfigTests(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(check_cv_config(False, 5, 4), (5, 4))
        self.assertEqual(check_cv_config(False, 5.0, 4.0), (5, 4))

    def test_one_fold_allowed_for_fast_cv(self):
        self.assertEqual(check_cv_config(True, 1, 1), (1, 1))

    @parameterized.expand(
        [
            ("one_fold", False, 1, 4),
            ("zero_folds", False, 0, 4),
            ("fractional_folds", False, 2.5, 4),
            ("fractional_folds_fast", True, 2.5, 4),
            ("zero_blocks", False, 5, 0),
            ("fractional_blocks", False, 5, 1.5),
            ("boolean_blocks", False, 5, True),
        ]
    )
    def test_invalid(self, _, fast_cv, cv_folds, n_blocks):
        with self.assertRaises(ValueError):
            check_cv_config(fast_cv, cv_folds, n_blocks)


class SelectHyperparametersTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        random_state = check_random_state(0)
        cls.X = random_state.normal(size=(60, 3))
        cls.y = cls.X @ np.array([1.0, -2.0, 0.5]) + 0.01 * random_state.normal(size=60)
        cls.X_test = random_state.normal(size=(20, 3))
        cls.y_test = cls.X_test @ np.array([1.0, -2.0, 0.5])

    def test_kfold_selects_weak_regularization(self):
        best_params, best_score = select_hyperparameters(
            Ridge(), {"alpha": [1e3, 1e-6]}, self.X, self.y, cv_folds=3
        )
        self.assertEqual(best_params, {"alpha": 1e-6})
        self.assertLessEqual(best_score, 0)

    def test_ties_resolved_by_grid_order(self):
        # the degree is ignored by the rbf kernel, so all grid points tie
        best_params, _ = select_hyperparameters(
            KernelRidge(kernel="rbf", gamma=0.1),
            {"alpha": [0.1], "degree": [4, 2, 3]},
            self.X,
            self.y,
            cv_folds=3,
        )
        self.assertEqual(best_params, {"alpha": 0.1, "degree": 4})

    def test_holdout_with_test_set(self):
        # the score is the error on the test set of a model fitted on all of X
        best_params, best_score = select_hyperparameters(
            Ridge(),
            {"alpha": [1e3, 1e-6]},
            self.X,
            self.y,
            fast_cv=True,
            X_test=self.X_test,
            y_test=self.y_test,
        )
        ridge = Ridge(**best_params).fit(self.X, self.y)
        expected = -mean_squared_error(self.y_test, ridge.predict(self.X_test))
        self.assertAlmostEqual(best_score, expected)

    def test_random_holdout_reproducible(self):
        results = [
            select_hyperparameters(
                Ridge(),
                {"alpha": [1e-3, 1e-1, 1e1]},
                self.X,
                self.y,
                fast_cv=True,
                holdout_size=0.3,
                random_state=0,
            )
            for _ in range(2)
        ]
        self.assertEqual(results[0], results[1])

    def test_test_set_requires_targets(self):
        with self.assertRaises(ValueError):
            select_hyperparameters(
                Ridge(), {"alpha": [1.0]}, self.X, self.y, fast_cv=True, X_test=self.X_test
            )

    def test_estimator_errors_propagate(self):
        with self.assertRaises(ValueError):
            select_hyperparameters(
                Ridge(), {"alpha": [1.0], "solver": ["not_a_solver"]}, self.X, self.y
            )


if __name__ == "__main__":
    unittest.main()
