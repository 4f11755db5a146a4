"""Unit tests for non-negative matrix factorisation."""

import unittest

import numpy as np

from zeitgeist.core.matrix import Matrix
from zeitgeist.core.nmf import NonNegativeMatrixFactorizer


def block_matrix():
    # Two clearly separated groups of rows and columns.
    return Matrix.from_rows([
        [5, 4, 0, 0],
        [4, 5, 0, 0],
        [6, 5, 1, 0],
        [0, 0, 5, 4],
        [0, 1, 4, 5],
        [0, 0, 6, 5],
    ])


class TestNonNegativeMatrixFactorizer(unittest.TestCase):
    def test_factor_shapes(self):
        weights, features = NonNegativeMatrixFactorizer(seed=1).factorize(block_matrix(), 2)
        self.assertEqual((weights.row_count, weights.column_count), (6, 2))
        self.assertEqual((features.row_count, features.column_count), (2, 4))

    def test_factors_non_negative(self):
        weights, features = NonNegativeMatrixFactorizer(seed=2).factorize(block_matrix(), 2)
        self.assertTrue(np.all(np.array(weights.to_list()) >= 0))
        self.assertTrue(np.all(np.array(features.to_list()) >= 0))

    def test_cost_never_increases(self):
        factorizer = NonNegativeMatrixFactorizer(seed=3)
        factorizer.factorize(block_matrix(), 2)
        costs = factorizer.costs
        self.assertTrue(costs)
        for previous, current in zip(costs, costs[1:]):
            self.assertLessEqual(current, previous * (1 + 1e-9))

    def test_stops_when_improvement_small(self):
        factorizer = NonNegativeMatrixFactorizer(seed=4)
        factorizer.factorize(block_matrix(), 2)
        costs = factorizer.costs
        self.assertGreaterEqual(len(costs), 2)
        for previous, current in zip(costs[:-2], costs[1:-1]):
            self.assertLess(current, 0.99 * previous)
        if len(costs) < factorizer.max_iterations:
            self.assertGreaterEqual(costs[-1], 0.99 * costs[-2])

    def test_iteration_cap(self):
        factorizer = NonNegativeMatrixFactorizer(max_iterations=1, seed=5)
        with self.assertLogs("zeitgeist.core.nmf", level="WARNING"):
            factorizer.factorize(block_matrix(), 2)
        self.assertEqual(len(factorizer.costs), 1)

    def test_reconstruction_separates_groups(self):
        matrix = block_matrix()
        weights, features = NonNegativeMatrixFactorizer(max_iterations=500, convergence_ratio=1.0 - 1e-9,
                                                        seed=6).factorize(matrix, 2)
        self.assertLess(matrix.squared_distance(weights.multiply(features)), 0.1 * matrix.squared_distance(Matrix(6, 4)))
        dominant = [max(range(2), key=weights.row(i).__getitem__) for i in range(6)]
        self.assertEqual(len(set(dominant[:3])), 1)
        self.assertEqual(len(set(dominant[3:])), 1)
        self.assertNotEqual(dominant[0], dominant[3])

    def test_seed_makes_results_reproducible(self):
        first = NonNegativeMatrixFactorizer(seed=7).factorize(block_matrix(), 2)
        second = NonNegativeMatrixFactorizer(seed=7).factorize(block_matrix(), 2)
        self.assertEqual(first[0], second[0])
        self.assertEqual(first[1], second[1])

    def test_degenerate_inputs(self):
        factorizer = NonNegativeMatrixFactorizer(seed=8)
        weights, features = factorizer.factorize(block_matrix(), 0)
        self.assertEqual((weights.row_count, weights.column_count), (6, 0))
        self.assertEqual((features.row_count, features.column_count), (0, 4))
        self.assertEqual(factorizer.costs, [])

        weights, features = factorizer.factorize(Matrix(0, 4), 3)
        self.assertEqual((weights.row_count, weights.column_count), (0, 0))
        self.assertEqual((features.row_count, features.column_count), (0, 4))

        weights, features = factorizer.factorize(Matrix(5, 0), 3)
        self.assertEqual((weights.row_count, weights.column_count), (5, 0))
        self.assertEqual((features.row_count, features.column_count), (0, 0))

    def test_invalid_iteration_cap(self):
        with self.assertRaises(ValueError):
            NonNegativeMatrixFactorizer(max_iterations=0)


if __name__ == "__main__":
    unittest.main()
