"""
Non-negative matrix factorisation by multiplicative updates.
"""
import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from zeitgeist.core.matrix import Matrix

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 200
# Stop once an iteration improves the cost by less than 1%.
DEFAULT_CONVERGENCE_RATIO = 0.99


class NonNegativeMatrixFactorizer:
    """
    Factorises a non-negative matrix V (articles x terms) into weights
    (articles x features) and features (features x terms) such that
    weights . features approximates V.

    Uses the Lee-Seung multiplicative update rules, which never increase the
    squared reconstruction error and keep every entry non-negative.
    """

    def __init__(self,
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 convergence_ratio: float = DEFAULT_CONVERGENCE_RATIO,
                 seed: Optional[int] = None):
        """
        Initialize the factorizer.

        Args:
            max_iterations: Hard cap on the number of update iterations
            convergence_ratio: Stop when new cost >= ratio * previous cost
            seed: Seed for the random initial factors (None for a fresh seed)
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.max_iterations = max_iterations
        self.convergence_ratio = convergence_ratio
        self.rng = np.random.default_rng(seed)
        self.costs: List[float] = []

    def factorize(self, matrix: Matrix, feature_count: int) -> Tuple[Matrix, Matrix]:
        """
        Factorise the matrix.

        Args:
            matrix: The non-negative matrix to factorise
            feature_count: Number of latent features to extract

        Returns:
            Tuple of (weights, features).  For degenerate input (no rows, no
            columns or no features) the feature dimension of both is zero.
        """
        self.costs = []
        rows, columns = matrix.row_count, matrix.column_count
        if feature_count <= 0 or rows == 0 or columns == 0:
            logger.debug(f"Nothing to factorise for a {matrix.shape_str()} matrix with {feature_count} features")
            return Matrix(rows, 0), Matrix(0, columns)

        weights = Matrix.random(rows, feature_count, self.rng)
        features = Matrix.random(feature_count, columns, self.rng)

        previous_cost = math.inf
        for iteration in range(1, self.max_iterations + 1):
            features.element_multiply_and_divide(
                weights.multiply_transpose_left(matrix),
                weights.multiply_transpose_left(weights).multiply(features))
            weights.element_multiply_and_divide(
                matrix.multiply_transpose_right(features),
                weights.multiply(features.multiply_transpose_right(features)))

            cost = matrix.squared_distance(weights.multiply(features))
            self.costs.append(cost)
            if cost >= self.convergence_ratio * previous_cost:
                logger.debug(f"Factorisation converged after {iteration} iterations, cost {cost:.4f}")
                break
            previous_cost = cost
        else:
            logger.warning(f"Factorisation stopped at the {self.max_iterations} iteration limit "
                           f"before converging, cost {self.costs[-1]:.4f}")

        return weights, features
