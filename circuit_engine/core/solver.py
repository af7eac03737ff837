"""
Dense linear solver for MNA systems, real or complex.

Gaussian elimination with partial pivoting. What happens on a near-singular
pivot is governed by SimulationSettings.pivot_policy:

- "regularize": the pivot is replaced in place by settings.regularized_pivot
  and the row is recorded, so a (possibly inaccurate) result is still
  produced;
- "raise": SingularMatrixError is raised.
"""

import logging
import time
import warnings
from dataclasses import dataclass, field
from typing import List

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import MatrixRankWarning, spsolve

from ..config import SimulationSettings
from ..exceptions import SingularMatrixError

logger = logging.getLogger(__name__)


@dataclass
class LinearSolution:
    x: np.ndarray
    regularized_pivots: List[int] = field(default_factory=list)
    solve_time: float = 0.0


class LinearSolver:

    def __init__(self, settings: SimulationSettings = None):
        self.settings = settings or SimulationSettings()

    def solve(self, matrix, rhs) -> LinearSolution:
        start_time = time.perf_counter()

        if self.settings.solver == "spsolve":
            solution = self._solve_sparse(matrix, rhs)
        else:
            dense = matrix.toarray() if sparse.issparse(matrix) else matrix
            solution = self.gaussian_elimination(dense, rhs)

        solution.solve_time = time.perf_counter() - start_time
        return solution

    def gaussian_elimination(self, matrix, rhs) -> LinearSolution:
        dtype = np.result_type(np.asarray(matrix).dtype, np.asarray(rhs).dtype, np.float64)
        a = np.array(matrix, dtype=dtype)
        b = np.array(rhs, dtype=dtype)
        n = b.shape[0]

        if a.shape != (n, n):
            raise ValueError(f"Matrix of shape {a.shape} does not match right-hand side of length {n}")

        regularized = []
        for k in range(n):
            pivot_row = k + int(np.argmax(np.abs(a[k:, k])))
            if pivot_row != k:
                a[[k, pivot_row]] = a[[pivot_row, k]]
                b[[k, pivot_row]] = b[[pivot_row, k]]

            magnitude = abs(a[k, k])
            if magnitude < self.settings.pivot_threshold:
                if self.settings.pivot_policy == "raise":
                    raise SingularMatrixError(k, magnitude)
                logger.warning(f"Singular or near-singular matrix at row {k}, regularizing pivot")
                a[k, k] = self.settings.regularized_pivot
                regularized.append(k)

            if k + 1 < n:
                factors = a[k + 1:, k] / a[k, k]
                a[k + 1:, k:] -= np.outer(factors, a[k, k:])
                b[k + 1:] -= factors * b[k]

        x = np.zeros(n, dtype=dtype)
        for i in range(n - 1, -1, -1):
            x[i] = (b[i] - a[i, i + 1:] @ x[i + 1:]) / a[i, i]

        return LinearSolution(x, regularized)

    def _solve_sparse(self, matrix, rhs) -> LinearSolution:
        rhs = np.asarray(rhs)
        if rhs.shape[0] == 0:
            return LinearSolution(np.zeros(0, dtype=rhs.dtype))

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MatrixRankWarning)
            x = np.atleast_1d(spsolve(sparse.csc_matrix(matrix), rhs))

        # spsolve cannot regularize, a singular system always fails
        if not np.all(np.isfinite(x)):
            raise SingularMatrixError(-1, 0.0)
        return LinearSolution(x)


def solve_linear_system(matrix, rhs, settings: SimulationSettings = None) -> np.ndarray:
    """Convenience wrapper returning only the solution vector"""
    return LinearSolver(settings).solve(matrix, rhs).x
