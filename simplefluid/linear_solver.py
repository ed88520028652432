"""GMRES solution of sparse linear systems."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np
from scipy.sparse.linalg import gmres


@dataclass
class LinearSolverOptions:
    """Convergence settings for the linear solver."""

    max_iterations: int = 200
    tolerance: float = 1.0e-10

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1.")
        if self.tolerance <= 0.0:
            raise ValueError("tolerance must be positive.")


class ConvergenceError(RuntimeError):
    """Raised when the solver stops before reaching its tolerance."""

    def __init__(self, message: str, solution: np.ndarray) -> None:
        super().__init__(message)
        self.solution = solution


def _run_gmres(matrix: Any, rhs: np.ndarray, x0: np.ndarray, tolerance: float,
               restart: int, maxiter: int):
    try:
        return gmres(matrix, rhs, x0=x0, rtol=tolerance, atol=0.0,
                     restart=restart, maxiter=maxiter)
    except TypeError:
        return gmres(matrix, rhs, x0=x0, tol=tolerance, atol=0.0,
                     restart=restart, maxiter=maxiter)


def solve_linear_system(
    matrix: Any,
    rhs: Sequence[float],
    initial_guess: Optional[Sequence[float]] = None,
    options: Optional[LinearSolverOptions] = None,
) -> np.ndarray:
    """Solve ``matrix @ x = rhs`` with restarted GMRES and return ``x``.

    The tolerance is relative to the norm of ``rhs``. Raises ConvergenceError
    if it is not reached within the iteration limit.
    """
    if options is None:
        options = LinearSolverOptions()

    b = np.asarray(rhs, dtype=float).ravel()
    size = b.shape[0]
    if tuple(matrix.shape) != (size, size):
        raise ValueError(
            f"Matrix of shape {tuple(matrix.shape)} does not match a right-hand side of size {size}."
        )

    if initial_guess is None:
        x0 = np.zeros(size)
    else:
        x0 = np.array(initial_guess, dtype=float).ravel()
        if x0.shape != (size,):
            raise ValueError("Initial guess does not match the right-hand side size.")

    if size == 0:
        return x0

    restart = max(1, min(size, options.max_iterations))
    maxiter = max(1, -(-options.max_iterations // restart))
    solution, info = _run_gmres(matrix, b, x0, options.tolerance, restart, maxiter)
    if info != 0:
        raise ConvergenceError(
            f"GMRES did not converge to {options.tolerance} in "
            f"{options.max_iterations} iterations.",
            np.asarray(solution, dtype=float),
        )
    return np.asarray(solution, dtype=float)