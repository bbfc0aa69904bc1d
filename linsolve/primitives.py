"""Dense solvers: Gauss-Jordan with partial pivoting and Cholesky."""

from __future__ import annotations

import numpy as np

from linsolve.util import SolverError

SYMMETRY_TOL = 1.0e-6
_PIVOT_TOL = 1e-12


class SingularMatrixError(SolverError):
    """The matrix is singular or nearly so."""


class NotPositiveDefiniteError(SolverError):
    """The matrix has no Cholesky factorisation."""


def _float_copy(values) -> np.ndarray:
    arr = np.array(values)
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float64)
    return arr


def _square(values) -> np.ndarray:
    arr = _float_copy(values)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {arr.shape}")
    return arr


def gauss_jordan_partial(aug) -> np.ndarray:
    """Reduce an N x (N+k) augmented matrix to [I | x] and return it.

    The input is not modified. Raises SingularMatrixError when a pivot
    falls below 1e-12 in magnitude.
    """
    a = _float_copy(aug)
    if a.ndim != 2 or a.shape[1] <= a.shape[0]:
        raise ValueError(f"expected an N x (N+k) augmented matrix, got shape {a.shape}")
    n = a.shape[0]
    for i in range(n):
        max_row = i + int(np.argmax(np.abs(a[i:, i])))
        if max_row != i:
            a[[i, max_row]] = a[[max_row, i]]

        pivot = a[i, i]
        if abs(pivot) < _PIVOT_TOL:
            raise SingularMatrixError(
                f"gauss_jordan: Matrix is singular or nearly singular at pivot {i}."
            )
        a[i, i:] /= pivot

        factors = a[:, i].copy()
        factors[i] = 0.0
        a[:, i:] -= np.outer(factors, a[i, i:])
    return a


def _first_asymmetry(a: np.ndarray, tol: float):
    n = a.shape[0]
    for i in range(n):
        for j in range(i + 1, n):
            if abs(a[i, j] - a[j, i]) > tol:
                return i, j
    return None


def is_symmetric(a, tol=SYMMETRY_TOL) -> bool:
    """Whether every a[i][j] is within tol of a[j][i]."""
    return _first_asymmetry(_square(a), tol) is None


def cholesky(a) -> np.ndarray:
    """Return the lower factor L of a symmetric positive-definite matrix, A = L L^T."""
    lower = _square(a)
    n = lower.shape[0]
    for i in range(n):
        for j in range(i + 1):
            total = lower[i, j] - lower[i, :j] @ lower[j, :j]
            if i == j:
                if total <= 0.0:
                    raise NotPositiveDefiniteError("Matrix is not positive-definite")
                lower[i, i] = np.sqrt(total)
            else:
                lower[i, j] = total / lower[j, j]
    return np.tril(lower)


def cholesky_solve(lower, b) -> np.ndarray:
    """Solve A x = b given the lower Cholesky factor of A."""
    low = _square(lower)
    rhs = _float_copy(b)
    n = low.shape[0]
    if rhs.shape != (n,):
        raise ValueError(f"expected a vector of length {n}, got shape {rhs.shape}")
    x = np.zeros(n, dtype=np.result_type(low, rhs))
    for i in range(n):
        x[i] = (rhs[i] - low[i, :i] @ x[:i]) / low[i, i]
    for i in reversed(range(n)):
        x[i] = (x[i] - low[i + 1:, i] @ x[i + 1:]) / low[i, i]
    return x