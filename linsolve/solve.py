"""Solve one linear system from a matrix file by Gauss-Jordan or Cholesky."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import TextIO

import numpy as np

from linsolve.matfile import LinearSystem, MatrixFileError, read_system
from linsolve.primitives import (
    NotPositiveDefiniteError,
    SingularMatrixError,
    cholesky,
    cholesky_solve,
    gauss_jordan_partial,
    is_symmetric,
)
from linsolve.util import SolverError, format_matrix, format_vector

MAX_SIZE = 20
TOL = 1.0e-6
SEPARATOR = "\n------------------------------------\n\n"
EOF_WARNING = (
    "Warning: File processing stopped before reaching end-of-file. "
    "Check file format near last processed system."
)
NOT_SYMMETRIC = "Matrix A is not symmetric. Cholesky method cannot be used."


class SolverMethod(enum.Enum):
    """Which algorithm solves the system."""

    GAUSS_JORDAN = "Gauss-Jordan"
    CHOLESKY = "Cholesky"


@dataclass(frozen=True)
class Verification:
    """Outcome of comparing A x with b."""

    check: np.ndarray
    diff: np.ndarray
    tol: float
    mismatches: tuple[int, ...]

    @property
    def ok(self) -> bool:
        return not self.mismatches


def verify(a, x, b, tol=TOL) -> Verification:
    """Compute A x and list the indices where it differs from b by more than tol."""
    check = np.asarray(a) @ np.asarray(x)
    diff = np.abs(check.astype(np.float64) - np.asarray(b, dtype=np.float64))
    mismatches = tuple(int(k) for k in np.flatnonzero(diff > tol))
    return Verification(check=check, diff=diff, tol=tol, mismatches=mismatches)


def _solve(a: np.ndarray, b: np.ndarray, method: SolverMethod, out: TextIO | None) -> np.ndarray:
    def emit(text: str) -> None:
        if out is not None:
            out.write(text)

    n = a.shape[0]
    if method is SolverMethod.CHOLESKY:
        emit("\nAttempting Cholesky Decomposition...\n")
        if not is_symmetric(a):
            raise SolverError(NOT_SYMMETRIC)
        emit("Matrix is symmetric. Proceeding with Cholesky.\n")
        lower = cholesky(a)
        emit("Cholesky decomposition successful.\n")
        emit(format_matrix(lower, "Decomposed A (L factor)"))
        x = cholesky_solve(lower, b)
        emit("Cholesky solve complete.\n")
        return x

    emit("\nAttempting Gauss-Jordan Elimination...\n")
    aug = np.column_stack([a, b])
    emit(format_matrix(aug, "Initial Augmented [A|b]"))
    final = gauss_jordan_partial(aug)
    emit("Gauss-Jordan complete.\n")
    emit(format_matrix(final, "Final Augmented [I|x]"))
    return final[:, n].copy()


def _single(system: LinearSystem) -> tuple[np.ndarray, np.ndarray]:
    return system.a.astype(np.float32), system.b.astype(np.float32)


def solve(system: LinearSystem, method=SolverMethod.GAUSS_JORDAN) -> np.ndarray:
    """Solve system.a x = system.b in single precision and return x.

    Raises SolverError when Cholesky is asked for and A is not symmetric,
    SingularMatrixError or NotPositiveDefiniteError when the method fails.
    """
    a, b = _single(system)
    return _solve(a, b, SolverMethod(method), None)


def _fatal(message: str) -> int:
    print(f"runtime error...\n{message}\n... now exiting to system...", file=sys.stderr)
    return 1


def main(argv=None) -> int:
    """Command line: [-g | -c] <matrix_data_file>."""
    args = sys.argv if argv is None else argv
    prog = args[0] if args else "solver_multi"
    if len(args) < 2:
        print(f"Usage: {prog} [-g | -c] <matrix_data_file>", file=sys.stderr)
        print("  -g : Use Gauss-Jordan", file=sys.stderr)
        print("  -c : Use Cholesky", file=sys.stderr)
        return 1

    method = SolverMethod.GAUSS_JORDAN
    if len(args) > 2 and args[1] in ("-c", "-g"):
        method = SolverMethod.CHOLESKY if args[1] == "-c" else SolverMethod.GAUSS_JORDAN
        filename = args[2]
        if len(args) > 3:
            print("Warning: Extra command line arguments ignored.", file=sys.stderr)
    else:
        filename = args[1]
        if len(args) > 2:
            print(
                f"Warning: Treating '{args[1]}' as filename. Use -g or -c flag.",
                file=sys.stderr,
            )

    out = sys.stdout
    out.write(f"Input file: {filename}\n")
    out.write(f"Using solver: {method.value}\n")
    try:
        system = read_system(filename, MAX_SIZE)
    except MatrixFileError as exc:
        return _fatal(str(exc))
    out.write("Successfully opened file.\n")
    if system.m_col != 1:
        print(
            f"Warning: File specifies M={system.m_col}, but expecting M=1 for Ax=b.",
            file=sys.stderr,
        )

    n = system.n
    out.write("\nStarting to read systems from file...\n")
    out.write(f"\n--- Processing System (N={n}) from {filename} ---\n")
    out.write(f"Reading Matrix A ({n} x {n}):\n")
    out.write(f"Reading Vector b ({n} x 1):\n")
    a, b = _single(system)
    out.write(format_matrix(a, "Original A"))
    out.write(format_vector(b, "Original b"))

    x = None
    try:
        x = _solve(a, b, method, out)
    except (SingularMatrixError, NotPositiveDefiniteError) as exc:
        return _fatal(str(exc))
    except SolverError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)

    if x is not None:
        out.write(format_vector(x, "Solution x"))
        out.write("Verifying solution (Calculating A * x)...\n")
        result = verify(a, x, b)
        out.write(format_vector(result.check, "Calculated A*x"))
        out.write("Comparing A*x with original b:\n")
        for k in result.mismatches:
            out.write(f"  Mismatch at index [{k}]: ...\n")
        if result.ok:
            out.write("  Verification successful...\n")
        else:
            out.write("  Verification FAILED...\n")
    else:
        out.write(
            "\nSkipping verification for this system due to solver "
            "incompatibility or failure.\n"
        )
    out.write(SEPARATOR)

    if not system.reached_end:
        print(EOF_WARNING, file=sys.stderr)
    out.write(f"File processing complete for {filename}.\n")
    out.write("Freeing memory...\n")
    out.write("Done.\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())