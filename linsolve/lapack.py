"""Solve a linear system in double precision, with a choice of three solvers.

The solvers are Gauss-Jordan (single precision), the package's own Cholesky
(single precision) and the LAPACK Cholesky routines dpotrf/dpotrs (double
precision).
"""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass

import numpy as np
from scipy.linalg import lapack as _lapack

from linsolve.matfile import MatrixFileError, read_system
from linsolve.primitives import (
    NotPositiveDefiniteError,
    SingularMatrixError,
    cholesky,
    cholesky_solve,
    gauss_jordan_partial,
    is_symmetric,
)
from linsolve.solve import verify
from linsolve.util import SolverError

MAX_SIZE = 5000
TOL_FLOAT = 1.0e-6
TOL_DOUBLE = 1.0e-9

USAGE_LINES = (
    "  -g : Use Gauss-Jordan (float)",
    "  -c : Use Custom Cholesky (float)",
    "  -cl: Use LAPACK Cholesky (double)",
)


class Method(enum.Enum):
    """Solver selected on the command line; the value is its display label."""

    GAUSS_JORDAN = "Gauss-Jordan (Float)"
    CHOLESKY_PRIMITIVE = "Cholesky (Custom Float)"
    CHOLESKY_LAPACK = "Cholesky (LAPACK Double)"


_FLAGS = {
    "-g": Method.GAUSS_JORDAN,
    "-c": Method.CHOLESKY_PRIMITIVE,
    "-cl": Method.CHOLESKY_LAPACK,
}


@dataclass(frozen=True)
class Options:
    """Parsed command line."""

    method: Method
    filename: str
    warnings: tuple[str, ...] = ()


def parse_args(argv) -> Options:
    """Parse [prog, [-g | -c | -cl], filename, ...] into Options.

    Raises ValueError when no filename is given.
    """
    args = list(argv)
    if len(args) < 2:
        raise ValueError("missing matrix data file")

    warnings: list[str] = []
    first = args[1]
    if len(args) > 2 and first[1:2] in ("g", "c"):
        method = _FLAGS.get(first)
        if method is None:
            warnings.append(
                f"Warning: Unrecognized flag '{first}'. Defaulting to Gauss-Jordan."
            )
            method = Method.GAUSS_JORDAN
        filename = args[2]
        if len(args) > 3:
            warnings.append("Warning: Extra command line arguments ignored.")
    else:
        method = Method.GAUSS_JORDAN
        filename = first
        if len(args) > 2:
            warnings.append(
                "Warning: Arguments after filename ignored. Use -g/-c/-cl flags."
            )
    return Options(method=method, filename=filename, warnings=tuple(warnings))


def is_symmetric_double(a, tol=TOL_DOUBLE) -> bool:
    """Whether every a[i][j] is within tol of a[j][i], in double precision."""
    arr = np.asarray(a, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {arr.shape}")
    upper = np.triu_indices(arr.shape[0], k=1)
    return bool(np.all(np.abs(arr[upper] - arr.T[upper]) <= tol))


def solve_lapack_cholesky(a, b) -> np.ndarray:
    """Solve A x = b by LAPACK dpotrf (A = U^T U) followed by dpotrs.

    Only the upper triangle of A is used. Raises NotPositiveDefiniteError
    when the factorisation fails and SolverError on any other LAPACK error.
    """
    mat = np.array(a, dtype=np.float64)
    rhs = np.array(b, dtype=np.float64)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {mat.shape}")
    if rhs.shape != (mat.shape[0],):
        raise ValueError(
            f"expected a vector of length {mat.shape[0]}, got shape {rhs.shape}"
        )

    factor, info = _lapack.dpotrf(mat, lower=False)
    if info > 0:
        raise NotPositiveDefiniteError(
            f"dpotrf: leading minor of order {info} is not positive-definite"
        )
    if info < 0:
        raise SolverError(f"dpotrf: illegal value in argument {-info}")

    x, info = _lapack.dpotrs(factor, rhs, lower=False)
    if info != 0:
        raise SolverError(f"dpotrs: illegal value in argument {-info}")
    return np.asarray(x, dtype=np.float64)


def _fatal(message: str) -> int:
    print(f"runtime error...\n{message}\n... now exiting to system...", file=sys.stderr)
    return 1


def _run_solver(method: Method, a: np.ndarray, b: np.ndarray, out) -> np.ndarray | None:
    """Run the chosen solver; None means it was not applicable or failed softly."""
    n = a.shape[0]
    if method is Method.CHOLESKY_LAPACK:
        out.write("\nAttempting Cholesky Decomposition using LAPACK dpotrf...\n")
        if not is_symmetric_double(a):
            print(
                "ERROR: Matrix A is not symmetric. Cholesky method cannot be used.",
                file=sys.stderr,
            )
            return None
        out.write("Matrix appears symmetric. Proceeding with LAPACK.\n")
        try:
            return solve_lapack_cholesky(a, b)
        except SolverError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return None

    if method is Method.CHOLESKY_PRIMITIVE:
        a32 = a.astype(np.float32)
        b32 = b.astype(np.float32)
        out.write("\nAttempting Custom Cholesky Decomposition (Float)...\n")
        if not is_symmetric(a32):
            print("ERROR: Matrix A is not symmetric...", file=sys.stderr)
            return None
        out.write("Matrix appears symmetric. Proceeding...\n")
        lower = cholesky(a32)
        return cholesky_solve(lower, b32).astype(np.float64)

    out.write("\nAttempting Gauss-Jordan Elimination (Float)...\n")
    aug = np.column_stack([a.astype(np.float32), b.astype(np.float32)])
    final = gauss_jordan_partial(aug)
    out.write("Gauss-Jordan complete.\n")
    return final[:, n].astype(np.float64)


def main(argv=None) -> int:
    """Command line: [-g | -c | -cl] <matrix_data_file>."""
    args = sys.argv if argv is None else argv
    prog = args[0] if args else "solver"
    try:
        options = parse_args(args)
    except ValueError:
        print(f"Usage: {prog} [-g | -c | -cl] <matrix_data_file>", file=sys.stderr)
        for line in USAGE_LINES:
            print(line, file=sys.stderr)
        return 1
    for warning in options.warnings:
        print(warning, file=sys.stderr)

    out = sys.stdout
    filename = options.filename
    out.write(f"Input file: {filename}\n")
    out.write(f"Using solver: {options.method.value}\n")
    try:
        system = read_system(filename, MAX_SIZE)
    except MatrixFileError as exc:
        return _fatal(str(exc))
    out.write("Successfully opened file.\n")
    out.write("Skipping initial header lines...\n")
    if system.m_col != 1:
        print(
            f"Warning: File specifies M={system.m_col}, but expecting M=1 for Ax=b. "
            "Proceeding anyway.",
            file=sys.stderr,
        )

    n = system.n
    out.write(f"Reading Matrix A ({n} x {n}) as double:\n")
    out.write(f"Reading Vector b ({n} x 1) as double:\n")
    out.write("Finished reading data from file.\n")
    a = system.a.astype(np.float64)
    b = system.b.astype(np.float64)

    try:
        x = _run_solver(options.method, a, b, out)
    except (SingularMatrixError, NotPositiveDefiniteError) as exc:
        return _fatal(str(exc))

    if x is not None:
        out.write("Verifying solution (Calculating A * x)...\n")
        result = verify(a, x, b, TOL_FLOAT)
        out.write("Comparing A*x with original b:\n")
        for k in result.mismatches:
            got = float(result.check[k])
            expected = float(b[k])
            out.write(
                f"  Mismatch at index [{k}]: Expected {expected:.6e}, "
                f"Got {got:.6e} (Diff: {got - expected:.4e})\n"
            )
        if result.ok:
            out.write(f"  Verification successful (within tolerance {TOL_DOUBLE:.1e}).\n")
        else:
            out.write(
                f"  Verification FAILED with {len(result.mismatches)} mismatches.\n"
            )
    else:
        out.write("\nSkipping verification due to solver incompatibility or failure.\n")

    out.write("Freeing memory...\n")
    out.write("Done.\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())