"""Gauss-Jordan solver that also writes the solution vector to a file."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from linsolve.matfile import MatrixFileError, read_system
from linsolve.primitives import SingularMatrixError, gauss_jordan_partial
from linsolve.solve import EOF_WARNING, MAX_SIZE, TOL, verify
from linsolve.util import format_matrix, format_vector

_MAX_PATH_CHARS = 99
DEFAULT_OUTPUT = "solution_output.txt"


def solution_path(input_filename) -> str:
    """Name of the solution file written for input_filename, capped at 99 characters."""
    if input_filename is None:
        return DEFAULT_OUTPUT
    return f"{input_filename}_solution.txt"[:_MAX_PATH_CHARS]


def write_solution(path, input_filename, x) -> None:
    """Write x, one value per line, under a two-line comment header."""
    source = input_filename if input_filename is not None else "N/A"
    values = list(x)
    lines = [
        f"# Solution vector x for input: {source}\n",
        f"# Number of elements (N_ROW): {len(values)}\n",
    ]
    lines.extend(f"{float(v):.8f}\n" for v in values)
    with Path(path).open("w") as fh:
        fh.writelines(lines)


def _fatal(message: str) -> int:
    print(f"runtime error...\n{message}\n... now exiting to system...", file=sys.stderr)
    return 1


def main(argv=None) -> int:
    """Command line: <matrix_data_file>."""
    args = sys.argv if argv is None else argv
    prog = args[0] if args else "solver_gj"
    if len(args) != 2:
        print(f"Usage: {prog} <matrix_data_file>", file=sys.stderr)
        return 1
    filename = args[1]

    out = sys.stdout
    out.write(f"Input file: {filename}\n")
    try:
        system = read_system(filename, MAX_SIZE)
    except MatrixFileError as exc:
        return _fatal(str(exc))
    out.write("Successfully opened file.\n")

    n = system.n
    out.write("\nStarting to read systems from file...\n")
    out.write(f"\n--- Processing System (N={n}) from {filename} ---\n")
    out.write(f"Reading Matrix A ({n} x {n}):\n")
    out.write(f"Reading Vector b ({n} x 1):\n")
    a = system.a.astype(np.float32)
    b = system.b.astype(np.float32)
    out.write(format_matrix(a, "Original A"))
    out.write(format_vector(b, "Original b"))

    out.write("\nAttempting Gauss-Jordan Elimination...\n")
    aug = np.column_stack([a, b])
    out.write(format_matrix(aug, "initial Augmented [A|b]"))
    try:
        final = gauss_jordan_partial(aug)
    except SingularMatrixError as exc:
        return _fatal(str(exc))
    out.write("Gauss-Jordan complete.\n")
    out.write(format_matrix(final, "Final Augmented [I|x]"))
    x = final[:, n].copy()
    out.write(format_vector(x, "Solution x"))

    target = solution_path(filename)
    out.write(f"Attempting to write solution to: {target}\n")
    try:
        write_solution(target, filename, x)
    except OSError:
        print(
            f"Error: Could not open output file '{target}' for writing solution.",
            file=sys.stderr,
        )
    else:
        out.write(f"Solution successfully written to {target}.\n")

    out.write("Verifying solution (Calculating A * x)...\n")
    result = verify(a, x, b, TOL)
    out.write(format_vector(result.check, "Calculated A*x"))
    out.write("Comparing A*x with original b:\n")
    for k in result.mismatches:
        out.write(
            f"  Mismatch at index [{k}]: A*x = {float(result.check[k]):.7g}, "
            f"b = {float(b[k]):.7g}, Diff = {float(result.diff[k]):.7g}\n"
        )
    if result.ok:
        out.write(f"  Verification successful (within TOL={TOL:.1e}).\n")
    else:
        out.write(f"  Verification FAILED ({len(result.mismatches)} mismatches).\n")

    if not system.reached_end:
        print(EOF_WARNING, file=sys.stderr)
    out.write(f"File processing complete for {filename}.\n")
    out.write("Freeing memory...\n")
    out.write("Done.\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())