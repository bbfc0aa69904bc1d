# linsolve

Solve dense linear systems `A x = b` read from plain-text matrix data files.
The solvers are Gauss-Jordan elimination with partial pivoting, a built-in
Cholesky factorisation, and the LAPACK Cholesky routines `dpotrf`/`dpotrs`
through SciPy. Every solution is checked by computing `A x` and comparing it
with `b`.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Matrix data file format

A data file holds one system:

```
# any header line
# another header line
3 1
# matrix A
4 1 2
1 5 3
2 3 6
# vector b
1
2
3
```

1. Two header lines, which are skipped.
2. A line holding the dimensions `N M`. `N` is the size of the square
   matrix and must be positive; `M` is expected to be `1`.
3. One header line, then the `N x N` entries of `A`, row by row. Values are
   separated by any whitespace.
4. After the line holding the last value of `A`, one header line, then the
   `N` entries of `b`.

A file that is missing, too short, or whose values cannot be read raises
`MatrixFileError`; the commands report it on standard error and exit with
status 1. The solving commands warn on standard error when anything at all
(a trailing newline included) follows the last value of `b`, and when `M`
is not `1`.

## Commands

### `linsolve-read FILE`

Reads a data file and prints the second header line, the rows of `A` and
the vector `b`. Useful to check that a file is laid out correctly.

### `linsolve [-g | -c] FILE`

Solves the system in single precision and prints the original matrix and
vector, the intermediate matrices, the solution, `A x` and the verification
result (tolerance `1e-6`). `N` is limited to 20.

- `-g` uses Gauss-Jordan elimination (the default).
- `-c` uses the built-in Cholesky factorisation. If the matrix is not
  symmetric, an error is printed and verification is skipped.

A flag is only recognised when a filename follows it. A singular matrix, or
a matrix that is not positive definite for `-c`, ends the command with an
error message and exit status 1.

### `linsolve-gj FILE`

Solves the system with Gauss-Jordan elimination (single precision, `N` up
to 20), prints the same steps as `linsolve`, and writes the solution to
`FILE_solution.txt` (the name is cut to 99 characters): two comment lines
naming the input file and the number of elements, then one value of `x` per
line with eight decimals. Mismatches found during verification are listed
with `A x`, `b` and their difference.

### `linsolve-lapack [-g | -c | -cl] FILE`

Reads the data in double precision, allowing `N` up to 5000, and prints
progress and the verification result rather than the matrices.

- `-g` Gauss-Jordan elimination in single precision (the default).
- `-c` the built-in Cholesky factorisation in single precision.
- `-cl` LAPACK `dpotrf`/`dpotrs` in double precision.

An unrecognised flag beginning `-g` or `-c` falls back to Gauss-Jordan with a
warning. With `-c` or `-cl` a non-symmetric matrix skips verification; with
`-cl` a failed LAPACK factorisation does the same. A singular matrix, or a
matrix that is not positive definite for `-c`, ends the command with exit
status 1.

## Using the library

- `linsolve.matfile`: `read_system(path, max_size)` and
  `parse_system(text, max_size)` return a `LinearSystem` with `a`, `b`,
  `m_col`, `headers`, `reached_end` and `n`; a malformed file raises
  `MatrixFileError`.
- `linsolve.primitives`: `gauss_jordan_partial(aug)` returns the reduced
  `[I | x]` matrix without changing its input; `is_symmetric(a, tol)`;
  `cholesky(a)` returns the lower factor; `cholesky_solve(lower, b)`.
  A singular matrix raises `SingularMatrixError`; a matrix that is not
  positive definite raises `NotPositiveDefiniteError`.
- `linsolve.solve`: `solve(system, method)` with a `SolverMethod`
  (`GAUSS_JORDAN` or `CHOLESKY`), and `verify(a, x, b, tol)` which returns a
  `Verification` with `check`, `diff`, `mismatches` and `ok`.
- `linsolve.gj`: `solution_path(input_filename)` and
  `write_solution(path, input_filename, x)`.
- `linsolve.lapack`: `parse_args(argv)` returning `Options`,
  `solve_lapack_cholesky(a, b)` and `is_symmetric_double(a, tol)`.
- `linsolve.util`: `format_matrix(mat, name)` and `format_vector(vec, name)`
  render matrices and vectors in the printed layout; all errors derive from
  `SolverError`.

```python
from linsolve.matfile import read_system
from linsolve.solve import SolverMethod, solve, verify

system = read_system("system.txt", 20)
x = solve(system, SolverMethod.CHOLESKY)
print(verify(system.a, x, system.b).ok)
```

## Limitations

Each file holds exactly one system with a single right-hand side; further
systems in the same file are not read. `linsolve` and `linsolve-gj` work in
single precision, and only `linsolve-lapack` accepts systems larger than
20 x 20.