"""Reading linear systems from the plain-text matrix file format.

Layout: two header lines, a line "N M", a header line, N*N values of A,
a line ending A plus a header line, then N values of b.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from linsolve.util import SolverError

_WHITESPACE = re.compile(r"\s*")
_INT = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class MatrixFileError(SolverError):
    """The matrix file is missing, short or malformed."""


@dataclass
class LinearSystem:
    """A system A x = b as read from a matrix file.

    headers holds the two leading header lines as read, line ends included.
    reached_end is true when nothing, not even a newline, follows the last
    value of b.
    """

    a: np.ndarray
    b: np.ndarray
    m_col: int
    headers: tuple[str, str]
    reached_end: bool

    @property
    def n(self) -> int:
        return self.a.shape[0]


class _Reader:
    """Cursor over text offering whole-line and numeric reads."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def line(self) -> str | None:
        if self.at_end:
            return None
        end = self.text.find("\n", self.pos)
        end = len(self.text) if end == -1 else end + 1
        chunk = self.text[self.pos:end]
        self.pos = end
        return chunk

    def _number(self, pattern: re.Pattern) -> str | None:
        self.pos = _WHITESPACE.match(self.text, self.pos).end()
        match = pattern.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return match.group()

    def integer(self) -> int | None:
        token = self._number(_INT)
        return None if token is None else int(token)

    def real(self) -> float | None:
        token = self._number(_FLOAT)
        return None if token is None else float(token)


def _reals(reader: _Reader, count: int, what: str) -> list[float]:
    values = []
    for _ in range(count):
        value = reader.real()
        if value is None:
            raise MatrixFileError(f"Error reading {what}")
        values.append(value)
    return values


def parse_system(text: str, max_size: int | None = None) -> LinearSystem:
    """Parse one linear system from matrix-file text."""
    reader = _Reader(text)
    first = reader.line()
    if first is None:
        raise MatrixFileError("Error reading first header or empty file.")
    second = reader.line()
    if second is None:
        raise MatrixFileError("Error reading second header or file too short.")

    n_row = reader.integer()
    m_col = reader.integer()
    if n_row is None or m_col is None:
        raise MatrixFileError("Error reading matrix dimensions (N M).")
    if n_row <= 0 or (max_size is not None and n_row > max_size):
        limit = "" if max_size is None else f" (Max N={max_size})"
        raise MatrixFileError(f"Invalid dimension N={n_row}{limit}.")

    reader.line()  # rest of the "N M" line
    reader.line()  # header before A
    a = np.array(_reals(reader, n_row * n_row, "matrix A")).reshape(n_row, n_row)

    reader.line()  # rest of the last line of A
    reader.line()  # header before b
    b = np.array(_reals(reader, n_row, "vector b"))

    return LinearSystem(
        a=a, b=b, m_col=m_col, headers=(first, second), reached_end=reader.at_end
    )


def read_system(path, max_size: int | None = None) -> LinearSystem:
    """Read one linear system from the file at path."""
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise MatrixFileError(f"Cannot open {path}: {exc}") from exc
    return parse_system(text, max_size)


def main(argv=None) -> int:
    """Print the matrix and vector held in a matrix file."""
    args = sys.argv if argv is None else argv
    prog = args[0] if args else "read_mat_file"
    if len(args) != 2:
        print(f"Usage: {prog} <matrix_data_file>", file=sys.stderr)
        return 1
    try:
        system = read_system(args[1])
    except SolverError as exc:
        print(f"runtime error...\n{exc}\n... now exiting to system...", file=sys.stderr)
        return 1

    print(f"Skipped header lines: {system.headers[1]}")
    for row in system.a:
        print("".join(f"{v:f} " for v in row))
    print("".join(f"{v:f} " for v in system.b))
    return 0


if __name__ == "__main__":
    sys.exit(main())