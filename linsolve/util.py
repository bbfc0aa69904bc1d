"""Error type and text formatting shared by the solvers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

_ZERO_CUTOFF = 1e-12


class SolverError(Exception):
    """Raised when a linear-algebra routine cannot complete."""


def _cell(value: float) -> str:
    value = float(value)
    if abs(value) < _ZERO_CUTOFF:
        value = 0.0  # keeps "-0.0000" out of the output
    return f"{value:10.4f} "


def format_matrix(mat: Sequence[Sequence[float]], name: str) -> str:
    """Render a matrix as a titled block of fixed-width rows."""
    rows = [list(row) for row in mat]
    n_cols = len(rows[0]) if rows else 0
    lines = [f"{name} [{len(rows)}..{n_cols}]:\n"]
    for row in rows:
        lines.append("  [ " + "".join(_cell(v) for v in row) + "]\n")
    lines.append("\n")
    return "".join(lines)


def format_vector(vec: Iterable[float], name: str) -> str:
    """Render a vector as a titled single fixed-width row."""
    values = list(vec)
    return (
        f"{name} [{len(values)}]:\n"
        + "  [ "
        + "".join(_cell(v) for v in values)
        + "]\n\n"
    )