"""Dense linear system solvers (Gauss-Jordan and Cholesky) with matrix-file reading and verification."""

__version__ = "0.1.0"

__all__ = ["__version__"]