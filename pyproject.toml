[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linsolve"
version = "0.1.0"
description = "Dense linear system solvers (Gauss-Jordan and Cholesky) driven by simple matrix data files"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "linear algebra",
    "gauss-jordan",
    "cholesky",
    "lapack",
    "linear systems",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
linsolve = "linsolve.solve:main"
linsolve-gj = "linsolve.gj:main"
linsolve-lapack = "linsolve.lapack:main"
linsolve-read = "linsolve.matfile:main"

[tool.hatch.build.targets.wheel]
packages = ["linsolve"]

[tool.pytest.ini_options]
addopts = "-ra"
