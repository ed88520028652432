[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simplefluid"
version = "0.1.0"
description = "Finite-volume building blocks: typed configuration, cell and face fields, flux operators, sparse matrix assembly and a GMRES solve."
requires-python = ">=3.10"
keywords = ["cfd", "finite-volume", "boussinesq", "natural-convection", "sparse", "gmres"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["simplefluid"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
