[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kqedtables"
version = "0.14.0"
description = "Read, check and write the checksummed form-factor and Taylor-coefficient tables used by the QED kernel"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["qed", "lattice", "kernel", "form factors", "crc32c", "checksum"]
classifiers = [
    "Development Status :: 4 - Beta",
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

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kqedtables"]

[tool.pytest.ini_options]
addopts = "-ra"
