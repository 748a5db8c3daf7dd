[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "legtraj"
version = "0.1.0"
description = "Gait parameters, spline node variables and phase durations for legged-robot trajectory optimization"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["legged robots", "trajectory optimization", "splines", "gait", "locomotion"]
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
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["legtraj"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
