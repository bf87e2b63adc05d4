[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spikecore"
version = "0.1.0"
description = "Instruction-level simulator of clustered spiking neural network accelerators"
requires-python = ">=3.10"
dependencies = []
keywords = ["spiking neural network", "snn", "accelerator", "simulator", "neuromorphic"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["spikecore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
