[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "skyrelay"
version = "0.1.0"
description = "Frame format, event queue and device receive loop for a phone-to-plane TCP relay"
requires-python = ">=3.10"
dependencies = []
keywords = ["relay", "tcp", "telemetry", "frames", "drone"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["skyrelay"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
