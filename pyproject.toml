[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "amsclient"
version = "0.1.0"
description = "Client building blocks for the Anbox Management Service (AMS) REST API"
requires-python = ">=3.10"
dependencies = []
keywords = ["ams", "anbox", "rest", "client", "containers", "images", "nodes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["amsclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
