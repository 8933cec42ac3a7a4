[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sponge"
version = "0.1.0"
description = "Building blocks for a user-space TCP stack: byte streams, stream reassembly, packet parsing, checksums, addresses and sockets"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "networking", "byte-stream", "reassembly", "sockets", "checksum", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
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

[project.scripts]
webget = "sponge.webget:main"

[tool.hatch.build.targets.wheel]
packages = ["sponge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
