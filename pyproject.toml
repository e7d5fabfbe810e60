[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentwire"
version = "0.1.0"
description = "Encoding and decoding of SSH agent protocol messages and OpenSSH agent extensions"
requires-python = ">=3.10"
dependencies = []
keywords = ["ssh", "ssh-agent", "protocol", "openssh", "wire-format"]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["agentwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
