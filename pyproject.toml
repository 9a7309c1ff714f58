[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clnkit"
version = "0.1.0"
description = "Client, plugin framework and configuration tools for the Core Lightning JSON-RPC interface"
requires-python = ">=3.10"
dependencies = []
keywords = ["lightning", "core-lightning", "json-rpc", "bitcoin", "plugin", "unix-socket"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
clnkit-demo-plugin = "clnkit.demo_plugin:main"

[tool.hatch.build.targets.wheel]
packages = ["clnkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
