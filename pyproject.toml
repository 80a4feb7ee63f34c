[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpcgate"
version = "0.1.0"
description = "WSGI gateway middleware: Redis-backed token-bucket rate limiting, circuit breaking and uniform JSON responses"
requires-python = ">=3.10"
keywords = ["wsgi", "middleware", "rate-limit", "circuit-breaker", "redis", "gateway"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]
dependencies = [
    "pyyaml",
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rpcgate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
