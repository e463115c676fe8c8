[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "capcloud"
version = "0.1.0"
description = "CloudStack operations for cluster infrastructure: offerings, templates, affinity groups, public IPs, load balancer rules and isolated networks."
requires-python = ">=3.10"
dependencies = []
keywords = ["cloudstack", "cluster", "infrastructure", "affinity-groups", "load-balancer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["capcloud"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
