[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metricutil"
version = "0.1.0"
description = "Building blocks for metrics: keys, registries, layered recorders, buckets, histograms and quantile summaries."
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "monitoring", "histogram", "quantile", "registry", "recorder", "ddsketch"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["metricutil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
