[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memlab"
version = "0.1.0"
description = "Simulated heap allocation, mark-and-sweep collection and reference counting for learning how memory management works"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "malloc",
    "heap",
    "allocator",
    "garbage-collection",
    "mark-and-sweep",
    "reference-counting",
    "education",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
memlab-demo = "memlab.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["memlab"]

[tool.pytest.ini_options]
addopts = "-ra"
