[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "funscriptkit"
version = "0.1.0"
description = "Editing model for funscript motion scripts: actions, selection, undo, splines and speed heatmaps"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = ["funscript", "script", "editor", "timeline", "heatmap", "undo", "spline"]
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
    "Topic :: Multimedia :: Video :: Non-Linear Editor",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["funscriptkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
