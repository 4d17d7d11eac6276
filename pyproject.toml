[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "robokit"
version = "0.1.0"
description = "Robot SDK building blocks: vectors, poses, protobuf attribute maps and a mobile base component with request handler and client."
requires-python = ">=3.10"
dependencies = [
    "protobuf",
]
keywords = [
    "robotics",
    "protobuf",
    "sdk",
    "mobile-base",
    "pose",
    "attribute-map",
]
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
    "Topic :: Scientific/Engineering",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
robokit-audio-classification = "robokit.audio_classification:main"

[tool.hatch.build.targets.wheel]
packages = ["robokit"]

[tool.hatch.build.targets.sdist]
include = [
    "robokit",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
