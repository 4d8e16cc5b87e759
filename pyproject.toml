[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxscene"
version = "0.19.0"
description = "Voxel grids, palettes, signed distance fields, animations and scene graphs for MagicaVoxel-style worlds."
requires-python = ">=3.10"
keywords = ["voxel", "magicavoxel", "sdf", "scene-graph", "palette", "3d"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
    "Typing :: Typed",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxscene"]

[tool.pytest.ini_options]
addopts = "-ra"
