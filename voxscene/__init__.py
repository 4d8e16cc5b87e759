"""Voxel grids, palettes, signed distance fields, animations and scene graphs."""

__version__ = "0.19.0"

__all__ = [
    "animation",
    "data",
    "model",
    "modify",
    "palette",
    "scene",
    "sdf",
    "settings",
    "voxel",
]