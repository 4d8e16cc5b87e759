"""Settings that control how voxel data is turned into meshes and materials."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass(frozen=True)
class UnitOffset:
    """Offset of mesh vertices, expressed as a fraction of the model's size."""

    x: float
    y: float
    z: float

    ZERO: ClassVar[UnitOffset]
    CENTER: ClassVar[UnitOffset]
    CENTER_BASE: ClassVar[UnitOffset]


UnitOffset.ZERO = UnitOffset(0.0, 0.0, 0.0)
UnitOffset.CENTER = UnitOffset(0.5, 0.5, 0.5)
UnitOffset.CENTER_BASE = UnitOffset(0.5, 0.0, 0.5)


@dataclass
class VoxLoaderSettings:
    """Settings for loading and generating voxel models."""

    voxel_size: float = 1.0
    mesh_outer_faces: bool = True
    mesh_offset: UnitOffset = field(default_factory=lambda: UnitOffset.CENTER)
    emission_strength: float = 20.0
    uses_srgb: bool = True
    diffuse_roughness: float = 0.8
    supports_remeshing: bool = False