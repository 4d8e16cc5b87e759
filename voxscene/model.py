"""Voxel models and building them from voxel data and a palette."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Sequence

from .animation import VoxelAnimationPlayer
from .data import CloudImage, VisibleVoxel, VoxelData, create_cloud_image
from .palette import Material, VoxelPalette
from .voxel import Voxel

Vec3 = tuple[float, float, float]
IVec3 = tuple[int, int, int]


@dataclass
class VoxelModel:
    """A named voxel model and what it renders as."""

    name: str
    data: VoxelData
    has_mesh: bool = False
    has_cloud: bool = False

    def size(self) -> IVec3:
        """Size of the model in voxels."""
        return self.data.size()

    def model_size(self) -> Vec3:
        """Size of the model scaled by the voxel size."""
        return self.data.model_size()

    def get_voxel_at_point(self, position: Iterable[int]) -> Voxel:
        """Return the voxel at a voxel-space position."""
        return self.data.get_voxel_at_point(position)

    def local_point_to_voxel_space(self, local_point: Iterable[float]) -> IVec3:
        """Convert a point in the model's local space to voxel coordinates."""
        return self.data.local_point_to_voxel_space(local_point)


@dataclass
class ModelBuild:
    """A model together with the render data derived from it."""

    model: VoxelModel
    visible_voxels: list[VisibleVoxel] = field(default_factory=list)
    average_ior: Optional[float] = None
    material: Optional[Material] = None
    cloud_image: Optional[CloudImage] = None


def _opaque(material: Material) -> Material:
    return replace(material, specular_transmission_texture=None, specular_transmission=0.0)


def _build(data: VoxelData, name: str, palette: VoxelPalette, base: Material) -> ModelBuild:
    visible, average_ior, needs_meshing = data.visible_voxels(
        palette.indices_of_refraction, palette.density_for_voxel
    )
    densities, has_cloud = data.cloud_voxels(palette.density_for_voxel)
    material: Optional[Material] = None
    if needs_meshing:
        if average_ior is not None:
            material = replace(
                base, ior=average_ior, thickness=float(min(data.size()))
            )
        else:
            material = _opaque(base)
    cloud_image = create_cloud_image(densities, data) if has_cloud else None
    model = VoxelModel(name=name, data=data, has_mesh=needs_meshing, has_cloud=has_cloud)
    return ModelBuild(
        model=model,
        visible_voxels=visible if needs_meshing else [],
        average_ior=average_ior,
        material=material,
        cloud_image=cloud_image,
    )


def create_voxel_model(data: VoxelData, name: str, palette: VoxelPalette) -> ModelBuild:
    """Build a model, its material and its cloud image from voxel data."""
    return _build(data, name, palette, palette.create_material())


def create_voxel_animation(
    frames: Sequence[VoxelData], name: str, palette: VoxelPalette
) -> tuple[list[ModelBuild], VoxelAnimationPlayer]:
    """Build one model per frame, named ``{name}-{index}``, and a player for them."""
    base = palette.create_material()
    builds = [
        _build(data, f"{name}-{index}", palette, base) for index, data in enumerate(frames)
    ]
    player = VoxelAnimationPlayer(frames=list(range(len(builds))))
    return builds, player