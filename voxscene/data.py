"""Voxel grids: storage, coordinate conversion and derived voxel buffers."""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Sequence

from .settings import VoxLoaderSettings
from .voxel import RawVoxel, Voxel

Vec3 = tuple[float, float, float]
IVec3 = tuple[int, int, int]


class OutOfBoundsError(IndexError):
    """A voxel-space point lies outside the model."""


class VoxelVisibility(Enum):
    """How a voxel takes part in meshing."""

    EMPTY = "empty"
    TRANSLUCENT = "translucent"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class VisibleVoxel:
    """A stored palette index together with its meshing visibility."""

    index: int
    visibility: VoxelVisibility


@dataclass(frozen=True)
class CloudImage:
    """A 3D single-channel float texture of cloud densities."""

    width: int
    height: int
    depth: int
    data: bytes
    format: str = "r32float"
    address_mode: str = "mirror_repeat"
    filter_mode: str = "nearest"


@dataclass(repr=False)
class VoxelData:
    """A padded grid of stored voxels plus the settings used to build it."""

    shape: IVec3
    voxels: bytearray
    settings: VoxLoaderSettings

    def __repr__(self) -> str:
        return (
            f"VoxelData(shape={self.shape}, voxels={len(self.voxels)}, "
            f"settings={self.settings!r})"
        )

    @classmethod
    def new(cls, size: Iterable[int], settings: Optional[VoxLoaderSettings] = None) -> VoxelData:
        """Return an empty model of the given size."""
        settings = replace(settings) if settings is not None else VoxLoaderSettings()
        pad = 2 if settings.mesh_outer_faces else 0
        sx, sy, sz = (int(v) for v in size)
        if min(sx, sy, sz) < 0:
            raise ValueError("model size must not be negative")
        shape = (sx + pad, sy + pad, sz + pad)
        count = shape[0] * shape[1] * shape[2]
        return cls(shape, bytearray([RawVoxel.EMPTY.value]) * count, settings)

    @classmethod
    def from_model(
        cls,
        size: Iterable[int],
        voxels: Iterable[tuple[int, int, int, int]],
        settings: Optional[VoxLoaderSettings] = None,
    ) -> VoxelData:
        """Build from left-handed Z-up voxels given as (x, y, z, palette index).

        Coordinates are converted to right-handed Y-up space.
        """
        mx, my, mz = (int(v) for v in size)
        data = cls.new((mx, mz, my), settings)
        for x, y, z, index in voxels:
            data.set_voxel(RawVoxel(index).to_voxel(), ((mx - 1) - x, z, y))
        return data

    def _linearize(self, point: IVec3) -> int:
        x, y, z = point
        sx, sy, _ = self.shape
        return x + sx * (y + sy * z)

    def _delinearize(self, index: int) -> IVec3:
        sx, sy, _ = self.shape
        return index % sx, (index // sx) % sy, index // (sx * sy)

    def padding(self) -> int:
        """Total padding per axis: 2 when outer faces are meshed, else 0."""
        return 2 if self.settings.mesh_outer_faces else 0

    def size(self) -> IVec3:
        """Size of the model, not counting padding."""
        pad = self.padding()
        size = tuple(v - pad for v in self.shape)
        if min(size) < 0:
            return (0, 0, 0)
        return size  # type: ignore[return-value]

    def model_size(self) -> Vec3:
        """Size of the model scaled by the voxel size."""
        scale = self.settings.voxel_size
        return tuple(float(v) * scale for v in self.size())  # type: ignore[return-value]

    def local_point_to_voxel_space(self, local_point: Iterable[float]) -> IVec3:
        """Convert a point in the model's local space to voxel coordinates."""
        scale = self.settings.voxel_size
        return tuple(  # type: ignore[return-value]
            int(p / scale + s * 0.5) for p, s in zip(local_point, self.size())
        )

    def voxel_coord_to_local_space(self, voxel_coord: Iterable[int]) -> Vec3:
        """Convert voxel coordinates to a point in the model's local space."""
        scale = self.settings.voxel_size
        return tuple(  # type: ignore[return-value]
            (float(c) - s * 0.5) * scale for c, s in zip(voxel_coord, self.size())
        )

    def point_in_model(self, point: Iterable[int]) -> IVec3:
        """Return the point if it lies within the model, else raise OutOfBoundsError."""
        point = tuple(int(v) for v in point)
        if any(p >= s or p < 0 for p, s in zip(point, self.size())):
            raise OutOfBoundsError(f"{point} is outside a model of size {self.size()}")
        return point  # type: ignore[return-value]

    def get_voxel_at_point(self, position: Iterable[int]) -> Voxel:
        """Return the voxel at a voxel-space position."""
        point = self.point_in_model(position)
        lead = self.padding() // 2
        index = self._linearize((point[0] + lead, point[1] + lead, point[2] + lead))
        return RawVoxel(self.voxels[index]).to_voxel()

    def set_voxel(self, voxel: Voxel, point: Iterable[int]) -> None:
        """Write a voxel at a voxel-space position."""
        x, y, z = self.point_in_model(point)
        lead = self.padding() // 2
        self.voxels[self._linearize((x + lead, y + lead, z + lead))] = voxel.to_raw().value

    def visible_voxels(
        self,
        ior_for_voxel: Sequence[Optional[float]],
        density_for_voxel: Sequence[Optional[float]],
    ) -> tuple[list[VisibleVoxel], Optional[float], bool]:
        """Classify every stored voxel for meshing.

        Returns the classified voxels, the average index of refraction of the
        translucent voxels (None if there are none) and whether anything needs meshing.
        """
        refraction_indices: list[float] = []
        result: list[VisibleVoxel] = []
        for raw in self.voxels:
            if raw == RawVoxel.EMPTY.value:
                visibility = VoxelVisibility.EMPTY
            elif (ior := ior_for_voxel[raw]) is not None:
                refraction_indices.append(ior)
                visibility = VoxelVisibility.TRANSLUCENT
            elif density_for_voxel[raw] is not None:
                visibility = VoxelVisibility.EMPTY
            else:
                visibility = VoxelVisibility.OPAQUE
            result.append(VisibleVoxel(raw, visibility))
        average_ior = (
            sum(refraction_indices) / len(refraction_indices) if refraction_indices else None
        )
        needs_meshing = any(v.visibility is not VoxelVisibility.EMPTY for v in result)
        return result, average_ior, needs_meshing

    def cloud_voxels(
        self, density_for_voxel: Sequence[Optional[float]]
    ) -> tuple[list[float], bool]:
        """Return the density of every interior voxel and whether any is a cloud voxel."""
        max_bound = tuple(v - 1 for v in self.shape)
        has_cloud = False
        densities: list[float] = []
        for index, raw in enumerate(self.voxels):
            coords = self._delinearize(index)
            if 0 in coords or any(c == m for c, m in zip(coords, max_bound)):
                continue
            density = density_for_voxel[raw]
            if density is not None:
                has_cloud = True
                densities.append(density)
            else:
                densities.append(0.0)
        return densities, has_cloud


def create_cloud_image(cloud_voxels: Sequence[float], data: VoxelData) -> CloudImage:
    """Pack cloud densities into a 3D float texture the size of the unpadded model."""
    width, height, depth = (v - 2 for v in data.shape)
    if min(width, height, depth) < 0:
        raise ValueError("cloud images require padded voxel data")
    if len(cloud_voxels) != width * height * depth:
        raise ValueError(
            f"expected {width * height * depth} densities, got {len(cloud_voxels)}"
        )
    payload = struct.pack(f"<{len(cloud_voxels)}f", *cloud_voxels)
    return CloudImage(width, height, depth, payload)