"""Programmatic modification of voxels within a region of a model."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Callable, Iterable, Optional

from .data import VoxelData
from .voxel import Voxel

IVec3 = tuple[int, int, int]
Vec3 = tuple[float, float, float]


def _ivec(value: Iterable[int]) -> IVec3:
    components = tuple(int(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"expected 3 components, got {len(components)}")
    return components  # type: ignore[return-value]


@dataclass(frozen=True)
class VoxelRegion:
    """A box region within a model, in voxel space."""

    origin: IVec3
    size: IVec3

    @classmethod
    def from_center(cls, center: Iterable[int], half_size: Iterable[int]) -> VoxelRegion:
        """Region around ``center`` extending ``half_size`` on each side."""
        c, h = _ivec(center), _ivec(half_size)
        return cls(
            (c[0] - h[0], c[1] - h[1], c[2] - h[2]),
            (h[0] * 2, h[1] * 2, h[2] * 2),
        )

    def center(self) -> Vec3:
        """The centre of the region."""
        return tuple(  # type: ignore[return-value]
            float(o) + float(s) * 0.5 for o, s in zip(self.origin, self.size)
        )


def clamp_region(region: Optional[VoxelRegion], model_size: Iterable[int]) -> VoxelRegion:
    """Clamp a region to a model; ``None`` stands for the whole model."""
    size = _ivec(model_size)
    if region is None:
        return VoxelRegion((0, 0, 0), size)
    if min(size) < 1:
        raise ValueError(f"cannot clamp a region to a model of size {size}")
    origin = tuple(min(max(o, 0), s - 1) for o, s in zip(_ivec(region.origin), size))
    clamped = tuple(
        min(max(r, 1), s - o) for r, s, o in zip(_ivec(region.size), size, origin)
    )
    return VoxelRegion(origin, clamped)  # type: ignore[arg-type]


def modify_voxels(
    data: VoxelData,
    modify: Callable[[IVec3, Voxel, VoxelData], Voxel],
    region: Optional[VoxelRegion] = None,
) -> None:
    """Replace every voxel in ``region`` with ``modify(position, voxel, data)``.

    The callback always sees the model as it was before this call; the new
    voxels are written once every position in the region has been visited.
    """
    bounds = clamp_region(region, data.size())
    (ox, oy, oz), (sx, sy, sz) = bounds.origin, bounds.size
    updates = []
    for point in product(range(ox, ox + sx), range(oy, oy + sy), range(oz, oz + sz)):
        updates.append((point, modify(point, data.get_voxel_at_point(point), data)))
    for point, voxel in updates:
        data.set_voxel(voxel, point)