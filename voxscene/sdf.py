"""Signed distance fields that can be sampled into voxel grids."""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import product
from typing import Callable, ClassVar, Iterable, Optional

from .data import VoxelData
from .settings import VoxLoaderSettings
from .voxel import Voxel

Vec3 = tuple[float, float, float]


def _vec(value: Iterable[float]) -> Vec3:
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"expected 3 components, got {len(components)}")
    return components  # type: ignore[return-value]


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


@dataclass(frozen=True)
class Quat:
    """A rotation quaternion (x, y, z, w)."""

    x: float
    y: float
    z: float
    w: float

    IDENTITY: ClassVar[Quat]

    @classmethod
    def from_axis_angle(cls, axis: Iterable[float], angle: float) -> Quat:
        """Rotation of ``angle`` radians around a unit-length ``axis``."""
        ax, ay, az = _vec(axis)
        half = angle * 0.5
        s = math.sin(half)
        return cls(ax * s, ay * s, az * s, math.cos(half))

    def inverse(self) -> Quat:
        """The inverse rotation of a unit quaternion."""
        return Quat(-self.x, -self.y, -self.z, self.w)

    def rotate(self, vector: Iterable[float]) -> Vec3:
        """Apply the rotation to a vector."""
        v = _vec(vector)
        q = (self.x, self.y, self.z)
        t = tuple(2.0 * c for c in _cross(q, v))
        u = _cross(q, t)  # type: ignore[arg-type]
        return (
            v[0] + self.w * t[0] + u[0],
            v[1] + self.w * t[1] + u[1],
            v[2] + self.w * t[2] + u[2],
        )


Quat.IDENTITY = Quat(0.0, 0.0, 0.0, 1.0)


class SDF:
    """A 3D signed distance field."""

    def __init__(self, distance: Callable[[Vec3], float]) -> None:
        self._distance = distance

    @classmethod
    def sphere(cls, radius: float) -> SDF:
        """Sphere of the given radius centred on the origin."""
        return cls(lambda point: _length(point) - radius)

    @classmethod
    def cuboid(cls, half_extent: Iterable[float]) -> SDF:
        """Axis-aligned box with the given half extents, centred on the origin."""
        extent = _vec(half_extent)

        def distance(point: Vec3) -> float:
            q = tuple(abs(p) - h for p, h in zip(point, extent))
            outside = _length(tuple(max(c, 0.0) for c in q))  # type: ignore[arg-type]
            return outside + min(max(q), 0.0)

        return cls(distance)

    def distance(self, point: Iterable[float]) -> float:
        """Signed distance from ``point`` to the surface."""
        return float(self._distance(_vec(point)))

    def add(self, other: SDF) -> SDF:
        """Union of two fields (logical OR)."""
        return SDF(lambda p: min(self.distance(p), other.distance(p)))

    def subtract(self, other: SDF) -> SDF:
        """This field with ``other`` cut away (logical AND NOT)."""
        return SDF(lambda p: max(self.distance(p), -other.distance(p)))

    def intersect(self, other: SDF) -> SDF:
        """Intersection of two fields (logical AND)."""
        return SDF(lambda p: max(self.distance(p), other.distance(p)))

    def translate(self, delta: Iterable[float]) -> SDF:
        """Offset the input point by ``delta`` before sampling."""
        d = _vec(delta)
        return SDF(lambda p: self.distance((p[0] + d[0], p[1] + d[1], p[2] + d[2])))

    def rotate(self, rotation: Quat) -> SDF:
        """Rotate the field by ``rotation``."""
        inverse = rotation.inverse()
        return SDF(lambda p: self.distance(inverse.rotate(p)))

    def warp(self, warp: Callable[[Vec3], Iterable[float]]) -> SDF:
        """Transform the input point with ``warp`` before sampling."""
        return SDF(lambda p: self.distance(warp(p)))

    def distort(self, distort: Callable[[float, Vec3], float]) -> SDF:
        """Transform the sampled distance with ``distort(distance, point)``."""
        return SDF(lambda p: distort(self.distance(p), p))

    def map_to_voxels(
        self,
        size: Iterable[int],
        settings: Optional[VoxLoaderSettings],
        map_fn: Callable[[float, Vec3], Voxel],
    ) -> VoxelData:
        """Sample the field at every cell of a grid centred on the origin.

        ``map_fn(distance, position)`` chooses the voxel for each cell.
        """
        sx, sy, sz = (int(v) for v in size)
        data = VoxelData.new((sx, sy, sz), settings)
        hx, hy, hz = sx * 0.5, sy * 0.5, sz * 0.5
        for x, y, z in product(range(sx), range(sy), range(sz)):
            position = (x - hx, y - hy, z - hz)
            data.set_voxel(map_fn(self.distance(position), position), (x, y, z))
        return data

    def voxelize(
        self,
        size: Iterable[int],
        settings: Optional[VoxLoaderSettings],
        fill: Voxel,
    ) -> VoxelData:
        """Fill every cell with a negative distance with ``fill``."""
        return self.map_to_voxels(
            size, settings, lambda distance, _: fill if distance < 0.0 else Voxel.EMPTY
        )