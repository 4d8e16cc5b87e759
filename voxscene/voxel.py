"""Voxel values as exposed to users and as stored internally."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


def _check_byte(value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"voxel value must be in 0..255, got {value}")


@dataclass(frozen=True)
class Voxel:
    """A palette index (1-255), with 0 reserved for :attr:`Voxel.EMPTY`."""

    value: int

    EMPTY: ClassVar[Voxel]

    def __post_init__(self) -> None:
        _check_byte(self.value)

    def to_raw(self) -> RawVoxel:
        """Convert to the stored representation, where 255 means empty."""
        return RawVoxel((self.value - 1) % 256)


@dataclass(frozen=True)
class RawVoxel:
    """A stored material index (0-254), with 255 reserved for :attr:`RawVoxel.EMPTY`."""

    value: int

    EMPTY: ClassVar[RawVoxel]

    def __post_init__(self) -> None:
        _check_byte(self.value)

    def to_voxel(self) -> Voxel:
        """Convert to the user-facing representation, where 0 means empty."""
        return Voxel((self.value + 1) % 256)


Voxel.EMPTY = Voxel(0)
RawVoxel.EMPTY = RawVoxel(255)