"""Voxel palettes and the PBR materials derived from them."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Mapping, Optional, Sequence

PALETTE_SIZE = 256
TEXTURE_SIDE = 16


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _unorm16(value: float) -> int:
    """Scale a 0..1 value to a saturating unsigned 16-bit integer."""
    scaled = value * 65535.0
    if not scaled > 0.0:
        return 0
    if scaled >= 65535.0:
        return 65535
    return int(_f32(_f32(value) * 65535.0))


def _to_u8(value: float) -> int:
    return int(math.floor(min(max(value, 0.0), 1.0) * 255.0 + 0.5))


def _srgb_to_linear(value: float) -> float:
    if value <= 0.0:
        return value
    if value <= 0.04045:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def _linear_to_srgb(value: float) -> float:
    if value <= 0.0:
        return value
    if value <= 0.0031308:
        return value * 12.92
    return 1.055 * value ** (1.0 / 2.4) - 0.055


def _lerp(a: float, b: float, amount: float) -> float:
    return a + (b - a) * amount


def _check_byte(value: int) -> int:
    value = int(value)
    if not 0 <= value <= 255:
        raise ValueError(f"colour component must be in 0..255, got {value}")
    return value


@dataclass(frozen=True)
class Color:
    """An RGBA colour stored in linear space."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @classmethod
    def srgba_u8(cls, r: int, g: int, b: int, a: int) -> Color:
        """Colour from sRGB-encoded byte components."""
        r, g, b, a = (_check_byte(v) for v in (r, g, b, a))
        return cls(
            _srgb_to_linear(r / 255.0),
            _srgb_to_linear(g / 255.0),
            _srgb_to_linear(b / 255.0),
            a / 255.0,
        )

    @classmethod
    def linear_rgba(cls, r: float, g: float, b: float, a: float) -> Color:
        """Colour from linear float components."""
        return cls(float(r), float(g), float(b), float(a))

    def to_linear(self) -> tuple[float, float, float, float]:
        """Linear RGBA components."""
        return (self.red, self.green, self.blue, self.alpha)

    def to_srgba_bytes(self) -> bytes:
        """sRGB-encoded RGBA bytes."""
        rgb = (_to_u8(_linear_to_srgb(c)) for c in (self.red, self.green, self.blue))
        return bytes([*rgb, _to_u8(self.alpha)])

    def to_linear_bytes(self) -> bytes:
        """Linear RGBA bytes."""
        return bytes(_to_u8(c) for c in self.to_linear())

    def lerp(self, other: Color, amount: float) -> Color:
        """Linear interpolation in linear space."""
        return Color(
            *(_lerp(a, b, amount) for a, b in zip(self.to_linear(), other.to_linear()))
        )


@dataclass(frozen=True)
class MaterialProperty:
    """A material property that is either constant or varies per palette element."""

    value: Optional[float] = None

    VARIES_PER_ELEMENT: ClassVar[MaterialProperty]

    @property
    def varies(self) -> bool:
        """True if the property differs between elements."""
        return self.value is None

    @classmethod
    def from_values(cls, values: Iterable[float]) -> MaterialProperty:
        """Constant (the maximum) if all values lie within 0.001, else varying."""
        values = [float(v) for v in values]
        if not values:
            raise ValueError("cannot derive a material property from no values")
        if any(math.isnan(v) for v in values):
            raise ValueError("tried to compare NaN")
        highest = max(values)
        if highest - min(values) < 0.001:
            return cls(highest)
        return cls.VARIES_PER_ELEMENT


MaterialProperty.VARIES_PER_ELEMENT = MaterialProperty()


@dataclass
class VoxelElement:
    """Physical properties of one kind of voxel."""

    color: Color = field(default_factory=lambda: Color(1.0, 0.0, 0.0, 1.0))
    emission: float = 0.0
    roughness: float = 0.5
    metalness: float = 0.0
    translucency: float = 0.0
    refraction_index: float = 1.5
    density: float = 0.0

    def _lerp(self, other: VoxelElement, amount: float) -> VoxelElement:
        return VoxelElement(
            color=self.color.lerp(other.color, amount),
            emission=_lerp(self.emission, other.emission, amount),
            roughness=_lerp(self.roughness, other.roughness, amount),
            metalness=_lerp(self.metalness, other.metalness, amount),
            translucency=_lerp(self.translucency, other.translucency, amount),
            refraction_index=_lerp(self.refraction_index, other.refraction_index, amount),
            density=_lerp(self.density, other.density, amount),
        )


@dataclass(frozen=True)
class Texture:
    """A 2D texture holding raw pixel bytes."""

    name: str
    width: int
    height: int
    format: str
    data: bytes


@dataclass
class Material:
    """A physically based material derived from a palette."""

    base_color_texture: Texture
    emissive: tuple[float, float, float, float]
    emissive_texture: Optional[Texture]
    perceptual_roughness: float
    metallic: float
    metallic_roughness_texture: Optional[Texture]
    specular_transmission: float
    specular_transmission_texture: Optional[Texture]
    ior: float = 1.5
    thickness: float = 0.0


def _material_float(material: Mapping[str, str], key: str) -> Optional[float]:
    raw = material.get(key)
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


class VoxelPalette:
    """The 256 voxel elements that a model can use."""

    def __init__(self, elements: Iterable[VoxelElement], uses_srgb: bool = True) -> None:
        elements = list(elements)
        self.emission = MaterialProperty.from_values(e.emission for e in elements)
        self.roughness = MaterialProperty.from_values(e.roughness for e in elements)
        self.metalness = MaterialProperty.from_values(e.metalness for e in elements)
        self.transmission = MaterialProperty.from_values(e.translucency for e in elements)
        elements = elements[:PALETTE_SIZE]
        elements.extend(VoxelElement() for _ in range(PALETTE_SIZE - len(elements)))
        self.elements: list[VoxelElement] = elements
        self.indices_of_refraction: list[Optional[float]] = [
            e.refraction_index if e.translucency > 0.0 else None for e in elements
        ]
        self.density_for_voxel: list[Optional[float]] = [
            e.density if e.density > 0.0 else None for e in elements
        ]
        self.uses_srgb = uses_srgb

    def __repr__(self) -> str:
        return (
            f"VoxelPalette(emission={self.emission}, roughness={self.roughness}, "
            f"metalness={self.metalness}, transmission={self.transmission}, "
            f"uses_srgb={self.uses_srgb})"
        )

    @classmethod
    def from_colors(cls, colors: Iterable[Color], uses_srgb: bool = True) -> VoxelPalette:
        """Palette of default elements with the given colours."""
        return cls((VoxelElement(color=c) for c in colors), uses_srgb)

    @classmethod
    def from_gradient(
        cls, stops: Sequence[tuple[int, VoxelElement]], uses_srgb: bool = True
    ) -> VoxelPalette:
        """Palette interpolated between elements placed at index stops.

        The last stop is held up to index 253; later indices keep the default element.
        """
        elements = [VoxelElement() for _ in range(PALETTE_SIZE)]
        for position, (stop, element) in enumerate(stops):
            stop = _check_byte(stop)
            if position + 1 < len(stops):
                next_stop, next_element = stops[position + 1]
                next_stop = _check_byte(next_stop)
            else:
                next_stop, next_element = 254, element
            if next_stop < stop:
                raise ValueError(f"gradient stops out of order: {stop} then {next_stop}")
            distance = float(next_stop - stop)
            for index in range(stop, next_stop):
                elements[index] = element._lerp(next_element, (index - stop) / distance)
        return cls(elements, uses_srgb)

    @classmethod
    def from_materials(
        cls,
        colors: Iterable[Sequence[int]],
        materials: Iterable[Mapping[str, str]],
        diffuse_roughness: float,
        emission_strength: float,
        uses_srgb: bool = True,
    ) -> VoxelPalette:
        """Palette from RGBA byte colours and their raw material properties.

        Material properties use the keys ``_type``, ``_emit``, ``_flux``, ``_rough``,
        ``_metal``, ``_alpha``, ``_ior`` and ``_d``, with string values.
        """
        elements = []
        for (r, g, b, a), material in zip(colors, materials):
            kind = material.get("_type")
            if uses_srgb:
                color = Color.srgba_u8(r, g, b, a)
            else:
                color = Color.linear_rgba(
                    _check_byte(r) / 255.0,
                    _check_byte(g) / 255.0,
                    _check_byte(b) / 255.0,
                    _check_byte(a) / 255.0,
                )
            emission = (
                (_material_float(material, "_emit") or 0.0)
                * ((_material_float(material, "_flux") or 0.0) + 1.0)
                * emission_strength
            )
            if kind == "_diffuse":
                roughness = diffuse_roughness
            else:
                roughness = _material_float(material, "_rough") or 0.0
            if kind == "_glass":
                refraction_index = 1.0 + (_material_float(material, "_ior") or 0.0)
            else:
                refraction_index = 0.0
            if kind == "_media":
                density = (_material_float(material, "_d") or 0.0) * 10.0
            else:
                density = 0.0
            elements.append(
                VoxelElement(
                    color=color,
                    emission=emission,
                    roughness=roughness,
                    metalness=_material_float(material, "_metal") or 0.0,
                    translucency=_material_float(material, "_alpha") or 0.0,
                    refraction_index=refraction_index,
                    density=density,
                )
            )
        return cls(elements, uses_srgb)

    def _texture(self, name: str, fmt: str, data: bytes) -> Texture:
        return Texture(name, TEXTURE_SIDE, TEXTURE_SIDE, fmt, data)

    def create_material(self) -> Material:
        """Build the material and its lookup textures from the palette."""
        elements = self.elements
        color_data = b"".join(
            e.color.to_srgba_bytes() if self.uses_srgb else e.color.to_linear_bytes()
            for e in elements
        )
        base_color_texture = self._texture(
            "material_color",
            "rgba8unorm_srgb" if self.uses_srgb else "rgba8unorm",
            color_data,
        )

        has_emission = self.emission.varies or (self.emission.value or 0.0) > 0.0
        has_roughness_metalness = self.roughness.varies or self.metalness.varies
        has_translucency = self.transmission.varies

        emissive_texture = None
        if has_emission:
            emission_data = b"".join(
                struct.pack(
                    "<4f",
                    e.color.red * e.emission,
                    e.color.green * e.emission,
                    e.color.blue * e.emission,
                    e.color.alpha,
                )
                for e in elements
            )
            emissive_texture = self._texture("material_emission", "rgba32float", emission_data)

        metallic_roughness_texture = None
        if has_roughness_metalness:
            raw = b"".join(
                struct.pack(
                    "<4H", 0, _unorm16(e.roughness), _unorm16(e.metalness), 0
                )
                for e in elements
            )
            metallic_roughness_texture = self._texture(
                "material_metallic_roughness", "rgba16unorm", raw
            )

        specular_transmission_texture = None
        if has_translucency:
            raw = b"".join(struct.pack("<H", _unorm16(e.translucency)) for e in elements)
            specular_transmission_texture = self._texture(
                "material_specular_transmission", "r16unorm", raw
            )

        if has_roughness_metalness or self.roughness.varies:
            perceptual_roughness = 1.0
        else:
            perceptual_roughness = self.roughness.value  # type: ignore[assignment]
        if has_roughness_metalness or self.metalness.varies:
            metallic = 1.0
        else:
            metallic = self.metalness.value  # type: ignore[assignment]

        return Material(
            base_color_texture=base_color_texture,
            emissive=(1.0, 1.0, 1.0, 1.0) if has_emission else (0.0, 0.0, 0.0, 1.0),
            emissive_texture=emissive_texture,
            perceptual_roughness=perceptual_roughness,
            metallic=metallic,
            metallic_roughness_texture=metallic_roughness_texture,
            specular_transmission=(
                1.0 if self.transmission.varies else self.transmission.value  # type: ignore[arg-type]
            ),
            specular_transmission_texture=specular_transmission_texture,
        )