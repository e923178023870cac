"""Texture descriptions: colour formats, mipmap layers and the textures built from them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from gxtexconv.image import Image, PaletteEntry


class ColorFormat(enum.IntEnum):
    """Texel formats of the texture unit."""

    I4 = 0
    I8 = 1
    IA4 = 2
    IA8 = 3
    RGB565 = 4
    RGB5A3 = 5
    RGBA8 = 6
    CI4 = 8
    CI8 = 9
    CMPR = 14


class PaletteFormat(enum.IntEnum):
    """Entry formats of a colour lookup table."""

    IA8 = 0
    RGB565 = 1
    RGB5A3 = 2


class WrapMode(enum.IntEnum):
    """Texture coordinate wrapping."""

    CLAMP = 0
    REPEAT = 1
    MIRROR = 2


class FilterMode(enum.IntEnum):
    """Minification and magnification filters."""

    NEAR = 0
    LINEAR = 1
    NEAR_MIP_NEAR = 2
    LIN_MIP_NEAR = 3
    NEAR_MIP_LIN = 4
    LIN_MIP_LIN = 5


PALETTED_FORMATS = frozenset({ColorFormat.CI4, ColorFormat.CI8})

_FORMAT_NAMES = {
    ColorFormat.RGB565: "RGB565",
    ColorFormat.RGB5A3: "RGB5A3",
    ColorFormat.RGBA8: "RGBA8",
    ColorFormat.CMPR: "CMPR",
}


def bitrev(value: int) -> int:
    """Reverse the order of the 2-bit fields within each byte of a 16-bit value."""
    return (
        ((value & 0x03) << 6)
        | ((value & 0x0C) << 2)
        | ((value & 0x30) >> 2)
        | ((value & 0xC0) >> 6)
        | ((value & 0x0300) << 6)
        | ((value & 0x0C00) << 2)
        | ((value & 0x3000) >> 2)
        | ((value & 0xC000) >> 6)
    ) & 0xFFFF


@dataclass
class Layer:
    """One mipmap level of a texture."""

    color_format: int
    width: int
    height: int
    image: Optional[Image] = None


@dataclass
class Texture:
    """A texture to be written, with its mipmap layers.

    ``wrap_s`` and ``wrap_t`` of ``None`` mean the mode is chosen from the
    image dimensions. ``palette`` is filled in when the file layout is
    computed for a colour-indexed texture.
    """

    id: str
    image: Image
    color_format: int = ColorFormat.RGBA8
    palette_format: Optional[int] = None
    min_lod: int = 0
    max_lod: int = 0
    remap_lod: int = 0
    wrap_s: Optional[int] = None
    wrap_t: Optional[int] = None
    layers: List[Layer] = field(default_factory=list)
    palette: Optional[List[PaletteEntry]] = None

    def add_layer(self, width: int, height: int, source: Optional[Image] = None) -> Layer:
        """Append a layer; if ``source`` is given it is scaled to the layer's size."""
        layer = Layer(self.color_format, width, height)
        if source is not None:
            layer.image = source.box_filter(width, height)
        self.layers.append(layer)
        return layer

    def format_name(self) -> str:
        """A short name of the colour format, or ``"<unknown>"``."""
        return _FORMAT_NAMES.get(self.color_format, "<unknown>")