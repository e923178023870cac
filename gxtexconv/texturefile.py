"""Sizes and layout of texture files, and DXT1 compression of images."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from gxtexconv.image import Image
from gxtexconv.squish.clusterfit import ClusterFit
from gxtexconv.squish.colourset import ColourSet, SquishFlags
from gxtexconv.squish.rangefit import RangeFit
from gxtexconv.texture import (
    PALETTED_FORMATS,
    ColorFormat,
    FilterMode,
    PaletteFormat,
    Texture,
    WrapMode,
)

TPL_VERSION = 0x0020AF30
TPL_HEADER_SIZE = 12
TPL_TEX_DESC_SIZE = 8
TPL_PAL_DESC_SIZE = 12
TPL_IMG_DESC_SIZE = 36

_POWERS_OF_TWO = frozenset(1 << n for n in range(11))
_PALETTE_ENTRY_SIZES = {PaletteFormat.RGB565: 2, PaletteFormat.RGB5A3: 2}


@dataclass
class TplLayout:
    """Block sizes and per-texture offsets of a texture file."""

    texture_count: int = 0
    palette_count: int = 0
    texture_desc_block_size: int = 0
    image_desc_block_size: int = 0
    palette_desc_block_size: int = 0
    image_desc_pad: int = 0
    palette_desc_pad: int = 0
    image_bank_size: int = 0
    palette_bank_size: int = 0
    image_desc_offsets: List[int] = field(default_factory=list)
    image_data_offsets: List[int] = field(default_factory=list)
    image_data_lengths: List[int] = field(default_factory=list)
    palette_desc_offsets: List[int] = field(default_factory=list)
    palette_data_offsets: List[int] = field(default_factory=list)
    palette_data_lengths: List[int] = field(default_factory=list)


def image_buffer_size(color_format: int, width: int, height: int) -> int:
    """Bytes taken by one layer of the given format and size."""
    if color_format in (ColorFormat.I4, ColorFormat.CI4, ColorFormat.CMPR):
        return ((width + 7) >> 3) * ((height + 7) >> 3) * 32
    if color_format in (ColorFormat.I8, ColorFormat.IA4, ColorFormat.CI8):
        # Rows are counted generously, as the file format reserves them.
        return ((width + 7) >> 3) * ((height + 7) >> 2) * 32
    if color_format in (ColorFormat.IA8, ColorFormat.RGB565, ColorFormat.RGB5A3):
        return ((width + 3) >> 2) * ((height + 3) >> 2) * 32
    if color_format == ColorFormat.RGBA8:
        return ((width + 3) >> 2) * ((height + 3) >> 2) * 64
    return 0


def mipmap_buffer_size(texture: Texture) -> int:
    """Bytes taken by all layers of a texture."""
    total = 0
    for layer in texture.layers:
        if layer.image is None:
            width = height = 0
        else:
            width, height = layer.image.width, layer.image.height
        total += image_buffer_size(layer.color_format, width, height)
    return total


def min_mag(texture: Texture) -> Tuple[FilterMode, FilterMode]:
    """The minification and magnification filters of a texture."""
    if texture.color_format in PALETTED_FORMATS:
        return FilterMode.LINEAR, FilterMode.LINEAR
    if texture.max_lod - texture.min_lod + 1 == 1:
        return FilterMode.LINEAR, FilterMode.LINEAR
    return FilterMode.LIN_MIP_LIN, FilterMode.LINEAR


def wrap_mode_by_dimension(texture: Texture) -> WrapMode:
    """Repeat when both sides are equal powers-of-two classes, otherwise clamp."""
    if texture.wrap_s is None and texture.wrap_t is None:
        modes = [
            WrapMode.REPEAT if size in _POWERS_OF_TWO else WrapMode.CLAMP
            for size in (texture.image.width, texture.image.height)
        ]
        if modes[0] == modes[1]:
            return modes[0]
    return WrapMode.CLAMP


def _pad(size: int) -> int:
    if size < 32:
        return 32 - size
    if size % 32:
        return 32 - size % 32
    return 0


def compute_layout(textures: Sequence[Texture]) -> TplLayout:
    """Work out block sizes and offsets for a file holding ``textures``.

    Colour-indexed textures get their ``palette`` filled in. Palette
    assignment stops at the first colour-indexed texture whose palette
    format has no known entry size.
    """
    textures = list(textures)
    count = len(textures)
    layout = TplLayout(
        texture_count=count,
        palette_count=sum(1 for t in textures if t.color_format in PALETTED_FORMATS),
    )
    layout.texture_desc_block_size = count * TPL_TEX_DESC_SIZE
    layout.image_desc_block_size = count * TPL_IMG_DESC_SIZE
    layout.palette_desc_block_size = layout.palette_count * TPL_PAL_DESC_SIZE

    descs_end = TPL_HEADER_SIZE + layout.texture_desc_block_size + layout.image_desc_block_size
    layout.image_desc_pad = _pad(descs_end)
    palette_desc_start = descs_end + layout.image_desc_pad
    palette_descs_end = palette_desc_start + layout.palette_desc_block_size
    layout.palette_desc_pad = _pad(palette_descs_end)

    bank_offset = palette_descs_end + layout.palette_desc_pad
    image_desc_start = TPL_HEADER_SIZE + layout.texture_desc_block_size
    for position, texture in enumerate(textures):
        length = mipmap_buffer_size(texture)
        layout.image_desc_offsets.append(image_desc_start + position * TPL_IMG_DESC_SIZE)
        layout.image_data_offsets.append(bank_offset)
        layout.image_data_lengths.append(length)
        bank_offset += length
        layout.image_bank_size += length

    layout.palette_desc_offsets = [0] * count
    layout.palette_data_offsets = [0] * count
    layout.palette_data_lengths = [0] * count
    for position, texture in enumerate(textures):
        if texture.color_format in PALETTED_FORMATS:
            layout.palette_data_offsets[position] = bank_offset
            layout.palette_desc_offsets[position] = (
                palette_desc_start + position * TPL_PAL_DESC_SIZE
            )
            entry_size = _PALETTE_ENTRY_SIZES.get(texture.palette_format)
            if entry_size is None:
                break
            wanted = 16 if texture.color_format == ColorFormat.CI4 else 256
            _, palette = texture.image.palettized(wanted)
            if 0 < len(palette) <= 16384:
                texture.palette = palette
                layout.palette_data_lengths[position] = (
                    ((len(palette) + 15) & 0xFFF0) * entry_size
                )
        length = layout.palette_data_lengths[position]
        bank_offset += length
        layout.palette_bank_size += length
    return layout


_DXT1_FLAGS = SquishFlags.DXT1 | SquishFlags.COLOUR_METRIC_PERCEPTUAL


def _compress_block(rgba: Sequence[int]) -> bytes:
    colours = ColourSet(rgba, 0xFFFF, _DXT1_FLAGS)
    fitter = RangeFit if colours.count <= 1 else ClusterFit
    return fitter(colours, _DXT1_FLAGS).compress()


def dxt1_compress(image: Image) -> bytes:
    """Compress an image to DXT1 blocks, left to right and top to bottom.

    Alpha is ignored. Each block is 8 bytes with little-endian colour words.
    Both dimensions must be multiples of four.
    """
    width, height = image.width, image.height
    if width % 4 or height % 4:
        raise ValueError("DXT1 compression needs dimensions that are multiples of four")
    data = image.rgba()
    out = bytearray()
    for block_y in range(0, height, 4):
        for block_x in range(0, width, 4):
            rgba = bytearray()
            for row in range(4):
                start = ((block_y + row) * width + block_x) * 4
                pixels = data[start:start + 16]
                for pixel in range(4):
                    rgba += pixels[4 * pixel:4 * pixel + 3]
                    rgba.append(255)
            out += _compress_block(rgba)
    return bytes(out)