"""Encoding of textures and palettes, and writing of complete texture files."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Sequence, Tuple, Union

from gxtexconv.image import Image, PaletteEntry
from gxtexconv.texture import ColorFormat, PaletteFormat, Texture, bitrev
from gxtexconv.texturefile import (
    TPL_HEADER_SIZE,
    TPL_VERSION,
    compute_layout,
    dxt1_compress,
    min_mag,
    wrap_mode_by_dimension,
)

Pixel = Tuple[int, int, int, int]


def _pixel_reader(image: Image) -> Callable[[int, int], Pixel]:
    width, height = image.width, image.height
    data = image.rgba()

    def pixel(x: int, y: int) -> Pixel:
        if x < width and y < height:
            i = (y * width + x) * 4
            return data[i], data[i + 1], data[i + 2], data[i + 3]
        return 0, 0, 0, 0

    return pixel


def _index_reader(image: Image, colours: int) -> Callable[[int, int], int]:
    width, height = image.width, image.height
    indices, _ = image.palettized(colours)

    def index(x: int, y: int) -> int:
        if x < width and y < height:
            return indices[y * width + x]
        return 0

    return index


def _tiles(width: int, height: int, tile_w: int, tile_h: int) -> Iterator[List[Tuple[int, int]]]:
    """Yield the pixel coordinates of each tile, tiles row by row."""
    for ty in range(0, height, tile_h):
        for tx in range(0, width, tile_w):
            yield [(tx + ix, ty + iy) for iy in range(tile_h) for ix in range(tile_w)]


def _intensity(r: int, g: int, b: int) -> int:
    return (r + g + b) // 3


def _encode_i4(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 8, 8):
        values = [_intensity(*pixel(x, y)[:3]) for x, y in tile]
        for high, low in zip(values[0::2], values[1::2]):
            out.append((high & 0xF0) | (low >> 4))
    return bytes(out)


def _encode_i8(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 8, 4):
        out.extend(_intensity(*pixel(x, y)[:3]) for x, y in tile)
    return bytes(out)


def _encode_ia4(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    transparent = image.is_transparent()
    out = bytearray()
    for tile in _tiles(image.width, image.height, 8, 4):
        for x, y in tile:
            r, g, b, a = pixel(x, y)
            alpha = a if transparent else 0xF0
            out.append((alpha & 0xF0) | (_intensity(r, g, b) >> 4))
    return bytes(out)


def _encode_ia8(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    transparent = image.is_transparent()
    out = bytearray()
    for tile in _tiles(image.width, image.height, 4, 4):
        for x, y in tile:
            r, g, b, a = pixel(x, y)
            alpha = a if transparent else 0xFF
            out += struct.pack(">H", (alpha << 8) | _intensity(r, g, b))
    return bytes(out)


def _encode_ci4(image: Image) -> bytes:
    index = _index_reader(image, 16)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 8, 8):
        values = [index(x, y) for x, y in tile]
        for high, low in zip(values[0::2], values[1::2]):
            out.append(((high & 0xF) << 4) | (low & 0xF))
    return bytes(out)


def _encode_ci8(image: Image) -> bytes:
    index = _index_reader(image, 256)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 8, 4):
        out.extend(index(x, y) for x, y in tile)
    return bytes(out)


def _rgb565(r: int, g: int, b: int) -> int:
    return ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)


def _encode_rgb565(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 4, 4):
        for x, y in tile:
            out += struct.pack(">H", _rgb565(*pixel(x, y)[:3]))
    return bytes(out)


def _rgb5a3_opaque(r: int, g: int, b: int) -> int:
    return 0x8000 | ((r >> 3) << 10) | ((g >> 3) << 5) | (b >> 3)


def _rgb5a3_translucent(r: int, g: int, b: int, a: int) -> int:
    return (((a >> 5) << 12) | ((r >> 4) << 8) | ((g >> 4) << 4) | (b >> 4)) & 0x7FFF


def _encode_rgb5a3(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 4, 4):
        for x, y in tile:
            r, g, b, a = pixel(x, y)
            value = _rgb5a3_opaque(r, g, b) if a >= 224 else _rgb5a3_translucent(r, g, b, a)
            out += struct.pack(">H", value)
    return bytes(out)


def _encode_rgba8(image: Image) -> bytes:
    pixel = _pixel_reader(image)
    out = bytearray()
    for tile in _tiles(image.width, image.height, 4, 4):
        pixels = [pixel(x, y) for x, y in tile]
        for r, _, _, a in pixels:
            out += bytes((a, r))
        for _, g, b, _ in pixels:
            out += bytes((g, b))
    return bytes(out)


def _encode_cmpr(image: Image) -> bytes:
    width, height = image.width, image.height
    blocks = dxt1_compress(image)
    blocks_x, blocks_y = width // 4, height // 4

    def block(bx: int, by: int) -> bytes:
        if bx < blocks_x and by < blocks_y:
            start = (by * blocks_x + bx) * 8
            return blocks[start:start + 8]
        return bytes(8)

    out = bytearray()
    for ty in range(0, height, 8):
        for tx in range(0, width, 8):
            for sub in range(4):
                mx = tx + (sub & 1) * 4
                my = ty + (4 if sub & 2 else 0)
                data = block(mx // 4, my // 4)
                out += bytes((data[1], data[0], data[3], data[2]))
                out += bytes(bitrev(value) & 0xFF for value in data[4:8])
    return bytes(out)


_ENCODERS: Dict[int, Callable[[Image], bytes]] = {
    ColorFormat.I4: _encode_i4,
    ColorFormat.I8: _encode_i8,
    ColorFormat.IA4: _encode_ia4,
    ColorFormat.IA8: _encode_ia8,
    ColorFormat.CI4: _encode_ci4,
    ColorFormat.CI8: _encode_ci8,
    ColorFormat.RGB565: _encode_rgb565,
    ColorFormat.RGB5A3: _encode_rgb5a3,
    ColorFormat.RGBA8: _encode_rgba8,
    ColorFormat.CMPR: _encode_cmpr,
}


def encode_texture(texture: Texture) -> bytes:
    """Encode every layer of a texture in its colour format; unknown formats give nothing."""
    encoder = _ENCODERS.get(texture.color_format)
    if encoder is None:
        return b""
    return b"".join(encoder(layer.image) for layer in texture.layers if layer.image is not None)


def encode_palette(palette_format: int, palette: Sequence[PaletteEntry]) -> bytes:
    """Encode palette entries, padded with zeros to a multiple of 16 entries.

    Only RGB565 and RGB5A3 palettes are encoded; other formats give nothing.
    """
    if palette_format == PaletteFormat.RGB565:
        values = [_rgb565(r, g, b) for r, g, b, _ in palette]
    elif palette_format == PaletteFormat.RGB5A3:
        values = [
            _rgb5a3_opaque(r, g, b) if reserved == 0xFF else _rgb5a3_translucent(r, g, b, reserved)
            for r, g, b, reserved in palette
        ]
    else:
        return b""
    count = len(values)
    pad = 16 - count if count < 16 else (16 - count % 16) % 16
    return struct.pack(f">{count}H", *values) + bytes(2 * pad)


def _put(buffer: bytearray, offset: int, data: bytes) -> None:
    end = offset + len(data)
    if len(buffer) < end:
        buffer.extend(bytes(end - len(buffer)))
    buffer[offset:end] = data


def build_tpl(textures: Sequence[Texture]) -> bytes:
    """Return the bytes of a texture file holding ``textures``."""
    textures = list(textures)
    if not textures:
        raise ValueError("no textures to write")
    layout = compute_layout(textures)

    buffer = bytearray(struct.pack(">III", TPL_VERSION, len(textures), TPL_HEADER_SIZE))

    for position, texture in enumerate(textures):
        palette_desc = layout.palette_desc_offsets[position] if texture.palette else 0
        buffer += struct.pack(">II", layout.image_desc_offsets[position], palette_desc)

    for position, texture in enumerate(textures):
        wrap_s = texture.wrap_s if texture.wrap_s is not None else wrap_mode_by_dimension(texture)
        wrap_t = texture.wrap_t if texture.wrap_t is not None else wrap_mode_by_dimension(texture)
        minification, magnification = min_mag(texture)
        desc = struct.pack(
            ">HHIIIIIIfBBBB",
            (texture.image.height >> texture.min_lod) & 0xFFFF,
            (texture.image.width >> texture.min_lod) & 0xFFFF,
            int(texture.color_format),
            layout.image_data_offsets[position],
            int(wrap_s),
            int(wrap_t),
            int(minification),
            int(magnification),
            0.0,
            0,
            texture.remap_lod & 0xFF,
            (texture.remap_lod + texture.max_lod - texture.min_lod) & 0xFF,
            0,
        )
        _put(buffer, layout.image_desc_offsets[position], desc)

    palette_desc_start = (
        TPL_HEADER_SIZE
        + layout.texture_desc_block_size
        + layout.image_desc_block_size
        + layout.image_desc_pad
    )
    banks_start = palette_desc_start + layout.palette_desc_block_size + layout.palette_desc_pad
    if len(buffer) < banks_start:
        buffer.extend(bytes(banks_start - len(buffer)))

    for position, texture in enumerate(textures):
        if texture.palette:
            desc = struct.pack(
                ">HHII",
                len(texture.palette) & 0xFFFF,
                0,
                int(texture.palette_format or 0),
                layout.palette_data_offsets[position],
            )
            _put(buffer, layout.palette_desc_offsets[position], desc)

    for position, texture in enumerate(textures):
        _put(buffer, layout.image_data_offsets[position], encode_texture(texture))

    for position, texture in enumerate(textures):
        if texture.palette:
            data = encode_palette(texture.palette_format, texture.palette)
            _put(buffer, layout.palette_data_offsets[position], data)

    return bytes(buffer)


def write_index_header(textures: Sequence[Texture], path: Union[str, Path]) -> None:
    """Write a C header defining each texture id as its index in the file."""
    lines = "".join(f"#define {texture.id} {index}\n" for index, texture in enumerate(textures))
    with open(path, "w", newline="") as header:
        header.write(lines)


def _header_path(path: str) -> str:
    dot = path.rfind(".")
    return (path[:dot] if dot >= 0 else path) + ".h"


def write_tpl(textures: Sequence[Texture], path: Union[str, Path]) -> str:
    """Write the texture file and its index header; return the header's path."""
    data = build_tpl(textures)
    with open(path, "wb") as output:
        output.write(data)
    header = _header_path(str(path))
    write_index_header(textures, header)
    return header