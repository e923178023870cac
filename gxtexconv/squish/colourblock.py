"""Packing and unpacking of 8-byte DXT colour blocks."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from gxtexconv.squish.maths import Vec3


def _float_to_int(value: float, limit: int) -> int:
    return min(max(int(value + 0.5), 0), limit)


def _float_to_565(colour: Vec3) -> int:
    r = _float_to_int(31.0 * colour.x, 31)
    g = _float_to_int(63.0 * colour.y, 63)
    b = _float_to_int(31.0 * colour.z, 31)
    return (r << 11) | (g << 5) | b


def _write_colour_block(a: int, b: int, indices: Sequence[int]) -> bytes:
    packed = bytearray((a & 0xFF, a >> 8, b & 0xFF, b >> 8))
    for row in range(4):
        ind = indices[4 * row : 4 * row + 4]
        packed.append(ind[0] | (ind[1] << 2) | (ind[2] << 4) | (ind[3] << 6))
    return bytes(packed)


def _check_indices(indices: Sequence[int]) -> None:
    if len(indices) != 16:
        raise ValueError("a colour block needs 16 indices")


def write_colour_block3(start: Vec3, end: Vec3, indices: Sequence[int]) -> bytes:
    """Encode a three-colour (plus transparent) block."""
    _check_indices(indices)
    a = _float_to_565(start)
    b = _float_to_565(end)
    if a <= b:
        remapped = list(indices)
    else:
        a, b = b, a
        remapped = [{0: 1, 1: 0}.get(i, i) for i in indices]
    return _write_colour_block(a, b, remapped)


def write_colour_block4(start: Vec3, end: Vec3, indices: Sequence[int]) -> bytes:
    """Encode a four-colour block."""
    _check_indices(indices)
    a = _float_to_565(start)
    b = _float_to_565(end)
    if a < b:
        a, b = b, a
        remapped = [(i ^ 0x1) & 0x3 for i in indices]
    elif a == b:
        remapped = [0] * 16
    else:
        remapped = list(indices)
    return _write_colour_block(a, b, remapped)


def _unpack_565(low: int, high: int) -> Tuple[int, List[int]]:
    value = low | (high << 8)
    red = (value >> 11) & 0x1F
    green = (value >> 5) & 0x3F
    blue = value & 0x1F
    colour = [(red << 3) | (red >> 2), (green << 2) | (green >> 4), (blue << 3) | (blue >> 2), 255]
    return value, colour


def decompress_colour(block: bytes, is_dxt1: bool) -> bytes:
    """Decode an 8-byte colour block into 16 RGBA pixels (64 bytes)."""
    if len(block) < 8:
        raise ValueError("a colour block is 8 bytes long")
    a, start = _unpack_565(block[0], block[1])
    b, end = _unpack_565(block[2], block[3])

    three_colour = is_dxt1 and a <= b
    if three_colour:
        mid = [(c + d) // 2 for c, d in zip(start[:3], end[:3])] + [255]
        last = [0, 0, 0, 0]
    else:
        mid = [(2 * c + d) // 3 for c, d in zip(start[:3], end[:3])] + [255]
        last = [(c + 2 * d) // 3 for c, d in zip(start[:3], end[:3])] + [255]
    codes = (start, end, mid, last)

    out = bytearray()
    for packed in block[4:8]:
        for shift in (0, 2, 4, 6):
            out.extend(codes[(packed >> shift) & 0x3])
    return bytes(out)