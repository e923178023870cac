"""Compression and decompression of DXT3 and DXT5 alpha blocks."""

from __future__ import annotations

from typing import List, Sequence, Tuple

_MASK_ALL = 0xFFFF


def _check_rgba(rgba: Sequence[int]) -> None:
    if len(rgba) != 64:
        raise ValueError("an alpha block needs 16 RGBA pixels (64 values)")


def _check_block(block: bytes) -> None:
    if len(block) < 8:
        raise ValueError("an alpha block is 8 bytes long")


def _float_to_int(value: float, limit: int) -> int:
    return min(max(int(value + 0.5), 0), limit)


def compress_alpha_dxt3(rgba: Sequence[int], mask: int = _MASK_ALL) -> bytes:
    """Quantise the alpha channel of 16 pixels to 4 bits each (8 bytes)."""
    _check_rgba(rgba)
    out = bytearray()
    for pair in range(8):
        first, second = 2 * pair, 2 * pair + 1
        quant1 = _float_to_int(rgba[4 * first + 3] * (15.0 / 255.0), 15)
        quant2 = _float_to_int(rgba[4 * second + 3] * (15.0 / 255.0), 15)
        if not mask & (1 << first):
            quant1 = 0
        if not mask & (1 << second):
            quant2 = 0
        out.append(quant1 | (quant2 << 4))
    return bytes(out)


def decompress_alpha_dxt3(block: bytes) -> bytes:
    """Expand an 8-byte DXT3 alpha block into 16 alpha values."""
    _check_block(block)
    out = bytearray()
    for quant in block[:8]:
        lo = quant & 0x0F
        hi = quant & 0xF0
        out.append(lo | (lo << 4))
        out.append(hi | (hi >> 4))
    return bytes(out)


def _fix_range(low: int, high: int, steps: int) -> Tuple[int, int]:
    if high - low < steps:
        high = min(low + steps, 255)
    if high - low < steps:
        low = max(0, high - steps)
    return low, high


def _fit_codes(rgba: Sequence[int], mask: int, codes: Sequence[int]) -> Tuple[int, List[int]]:
    error = 0
    indices: List[int] = []
    for i in range(16):
        if not mask & (1 << i):
            indices.append(0)
            continue
        value = rgba[4 * i + 3]
        least, index = min(((value - code) ** 2, j) for j, code in enumerate(codes))
        indices.append(index)
        error += least
    return error, indices


def _write_alpha_block(alpha0: int, alpha1: int, indices: Sequence[int]) -> bytes:
    out = bytearray((alpha0 & 0xFF, alpha1 & 0xFF))
    for half in range(2):
        value = 0
        for j, index in enumerate(indices[8 * half : 8 * half + 8]):
            value |= index << (3 * j)
        out.extend((value >> (8 * j)) & 0xFF for j in range(3))
    return bytes(out)


def _write_alpha_block5(alpha0: int, alpha1: int, indices: Sequence[int]) -> bytes:
    if alpha0 > alpha1:
        swapped = []
        for index in indices:
            if index == 0:
                swapped.append(1)
            elif index == 1:
                swapped.append(0)
            elif index <= 5:
                swapped.append(7 - index)
            else:
                swapped.append(index)
        return _write_alpha_block(alpha1, alpha0, swapped)
    return _write_alpha_block(alpha0, alpha1, indices)


def _write_alpha_block7(alpha0: int, alpha1: int, indices: Sequence[int]) -> bytes:
    if alpha0 < alpha1:
        swapped = []
        for index in indices:
            if index == 0:
                swapped.append(1)
            elif index == 1:
                swapped.append(0)
            else:
                swapped.append(9 - index)
        return _write_alpha_block(alpha1, alpha0, swapped)
    return _write_alpha_block(alpha0, alpha1, indices)


def compress_alpha_dxt5(rgba: Sequence[int], mask: int = _MASK_ALL) -> bytes:
    """Compress the alpha channel of 16 pixels into an 8-byte interpolated block."""
    _check_rgba(rgba)
    min5, max5, min7, max7 = 255, 0, 255, 0
    for i in range(16):
        if not mask & (1 << i):
            continue
        value = rgba[4 * i + 3]
        min7 = min(min7, value)
        max7 = max(max7, value)
        if value != 0 and value < min5:
            min5 = value
        if value != 255 and value > max5:
            max5 = value

    if min5 > max5:
        min5 = max5
    if min7 > max7:
        min7 = max7

    min5, max5 = _fix_range(min5, max5, 5)
    min7, max7 = _fix_range(min7, max7, 7)

    codes5 = [min5, max5]
    codes5 += [((5 - i) * min5 + i * max5) // 5 for i in range(1, 5)]
    codes5 += [0, 255]
    codes7 = [min7, max7]
    codes7 += [((7 - i) * min7 + i * max7) // 7 for i in range(1, 7)]

    err5, indices5 = _fit_codes(rgba, mask, codes5)
    err7, indices7 = _fit_codes(rgba, mask, codes7)

    if err5 <= err7:
        return _write_alpha_block5(min5, max5, indices5)
    return _write_alpha_block7(min7, max7, indices7)


def decompress_alpha_dxt5(block: bytes) -> bytes:
    """Expand an 8-byte DXT5 alpha block into 16 alpha values."""
    _check_block(block)
    alpha0, alpha1 = block[0], block[1]
    codes = [alpha0, alpha1]
    if alpha0 <= alpha1:
        codes += [((5 - i) * alpha0 + i * alpha1) // 5 for i in range(1, 5)]
        codes += [0, 255]
    else:
        codes += [((7 - i) * alpha0 + i * alpha1) // 7 for i in range(1, 7)]

    indices: List[int] = []
    for half in range(2):
        chunk = block[2 + 3 * half : 5 + 3 * half]
        value = chunk[0] | (chunk[1] << 8) | (chunk[2] << 16)
        indices.extend((value >> (3 * j)) & 0x7 for j in range(8))
    return bytes(codes[index] for index in indices)