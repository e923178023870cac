"""RGBA images as the texture encoders see them."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple, Union

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

PaletteEntry = Tuple[int, int, int, int]


class ImageLoadError(Exception):
    """Raised when an image file cannot be read."""


def _clamp(value: int) -> int:
    return 255 if value > 255 else 0 if value < 0 else value


def _tdiv(value: int, divisor: int) -> int:
    """Integer division rounding towards zero."""
    return value // divisor if value >= 0 else -((-value) // divisor)


class Image:
    """A 32-bit RGBA picture, rows stored top to bottom."""

    def __init__(self, picture: PILImage.Image) -> None:
        self._picture = picture.convert("RGBA")

    @property
    def picture(self) -> PILImage.Image:
        """The underlying RGBA picture."""
        return self._picture

    @property
    def width(self) -> int:
        return self._picture.width

    @property
    def height(self) -> int:
        return self._picture.height

    def copy(self) -> "Image":
        """Return an independent copy."""
        return Image(self._picture.copy())

    def box_filter(self, width: int, height: int) -> "Image":
        """Return a copy scaled bilinearly to ``width`` x ``height``."""
        if width <= 0 or height <= 0:
            raise ValueError("image dimensions must be positive")
        if (width, height) == (self.width, self.height):
            return self.copy()
        return Image(self._picture.resize((width, height), PILImage.Resampling.BILINEAR))

    def resize(self, width: int, height: int) -> None:
        """Scale the image bilinearly in place."""
        if width <= 0 or height <= 0:
            raise ValueError("image dimensions must be positive")
        self._picture = self._picture.resize((width, height), PILImage.Resampling.BILINEAR)

    def rgba(self) -> bytes:
        """Return the pixels as R, G, B, A bytes, row by row."""
        return self._picture.tobytes()

    def diffuse_error(self, a_bits: int, r_bits: int, g_bits: int, b_bits: int) -> None:
        """Reduce each channel to the given bit depth, spreading the rounding error.

        Channels are kept at 8 bits with their low bits cleared; a depth of
        zero clears the channel entirely.
        """
        width, height = self.width, self.height
        if width == 0 or height == 0:
            return
        masks = [(1 << (12 - bits)) - 1 for bits in (r_bits, g_bits, b_bits, a_bits)]

        data = self.rgba()
        pixels = [[data[i + c] << 4 for c in range(4)] for i in range(0, len(data), 4)]

        def settle(pixel: List[int]) -> List[int]:
            errors = []
            for channel, mask in enumerate(masks):
                value = pixel[channel]
                error = value - ((value + mask // 2) & ~mask)
                pixel[channel] = value - error
                errors.append(error)
            return errors

        for y in range(height - 1):
            row = y * width
            for x in range(width - 1):
                errors = settle(pixels[row + x])
                targets = [(row + x + 1, 2), (row + width + x, 4)]
                if x:
                    targets.append((row + width + x - 1, 8))
                    if x > 2:
                        targets.append((row + width + x - 3, 8))
                for index, divisor in targets:
                    target = pixels[index]
                    for channel in range(4):
                        target[channel] += _tdiv(errors[channel], divisor)
            settle(pixels[row + width - 1])

        last_row = (height - 1) * width
        for x in range(width):
            settle(pixels[last_row + x])

        keep = [~(mask >> 4) & 0xFF for mask in masks]
        out = bytearray()
        for pixel in pixels:
            out.extend(_clamp(pixel[c] >> 4) & keep[c] for c in range(4))
        self._picture = PILImage.frombytes("RGBA", (width, height), bytes(out))

    def is_transparent(self) -> bool:
        """True if any pixel is not fully opaque."""
        low, _ = self._picture.getextrema()[3]
        return low < 255

    def palettized(self, colours: int) -> Tuple[bytes, List[PaletteEntry]]:
        """Quantize to ``colours`` (16 or 256) colours.

        Returns one index byte per pixel and a palette of ``colours``
        (red, green, blue, reserved) entries. Alpha is dropped before
        quantizing, so the reserved byte is always 0.
        """
        if colours not in (16, 256):
            raise ValueError("only 16 or 256 colour palettes are supported")
        quantized = self._picture.convert("RGB").quantize(
            colors=colours, method=PILImage.Quantize.MEDIANCUT
        )
        flat = quantized.getpalette() or []
        palette = [
            (flat[3 * i], flat[3 * i + 1], flat[3 * i + 2], 0)
            for i in range(min(len(flat) // 3, colours))
        ]
        palette.extend([(0, 0, 0, 0)] * (colours - len(palette)))
        return quantized.tobytes(), palette


def load_image(path: Union[str, Path]) -> Image:
    """Load an image file as RGBA, scaling it up to multiples of four pixels."""
    try:
        with PILImage.open(path) as picture:
            picture.load()
            rgba = picture.convert("RGBA")
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise ImageLoadError(f"cannot load image {path}: {exc}") from exc

    width = (rgba.width + 3) & ~3
    height = (rgba.height + 3) & ~3
    if (width, height) != rgba.size:
        rgba = rgba.resize((width, height), PILImage.Resampling.BILINEAR)
    return Image(rgba)