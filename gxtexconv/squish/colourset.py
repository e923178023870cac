"""The set of distinct colours in a 4x4 block, with weights and a pixel remap."""

from __future__ import annotations

import enum
from typing import List, Sequence

from gxtexconv.squish.maths import Vec3


class SquishFlags(enum.IntFlag):
    """Compression options."""

    DXT1 = 1 << 0
    DXT3 = 1 << 1
    DXT5 = 1 << 2
    COLOUR_CLUSTER_FIT = 1 << 3
    COLOUR_RANGE_FIT = 1 << 4
    COLOUR_METRIC_PERCEPTUAL = 1 << 5
    COLOUR_METRIC_UNIFORM = 1 << 6
    WEIGHT_COLOUR_BY_ALPHA = 1 << 7


class ColourSet:
    """Distinct colours of a block of 16 RGBA pixels.

    ``rgba`` holds 64 byte values; bit ``i`` of ``mask`` enables pixel ``i``.
    """

    def __init__(self, rgba: Sequence[int], mask: int, flags: int) -> None:
        if len(rgba) != 64:
            raise ValueError("a colour block needs 16 RGBA pixels (64 values)")

        is_dxt1 = bool(flags & SquishFlags.DXT1)
        weight_by_alpha = bool(flags & SquishFlags.WEIGHT_COLOUR_BY_ALPHA)

        self.points: List[Vec3] = []
        self.weights: List[float] = []
        self.transparent = False
        self._remap: List[int] = [-1] * 16

        for i in range(16):
            if not mask & (1 << i):
                continue
            red, green, blue, alpha = rgba[4 * i : 4 * i + 4]

            if is_dxt1 and alpha == 0:
                self.transparent = True
                continue

            # non-zero weight even for zero alpha
            weight = (alpha + 1) / 256.0 if weight_by_alpha else 1.0

            for j in range(i):
                match = (
                    bool(mask & (1 << j))
                    and rgba[4 * j] == red
                    and rgba[4 * j + 1] == green
                    and rgba[4 * j + 2] == blue
                    and (rgba[4 * j + 3] != 0 or not is_dxt1)
                )
                if match:
                    index = self._remap[j]
                    self.weights[index] += weight
                    self._remap[i] = index
                    break
            else:
                self.points.append(Vec3(red / 255.0, green / 255.0, blue / 255.0))
                self.weights.append(weight)
                self._remap[i] = len(self.points) - 1

    @property
    def count(self) -> int:
        """Number of distinct colours."""
        return len(self.points)

    def remap_indices(self, source: Sequence[int]) -> List[int]:
        """Map per-colour indices back to the 16 pixels; excluded pixels get 3."""
        return [3 if j == -1 else source[j] for j in self._remap]