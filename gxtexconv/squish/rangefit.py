"""Fast colour fitting along the principal axis of a colour set."""

from __future__ import annotations

from typing import List

from gxtexconv.squish.colourblock import write_colour_block3, write_colour_block4
from gxtexconv.squish.colourfit import ColourFit
from gxtexconv.squish.colourset import ColourSet, SquishFlags
from gxtexconv.squish.maths import (
    Vec3,
    compute_principle_component,
    compute_weighted_covariance,
    dot,
    length_squared,
    truncate,
    vmax,
    vmin,
)

FLT_MAX = 3.4028234663852886e38

_GRID = Vec3(31.0, 63.0, 31.0)
_GRID_RCP = Vec3(1.0 / 31.0, 1.0 / 63.0, 1.0 / 31.0)
_HALF = Vec3.splat(0.5)
_ONE = Vec3.splat(1.0)
_ZERO = Vec3.splat(0.0)


class RangeFit(ColourFit):
    """Places the endpoints at the extremes of the colours along the principal axis."""

    def __init__(self, colours: ColourSet, flags: int) -> None:
        super().__init__(colours, flags)
        if self.flags & SquishFlags.COLOUR_METRIC_PERCEPTUAL:
            self.metric = Vec3(0.2126, 0.7152, 0.0722)
        else:
            self.metric = Vec3.splat(1.0)
        self._best_error = FLT_MAX

        values = colours.points
        start = Vec3.splat(0.0)
        end = Vec3.splat(0.0)
        if values:
            covariance = compute_weighted_covariance(values, colours.weights)
            principle = compute_principle_component(covariance)
            start = end = values[0]
            low = high = dot(values[0], principle)
            for value in values[1:]:
                projected = dot(value, principle)
                if projected < low:
                    start, low = value, projected
                elif projected > high:
                    end, high = value, projected

        start = vmin(_ONE, vmax(_ZERO, start))
        end = vmin(_ONE, vmax(_ZERO, end))
        self.start = truncate(_GRID * start + _HALF) * _GRID_RCP
        self.end = truncate(_GRID * end + _HALF) * _GRID_RCP

    def _closest(self, codes: List[Vec3]):
        indices: List[int] = []
        error = 0.0
        for value in self.colours.points:
            dist, index = FLT_MAX, 0
            for j, code in enumerate(codes):
                d = length_squared(self.metric * (value - code))
                if d < dist:
                    dist, index = d, j
            indices.append(index)
            error += dist
        return error, indices

    def _compress3(self) -> None:
        codes = [self.start, self.end, 0.5 * self.start + 0.5 * self.end]
        error, closest = self._closest(codes)
        if error < self._best_error:
            indices = self.colours.remap_indices(closest)
            self._block = write_colour_block3(self.start, self.end, indices)
            self._best_error = error

    def _compress4(self) -> None:
        codes = [
            self.start,
            self.end,
            (2.0 / 3.0) * self.start + (1.0 / 3.0) * self.end,
            (1.0 / 3.0) * self.start + (2.0 / 3.0) * self.end,
        ]
        error, closest = self._closest(codes)
        if error < self._best_error:
            indices = self.colours.remap_indices(closest)
            self._block = write_colour_block4(self.start, self.end, indices)
            self._best_error = error