"""Exhaustive colour fitting by clustering the colours along an ordered axis."""

from __future__ import annotations

import math
from typing import List, Tuple

from gxtexconv.squish.colourblock import write_colour_block3, write_colour_block4
from gxtexconv.squish.colourfit import ColourFit
from gxtexconv.squish.colourset import ColourSet, SquishFlags
from gxtexconv.squish.maths import (
    Vec3,
    compute_principle_component,
    compute_weighted_covariance,
    dot,
    truncate,
    vmax,
    vmin,
)

FLT_MAX = 3.4028234663852886e38
MAX_ITERATIONS = 8

_GRID = Vec3(31.0, 63.0, 31.0)
_GRID_RCP = Vec3(1.0 / 31.0, 1.0 / 63.0, 1.0 / 31.0)
_HALF = Vec3.splat(0.5)
_ONE = Vec3.splat(1.0)
_ZERO = Vec3.splat(0.0)


class ClusterFit(ColourFit):
    """Tries every split of the ordered colours into clusters and keeps the best fit."""

    def __init__(self, colours: ColourSet, flags: int) -> None:
        super().__init__(colours, flags)
        self._best_error = FLT_MAX
        if self.flags & SquishFlags.COLOUR_METRIC_PERCEPTUAL:
            self.metric = Vec3(0.2126, 0.7152, 0.0722)
        else:
            self.metric = Vec3.splat(1.0)

        if colours.count:
            covariance = compute_weighted_covariance(colours.points, colours.weights)
            self.principle = compute_principle_component(covariance)
        else:
            self.principle = Vec3.splat(1.0)

        self._orders: List[List[int]] = []
        self._weighted: List[Vec3] = []
        self._weights: List[float] = []
        self._xxsum = _ZERO

    def _construct_ordering(self, axis: Vec3, iteration: int) -> bool:
        """Order the colours along ``axis``; return False if the order was already tried."""
        points = self.colours.points
        weights = self.colours.weights
        dps = [dot(point, axis) for point in points]
        order = sorted(range(len(points)), key=lambda i: dps[i])

        previous = self._orders[:iteration]
        self._orders[iteration:] = [order]
        if any(prev == order for prev in previous):
            return False

        self._weights = [weights[p] for p in order]
        self._weighted = [weights[p] * points[p] for p in order]
        xxsum = _ZERO
        for weighted in self._weighted:
            xxsum = xxsum + weighted * weighted
        self._xxsum = xxsum
        return True

    def _solve_least_squares(
        self, alphas: List[float], betas: List[float]
    ) -> Tuple[float, Vec3, Vec3]:
        alpha2_sum = 0.0
        beta2_sum = 0.0
        alphabeta_sum = 0.0
        alphax_sum = _ZERO
        betax_sum = _ZERO
        for alpha, beta, x in zip(alphas, betas, self._weighted):
            alpha2_sum += alpha * alpha
            beta2_sum += beta * beta
            alphabeta_sum += alpha * beta
            alphax_sum = alphax_sum + alpha * x
            betax_sum = betax_sum + beta * x

        if beta2_sum == 0.0:
            a = alphax_sum / alpha2_sum if alpha2_sum != 0.0 else _ZERO
            b = _ZERO
        elif alpha2_sum == 0.0:
            a = _ZERO
            b = betax_sum / beta2_sum
        else:
            det = alpha2_sum * beta2_sum - alphabeta_sum * alphabeta_sum
            factor = 1.0 / det if det != 0.0 else math.copysign(math.inf, det)
            a = (alphax_sum * beta2_sum - betax_sum * alphabeta_sum) * factor
            b = (betax_sum * alpha2_sum - alphax_sum * alphabeta_sum) * factor

        # Undefined components (NaN) fall to zero here.
        a = vmin(_ONE, vmax(_ZERO, a))
        b = vmin(_ONE, vmax(_ZERO, b))

        a = truncate(_GRID * a + _HALF) * _GRID_RCP
        b = truncate(_GRID * b + _HALF) * _GRID_RCP

        e1 = (
            a * a * alpha2_sum
            + b * b * beta2_sum
            + self._xxsum
            + 2.0 * (a * b * alphabeta_sum - a * alphax_sum - b * betax_sum)
        )
        return dot(e1, self.metric), a, b

    def _save(self, best_start: Vec3, best_end: Vec3, best_indices: List[int],
              best_iteration: int, three: bool) -> None:
        order = self._orders[best_iteration]
        unordered = [0] * len(order)
        for position, colour in enumerate(order):
            unordered[colour] = best_indices[position]
        indices = self.colours.remap_indices(unordered)
        writer = write_colour_block3 if three else write_colour_block4
        self._block = writer(best_start, best_end, indices)

    def _compress3(self) -> None:
        count = self.colours.count
        best_start = _ZERO
        best_end = _ZERO
        best_error = FLT_MAX
        best_indices: List[int] = [0] * count
        best_iteration = 0

        self._construct_ordering(self.principle, 0)
        iteration = 0
        while True:
            weights = self._weights
            indices = [0] * count
            alphas = list(weights)
            betas = [0.0] * count
            for i in range(count, -1, -1):
                for m in range(i, count):
                    indices[m] = 2
                    alphas[m] = betas[m] = 0.5 * weights[m]
                for j in range(count, i - 1, -1):
                    if j < count:
                        indices[j] = 1
                        alphas[j] = 0.0
                        betas[j] = weights[j]
                    error, start, end = self._solve_least_squares(alphas, betas)
                    if error < best_error:
                        best_start, best_end = start, end
                        best_indices = list(indices)
                        best_error = error
                        best_iteration = iteration

            if best_iteration != iteration:
                break
            iteration += 1
            if iteration == MAX_ITERATIONS:
                break
            if not self._construct_ordering(best_end - best_start, iteration):
                break

        if best_error < self._best_error:
            self._save(best_start, best_end, best_indices, best_iteration, three=True)
            self._best_error = best_error

    def _compress4(self) -> None:
        count = self.colours.count
        best_start = _ZERO
        best_end = _ZERO
        best_error = self._best_error
        best_indices: List[int] = [0] * count
        best_iteration = 0
        two_thirds = 2.0 / 3.0
        one_third = 1.0 / 3.0

        self._construct_ordering(self.principle, 0)
        iteration = 0
        while True:
            weights = self._weights
            indices = [0] * count
            alphas = list(weights)
            betas = [0.0] * count
            for i in range(count, -1, -1):
                for m in range(i, count):
                    indices[m] = 2
                    alphas[m] = two_thirds * weights[m]
                    betas[m] = one_third * weights[m]
                for j in range(count, i - 1, -1):
                    for m in range(j, count):
                        indices[m] = 3
                        alphas[m] = one_third * weights[m]
                        betas[m] = two_thirds * weights[m]
                    for k in range(count, j - 1, -1):
                        if k < count:
                            indices[k] = 1
                            alphas[k] = 0.0
                            betas[k] = weights[k]
                        error, start, end = self._solve_least_squares(alphas, betas)
                        if error < best_error:
                            best_start, best_end = start, end
                            best_indices = list(indices)
                            best_error = error
                            best_iteration = iteration

            if best_iteration != iteration:
                break
            iteration += 1
            if iteration == MAX_ITERATIONS:
                break
            if not self._construct_ordering(best_end - best_start, iteration):
                break

        if best_error < self._best_error:
            self._save(best_start, best_end, best_indices, best_iteration, three=False)
            self._best_error = best_error