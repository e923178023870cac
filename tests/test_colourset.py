import pytest

from gxtexconv.squish.colourset import ColourSet, SquishFlags
from gxtexconv.squish.maths import Vec3


def _block(pixels):
    return [c for p in pixels for c in p]


def test_uniform_block_collapses_to_one_point():
    rgba = _block([(255, 0, 0, 255)] * 16)
    cs = ColourSet(rgba, 0xFFFF, SquishFlags.DXT1)
    assert cs.count == 1
    assert cs.points[0] == Vec3(1.0, 0.0, 0.0)
    assert cs.weights == [16.0]
    assert cs.transparent is False
    assert cs.remap_indices([2]) == [2] * 16


def test_two_colours_keep_pixel_mapping():
    pixels = [(0, 0, 0, 255) if i % 2 else (255, 255, 255, 255) for i in range(16)]
    cs = ColourSet(_block(pixels), 0xFFFF, SquishFlags.DXT1)
    assert cs.count == 2
    assert sum(cs.weights) == 16.0
    remapped = cs.remap_indices([0, 1])
    assert remapped == [1 if i % 2 else 0 for i in range(16)]


def test_dxt1_transparent_pixels_are_excluded():
    pixels = [(10, 20, 30, 0)] * 8 + [(10, 20, 30, 255)] * 8
    cs = ColourSet(_block(pixels), 0xFFFF, SquishFlags.DXT1)
    assert cs.transparent is True
    assert cs.count == 1
    assert cs.weights == [8.0]
    assert cs.remap_indices([0]) == [3] * 8 + [0] * 8


def test_zero_alpha_counts_without_dxt1():
    pixels = [(10, 20, 30, 0)] * 16
    cs = ColourSet(_block(pixels), 0xFFFF, SquishFlags.DXT5)
    assert cs.transparent is False
    assert cs.count == 1
    assert cs.weights == [16.0]


def test_mask_excludes_pixels():
    rgba = _block([(1, 2, 3, 255)] * 16)
    cs = ColourSet(rgba, 0x000F, SquishFlags.DXT1)
    assert cs.weights == [4.0]
    assert cs.remap_indices([1]) == [1] * 4 + [3] * 12


def test_weight_by_alpha():
    pixels = [(50, 50, 50, 127)] * 16
    cs = ColourSet(_block(pixels), 0xFFFF, SquishFlags.DXT3 | SquishFlags.WEIGHT_COLOUR_BY_ALPHA)
    assert cs.weights[0] == pytest.approx(16 * (127 + 1) / 256.0)


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        ColourSet([0] * 60, 0xFFFF, SquishFlags.DXT1)