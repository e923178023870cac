import pytest

from gxtexconv.squish.colourblock import (
    decompress_colour,
    write_colour_block3,
    write_colour_block4,
)
from gxtexconv.squish.maths import Vec3

WHITE = Vec3(1.0, 1.0, 1.0)
BLACK = Vec3(0.0, 0.0, 0.0)


def _pixels(data):
    return [tuple(data[4 * i : 4 * i + 4]) for i in range(16)]


def test_block4_white_to_black_layout():
    block = write_colour_block4(WHITE, BLACK, [0] * 16)
    assert len(block) == 8
    assert block == bytes([0xFF, 0xFF, 0x00, 0x00, 0, 0, 0, 0])


def test_block4_swaps_endpoints_when_start_is_smaller():
    indices = [0, 1, 2, 3] * 4
    swapped = write_colour_block4(BLACK, WHITE, indices)
    direct = write_colour_block4(WHITE, BLACK, [1, 0, 3, 2] * 4)
    assert swapped == direct


def test_block4_round_trip_endpoints():
    indices = [0] * 8 + [1] * 8
    block = write_colour_block4(WHITE, BLACK, indices)
    pixels = _pixels(decompress_colour(block, True))
    assert pixels[:8] == [(255, 255, 255, 255)] * 8
    assert pixels[8:] == [(0, 0, 0, 255)] * 8


def test_block4_equal_endpoints_uses_index_zero():
    red = Vec3(1.0, 0.0, 0.0)
    block = write_colour_block4(red, red, [3] * 16)
    assert block[4:] == bytes(4)
    pixels = _pixels(decompress_colour(block, False))
    assert set(pixels) == {(255, 0, 0, 255)}


def test_block3_transparent_index_decodes_to_zero_alpha():
    indices = [3] * 4 + [0] * 12
    block = write_colour_block3(BLACK, WHITE, indices)
    pixels = _pixels(decompress_colour(block, True))
    assert pixels[:4] == [(0, 0, 0, 0)] * 4
    assert pixels[4:] == [(0, 0, 0, 255)] * 12


def test_block3_swap_keeps_colours():
    indices = [0] * 8 + [1] * 8
    block = write_colour_block3(WHITE, BLACK, indices)
    pixels = _pixels(decompress_colour(block, True))
    assert pixels[:8] == [(255, 255, 255, 255)] * 8
    assert pixels[8:] == [(0, 0, 0, 255)] * 8


def test_block3_midpoint_lies_between_endpoints():
    block = write_colour_block3(BLACK, WHITE, [2] * 16)
    pixels = _pixels(decompress_colour(block, True))
    r, g, b, a = pixels[0]
    assert 0 < r < 255 and 0 < g < 255 and 0 < b < 255
    assert a == 255


def test_wrong_index_count_rejected():
    with pytest.raises(ValueError):
        write_colour_block4(WHITE, BLACK, [0] * 15)


def test_short_block_rejected():
    with pytest.raises(ValueError):
        decompress_colour(b"\x00" * 7, True)