import pytest

from gxtexconv.squish.alpha import (
    compress_alpha_dxt3,
    compress_alpha_dxt5,
    decompress_alpha_dxt3,
    decompress_alpha_dxt5,
)


def _rgba(alphas):
    out = []
    for alpha in alphas:
        out.extend((10, 20, 30, alpha))
    return bytes(out)


def test_dxt3_opaque_block_is_all_ones():
    assert compress_alpha_dxt3(_rgba([255] * 16)) == b"\xff" * 8


def test_dxt3_round_trip_of_four_bit_levels():
    alphas = [17 * i for i in range(16)]
    block = compress_alpha_dxt3(_rgba(alphas))
    assert len(block) == 8
    assert list(decompress_alpha_dxt3(block)) == alphas


def test_dxt3_masked_pixels_become_zero():
    alphas = [255] * 16
    mask = 0xFFFF & ~(1 << 3) & ~(1 << 10)
    result = decompress_alpha_dxt3(compress_alpha_dxt3(_rgba(alphas), mask))
    assert result[3] == 0
    assert result[10] == 0
    assert all(result[i] == 255 for i in range(16) if i not in (3, 10))


def test_dxt3_error_within_half_a_step():
    alphas = [3, 40, 77, 101, 130, 160, 199, 250, 1, 9, 88, 120, 140, 180, 222, 254]
    result = decompress_alpha_dxt3(compress_alpha_dxt3(_rgba(alphas)))
    for original, decoded in zip(alphas, result):
        assert abs(original - decoded) <= 9


def test_dxt5_round_trip_of_extremes():
    alphas = [0, 255] * 8
    result = decompress_alpha_dxt5(compress_alpha_dxt5(_rgba(alphas)))
    assert list(result) == alphas


def test_dxt5_round_trip_of_uniform_value():
    alphas = [128] * 16
    block = compress_alpha_dxt5(_rgba(alphas))
    assert len(block) == 8
    assert list(decompress_alpha_dxt5(block)) == alphas


def test_dxt5_round_trip_of_two_values():
    alphas = [40, 200] * 8
    result = decompress_alpha_dxt5(compress_alpha_dxt5(_rgba(alphas)))
    assert list(result) == alphas


def test_dxt5_error_is_bounded():
    alphas = [3, 40, 77, 101, 130, 160, 199, 250, 1, 9, 88, 120, 140, 180, 222, 254]
    result = decompress_alpha_dxt5(compress_alpha_dxt5(_rgba(alphas)))
    for original, decoded in zip(alphas, result):
        assert abs(original - decoded) <= 20


def test_dxt5_decompress_seven_value_block_with_zero_indices():
    block = bytes([255, 0, 0, 0, 0, 0, 0, 0])
    assert list(decompress_alpha_dxt5(block)) == [255] * 16


def test_dxt5_decompress_five_value_block_special_codes():
    # index 6 is always 0 and index 7 always 255 in the five-value book
    value = 0
    for j in range(8):
        value |= (6 if j % 2 == 0 else 7) << (3 * j)
    chunk = bytes((value >> (8 * j)) & 0xFF for j in range(3))
    block = bytes([10, 20]) + chunk + chunk
    assert list(decompress_alpha_dxt5(block)) == [0, 255] * 8


@pytest.mark.parametrize("func", [compress_alpha_dxt3, compress_alpha_dxt5])
def test_compress_rejects_short_input(func):
    with pytest.raises(ValueError):
        func(bytes(10))


@pytest.mark.parametrize("func", [decompress_alpha_dxt3, decompress_alpha_dxt5])
def test_decompress_rejects_short_block(func):
    with pytest.raises(ValueError):
        func(bytes(4))