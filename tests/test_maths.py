import pytest

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


def test_add_and_sub_are_inverse():
    a = Vec3(1.0, 2.0, 3.0)
    b = Vec3(0.5, -1.0, 4.0)
    assert (a + b) - b == a


def test_scalar_multiplication_both_sides():
    v = Vec3(1.0, -2.0, 3.0)
    assert 2.0 * v == v * 2.0
    assert v * 2.0 == v + v


def test_componentwise_multiply_and_divide():
    a = Vec3(2.0, 4.0, 8.0)
    b = Vec3(2.0, 2.0, 2.0)
    assert (a * b) / b == a


def test_negation():
    v = Vec3(1.0, -2.0, 0.0)
    assert v + (-v) == Vec3.splat(0.0)


def test_scalar_division_matches_multiplication_by_reciprocal():
    v = Vec3(3.0, 6.0, 9.0)
    assert v / 3.0 == v * (1.0 / 3.0)


def test_dot_and_length_squared():
    v = Vec3(1.0, 2.0, 3.0)
    assert length_squared(v) == dot(v, v)
    assert dot(v, Vec3(0.0, 0.0, 0.0)) == 0.0


def test_min_max():
    a = Vec3(1.0, 5.0, -1.0)
    b = Vec3(2.0, 3.0, -2.0)
    assert vmin(a, b) == Vec3(1.0, 3.0, -2.0)
    assert vmax(a, b) == Vec3(2.0, 5.0, -1.0)


def test_truncate_rounds_towards_zero():
    assert truncate(Vec3(1.7, -1.7, 0.2)) == Vec3(1.0, -1.0, 0.0)


def test_covariance_of_identical_points_is_zero():
    points = [Vec3(0.3, 0.4, 0.5)] * 4
    cov = compute_weighted_covariance(points, [1.0] * 4)
    assert all(c == pytest.approx(0.0, abs=1e-12) for c in cov)


def test_covariance_is_symmetric_in_axis_order():
    points = [Vec3(0.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0)]
    cov = compute_weighted_covariance(points, [1.0, 1.0])
    # variance only along x
    assert cov[0] > 0.0
    assert cov[1:] == (0.0, 0.0, 0.0, 0.0, 0.0)


def test_principle_component_of_points_on_x_axis():
    points = [Vec3(0.0, 0.5, 0.5), Vec3(1.0, 0.5, 0.5)]
    cov = compute_weighted_covariance(points, [1.0, 1.0])
    axis = compute_principle_component(cov)
    assert abs(axis.x) > 0.0
    assert axis.y == pytest.approx(0.0, abs=1e-9)
    assert axis.z == pytest.approx(0.0, abs=1e-9)


def test_principle_component_of_distinct_diagonal():
    axis = compute_principle_component((3.0, 0.0, 0.0, 2.0, 0.0, 1.0))
    assert abs(axis.x) > 1.0
    assert abs(axis.y) < 1e-6 * abs(axis.x)
    assert abs(axis.z) < 1e-6 * abs(axis.x)


def test_principle_component_follows_dominant_axis():
    axis = compute_principle_component((1.0, 0.0, 0.0, 1.0, 0.0, 5.0))
    assert abs(axis.z) > 0.0
    assert abs(axis.x) < 1e-6 * abs(axis.z)
    assert abs(axis.y) < 1e-6 * abs(axis.z)