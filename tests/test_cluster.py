import math

import pytest

from kcomprs.cluster import euclidean_distance, euclidean_distance_squared


def test_euclidean_distance_pythagorean():
    assert euclidean_distance((0, 0, 0, 0), (3, 4, 0, 0)) == pytest.approx(5.0)


def test_squared_distance_is_square_of_distance():
    a = (12.0, 200.0, 37.5, 255.0)
    b = (90.0, 3.0, 180.0, 0.0)
    assert euclidean_distance_squared(a, b) == pytest.approx(euclidean_distance(a, b) ** 2)


@pytest.mark.parametrize(
    "fn", [euclidean_distance, euclidean_distance_squared]
)
def test_distance_to_self_is_zero(fn):
    point = (10.0, 20.0, 30.0, 40.0)
    assert fn(point, point) == 0.0


@pytest.mark.parametrize(
    "fn", [euclidean_distance, euclidean_distance_squared]
)
def test_distance_is_symmetric(fn):
    a = (1.0, 2.0, 3.0, 4.0)
    b = (255.0, 128.0, 64.0, 0.0)
    assert fn(a, b) == fn(b, a)


def test_triangle_inequality():
    a = (0.0, 0.0, 0.0, 0.0)
    b = (100.0, 50.0, 25.0, 10.0)
    c = (255.0, 255.0, 0.0, 255.0)
    assert euclidean_distance(a, c) <= euclidean_distance(a, b) + euclidean_distance(b, c)


def test_single_axis_distance_matches_difference():
    assert euclidean_distance((7, 0, 0, 0), (2, 0, 0, 0)) == pytest.approx(abs(7 - 2))
    assert math.isclose(euclidean_distance_squared((0, 0, 0, 9), (0, 0, 0, 1)), (9 - 1) ** 2)