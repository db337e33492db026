import math

import pytest

from measurement_engine.core import geometry
from measurement_engine.core.geometry import Vector3


SAMPLE_VECTORS = [
    Vector3(0.0, 0.0, 0.0),
    Vector3(1.0, 2.0, 3.0),
    Vector3(-4.5, 0.25, 9.0),
    Vector3(1e-3, -1e-3, 2e-3),
]


@pytest.mark.parametrize("a", SAMPLE_VECTORS)
@pytest.mark.parametrize("b", SAMPLE_VECTORS)
def test_distance_is_symmetric(a: Vector3, b: Vector3) -> None:
    assert geometry.distance(a, b) == pytest.approx(geometry.distance(b, a))


@pytest.mark.parametrize("a", SAMPLE_VECTORS)
def test_distance_to_self_is_zero(a: Vector3) -> None:
    assert geometry.distance(a, a) == 0.0


def test_distance_matches_euclidean_norm() -> None:
    assert geometry.distance(Vector3(0, 0, 0), Vector3(1.5, 0, 0)) == pytest.approx(1.5)
    assert geometry.distance(Vector3(1, 2, 3), Vector3(4, 6, 3)) == pytest.approx(5.0)


@pytest.mark.parametrize("v", [Vector3(3, 4, 0), Vector3(-1, -1, -1), Vector3(1e-5, 0, 0)])
def test_normalized_has_unit_length(v: Vector3) -> None:
    assert v.normalized().magnitude() == pytest.approx(1.0)


def test_normalized_zero_and_tiny_vectors_return_zero() -> None:
    assert Vector3.ZERO.normalized() == Vector3.ZERO
    assert Vector3(1e-7, 0, 0).normalized() == Vector3.ZERO


def test_vector_arithmetic() -> None:
    a = Vector3(1, 2, 3)
    b = Vector3(0.5, -1, 2)

    assert a + b == Vector3(1.5, 1, 5)
    assert a - b == Vector3(0.5, 3, 1)
    assert a * 2 == Vector3(2, 4, 6)
    assert 2 * a == Vector3(2, 4, 6)
    assert a.dot(b) == pytest.approx(0.5 - 2 + 6)


def test_cross_product_follows_right_hand_rule() -> None:
    assert Vector3.RIGHT.cross(Vector3.UP) == Vector3.BACK
    assert Vector3.UP.cross(Vector3.RIGHT) == Vector3(0, 0, -1)


def test_array_round_trip_rejects_wrong_length() -> None:
    assert Vector3.from_array([1, 2, 3]).to_array().tolist() == [1.0, 2.0, 3.0]
    with pytest.raises(ValueError):
        Vector3.from_array([1, 2])


def test_horizontal_distance_ignores_vertical_axis() -> None:
    assert geometry.horizontal_distance(Vector3(0, 0, 0), Vector3(3, 100, 4)) == pytest.approx(5.0)


def test_height_is_absolute_vertical_delta() -> None:
    assert geometry.height(Vector3(0, 1.2, 0), Vector3(5, 0.2, 5)) == pytest.approx(1.0)


def test_rectangle_area_and_box_volume() -> None:
    c1 = Vector3(0, 0, 0)
    c2 = Vector3(-2, 4, 3)

    assert geometry.rectangle_area(c1, c2) == pytest.approx(6.0)
    assert geometry.box_volume(c1, c2) == pytest.approx(24.0)


@pytest.mark.parametrize(
    "v1, v2, expected",
    [
        (Vector3(1, 0, 0), Vector3(0, 1, 0), 90.0),
        (Vector3(1, 0, 0), Vector3(2, 0, 0), 0.0),
        (Vector3(1, 0, 0), Vector3(-1, 0, 0), 180.0),
        (Vector3(1, 1, 0), Vector3(1, 0, 0), 45.0),
        (Vector3.ZERO, Vector3(1, 0, 0), 90.0),
    ],
)
def test_angle_degrees(v1: Vector3, v2: Vector3, expected: float) -> None:
    assert geometry.angle_degrees(v1, v2) == pytest.approx(expected, abs=1e-4)


def test_nan_inputs_propagate_without_raising() -> None:
    nan_point = Vector3(float("nan"), 0, 0)

    assert math.isnan(geometry.distance(nan_point, Vector3.ZERO))
    assert math.isnan(geometry.box_volume(nan_point, Vector3.ONE))
    assert math.isinf(geometry.distance(Vector3(float("inf"), 0, 0), Vector3.ZERO))
