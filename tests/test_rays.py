"""
Unit tests for rays and vector utilities
"""

import numpy as np
import pytest

from optika import (Ray, AXIAL, ORIGIN, UP, DOWN, LEFT, RIGHT, FORWARD, BACKWARD,
                    normalize, ulps_eq, basis_vectors, InvalidGeometryError)
from optika.utilities import rotate_towards, closest_approach


class TestRay:
    """Ray construction and propagation"""

    def test_direction_is_normalized(self):
        ray = Ray(origin=[1, 2, 3], direction=[0, 3, 4])
        np.testing.assert_allclose(ray.direction, [0.0, 0.6, 0.8])
        assert ray.n == 1.0

    def test_position_at_zero_is_origin(self):
        ray = Ray(origin=[1, -2, 5], direction=[1, 1, 1], n=1.5)
        np.testing.assert_array_equal(ray.position_at(0.0), ray.origin)

    def test_position_at_is_linear(self):
        ray = Ray(origin=[1, -2, 5], direction=[1, 2, -2])
        p1 = ray.position_at(1.5)
        p2 = ray.position_at(3.0)
        np.testing.assert_allclose(p2 - ray.origin, 2.0 * (p1 - ray.origin))
        np.testing.assert_allclose(p1, [1.5, -1.0, 4.0])

    def test_ray_is_immutable(self):
        ray = Ray(origin=[0, 0, 0], direction=[0, 0, -1])
        with pytest.raises(AttributeError):
            ray.n = 2.0
        with pytest.raises(ValueError):
            ray.origin[0] = 1.0

    def test_input_arrays_are_copied(self):
        origin = np.array([0.0, 0.0, 0.0])
        ray = Ray(origin, [0, 0, -1])
        origin[0] = 5.0
        assert ray.x == 0.0

    def test_zero_direction_rejected(self):
        with pytest.raises(InvalidGeometryError):
            Ray(origin=[0, 0, 0], direction=[0, 0, 0])

    def test_non_finite_rejected(self):
        with pytest.raises(InvalidGeometryError):
            Ray(origin=[0, np.nan, 0], direction=[0, 0, 1])

    def test_from_two_points(self):
        ray = Ray.from_two_points([0, 0, 0], [0, 10, 0], n=1.33)
        np.testing.assert_allclose(ray.direction, UP)
        assert ray.n == 1.33

    def test_with_direction_keeps_origin(self):
        ray = Ray([1, 1, 1], FORWARD, 1.5)
        turned = ray.with_direction([0, 2, 0])
        np.testing.assert_array_equal(turned.origin, ray.origin)
        np.testing.assert_allclose(turned.direction, UP)
        assert turned.n == 1.5

    def test_angle_to(self):
        assert AXIAL.angle_to(FORWARD) == pytest.approx(0.0)
        assert AXIAL.angle_to(UP) == pytest.approx(np.pi / 2)
        assert AXIAL.angle_to(BACKWARD) == pytest.approx(np.pi)

    def test_equality(self):
        assert Ray(ORIGIN, FORWARD) == AXIAL
        assert Ray(ORIGIN, FORWARD, 1.5) != AXIAL


class TestNearEquality:
    """ulps_eq near-equality"""

    def test_within_epsilon(self):
        assert ulps_eq(0.0, 1e-17)
        assert ulps_eq(0.1 + 0.2, 0.3)

    def test_ulps_at_large_magnitude(self):
        big = 1e10
        assert ulps_eq(big, np.nextafter(big, np.inf))
        assert not ulps_eq(big, big + 1e-3)

    def test_arrays(self):
        assert ulps_eq([0.0, 1.0], [0.0, 1.0])
        assert not ulps_eq([0.0, 1.0], [0.0, 1.1])


class TestBasisVectors:
    """Horizontal and vertical axes perpendicular to a direction"""

    def test_forward_axis(self):
        right, up = basis_vectors(FORWARD)
        np.testing.assert_allclose(right, RIGHT, atol=1e-15)
        np.testing.assert_allclose(up, UP, atol=1e-15)

    def test_vertical_special_cases(self):
        right, up = basis_vectors(UP)
        np.testing.assert_array_equal(right, LEFT)
        np.testing.assert_array_equal(up, FORWARD)
        right, up = basis_vectors(DOWN)
        np.testing.assert_array_equal(right, RIGHT)
        np.testing.assert_array_equal(up, FORWARD)

    def test_orthonormal_for_oblique_axis(self):
        axis = normalize(np.array([1.0, 2.0, -3.0]))
        right, up = basis_vectors(axis)
        for v in (right, up):
            assert np.linalg.norm(v) == pytest.approx(1.0)
            assert np.dot(v, axis) == pytest.approx(0.0, abs=1e-12)
        assert np.dot(right, up) == pytest.approx(0.0, abs=1e-12)
        assert np.all(np.isfinite(right)) and np.all(np.isfinite(up))


class TestVectorHelpers:

    def test_rotate_towards(self):
        direction = rotate_towards(FORWARD, UP, np.pi / 6)
        np.testing.assert_allclose(direction, [0.0, 0.5, -np.sqrt(3) / 2])

    def test_closest_approach(self):
        assert closest_approach(AXIAL, [0.0, 10.0, -50.0]) == pytest.approx(50.0)
        assert closest_approach(AXIAL, [0.0, 10.0, 20.0]) == pytest.approx(-20.0)
