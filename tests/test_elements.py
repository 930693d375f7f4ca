"""
Unit tests for optical elements and their factories
"""

import numpy as np
import pytest

from optika import (Ray, AXIAL, Plane, Sphere, ORIGIN, FORWARD, BACKWARD,
                    OpticalElement, SurfaceBuilder, RayBehaviour, ThinLens,
                    Constant, BoundType, create_thin_lens, create_mirror,
                    create_absorber, create_interface, InvalidDielectricError)


class TestConstructionRay:
    """Primary behaviour dispatch"""

    def test_reflect(self):
        mirror = create_mirror(Plane(50.0 * FORWARD, BACKWARD))
        out = mirror.construction_ray(AXIAL, 50.0)
        np.testing.assert_allclose(out.origin, 50.0 * FORWARD)
        np.testing.assert_allclose(out.direction, BACKWARD)

    def test_absorb(self):
        absorber = create_absorber(Plane(50.0 * FORWARD, BACKWARD))
        assert absorber.construction_ray(AXIAL, 50.0) is None

    def test_transmit(self):
        interface = create_interface(Sphere(100.0 * FORWARD, 10.0), 1.5)
        t = interface.intersection(AXIAL)
        assert t == pytest.approx(90.0)
        out = interface.construction_ray(AXIAL, t)
        np.testing.assert_allclose(out.origin, 90.0 * FORWARD)
        assert out.n == 1.5

    def test_element_from_builder(self):
        props = SurfaceBuilder().with_rat(0.0, 0.2, 0.8).with_refractive_index(1.2).build()
        element = OpticalElement(Plane(10.0 * FORWARD, BACKWARD), props)
        assert element.surface_properties.primary_behaviour is RayBehaviour.TRANSMIT
        assert element.construction_ray(AXIAL, 10.0).n == 1.2

    def test_element_is_immutable(self):
        element = create_absorber(Plane(ORIGIN, BACKWARD))
        with pytest.raises(AttributeError):
            element.shape = Plane(ORIGIN, FORWARD)


class TestFactories:

    def test_thin_lens(self):
        lens = create_thin_lens(100.0 * FORWARD, BACKWARD, 100.0, radius=50.0)
        assert lens.shape.bounds is BoundType.CIRCULAR
        assert lens.shape.radius == 50.0
        assert lens.surface_properties.dielectric_properties == ThinLens(100.0)
        assert lens.surface_properties.primary_behaviour is RayBehaviour.TRANSMIT

    def test_unbounded_thin_lens(self):
        lens = create_thin_lens(100.0 * FORWARD, BACKWARD, -50.0)
        assert lens.shape.bounds is BoundType.NONE
        assert lens.intersection(Ray([0.0, 1e3, 0.0], FORWARD)) == pytest.approx(100.0)

    def test_thin_lens_zero_focal_length(self):
        with pytest.raises(InvalidDielectricError):
            create_thin_lens(100.0 * FORWARD, BACKWARD, 0.0)

    def test_interface(self):
        element = create_interface(Plane(ORIGIN, BACKWARD), 1.7)
        assert element.surface_properties.dielectric_properties == Constant(1.7)

    def test_interface_rejects_index_below_one(self):
        with pytest.raises(InvalidDielectricError):
            create_interface(Plane(ORIGIN, BACKWARD), 0.5)
