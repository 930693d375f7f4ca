"""
Shared optical systems for the test suite
"""

import pytest

from optika import (AXIAL, FORWARD, BACKWARD, OpticalSystem, Plane,
                    create_thin_lens, create_interface)


def window(distance, radius):
    """Index-matched circular window `distance` along the default axis."""
    return create_interface(Plane(distance * FORWARD, BACKWARD, radius=radius), 1.0)


@pytest.fixture
def two_lens_system():
    lens_1 = create_thin_lens(100.0 * FORWARD, BACKWARD, 100.0, radius=50.0)
    lens_2 = create_thin_lens(200.0 * FORWARD, BACKWARD, 200.0, radius=50.0)
    return OpticalSystem([lens_1, lens_2], AXIAL, 1e-6)


@pytest.fixture
def reversed_two_lens_system():
    lens_1 = create_thin_lens(400.0 * FORWARD, BACKWARD, 100.0, radius=50.0)
    lens_2 = create_thin_lens(100.0 * FORWARD, BACKWARD, 200.0, radius=50.0)
    return OpticalSystem([lens_1, lens_2], AXIAL, 1e-6)


@pytest.fixture
def tapered_system():
    """Four windows with progressively smaller apertures; the last is the stop."""
    elements = [
        window(100.0, 50.0),
        window(200.0, 40.0),
        window(300.0, 30.0),
        window(400.0, 20.0),
    ]
    return OpticalSystem(elements, AXIAL, 1e-6)


@pytest.fixture
def shuffled_system():
    """Four windows listed out of axial order with the stop third along the axis."""
    elements = [
        window(400.0, 60.0),
        window(100.0, 50.0),
        window(300.0, 12.0),
        window(200.0, 40.0),
    ]
    return OpticalSystem(elements, AXIAL, 1e-6)
