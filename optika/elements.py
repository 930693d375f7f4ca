"""
elements.py - Optical elements: a shape paired with its interaction law

An OpticalElement is the atomic traceable unit of an OpticalSystem. It
answers one question: given a ray that reaches it at distance t, what is
the single construction ray that leaves it, if any?
"""

import numpy as np
from typing import Optional

from .materials import SurfaceProperties, SurfaceBuilder, RayBehaviour
from .rays import Ray
from .shapes import Shape, Plane


class OpticalElement:
    """
    One physical component of an optical system.

    Attributes
    ----------
    shape : Shape
        Geometry of the surface
    surface_properties : SurfaceProperties
        Interaction law of the surface
    """

    __slots__ = ("_shape", "_surface_properties")

    def __init__(self, shape: Shape, surface_properties: SurfaceProperties):
        object.__setattr__(self, "_shape", shape)
        object.__setattr__(self, "_surface_properties", surface_properties)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def surface_properties(self) -> SurfaceProperties:
        return self._surface_properties

    def intersection(self, ray: Ray) -> Optional[float]:
        return self._shape.intersection(ray)

    def construction_ray(self, input_ray: Ray, t: float) -> Optional[Ray]:
        """
        Ray leaving the element according to its primary behaviour.

        Parameters
        ----------
        input_ray : Ray
            Ray reaching the element
        t : float
            Distance along input_ray to the element

        Returns
        -------
        Ray or None
            Reflected or transmitted ray, or None if the element absorbs
        """
        props = self._surface_properties
        behaviour = props.primary_behaviour
        if behaviour is RayBehaviour.REFLECT:
            return props.reflect_interaction(input_ray, t, self._shape)
        if behaviour is RayBehaviour.TRANSMIT:
            return props.refract_interaction(input_ray, t, self._shape)
        return None

    def __repr__(self) -> str:
        return f"OpticalElement({self._shape!r}, {self._surface_properties!r})"


# =============================================================================
# Factory Functions
# =============================================================================

def create_thin_lens(
    centre: np.ndarray,
    normal: np.ndarray,
    focal_length: float,
    radius: Optional[float] = None
) -> OpticalElement:
    """
    Create an idealized thin lens on a plane.

    Parameters
    ----------
    centre : array-like
        Centre of the lens
    normal : array-like
        Normal of the lens plane
    focal_length : float
        Focal length, must be non-zero
    radius : float, optional
        Clear radius of the lens (default: unbounded)

    Returns
    -------
    OpticalElement
        Transmitting element with a ThinLens dielectric model
    """
    plane = Plane(centre, normal, radius=radius)
    surface_properties = SurfaceBuilder().thin_lens(focal_length).validate_and_build()
    return OpticalElement(plane, surface_properties)


def create_mirror(shape: Shape) -> OpticalElement:
    """Create a perfectly reflecting element."""
    surface_properties = (SurfaceBuilder()
                          .with_primary_behaviour(RayBehaviour.REFLECT)
                          .validate_and_build())
    return OpticalElement(shape, surface_properties)


def create_absorber(shape: Shape) -> OpticalElement:
    """Create an element that terminates every ray reaching it."""
    surface_properties = (SurfaceBuilder()
                          .with_primary_behaviour(RayBehaviour.ABSORB)
                          .validate_and_build())
    return OpticalElement(shape, surface_properties)


def create_interface(shape: Shape, refractive_index: float) -> OpticalElement:
    """
    Create a refracting interface.

    Rays crossing the surface enter a medium of `refractive_index`.

    Parameters
    ----------
    shape : Shape
        Geometry of the interface
    refractive_index : float
        Index of the medium on the far side, must be >= 1

    Returns
    -------
    OpticalElement
        Transmitting element with a Constant dielectric model
    """
    surface_properties = (SurfaceBuilder()
                          .with_primary_behaviour(RayBehaviour.TRANSMIT)
                          .with_refractive_index(refractive_index)
                          .validate_and_build())
    return OpticalElement(shape, surface_properties)
