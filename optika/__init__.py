"""
optika - A sequential geometric-optics ray tracer in Python

Rays are propagated element by element through a collection of mirrors,
absorbers and refracting or thin-lens surfaces. The tracer is also used
to locate a system's aperture stop and marginal ray angle by bisection.
"""

from .constants import ORIGIN, UP, DOWN, LEFT, RIGHT, FORWARD, BACKWARD
from .rays import Ray, AXIAL, normalize
from .utilities import ulps_eq, basis_vectors

from .shapes import Shape, Plane, Sphere, BoundType
from .materials import RayBehaviour, Constant, ThinLens
from .materials import SurfaceProperties, SurfaceBuilder
from .materials import refract, reflect, schlick_reflectance
from .elements import OpticalElement
from .elements import create_thin_lens, create_mirror, create_absorber, create_interface
from .system import OpticalSystem, ApertureStop

from .exceptions import (OptikaError, InvalidGeometryError, SurfaceBuilderError,
                         RATSumError, RATRangeError, UnspecifiedBehaviourError,
                         AmbiguousBehaviourError, InvalidDielectricError,
                         ToleranceError, TraceLimitError)

__version__ = "0.1.0"

__all__ = [
    # Directions
    "ORIGIN",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
    "FORWARD",
    "BACKWARD",
    # Rays
    "Ray",
    "AXIAL",
    "normalize",
    "ulps_eq",
    "basis_vectors",
    # Shapes
    "Shape",
    "Plane",
    "Sphere",
    "BoundType",
    # Materials
    "RayBehaviour",
    "Constant",
    "ThinLens",
    "SurfaceProperties",
    "SurfaceBuilder",
    "refract",
    "reflect",
    "schlick_reflectance",
    # Elements
    "OpticalElement",
    "create_thin_lens",
    "create_mirror",
    "create_absorber",
    "create_interface",
    # System
    "OpticalSystem",
    "ApertureStop",
    # Errors
    "OptikaError",
    "InvalidGeometryError",
    "SurfaceBuilderError",
    "RATSumError",
    "RATRangeError",
    "UnspecifiedBehaviourError",
    "AmbiguousBehaviourError",
    "InvalidDielectricError",
    "ToleranceError",
    "TraceLimitError",
]
