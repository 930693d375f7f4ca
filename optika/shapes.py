"""
shapes.py - Surface geometry for sequential ray tracing

Shape types:
    - Plane: flat surface, unbounded or clipped to a circle or rectangle
    - Sphere: spherical surface of given centre and radius

Each shape knows:
    - Where a ray first meets it (smallest positive distance t)
    - Its unit normal at a point on the surface
    - A reference centre point

Distances at or behind the ray origin are never hits, so a ray leaving a
surface cannot intersect that surface again at its own origin.
"""

import numpy as np
from typing import Optional
from enum import Enum

from .constants import EPSILON, SURFACE_EPSILON
from .exceptions import InvalidGeometryError
from .rays import Ray, normalize
from .utilities import ulps_eq, basis_vectors


def _surface_tolerance(*points) -> float:
    # distance below which a ray origin is taken to lie on the surface
    scale = max(1.0, *(float(np.max(np.abs(p))) for p in points))
    return SURFACE_EPSILON * scale


class BoundType(Enum):
    """Enumeration of plane aperture shapes."""
    NONE = "none"
    CIRCULAR = "circular"
    RECTANGULAR = "rectangular"


class Shape:
    """
    Base class for all traceable shapes.

    Subclasses implement `intersection`, `normal` and `centre`. By
    convention the normal points outward.
    """

    def intersection(self, ray: Ray) -> Optional[float]:
        """
        Distance along the ray to the first valid hit.

        Parameters
        ----------
        ray : Ray
            Incoming ray

        Returns
        -------
        float or None
            Smallest t > 0 at which the ray meets the surface, or None
        """
        raise NotImplementedError("Subclasses must implement intersection()")

    def normal(self, position: np.ndarray) -> np.ndarray:
        """
        Unit outward normal at a point on the surface.

        Parameters
        ----------
        position : np.ndarray
            Point on the surface [x, y, z]

        Returns
        -------
        np.ndarray
            Unit normal vector
        """
        raise NotImplementedError("Subclasses must implement normal()")

    def centre(self) -> np.ndarray:
        """Reference point of the shape."""
        raise NotImplementedError("Subclasses must implement centre()")


class Plane(Shape):
    """
    Flat surface through `centre` with unit `normal`.

    A `radius` clips the plane to a disc. `width` and `height` clip it to
    a rectangle centred on `centre`, with `width` measured along the
    horizontal and `height` along the vertical axis returned by
    `basis_vectors(normal)`.

    Attributes
    ----------
    bounds : BoundType
        Kind of aperture clipping the plane
    radius : float or None
        Disc radius for circular bounds
    width, height : float or None
        Full extents for rectangular bounds
    """

    def __init__(
        self,
        centre: np.ndarray,
        normal: np.ndarray,
        radius: Optional[float] = None,
        width: Optional[float] = None,
        height: Optional[float] = None
    ):
        self._centre = np.array(centre, dtype=np.float64)
        self._normal = normalize(np.array(normal, dtype=np.float64))
        self._centre.setflags(write=False)
        self._normal.setflags(write=False)

        rectangular = width is not None or height is not None
        if radius is not None and rectangular:
            raise InvalidGeometryError("Plane bounds must be circular or rectangular, not both")

        self.radius = None
        self.width = None
        self.height = None
        if radius is not None:
            if radius <= 0:
                raise InvalidGeometryError(f"Plane radius must be positive, got {radius}")
            self.bounds = BoundType.CIRCULAR
            self.radius = float(radius)
        elif rectangular:
            if width is None or height is None or width <= 0 or height <= 0:
                raise InvalidGeometryError(
                    f"Rectangular bounds need positive width and height, got {width} x {height}"
                )
            self.bounds = BoundType.RECTANGULAR
            self.width = float(width)
            self.height = float(height)
            self._horizontal, self._vertical = basis_vectors(self._normal)
        else:
            self.bounds = BoundType.NONE

    def with_radius(self, radius: float) -> 'Plane':
        """Return a copy of this plane clipped to a disc of `radius`."""
        return Plane(self._centre, self._normal, radius=radius)

    def is_inside_bounds(self, position: np.ndarray) -> bool:
        """
        Check whether a point on the plane lies within its aperture.

        Parameters
        ----------
        position : np.ndarray
            Point on the plane

        Returns
        -------
        bool
            True if the point is within the bounds
        """
        offset = position - self._centre
        if self.bounds is BoundType.CIRCULAR:
            return np.linalg.norm(offset) < self.radius
        if self.bounds is BoundType.RECTANGULAR:
            return (
                abs(np.dot(offset, self._horizontal)) <= 0.5 * self.width
                and abs(np.dot(offset, self._vertical)) <= 0.5 * self.height
            )
        return True

    def intersection(self, ray: Ray) -> Optional[float]:
        n = self._normal
        projection = np.dot(n, ray.direction)
        if ulps_eq(projection, 0.0):
            # parallel to the plane
            return None
        offset = np.dot(self._centre - ray.origin, n)
        if abs(offset) <= _surface_tolerance(ray.origin, self._centre):
            # ray starts on the plane
            return None
        t = offset / projection
        if t <= 0.0:
            return None
        if not self.is_inside_bounds(ray.position_at(t)):
            return None
        return float(t)

    def normal(self, position: np.ndarray) -> np.ndarray:
        return self._normal

    def centre(self) -> np.ndarray:
        return self._centre

    def __repr__(self) -> str:
        c, n = self._centre, self._normal
        if self.bounds is BoundType.CIRCULAR:
            bound = f"radius={self.radius:.2f}"
        elif self.bounds is BoundType.RECTANGULAR:
            bound = f"{self.width:.2f}x{self.height:.2f}"
        else:
            bound = "unbounded"
        return (
            f"Plane(centre=[{c[0]:.2f}, {c[1]:.2f}, {c[2]:.2f}], "
            f"normal=[{n[0]:.4f}, {n[1]:.4f}, {n[2]:.4f}], {bound})"
        )


class Sphere(Shape):
    """
    Spherical surface.

    Intersection solves |o + t d - c|² = r² with the quadratic formula
    and keeps the smaller root that is greater than machine epsilon. When
    the ray origin already lies on the sphere the root at the origin is
    discarded first, so rounding in the origin cannot produce a second hit
    a few ulps away.
    """

    def __init__(self, centre: np.ndarray, radius: float):
        if radius <= 0:
            raise InvalidGeometryError(f"Sphere radius must be positive, got {radius}")
        self._centre = np.array(centre, dtype=np.float64)
        self._centre.setflags(write=False)
        self.radius = float(radius)

    def intersection(self, ray: Ray) -> Optional[float]:
        oc = ray.origin - self._centre
        a = np.dot(ray.direction, ray.direction)
        b = 2.0 * np.dot(oc, ray.direction)
        c = np.dot(oc, oc) - self.radius * self.radius

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return None

        root = np.sqrt(discriminant)
        roots = [(-b - root) / (2.0 * a), (-b + root) / (2.0 * a)]
        tolerance = _surface_tolerance(ray.origin, self._centre)
        if abs(c) <= 2.0 * self.radius * tolerance:
            # ray starts on the sphere: drop the root at its own origin
            roots = [max(roots, key=abs)]
            if roots[0] <= tolerance:
                return None
        roots = [t for t in roots if t > EPSILON]
        if not roots:
            return None
        return float(min(roots))

    def normal(self, position: np.ndarray) -> np.ndarray:
        return normalize(np.asarray(position, dtype=np.float64) - self._centre)

    def centre(self) -> np.ndarray:
        return self._centre

    def __repr__(self) -> str:
        c = self._centre
        return f"Sphere(centre=[{c[0]:.2f}, {c[1]:.2f}, {c[2]:.2f}], radius={self.radius:.2f})"
