"""
rays.py - Immutable rays and the default optical axis

A ray is defined by:
    - Origin point P = (x, y, z)
    - Direction cosines D = (L, M, N) where L² + M² + N² = 1
    - Refractive index n of the medium the ray currently occupies

Rays are immutable. Every interaction with a surface produces a new Ray
starting at the intersection point.
"""

import numpy as np
from typing import List

from .constants import ORIGIN, FORWARD
from .exceptions import InvalidGeometryError


def normalize(vector: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Parameters
    ----------
    vector : np.ndarray
        Input vector of any dimension

    Returns
    -------
    np.ndarray
        Unit vector in same direction

    Raises
    ------
    InvalidGeometryError
        If vector has zero magnitude
    """
    magnitude = np.linalg.norm(vector)
    if magnitude < 1e-15:
        raise InvalidGeometryError("Cannot normalize zero vector")
    return vector / magnitude


def _read_only(vector: np.ndarray) -> np.ndarray:
    vector.setflags(write=False)
    return vector


class Ray:
    """
    A half-line of light travelling through one medium.

    Attributes
    ----------
    origin : np.ndarray
        Position [x, y, z] the ray starts from
    direction : np.ndarray
        Unit direction [L, M, N]
    n : float
        Refractive index of the medium at the origin (conventionally >= 1)

    Examples
    --------
    >>> ray = Ray(origin=[0, 0, 0], direction=[0, 0, -1])
    >>> ray.position_at(10.0)
    array([  0.,   0., -10.])
    """

    __slots__ = ("_origin", "_direction", "_n")

    def __init__(
        self,
        origin: List[float] | np.ndarray,
        direction: List[float] | np.ndarray,
        n: float = 1.0
    ):
        """
        Build a ray, normalizing its direction.

        Parameters
        ----------
        origin : array-like
            Starting position [x, y, z]
        direction : array-like
            Direction vector, normalized to unit length on construction
        n : float, optional
            Refractive index of the current medium (default: 1.0)
        """
        origin = np.array(origin, dtype=np.float64)
        direction = np.array(direction, dtype=np.float64)
        if origin.shape != (3,) or direction.shape != (3,):
            raise InvalidGeometryError("Ray origin and direction must be 3-vectors")
        if not (np.all(np.isfinite(origin)) and np.all(np.isfinite(direction))):
            raise InvalidGeometryError("Ray origin and direction must be finite")

        object.__setattr__(self, "_origin", _read_only(origin))
        object.__setattr__(self, "_direction", _read_only(normalize(direction)))
        object.__setattr__(self, "_n", float(n))

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    @property
    def origin(self) -> np.ndarray:
        return self._origin

    @property
    def direction(self) -> np.ndarray:
        return self._direction

    @property
    def n(self) -> float:
        return self._n

    @property
    def L(self) -> float:
        """Direction cosine with respect to x-axis."""
        return self._direction[0]

    @property
    def M(self) -> float:
        """Direction cosine with respect to y-axis."""
        return self._direction[1]

    @property
    def N(self) -> float:
        """Direction cosine with respect to z-axis."""
        return self._direction[2]

    @property
    def x(self) -> float:
        return self._origin[0]

    @property
    def y(self) -> float:
        return self._origin[1]

    @property
    def z(self) -> float:
        return self._origin[2]

    def position_at(self, t: float) -> np.ndarray:
        """
        Point reached after travelling distance t.

        Linear in t: position_at(0) is the origin itself.

        Parameters
        ----------
        t : float
            Distance along the ray

        Returns
        -------
        np.ndarray
            Position [x, y, z]
        """
        return self._origin + t * self._direction

    def with_direction(self, direction: np.ndarray, n: float | None = None) -> 'Ray':
        """Return a new ray from the same origin with a new direction."""
        return Ray(self._origin, direction, self._n if n is None else n)

    def angle_to(self, direction: np.ndarray) -> float:
        """
        Angle in radians between this ray's direction and another direction.

        Parameters
        ----------
        direction : array-like
            Any non-zero vector

        Returns
        -------
        float
            Angle in [0, pi]
        """
        other = normalize(np.asarray(direction, dtype=np.float64))
        return float(np.arccos(np.clip(np.dot(self._direction, other), -1.0, 1.0)))

    @classmethod
    def from_two_points(
        cls,
        point1: List[float] | np.ndarray,
        point2: List[float] | np.ndarray,
        n: float = 1.0
    ) -> 'Ray':
        """
        Ray leaving point1 and passing through point2.

        Parameters
        ----------
        point1 : array-like
            Starting point [x, y, z]
        point2 : array-like
            Point that ray passes through [x, y, z]
        n : float, optional
            Refractive index of the medium at point1

        Returns
        -------
        Ray
            New ray from point1 toward point2
        """
        p1 = np.array(point1, dtype=np.float64)
        p2 = np.array(point2, dtype=np.float64)
        return cls(origin=p1, direction=p2 - p1, n=n)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return (
            np.array_equal(self._origin, other._origin)
            and np.array_equal(self._direction, other._direction)
            and self._n == other._n
        )

    def __repr__(self) -> str:
        """String representation of the ray."""
        return (
            f"Ray at [{self.x:.4f}, {self.y:.4f}, {self.z:.4f}], "
            f"direction [{self.L:.4f}, {self.M:.4f}, {self.N:.4f}], "
            f"n={self._n}"
        )


# On-axis ray from the origin travelling FORWARD in vacuum
AXIAL = Ray(ORIGIN, FORWARD, 1.0)
