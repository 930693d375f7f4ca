"""
utilities.py - Vector helpers shared by the shapes and the system solver
"""

import numpy as np
from typing import Tuple

from .constants import EPSILON, MAX_ULPS, UP, DOWN, LEFT, RIGHT, FORWARD
from .rays import Ray, normalize


def ulps_eq(a, b, epsilon: float = EPSILON, max_ulps: int = MAX_ULPS) -> bool:
    """
    Near-equality used throughout optika.

    Two values are equal when their absolute difference is at most
    `epsilon`, or when they share a sign and are no more than `max_ulps`
    units in the last place apart. Arrays compare element-wise and are
    equal only if every element is.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    diff = np.abs(a - b)
    spacing = np.spacing(np.maximum(np.abs(a), np.abs(b)))
    same_sign = np.signbit(a) == np.signbit(b)
    close = (diff <= epsilon) | (same_sign & (diff <= max_ulps * spacing))
    return bool(np.all(close))


def basis_vectors(axial_direction: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Orthonormal (horizontal, vertical) axes perpendicular to a direction.

    The vertical axis points UP and the horizontal axis to the RIGHT. When
    the direction points straight UP or DOWN the cross product with UP
    vanishes, so the vertical axis is taken along FORWARD instead.

    Parameters
    ----------
    axial_direction : np.ndarray
        Unit direction of the optical axis

    Returns
    -------
    tuple of np.ndarray
        (right, up); for an optical system these are the sagittal and
        meridional axes
    """
    axial_direction = np.asarray(axial_direction, dtype=np.float64)
    if ulps_eq(axial_direction, UP):
        # looking up from below
        return LEFT.copy(), FORWARD.copy()
    if ulps_eq(axial_direction, DOWN):
        # looking down from above
        return RIGHT.copy(), FORWARD.copy()
    right = normalize(np.cross(axial_direction, UP))
    up = -1.0 * np.cross(axial_direction, right)
    return right, up


def rotate_towards(direction: np.ndarray, towards: np.ndarray, angle: float) -> np.ndarray:
    """Rotate a unit direction by `angle` radians toward an orthogonal unit axis."""
    return np.cos(angle) * np.asarray(direction) + np.sin(angle) * np.asarray(towards)


def closest_approach(ray: Ray, point: np.ndarray) -> float:
    """
    Parametric distance along a ray's line to the point nearest `point`.

    The result may be negative when the nearest point lies behind the
    ray origin; callers decide which range of t is meaningful.
    """
    return float(np.dot(np.asarray(point, dtype=np.float64) - ray.origin, ray.direction))
