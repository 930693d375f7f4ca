"""
system.py - Sequential tracing and aperture stop search

An OpticalSystem holds its elements in insertion order. Propagation order
is decided per ray: at every step the ray continues to whichever element
it reaches first, until it is absorbed or escapes.

The aperture stop is found by bisection on the launch half-angle of rays
leaving the axis origin. A ray "passes" when it visits exactly the same
elements as the axis ray; the element where the first failing ray leaves
the axial path is the stop.
"""

import logging
import math
import numpy as np
from collections import namedtuple
from typing import List, Optional, Sequence, Tuple

from .constants import DEFAULT_TOLERANCE, MIN_TOLERANCE, MAX_TRACE_STEPS
from .elements import OpticalElement
from .exceptions import ToleranceError, TraceLimitError
from .rays import Ray, AXIAL
from .utilities import basis_vectors, rotate_towards, closest_approach

logger = logging.getLogger(__name__)


class ApertureStop(namedtuple('ApertureStop', ['index', 'half_angle', 'position'])):
    """
    Result of an aperture stop search.

    Attributes
    ----------
    index : int
        Index of the stop in the system's element list
    half_angle : float
        Largest unobstructed half-angle of the marginal ray (radians)
    position : np.ndarray
        Point on the optical axis closest to where the marginal ray meets
        the stop
    """
    __slots__ = ()

    def numerical_aperture(self, n: float = 1.0) -> float:
        """
        Numerical aperture n sin(half_angle).

        Parameters
        ----------
        n : float, optional
            Refractive index of the object-space medium (default: 1.0)
        """
        return n * math.sin(self.half_angle)


def _shared_prefix(path: Sequence[int], baseline: Sequence[int]) -> int:
    count = 0
    for a, b in zip(path, baseline):
        if a != b:
            break
        count += 1
    return count


class OpticalSystem:
    """
    Collection of optical elements with a reference axis.

    Attributes
    ----------
    elements : tuple of OpticalElement
        Elements in insertion order
    axis : Ray
        Optical axis; its origin is the launch point for the stop search
    tol : float
        Convergence tolerance of the half-angle bisection (radians)
    aperture_stop : ApertureStop or None
        Result of the last numerical_aperture() call
    """

    def __init__(
        self,
        elements: Sequence[OpticalElement],
        axis: Ray = AXIAL,
        tol: float = DEFAULT_TOLERANCE
    ):
        if not tol > 0.0 or not math.isfinite(tol):
            raise ToleranceError(f"tolerance must be positive and finite, got {tol}")
        if tol < MIN_TOLERANCE:
            raise ToleranceError(
                f"tolerance {tol} is below the minimum of {MIN_TOLERANCE}"
            )
        self._elements = tuple(elements)
        self._axis = axis
        self._tol = float(tol)
        self._aperture_stop: Optional[ApertureStop] = None

    @property
    def elements(self) -> Tuple[OpticalElement, ...]:
        return self._elements

    @property
    def axis(self) -> Ray:
        return self._axis

    @property
    def tol(self) -> float:
        return self._tol

    @property
    def aperture_stop(self) -> Optional[ApertureStop]:
        return self._aperture_stop

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> OpticalElement:
        return self._elements[index]

    def __iter__(self):
        return iter(self._elements)

    # -------------------------------------------------------------------------
    # Sequential tracing
    # -------------------------------------------------------------------------

    def closest_element(self, ray: Ray) -> Optional[Tuple[int, float]]:
        """
        Index of and distance to the first element the ray reaches.

        Elements the ray misses count as infinitely far. On a tie the
        element listed first wins.

        Parameters
        ----------
        ray : Ray
            Ray to test

        Returns
        -------
        tuple (int, float) or None
            (index, t) of the nearest hit, or None if nothing is hit
        """
        closest_i = None
        closest_t = math.inf
        for i, element in enumerate(self._elements):
            t = element.intersection(ray)
            if t is not None and t < closest_t:
                closest_i = i
                closest_t = t
        if closest_i is None:
            return None
        return closest_i, closest_t

    def trace_construction_ray(self, ray: Ray) -> Optional[Tuple[int, Ray]]:
        """
        Advance a ray by one element.

        Returns
        -------
        tuple (int, Ray) or None
            Index of the element hit and the ray leaving it, or None when
            the ray escapes or is absorbed
        """
        closest = self.closest_element(ray)
        if closest is None:
            return None
        i, t = closest
        new_ray = self._elements[i].construction_ray(ray, t)
        if new_ray is None:
            return None
        return i, new_ray

    def log_path(self, ray: Ray, max_steps: int = MAX_TRACE_STEPS) -> Tuple[List[int], List[Ray]]:
        """
        Trace a ray until it is absorbed or escapes.

        Parameters
        ----------
        ray : Ray
            Starting ray
        max_steps : int, optional
            Guard against paths that never terminate

        Returns
        -------
        (list of int, list of Ray)
            Indices of the elements visited, and the rays starting with the
            input ray; there is one more ray than index

        Raises
        ------
        TraceLimitError
            If the ray is still propagating after max_steps elements
        """
        indices: List[int] = []
        rays: List[Ray] = [ray]
        while True:
            step = self.trace_construction_ray(rays[-1])
            if step is None:
                break
            if len(indices) >= max_steps:
                logger.warning("ray path exceeded %d steps, abandoning trace", max_steps)
                raise TraceLimitError(max_steps, indices)
            i, new_ray = step
            logger.debug("step %d: element %d, new ray %r", len(indices), i, new_ray)
            indices.append(i)
            rays.append(new_ray)
        return indices, rays

    # -------------------------------------------------------------------------
    # Aperture stop
    # -------------------------------------------------------------------------

    def _launch_ray(self, half_angle: float, meridional: np.ndarray) -> Ray:
        direction = rotate_towards(self._axis.direction, meridional, half_angle)
        return self._axis.with_direction(direction)

    def _replay(self, ray: Ray, n_steps: int) -> np.ndarray:
        # hit point on the n-th element reached, absorbing elements included
        position = ray.origin
        for _ in range(n_steps):
            closest = self.closest_element(ray)
            if closest is None:
                break
            i, t = closest
            position = ray.position_at(t)
            ray = self._elements[i].construction_ray(ray, t)
            if ray is None:
                break
        return position

    def _axial_position(self, axis_rays: Sequence[Ray], point: np.ndarray) -> np.ndarray:
        # Each axis ray is valid from its origin up to the element it hits
        # next; the last one is unbounded if it escapes.
        best = self._axis.origin.copy()
        best_distance = math.inf
        for segment in axis_rays:
            hit = self.closest_element(segment)
            limit = math.inf if hit is None else hit[1]
            t = min(max(closest_approach(segment, point), 0.0), limit)
            candidate = segment.position_at(t)
            distance = np.linalg.norm(candidate - point)
            if distance < best_distance:
                best = candidate
                best_distance = distance
        return best

    def find_aperture_stop(self) -> Optional[ApertureStop]:
        """
        Locate the aperture stop without modifying the system.

        Rays are launched from the axis origin, tilted toward the meridional
        axis, and the half-angle is bisected on [0, pi/2] until the bracket
        is narrower than `tol`.

        Returns
        -------
        ApertureStop or None
            The stop, or None if every tested ray follows the axial path
        """
        tol = self._tol
        _, meridional = basis_vectors(self._axis.direction)
        baseline, axis_rays = self.log_path(self._axis)
        logger.debug("axial path: %s", baseline)

        lo, hi = 0.0, 0.5 * math.pi
        mid = 0.5 * (lo + hi)
        max_iter_count = math.ceil(math.log2((hi - lo) / tol)) + 1
        iter_count = 0
        blocking_index = None
        blocking_ray = None
        n_steps = 0
        while hi - lo >= tol and iter_count < max_iter_count:
            iter_count += 1
            test_ray = self._launch_ray(mid, meridional)
            path, _ = self.log_path(test_ray)
            if path == baseline:
                logger.debug("bisection step %d: half angle %.9f passed", iter_count, mid)
                lo = mid
            else:
                shared = _shared_prefix(path, baseline)
                n_steps = shared + 1
                if shared < len(baseline):
                    # stop lies on the axial path: the passing ray at lo reaches it
                    blocking_index = baseline[shared]
                    blocking_ray = None
                else:
                    # stop lies off the axial path: only the failing ray reaches it
                    blocking_index = path[shared]
                    blocking_ray = test_ray
                logger.debug("bisection step %d: half angle %.9f blocked at element %d",
                             iter_count, mid, blocking_index)
                hi = mid
            mid = 0.5 * (lo + hi)

        if blocking_index is None:
            logger.info("no aperture stop: rays up to %.6f rad follow the axial path", hi)
            return None

        if blocking_ray is None:
            blocking_ray = self._launch_ray(lo, meridional)
        blocking_position = self._replay(blocking_ray, n_steps)
        position = self._axial_position(axis_rays, blocking_position)
        stop = ApertureStop(blocking_index, lo, position)
        logger.info("aperture stop at element %d, half angle %.6f rad, position %s",
                    stop.index, stop.half_angle, stop.position)
        return stop

    def numerical_aperture(self) -> Optional[ApertureStop]:
        """
        Find the aperture stop and cache it on the system.

        Returns
        -------
        ApertureStop or None
            The value now held by `aperture_stop`
        """
        self._aperture_stop = self.find_aperture_stop()
        return self._aperture_stop

    def __repr__(self) -> str:
        return f"OpticalSystem({len(self._elements)} elements, axis={self._axis!r}, tol={self._tol})"
