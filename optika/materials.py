"""
materials.py - Surface interaction laws

A surface's interaction law is its primary behaviour (reflect, absorb or
transmit) together with a dielectric model used on transmission:

    - Constant(n): refraction into a medium of index n (vector Snell's law)
    - ThinLens(focal_length): idealized angular deflection

The reflectance/absorption/transmittance (RAT) coefficients only decide
the primary behaviour. Rays are never split between behaviours.
"""

import logging
import numpy as np
from collections import namedtuple
from enum import Enum
from typing import Optional, Tuple

from .exceptions import (RATSumError, RATRangeError, UnspecifiedBehaviourError,
                         AmbiguousBehaviourError, InvalidDielectricError)
from .rays import Ray, normalize
from .shapes import Shape
from .utilities import ulps_eq

logger = logging.getLogger(__name__)


class RayBehaviour(Enum):
    """Primary behaviour of a ray meeting a surface."""
    REFLECT = "reflect"
    ABSORB = "absorb"
    TRANSMIT = "transmit"


Constant = namedtuple('Constant', ['n'])
ThinLens = namedtuple('ThinLens', ['focal_length'])


def refract(d_in: np.ndarray, normal: np.ndarray, eta: float) -> Optional[np.ndarray]:
    """
    Refract a unit direction at an interface.

    The normal is flipped if needed so that it opposes the incoming ray.

    Parameters
    ----------
    d_in : np.ndarray
        Unit incoming direction
    normal : np.ndarray
        Unit surface normal, either orientation
    eta : float
        Ratio n_incoming / n_outgoing (1/n_glass going from air to glass)

    Returns
    -------
    np.ndarray or None
        Refracted direction, or None on total internal reflection
    """
    if np.dot(d_in, normal) > 0.0:
        normal = -normal
    cos_theta_i = -np.dot(d_in, normal)
    radicand = 1.0 - eta * eta * (1.0 - cos_theta_i * cos_theta_i)
    if radicand < 0.0:
        return None
    return eta * d_in + (eta * cos_theta_i - np.sqrt(radicand)) * normal


def reflect(d_in: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """
    Mirror a direction about a surface normal.

    Parameters
    ----------
    d_in : np.ndarray
        Incoming direction
    normal : np.ndarray
        Unit surface normal, either orientation

    Returns
    -------
    np.ndarray
        Reflected direction
    """
    return d_in - 2.0 * np.dot(d_in, normal) * normal


def schlick_reflectance(eta: float, cos_theta: float) -> float:
    """
    Schlick's approximation to Fresnel reflectance.

    Parameters
    ----------
    eta : float
        Ratio of refractive indices across the interface
    cos_theta : float
        Cosine of the angle of incidence

    Returns
    -------
    float
        Fraction of light reflected
    """
    r_0 = ((1.0 - eta) / (1.0 + eta)) ** 2
    return r_0 + (1.0 - r_0) * (1.0 - cos_theta) ** 5


class SurfaceProperties:
    """
    Interaction law attached to one optical surface.

    Instances are normally produced by `SurfaceBuilder.validate_and_build`,
    which guarantees the RAT coefficients sum to 1 and the dielectric model
    is physical.

    Attributes
    ----------
    primary_behaviour : RayBehaviour
        What a construction ray does at the surface
    reflectance, absorption, transmittance : float
        RAT coefficients, summing to 1
    dielectric_properties : Constant or ThinLens
        Model used when transmitting
    """

    def __init__(
        self,
        primary_behaviour: RayBehaviour,
        reflectance: float,
        absorption: float,
        transmittance: float,
        dielectric_properties=Constant(1.0)
    ):
        self.primary_behaviour = primary_behaviour
        self.reflectance = reflectance
        self.absorption = absorption
        self.transmittance = transmittance
        self.dielectric_properties = dielectric_properties

    @staticmethod
    def builder() -> 'SurfaceBuilder':
        """Start building validated SurfaceProperties."""
        return SurfaceBuilder()

    @property
    def rat(self) -> Tuple[float, float, float]:
        return self.reflectance, self.absorption, self.transmittance

    def refract_interaction(self, input_ray: Ray, t: float, shape: Shape) -> Ray:
        """
        Transmit a ray through the surface at distance t.

        Parameters
        ----------
        input_ray : Ray
            Incoming ray
        t : float
            Distance along input_ray to the surface
        shape : Shape
            Geometry of the surface

        Returns
        -------
        Ray
            Transmitted ray starting at the intersection point
        """
        position = input_ray.position_at(t)
        normal = shape.normal(position)
        model = self.dielectric_properties

        if isinstance(model, ThinLens):
            return self._thin_lens(input_ray, position, normal, shape.centre(), model.focal_length)

        eta = input_ray.n / model.n
        direction = refract(input_ray.direction, normal, eta)
        if direction is None:
            logger.debug("total internal reflection at %s, reflecting instead", position)
            return Ray(position, reflect(input_ray.direction, normal), input_ray.n)
        return Ray(position, direction, model.n)

    @staticmethod
    def _thin_lens(input_ray, position, normal, centre, focal_length):
        # Idealized deflection: the incidence angle is scaled by 1/f and the
        # new direction is rebuilt from the radial offset and the centre
        # position vector itself.
        offset = position - centre
        if ulps_eq(np.linalg.norm(offset), 0.0):
            return Ray(position, input_ray.direction, input_ray.n)
        incidence = np.arccos(np.clip(np.dot(input_ray.direction, normal), -1.0, 1.0))
        angle = incidence / focal_length
        direction = np.sin(angle) * normalize(offset) + np.cos(angle) * centre
        return Ray(position, normalize(direction), input_ray.n)

    def reflect_interaction(self, input_ray: Ray, t: float, shape: Shape) -> Ray:
        """Mirror a ray about the surface normal at distance t."""
        position = input_ray.position_at(t)
        direction = reflect(input_ray.direction, shape.normal(position))
        return Ray(position, direction, input_ray.n)

    def __repr__(self) -> str:
        return (
            f"SurfaceProperties({self.primary_behaviour.value}, "
            f"RAT=({self.reflectance}, {self.absorption}, {self.transmittance}), "
            f"{self.dielectric_properties})"
        )


def infer_primary_behaviour(reflectance: float, absorption: float,
                            transmittance: float) -> RayBehaviour:
    """Behaviour with the strictly largest RAT coefficient."""
    r, a, t = reflectance, absorption, transmittance
    if r > a and r > t:
        return RayBehaviour.REFLECT
    if a > r and a > t:
        return RayBehaviour.ABSORB
    if t > r and t > a:
        return RayBehaviour.TRANSMIT
    raise AmbiguousBehaviourError((r, a, t))


_DEFAULT_RAT = {
    RayBehaviour.REFLECT: (1.0, 0.0, 0.0),
    RayBehaviour.ABSORB: (0.0, 1.0, 0.0),
    RayBehaviour.TRANSMIT: (0.0, 0.0, 1.0),
}


class SurfaceBuilder:
    """
    Collects a partial surface description and validates it.

    Any of the three settings may be left unset; `validate_and_build`
    infers what it can and raises a SurfaceBuilderError otherwise. The only
    silent default is the dielectric model, which falls back to vacuum,
    Constant(1.0).

    Examples
    --------
    >>> props = SurfaceBuilder().with_rat(0.9, 0.1, 0.0).validate_and_build()
    >>> props.primary_behaviour
    <RayBehaviour.REFLECT: 'reflect'>
    """

    def __init__(self):
        self.primary_behaviour: Optional[RayBehaviour] = None
        self.rat: Optional[Tuple[float, float, float]] = None
        self.dielectric_properties = None

    def thin_lens(self, focal_length: float) -> 'SurfaceBuilder':
        self.primary_behaviour = RayBehaviour.TRANSMIT
        self.rat = (0.0, 0.0, 1.0)
        self.dielectric_properties = ThinLens(float(focal_length))
        return self

    def with_primary_behaviour(self, primary_behaviour: RayBehaviour) -> 'SurfaceBuilder':
        self.primary_behaviour = primary_behaviour
        return self

    def with_rat(self, reflectance: float, absorption: float,
                 transmittance: float) -> 'SurfaceBuilder':
        self.rat = (float(reflectance), float(absorption), float(transmittance))
        return self

    def with_refractive_index(self, refractive_index: float) -> 'SurfaceBuilder':
        self.dielectric_properties = Constant(float(refractive_index))
        return self

    def _validated_dielectric(self):
        model = self.dielectric_properties
        if model is None:
            return Constant(1.0)
        if isinstance(model, Constant):
            if not model.n >= 1.0:
                raise InvalidDielectricError(f"refractive index must be >= 1, got {model.n}")
        elif isinstance(model, ThinLens):
            if ulps_eq(model.focal_length, 0.0) or not np.isfinite(model.focal_length):
                raise InvalidDielectricError(
                    f"thin lens focal length must be finite and non-zero, got {model.focal_length}"
                )
        else:
            raise InvalidDielectricError(f"unknown dielectric model {model!r}")
        return model

    def validate_and_build(self) -> SurfaceProperties:
        """
        Produce SurfaceProperties from the collected settings.

        Returns
        -------
        SurfaceProperties
            Validated interaction law

        Raises
        ------
        UnspecifiedBehaviourError
            Neither primary behaviour nor RAT was set
        AmbiguousBehaviourError
            Primary behaviour must be inferred but RAT has a tie
        RATRangeError
            A RAT coefficient lies outside [0, 1]
        RATSumError
            RAT was set and does not sum to 1
        InvalidDielectricError
            Refractive index below 1 or zero focal length
        """
        if self.rat is not None and not all(0.0 <= c <= 1.0 for c in self.rat):
            raise RATRangeError(self.rat)

        if self.primary_behaviour is not None:
            primary_behaviour = self.primary_behaviour
        elif self.rat is not None:
            primary_behaviour = infer_primary_behaviour(*self.rat)
        else:
            raise UnspecifiedBehaviourError()

        if self.rat is not None:
            if not ulps_eq(sum(self.rat), 1.0):
                raise RATSumError(self.rat)
            reflectance, absorption, transmittance = self.rat
        else:
            reflectance, absorption, transmittance = _DEFAULT_RAT[primary_behaviour]

        return SurfaceProperties(
            primary_behaviour,
            reflectance,
            absorption,
            transmittance,
            self._validated_dielectric()
        )

    build = validate_and_build
