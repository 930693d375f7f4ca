"""
exceptions.py - Exceptions raised while building or tracing an optical system

Misses and absorption during a trace are not errors; they are reported as
None by the tracer. The classes here cover construction-time validation and
the few conditions a trace cannot recover from.
"""


class OptikaError(Exception):
    """ Base class for all optika exceptions """


class InvalidGeometryError(OptikaError, ValueError):
    """ Raised when a shape or ray is given degenerate geometry """


class SurfaceBuilderError(OptikaError, ValueError):
    """ Raised when SurfaceBuilder cannot produce valid SurfaceProperties """


class RATSumError(SurfaceBuilderError):
    """ Raised when reflectance, absorption and transmittance do not sum to 1 """
    def __init__(self, rat):
        self.rat = rat
        super().__init__(
            f"reflectance + absorption + transmittance must equal 1, "
            f"got {rat[0]} + {rat[1]} + {rat[2]} = {sum(rat)}"
        )


class RATRangeError(SurfaceBuilderError):
    """ Raised when a reflectance, absorption or transmittance lies outside [0, 1] """
    def __init__(self, rat):
        self.rat = rat
        super().__init__(
            f"reflectance, absorption and transmittance must each lie in [0, 1], got {rat}"
        )


class UnspecifiedBehaviourError(SurfaceBuilderError):
    """ Raised when neither a primary behaviour nor RAT values were given """
    def __init__(self):
        super().__init__(
            "primary behaviour cannot be inferred: set a primary behaviour "
            "or reflectance/absorption/transmittance"
        )


class AmbiguousBehaviourError(SurfaceBuilderError):
    """ Raised when two or more RAT coefficients tie for largest """
    def __init__(self, rat):
        self.rat = rat
        super().__init__(
            "unable to infer primary ray behaviour, two or more of "
            f"reflectance, absorption and transmittance are equal: {rat}"
        )


class InvalidDielectricError(SurfaceBuilderError):
    """ Raised for a refractive index below 1 or a zero focal length """


class ToleranceError(OptikaError, ValueError):
    """ Raised when a solver tolerance is not usable """


class TraceLimitError(OptikaError, RuntimeError):
    """ Raised when a traced path exceeds the allowed number of steps """
    def __init__(self, max_steps, indices):
        self.max_steps = max_steps
        self.indices = indices
        super().__init__(
            f"ray path did not terminate within {max_steps} steps; "
            f"last elements visited: {indices[-5:]}"
        )
