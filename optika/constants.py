"""
constants.py - Reference directions and numeric defaults

The global frame is right-handed with +y pointing UP and light travelling
FORWARD along -z by default:

    UP       = ( 0,  1,  0)        RIGHT    = ( 1,  0,  0)
    DOWN     = ( 0, -1,  0)        LEFT     = (-1,  0,  0)
    FORWARD  = ( 0,  0, -1)        BACKWARD = ( 0,  0,  1)

Near-equality throughout the package is `utilities.ulps_eq` with
EPSILON and MAX_ULPS below.
"""

import numpy as np


def _frozen(values) -> np.ndarray:
    vector = np.array(values, dtype=np.float64)
    vector.setflags(write=False)
    return vector


ORIGIN = _frozen([0.0, 0.0, 0.0])
UP = _frozen([0.0, 1.0, 0.0])
DOWN = _frozen([0.0, -1.0, 0.0])
LEFT = _frozen([-1.0, 0.0, 0.0])
RIGHT = _frozen([1.0, 0.0, 0.0])
FORWARD = _frozen([0.0, 0.0, -1.0])
BACKWARD = _frozen([0.0, 0.0, 1.0])

# Machine epsilon for float64
EPSILON = float(np.finfo(np.float64).eps)

# Units in the last place allowed by ulps_eq
MAX_ULPS = 4

# Aperture-stop bisection tolerance (radians)
DEFAULT_TOLERANCE = 1e-6
MIN_TOLERANCE = 1e-12

# Step guard for OpticalSystem.log_path
MAX_TRACE_STEPS = 1000

# Relative distance within which a ray origin counts as lying on a surface;
# scaled by the largest coordinate magnitude involved
SURFACE_EPSILON = 1e3 * EPSILON
