"""
sgpjax implements the Spacetrack Report No. 3 satellite orbit propagators in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    TWOPI,
    MINUTES_PER_DAY,
    JD_1950_JAN_0,
    REVDAY2RADMIN,
    DEEP_SPACE_PERIOD,
)

from .config import set_dtype, get_dtype

from .propagators import (
    OrbitalElements,
    PropagationError,
    PropagationResult,
    StateVector,
    Satellite,
    EarthGravity,
    WGS72OLD,
    WGS72,
    WGS84,
    parse_tle,
    initialize,
    evaluate,
    dispatch,
    dispatch_with_model,
    sgp,
    sgp4,
    sgp8,
    sdp4,
    sdp8,
)
