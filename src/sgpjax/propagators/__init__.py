"""
Spacetrack Report No. 3 orbit propagators implemented in JAX.

This module provides the five analytical models of the report: SGP, SGP4
and SGP8 for near-Earth orbits (periods under 225 minutes) and SDP4 and
SDP8 for deep-space orbits. Each model has a Python-time init function that
returns an immutable init state and a jitted kernel that evaluates that
state at a time since epoch, so kernels can be reused across times and
mapped with ``jax.vmap``.
"""

from sgpjax.propagators._deep_space import (
    DeepSpaceCommon,
    apply_periodic,
    apply_secular,
    deep_space_init,
    greenwich_sidereal_time,
    period_resonance_class,
    resonance_class,
)
from sgpjax.propagators._dispatch import (
    MODELS,
    InitState,
    ModelSpec,
    dispatch,
    dispatch_with_model,
    evaluate,
    initialize,
    model_for_period,
    model_of,
    resolve_model,
    select_model,
)
from sgpjax.propagators._gravity import (
    DEFAULT_GRAVITY,
    GRAVITY_MODELS,
    WGS72,
    WGS72OLD,
    WGS84,
    EarthGravity,
    resolve_gravity,
)
from sgpjax.propagators._kepler import kepler_iterate, solve_kepler
from sgpjax.propagators._recovery import (
    DensityParameters,
    MeanMotionRecovery,
    SecularRates,
    density_parameters,
    is_simplified,
    orbital_period,
    perigee_height,
    recover_mean_motion,
    secular_rates,
)
from sgpjax.propagators._satellite import Satellite
from sgpjax.propagators._sdp4 import SDP4State, sdp4, sdp4_init, sdp4_kernel
from sgpjax.propagators._sdp8 import SDP8State, sdp8, sdp8_init, sdp8_kernel
from sgpjax.propagators._sgp import SGPState, sgp, sgp_init, sgp_kernel
from sgpjax.propagators._sgp4 import SGP4State, sgp4, sgp4_init, sgp4_kernel
from sgpjax.propagators._sgp8 import SGP8State, sgp8, sgp8_init, sgp8_kernel
from sgpjax.propagators._tle import compute_checksum, parse_tle, validate_tle_line
from sgpjax.propagators._types import (
    MODEL_NAMES,
    OrbitalElements,
    PropagationError,
    PropagationResult,
    StateVector,
)

__all__ = [
    # Types
    "OrbitalElements",
    "StateVector",
    "PropagationError",
    "PropagationResult",
    "MODEL_NAMES",
    "EarthGravity",
    "MeanMotionRecovery",
    "SecularRates",
    "DensityParameters",
    "DeepSpaceCommon",
    "Satellite",
    # Gravity constants
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "DEFAULT_GRAVITY",
    "GRAVITY_MODELS",
    "resolve_gravity",
    # TLE decoding
    "parse_tle",
    "compute_checksum",
    "validate_tle_line",
    # Shared algebra
    "solve_kepler",
    "kepler_iterate",
    "recover_mean_motion",
    "secular_rates",
    "perigee_height",
    "density_parameters",
    "is_simplified",
    "orbital_period",
    "deep_space_init",
    "apply_secular",
    "apply_periodic",
    "greenwich_sidereal_time",
    "resonance_class",
    "period_resonance_class",
    # Models
    "SGPState",
    "sgp_init",
    "sgp_kernel",
    "sgp",
    "SGP4State",
    "sgp4_init",
    "sgp4_kernel",
    "sgp4",
    "SGP8State",
    "sgp8_init",
    "sgp8_kernel",
    "sgp8",
    "SDP4State",
    "sdp4_init",
    "sdp4_kernel",
    "sdp4",
    "SDP8State",
    "sdp8_init",
    "sdp8_kernel",
    "sdp8",
    # Dispatcher
    "MODELS",
    "ModelSpec",
    "InitState",
    "resolve_model",
    "model_for_period",
    "select_model",
    "model_of",
    "initialize",
    "evaluate",
    "dispatch",
    "dispatch_with_model",
]
