"""
Data types shared by the propagation models.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from sgpjax.config import get_dtype
from sgpjax.constants import JD_1950_JAN_0

MODEL_NAMES: tuple[str, ...] = ("SGP", "SGP4", "SGP8", "SDP4", "SDP8")
"""Names of the five propagation models, in report order."""


@dataclass(frozen=True)
class OrbitalElements:
    """Mean orbital elements of one satellite at its epoch.

    This is a plain Python dataclass (not a JAX pytree). Every model reads
    it at init time; none of them modifies it. Angles are in radians and
    rates in radians per minute, the units the report works in.

    Attributes:
        satnum: Satellite catalog number.
        jdsatepoch: Epoch as a fractional Julian date (UT).
        ecco: Eccentricity [dimensionless].
        inclo: Inclination [rad].
        nodeo: Right ascension of ascending node [rad].
        argpo: Argument of perigee [rad].
        mo: Mean anomaly [rad].
        no_kozai: Mean motion as encoded, i.e. still carrying the Kozai
            J2 perturbation [rad/min].
        ndot: First derivative of mean motion divided by 2 [rad/min^2].
        nddot: Second derivative of mean motion divided by 6 [rad/min^3].
        bstar: B* drag term [1/earth_radii].
        classification: Classification character (``'U'``, ``'C'``, or ``'S'``).
        intldesg: International designator (e.g. ``'98067A'``).
        epochyr: Two-digit epoch year (0-99).
        epochdays: Day of year with fractional day.
        elnum: Element set number.
        revnum: Revolution number at epoch.
    """

    satnum: int
    jdsatepoch: float
    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    no_kozai: float
    ndot: float = 0.0
    nddot: float = 0.0
    bstar: float = 0.0
    classification: str = "U"
    intldesg: str = ""
    epochyr: int = 0
    epochdays: float = 0.0
    elnum: int = 0
    revnum: int = 0

    @property
    def epoch_days_1950(self) -> float:
        """Epoch in days since 1950 January 0.0 UT."""
        return self.jdsatepoch - JD_1950_JAN_0


class StateVector(NamedTuple):
    """Position and velocity in the true-equator mean-equinox inertial frame.

    Attributes:
        position: Position ``[x, y, z]`` [km].
        velocity: Velocity ``[vx, vy, vz]`` [km/s].
    """

    position: Array
    velocity: Array


class PropagationError(enum.IntEnum):
    """Reasons a propagation can fail.

    The integer values are the codes returned by the model kernels; zero
    means success and has no member.
    """

    DECAYED = 1
    NEGATIVE_SEMI_LATUS_RECTUM = 2

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    PropagationError.DECAYED: "Satellite has decayed",
    PropagationError.NEGATIVE_SEMI_LATUS_RECTUM: "Semi-latus rectum is negative",
}


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of one evaluation of a model.

    Either ``error`` is ``None`` and ``state`` holds the satellite's
    position and velocity, or ``error`` names the failure and ``state`` is
    all zeros. Failures are expected outcomes of long propagations, so they
    are reported here instead of being raised.

    Attributes:
        state: Position [km] and velocity [km/s].
        tsince: Time since epoch [min].
        model: Name of the model that produced the result.
        error: Failure reason, or ``None`` on success.
    """

    state: StateVector
    tsince: float
    model: str
    error: PropagationError | None = None

    @property
    def ok(self) -> bool:
        """``True`` when the evaluation succeeded."""
        return self.error is None

    @property
    def message(self) -> str | None:
        """Human-readable failure reason, or ``None`` on success."""
        return None if self.error is None else self.error.message

    @property
    def position(self) -> Array:
        return self.state.position

    @property
    def velocity(self) -> Array:
        return self.state.velocity

    @classmethod
    def from_kernel(cls, r: Array, v: Array, code, tsince, model: str) -> PropagationResult:
        """Build a result from the ``(r, v, code)`` triple of a model kernel."""
        code = int(code)
        return cls(
            state=StateVector(position=r, velocity=v),
            tsince=float(tsince),
            model=model,
            error=PropagationError(code) if code else None,
        )


def as_time(tsince) -> Array:
    """Convert a time since epoch [min] to an array of the configured dtype."""
    return jnp.asarray(tsince, dtype=get_dtype())


def check_init_state(init_state, expected: type, model: str) -> None:
    """Raise ``TypeError`` if *init_state* was not produced by *model*'s init."""
    if not isinstance(init_state, expected):
        raise TypeError(
            f"{model} expects an init state of type {expected.__name__}, "
            f"got {type(init_state).__name__}"
        )
