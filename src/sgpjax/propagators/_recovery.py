"""
Near-Earth base recovery shared by all five models.

The mean motion in an element set is a Kozai mean motion: it still carries
the secular J2 perturbation. Every model starts by recovering the
"original" (Brouwer) mean motion ``xnodp`` and semi-major axis ``aodp``
from it, and most of them then need the same J2/J4 secular rates and the
same atmospheric density parameters. Those computations live here as
plain Python functions run once at init time.
"""

from __future__ import annotations

import logging
from math import cos as _py_cos
from math import sin as _py_sin
from math import sqrt as _py_sqrt
from typing import NamedTuple

from sgpjax.constants import LOW_PERIGEE, SIMPLIFIED_PERIGEE, TOTHRD, TWOPI, VERY_LOW_PERIGEE
from sgpjax.propagators._gravity import EarthGravity
from sgpjax.propagators._types import OrbitalElements

logger = logging.getLogger(__name__)


class MeanMotionRecovery(NamedTuple):
    """Recovered mean motion and the inclination/eccentricity functions.

    Attributes:
        a1: First-guess semi-major axis from the Kozai mean motion [Earth radii].
        del1: First J2 correction.
        ao: Semi-major axis after the first correction [Earth radii].
        delo: Second J2 correction.
        xnodp: Original mean motion n0'' [rad/min].
        aodp: Original semi-major axis a0'' [Earth radii].
        cosio: Cosine of inclination.
        sinio: Sine of inclination.
        theta2: ``cosio**2``.
        x3thm1: ``3 theta2 - 1``.
        x1mth2: ``1 - theta2``.
        x7thm1: ``7 theta2 - 1``.
        eosq: Eccentricity squared.
        betao2: ``1 - eosq``.
        betao: ``sqrt(betao2)``.
    """

    a1: float
    del1: float
    ao: float
    delo: float
    xnodp: float
    aodp: float
    cosio: float
    sinio: float
    theta2: float
    x3thm1: float
    x1mth2: float
    x7thm1: float
    eosq: float
    betao2: float
    betao: float


class SecularRates(NamedTuple):
    """Secular gravitational rates of the mean elements.

    Attributes:
        xmdot: Mean anomaly rate including the mean motion [rad/min].
        omgdot: Argument of perigee rate [rad/min].
        xnodot: Node rate [rad/min].
        xhdot1: First-order (J2) node rate [rad/min].
    """

    xmdot: float
    omgdot: float
    xnodot: float
    xhdot1: float


class DensityParameters(NamedTuple):
    """Power-law density parameters, adjusted for low perigees.

    Attributes:
        perigee: Perigee height above the reference radius [km].
        s4: Density function parameter s [Earth radii].
        qoms24: ``(q0 - s)^4`` [Earth radii^4].
    """

    perigee: float
    s4: float
    qoms24: float


def recover_mean_motion(elements: OrbitalElements, gravity: EarthGravity) -> MeanMotionRecovery:
    """Recover the original mean motion and semi-major axis.

    Two successive J2 corrections turn the Kozai mean motion into the
    Brouwer mean motion ``n0''`` and semi-major axis ``a0''``.

    Args:
        elements: Mean elements.
        gravity: Gravity constants.

    Returns:
        The recovered quantities and the inclination functions derived
        along the way.
    """
    ck2 = gravity.ck2
    eo = elements.ecco
    xno = elements.no_kozai

    a1 = (gravity.xke / xno) ** TOTHRD
    cosio = _py_cos(elements.inclo)
    theta2 = cosio * cosio
    x3thm1 = 3.0 * theta2 - 1.0
    eosq = eo * eo
    betao2 = 1.0 - eosq
    betao = _py_sqrt(betao2)
    del1 = 1.5 * ck2 * x3thm1 / (a1 * a1 * betao * betao2)
    ao = a1 * (1.0 - del1 * (0.5 * TOTHRD + del1 * (1.0 + 134.0 / 81.0 * del1)))
    delo = 1.5 * ck2 * x3thm1 / (ao * ao * betao * betao2)
    xnodp = xno / (1.0 + delo)
    aodp = ao / (1.0 - delo)

    return MeanMotionRecovery(
        a1=a1,
        del1=del1,
        ao=ao,
        delo=delo,
        xnodp=xnodp,
        aodp=aodp,
        cosio=cosio,
        sinio=_py_sin(elements.inclo),
        theta2=theta2,
        x3thm1=x3thm1,
        x1mth2=1.0 - theta2,
        x7thm1=7.0 * theta2 - 1.0,
        eosq=eosq,
        betao2=betao2,
        betao=betao,
    )


def secular_rates(recovery: MeanMotionRecovery, gravity: EarthGravity) -> SecularRates:
    """Compute the J2/J4 secular rates of mean anomaly, perigee and node.

    Args:
        recovery: Output of :func:`recover_mean_motion`.
        gravity: Gravity constants.

    Returns:
        The secular rates.
    """
    r = recovery
    theta4 = r.theta2 * r.theta2
    pinvsq = 1.0 / (r.aodp * r.aodp * r.betao2 * r.betao2)
    temp1 = 3.0 * gravity.ck2 * pinvsq * r.xnodp
    temp2 = temp1 * gravity.ck2 * pinvsq
    temp3 = 1.25 * gravity.ck4 * pinvsq * pinvsq * r.xnodp

    xmdot = (
        r.xnodp
        + 0.5 * temp1 * r.betao * r.x3thm1
        + 0.0625 * temp2 * r.betao * (13.0 - 78.0 * r.theta2 + 137.0 * theta4)
    )
    x1m5th = 1.0 - 5.0 * r.theta2
    omgdot = (
        -0.5 * temp1 * x1m5th
        + 0.0625 * temp2 * (7.0 - 114.0 * r.theta2 + 395.0 * theta4)
        + temp3 * (3.0 - 36.0 * r.theta2 + 49.0 * theta4)
    )
    xhdot1 = -temp1 * r.cosio
    xnodot = (
        xhdot1
        + (0.5 * temp2 * (4.0 - 19.0 * r.theta2) + 2.0 * temp3 * (3.0 - 7.0 * r.theta2)) * r.cosio
    )
    return SecularRates(xmdot=xmdot, omgdot=omgdot, xnodot=xnodot, xhdot1=xhdot1)


def perigee_height(aodp: float, ecco: float, gravity: EarthGravity) -> float:
    """Perigee height above the reference radius [km]."""
    return (aodp * (1.0 - ecco) - 1.0) * gravity.radiusearthkm


def density_parameters(aodp: float, ecco: float, gravity: EarthGravity) -> DensityParameters:
    """Return the density parameters ``s`` and ``(q0 - s)^4``.

    For perigees below 156 km, ``s`` is lowered to 78 km under the perigee;
    below 98 km it is fixed at 20 km above the surface.

    Args:
        aodp: Original semi-major axis [Earth radii].
        ecco: Eccentricity.
        gravity: Gravity constants.

    Returns:
        The (possibly adjusted) density parameters.
    """
    perige = perigee_height(aodp, ecco, gravity)
    s4 = gravity.s
    qoms24 = gravity.qoms2t
    if perige < LOW_PERIGEE:
        s4 = perige - 78.0
        if perige <= VERY_LOW_PERIGEE:
            s4 = 20.0
        qoms24 = ((120.0 - s4) / gravity.radiusearthkm) ** 4
        logger.debug("Perigee %.1f km below %.0f km, density parameter s set to %.1f km", perige, LOW_PERIGEE, s4)
        s4 = s4 / gravity.radiusearthkm + 1.0
    return DensityParameters(perigee=perige, s4=s4, qoms24=qoms24)


def is_simplified(aodp: float, ecco: float, gravity: EarthGravity) -> bool:
    """Whether the perigee is low enough (< 220 km) to truncate the drag terms."""
    return aodp * (1.0 - ecco) < SIMPLIFIED_PERIGEE / gravity.radiusearthkm + 1.0


def orbital_period(xnodp: float) -> float:
    """Orbital period for an original mean motion [min].

    Args:
        xnodp: Original mean motion [rad/min].

    Returns:
        The period ``2 pi / xnodp`` [min].
    """
    return TWOPI / xnodp
