"""
SDP4 deep-space propagator.

SDP4 is SGP4 with the lunar-solar and resonance terms of
:mod:`~sgpjax.propagators._deep_space` inserted between the secular update
and the periodic terms. Deep-space orbits always use the simplified drag
polynomial (linear ``tempa`` and ``tempe``, quadratic ``templ``).
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import ECCENTRICITY_FLOOR, TOTHRD, TWOPI
from sgpjax.propagators._deep_space import DeepSpaceCommon, apply_periodic, apply_secular, deep_space_init
from sgpjax.propagators._gravity import DEFAULT_GRAVITY, EarthGravity
from sgpjax.propagators._periodics import brouwer_state, finalize, mean_elements_decayed
from sgpjax.propagators._recovery import recover_mean_motion, secular_rates
from sgpjax.propagators._sgp4 import drag_coefficients
from sgpjax.propagators._types import (
    OrbitalElements,
    PropagationResult,
    as_time,
    check_init_state,
)

logger = logging.getLogger(__name__)


class SDP4State(NamedTuple):
    """Cached SDP4 constants for one satellite.

    Attributes:
        gravity: Gravity constants.
        ecco, inclo, nodeo, argpo, mo, bstar: Epoch elements.
        xnodp: Original mean motion [rad/min].
        xmdot, omgdot, xnodot: Secular gravity rates [rad/min].
        c1, c4: Drag coefficients.
        t2cof: Quadratic ``templ`` coefficient.
        xnodcf: Drag term of the node.
        deep: Lunar-solar and resonance terms.
    """

    gravity: EarthGravity
    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    bstar: float
    xnodp: float
    xmdot: float
    omgdot: float
    xnodot: float
    c1: float
    c4: float
    t2cof: float
    xnodcf: float
    deep: DeepSpaceCommon


def sdp4_init(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY) -> SDP4State:
    """Initialize SDP4 for one satellite.

    Args:
        elements: Mean elements.
        gravity: Gravity constants.

    Returns:
        The cached SDP4 constants.
    """
    rec = recover_mean_motion(elements, gravity)
    rates = secular_rates(rec, gravity)
    drag = drag_coefficients(elements, rec, gravity)
    deep = deep_space_init(elements, rec, rates, gravity)
    logger.debug("SDP4 init for satellite %s (resonance class %d)", elements.satnum, deep.irez)
    return SDP4State(
        gravity=gravity,
        ecco=elements.ecco,
        inclo=elements.inclo,
        nodeo=elements.nodeo,
        argpo=elements.argpo,
        mo=elements.mo,
        bstar=elements.bstar,
        xnodp=rec.xnodp,
        xmdot=rates.xmdot,
        omgdot=rates.omgdot,
        xnodot=rates.xnodot,
        c1=drag.c1,
        c4=drag.c4,
        t2cof=1.5 * drag.c1,
        xnodcf=3.5 * rec.betao2 * rates.xhdot1 * drag.c1,
        deep=deep,
    )


@jax.jit
def sdp4_kernel(state: SDP4State, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Evaluate SDP4 at one time (JAX, JIT-compiled).

    Args:
        state: Output of :func:`sdp4_init`.
        tsince: Time since epoch [min].

    Returns:
        Tuple ``(r, v, code)``.
    """
    s = state
    t = tsince

    # Secular gravity and atmospheric drag
    xmdf = s.mo + s.xmdot * t
    omgadf = s.argpo + s.omgdot * t
    xnoddf = s.nodeo + s.xnodot * t
    tsq = t * t
    xnode = xnoddf + s.xnodcf * tsq
    tempa = 1.0 - s.c1 * t
    tempe = s.bstar * s.c4 * t
    templ = s.t2cof * tsq

    em, argpm, inclm, mm, nodem, nm = apply_secular(s.deep, t, s.ecco, omgadf, s.inclo, xmdf, xnode, s.xnodp)

    a = (s.gravity.xke / nm) ** TOTHRD * tempa * tempa
    em = em - tempe
    decayed = mean_elements_decayed(a, em) | (nm <= 0.0)
    em = jnp.clip(em, ECCENTRICITY_FLOOR, 0.999999)

    mm = mm + s.xnodp * templ
    xlm = (mm + argpm + nodem) % TWOPI
    nodem = nodem % TWOPI
    argpm = argpm % TWOPI
    mm = (xlm - argpm - nodem) % TWOPI

    ep, xincp, nodep, argpp, mp = apply_periodic(s.deep, t, em, inclm, nodem, argpm, mm)
    decayed = decayed | (ep < 0.0) | (ep >= 1.0)
    ep = jnp.clip(ep, ECCENTRICITY_FLOOR, 0.999999)

    sinip = jnp.sin(xincp)
    cosip = jnp.cos(xincp)
    xl = mp + argpp + nodep
    r, v, pl, rk = brouwer_state(s.gravity, a, ep, argpp, nodep, xl, xincp, sinip, cosip)
    return finalize(r, v, decayed, pl, rk)


def sdp4(
    elements: OrbitalElements,
    tsince: float,
    init_state: SDP4State | None = None,
    gravity: EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Propagate a deep-space satellite with SDP4.

    Args:
        elements: Mean elements.
        tsince: Time since epoch [min].
        init_state: Cached output of :func:`sdp4_init`.
        gravity: Gravity constants, used only when *init_state* is omitted.

    Returns:
        The propagation result.
    """
    if init_state is None:
        init_state = sdp4_init(elements, gravity)
    check_init_state(init_state, SDP4State, "SDP4")
    r, v, code = sdp4_kernel(init_state, as_time(tsince))
    return PropagationResult.from_kernel(r, v, code, tsince, "SDP4")
