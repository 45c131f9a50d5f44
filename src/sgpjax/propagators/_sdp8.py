"""
SDP8 deep-space propagator.

SDP8 is SGP8 with the lunar-solar and resonance terms of
:mod:`~sgpjax.propagators._deep_space`. Drag always uses the linear SGP8
equations, applied to the mean motion after the deep-space secular step.
"""

from __future__ import annotations

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
from sgpjax.propagators._sgp8 import DragRates, drag_rates, drag_update
from sgpjax.propagators._types import (
    OrbitalElements,
    PropagationResult,
    as_time,
    check_init_state,
)


class SDP8State(NamedTuple):
    """Cached SDP8 constants for one satellite."""

    gravity: EarthGravity
    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    xnodp: float
    xlldot: float
    omgdt: float
    xnodot: float
    drag: DragRates
    deep: DeepSpaceCommon


def sdp8_init(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY) -> SDP8State:
    """Initialize SDP8 for one satellite.

    Args:
        elements: Mean elements.
        gravity: Gravity constants.

    Returns:
        The cached SDP8 constants.
    """
    rec = recover_mean_motion(elements, gravity)
    rates = secular_rates(rec, gravity)
    return SDP8State(
        gravity=gravity,
        ecco=elements.ecco,
        inclo=elements.inclo,
        nodeo=elements.nodeo,
        argpo=elements.argpo,
        mo=elements.mo,
        xnodp=rec.xnodp,
        xlldot=rates.xmdot,
        omgdt=rates.omgdot,
        xnodot=rates.xnodot,
        drag=drag_rates(elements, rec, gravity, force_simplified=True),
        deep=deep_space_init(elements, rec, rates, gravity),
    )


@jax.jit
def sdp8_kernel(state: SDP8State, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Evaluate SDP8 at one time (JAX, JIT-compiled).

    Args:
        state: Output of :func:`sdp8_init`.
        tsince: Time since epoch [min].

    Returns:
        Tuple ``(r, v, code)``.
    """
    s = state
    d = s.drag
    t = tsince

    xmam = s.mo + s.xlldot * t
    omgasm = s.argpo + s.omgdt * t
    xnodes = s.nodeo + s.xnodot * t
    em, argpm, inclm, mm, nodem, nm = apply_secular(s.deep, t, s.ecco, omgasm, s.inclo, xmam, xnodes, s.xnodp)

    # Linear drag on top of the deep-space mean motion
    xn, em, z1 = drag_update(d, nm, em, t)
    z7 = 3.5 * TOTHRD * z1 / s.xnodp
    mm = (mm + z1 + z7 * d.xmdt1) % TWOPI
    argpm = argpm + z7 * d.xgdt1
    nodem = nodem + z7 * d.xhdt1

    a = (s.gravity.xke / xn) ** TOTHRD
    decayed = mean_elements_decayed(a, em) | (xn <= 0.0)
    em = jnp.clip(em, ECCENTRICITY_FLOOR, 0.999999)

    ep, xincp, nodep, argpp, mp = apply_periodic(s.deep, t, em, inclm, nodem, argpm, mm)
    decayed = decayed | (ep < 0.0) | (ep >= 1.0)
    ep = jnp.clip(ep, ECCENTRICITY_FLOOR, 0.999999)

    sinip = jnp.sin(xincp)
    cosip = jnp.cos(xincp)
    xl = mp + argpp + nodep
    r, v, pl, rk = brouwer_state(s.gravity, a, ep, argpp, nodep, xl, xincp, sinip, cosip)
    return finalize(r, v, decayed, pl, rk)


def sdp8(
    elements: OrbitalElements,
    tsince: float,
    init_state: SDP8State | None = None,
    gravity: EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Propagate a deep-space satellite with SDP8.

    Args:
        elements: Mean elements.
        tsince: Time since epoch [min].
        init_state: Cached output of :func:`sdp8_init`.
        gravity: Gravity constants, used only when *init_state* is omitted.

    Returns:
        The propagation result.
    """
    if init_state is None:
        init_state = sdp8_init(elements, gravity)
    check_init_state(init_state, SDP8State, "SDP8")
    r, v, code = sdp8_kernel(init_state, as_time(tsince))
    return PropagationResult.from_kernel(r, v, code, tsince, "SDP8")
