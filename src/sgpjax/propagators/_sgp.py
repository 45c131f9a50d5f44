"""
SGP near-Earth propagator.

SGP is the oldest and simplest model of the report. It uses Kozai's
gravitational theory without drag coefficients: the semi-major axis decays
through the first and second mean motion derivatives given in the element
set, and the eccentricity follows from holding the perigee distance fixed.
Short-period corrections are first-order J2 terms and are applied to
position only, so SGP velocities differ slightly from SGP4's.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import ECCENTRICITY_FLOOR, TOTHRD, TWOPI
from sgpjax.propagators._gravity import DEFAULT_GRAVITY, EarthGravity
from sgpjax.propagators._kepler import solve_kepler
from sgpjax.propagators._periodics import finalize, mean_elements_decayed, orientation_vectors
from sgpjax.propagators._recovery import recover_mean_motion
from sgpjax.propagators._types import (
    OrbitalElements,
    PropagationResult,
    as_time,
    check_init_state,
)


class SGPState(NamedTuple):
    """Cached SGP constants for one satellite."""

    gravity: EarthGravity
    inclo: float
    nodeo: float
    argpo: float
    xno: float
    ndot: float
    nddot: float
    ao: float
    qo: float
    xlo: float
    d1o: float
    d2o: float
    d3o: float
    d4o: float
    omgdt: float
    xnodot: float
    c5: float
    c6: float


def sgp_init(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY) -> SGPState:
    """Initialize SGP for one satellite.

    SGP stops the mean motion recovery after the first correction: it works
    with ``ao`` and the encoded mean motion rather than ``aodp``/``xnodp``.

    Args:
        elements: Mean elements.
        gravity: Gravity constants.

    Returns:
        The cached SGP constants.
    """
    ck2 = gravity.ck2
    c1 = 1.5 * ck2
    c2 = 0.25 * ck2
    c3 = 0.5 * ck2
    c4 = gravity.j3 / (4.0 * ck2)

    rec = recover_mean_motion(elements, gravity)
    cosio = rec.cosio
    sinio = rec.sinio
    eo = elements.ecco
    ao = rec.ao
    po = ao * (1.0 - eo * eo)
    qo = ao * (1.0 - eo)
    d3o = c1 * cosio
    po2no = elements.no_kozai / (po * po)

    return SGPState(
        gravity=gravity,
        inclo=elements.inclo,
        nodeo=elements.nodeo,
        argpo=elements.argpo,
        xno=elements.no_kozai,
        ndot=elements.ndot,
        nddot=elements.nddot,
        ao=ao,
        qo=qo,
        xlo=elements.mo + elements.argpo + elements.nodeo,
        d1o=c3 * sinio * sinio,
        d2o=c2 * (7.0 * cosio * cosio - 1.0),
        d3o=d3o,
        d4o=d3o * sinio,
        omgdt=c1 * po2no * (5.0 * cosio * cosio - 1.0),
        xnodot=-2.0 * d3o * po2no,
        c5=0.5 * c4 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio),
        c6=c4 * sinio,
    )


@jax.jit
def sgp_kernel(state: SGPState, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Evaluate SGP at one time (JAX, JIT-compiled).

    Args:
        state: Output of :func:`sgp_init`.
        tsince: Time since epoch [min].

    Returns:
        Tuple ``(r, v, code)``.
    """
    s = state
    t = tsince
    xke = s.gravity.xke

    # Secular gravity and drag
    n = s.xno + (2.0 * s.ndot + 3.0 * s.nddot * t) * t
    a = s.ao * (s.xno / n) ** TOTHRD
    e = jnp.where(a > s.qo, 1.0 - s.qo / a, ECCENTRICITY_FLOOR)
    decayed = mean_elements_decayed(a, e)
    e = jnp.clip(e, ECCENTRICITY_FLOOR, 0.999999)
    p = a * (1.0 - e * e)
    xnodes = s.nodeo + s.xnodot * t
    omgas = s.argpo + s.omgdt * t
    xls = (s.xlo + (s.xno + s.omgdt + s.xnodot + (s.ndot + s.nddot * t) * t) * t) % TWOPI

    # Long period periodics
    axnsl = e * jnp.cos(omgas)
    aynsl = e * jnp.sin(omgas) - s.c6 / p
    xl = (xls - s.c5 / p * axnsl) % TWOPI

    u = (xl - xnodes) % TWOPI
    eo1 = solve_kepler(u, axnsl, aynsl)

    # Short period preliminary quantities
    sineo1 = jnp.sin(eo1)
    coseo1 = jnp.cos(eo1)
    ecose = axnsl * coseo1 + aynsl * sineo1
    esine = axnsl * sineo1 - aynsl * coseo1
    el2 = axnsl * axnsl + aynsl * aynsl
    pl = a * (1.0 - el2)
    pl2 = pl * pl
    r = a * (1.0 - ecose)
    rdot = xke * jnp.sqrt(a) / r * esine
    rvdot = xke * jnp.sqrt(pl) / r
    temp = esine / (1.0 + jnp.sqrt(1.0 - el2))
    sinu = a / r * (sineo1 - aynsl - axnsl * temp)
    cosu = a / r * (coseo1 - axnsl + aynsl * temp)
    su = jnp.arctan2(sinu, cosu)

    # Short periodics
    sin2u = (cosu + cosu) * sinu
    cos2u = 1.0 - 2.0 * sinu * sinu
    rk = r + s.d1o / pl * cos2u
    uk = su - s.d2o / pl2 * sin2u
    xnodek = xnodes + s.d3o * sin2u / pl2
    xinck = s.inclo + s.d4o / pl2 * cos2u

    u_vec, v_vec = orientation_vectors(uk, xnodek, xinck)
    re = s.gravity.radiusearthkm
    pos = rk * u_vec * re
    vel = (rdot * u_vec + rvdot * v_vec) * (re / 60.0)
    return finalize(pos, vel, decayed, pl, rk)


def sgp(
    elements: OrbitalElements,
    tsince: float,
    init_state: SGPState | None = None,
    gravity: EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Propagate a near-Earth satellite with SGP.

    Args:
        elements: Mean elements.
        tsince: Time since epoch [min].
        init_state: Cached output of :func:`sgp_init`.
        gravity: Gravity constants, used only when *init_state* is omitted.

    Returns:
        The propagation result.
    """
    if init_state is None:
        init_state = sgp_init(elements, gravity)
    check_init_state(init_state, SGPState, "SGP")
    r, v, code = sgp_kernel(init_state, as_time(tsince))
    return PropagationResult.from_kernel(r, v, code, tsince, "SGP")
