"""
Evaluation steps shared by SGP4, SGP8, SDP4 and SDP8.

Once a model has advanced its mean elements to the requested time, the
remaining work is identical for all four: long-period corrections to the
eccentricity vector, Kepler's equation, short-period corrections to radius,
argument of latitude, node and inclination, and the rotation into the
inertial frame. SGP has its own short-period terms but shares the
orientation and error handling defined here.

Everything in this module is JAX and runs inside the jitted model kernels.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import MIN_ECCENTRICITY, MIN_SEMIMAJOR_AXIS, TWOPI
from sgpjax.propagators._gravity import EarthGravity
from sgpjax.propagators._kepler import solve_kepler
from sgpjax.propagators._types import PropagationError

_DECAYED = int(PropagationError.DECAYED)
_NEGATIVE_PL = int(PropagationError.NEGATIVE_SEMI_LATUS_RECTUM)


def long_period_coefficients(
    gravity: EarthGravity, sinio: ArrayLike, cosio: ArrayLike
) -> tuple[Array, Array]:
    """J3 long-period coefficients ``(xlcof, aycof)``.

    ``xlcof`` is singular at 180 degrees inclination; the denominator is
    floored at 1.5e-12 there.
    """
    a3ovk2 = gravity.a3ovk2
    denom = jnp.where(jnp.abs(1.0 + cosio) > 1.5e-12, 1.0 + cosio, 1.5e-12)
    xlcof = 0.125 * a3ovk2 * sinio * (3.0 + 5.0 * cosio) / denom
    aycof = 0.25 * a3ovk2 * sinio
    return xlcof, aycof


def mean_elements_decayed(a: ArrayLike, e: ArrayLike) -> Array:
    """Decay test on the secularly advanced mean elements."""
    return (e >= 1.0) | (e < MIN_ECCENTRICITY) | (a < MIN_SEMIMAJOR_AXIS)


def orientation_vectors(uk: ArrayLike, xnodek: ArrayLike, xinck: ArrayLike) -> tuple[Array, Array]:
    """Unit vectors toward the satellite (U) and along-track (V).

    Args:
        uk: Argument of latitude [rad].
        xnodek: Right ascension of the ascending node [rad].
        xinck: Inclination [rad].

    Returns:
        Tuple ``(U, V)`` of 3-element arrays in the inertial frame.
    """
    sinuk = jnp.sin(uk)
    cosuk = jnp.cos(uk)
    sinik = jnp.sin(xinck)
    cosik = jnp.cos(xinck)
    sinnok = jnp.sin(xnodek)
    cosnok = jnp.cos(xnodek)
    xmx = -sinnok * cosik
    xmy = cosnok * cosik
    ux = xmx * sinuk + cosnok * cosuk
    uy = xmy * sinuk + sinnok * cosuk
    uz = sinik * sinuk
    vx = xmx * cosuk - cosnok * sinuk
    vy = xmy * cosuk - sinnok * sinuk
    vz = sinik * cosuk
    return jnp.stack([ux, uy, uz]), jnp.stack([vx, vy, vz])


def finalize(
    r: Array,
    v: Array,
    decayed: ArrayLike,
    pl: ArrayLike,
    rk: ArrayLike,
) -> tuple[Array, Array, Array]:
    """Assign the error code and zero the state of failed evaluations.

    Codes follow :class:`PropagationError`: 1 for a decayed orbit (mean
    elements out of range, radius under one Earth radius, or a non-finite
    state), 2 for a negative semi-latus rectum, 0 for success.

    Args:
        r: Position [km].
        v: Velocity [km/s].
        decayed: Result of :func:`mean_elements_decayed`.
        pl: Semi-latus rectum [Earth radii].
        rk: Osculating radius [Earth radii].

    Returns:
        Tuple ``(r, v, code)``.
    """
    code = jnp.where(
        decayed,
        _DECAYED,
        jnp.where(pl < 0.0, _NEGATIVE_PL, jnp.where(rk < 1.0, _DECAYED, 0)),
    )
    finite = jnp.all(jnp.isfinite(r)) & jnp.all(jnp.isfinite(v))
    code = jnp.where((code == 0) & ~finite, _DECAYED, code).astype(jnp.int32)
    ok = code == 0
    r = jnp.where(ok, r, jnp.zeros_like(r))
    v = jnp.where(ok, v, jnp.zeros_like(v))
    return r, v, code


def brouwer_state(
    gravity: EarthGravity,
    a: ArrayLike,
    e: ArrayLike,
    omega: ArrayLike,
    xnode: ArrayLike,
    xl: ArrayLike,
    xinc: ArrayLike,
    sinio: ArrayLike,
    cosio: ArrayLike,
) -> tuple[Array, Array, Array, Array]:
    """Position and velocity from propagated mean elements.

    Applies the J3 long-period terms, solves Kepler's equation, applies the
    J2 short-period terms and rotates into the inertial frame.

    Args:
        gravity: Gravity constants.
        a: Mean semi-major axis [Earth radii].
        e: Mean eccentricity, already floored.
        omega: Argument of perigee [rad].
        xnode: Right ascension of the ascending node [rad].
        xl: Mean longitude ``M + omega + node`` [rad].
        xinc: Inclination [rad].
        sinio: Sine of the inclination used by the periodic terms.
        cosio: Cosine of the inclination used by the periodic terms.

    Returns:
        Tuple ``(r, v, pl, rk)``: position [km], velocity [km/s],
        semi-latus rectum and osculating radius [Earth radii].
    """
    xke = gravity.xke
    ck2 = gravity.ck2
    theta2 = cosio * cosio
    x3thm1 = 3.0 * theta2 - 1.0
    x1mth2 = 1.0 - theta2
    x7thm1 = 7.0 * theta2 - 1.0
    xlcof, aycof = long_period_coefficients(gravity, sinio, cosio)

    beta2 = 1.0 - e * e
    xn = xke / a**1.5

    # Long period periodics
    axn = e * jnp.cos(omega)
    temp = 1.0 / (a * beta2)
    xll = temp * xlcof * axn
    aynl = temp * aycof
    xlt = xl + xll
    ayn = e * jnp.sin(omega) + aynl

    capu = (xlt - xnode) % TWOPI
    epw = solve_kepler(capu, axn, ayn)

    # Short period preliminary quantities
    sinepw = jnp.sin(epw)
    cosepw = jnp.cos(epw)
    ecose = axn * cosepw + ayn * sinepw
    esine = axn * sinepw - ayn * cosepw
    elsq = axn * axn + ayn * ayn
    pl = a * (1.0 - elsq)
    r = a * (1.0 - ecose)
    rdot = xke * jnp.sqrt(a) * esine / r
    rfdot = xke * jnp.sqrt(pl) / r
    betal = jnp.sqrt(1.0 - elsq)
    temp3 = esine / (1.0 + betal)
    cosu = a / r * (cosepw - axn + ayn * temp3)
    sinu = a / r * (sinepw - ayn - axn * temp3)
    u = jnp.arctan2(sinu, cosu)
    sin2u = 2.0 * sinu * cosu
    cos2u = 1.0 - 2.0 * sinu * sinu
    temp1 = ck2 / pl
    temp2 = temp1 / pl

    # Short period periodics
    rk = r * (1.0 - 1.5 * temp2 * betal * x3thm1) + 0.5 * temp1 * x1mth2 * cos2u
    uk = u - 0.25 * temp2 * x7thm1 * sin2u
    xnodek = xnode + 1.5 * temp2 * cosio * sin2u
    xinck = xinc + 1.5 * temp2 * cosio * sinio * cos2u
    rdotk = rdot - xn * temp1 * x1mth2 * sin2u
    rfdotk = rfdot + xn * temp1 * (x1mth2 * cos2u + 1.5 * x3thm1)

    u_vec, v_vec = orientation_vectors(uk, xnodek, xinck)
    pos = rk * u_vec * gravity.radiusearthkm
    vel = (rdotk * u_vec + rfdotk * v_vec) * (gravity.radiusearthkm / 60.0)
    return pos, vel, pl, rk
