"""
SGP8 near-Earth propagator.

SGP8 uses the same gravity and density models as SGP4 but treats drag
differently. Instead of expanding the decay of the semi-major axis as a
polynomial in time, it differentiates the mean motion and eccentricity
under drag at epoch (first, second and third derivatives) and fits them
with a closed form

    n(t) = n0 + xnd * (1 - (1 - gamma t)^pp)
    e(t) = e0 + ed  * (1 - (1 - gamma t)^qq)

whose integral gives the drag contribution to the mean anomaly. When the
drag is small (the mean motion changes by less than 0.216 % per day) the
equations are truncated to a linear variation of ``n`` and ``e``. SDP8
always uses the truncated form and imports :func:`drag_rates` from here.
"""

from __future__ import annotations

import logging
from math import cos as _py_cos
from math import fabs as _py_fabs
from math import sin as _py_sin
from math import sqrt as _py_sqrt
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import ECCENTRICITY_FLOOR, MINUTES_PER_DAY, SGP8_SIMPLIFIED_DRAG, TOTHRD, TWOPI
from sgpjax.propagators._gravity import DEFAULT_GRAVITY, EarthGravity
from sgpjax.propagators._periodics import brouwer_state, finalize, mean_elements_decayed
from sgpjax.propagators._recovery import MeanMotionRecovery, recover_mean_motion, secular_rates
from sgpjax.propagators._types import (
    OrbitalElements,
    PropagationResult,
    as_time,
    check_init_state,
)

logger = logging.getLogger(__name__)


class DragRates(NamedTuple):
    """SGP8 drag rates of mean motion and eccentricity at epoch.

    Attributes:
        xmdt1, xgdt1, xhdt1: First-order J2 rates of mean anomaly, perigee
            and node, used to couple drag into the angles [rad/min].
        xndt: Drag rate of mean motion [rad/min^2].
        edot: Drag rate of eccentricity [1/min].
        isimp: Whether the truncated (linear) form applies.
        gamma, pp, qq, xnd, ed, ovgpp: Closed-form fit parameters, zero in
            the truncated form.
    """

    xmdt1: float
    xgdt1: float
    xhdt1: float
    xndt: float
    edot: float
    isimp: bool
    gamma: float
    pp: float
    qq: float
    xnd: float
    ed: float
    ovgpp: float


def drag_rates(
    elements: OrbitalElements,
    recovery: MeanMotionRecovery,
    gravity: EarthGravity,
    force_simplified: bool = False,
) -> DragRates:
    """Compute the SGP8 drag rates and closed-form fit.

    Args:
        elements: Mean elements.
        recovery: Output of :func:`~sgpjax.propagators.recover_mean_motion`.
        gravity: Gravity constants.
        force_simplified: Use the truncated form regardless of the drag
            magnitude (SDP8).

    Returns:
        The drag rates.
    """
    rec = recovery
    ck2 = gravity.ck2
    eo = elements.ecco
    xnodp = rec.xnodp
    aodp = rec.aodp
    s = gravity.s
    eosq = rec.eosq
    betao = rec.betao
    betao2 = rec.betao2
    tthmun = rec.x3thm1
    unmth2 = rec.x1mth2
    unm5th = 1.0 - 5.0 * rec.theta2
    cosi = rec.cosio
    sini = rec.sinio
    sing = _py_sin(elements.argpo)
    cosg = _py_cos(elements.argpo)

    po = aodp * betao2
    pom2 = 1.0 / (po * po)
    pardt1 = 3.0 * ck2 * pom2 * xnodp
    xmdt1 = 0.5 * pardt1 * betao * tthmun
    xgdt1 = -0.5 * pardt1 * unm5th
    xhdt1 = -pardt1 * cosi

    tsi = 1.0 / (po - s)
    eta = eo * s * tsi
    eta2 = eta * eta
    psim2 = _py_fabs(1.0 / (1.0 - eta2))
    alpha2 = 1.0 + eosq
    eeta = eo * eta
    cos2g = 2.0 * cosg * cosg - 1.0
    d5 = tsi * psim2
    d1 = d5 / po
    d2 = 12.0 + eta2 * (36.0 + 4.5 * eta2)
    d3 = eta2 * (15.0 + 2.5 * eta2)
    d4 = eta * (5.0 + 3.75 * eta2)
    b1 = ck2 * tthmun
    b2 = -ck2 * unmth2
    b3 = gravity.a3ovk2 * sini
    # Ballistic coefficient times reference density over two is B*
    c0 = elements.bstar * gravity.qoms2t * xnodp * aodp * tsi**4 * psim2**3.5 / _py_sqrt(alpha2)
    c1 = 1.5 * xnodp * alpha2 * alpha2 * c0
    c4 = d1 * d3 * b2
    c5 = d5 * d4 * b3
    xndt = c1 * (
        (2.0 + eta2 * (3.0 + 34.0 * eosq) + 5.0 * eeta * (4.0 + eta2) + 8.5 * eosq)
        + d1 * d2 * b1
        + c4 * cos2g
        + c5 * sing
    )
    xndtn = xndt / xnodp

    isimp = force_simplified or abs(xndtn * MINUTES_PER_DAY) < SGP8_SIMPLIFIED_DRAG
    if isimp:
        edot = -TOTHRD * xndtn * (1.0 - eo)
        return DragRates(
            xmdt1=xmdt1,
            xgdt1=xgdt1,
            xhdt1=xhdt1,
            xndt=xndt,
            edot=edot,
            isimp=True,
            gamma=0.0,
            pp=0.0,
            qq=0.0,
            xnd=0.0,
            ed=0.0,
            ovgpp=0.0,
        )

    d6 = eta * (30.0 + 22.5 * eta2)
    d7 = eta * (5.0 + 12.5 * eta2)
    d8 = 1.0 + eta2 * (6.75 + eta2)
    c8 = d1 * d7 * b2
    c9 = d5 * d8 * b3
    edot = -c0 * (
        eta * (4.0 + eta2 + eosq * (15.5 + 7.0 * eta2))
        + eo * (5.0 + 15.0 * eta2)
        + d1 * d6 * b1
        + c8 * cos2g
        + c9 * sing
    )
    d20 = 0.5 * TOTHRD * xndtn
    aldtal = eo * edot / alpha2
    tsdtts = 2.0 * aodp * tsi * (d20 * betao2 + eo * edot)
    etdt = (edot + eo * tsdtts) * tsi * s
    psdtps = -eta * etdt * psim2
    sin2g = 2.0 * sing * cosg
    c0dtc0 = d20 + 4.0 * tsdtts - aldtal - 7.0 * psdtps
    c1dtc1 = xndtn + 4.0 * aldtal + c0dtc0
    d9 = eta * (6.0 + 68.0 * eosq) + eo * (20.0 + 15.0 * eta2)
    d10 = 5.0 * eta * (4.0 + eta2) + eo * (17.0 + 68.0 * eta2)
    d11 = eta * (72.0 + 18.0 * eta2)
    d12 = eta * (30.0 + 10.0 * eta2)
    d13 = 5.0 + 11.25 * eta2
    d14 = tsdtts - 2.0 * psdtps
    d15 = 2.0 * (d20 + eo * edot / betao2)
    d1dt = d1 * (d14 + d15)
    d2dt = etdt * d11
    d3dt = etdt * d12
    d4dt = etdt * d13
    d5dt = d5 * d14
    c4dt = b2 * (d1dt * d3 + d1 * d3dt)
    c5dt = b3 * (d5dt * d4 + d5 * d4dt)
    d16 = (
        d9 * etdt
        + d10 * edot
        + b1 * (d1dt * d2 + d1 * d2dt)
        + c4dt * cos2g
        + c5dt * sing
        + xgdt1 * (c5 * cosg - 2.0 * c4 * sin2g)
    )
    xnddt = c1dtc1 * xndt + c1 * d16
    eddot = c0dtc0 * edot - c0 * (
        (4.0 + 3.0 * eta2 + 30.0 * eeta + eosq * (15.5 + 21.0 * eta2)) * etdt
        + (5.0 + 15.0 * eta2 + eeta * (31.0 + 14.0 * eta2)) * edot
        + b1 * (d1dt * d6 + d1 * etdt * (30.0 + 67.5 * eta2))
        + b2 * (d1dt * d7 + d1 * etdt * (5.0 + 37.5 * eta2)) * cos2g
        + b3 * (d5dt * d8 + d5 * etdt * eta * (13.5 + 4.0 * eta2)) * sing
        + xgdt1 * (c9 * cosg - 2.0 * c8 * sin2g)
    )
    d25 = edot * edot
    d17 = xnddt / xnodp - xndtn * xndtn
    tsddts = 2.0 * tsdtts * (tsdtts - d20) + aodp * tsi * (
        TOTHRD * betao2 * d17 - 4.0 * d20 * eo * edot + 2.0 * (d25 + eo * eddot)
    )
    etddt = (eddot + 2.0 * edot * tsdtts) * tsi * s + tsddts * eta
    d18 = tsddts - tsdtts * tsdtts
    # psdtps^2 / eta^2 written out so circular orbits stay finite
    d19 = -(etdt * psim2) ** 2 - eta * etddt * psim2 - psdtps * psdtps
    d23 = etdt * etdt
    d1ddt = d1dt * (d14 + d15) + d1 * (
        d18 - 2.0 * d19 + TOTHRD * d17 + 2.0 * (alpha2 * d25 / betao2 + eo * eddot) / betao2
    )
    xntrdt = (
        xndt
        * (
            2.0 * TOTHRD * d17
            + 3.0 * (d25 + eo * eddot) / alpha2
            - 6.0 * aldtal * aldtal
            + 4.0 * d18
            - 7.0 * d19
        )
        + c1dtc1 * xnddt
        + c1
        * (
            c1dtc1 * d16
            + d9 * etddt
            + d10 * eddot
            + d23 * (6.0 + 30.0 * eeta + 68.0 * eosq)
            + etdt * edot * (40.0 + 30.0 * eta2 + 272.0 * eeta)
            + d25 * (17.0 + 68.0 * eta2)
            + b1 * (d1ddt * d2 + 2.0 * d1dt * d2dt + d1 * (etddt * d11 + d23 * (72.0 + 54.0 * eta2)))
            + b2
            * (d1ddt * d3 + 2.0 * d1dt * d3dt + d1 * (etddt * d12 + d23 * (30.0 + 30.0 * eta2)))
            * cos2g
            + b3
            * (
                (d5dt * d14 + d5 * (d18 - 2.0 * d19)) * d4
                + 2.0 * d4dt * d5dt
                + d5 * (etddt * d13 + 22.5 * eta * d23)
            )
            * sing
            + xgdt1
            * (
                (7.0 * d20 + 4.0 * eo * edot / betao2) * (c5 * cosg - 2.0 * c4 * sin2g)
                + ((2.0 * c5dt * cosg - 4.0 * c4dt * sin2g) - xgdt1 * (c5 * sing + 4.0 * c4 * cos2g))
            )
        )
    )

    # Scaled to keep the squares in range
    tmnddt = xnddt * 1.0e9
    temp = tmnddt * tmnddt - xndt * 1.0e18 * xntrdt
    pp = (temp + tmnddt * tmnddt) / temp
    gamma = -xntrdt / (xnddt * (pp - 2.0))
    xnd = xndt / (pp * gamma)
    if edot == 0.0:
        # Circular and equatorial: no eccentricity drag to fit
        qq = 1.0
        ed = 0.0
    else:
        qq = 1.0 - eddot / (edot * gamma)
        ed = edot / (qq * gamma)
    ovgpp = 1.0 / (gamma * (pp + 1.0))

    return DragRates(
        xmdt1=xmdt1,
        xgdt1=xgdt1,
        xhdt1=xhdt1,
        xndt=xndt,
        edot=edot,
        isimp=False,
        gamma=gamma,
        pp=pp,
        qq=qq,
        xnd=xnd,
        ed=ed,
        ovgpp=ovgpp,
    )


class SGP8State(NamedTuple):
    """Cached SGP8 constants for one satellite."""

    gravity: EarthGravity
    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    xnodp: float
    cosio: float
    sinio: float
    xlldot: float
    omgdt: float
    xnodot: float
    drag: DragRates


def sgp8_init(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY) -> SGP8State:
    """Initialize SGP8 for one satellite.

    Args:
        elements: Mean elements.
        gravity: Gravity constants.

    Returns:
        The cached SGP8 constants.
    """
    rec = recover_mean_motion(elements, gravity)
    rates = secular_rates(rec, gravity)
    drag = drag_rates(elements, rec, gravity)
    if drag.isimp:
        logger.debug("SGP8 satellite %s uses linear drag equations", elements.satnum)
    return SGP8State(
        gravity=gravity,
        ecco=elements.ecco,
        inclo=elements.inclo,
        nodeo=elements.nodeo,
        argpo=elements.argpo,
        mo=elements.mo,
        xnodp=rec.xnodp,
        cosio=rec.cosio,
        sinio=rec.sinio,
        xlldot=rates.xmdot,
        omgdt=rates.omgdot,
        xnodot=rates.xnodot,
        drag=drag,
    )


def drag_update(drag: DragRates, xnodp: ArrayLike, ecco: ArrayLike, t: ArrayLike) -> tuple[Array, Array, Array]:
    """Mean motion, eccentricity and mean anomaly drift under SGP8 drag.

    Args:
        drag: Output of :func:`drag_rates`.
        xnodp: Mean motion the drag acts on [rad/min].
        ecco: Eccentricity the drag acts on.
        t: Time since epoch [min].

    Returns:
        Tuple ``(xn, em, z1)``: mean motion [rad/min], eccentricity and the
        drag contribution to the mean anomaly [rad].
    """
    # A negative base gives NaN, which finalize reports as decay
    temp = 1.0 - drag.gamma * t
    temp1 = temp**drag.pp
    xn_full = xnodp + drag.xnd * (1.0 - temp1)
    em_full = ecco + drag.ed * (1.0 - temp**drag.qq)
    z1_full = drag.xnd * (t + drag.ovgpp * (temp * temp1 - 1.0))

    xn_lin = xnodp + drag.xndt * t
    em_lin = ecco + drag.edot * t
    z1_lin = 0.5 * drag.xndt * t * t

    xn = jnp.where(drag.isimp, xn_lin, xn_full)
    em = jnp.where(drag.isimp, em_lin, em_full)
    z1 = jnp.where(drag.isimp, z1_lin, z1_full)
    return xn, em, z1


@jax.jit
def sgp8_kernel(state: SGP8State, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Evaluate SGP8 at one time (JAX, JIT-compiled).

    Args:
        state: Output of :func:`sgp8_init`.
        tsince: Time since epoch [min].

    Returns:
        Tuple ``(r, v, code)``.
    """
    s = state
    d = s.drag
    t = tsince

    # Secular gravity and atmospheric drag
    xmam = (s.mo + s.xlldot * t) % TWOPI
    omgasm = s.argpo + s.omgdt * t
    xnodes = s.nodeo + s.xnodot * t
    xn, em, z1 = drag_update(d, s.xnodp, s.ecco, t)
    z7 = 3.5 * TOTHRD * z1 / s.xnodp
    xmam = (xmam + z1 + z7 * d.xmdt1) % TWOPI
    omgasm = omgasm + z7 * d.xgdt1
    xnodes = xnodes + z7 * d.xhdt1

    a = (s.gravity.xke / xn) ** TOTHRD
    decayed = mean_elements_decayed(a, em) | (xn <= 0.0)
    # Full drag model has no solution once gamma * t reaches 1
    decayed = decayed | (jnp.logical_not(d.isimp) & (d.gamma * t >= 1.0))
    em = jnp.clip(em, ECCENTRICITY_FLOOR, 0.999999)
    xl = xmam + omgasm + xnodes

    r, v, pl, rk = brouwer_state(s.gravity, a, em, omgasm, xnodes, xl, s.inclo, s.sinio, s.cosio)
    return finalize(r, v, decayed, pl, rk)


def sgp8(
    elements: OrbitalElements,
    tsince: float,
    init_state: SGP8State | None = None,
    gravity: EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Propagate a near-Earth satellite with SGP8.

    Args:
        elements: Mean elements.
        tsince: Time since epoch [min].
        init_state: Cached output of :func:`sgp8_init`.
        gravity: Gravity constants, used only when *init_state* is omitted.

    Returns:
        The propagation result.
    """
    if init_state is None:
        init_state = sgp8_init(elements, gravity)
    check_init_state(init_state, SGP8State, "SGP8")
    r, v, code = sgp8_kernel(init_state, as_time(tsince))
    return PropagationResult.from_kernel(r, v, code, tsince, "SGP8")
