"""
SGP4 near-Earth propagator.

SGP4 combines the base recovery with a power-law atmospheric density model
near perigee, which integrates to a polynomial in time for the decay of the
semi-major axis (``tempa``), the eccentricity (``tempe``) and the mean
longitude (``templ``). For perigees under 220 km the polynomial is cut
after the linear and quadratic terms.

The init function runs at Python time and returns an immutable
``SGP4State``. The kernel ``sgp4_kernel`` is a jitted pure function of that
state and the time since epoch, so it can be reused across any number of
evaluation times and mapped with ``jax.vmap``.
"""

from __future__ import annotations

import logging
from math import cos as _py_cos
from math import sin as _py_sin
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import ECCENTRICITY_FLOOR, TOTHRD
from sgpjax.propagators._gravity import DEFAULT_GRAVITY, EarthGravity
from sgpjax.propagators._periodics import brouwer_state, finalize, mean_elements_decayed
from sgpjax.propagators._recovery import (
    density_parameters,
    is_simplified,
    recover_mean_motion,
    secular_rates,
)
from sgpjax.propagators._types import (
    OrbitalElements,
    PropagationResult,
    as_time,
    check_init_state,
)

logger = logging.getLogger(__name__)


class SGP4State(NamedTuple):
    """Cached SGP4 constants for one satellite.

    Attributes:
        gravity: Gravity constants.
        ecco, inclo, nodeo, argpo, mo, bstar: Epoch elements.
        xnodp: Original mean motion [rad/min].
        aodp: Original semi-major axis [Earth radii].
        cosio, sinio: Cosine and sine of inclination.
        eta: ``aodp * ecco * tsi``.
        xmdot, omgdot, xnodot: Secular rates [rad/min].
        c1, c4, c5: Drag coefficients.
        d2, d3, d4: Higher-order ``tempa`` coefficients.
        t2cof, t3cof, t4cof, t5cof: ``templ`` coefficients.
        omgcof, xmcof, xnodcf: Drag terms of perigee, mean anomaly and node.
        delmo, sinmo: ``(1 + eta cos M0)^3`` and ``sin M0``.
        isimp: Simplified drag mode (perigee under 220 km).
    """

    gravity: EarthGravity
    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    bstar: float
    xnodp: float
    aodp: float
    cosio: float
    sinio: float
    eta: float
    xmdot: float
    omgdot: float
    xnodot: float
    c1: float
    c4: float
    c5: float
    d2: float
    d3: float
    d4: float
    t2cof: float
    t3cof: float
    t4cof: float
    t5cof: float
    omgcof: float
    xmcof: float
    xnodcf: float
    delmo: float
    sinmo: float
    isimp: bool


class DragCoefficients(NamedTuple):
    """Drag coefficients shared by SGP4 and SDP4."""

    eta: float
    coef: float
    c1: float
    c3: float
    c4: float
    c5: float
    tsi: float
    s4: float


def drag_coefficients(elements: OrbitalElements, recovery, gravity: EarthGravity) -> DragCoefficients:
    """Power-law density drag coefficients C1 to C5.

    Args:
        elements: Mean elements.
        recovery: Output of :func:`~sgpjax.propagators.recover_mean_motion`.
        gravity: Gravity constants.

    Returns:
        The drag coefficients and the density terms they were built from.
    """
    rec = recovery
    eo = elements.ecco
    ck2 = gravity.ck2
    dens = density_parameters(rec.aodp, eo, gravity)

    tsi = 1.0 / (rec.aodp - dens.s4)
    eta = rec.aodp * eo * tsi
    etasq = eta * eta
    eeta = eo * eta
    psisq = abs(1.0 - etasq)
    coef = dens.qoms24 * tsi**4
    coef1 = coef / psisq**3.5
    c2 = (
        coef1
        * rec.xnodp
        * (
            rec.aodp * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.75 * ck2 * tsi / psisq * rec.x3thm1 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
    )
    c1 = elements.bstar * c2
    c3 = 0.0
    if eo > 1.0e-4:
        c3 = coef * tsi * gravity.a3ovk2 * rec.xnodp * rec.sinio / eo
    c4 = (
        2.0
        * rec.xnodp
        * coef1
        * rec.aodp
        * rec.betao2
        * (
            eta * (2.0 + 0.5 * etasq)
            + eo * (0.5 + 2.0 * etasq)
            - 2.0
            * ck2
            * tsi
            / (rec.aodp * psisq)
            * (
                -3.0 * rec.x3thm1 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75
                * rec.x1mth2
                * (2.0 * etasq - eeta * (1.0 + etasq))
                * _py_cos(2.0 * elements.argpo)
            )
        )
    )
    c5 = 2.0 * coef1 * rec.aodp * rec.betao2 * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)
    return DragCoefficients(eta=eta, coef=coef, c1=c1, c3=c3, c4=c4, c5=c5, tsi=tsi, s4=dens.s4)


def sgp4_init(elements: OrbitalElements, gravity: EarthGravity = DEFAULT_GRAVITY) -> SGP4State:
    """Initialize SGP4 for one satellite.

    Runs at Python time (not under JIT).

    Args:
        elements: Mean elements.
        gravity: Gravity constants.

    Returns:
        The cached SGP4 constants.
    """
    rec = recover_mean_motion(elements, gravity)
    rates = secular_rates(rec, gravity)
    drag = drag_coefficients(elements, rec, gravity)
    eo = elements.ecco
    bstar = elements.bstar
    c1 = drag.c1

    isimp = is_simplified(rec.aodp, eo, gravity)
    if isimp:
        logger.debug("SGP4 satellite %s uses simplified drag (perigee under 220 km)", elements.satnum)

    xmcof = 0.0
    if eo > 1.0e-4:
        xmcof = -TOTHRD * drag.coef * bstar / (eo * drag.eta)

    d2 = d3 = d4 = t3cof = t4cof = t5cof = 0.0
    if not isimp:
        c1sq = c1 * c1
        d2 = 4.0 * rec.aodp * drag.tsi * c1sq
        temp = d2 * drag.tsi * c1 / 3.0
        d3 = (17.0 * rec.aodp + drag.s4) * temp
        d4 = 0.5 * temp * rec.aodp * drag.tsi * (221.0 * rec.aodp + 31.0 * drag.s4) * c1
        t3cof = d2 + 2.0 * c1sq
        t4cof = 0.25 * (3.0 * d3 + c1 * (12.0 * d2 + 10.0 * c1sq))
        t5cof = 0.2 * (3.0 * d4 + 12.0 * c1 * d3 + 6.0 * d2 * d2 + 15.0 * c1sq * (2.0 * d2 + c1sq))

    return SGP4State(
        gravity=gravity,
        ecco=eo,
        inclo=elements.inclo,
        nodeo=elements.nodeo,
        argpo=elements.argpo,
        mo=elements.mo,
        bstar=bstar,
        xnodp=rec.xnodp,
        aodp=rec.aodp,
        cosio=rec.cosio,
        sinio=rec.sinio,
        eta=drag.eta,
        xmdot=rates.xmdot,
        omgdot=rates.omgdot,
        xnodot=rates.xnodot,
        c1=c1,
        c4=drag.c4,
        c5=drag.c5,
        d2=d2,
        d3=d3,
        d4=d4,
        t2cof=1.5 * c1,
        t3cof=t3cof,
        t4cof=t4cof,
        t5cof=t5cof,
        omgcof=bstar * drag.c3 * _py_cos(elements.argpo),
        xmcof=xmcof,
        xnodcf=3.5 * rec.betao2 * rates.xhdot1 * c1,
        delmo=(1.0 + drag.eta * _py_cos(elements.mo)) ** 3,
        sinmo=_py_sin(elements.mo),
        isimp=isimp,
    )


@jax.jit
def sgp4_kernel(state: SGP4State, tsince: ArrayLike) -> tuple[Array, Array, Array]:
    """Evaluate SGP4 at one time (JAX, JIT-compiled).

    Args:
        state: Output of :func:`sgp4_init`.
        tsince: Time since epoch [min].

    Returns:
        Tuple ``(r, v, code)``: position [km], velocity [km/s] and the
        :class:`~sgpjax.propagators.PropagationError` code (0 on success).
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

    # Higher-order drag terms, dropped in simplified mode
    delomg = s.omgcof * t
    delm = s.xmcof * ((1.0 + s.eta * jnp.cos(xmdf)) ** 3 - s.delmo)
    temp = delomg + delm
    xmp_full = xmdf + temp
    tcube = tsq * t
    tfour = t * tcube
    xmp = jnp.where(s.isimp, xmdf, xmp_full)
    omega = jnp.where(s.isimp, omgadf, omgadf - temp)
    tempa = jnp.where(s.isimp, tempa, tempa - s.d2 * tsq - s.d3 * tcube - s.d4 * tfour)
    tempe = jnp.where(s.isimp, tempe, tempe + s.bstar * s.c5 * (jnp.sin(xmp_full) - s.sinmo))
    templ = jnp.where(s.isimp, templ, templ + s.t3cof * tcube + tfour * (s.t4cof + t * s.t5cof))

    a = s.aodp * tempa * tempa
    e = s.ecco - tempe
    xl = xmp + omega + xnode + s.xnodp * templ
    decayed = mean_elements_decayed(a, e)
    e = jnp.clip(e, ECCENTRICITY_FLOOR, 0.999999)

    r, v, pl, rk = brouwer_state(s.gravity, a, e, omega, xnode, xl, s.inclo, s.sinio, s.cosio)
    return finalize(r, v, decayed, pl, rk)


def sgp4(
    elements: OrbitalElements,
    tsince: float,
    init_state: SGP4State | None = None,
    gravity: EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Propagate a near-Earth satellite with SGP4.

    Args:
        elements: Mean elements.
        tsince: Time since epoch [min].
        init_state: Cached output of :func:`sgp4_init`. Computed from
            *elements* when omitted.
        gravity: Gravity constants, used only when *init_state* is omitted.

    Returns:
        The propagation result.

    Raises:
        TypeError: If *init_state* is not an ``SGP4State``.
    """
    if init_state is None:
        init_state = sgp4_init(elements, gravity)
    check_init_state(init_state, SGP4State, "SGP4")
    r, v, code = sgp4_kernel(init_state, as_time(tsince))
    return PropagationResult.from_kernel(r, v, code, tsince, "SGP4")
