"""
Deep-space perturbations shared by SDP4 and SDP8.

Satellites with periods of 225 minutes or more feel the Sun and Moon and,
near the 12-hour and 24-hour periods, resonances with the Earth's
tesseral harmonics. This module provides three steps:

- :func:`deep_space_init` (Python time) computes the lunar and solar
  coefficients, the secular rates they induce and, for resonant orbits,
  the resonance coefficients.
- :func:`apply_secular` (JAX) adds the lunar-solar secular drift and, for
  resonant orbits, integrates the mean motion and mean longitude.
- :func:`apply_periodic` (JAX) adds the lunar-solar long-period terms.

The resonance integrator is a pure function of time: every call starts
from epoch and takes 720-minute steps to the requested time, so results
never depend on the order of earlier calls.
"""

from __future__ import annotations

import logging
from math import atan2 as _py_atan2
from math import cos as _py_cos
from math import pi as _py_pi
from math import sin as _py_sin
from math import sqrt as _py_sqrt
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import DEG2RAD, HALF_DAY_PERIOD_RANGE, SYNCHRONOUS_PERIOD, TOTHRD, TWOPI
from sgpjax.propagators._gravity import EarthGravity
from sgpjax.propagators._recovery import MeanMotionRecovery, SecularRates
from sgpjax.propagators._types import OrbitalElements

logger = logging.getLogger(__name__)

# Solar and lunar constants
_ZES = 0.01675
_ZEL = 0.05490
_C1SS = 2.9864797e-6
_C1L = 4.7968065e-7
_ZSINIS = 0.39785416
_ZCOSIS = 0.91744867
_ZCOSGS = 0.1945905
_ZSINGS = -0.98088458
_ZNS = 1.19459e-5
_ZNL = 1.5835218e-4

# Resonance constants
_Q22 = 1.7891679e-6
_Q31 = 2.1460748e-6
_Q33 = 2.2123015e-7
_ROOT22 = 1.7891679e-6
_ROOT32 = 3.7393792e-7
_ROOT44 = 7.3636953e-9
_ROOT52 = 1.1428639e-7
_ROOT54 = 2.1765803e-9
_RPTIM = 4.37526908801129966e-3
_FASX2 = 0.13130908
_FASX4 = 2.8843198
_FASX6 = 0.37448087
_G22 = 5.7686396
_G32 = 0.95240898
_G44 = 1.8014998
_G52 = 1.0508330
_G54 = 4.4108898
_STEPP = 720.0
_STEP2 = 0.5 * _STEPP * _STEPP

# Mean motion bands [rad/min] of the resonant orbits
_SYNCHRONOUS_BAND = (0.0034906585, 0.0052359877)
_HALF_DAY_BAND = (8.26e-3, 9.24e-3)
_HALF_DAY_MIN_ECCENTRICITY = 0.5

# Node terms are dropped within 3 degrees of the equator
_LOW_INCLINATION = 3.0 * DEG2RAD

# Lyddane's modification applies under this inclination [rad]
_LYDDANE_INCLINATION = 0.2

NON_RESONANT = 0
SYNCHRONOUS = 1
HALF_DAY = 2


class DeepSpaceCommon(NamedTuple):
    """Lunar-solar and resonance terms of one deep-space satellite.

    Attributes:
        e3, ee2, se2, ..., xl4: Lunar (``x``/``e``) and solar (``s``)
            long-period coefficients of eccentricity, inclination, mean
            anomaly, perigee and node.
        zmol, zmos: Lunar and solar mean anomalies at epoch [rad].
        dedt, didt, dmdt, dnodt, domdt: Lunar-solar secular rates of
            eccentricity, inclination, mean anomaly, node and perigee.
        irez: Resonance class driving the integrator (report mean motion
            bands): 0 none, 1 synchronous, 2 half-day.
        resonance_flag: Resonance class from the orbital period alone, behind
            :attr:`is_resonant` and :attr:`is_synchronous`.
        gsto: Greenwich sidereal time at epoch [rad].
        xfact, xlamo: Resonance rate offset and initial resonant longitude.
        xnodp: Mean motion at epoch [rad/min].
        argpo, omgdot: Perigee at epoch and its rate, for the half-day terms.
        del1, del2, del3: Synchronous resonance coefficients.
        d2201, ..., d5433: Half-day resonance coefficients.
    """

    e3: float
    ee2: float
    se2: float
    se3: float
    sgh2: float
    sgh3: float
    sgh4: float
    sh2: float
    sh3: float
    si2: float
    si3: float
    sl2: float
    sl3: float
    sl4: float
    xgh2: float
    xgh3: float
    xgh4: float
    xh2: float
    xh3: float
    xi2: float
    xi3: float
    xl2: float
    xl3: float
    xl4: float
    zmol: float
    zmos: float
    dedt: float
    didt: float
    dmdt: float
    dnodt: float
    domdt: float
    irez: int
    resonance_flag: int
    gsto: float
    xfact: float
    xlamo: float
    xnodp: float
    argpo: float
    omgdot: float
    del1: float = 0.0
    del2: float = 0.0
    del3: float = 0.0
    d2201: float = 0.0
    d2211: float = 0.0
    d3210: float = 0.0
    d3222: float = 0.0
    d4410: float = 0.0
    d4422: float = 0.0
    d5220: float = 0.0
    d5232: float = 0.0
    d5421: float = 0.0
    d5433: float = 0.0

    @property
    def is_resonant(self) -> bool:
        return self.resonance_flag != NON_RESONANT

    @property
    def is_synchronous(self) -> bool:
        return self.resonance_flag == SYNCHRONOUS


def greenwich_sidereal_time(jdut1: float) -> float:
    """Greenwich mean sidereal time (IAU-82) from a UT1 Julian date.

    Args:
        jdut1: Julian date (UT1).

    Returns:
        Sidereal angle in ``[0, 2pi)`` [rad].
    """
    tut1 = (jdut1 - 2451545.0) / 36525.0
    temp = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    temp = (temp * DEG2RAD / 240.0) % TWOPI
    if temp < 0.0:
        temp += TWOPI
    return temp


def resonance_class(xnodp: float, ecco: float) -> int:
    """Classify an orbit as non-resonant, synchronous or half-day resonant."""
    if _HALF_DAY_BAND[0] <= xnodp <= _HALF_DAY_BAND[1] and ecco >= _HALF_DAY_MIN_ECCENTRICITY:
        return HALF_DAY
    if _SYNCHRONOUS_BAND[0] < xnodp < _SYNCHRONOUS_BAND[1]:
        return SYNCHRONOUS
    return NON_RESONANT


def period_resonance_class(xnodp: float) -> int:
    """Classify an orbit by period: 24-hour from 1200 minutes up, 12-hour from 600 to 800 minutes."""
    period = TWOPI / xnodp
    if period >= SYNCHRONOUS_PERIOD:
        return SYNCHRONOUS
    if HALF_DAY_PERIOD_RANGE[0] <= period <= HALF_DAY_PERIOD_RANGE[1]:
        return HALF_DAY
    return NON_RESONANT


class _ThirdBody(NamedTuple):
    s1: float
    s2: float
    s3: float
    s4: float
    s5: float
    s6: float
    s7: float
    z1: float
    z2: float
    z3: float
    z11: float
    z12: float
    z13: float
    z21: float
    z22: float
    z23: float
    z31: float
    z32: float
    z33: float


def _third_body(zcosg, zsing, zcosi, zsini, zcosh, zsinh, cc, xnoi, em, sinim, cosim, sinomm, cosomm):
    """Perturbation coefficients of one disturbing body (Sun or Moon)."""
    emsq = em * em
    betasq = 1.0 - emsq
    rtemsq = _py_sqrt(betasq)

    a1 = zcosg * zcosh + zsing * zcosi * zsinh
    a3 = -zsing * zcosh + zcosg * zcosi * zsinh
    a7 = -zcosg * zsinh + zsing * zcosi * zcosh
    a8 = zsing * zsini
    a9 = zsing * zsinh + zcosg * zcosi * zcosh
    a10 = zcosg * zsini
    a2 = cosim * a7 + sinim * a8
    a4 = cosim * a9 + sinim * a10
    a5 = -sinim * a7 + cosim * a8
    a6 = -sinim * a9 + cosim * a10

    x1 = a1 * cosomm + a2 * sinomm
    x2 = a3 * cosomm + a4 * sinomm
    x3 = -a1 * sinomm + a2 * cosomm
    x4 = -a3 * sinomm + a4 * cosomm
    x5 = a5 * sinomm
    x6 = a6 * sinomm
    x7 = a5 * cosomm
    x8 = a6 * cosomm

    z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
    z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
    z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
    z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
    z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
    z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
    z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
    z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (-24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5))
    z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
    z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
    z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8))
    z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
    z1 = z1 + z1 + betasq * z31
    z2 = z2 + z2 + betasq * z32
    z3 = z3 + z3 + betasq * z33

    s3 = cc * xnoi
    s2 = -0.5 * s3 / rtemsq
    s4 = s3 * rtemsq
    s1 = -15.0 * em * s4
    s5 = x1 * x3 + x2 * x4
    s6 = x2 * x3 + x1 * x4
    s7 = x2 * x4 - x1 * x3
    return _ThirdBody(s1, s2, s3, s4, s5, s6, s7, z1, z2, z3, z11, z12, z13, z21, z22, z23, z31, z32, z33)


def _half_day_coefficients(em: float, sinim: float, cosim: float, nm: float, aonv: float) -> dict[str, float]:
    """Coefficients of the ten 12-hour tesseral resonance terms."""
    emsq = em * em
    eoc = em * emsq
    cosisq = cosim * cosim
    g201 = -0.306 - (em - 0.64) * 0.440

    if em <= 0.65:
        g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
        g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
        g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
        g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
        g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
        g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
    else:
        g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
        g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
        if em > 0.715:
            g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
        else:
            g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq

    if em < 0.7:
        g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
        g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
    else:
        g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
        g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

    sini2 = sinim * sinim
    f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
    f221 = 1.5 * sini2
    f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
    f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = 9.84375 * sinim * (sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq) + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq))
    f523 = sinim * (4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq) + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq))
    f542 = 29.53125 * sinim * (2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq))
    f543 = 29.53125 * sinim * (-2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq))

    temp1 = 3.0 * nm * nm * aonv * aonv
    temp = temp1 * _ROOT22
    out = {"d2201": temp * f220 * g201, "d2211": temp * f221 * g211}
    temp1 = temp1 * aonv
    temp = temp1 * _ROOT32
    out["d3210"] = temp * f321 * g310
    out["d3222"] = temp * f322 * g322
    temp1 = temp1 * aonv
    temp = 2.0 * temp1 * _ROOT44
    out["d4410"] = temp * f441 * g410
    out["d4422"] = temp * f442 * g422
    temp1 = temp1 * aonv
    temp = temp1 * _ROOT52
    out["d5220"] = temp * f522 * g520
    out["d5232"] = temp * f523 * g532
    temp = 2.0 * temp1 * _ROOT54
    out["d5421"] = temp * f542 * g521
    out["d5433"] = temp * f543 * g533
    return out


def deep_space_init(
    elements: OrbitalElements,
    recovery: MeanMotionRecovery,
    rates: SecularRates,
    gravity: EarthGravity,
) -> DeepSpaceCommon:
    """Compute the lunar-solar and resonance terms of a deep-space orbit.

    Runs at Python time (not under JIT).

    Args:
        elements: Mean elements.
        recovery: Output of :func:`~sgpjax.propagators.recover_mean_motion`.
        rates: Output of :func:`~sgpjax.propagators.secular_rates`.
        gravity: Gravity constants.

    Returns:
        The deep-space terms.
    """
    em = elements.ecco
    emsq = em * em
    inclm = elements.inclo
    nm = recovery.xnodp
    snodm = _py_sin(elements.nodeo)
    cnodm = _py_cos(elements.nodeo)
    sinomm = _py_sin(elements.argpo)
    cosomm = _py_cos(elements.argpo)
    sinim = _py_sin(inclm)
    cosim = _py_cos(inclm)

    # Lunar orbit at epoch
    day = elements.epoch_days_1950 + 18261.5
    xnodce = (4.5236020 - 9.2422029e-4 * day) % TWOPI
    stem = _py_sin(xnodce)
    ctem = _py_cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = _py_sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = _py_sqrt(1.0 - zsinhl * zsinhl)
    gam = 5.8351514 + 0.0019443680 * day
    zx = _py_atan2(0.39785416 * stem / zsinil, zcoshl * ctem + 0.91744867 * zsinhl * stem)
    zx = gam + zx - xnodce
    zcosgl = _py_cos(zx)
    zsingl = _py_sin(zx)

    xnoi = 1.0 / nm
    sun = _third_body(
        _ZCOSGS, _ZSINGS, _ZCOSIS, _ZSINIS, cnodm, snodm, _C1SS, xnoi, em, sinim, cosim, sinomm, cosomm
    )
    moon = _third_body(
        zcosgl,
        zsingl,
        zcosil,
        zsinil,
        zcoshl * cnodm + zsinhl * snodm,
        snodm * zcoshl - cnodm * zsinhl,
        _C1L,
        xnoi,
        em,
        sinim,
        cosim,
        sinomm,
        cosomm,
    )

    zmol = (4.7199672 + 0.22997150 * day - gam) % TWOPI
    zmos = (6.2565837 + 0.017201977 * day) % TWOPI

    periodics = dict(
        se2=2.0 * sun.s1 * sun.s6,
        se3=2.0 * sun.s1 * sun.s7,
        si2=2.0 * sun.s2 * sun.z12,
        si3=2.0 * sun.s2 * (sun.z13 - sun.z11),
        sl2=-2.0 * sun.s3 * sun.z2,
        sl3=-2.0 * sun.s3 * (sun.z3 - sun.z1),
        sl4=-2.0 * sun.s3 * (-21.0 - 9.0 * emsq) * _ZES,
        sgh2=2.0 * sun.s4 * sun.z32,
        sgh3=2.0 * sun.s4 * (sun.z33 - sun.z31),
        sgh4=-18.0 * sun.s4 * _ZES,
        sh2=-2.0 * sun.s2 * sun.z22,
        sh3=-2.0 * sun.s2 * (sun.z23 - sun.z21),
        ee2=2.0 * moon.s1 * moon.s6,
        e3=2.0 * moon.s1 * moon.s7,
        xi2=2.0 * moon.s2 * moon.z12,
        xi3=2.0 * moon.s2 * (moon.z13 - moon.z11),
        xl2=-2.0 * moon.s3 * moon.z2,
        xl3=-2.0 * moon.s3 * (moon.z3 - moon.z1),
        xl4=-2.0 * moon.s3 * (-21.0 - 9.0 * emsq) * _ZEL,
        xgh2=2.0 * moon.s4 * moon.z32,
        xgh3=2.0 * moon.s4 * (moon.z33 - moon.z31),
        xgh4=-18.0 * moon.s4 * _ZEL,
        xh2=-2.0 * moon.s2 * moon.z22,
        xh3=-2.0 * moon.s2 * (moon.z23 - moon.z21),
        zmol=zmol,
        zmos=zmos,
    )

    # Lunar-solar secular rates
    near_equatorial = inclm < _LOW_INCLINATION or inclm > _py_pi - _LOW_INCLINATION
    ses = sun.s1 * _ZNS * sun.s5
    sis = sun.s2 * _ZNS * (sun.z11 + sun.z13)
    sls = -_ZNS * sun.s3 * (sun.z1 + sun.z3 - 14.0 - 6.0 * emsq)
    sghs = sun.s4 * _ZNS * (sun.z31 + sun.z33 - 6.0)
    shs = 0.0 if near_equatorial else -_ZNS * sun.s2 * (sun.z21 + sun.z23)
    if sinim != 0.0:
        shs = shs / sinim
    sgs = sghs - cosim * shs

    dedt = ses + moon.s1 * _ZNL * moon.s5
    didt = sis + moon.s2 * _ZNL * (moon.z11 + moon.z13)
    dmdt = sls - _ZNL * moon.s3 * (moon.z1 + moon.z3 - 14.0 - 6.0 * emsq)
    sghl = moon.s4 * _ZNL * (moon.z31 + moon.z33 - 6.0)
    shll = 0.0 if near_equatorial else -_ZNL * moon.s2 * (moon.z21 + moon.z23)
    domdt = sgs + sghl
    dnodt = shs
    if sinim != 0.0:
        domdt = domdt - cosim / sinim * shll
        dnodt = dnodt + shll / sinim

    gsto = greenwich_sidereal_time(elements.jdsatepoch)
    irez = resonance_class(nm, em)

    resonance: dict[str, float] = {}
    xfact = xlamo = 0.0
    if irez != NON_RESONANT:
        aonv = (nm / gravity.xke) ** TOTHRD
        if irez == HALF_DAY:
            resonance = _half_day_coefficients(em, sinim, cosim, nm, aonv)
            xlamo = (elements.mo + elements.nodeo + elements.nodeo - gsto - gsto) % TWOPI
            xfact = rates.xmdot + dmdt + 2.0 * (rates.xnodot + dnodt - _RPTIM) - nm
        else:
            g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
            g310 = 1.0 + 2.0 * emsq
            g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
            f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
            f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
            f330 = 1.875 * (1.0 + cosim) ** 3
            del1 = 3.0 * nm * nm * aonv * aonv
            resonance = {
                "del1": del1 * f311 * g310 * _Q31 * aonv,
                "del2": 2.0 * del1 * f220 * g200 * _Q22,
                "del3": 3.0 * del1 * f330 * g300 * _Q33 * aonv,
            }
            xlamo = (elements.mo + elements.nodeo + elements.argpo - gsto) % TWOPI
            xfact = rates.xmdot + rates.omgdot + rates.xnodot - _RPTIM + dmdt + domdt + dnodt - nm
        logger.debug(
            "Satellite %s is %s resonant",
            elements.satnum,
            "half-day" if irez == HALF_DAY else "synchronous",
        )

    return DeepSpaceCommon(
        **periodics,
        dedt=dedt,
        didt=didt,
        dmdt=dmdt,
        dnodt=dnodt,
        domdt=domdt,
        irez=irez,
        resonance_flag=period_resonance_class(nm),
        gsto=gsto,
        xfact=xfact,
        xlamo=xlamo,
        xnodp=nm,
        argpo=elements.argpo,
        omgdot=rates.omgdot,
        **resonance,
    )


def _resonance_rates(ds: DeepSpaceCommon, xli: Array, xni: Array, atime: Array) -> tuple[Array, Array, Array]:
    """Derivatives ``(xndt, xldot, xnddt)`` of the resonance integrator."""
    xldot = xni + ds.xfact

    # Synchronous
    xndt_sync = (
        ds.del1 * jnp.sin(xli - _FASX2)
        + ds.del2 * jnp.sin(2.0 * (xli - _FASX4))
        + ds.del3 * jnp.sin(3.0 * (xli - _FASX6))
    )
    xnddt_sync = (
        ds.del1 * jnp.cos(xli - _FASX2)
        + 2.0 * ds.del2 * jnp.cos(2.0 * (xli - _FASX4))
        + 3.0 * ds.del3 * jnp.cos(3.0 * (xli - _FASX6))
    )

    # Half-day
    xomi = ds.argpo + ds.omgdot * atime
    x2omi = xomi + xomi
    x2li = xli + xli
    xndt_hd = (
        ds.d2201 * jnp.sin(x2omi + xli - _G22)
        + ds.d2211 * jnp.sin(xli - _G22)
        + ds.d3210 * jnp.sin(xomi + xli - _G32)
        + ds.d3222 * jnp.sin(-xomi + xli - _G32)
        + ds.d4410 * jnp.sin(x2omi + x2li - _G44)
        + ds.d4422 * jnp.sin(x2li - _G44)
        + ds.d5220 * jnp.sin(xomi + xli - _G52)
        + ds.d5232 * jnp.sin(-xomi + xli - _G52)
        + ds.d5421 * jnp.sin(xomi + x2li - _G54)
        + ds.d5433 * jnp.sin(-xomi + x2li - _G54)
    )
    xnddt_hd = (
        ds.d2201 * jnp.cos(x2omi + xli - _G22)
        + ds.d2211 * jnp.cos(xli - _G22)
        + ds.d3210 * jnp.cos(xomi + xli - _G32)
        + ds.d3222 * jnp.cos(-xomi + xli - _G32)
        + ds.d5220 * jnp.cos(xomi + xli - _G52)
        + ds.d5232 * jnp.cos(-xomi + xli - _G52)
        + 2.0
        * (
            ds.d4410 * jnp.cos(x2omi + x2li - _G44)
            + ds.d4422 * jnp.cos(x2li - _G44)
            + ds.d5421 * jnp.cos(xomi + x2li - _G54)
            + ds.d5433 * jnp.cos(-xomi + x2li - _G54)
        )
    )

    half_day = ds.irez == HALF_DAY
    xndt = jnp.where(half_day, xndt_hd, xndt_sync)
    xnddt = jnp.where(half_day, xnddt_hd, xnddt_sync) * xldot
    return xndt, xldot, xnddt


def integrate_resonance(ds: DeepSpaceCommon, t: ArrayLike) -> tuple[Array, Array]:
    """Integrate the resonant mean motion and longitude from epoch to *t*.

    Second-order Euler-Maclaurin steps of 720 minutes, followed by a Taylor
    step to the exact time. Non-resonant orbits take no steps.

    Args:
        ds: Deep-space terms.
        t: Time since epoch [min].

    Returns:
        Tuple ``(xn, xl)``: mean motion [rad/min] and resonant longitude [rad].
    """
    dtype = jnp.result_type(t, float)
    t = jnp.asarray(t, dtype=dtype)
    delt = jnp.where(t >= 0.0, _STEPP, -_STEPP).astype(dtype)
    resonant = ds.irez != NON_RESONANT

    def cond(carry):
        atime, _, _ = carry
        return resonant & (jnp.abs(t - atime) >= _STEPP)

    def body(carry):
        atime, xni, xli = carry
        xndt, xldot, xnddt = _resonance_rates(ds, xli, xni, atime)
        xli = xli + xldot * delt + xndt * _STEP2
        xni = xni + xndt * delt + xnddt * _STEP2
        return atime + delt, xni, xli

    init = (jnp.zeros((), dtype), jnp.asarray(ds.xnodp, dtype), jnp.asarray(ds.xlamo, dtype))
    atime, xni, xli = jax.lax.while_loop(cond, body, init)

    ft = t - atime
    xndt, xldot, xnddt = _resonance_rates(ds, xli, xni, atime)
    xn = xni + xndt * ft + xnddt * ft * ft * 0.5
    xl = xli + xldot * ft + xndt * ft * ft * 0.5
    return xn, xl


def apply_secular(
    ds: DeepSpaceCommon,
    t: ArrayLike,
    em: ArrayLike,
    argpm: ArrayLike,
    inclm: ArrayLike,
    mm: ArrayLike,
    nodem: ArrayLike,
    nm: ArrayLike,
) -> tuple[Array, Array, Array, Array, Array, Array]:
    """Add lunar-solar secular drift and resonance effects.

    Args:
        ds: Deep-space terms.
        t: Time since epoch [min].
        em, argpm, inclm, mm, nodem: Mean elements after the gravity and
            drag secular update.
        nm: Mean motion [rad/min].

    Returns:
        Tuple ``(em, argpm, inclm, mm, nodem, nm)``.
    """
    theta = (ds.gsto + t * _RPTIM) % TWOPI
    em = em + ds.dedt * t
    inclm = inclm + ds.didt * t
    argpm = argpm + ds.domdt * t
    nodem = nodem + ds.dnodt * t
    mm = mm + ds.dmdt * t

    xn, xl = integrate_resonance(ds, t)
    mm_res = jnp.where(
        ds.irez == SYNCHRONOUS,
        xl - nodem - argpm + theta,
        xl - 2.0 * nodem + 2.0 * theta,
    )
    resonant = ds.irez != NON_RESONANT
    nm = jnp.where(resonant, xn, nm)
    mm = jnp.where(resonant, mm_res, mm) % TWOPI
    return em, argpm, inclm, mm, nodem, nm


def apply_periodic(
    ds: DeepSpaceCommon,
    t: ArrayLike,
    ep: ArrayLike,
    inclp: ArrayLike,
    nodep: ArrayLike,
    argpp: ArrayLike,
    mp: ArrayLike,
) -> tuple[Array, Array, Array, Array, Array]:
    """Add lunar-solar long-period terms.

    Below 0.2 rad inclination the node and perigee terms are applied with
    Lyddane's modification. A resulting negative inclination is reflected:
    its sign flips, the node advances by pi and the perigee falls back by pi.

    Args:
        ds: Deep-space terms.
        t: Time since epoch [min].
        ep, inclp, nodep, argpp, mp: Mean elements after :func:`apply_secular`.

    Returns:
        Tuple ``(ep, inclp, nodep, argpp, mp)``.
    """
    # Solar
    zm = ds.zmos + _ZNS * t
    zf = zm + 2.0 * _ZES * jnp.sin(zm)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    ses = ds.se2 * f2 + ds.se3 * f3
    sis = ds.si2 * f2 + ds.si3 * f3
    sls = ds.sl2 * f2 + ds.sl3 * f3 + ds.sl4 * sinzf
    sghs = ds.sgh2 * f2 + ds.sgh3 * f3 + ds.sgh4 * sinzf
    shs = ds.sh2 * f2 + ds.sh3 * f3

    # Lunar
    zm = ds.zmol + _ZNL * t
    zf = zm + 2.0 * _ZEL * jnp.sin(zm)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    sel = ds.ee2 * f2 + ds.e3 * f3
    sil = ds.xi2 * f2 + ds.xi3 * f3
    sll = ds.xl2 * f2 + ds.xl3 * f3 + ds.xl4 * sinzf
    sghl = ds.xgh2 * f2 + ds.xgh3 * f3 + ds.xgh4 * sinzf
    shll = ds.xh2 * f2 + ds.xh3 * f3

    pe = ses + sel
    pinc = sis + sil
    pl = sls + sll
    pgh = sghs + sghl
    ph = shs + shll

    inclp = inclp + pinc
    ep = ep + pe
    sinip = jnp.sin(inclp)
    cosip = jnp.cos(inclp)

    # Direct
    ph_direct = ph / sinip
    argpp_direct = argpp + pgh - cosip * ph_direct
    nodep_direct = nodep + ph_direct

    # Lyddane
    sinop = jnp.sin(nodep)
    cosop = jnp.cos(nodep)
    alfdp = sinip * sinop + ph * cosop + pinc * cosip * sinop
    betdp = sinip * cosop - ph * sinop + pinc * cosip * cosop
    xnoh = nodep % TWOPI
    xls = mp + argpp + pl + pgh + (cosip - pinc * sinip) * xnoh
    nodep_lyd = jnp.arctan2(alfdp, betdp)
    nodep_lyd = jnp.where(
        jnp.abs(xnoh - nodep_lyd) > jnp.pi,
        jnp.where(nodep_lyd < xnoh, nodep_lyd + TWOPI, nodep_lyd - TWOPI),
        nodep_lyd,
    )
    argpp_lyd = xls - (mp + pl) - cosip * nodep_lyd

    direct = inclp >= _LYDDANE_INCLINATION
    argpp = jnp.where(direct, argpp_direct, argpp_lyd)
    nodep = jnp.where(direct, nodep_direct, nodep_lyd)
    mp = (mp + pl) % TWOPI

    inclp, nodep, argpp = reflect_inclination(inclp, nodep, argpp)
    return ep, inclp, nodep, argpp, mp


def reflect_inclination(inclp: ArrayLike, nodep: ArrayLike, argpp: ArrayLike) -> tuple[Array, Array, Array]:
    """Flip a negative inclination, moving the node by +pi and the perigee by -pi.

    The orbital plane and the perigee direction are unchanged.
    """
    negative = inclp < 0.0
    inclp = jnp.where(negative, -inclp, inclp)
    nodep = jnp.where(negative, nodep + jnp.pi, nodep)
    argpp = jnp.where(negative, argpp - jnp.pi, argpp)
    return inclp, nodep, argpp
