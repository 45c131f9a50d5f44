from math import pi

import jax.numpy as jnp
import pytest

from sgpjax.config import set_dtype
from sgpjax.propagators import OrbitalElements

_DEG2RAD = pi / 180.0
_REVDAY = 2.0 * pi / 1440.0


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Run every test in float64 unless the module overrides it.

    The report vectors and the python-sgp4 comparisons need double
    precision; test_config.py resets to float32 with its own fixture.
    """
    set_dtype(jnp.float64)


def make_elements(
    satnum,
    jdsatepoch,
    incl_deg,
    node_deg,
    ecco,
    argp_deg,
    mo_deg,
    n_revday,
    ndot2=0.0,
    nddot6=0.0,
    bstar=0.0,
):
    """Build elements from TLE units (degrees, rev/day, rev/day^2, rev/day^3)."""
    return OrbitalElements(
        satnum=satnum,
        jdsatepoch=jdsatepoch,
        ecco=ecco,
        inclo=incl_deg * _DEG2RAD,
        nodeo=node_deg * _DEG2RAD,
        argpo=argp_deg * _DEG2RAD,
        mo=mo_deg * _DEG2RAD,
        no_kozai=n_revday * _REVDAY,
        ndot=ndot2 * _REVDAY / 1440.0,
        nddot=nddot6 * _REVDAY / (1440.0 * 1440.0),
        bstar=bstar,
    )


@pytest.fixture()
def near_earth_elements():
    """Spacetrack Report No. 3 near-Earth test case (catalog 88888)."""
    return make_elements(
        88888, 2444514.48708465, 72.8435, 115.9689, 0.0086731, 52.6988, 110.5714,
        16.05824518, 0.00073094, 0.13844e-3, 0.66816e-4,
    )  # fmt: skip


@pytest.fixture()
def deep_space_elements():
    """Spacetrack Report No. 3 deep-space test case (catalog 11801)."""
    return make_elements(
        11801, 2444468.79629788, 46.7916, 230.4354, 0.7318036, 47.4722, 10.4117,
        2.28537848, 0.01431103, 0.0, 0.014311,
    )  # fmt: skip


@pytest.fixture()
def iss_elements():
    """ISS, 2008-09-20."""
    return make_elements(
        25544, 2454730.01782528, 51.6416, 247.4627, 0.0006703, 130.5360, 325.0288,
        15.72125391, -0.00002182, 0.0, -0.11606e-4,
    )  # fmt: skip


@pytest.fixture()
def molniya_elements():
    """Molniya 2-14: half-day resonant."""
    return make_elements(
        8195, 2453911.83215444, 64.1586, 279.0717, 0.6877146, 264.7651, 20.2257,
        2.00491383, 0.00000099, 0.0, 0.11873e-3,
    )  # fmt: skip


@pytest.fixture()
def geo_elements():
    """Near-equatorial geostationary satellite: synchronous resonant."""
    return make_elements(
        28626, 2453911.96683397, 0.0019, 286.9433, 0.0000335, 13.7918, 55.6504,
        1.00271236, -0.00000205, 0.0, 0.1e-3,
    )  # fmt: skip


@pytest.fixture()
def reentry_elements():
    """Low, high-drag orbit that decays within a few days."""
    return make_elements(
        99999, 2451545.0, 51.6, 10.0, 0.001, 90.0, 0.0,
        16.4, 0.0, 0.0, 0.01,
    )  # fmt: skip


@pytest.fixture()
def reference_satrec():
    """Factory building a python-sgp4 ``Satrec`` (WGS72) from elements."""
    from sgp4.api import WGS72 as SGP4_WGS72
    from sgp4.api import Satrec

    def build(elements):
        sat = Satrec()
        sat.sgp4init(
            SGP4_WGS72,
            "i",
            elements.satnum,
            elements.jdsatepoch - 2433281.5,
            elements.bstar,
            elements.ndot,
            elements.nddot,
            elements.ecco,
            elements.argpo,
            elements.inclo,
            elements.mo,
            elements.no_kozai,
            elements.nodeo,
        )
        return sat

    return build


@pytest.fixture()
def circular_elements():
    """Circular, high-drag low orbit."""
    return make_elements(
        99998, 2451545.0, 51.6, 10.0, 0.0, 90.0, 0.0,
        16.4, 0.0, 0.0, 0.01,
    )  # fmt: skip


@pytest.fixture()
def equatorial_circular_elements():
    """Circular, equatorial, high-drag low orbit."""
    return make_elements(
        99997, 2451545.0, 0.0, 10.0, 0.0, 90.0, 0.0,
        16.4, 0.0, 0.0, 0.01,
    )  # fmt: skip


@pytest.fixture()
def sgp8_drag_elements():
    """Low orbit with enough drag for the full SGP8 drag model."""
    return make_elements(
        99996, 2451545.0, 51.6, 10.0, 0.003, 90.0, 0.0,
        16.3, 0.0, 0.0, 0.004,
    )  # fmt: skip


@pytest.fixture()
def long_period_elements():
    """2000-minute orbit, beyond both resonance mean motion bands."""
    return make_elements(
        99995, 2451545.0, 10.0, 0.0, 0.01, 0.0, 0.0,
        1440.0 / 2000.0,
    )  # fmt: skip
