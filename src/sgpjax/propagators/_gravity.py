"""
Earth gravity constants for the Spacetrack Report No. 3 propagators.

Provides three standard gravity models: WGS72OLD, WGS72, and WGS84. The
report itself, and its test vectors, use WGS72OLD, which is therefore the
default everywhere in sgpjax.

Besides the raw harmonics, ``EarthGravity`` exposes the derived quantities
the report works with (``ck2``, ``ck4``, ``a3ovk2``, ``qoms2t``, ``s``).
They are properties rather than fields, so they stay consistent with the
harmonics and are still available when an ``EarthGravity`` travels through
``jax.jit`` as a pytree.
"""

from math import sqrt
from typing import NamedTuple


class EarthGravity(NamedTuple):
    """Earth gravity model constants.

    Attributes:
        tumin: Time units per minute (1/xke).
        mu: Gravitational parameter [km^3/s^2].
        radiusearthkm: Earth equatorial radius [km].
        xke: sqrt(GM) in Earth radii^1.5 per minute.
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        j3oj2: Ratio j3/j2.
    """

    tumin: float
    mu: float
    radiusearthkm: float
    xke: float
    j2: float
    j3: float
    j4: float
    j3oj2: float

    @property
    def ck2(self):
        """Half the second zonal harmonic, ``J2/2``."""
        return 0.5 * self.j2

    @property
    def ck4(self):
        """``-3/8 J4``."""
        return -0.375 * self.j4

    @property
    def a3ovk2(self):
        """``-J3/ck2``, the odd-harmonic coefficient of the long-period terms."""
        return -self.j3 / self.ck2

    @property
    def qoms2t(self):
        """``(q0 - s0)^4`` for the standard density parameters (120 km, 78 km)."""
        return ((120.0 - 78.0) / self.radiusearthkm) ** 4

    @property
    def s(self):
        """Density function parameter ``s0``, 78 km above the surface [Earth radii]."""
        return 78.0 / self.radiusearthkm + 1.0

    @property
    def vkmpersec(self):
        """Conversion from Earth radii per minute to km/s."""
        return self.radiusearthkm * self.xke / 60.0


def _gravity(mu: float, re: float, j2: float, j3: float, j4: float, xke: float | None = None):
    if xke is None:
        xke = 60.0 / sqrt(re**3 / mu)
    return EarthGravity(
        tumin=1.0 / xke,
        mu=mu,
        radiusearthkm=re,
        xke=xke,
        j2=j2,
        j3=j3,
        j4=j4,
        j3oj2=j3 / j2,
    )


WGS72OLD = _gravity(
    mu=398600.79964,
    re=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    xke=0.0743669161,
)
"""WGS 72 Old gravity model, as used by Spacetrack Report No. 3."""

WGS72 = _gravity(
    mu=398600.8,
    re=6378.135,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
)
"""WGS 72 gravity model."""

WGS84 = _gravity(
    mu=398600.5,
    re=6378.137,
    j2=0.00108262998905,
    j3=-0.00000253215306,
    j4=-0.00000161098761,
)
"""WGS 84 gravity model."""

DEFAULT_GRAVITY = WGS72OLD
"""Gravity model used when none is given."""

GRAVITY_MODELS = {
    "wgs72old": WGS72OLD,
    "wgs72": WGS72,
    "wgs84": WGS84,
}
"""Mapping of gravity model names to ``EarthGravity`` instances."""


def resolve_gravity(gravity: "str | EarthGravity") -> EarthGravity:
    """Return an ``EarthGravity`` for a model name or instance.

    Args:
        gravity: Gravity model name (case-insensitive key of
            ``GRAVITY_MODELS``) or an ``EarthGravity`` instance.

    Returns:
        The matching ``EarthGravity``.

    Raises:
        ValueError: If *gravity* is an unknown model name.
    """
    if isinstance(gravity, EarthGravity):
        return gravity
    try:
        return GRAVITY_MODELS[gravity.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown gravity model {gravity!r}. Must be one of: {', '.join(GRAVITY_MODELS)}"
        ) from None
