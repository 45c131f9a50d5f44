"""High-level satellite class.

Provides :class:`Satellite`, a convenience wrapper that combines element
decoding, model selection, initialization and propagation into a single
object with user-friendly properties.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import RAD2DEG, REVDAY2RADMIN
from sgpjax.propagators._dispatch import InitState, initialize, model_of, resolve_model
from sgpjax.propagators._gravity import DEFAULT_GRAVITY, EarthGravity, resolve_gravity
from sgpjax.propagators._recovery import orbital_period, recover_mean_motion
from sgpjax.propagators._tle import parse_tle
from sgpjax.propagators._types import OrbitalElements, PropagationResult, as_time


class Satellite:
    """One satellite with a cached model init state.

    Examples:
        ```python
        from sgpjax import Satellite

        line1 = "1 25544U 98067A   08264.51782528 ..."
        line2 = "2 25544  51.6416 247.4627 ..."
        sat = Satellite((line1, line2))

        sat.model       # "SGP4"
        sat.period      # minutes

        result = sat.propagate(60.0)
        result.position  # km

        r, v, codes = sat.propagate_batch(jnp.linspace(0.0, 1440.0, 97))
        ```

    Args:
        elements: Mean elements, or a ``(line1, line2)`` TLE pair.
        model: Model name. Selected from the orbital period when omitted.
        gravity: Gravity model name or :class:`EarthGravity` instance.
    """

    def __init__(
        self,
        elements: OrbitalElements | tuple[str, str],
        model: str | None = None,
        gravity: str | EarthGravity = DEFAULT_GRAVITY,
    ) -> None:
        if not isinstance(elements, OrbitalElements):
            line1, line2 = elements
            elements = parse_tle(line1, line2)
        self._elements: OrbitalElements = elements
        self._gravity: EarthGravity = resolve_gravity(gravity)
        self._state: InitState = initialize(elements, model, self._gravity)
        self._model: str = model_of(self._state)
        self._kernel = resolve_model(self._model).kernel
        self._batch_kernel = jax.jit(jax.vmap(self._kernel, in_axes=(None, 0)))

    # ------------------------------------------------------------------
    # Properties (user-friendly units)
    # ------------------------------------------------------------------

    @property
    def elements(self) -> OrbitalElements:
        return self._elements

    @property
    def satnum(self) -> int:
        """Catalog number."""
        return self._elements.satnum

    @property
    def model(self) -> str:
        """Name of the model in use."""
        return self._model

    @property
    def init_state(self) -> InitState:
        """Cached model init state (for advanced use)."""
        return self._state

    @property
    def n(self) -> float:
        """Mean motion as encoded [rev/day]."""
        return self._elements.no_kozai / REVDAY2RADMIN

    @property
    def e(self) -> float:
        """Eccentricity [dimensionless]."""
        return self._elements.ecco

    @property
    def i(self) -> float:
        """Inclination [degrees]."""
        return self._elements.inclo * RAD2DEG

    @property
    def raan(self) -> float:
        """Right ascension of ascending node [degrees]."""
        return self._elements.nodeo * RAD2DEG

    @property
    def argp(self) -> float:
        """Argument of perigee [degrees]."""
        return self._elements.argpo * RAD2DEG

    @property
    def M(self) -> float:
        """Mean anomaly [degrees]."""
        return self._elements.mo * RAD2DEG

    @property
    def bstar(self) -> float:
        """B* drag coefficient [1/earth_radii]."""
        return self._elements.bstar

    @property
    def period(self) -> float:
        """Orbital period from the recovered mean motion [min]."""
        return orbital_period(recover_mean_motion(self._elements, self._gravity).xnodp)

    # ------------------------------------------------------------------
    # Propagation (km, km/s)
    # ------------------------------------------------------------------

    def propagate(self, tsince: float) -> PropagationResult:
        """Propagate to one time since epoch.

        Args:
            tsince: Time since epoch [min].

        Returns:
            The propagation result.
        """
        r, v, code = self._kernel(self._state, as_time(tsince))
        return PropagationResult.from_kernel(r, v, code, tsince, self._model)

    def propagate_batch(self, tsince: ArrayLike) -> tuple[Array, Array, Array]:
        """Propagate to many times at once with ``jax.vmap``.

        Args:
            tsince: 1-D array of times since epoch [min].

        Returns:
            Tuple ``(r, v, codes)`` with shapes ``(N, 3)``, ``(N, 3)`` and
            ``(N,)``. Failed rows are zero with a non-zero code.
        """
        return self._batch_kernel(self._state, as_time(jnp.atleast_1d(tsince)))

    def __repr__(self) -> str:
        return f"Satellite(satnum={self.satnum}, n={self.n:.8f} rev/day, model={self._model!r})"
