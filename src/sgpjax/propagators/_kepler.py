"""
Kepler's equation in the equinoctial form used by every propagation model.

The models never solve for the eccentric anomaly directly. After the
long-period corrections they hold the mean longitude measured from the node
(``capu``) and the eccentricity vector ``(axn, ayn)`` referred to the node,
and need the eccentric longitude ``epw`` satisfying

    capu = epw + ayn * cos(epw) - axn * sin(epw)

The solver is plain Newton-Raphson with two safeguards from the report: the
step is clamped to +/-0.95 rad and the iteration count is capped at 10. It
therefore always terminates with a finite answer, converged or not.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from sgpjax.constants import KEPLER_MAX_ITERATIONS, KEPLER_MAX_STEP, KEPLER_TOLERANCE


def kepler_iterate(capu: ArrayLike, axn: ArrayLike, ayn: ArrayLike) -> tuple[Array, Array]:
    """Solve Kepler's equation and report the number of Newton steps taken.

    Args:
        capu: Mean longitude from the ascending node [rad].
        axn: Eccentricity vector component along the node line.
        ayn: Eccentricity vector component normal to the node line.

    Returns:
        Tuple of ``(epw, iterations)``: the eccentric longitude [rad] and the
        number of Newton steps (1 to 10).
    """
    dtype = jnp.result_type(capu, axn, ayn, float)
    capu = jnp.asarray(capu, dtype=dtype)
    axn = jnp.asarray(axn, dtype=dtype)
    ayn = jnp.asarray(ayn, dtype=dtype)

    def _cond(state):
        i, _, step = state
        return (i < KEPLER_MAX_ITERATIONS) & (jnp.abs(step) >= KEPLER_TOLERANCE)

    def _body(state):
        i, eo1, _ = state
        sineo1 = jnp.sin(eo1)
        coseo1 = jnp.cos(eo1)
        tem5 = 1.0 - coseo1 * axn - sineo1 * ayn
        tem5 = (capu - ayn * coseo1 + axn * sineo1 - eo1) / tem5
        tem5 = jnp.clip(tem5, -KEPLER_MAX_STEP, KEPLER_MAX_STEP)
        return i + 1, eo1 + tem5, tem5

    init = (jnp.asarray(0, dtype=jnp.int32), capu, jnp.ones_like(capu))
    iterations, epw, _ = jax.lax.while_loop(_cond, _body, init)
    return epw, iterations


def solve_kepler(capu: ArrayLike, axn: ArrayLike, ayn: ArrayLike) -> Array:
    """Solve Kepler's equation for the eccentric longitude.

    Args:
        capu: Mean longitude from the ascending node [rad].
        axn: Eccentricity vector component along the node line.
        ayn: Eccentricity vector component normal to the node line.

    Returns:
        Eccentric longitude ``epw`` [rad].

    Examples:
        ```python
        from sgpjax.propagators import solve_kepler

        epw = solve_kepler(1.0, 0.1, 0.05)
        ```
    """
    epw, _ = kepler_iterate(capu, axn, ayn)
    return epw
