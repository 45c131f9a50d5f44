"""Tests for the error coding shared by every model kernel."""

import jax.numpy as jnp

from sgpjax.propagators import PropagationError, PropagationResult
from sgpjax.propagators._periodics import finalize, mean_elements_decayed

R = jnp.array([6700.0, 0.0, 0.0])
V = jnp.array([0.0, 7.7, 0.0])


class TestFinalize:
    def test_success(self) -> None:
        r, v, code = finalize(R, V, False, 1.0, 1.05)
        assert int(code) == 0
        assert jnp.allclose(r, R)
        assert jnp.allclose(v, V)

    def test_negative_semi_latus_rectum(self) -> None:
        r, v, code = finalize(R, V, False, -1.0, 1.05)
        assert int(code) == 2
        assert jnp.all(r == 0.0)
        assert jnp.all(v == 0.0)
        result = PropagationResult.from_kernel(r, v, code, 10.0, "SGP4")
        assert result.error == PropagationError.NEGATIVE_SEMI_LATUS_RECTUM
        assert result.message == "Semi-latus rectum is negative"
        assert not result.ok

    def test_decay_takes_precedence(self) -> None:
        _, _, code = finalize(R, V, True, -1.0, 1.05)
        assert int(code) == 1

    def test_radius_below_earth(self) -> None:
        r, _, code = finalize(R, V, False, 1.0, 0.99)
        assert int(code) == 1
        assert jnp.all(r == 0.0)

    def test_non_finite_state(self) -> None:
        r, v, code = finalize(R.at[0].set(jnp.nan), V, False, 1.0, 1.05)
        assert int(code) == 1
        assert not bool(jnp.any(jnp.isnan(r)))
        assert jnp.all(v == 0.0)


class TestMeanElementsDecayed:
    def test_limits(self) -> None:
        assert not bool(mean_elements_decayed(1.05, 0.01))
        assert bool(mean_elements_decayed(1.05, 1.0))
        assert bool(mean_elements_decayed(1.05, -0.002))
        assert bool(mean_elements_decayed(0.9, 0.01))
