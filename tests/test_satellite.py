"""Tests for the high-level Satellite class."""

import jax.numpy as jnp
import pytest

from sgpjax import Satellite
from sgpjax.config import get_position_tolerance
from sgpjax.propagators import WGS84, PropagationError, SGP8State, sgp4

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"
MOLNIYA_LINE1 = "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813"
MOLNIYA_LINE2 = "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656"


class TestSatelliteProperties:
    def test_from_tle(self) -> None:
        sat = Satellite((ISS_LINE1, ISS_LINE2))
        assert sat.satnum == 25544
        assert sat.model == "SGP4"
        assert sat.n == pytest.approx(15.72125391, rel=1e-12)
        assert sat.e == pytest.approx(0.0006703)
        assert sat.i == pytest.approx(51.6416)
        assert sat.raan == pytest.approx(247.4627)
        assert sat.argp == pytest.approx(130.5360)
        assert sat.M == pytest.approx(325.0288)
        assert sat.bstar == pytest.approx(-0.11606e-4)
        assert sat.period == pytest.approx(91.6, abs=0.3)

    def test_deep_space_selection(self) -> None:
        sat = Satellite((MOLNIYA_LINE1, MOLNIYA_LINE2))
        assert sat.model == "SDP4"
        assert sat.period > 225.0

    def test_explicit_model(self, iss_elements) -> None:
        sat = Satellite(iss_elements, model="sgp8", gravity=WGS84)
        assert sat.model == "SGP8"
        assert isinstance(sat.init_state, SGP8State)
        assert sat.elements is iss_elements

    def test_repr(self, iss_elements) -> None:
        assert repr(Satellite(iss_elements)) == "Satellite(satnum=25544, n=15.72125391 rev/day, model='SGP4')"


class TestSatellitePropagation:
    def test_propagate_matches_function(self, iss_elements) -> None:
        sat = Satellite(iss_elements)
        result = sat.propagate(90.0)
        assert result.ok
        assert result.tsince == 90.0
        assert jnp.array_equal(result.position, sgp4(iss_elements, 90.0).position)

    def test_propagate_batch_shapes(self, iss_elements) -> None:
        sat = Satellite(iss_elements)
        r, v, codes = sat.propagate_batch(jnp.linspace(0.0, 1440.0, 25))
        assert r.shape == (25, 3)
        assert v.shape == (25, 3)
        assert codes.shape == (25,)
        assert bool(jnp.all(codes == 0))

    def test_propagate_batch_scalar(self, iss_elements) -> None:
        r, _, _ = Satellite(iss_elements).propagate_batch(30.0)
        assert r.shape == (1, 3)

    def test_batch_matches_single(self, molniya_elements) -> None:
        sat = Satellite(molniya_elements)
        times = jnp.array([0.0, 500.0, 3000.0])
        r, v, _ = sat.propagate_batch(times)
        for k, t in enumerate(times):
            single = sat.propagate(float(t))
            assert jnp.allclose(r[k], single.position, atol=get_position_tolerance())
            assert jnp.allclose(v[k], single.velocity, atol=1e-9)

    def test_reentry_scan(self, reentry_elements) -> None:
        """A decaying orbit fails partway through a batch without NaNs."""
        sat = Satellite(reentry_elements)
        r, v, codes = sat.propagate_batch(jnp.linspace(0.0, 20000.0, 101))
        assert int(codes[0]) == 0
        assert int(codes[-1]) == int(PropagationError.DECAYED)
        assert bool(jnp.all(jnp.isfinite(r)))
        assert bool(jnp.all(jnp.isfinite(v)))
        failed = codes != 0
        assert bool(jnp.all(jnp.where(failed[:, None], r == 0.0, True)))
        assert bool(jnp.all(jnp.where(failed[:, None], v == 0.0, True)))
