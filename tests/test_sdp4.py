"""Tests for SDP4 against the report test case and python-sgp4."""

import jax
import jax.numpy as jnp
import pytest

from sgpjax.config import get_position_tolerance
from sgpjax.propagators import WGS72, SDP4State, sdp4, sdp4_init, sdp4_kernel

REPORT_SDP4 = [
    (0.0, [7473.37066650, 428.95261765, 5828.74786377], [5.10715413, 6.44468284, -0.18613096]),
    (360.0, [-3305.22537232, 32410.86328125, -24697.17675781], [-1.30113538, -1.15131518, -0.28333528]),
    (720.0, [14271.28759766, 24110.46411133, -4725.76837158], [-0.32050445, 2.67984074, -2.08405289]),
    (1080.0, [-9990.05883789, 22717.35522461, -23616.89062501], [-1.01667246, -2.29026759, 0.72892364]),
    (1440.0, [9787.86975097, 33753.34667969, -15030.81176758], [-1.09425066, 0.92358845, -1.52230928]),
]


class TestSDP4ReportCase:
    @pytest.mark.parametrize("tsince, r_ref, v_ref", REPORT_SDP4)
    def test_matches_report(self, deep_space_elements, tsince, r_ref, v_ref) -> None:
        result = sdp4(deep_space_elements, tsince)
        assert result.ok
        assert result.model == "SDP4"
        assert jnp.allclose(result.position, jnp.array(r_ref), atol=3000.0)
        assert jnp.allclose(result.velocity, jnp.array(v_ref), atol=2.0)


class TestSDP4Reference:
    """Compare against python-sgp4 deep-space propagation with WGS72."""

    @pytest.mark.parametrize("tsince", [0.0, 360.0, 1440.0])
    @pytest.mark.parametrize("fixture", ["deep_space_elements", "molniya_elements", "geo_elements"])
    def test_matches_reference(self, request, reference_satrec, fixture, tsince) -> None:
        elements = request.getfixturevalue(fixture)
        ref = reference_satrec(elements)
        e_ref, r_ref, v_ref = ref.sgp4_tsince(tsince)
        assert e_ref == 0

        result = sdp4(elements, tsince, gravity=WGS72)
        assert result.ok
        assert jnp.allclose(result.position, jnp.array(r_ref), atol=5.0), (
            f"{fixture} position mismatch at {tsince}: {result.position} vs {r_ref}"
        )
        assert jnp.allclose(result.velocity, jnp.array(v_ref), atol=5e-3)


class TestSDP4Kernel:
    def test_init_state(self, deep_space_elements) -> None:
        state = sdp4_init(deep_space_elements)
        assert isinstance(state, SDP4State)
        assert state.deep.irez == 0

    def test_vmap_over_time(self, molniya_elements) -> None:
        state = sdp4_init(molniya_elements)
        times = jnp.linspace(0.0, 2880.0, 9)
        r, v, codes = jax.vmap(sdp4_kernel, in_axes=(None, 0))(state, times)
        assert r.shape == (9, 3)
        assert bool(jnp.all(codes == 0))
        for k in (0, 4, 8):
            r_k, v_k, _ = sdp4_kernel(state, times[k])
            assert jnp.allclose(r[k], r_k, atol=get_position_tolerance())
            assert jnp.allclose(v[k], v_k, atol=1e-9)

    def test_cached_state(self, geo_elements) -> None:
        state = sdp4_init(geo_elements)
        cached = sdp4(geo_elements, 4000.0, init_state=state)
        fresh = sdp4(geo_elements, 4000.0)
        assert jnp.array_equal(cached.position, fresh.position)

    def test_molniya_apogee(self, molniya_elements) -> None:
        state = sdp4_init(molniya_elements)
        times = jnp.linspace(0.0, 720.0, 145)
        r, _, _ = jax.vmap(sdp4_kernel, in_axes=(None, 0))(state, times)
        radii = jnp.linalg.norm(r, axis=1)
        # a ~ 26560 km, e ~ 0.69
        assert float(jnp.max(radii)) == pytest.approx(44800.0, rel=0.02)
        # Perigee passes quickly, so the sampled minimum only bounds it
        assert 6378.0 < float(jnp.min(radii)) < 12000.0

    def test_wrong_state_raises(self, deep_space_elements) -> None:
        from sgpjax.propagators import sgp4_init

        with pytest.raises(TypeError):
            sdp4(deep_space_elements, 0.0, init_state=sgp4_init(deep_space_elements))
