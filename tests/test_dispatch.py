"""Tests for model selection and the generic entry points."""

import jax.numpy as jnp
import pytest

from sgpjax.propagators import (
    MODEL_NAMES,
    MODELS,
    SDP4State,
    SGP4State,
    SGPState,
    dispatch,
    dispatch_with_model,
    evaluate,
    initialize,
    model_for_period,
    model_of,
    resolve_model,
    sdp4,
    select_model,
    sgp4,
)


class TestModelSelection:
    def test_period_boundary(self) -> None:
        assert model_for_period(224.999) == "SGP4"
        assert model_for_period(225.0) == "SDP4"
        assert model_for_period(90.0) == "SGP4"
        assert model_for_period(1436.0) == "SDP4"

    def test_select_model(self, near_earth_elements, deep_space_elements, geo_elements) -> None:
        assert select_model(near_earth_elements) == "SGP4"
        assert select_model(deep_space_elements) == "SDP4"
        assert select_model(geo_elements, "wgs84") == "SDP4"

    def test_registry(self) -> None:
        assert tuple(MODELS) == MODEL_NAMES
        assert MODELS["SDP8"].deep_space
        assert not MODELS["SGP"].deep_space

    def test_resolve_is_case_insensitive(self) -> None:
        assert resolve_model("sgp8").name == "SGP8"

    def test_resolve_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown model"):
            resolve_model("SGP5")


class TestInitialize:
    def test_default_near_earth(self, iss_elements) -> None:
        assert isinstance(initialize(iss_elements), SGP4State)

    def test_default_deep_space(self, deep_space_elements) -> None:
        assert isinstance(initialize(deep_space_elements), SDP4State)

    def test_explicit_model(self, iss_elements) -> None:
        state = initialize(iss_elements, "SGP")
        assert isinstance(state, SGPState)
        assert model_of(state) == "SGP"

    def test_unknown_gravity_raises(self, iss_elements) -> None:
        with pytest.raises(ValueError):
            initialize(iss_elements, gravity="grs80")

    def test_model_of_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError):
            model_of((1.0, 2.0))


class TestEvaluate:
    def test_uses_cached_state(self, iss_elements) -> None:
        state = initialize(iss_elements)
        result = evaluate(iss_elements, 300.0, init_state=state)
        assert result.model == "SGP4"
        assert jnp.array_equal(result.position, sgp4(iss_elements, 300.0).position)

    def test_mismatched_state_raises(self, iss_elements) -> None:
        state = initialize(iss_elements, "SGP8")
        with pytest.raises(TypeError):
            evaluate(iss_elements, 0.0, init_state=state, model="SGP4")

    def test_model_and_state_agree(self, deep_space_elements) -> None:
        state = initialize(deep_space_elements, "SDP8")
        result = evaluate(deep_space_elements, 60.0, init_state=state, model="sdp8")
        assert result.model == "SDP8"
        assert result.ok


class TestDispatch:
    def test_near_earth_uses_sgp4(self, near_earth_elements) -> None:
        result = dispatch(near_earth_elements, 720.0)
        assert result.model == "SGP4"
        assert jnp.array_equal(result.position, sgp4(near_earth_elements, 720.0).position)

    def test_deep_space_uses_sdp4(self, deep_space_elements) -> None:
        result = dispatch(deep_space_elements, 720.0)
        assert result.model == "SDP4"
        assert jnp.array_equal(result.position, sdp4(deep_space_elements, 720.0).position)

    @pytest.mark.parametrize("model", MODEL_NAMES)
    def test_with_model(self, near_earth_elements, model) -> None:
        """Any model can be forced, including deep-space ones on a LEO orbit."""
        result = dispatch_with_model(near_earth_elements, 360.0, model)
        assert result.model == model
        assert result.ok
        assert 6500.0 < float(jnp.linalg.norm(result.position)) < 7000.0

    def test_with_unknown_model_raises(self, near_earth_elements) -> None:
        with pytest.raises(ValueError):
            dispatch_with_model(near_earth_elements, 0.0, "HPOP")

    def test_gravity_name(self, iss_elements) -> None:
        r72 = dispatch(iss_elements, 1440.0, gravity="wgs72").position
        r84 = dispatch(iss_elements, 1440.0, gravity="wgs84").position
        assert not jnp.array_equal(r72, r84)
        assert float(jnp.linalg.norm(r72 - r84)) < 10.0
