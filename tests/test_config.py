"""Tests for the sgpjax.config module."""

import jax
import jax.numpy as jnp
import pytest

from sgpjax.config import get_dtype, get_position_tolerance, set_dtype
from sgpjax.propagators import sgp4


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float32 before and after each test."""
    set_dtype(jnp.float32)
    yield
    set_dtype(jnp.float32)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float32

    def test_set_float64(self):
        set_dtype(jnp.float64)
        assert get_dtype() == jnp.float64

    def test_set_float16(self):
        set_dtype(jnp.float16)
        assert get_dtype() == jnp.float16

    def test_set_bfloat16(self):
        set_dtype(jnp.bfloat16)
        assert get_dtype() == jnp.bfloat16

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestPositionTolerance:
    def test_float32_tolerance(self):
        assert get_position_tolerance() == 1e-2

    def test_float64_tolerance(self):
        set_dtype(jnp.float64)
        assert get_position_tolerance() == 1e-6

    def test_float16_tolerance(self):
        set_dtype(jnp.float16)
        assert get_position_tolerance() == 10.0

    def test_bfloat16_tolerance(self):
        set_dtype(jnp.bfloat16)
        assert get_position_tolerance() == 10.0


class TestDtypeSwitchingOutputs:
    """Verify that propagation follows the configured dtype."""

    def test_sgp4_float64(self, near_earth_elements):
        set_dtype(jnp.float64)
        result = sgp4(near_earth_elements, 360.0)
        assert result.position.dtype == jnp.float64

    def test_sgp4_float32_close_to_float64(self, near_earth_elements):
        set_dtype(jnp.float64)
        r64 = sgp4(near_earth_elements, 720.0).position
        set_dtype(jnp.float32)
        r32 = sgp4(near_earth_elements, 720.0).position
        assert r32.dtype == jnp.float32
        # Single precision keeps about seven digits of a ~7000 km radius
        assert jnp.allclose(r32, r64.astype(jnp.float32), atol=1.0)
