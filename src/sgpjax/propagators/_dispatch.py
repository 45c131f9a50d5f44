"""
Model selection and the generic initialize/evaluate entry points.

Every model exposes the same three pieces: a Python-time init function, a
jitted kernel and an init-state NamedTuple type. ``MODELS`` registers them
by name so callers can pick a model at runtime, either explicitly or by the
orbital period of the element set (SGP4 below 225 minutes, SDP4 from 225
minutes on).
"""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple, Union

from sgpjax.constants import DEEP_SPACE_PERIOD
from sgpjax.propagators._gravity import DEFAULT_GRAVITY, EarthGravity, resolve_gravity
from sgpjax.propagators._recovery import orbital_period, recover_mean_motion
from sgpjax.propagators._sdp4 import SDP4State, sdp4_init, sdp4_kernel
from sgpjax.propagators._sdp8 import SDP8State, sdp8_init, sdp8_kernel
from sgpjax.propagators._sgp import SGPState, sgp_init, sgp_kernel
from sgpjax.propagators._sgp4 import SGP4State, sgp4_init, sgp4_kernel
from sgpjax.propagators._sgp8 import SGP8State, sgp8_init, sgp8_kernel
from sgpjax.propagators._types import (
    MODEL_NAMES,
    OrbitalElements,
    PropagationResult,
    as_time,
    check_init_state,
)

logger = logging.getLogger(__name__)

InitState = Union[SGPState, SGP4State, SGP8State, SDP4State, SDP8State]
"""Init state of any of the five models."""


class ModelSpec(NamedTuple):
    """Registry entry of one propagation model.

    Attributes:
        name: Model name (``"SGP4"``, ...).
        init: ``(elements, gravity) -> state`` init function.
        kernel: Jitted ``(state, tsince) -> (r, v, code)`` kernel.
        state_type: NamedTuple type of the init state.
        deep_space: Whether the model includes lunar-solar terms.
    """

    name: str
    init: Callable
    kernel: Callable
    state_type: type
    deep_space: bool


MODELS: dict[str, ModelSpec] = {
    "SGP": ModelSpec("SGP", sgp_init, sgp_kernel, SGPState, False),
    "SGP4": ModelSpec("SGP4", sgp4_init, sgp4_kernel, SGP4State, False),
    "SGP8": ModelSpec("SGP8", sgp8_init, sgp8_kernel, SGP8State, False),
    "SDP4": ModelSpec("SDP4", sdp4_init, sdp4_kernel, SDP4State, True),
    "SDP8": ModelSpec("SDP8", sdp8_init, sdp8_kernel, SDP8State, True),
}
"""Mapping of model names to their registry entries."""


def resolve_model(model: str) -> ModelSpec:
    """Look up a model by name (case-insensitive).

    Raises:
        ValueError: If *model* is not one of the five model names.
    """
    spec = MODELS.get(str(model).upper())
    if spec is None:
        raise ValueError(f"Unknown model '{model}'. Must be one of: {', '.join(MODEL_NAMES)}")
    return spec


def model_for_period(period: float) -> str:
    """Default model for an orbital period in minutes.

    Periods under 225 minutes use SGP4; 225 minutes and above use SDP4.
    """
    return "SGP4" if period < DEEP_SPACE_PERIOD else "SDP4"


def select_model(elements: OrbitalElements, gravity: str | EarthGravity = DEFAULT_GRAVITY) -> str:
    """Default model for an element set, from its recovered period.

    Args:
        elements: Mean elements.
        gravity: Gravity constants or model name.

    Returns:
        ``"SGP4"`` or ``"SDP4"``.
    """
    rec = recover_mean_motion(elements, resolve_gravity(gravity))
    return model_for_period(orbital_period(rec.xnodp))


def model_of(init_state: InitState) -> str:
    """Name of the model that produced *init_state*.

    Raises:
        TypeError: If *init_state* is not a model init state.
    """
    for spec in MODELS.values():
        if isinstance(init_state, spec.state_type):
            return spec.name
    raise TypeError(f"Not a propagation model init state: {type(init_state).__name__}")


def initialize(
    elements: OrbitalElements,
    model: str | None = None,
    gravity: str | EarthGravity = DEFAULT_GRAVITY,
) -> InitState:
    """Initialize a model for one satellite.

    Args:
        elements: Mean elements.
        model: Model name. Selected from the orbital period when omitted.
        gravity: Gravity constants or model name.

    Returns:
        The model's init state, reusable for any number of evaluations.

    Raises:
        ValueError: If *model* or *gravity* is unknown.
    """
    gravity = resolve_gravity(gravity)
    if model is None:
        model = select_model(elements, gravity)
    spec = resolve_model(model)
    logger.debug("Initializing %s for satellite %s", spec.name, elements.satnum)
    return spec.init(elements, gravity)


def evaluate(
    elements: OrbitalElements,
    tsince: float,
    init_state: InitState | None = None,
    model: str | None = None,
    gravity: str | EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Evaluate a model at one time since epoch.

    Args:
        elements: Mean elements.
        tsince: Time since epoch [min].
        init_state: Cached output of :func:`initialize`. Computed when omitted.
        model: Model name. Taken from *init_state* when given, else selected
            from the orbital period.
        gravity: Gravity constants or model name, used only when
            *init_state* is omitted.

    Returns:
        The propagation result.

    Raises:
        ValueError: If *model* is unknown.
        TypeError: If *init_state* does not belong to *model*.
    """
    if init_state is None:
        init_state = initialize(elements, model, gravity)
        spec = resolve_model(model_of(init_state))
    elif model is None:
        spec = resolve_model(model_of(init_state))
    else:
        spec = resolve_model(model)
        check_init_state(init_state, spec.state_type, spec.name)
    r, v, code = spec.kernel(init_state, as_time(tsince))
    return PropagationResult.from_kernel(r, v, code, tsince, spec.name)


def dispatch(
    elements: OrbitalElements,
    tsince: float,
    gravity: str | EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Evaluate the period-selected default model (SGP4 or SDP4)."""
    return evaluate(elements, tsince, gravity=gravity)


def dispatch_with_model(
    elements: OrbitalElements,
    tsince: float,
    model_name: str,
    gravity: str | EarthGravity = DEFAULT_GRAVITY,
) -> PropagationResult:
    """Evaluate an explicitly named model, bypassing period selection.

    Raises:
        ValueError: If *model_name* is unknown.
    """
    return evaluate(elements, tsince, model=model_name, gravity=gravity)
