# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "sgpjax"]
#
# [tool.uv.sources]
# sgpjax = { path = ".." }
# ///
"""Propagate every satellite in a TLE file over a time grid.

Reads two-line element sets from a text file (optional name lines are
skipped), initializes each satellite with its period-selected model (or the
model given with ``--model``), stacks the init states of each model into a
single pytree and propagates them with ``vmap`` over satellites and times.

Requires sgpjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/propagate.py TLE_FILE [OPTIONS]

Examples:
    # One day at one-minute steps with the default models
    uv run examples/propagate.py stations.txt --duration 1.0 --timestep 60

    # Force SGP8 for every satellite
    uv run examples/propagate.py stations.txt --model SGP8
"""

import time
from collections import defaultdict
from pathlib import Path
from typing import Annotated

import jax
import jax.numpy as jnp
import typer

from sgpjax import set_dtype
from sgpjax.propagators import MODELS, initialize, model_of, parse_tle

set_dtype(jnp.float64)  # Must be before any JIT compilation


def read_tle_file(path: Path) -> list[tuple[str, str]]:
    """Collect ``(line1, line2)`` pairs, ignoring name and blank lines."""
    lines = [line.rstrip() for line in path.read_text().splitlines()]
    pairs = []
    for k, line in enumerate(lines[:-1]):
        if line.startswith("1 ") and lines[k + 1].startswith("2 "):
            pairs.append((line, lines[k + 1]))
    return pairs


def stack_states(states):
    """Stack init states of one model into a single batched pytree."""
    return jax.tree.map(lambda *leaves: jnp.stack([jnp.asarray(x) for x in leaves]), *states)


def main(
    tle_file: Annotated[Path, typer.Argument(help="File of two-line element sets")],
    model: Annotated[str | None, typer.Option(help="Force a model (SGP, SGP4, SGP8, SDP4, SDP8)")] = None,
    gravity: Annotated[str, typer.Option(help="Gravity model (wgs72old, wgs72, wgs84)")] = "wgs72old",
    timestep: Annotated[float, typer.Option(help="Propagation timestep in seconds")] = 60.0,
    duration: Annotated[float, typer.Option(help="Propagation duration in days")] = 1.0,
    validate: Annotated[bool, typer.Option(help="Verify TLE checksums")] = True,
) -> None:
    """Propagate all satellites in TLE_FILE."""
    pairs = read_tle_file(tle_file)
    print(f"Read {len(pairs)} element sets from {tle_file}")

    # ── Stage 1: Python-time initialization, grouped by model ────────────
    t0 = time.perf_counter()
    groups = defaultdict(list)
    n_failures = 0
    for line1, line2 in pairs:
        try:
            state = initialize(parse_tle(line1, line2, validate=validate), model, gravity)
        except ValueError as exc:
            n_failures += 1
            print(f"  Skipping {line1[2:7]}: {exc}")
            continue
        groups[model_of(state)].append(state)
    print(f"Initialized {len(pairs) - n_failures} satellites in {time.perf_counter() - t0:.1f}s")
    for name, states in groups.items():
        print(f"  {name}: {len(states)}")

    # ── Stage 2: vmap over satellites and times, one compile per model ───
    tsince = jnp.arange(0.0, duration * 1440.0, timestep / 60.0)
    print(f"Propagating over {tsince.shape[0]} timesteps")

    for name, states in groups.items():
        kernel = MODELS[name].kernel
        propagate = jax.jit(jax.vmap(jax.vmap(kernel, in_axes=(None, 0)), in_axes=(0, None)))
        batch = stack_states(states)

        t0 = time.perf_counter()
        r, v, codes = propagate(batch, tsince)
        r.block_until_ready()
        elapsed = time.perf_counter() - t0

        n_evals = len(states) * tsince.shape[0]
        n_failed = int(jnp.sum(jnp.any(codes != 0, axis=1)))
        print(f"  {name}: {n_evals:,} evaluations in {elapsed:.2f}s, {n_failed} satellites failed")

    print("\nDone.")


if __name__ == "__main__":
    typer.run(main)
