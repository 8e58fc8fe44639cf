"""
Tests for retail_sim/forecast/positioning.py.

What we test
------------
position_effect():
  - Exactly 1.0 at price == reference_price, for several references.
  - Pricing below the reference boosts demand (> 1); above penalises (< 1).
  - Always within [0, 2], including extreme price ratios.
  - Saturates at 1 - CEILING when priced far above the reference.
  - Raises ValueError for non-positive price or reference.

position_magnitude():
  - 0 at zero delta, capped at 1.
  - The anchoring bump lifts the magnitude near the reference above the
    plain saturating curve.
"""

from __future__ import annotations

import math

import pytest

from retail_sim.forecast.positioning import (
    CEILING,
    EFFECT_MAX,
    EFFECT_MIN,
    SCALE,
    SHAPE,
    clamp,
    position_effect,
    position_magnitude,
)


# ── position_effect ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("ref", [0.01, 1.0, 60.0, 96.0, 12_345.67])
def test_neutral_at_reference(ref: float) -> None:
    assert position_effect(ref, ref) == 1.0


def test_below_reference_boosts() -> None:
    assert position_effect(80.0, 96.0) > 1.0


def test_above_reference_penalises() -> None:
    assert position_effect(120.0, 96.0) < 1.0


@pytest.mark.parametrize("ratio", [0.001, 0.1, 0.5, 0.9, 0.97, 1.03, 1.1, 1.5, 3.0, 50.0])
def test_effect_within_bounds(ratio: float) -> None:
    effect = position_effect(96.0 * ratio, 96.0)
    assert EFFECT_MIN <= effect <= EFFECT_MAX


def test_far_above_reference_saturates() -> None:
    """At double the reference the bump has vanished and base ~ 1."""
    effect = position_effect(192.0, 96.0)
    assert effect == pytest.approx(1.0 - CEILING, abs=1e-6)


def test_symmetric_magnitude_around_reference() -> None:
    """Same |delta| above and below gives mirror-image effects."""
    above = position_effect(110.0, 100.0)
    below = position_effect(90.0, 100.0)
    assert (above - 1.0) == pytest.approx(-(below - 1.0))


@pytest.mark.parametrize("price,ref", [(0.0, 96.0), (-5.0, 96.0), (96.0, 0.0), (96.0, -1.0)])
def test_non_positive_inputs_raise(price: float, ref: float) -> None:
    with pytest.raises(ValueError, match="must be > 0"):
        position_effect(price, ref)


# ── position_magnitude ────────────────────────────────────────────────────────

def test_magnitude_zero_at_zero_delta() -> None:
    assert position_magnitude(0.0) == 0.0


def test_magnitude_capped_at_one() -> None:
    for delta in (0.05, 0.2, 0.5, 1.0, 10.0):
        assert 0.0 <= position_magnitude(delta) <= 1.0


def test_bump_lifts_magnitude_near_reference() -> None:
    delta = 0.05
    plain = CEILING * (1.0 - math.exp(-((delta / SCALE) ** SHAPE)))
    assert position_magnitude(delta) > plain


def test_clamp() -> None:
    assert clamp(-1.0, 0.0, 2.0) == 0.0
    assert clamp(3.0, 0.0, 2.0) == 2.0
    assert clamp(1.25, 0.0, 2.0) == 1.25
