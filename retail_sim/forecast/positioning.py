"""
Price positioning effect.

Shoppers judge a price against a reference (the high-street competitor
price marked up 20%). The effect of sitting above or below that reference
is a multiplier in ``[0, 2]`` applied to baseline demand.

Formula
-------
    signed_delta = price / reference_price - 1
    delta        = |signed_delta|

    base      = 1 - exp(-(delta / SCALE) ** SHAPE)
    bump      = BUMP_AMPLITUDE * delta**2 * exp(-(delta / BUMP_SCALE) ** 2)
    magnitude = min(1, CEILING * base + bump)

    raw    = 1 + magnitude   if signed_delta < 0   (priced below → boost)
           = 1 - magnitude   otherwise             (priced above → penalty)
    effect = clamp(raw, 0, 2)

``base`` is a Weibull-shaped saturating curve: flat near zero, steep around
``SCALE`` (21%), saturating at ``CEILING``. ``bump`` is a narrow positive
term that only matters within a few percent of the reference price; it
models the anchoring "sweet spot" right next to the reference.

At ``price == reference_price`` both terms are 0 and the effect is exactly 1.
"""

from __future__ import annotations

import math

CEILING = 0.95
SHAPE = 3.0
SCALE = 0.21
BUMP_SCALE = 0.08
BUMP_AMPLITUDE = 40.0

EFFECT_MIN = 0.0
EFFECT_MAX = 2.0


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""
    return min(upper, max(lower, value))


def position_magnitude(delta: float) -> float:
    """Return the unsigned effect magnitude in ``[0, 1]`` for ``delta = |p/ref - 1|``."""
    base = 1.0 - math.exp(-((delta / SCALE) ** SHAPE))
    bump = BUMP_AMPLITUDE * delta * delta * math.exp(-((delta / BUMP_SCALE) ** 2))
    return min(1.0, CEILING * base + bump)


def position_effect(price: float, reference_price: float) -> float:
    """Compute the price-positioning demand multiplier.

    Args:
        price:           Retail price being evaluated (> 0).
        reference_price: Price the market anchors on (> 0).

    Returns:
        Multiplier in ``[0, 2]``; exactly ``1.0`` when ``price == reference_price``.

    Raises:
        ValueError: If either price is not strictly positive.
    """
    if price <= 0 or reference_price <= 0:
        raise ValueError(
            f"price and reference_price must be > 0, got {price} and {reference_price}."
        )
    signed_delta = price / reference_price - 1.0
    magnitude = position_magnitude(abs(signed_delta))
    raw = 1.0 + magnitude if signed_delta < 0 else 1.0 - magnitude
    return clamp(raw, EFFECT_MIN, EFFECT_MAX)
