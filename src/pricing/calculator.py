"""Tiered storage and transport pricing by total volume (m³).

Each tier is the price for any volume up to the tier's volume. Monthly
storage beyond the largest tier is extrapolated with the per-m³ rate between
the two largest tiers; transport beyond the largest tier adds a flat
surcharge per extra m³. Prices are whole pesos.
"""

import math
from typing import NamedTuple


class PriceTier(NamedTuple):
    volume: float
    price: int


STORAGE_TIERS = (
    PriceTier(1, 150_000),
    PriceTier(3, 280_000),
    PriceTier(6, 450_000),
    PriceTier(10, 650_000),
    PriceTier(15, 900_000),
    PriceTier(20, 1_100_000),
)

TRANSPORT_TIERS = (
    PriceTier(3, 120_000),
    PriceTier(6, 180_000),
    PriceTier(10, 250_000),
    PriceTier(15, 320_000),
)

TRANSPORT_SURCHARGE_PER_M3 = 10_000


def _round(amount):
    return math.floor(amount + 0.5)


def _covering_tier(tiers, volume):
    return next((tier for tier in tiers if tier.volume >= volume), None)


def storage_price(volume, tiers=STORAGE_TIERS) -> int:
    """Estimated monthly storage price. Zero for an empty or negative volume."""
    if volume <= 0 or not tiers:
        return 0

    ordered = sorted(tiers)
    tier = _covering_tier(ordered, volume)
    if tier is not None:
        return tier.price

    largest = ordered[-1]
    if len(ordered) < 2:
        return largest.price
    second = ordered[-2]
    volume_diff = largest.volume - second.volume
    if volume_diff <= 0:
        return largest.price

    rate = (largest.price - second.price) / volume_diff
    return _round(largest.price + (volume - largest.volume) * rate)


def transport_price(volume, tiers=TRANSPORT_TIERS, surcharge_per_m3=TRANSPORT_SURCHARGE_PER_M3) -> int:
    """One-off transport price. Zero for an empty or negative volume."""
    if volume <= 0 or not tiers:
        return 0

    ordered = sorted(tiers)
    tier = _covering_tier(ordered, volume)
    if tier is not None:
        return tier.price

    largest = ordered[-1]
    return _round(largest.price + (volume - largest.volume) * surcharge_per_m3)
