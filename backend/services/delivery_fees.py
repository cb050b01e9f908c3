import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from domain import DeliveryTier

logger = logging.getLogger("food-orders")

# Upper bound is inclusive; the last tier is the catch-all.
DEFAULT_DELIVERY_TIERS = (
    DeliveryTier(max_distance_km=3, fee=40),
    DeliveryTier(max_distance_km=6, fee=60),
    DeliveryTier(max_distance_km=math.inf, fee=100),
)


def _to_distance(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or value < 0:
        return 0.0
    return float(value)


def calc_fee(distance_km: Optional[float], tiers: Sequence[DeliveryTier]) -> int:
    if not tiers:
        return 0
    distance = _to_distance(distance_km)
    for tier in tiers:
        if distance <= tier.max_distance_km:
            return tier.fee
    return tiers[-1].fee


def validate_tiers(tiers: Sequence[DeliveryTier]) -> None:
    if not tiers:
        raise ValueError("Delivery tiers must not be empty")
    previous: Optional[float] = None
    for tier in tiers:
        if tier.fee < 0:
            raise ValueError(f"Delivery fee must be non-negative, got {tier.fee}")
        if previous is not None and tier.max_distance_km <= previous:
            raise ValueError("Delivery tiers must be sorted by increasing distance")
        previous = tier.max_distance_km
    if not tiers[-1].is_unbounded:
        raise ValueError("The last delivery tier must have no distance limit")


def _parse_tier(raw: Dict[str, Any]) -> DeliveryTier:
    max_km = raw.get("maxKm")
    fee = raw.get("fee")
    if max_km is None:
        max_km = math.inf
    if isinstance(max_km, bool) or not isinstance(max_km, (int, float)):
        raise ValueError(f"Invalid maxKm: {max_km!r}")
    if isinstance(fee, bool) or not isinstance(fee, int):
        raise ValueError(f"Invalid fee: {fee!r}")
    return DeliveryTier(max_distance_km=float(max_km), fee=fee)


def load_tiers(raw_json: Optional[str]) -> List[DeliveryTier]:
    """Build the tier table from ``DELIVERY_TIERS_JSON``.

    The value is a JSON list such as ``[{"maxKm": 3, "fee": 40}, {"maxKm": null, "fee": 100}]``.
    A missing ``maxKm`` marks the unbounded tier. Anything malformed falls back
    to the defaults.
    """
    if not raw_json:
        return list(DEFAULT_DELIVERY_TIERS)
    try:
        parsed = json.loads(raw_json)
        if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
            raise ValueError("expected a list of objects")
        tiers = sorted((_parse_tier(item) for item in parsed), key=lambda t: t.max_distance_km)
        validate_tiers(tiers)
    except ValueError as exc:
        logger.warning("Ignoring malformed DELIVERY_TIERS_JSON, using defaults: %s", exc)
        return list(DEFAULT_DELIVERY_TIERS)
    return tiers


def estimate_delivery(distance_km: Optional[float], tiers: Sequence[DeliveryTier]) -> Dict[str, Any]:
    distance = _to_distance(distance_km)
    return {"distance_km": distance, "fee": calc_fee(distance, tiers)}
