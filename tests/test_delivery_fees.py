import json
import math

import pytest

from domain import DeliveryTier
from services.delivery_fees import (
    DEFAULT_DELIVERY_TIERS,
    calc_fee,
    estimate_delivery,
    load_tiers,
    validate_tiers,
)


@pytest.mark.parametrize("distance", [0, 0.5, 2.99, 3])
def test_first_tier_up_to_three_km(distance):
    assert calc_fee(distance, DEFAULT_DELIVERY_TIERS) == 40


@pytest.mark.parametrize("distance", [3.01, 4, 6])
def test_second_tier_up_to_six_km(distance):
    assert calc_fee(distance, DEFAULT_DELIVERY_TIERS) == 60


@pytest.mark.parametrize("distance", [6.01, 10, 250])
def test_unbounded_tier_beyond_six_km(distance):
    assert calc_fee(distance, DEFAULT_DELIVERY_TIERS) == 100


def test_negative_and_missing_distance_use_first_tier():
    assert calc_fee(-5, DEFAULT_DELIVERY_TIERS) == 40
    assert calc_fee(None, DEFAULT_DELIVERY_TIERS) == 40


def test_empty_tiers_cost_nothing():
    assert calc_fee(12, []) == 0


def test_bounded_tail_falls_back_to_last_fee():
    tiers = [DeliveryTier(2, 30), DeliveryTier(5, 50)]
    assert calc_fee(9, tiers) == 50


def test_validate_tiers_rejects_bad_tables():
    with pytest.raises(ValueError):
        validate_tiers([])
    with pytest.raises(ValueError):
        validate_tiers([DeliveryTier(6, 60), DeliveryTier(3, 40), DeliveryTier(math.inf, 100)])
    with pytest.raises(ValueError):
        validate_tiers([DeliveryTier(3, 40), DeliveryTier(6, 60)])
    validate_tiers(DEFAULT_DELIVERY_TIERS)


def test_load_tiers_sorts_and_accepts_open_ended_tier():
    raw = json.dumps(
        [
            {"maxKm": None, "fee": 120},
            {"maxKm": 10, "fee": 80},
            {"maxKm": 3, "fee": 40},
        ]
    )
    tiers = load_tiers(raw)
    assert [t.fee for t in tiers] == [40, 80, 120]
    assert tiers[-1].is_unbounded
    assert calc_fee(7, tiers) == 80


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps({"maxKm": 3, "fee": 40}),
        json.dumps([{"maxKm": 3, "fee": 40}]),
        json.dumps([{"maxKm": "far", "fee": 40}]),
        json.dumps([{"maxKm": None, "fee": 9.5}]),
    ],
)
def test_load_tiers_falls_back_on_malformed_input(raw):
    assert load_tiers(raw) == list(DEFAULT_DELIVERY_TIERS)


def test_load_tiers_defaults_when_unset():
    assert load_tiers(None) == list(DEFAULT_DELIVERY_TIERS)


def test_estimate_delivery():
    assert estimate_delivery(4, DEFAULT_DELIVERY_TIERS) == {"distance_km": 4.0, "fee": 60}
    assert estimate_delivery(None, DEFAULT_DELIVERY_TIERS) == {"distance_km": 0.0, "fee": 40}
