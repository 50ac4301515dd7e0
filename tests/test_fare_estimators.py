import math

import pytest

from fares.estimators import LocalFareEstimator, clamp_non_negative, ola_estimator, uber_estimator
from fares.models import ProviderId, Route
from fares.policy import ProviderTariff, TierTariff, default_ola_tariff


def expected_total(fare):
    return (fare.base_fare + fare.distance_fare + fare.time_fare) * fare.surge_multiplier + fare.platform_fee + fare.taxes


def test_ola_mini_ten_km_twenty_minutes(ten_km_route):
    """
    10 km is not above the 10 km threshold, so Mini applies.
    """
    estimate = ola_estimator().estimate(ten_km_route, surge=1.0)
    fare = estimate.fare

    assert estimate.provider_id is ProviderId.OLA
    assert estimate.vehicle_class == "Mini"
    assert fare.base_fare == 25
    assert fare.distance_fare == pytest.approx(88)
    assert fare.time_fare == pytest.approx(30)
    assert fare.platform_fee == 5
    assert fare.taxes == pytest.approx(7.15)
    assert fare.total == pytest.approx(155.15)
    assert estimate.eta_text == "20 mins"
    assert estimate.deep_link == "https://book.olacabs.com/?serviceType=mini&utm_source=fairfare"


def test_uber_bills_every_kilometre(ten_km_route):
    """
    10 km is above Uber's 8 km threshold: Premier, no free distance.
    """
    estimate = uber_estimator().estimate(ten_km_route, surge=1.0)
    fare = estimate.fare

    assert estimate.vehicle_class == "Premier"
    assert fare.distance_fare == pytest.approx(180)
    assert fare.time_fare == pytest.approx(50)
    # (50 + 180 + 50) * 1.0 = 280; taxes 14; + fee 10
    assert fare.total == pytest.approx(304)
    assert estimate.features == ("AC", "Wi-Fi", "Uber Safety")


@pytest.mark.parametrize("distance_meters,duration_seconds,surge", [
    (0, 0, 1.0),
    (1500, 300, 1.37),
    (9999, 1800, 1.2),
    (10001, 1800, 1.05),
    (42000, 5400, 1.5),
])
def test_total_matches_formula(distance_meters, duration_seconds, surge):
    route = Route(distance_meters=distance_meters, duration_seconds=duration_seconds)

    for estimator in (ola_estimator(), uber_estimator()):
        fare = estimator.estimate(route, surge).fare
        subtotal = (fare.base_fare + fare.distance_fare + fare.time_fare) * surge
        assert fare.surge_multiplier == surge
        assert fare.taxes == pytest.approx(subtotal * 0.05)
        assert fare.total == pytest.approx(expected_total(fare))


@pytest.mark.parametrize("distance_meters,duration_seconds", [
    (-5000, -60),
    (float("nan"), 600),
    (3000, float("nan")),
    (float("-inf"), float("inf")),
])
def test_invalid_inputs_are_clamped(distance_meters, duration_seconds):
    route = Route(distance_meters=distance_meters, duration_seconds=duration_seconds)

    for estimator in (ola_estimator(), uber_estimator()):
        fare = estimator.estimate(route, surge=1.0).fare
        assert fare.distance_fare >= 0
        assert fare.time_fare >= 0
        assert fare.total >= 0
        assert not math.isnan(fare.total)


def test_non_positive_surge_is_neutral(ten_km_route):
    estimate = ola_estimator().estimate(ten_km_route, surge=0)

    assert estimate.fare.surge_multiplier == 1.0
    assert estimate.fare.total == pytest.approx(155.15)


def test_clamp_non_negative():
    assert clamp_non_negative(-1) == 0
    assert clamp_non_negative(float("nan")) == 0
    assert clamp_non_negative(12.5) == 12.5


def test_within_first_free_kilometres_distance_fare_is_zero():
    estimate = ola_estimator().estimate(Route(distance_meters=1800, duration_seconds=0), surge=1.0)
    assert estimate.fare.distance_fare == 0


@pytest.mark.parametrize("estimator,economy,premium", [
    (ola_estimator(), "Mini", "Prime"),
    (uber_estimator(), "Go", "Premier"),
])
def test_tier_switches_once_with_distance(estimator, economy, premium):
    """
    Walking the distance up in 250 m steps, the tier changes exactly once.
    """
    tiers = [
        estimator.estimate(Route(distance_meters=meters, duration_seconds=600), surge=1.0).vehicle_class
        for meters in range(0, 30001, 250)
    ]
    switches = sum(1 for before, after in zip(tiers, tiers[1:]) if before != after)

    assert tiers[0] == economy
    assert tiers[-1] == premium
    assert switches == 1


def test_tier_threshold_is_exclusive():
    estimator = ola_estimator()
    assert estimator.select_tier(10.0).vehicle_class == "Mini"
    assert estimator.select_tier(10.001).vehicle_class == "Prime"


def test_invalid_tariff_is_rejected():
    base = default_ola_tariff()
    broken = ProviderTariff(
        provider_id=base.provider_id,
        provider_name=base.provider_name,
        economy=TierTariff(vehicle_class="Mini", base_fare=-1, per_km_rate=11, per_min_rate=1.5, platform_fee=5),
        premium=base.premium,
        premium_threshold_km=10,
    )

    with pytest.raises(ValueError):
        LocalFareEstimator(broken)


def test_to_dict_uses_wire_field_names(ten_km_route):
    payload = ola_estimator().estimate(ten_km_route, surge=1.0).to_dict()

    assert payload["providerId"] == "ola"
    assert payload["vehicleClass"] == "Mini"
    assert payload["features"] == ["AC", "Music", "GPS Tracking"]
    assert set(payload["fare"]) == {
        "baseFare", "distanceFare", "timeFare", "surgeMultiplier", "platformFee", "taxes", "total",
    }
    assert "bookingRef" not in payload
