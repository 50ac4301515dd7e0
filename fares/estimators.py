"""
Purpose: Deterministic fare formulas for providers we model locally.
What it does:
Given a Route and a surge multiplier, picks ONE tier by distance and evaluates:

    distance_fare = max(0, km - free_km) * per_km
    time_fare     = minutes * per_min
    subtotal      = (base + distance_fare + time_fare) * surge
    taxes         = subtotal * tax_rate
    total         = subtotal + platform_fee + taxes

Rule: total function. Bad inputs are clamped, never raised.
"""

from __future__ import annotations

import math
from typing import Optional

from .models import FareBreakdown, NormalizedEstimate, Route
from .policy import ProviderTariff, TierTariff, default_ola_tariff, default_uber_tariff


def clamp_non_negative(value: float) -> float:
    """
    Negative and NaN inputs become 0.
    """
    if value is None or math.isnan(value) or value < 0:
        return 0.0
    return float(value)


class LocalFareEstimator:
    """
    Evaluates one provider's two-tier tariff.
    """
    def __init__(self, tariff: ProviderTariff):
        tariff.validate()
        self.tariff = tariff

    @property
    def provider_id(self):
        return self.tariff.provider_id

    def select_tier(self, distance_km: float) -> TierTariff:
        if distance_km > self.tariff.premium_threshold_km:
            return self.tariff.premium
        return self.tariff.economy

    def estimate(self, route: Route, surge: float) -> NormalizedEstimate:
        distance_km = clamp_non_negative(route.distance_meters) / 1000
        duration_min = clamp_non_negative(route.duration_seconds) / 60

        if math.isinf(distance_km):
            distance_km = 0.0
        if math.isinf(duration_min):
            duration_min = 0.0

        # surge is a multiplier; anything non-positive is treated as neutral
        if surge is None or not math.isfinite(surge) or surge <= 0:
            surge = 1.0

        tier = self.select_tier(distance_km)

        distance_fare = max(0.0, distance_km - tier.free_km) * tier.per_km_rate
        time_fare = duration_min * tier.per_min_rate
        subtotal = (tier.base_fare + distance_fare + time_fare) * surge
        taxes = subtotal * self.tariff.tax_rate
        total = subtotal + tier.platform_fee + taxes

        return NormalizedEstimate(
            provider_id=self.tariff.provider_id,
            provider_name=self.tariff.provider_name,
            vehicle_class=tier.vehicle_class,
            fare=FareBreakdown(
                base_fare=tier.base_fare,
                distance_fare=distance_fare,
                time_fare=time_fare,
                surge_multiplier=surge,
                platform_fee=tier.platform_fee,
                taxes=taxes,
                total=total,
            ),
            eta_text=route.duration_text,
            features=tuple(self.tariff.features),
            deep_link=self._deep_link(tier),
        )

    def _deep_link(self, tier: TierTariff) -> Optional[str]:
        if not self.tariff.deep_link_template:
            return None
        return self.tariff.deep_link_template.format(service_type=tier.service_type)


def ola_estimator(tariff: Optional[ProviderTariff] = None) -> LocalFareEstimator:
    return LocalFareEstimator(tariff or default_ola_tariff())


def uber_estimator(tariff: Optional[ProviderTariff] = None) -> LocalFareEstimator:
    return LocalFareEstimator(tariff or default_uber_tariff())
