"""
Purpose: Central configuration for locally modeled provider tariffs.
What it does:

Stores the per-provider, per-tier pricing constants:

OLA:  Mini (<= 10 km) / Prime (> 10 km), first 2 km free
UBER: Go (<= 8 km) / Premier (> 8 km), no free distance
TAX_RATE = 0.05 (GST)

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .models import ProviderId

GST_RATE = 0.05


@dataclass(frozen=True)
class TierTariff:
    """
    Pricing constants for one vehicle tier.
    """
    vehicle_class: str
    base_fare: float
    per_km_rate: float
    per_min_rate: float
    platform_fee: float

    # Distance included in the base fare.
    free_km: float = 0.0

    # Lower-case tag used in the provider's booking URL (?serviceType=mini).
    service_type: str = ""

    def validate(self) -> None:
        if not self.vehicle_class:
            raise ValueError("vehicle_class must not be empty")

        for name in ("base_fare", "per_km_rate", "per_min_rate", "platform_fee", "free_km"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")


@dataclass(frozen=True)
class ProviderTariff:
    """
    Two-tier tariff for a locally modeled provider.

    The premium tier applies when the route is strictly longer than
    `premium_threshold_km`; otherwise the economy tier applies.
    """
    provider_id: ProviderId
    provider_name: str
    economy: TierTariff
    premium: TierTariff
    premium_threshold_km: float

    tax_rate: float = GST_RATE
    features: Tuple[str, ...] = field(default_factory=tuple)

    # May contain {service_type}, filled from the selected tier.
    deep_link_template: str = ""

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        self.economy.validate()
        self.premium.validate()

        if self.premium_threshold_km < 0:
            raise ValueError("premium_threshold_km must be >= 0")

        if not 0 <= self.tax_rate < 1:
            raise ValueError("tax_rate must be in [0, 1)")

        if self.provider_id is ProviderId.NAMMA_YATRI:
            raise ValueError("Namma Yatri is priced live, not from a local tariff")


def default_ola_tariff() -> ProviderTariff:
    """
    Ola Mini / Prime.
    """
    t = ProviderTariff(
        provider_id=ProviderId.OLA,
        provider_name="Ola",
        economy=TierTariff(
            vehicle_class="Mini",
            base_fare=25,
            per_km_rate=11,
            per_min_rate=1.5,
            platform_fee=5,
            free_km=2,
            service_type="mini",
        ),
        premium=TierTariff(
            vehicle_class="Prime",
            base_fare=40,
            per_km_rate=15,
            per_min_rate=2,
            platform_fee=8,
            free_km=2,
            service_type="prime",
        ),
        premium_threshold_km=10,
        features=("AC", "Music", "GPS Tracking"),
        deep_link_template="https://book.olacabs.com/?serviceType={service_type}&utm_source=fairfare",
    )
    t.validate()
    return t


def default_uber_tariff() -> ProviderTariff:
    """
    Uber Go / Premier. Uber bills every kilometre.
    """
    t = ProviderTariff(
        provider_id=ProviderId.UBER,
        provider_name="Uber",
        economy=TierTariff(
            vehicle_class="Go",
            base_fare=30,
            per_km_rate=12,
            per_min_rate=1.8,
            platform_fee=6,
            service_type="go",
        ),
        premium=TierTariff(
            vehicle_class="Premier",
            base_fare=50,
            per_km_rate=18,
            per_min_rate=2.5,
            platform_fee=10,
            service_type="premier",
        ),
        premium_threshold_km=8,
        features=("AC", "Wi-Fi", "Uber Safety"),
        deep_link_template="https://m.uber.com/looking?utm_source=fairfare",
    )
    t.validate()
    return t
