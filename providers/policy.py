"""
Purpose: Central configuration for external providers.
What it does:

Stores the tunables for where and how we talk to live-quote providers:

EXCLUSION ZONES  (regions a provider is known not to serve)
SETTLE_DELAY     (wait between search and estimate polling)
FALLBACK VEHICLE TYPES

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from fares.models import ProviderId


@dataclass(frozen=True)
class ExclusionZone:
    """
    A region identified either by a keyword in the address text or by a
    lat/lng bounding box (inclusive bounds).
    """
    name: str
    keywords: Tuple[str, ...]
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def validate(self) -> None:
        if self.min_lat > self.max_lat:
            raise ValueError(f"{self.name}: min_lat must be <= max_lat")

        if self.min_lng > self.max_lng:
            raise ValueError(f"{self.name}: min_lng must be <= max_lng")

        if any(not keyword.strip() for keyword in self.keywords):
            raise ValueError(f"{self.name}: keywords must not be blank")


@dataclass(frozen=True)
class EligibilityPolicy:
    """
    Exclusion zones per provider. Providers without an entry are eligible everywhere.
    """
    zones: Dict[ProviderId, Tuple[ExclusionZone, ...]] = field(default_factory=dict)

    def validate(self) -> None:
        for provider_zones in self.zones.values():
            for zone in provider_zones:
                zone.validate()


CHANDIGARH = ExclusionZone(
    name="Chandigarh",
    keywords=("chandigarh",),
    min_lat=30.6,
    max_lat=30.8,
    min_lng=76.7,
    max_lng=76.9,
)


def default_eligibility_policy() -> EligibilityPolicy:
    """
    Namma Yatri does not operate in Chandigarh.
    """
    p = EligibilityPolicy(zones={ProviderId.NAMMA_YATRI: (CHANDIGARH,)})
    p.validate()
    return p


@dataclass(frozen=True)
class NammaYatriPolicy:
    """
    Behavioural constants of the Namma Yatri integration.
    """
    # --- Settle delay ---
    # The provider computes estimates asynchronously after /rideSearch.
    # We wait this long once before polling /estimates. No retry loop.
    settle_delay_seconds: float = 1.0

    # --- Booking ---
    # How long the app gets to intercept the deep link before the web page opens.
    booking_fallback_delay_seconds: float = 1.0

    features: Tuple[str, ...] = (
        "Open Source",
        "No Surge Pricing",
        "Driver Friendly",
        "Transparent Pricing",
    )

    fallback_vehicle_types: List[str] = field(
        default_factory=lambda: ["AUTO_RICKSHAW", "CAB", "BIKE"]
    )

    def validate(self) -> None:
        if self.settle_delay_seconds < 0:
            raise ValueError("settle_delay_seconds must be >= 0")

        if self.booking_fallback_delay_seconds < 0:
            raise ValueError("booking_fallback_delay_seconds must be >= 0")


def default_namma_yatri_policy(settle_delay_seconds: float = 1.0) -> NammaYatriPolicy:
    p = NammaYatriPolicy(settle_delay_seconds=settle_delay_seconds)
    p.validate()
    return p
