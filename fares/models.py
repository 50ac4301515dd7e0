"""
Purpose: Domain models for the Fares capability.
What it does:
- Defines the request inputs consumed read-only by the engine:
- Location (address, lat/lng, place_id)
- Route (distance in meters, duration in seconds, human duration text)

- Defines the common output schema every provider is coerced into:
- FareBreakdown (base/distance/time fares, surge, fee, taxes, total)
- NormalizedEstimate (provider, vehicle class, fare, eta, features, booking ref)

Defines enums/constants:
- ProviderId = OLA | UBER | NAMMA_YATRI

Rule: No HTTP calls, no pricing logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

LatLng = Tuple[float, float]


class ProviderId(str, Enum):
    """
    Closed set of providers the engine knows how to price or fetch.
    The value is the wire tag used in JSON responses and booking links.
    """
    OLA = "ola"
    UBER = "uber"
    NAMMA_YATRI = "namma-yatri"


@dataclass(frozen=True)
class Location:
    """
    A geocoded place. Produced by the autocomplete collaborator.
    """
    address: str
    lat: float
    lng: float
    place_id: str = ""

    @property
    def coordinates(self) -> LatLng:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class Route:
    """
    One computed path between two Locations (from the routing collaborator).
    """
    distance_meters: float
    duration_seconds: float
    duration_text: str = ""


@dataclass(frozen=True)
class FareBreakdown:
    """
    Itemised fare.

    For locally modeled providers:
        total == (base_fare + distance_fare + time_fare) * surge_multiplier
                 + platform_fee + taxes

    Externally sourced breakdowns report `total` straight from the provider and
    back out `distance_fare` from it (time_fare = 0).
    """
    base_fare: float
    distance_fare: float
    time_fare: float
    surge_multiplier: float
    platform_fee: float
    taxes: float
    total: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "baseFare": self.base_fare,
            "distanceFare": self.distance_fare,
            "timeFare": self.time_fare,
            "surgeMultiplier": self.surge_multiplier,
            "platformFee": self.platform_fee,
            "taxes": self.taxes,
            "total": self.total,
        }


@dataclass(frozen=True)
class BookingRef:
    """
    Handle needed to book a live quote with the external provider.
    """
    estimate_id: str
    search_id: str


@dataclass(frozen=True)
class NormalizedEstimate:
    """
    Provider-agnostic fare record. This is what the aggregator returns
    and what the Redirector consumes.
    """
    provider_id: ProviderId
    provider_name: str
    vehicle_class: str
    fare: FareBreakdown
    eta_text: str
    features: Tuple[str, ...] = field(default_factory=tuple)
    booking_ref: Optional[BookingRef] = None
    deep_link: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON wire shape. Optional keys are left out when absent.
        """
        payload: Dict[str, Any] = {
            "providerId": self.provider_id.value,
            "providerName": self.provider_name,
            "vehicleClass": self.vehicle_class,
            "fare": self.fare.to_dict(),
            "etaText": self.eta_text,
            "features": list(self.features),
        }
        if self.booking_ref is not None:
            payload["bookingRef"] = {
                "estimateId": self.booking_ref.estimate_id,
                "searchId": self.booking_ref.search_id,
            }
        if self.deep_link is not None:
            payload["deepLink"] = self.deep_link
        return payload


# Output of one comparison call: sorted ascending by fare.total.
AggregateResult = List[NormalizedEstimate]
