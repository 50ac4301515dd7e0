#Purpose: Region-level geofencing for external providers.
#Decides, before any network call, whether a provider should be asked at all.
#A pickup is ineligible when:
#the address text contains an excluded-region keyword (case-insensitive), OR
#(lat, lng) falls inside that region's bounding box.
#Pure and synchronous: no HTTP, no clock, no state.

from __future__ import annotations

from typing import Optional

from fares.models import Location, ProviderId
from .policy import EligibilityPolicy, ExclusionZone, default_eligibility_policy


def zone_contains(zone: ExclusionZone, pickup: Location) -> bool:
    """
    True when the pickup is inside the zone by keyword or by bounding box.
    """
    address = (pickup.address or "").lower()
    if any(keyword.lower() in address for keyword in zone.keywords):
        return True

    return (
        zone.min_lat <= pickup.lat <= zone.max_lat
        and zone.min_lng <= pickup.lng <= zone.max_lng
    )


class EligibilityFilter:
    """
    Fast-reject predicate consulted by the aggregator before the adapter runs.
    """
    def __init__(self, policy: Optional[EligibilityPolicy] = None):
        self.policy = policy or default_eligibility_policy()
        self.policy.validate()

    def excluded_zone(self, pickup: Location, provider_id: ProviderId) -> Optional[ExclusionZone]:
        """
        The first zone that excludes this pickup, or None.
        """
        for zone in self.policy.zones.get(provider_id, ()):
            if zone_contains(zone, pickup):
                return zone
        return None

    def is_eligible(self, pickup: Location, provider_id: ProviderId) -> bool:
        return self.excluded_zone(pickup, provider_id) is None
