"""
Purpose: Turn the Namma Yatri two-phase protocol into normalized estimates.
What it does:
- fast-rejects pickups in regions the provider does not serve (no HTTP)
- search  -> searchId
- settle delay (single blocking wait, interruptible by a cancel event)
- estimates(searchId) -> raw records
- maps each record into a NormalizedEstimate

Rule: never raises. Any failure in any phase means "no estimates right now".
"""

from __future__ import annotations

import logging
import math
import threading
from typing import List, Optional

import requests

from fares.models import BookingRef, FareBreakdown, Location, NormalizedEstimate, ProviderId
from .eligibility import EligibilityFilter
from .namma_yatri_client import (
    SETTLE_DELAY_SECONDS,
    NammaYatriClient,
    NammaYatriError,
    NammaYatriEstimate,
)
from .policy import NammaYatriPolicy, default_namma_yatri_policy

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Namma Yatri"
DEEP_LINK_TEMPLATE = "nammayatri://book?estimateId={estimate_id}&searchId={search_id}"


def format_eta(ride_duration_seconds: float) -> str:
    """
    Whole minutes, rounded up: 61s -> "2 min".
    """
    return f"{math.ceil(max(0.0, ride_duration_seconds) / 60)} min"


def normalize_estimate(
    estimate: NammaYatriEstimate,
    search_id: str,
    policy: NammaYatriPolicy,
) -> NormalizedEstimate:
    """
    The provider quotes a total and does not expose surge or a time component,
    so surge is reported as 1.0 and distance_fare is backed out of the total.
    """
    return NormalizedEstimate(
        provider_id=ProviderId.NAMMA_YATRI,
        provider_name=PROVIDER_NAME,
        vehicle_class=estimate.vehicle_variant,
        fare=FareBreakdown(
            base_fare=estimate.base_fare,
            distance_fare=estimate.total_fare - estimate.base_fare - estimate.pickup_charges,
            time_fare=0.0,
            surge_multiplier=1.0,
            platform_fee=estimate.pickup_charges,
            taxes=0.0,
            total=estimate.total_fare,
        ),
        eta_text=format_eta(estimate.ride_duration),
        features=tuple(policy.features),
        booking_ref=BookingRef(estimate_id=estimate.estimate_id, search_id=search_id),
        deep_link=DEEP_LINK_TEMPLATE.format(estimate_id=estimate.estimate_id, search_id=search_id),
    )


class NammaYatriAdapter:
    """
    External provider adapter used by the aggregator.

    Holds no per-request state, so one instance can serve concurrent requests.
    """
    provider_id = ProviderId.NAMMA_YATRI

    def __init__(
        self,
        client: Optional[NammaYatriClient] = None,
        policy: Optional[NammaYatriPolicy] = None,
        eligibility: Optional[EligibilityFilter] = None,
    ):
        self.client = client or NammaYatriClient()
        self.policy = policy or default_namma_yatri_policy(SETTLE_DELAY_SECONDS)
        self.policy.validate()
        self.eligibility = eligibility or EligibilityFilter()

    def fetch_estimates(
        self,
        pickup: Location,
        destination: Location,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[NormalizedEstimate]:
        if not self.eligibility.is_eligible(pickup, self.provider_id):
            logger.info("Namma Yatri skipped: pickup %r is outside its service area", pickup.address)
            return []

        cancel_event = cancel_event or threading.Event()

        try:
            # 1. search phase
            search_id = self.client.search(pickup, destination)

            # 2. settle delay; wait() returns True as soon as the caller cancels
            if cancel_event.wait(self.policy.settle_delay_seconds):
                logger.info("Namma Yatri request cancelled before polling search %s", search_id)
                return []

            # 3. estimates phase; non-finite numbers are rejected while parsing
            quote = self.client.get_estimates(search_id)
            if cancel_event.is_set():
                return []

            if not quote.estimates:
                logger.info("Namma Yatri returned no estimates for search %s", quote.search_id)
                return []

            # 4. normalize
            return [normalize_estimate(estimate, quote.search_id, self.policy) for estimate in quote.estimates]

        except requests.exceptions.RequestException as e:
            logger.warning("Namma Yatri network error: %s", e)
            return []
        except NammaYatriError as e:
            logger.warning("Namma Yatri unavailable: %s", e)
            return []

    def available_vehicle_types(self) -> List[str]:
        """
        Vehicle variants the provider offers, or a static fallback list.
        """
        try:
            return self.client.get_vehicle_types()
        except (requests.exceptions.RequestException, NammaYatriError) as e:
            logger.warning("Namma Yatri vehicle types unavailable, using fallback: %s", e)
            return list(self.policy.fallback_vehicle_types)
