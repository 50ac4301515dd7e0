"""
Purpose: Orchestrator for one fare comparison (the "glue").
What it does:
Accepts a Route and the pickup/destination Locations, fans out to

- the two locally modeled estimators (synchronous, on the caller's thread)
- the external provider adapter (one background worker, only if eligible)

then joins, concatenates (A, B, external) and stable-sorts by fare total.

Rule: one fork, one join per request. No retries. An external failure
only shortens the list.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, List, Optional, Protocol, Sequence

from fares.estimators import LocalFareEstimator, ola_estimator, uber_estimator
from fares.models import AggregateResult, Location, NormalizedEstimate, ProviderId, Route
from fares.surge import SurgeModel, TimeOfDaySurgeModel
from providers.eligibility import EligibilityFilter
from providers.namma_yatri_adapter import NammaYatriAdapter

logger = logging.getLogger(__name__)


class ExternalFareProvider(Protocol):
    """
    Anything that can fetch live estimates (NammaYatriAdapter in production).
    """
    provider_id: ProviderId

    def fetch_estimates(
        self,
        pickup: Location,
        destination: Location,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[NormalizedEstimate]:
        ...


def sort_by_total(estimates: Sequence[NormalizedEstimate]) -> AggregateResult:
    """
    Ascending by fare total. sorted() is stable, so ties keep input order.
    """
    return sorted(estimates, key=lambda estimate: estimate.fare.total)


class FareAggregator:
    """
    Compares every provider for one trip.
    """
    def __init__(
        self,
        estimator_a: Optional[LocalFareEstimator] = None,
        estimator_b: Optional[LocalFareEstimator] = None,
        external_provider: Optional[ExternalFareProvider] = None,
        eligibility: Optional[EligibilityFilter] = None,
        surge_model: Optional[SurgeModel] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.estimator_a = estimator_a or ola_estimator()
        self.estimator_b = estimator_b or uber_estimator()
        self.external_provider = external_provider
        self.eligibility = eligibility or EligibilityFilter()
        self.surge_model = surge_model or TimeOfDaySurgeModel()
        self.clock = clock

    def local_estimates(self, route: Route, now: Optional[datetime] = None) -> List[NormalizedEstimate]:
        """
        Estimator A then estimator B. The clock is read once; each estimator
        gets its own surge draw for that instant.
        """
        now = now or self.clock()
        return [
            estimator.estimate(route, self.surge_model.current_multiplier(now))
            for estimator in (self.estimator_a, self.estimator_b)
        ]

    def _external_is_eligible(self, pickup: Location) -> bool:
        if self.external_provider is None:
            return False

        provider_id = self.external_provider.provider_id
        if not self.eligibility.is_eligible(pickup, provider_id):
            logger.info("%s not consulted: pickup %r is ineligible", provider_id.value, pickup.address)
            return False
        return True

    def compare_fares(
        self,
        route: Route,
        pickup: Location,
        destination: Location,
        *,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AggregateResult:
        """
        Returns every estimate for the trip, cheapest first.

        The external call runs on its own worker while the local estimators
        are evaluated; the result is produced only after both finish.
        Setting `cancel_event` makes the external branch give up early.
        """
        if not self._external_is_eligible(pickup):
            estimates = self.local_estimates(route, now)
            logger.debug("Compared %d local estimates (external skipped)", len(estimates))
            return sort_by_total(estimates)

        # A fresh single-worker pool per call: no state is shared between requests.
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="fare-external") as pool:
            future = pool.submit(
                self.external_provider.fetch_estimates,
                pickup,
                destination,
                cancel_event,
            )

            local = self.local_estimates(route, now)

            try:
                external = list(future.result())
            except Exception:
                # the adapter contract is "never raises"; a substitute that does
                # must not take the local results down with it
                logger.exception("External provider failed during fare comparison")
                external = []

        logger.debug("Compared %d local and %d external estimates", len(local), len(external))
        return sort_by_total(local + external)


def default_aggregator(include_external: bool = True) -> FareAggregator:
    """
    Ola + Uber, plus Namma Yatri over HTTP when `include_external` is set.
    """
    eligibility = EligibilityFilter()
    external = NammaYatriAdapter(eligibility=eligibility) if include_external else None
    return FareAggregator(external_provider=external, eligibility=eligibility)
