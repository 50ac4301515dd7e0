"""
Purpose: Turn one selected NormalizedEstimate into a provider booking action.
What it does:
- resolves a provider-specific URL (templated per ProviderId with the
  pickup/destination text)
- for providers with a native app, pairs the app deep link with a web
  fallback and a delay

Launching is an explicit two-step action:
    handoff = action.launch(opener)    # opens the app link, arms the fallback timer
    handoff.confirm_app_opened()       # app took over, fallback is cancelled
If nobody confirms within the delay, the fallback URL is opened once.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import quote, urlencode

from fares.models import BookingRef, NormalizedEstimate, ProviderId
from providers.policy import NammaYatriPolicy, default_namma_yatri_policy

logger = logging.getLogger(__name__)

UrlOpener = Callable[[str], None]
TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]

OLA_BOOKING_URL = "https://book.olacabs.com/?pickup={pickup}&drop={destination}&utm_source=fairfare"
UBER_BOOKING_URL = (
    "https://m.uber.com/looking?pickup_latitude=&pickup_longitude="
    "&dropoff_latitude=&dropoff_longitude=&utm_source=fairfare"
)
NAMMA_YATRI_APP_URL = "nammayatri://book"
NAMMA_YATRI_WEB_BOOKING_URL = "https://nammayatri.in/book"
NAMMA_YATRI_HOME_URL = "https://nammayatri.in/"


@dataclass(frozen=True)
class BookingAction:
    """
    What to open for one booking. `fallback_url` is None for web-only providers.
    """
    provider_id: ProviderId
    primary_url: str
    fallback_url: Optional[str] = None
    fallback_delay_seconds: float = 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "providerId": self.provider_id.value,
            "primaryUrl": self.primary_url,
            "fallbackUrl": self.fallback_url,
            "fallbackDelaySeconds": self.fallback_delay_seconds,
        }

    def launch(self, opener: UrlOpener, timer_factory: TimerFactory = threading.Timer) -> Handoff:
        """
        Opens the primary URL and, if there is a fallback, schedules it.
        """
        handoff = Handoff(self, opener)
        opener(self.primary_url)

        if self.fallback_url:
            handoff.arm(timer_factory)
        return handoff


class Handoff:
    """
    A launched booking whose web fallback may still be pending.
    """
    def __init__(self, action: BookingAction, opener: UrlOpener):
        self.action = action
        self.opener = opener
        self.fallback_opened = False
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._settled = False

    def arm(self, timer_factory: TimerFactory) -> None:
        self._timer = timer_factory(self.action.fallback_delay_seconds, self._open_fallback)
        self._timer.daemon = True
        self._timer.start()

    @property
    def fallback_pending(self) -> bool:
        return self._timer is not None and not self._settled

    def _open_fallback(self) -> None:
        with self._lock:
            if self._settled:
                return
            self._settled = True

        logger.info("App did not take over, opening %s", self.action.fallback_url)
        self.fallback_opened = True
        self.opener(self.action.fallback_url)

    def cancel(self) -> bool:
        """
        Drops the pending fallback. Returns False if it already fired.
        """
        with self._lock:
            if self._settled:
                return False
            self._settled = True

        if self._timer is not None:
            self._timer.cancel()
        return True

    def confirm_app_opened(self) -> bool:
        """
        The native app intercepted the deep link.
        """
        cancelled = self.cancel()
        if cancelled:
            logger.debug("App handoff confirmed for %s", self.action.provider_id.value)
        return cancelled


class Redirector:
    """
    Resolves booking actions. Every ProviderId must have a resolver.
    """
    def __init__(self, policy: Optional[NammaYatriPolicy] = None):
        self.policy = policy or default_namma_yatri_policy()
        self._resolvers: Dict[ProviderId, Callable[[Optional[BookingRef], str, str], BookingAction]] = {
            ProviderId.OLA: self._ola,
            ProviderId.UBER: self._uber,
            ProviderId.NAMMA_YATRI: self._namma_yatri,
        }

        missing = set(ProviderId) - set(self._resolvers)
        if missing:
            raise ValueError(f"No booking resolver for: {sorted(p.value for p in missing)}")

    def resolve(self, estimate: NormalizedEstimate, pickup_text: str, destination_text: str) -> BookingAction:
        return self.resolve_for(estimate.provider_id, estimate.booking_ref, pickup_text, destination_text)

    def resolve_for(
        self,
        provider_id: ProviderId,
        booking_ref: Optional[BookingRef],
        pickup_text: str,
        destination_text: str,
    ) -> BookingAction:
        return self._resolvers[ProviderId(provider_id)](booking_ref, pickup_text, destination_text)

    def _ola(self, booking_ref: Optional[BookingRef], pickup_text: str, destination_text: str) -> BookingAction:
        return BookingAction(
            provider_id=ProviderId.OLA,
            primary_url=OLA_BOOKING_URL.format(
                pickup=quote(pickup_text, safe=""),
                destination=quote(destination_text, safe=""),
            ),
        )

    def _uber(self, booking_ref: Optional[BookingRef], pickup_text: str, destination_text: str) -> BookingAction:
        return BookingAction(provider_id=ProviderId.UBER, primary_url=UBER_BOOKING_URL)

    def _namma_yatri(self, booking_ref: Optional[BookingRef], pickup_text: str, destination_text: str) -> BookingAction:
        # a live quote can be booked directly; otherwise hand over the addresses
        if booking_ref is not None:
            query = urlencode({
                "estimateId": booking_ref.estimate_id,
                "searchId": booking_ref.search_id,
            })
            primary_url = f"{NAMMA_YATRI_APP_URL}?{query}"
            fallback_url = f"{NAMMA_YATRI_WEB_BOOKING_URL}?{query}"
        else:
            query = urlencode({"pickup": pickup_text, "destination": destination_text}, quote_via=quote)
            primary_url = f"{NAMMA_YATRI_APP_URL}?{query}"
            fallback_url = NAMMA_YATRI_HOME_URL

        return BookingAction(
            provider_id=ProviderId.NAMMA_YATRI,
            primary_url=primary_url,
            fallback_url=fallback_url,
            fallback_delay_seconds=self.policy.booking_fallback_delay_seconds,
        )
