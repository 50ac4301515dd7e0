#Purpose: The Namma Yatri HTTP "adapter/client".
#Sole responsibility: talk to the Namma Yatri API via HTTP and return parsed records.
#Encapsulates provider-specific details:
#request body shape (contents.origin.gps.lat/lon, address.fullAddress)
#URL construction (/rideSearch, /estimates, /vehicleTypes)
#JSON headers and timeouts
#parsing camelCase response JSON into our internal shape
#It should not contain fare normalization, eligibility or fallback rules.


from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from fares.models import Location

# Read provider settings from environment
# Example in .env:
# NAMMA_YATRI_BASE_URL=https://nammayatri.in/api
# NAMMA_YATRI_TIMEOUT=10
# NAMMA_YATRI_SETTLE_DELAY=1.0
load_dotenv()
BASE_URL = os.getenv("NAMMA_YATRI_BASE_URL", "https://nammayatri.in/api")
TIMEOUT_SECONDS = float(os.getenv("NAMMA_YATRI_TIMEOUT", "10"))
SETTLE_DELAY_SECONDS = float(os.getenv("NAMMA_YATRI_SETTLE_DELAY", "1.0"))

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}
ACCEPT_JSON = {"Accept": "application/json"}


class NammaYatriError(Exception):
    """Protocol-level failure talking to Namma Yatri (bad status, bad payload)."""
    pass


def finite_number(value: Any) -> float:
    """float(value), rejecting NaN and infinities ("inf", 1e400)."""
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value!r}")
    return number


@dataclass(frozen=True)
class NammaYatriEstimate:
    """
    One raw estimate record as returned by GET /estimates.
    """
    estimate_id: str
    vehicle_variant: str
    total_fare: float
    base_fare: float
    pickup_charges: float
    waiting_charges: float
    ride_distance: float
    ride_duration: float
    night_shift_charge: float
    currency: str
    descriptions: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, record: Dict[str, Any]) -> NammaYatriEstimate:
        try:
            return cls(
                estimate_id=str(record["estimateId"]),
                vehicle_variant=str(record["vehicleVariant"]),
                total_fare=finite_number(record["totalFare"]),
                base_fare=finite_number(record["baseFare"]),
                pickup_charges=finite_number(record.get("pickupCharges") or 0),
                waiting_charges=finite_number(record.get("waitingCharges") or 0),
                ride_distance=finite_number(record.get("rideDistance") or 0),
                ride_duration=finite_number(record["rideDuration"]),
                night_shift_charge=finite_number(record.get("nightShiftCharge") or 0),
                currency=str(record.get("currency", "INR")),
                descriptions=list(record.get("descriptions") or []),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise NammaYatriError(f"Malformed estimate record: {e}") from e


@dataclass(frozen=True)
class NammaYatriQuote:
    """
    Estimates returned for one search.
    """
    search_id: str
    estimates: List[NammaYatriEstimate]


class NammaYatriClient:
    """
    Namma Yatri Adapter / Client

    Sole responsibility:
    - Talk to Namma Yatri via HTTP
    - Convert internal Location -> provider search body
    - Return parsed records

    Network errors (requests.exceptions.RequestException) propagate as-is;
    protocol errors raise NammaYatriError.
    """
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (BASE_URL if base_url is None else base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else TIMEOUT_SECONDS #seconds to wait for each response before giving up
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("Namma Yatri base URL not set. Please set NAMMA_YATRI_BASE_URL in the .env file.")

        #----------------
        # Internal helpers for payload construction and response checks
        #----------------
    @staticmethod
    def location_payload(location: Location) -> Dict[str, Any]:
        """Internal Location -> provider {gps: {lat, lon}, address: {fullAddress}}"""
        return {
            "gps": {
                "lat": location.lat,
                "lon": location.lng,
            },
            "address": {
                "fullAddress": location.address,
            },
        }

    def build_search_payload(self, pickup: Location, destination: Location) -> Dict[str, Any]:
        return {
            "contents": {
                "origin": self.location_payload(pickup),
                "destination": self.location_payload(destination),
            }
        }

    @staticmethod
    def _json(response: requests.Response, phase: str) -> Dict[str, Any]:
        if not response.ok:
            raise NammaYatriError(f"Namma Yatri {phase} failed: HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise NammaYatriError(f"Namma Yatri {phase} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise NammaYatriError(f"Namma Yatri {phase} returned unexpected payload")
        return data

        #----------------
        # Public methods: search, estimates, vehicle types
        #----------------
    def search(self, pickup: Location, destination: Location) -> str:
        """
        POST /rideSearch. Returns the searchId the estimates are keyed by.
        """
        response = self.session.post(
            f"{self.base_url}/rideSearch",
            json=self.build_search_payload(pickup, destination),
            headers=JSON_HEADERS,
            timeout=self.timeout,
        )
        data = self._json(response, "search")

        search_id = data.get("searchId")
        if not search_id:
            raise NammaYatriError("No search ID received from Namma Yatri")
        return str(search_id)

    def get_estimates(self, search_id: str) -> NammaYatriQuote:
        """
        GET /estimates?searchId=...

        Returns:
            NammaYatriQuote with every record parsed; one malformed record
            fails the whole call.
        """
        response = self.session.get(
            f"{self.base_url}/estimates",
            params={"searchId": search_id},
            headers=ACCEPT_JSON,
            timeout=self.timeout,
        )
        data = self._json(response, "estimates")

        records = data.get("estimates") or []
        if not isinstance(records, list):
            raise NammaYatriError("Namma Yatri estimates field is not a list")

        return NammaYatriQuote(
            search_id=search_id,
            estimates=[NammaYatriEstimate.from_json(record) for record in records],
        )

    def get_vehicle_types(self) -> List[str]:
        """
        GET /vehicleTypes
        """
        response = self.session.get(
            f"{self.base_url}/vehicleTypes",
            headers=ACCEPT_JSON,
            timeout=self.timeout,
        )
        data = self._json(response, "vehicleTypes")

        vehicle_types = data.get("vehicleTypes")
        if not vehicle_types:
            raise NammaYatriError("Namma Yatri returned no vehicle types")
        return [str(vehicle_type) for vehicle_type in vehicle_types]
