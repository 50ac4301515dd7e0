import pytest
from rest_framework.test import APIClient, APIRequestFactory

from comparison.aggregator import FareAggregator
from fares.models import ProviderId
from fares.surge import FixedSurgeModel
from fares_api.views import CompareFaresView, shared_aggregator


class EmptyProvider:
    provider_id = ProviderId.NAMMA_YATRI

    def __init__(self):
        self.calls = 0

    def fetch_estimates(self, pickup, destination, cancel_event=None):
        self.calls += 1
        return []


@pytest.fixture
def compare_payload():
    return {
        "route": {"distanceMeters": 10000, "durationSeconds": 1200, "durationText": "20 mins"},
        "pickup": {"address": "MG Road, Bengaluru", "lat": 12.9756, "lng": 77.6066, "placeId": "pl-1"},
        "destination": {"address": "Koramangala, Bengaluru", "lat": 12.9352, "lng": 77.6245, "placeId": "pl-2"},
    }


def compare_view(provider):
    def factory():
        return FareAggregator(external_provider=provider, surge_model=FixedSurgeModel(1.0))
    return CompareFaresView.as_view(aggregator_factory=factory)


def test_compare_returns_sorted_estimates(compare_payload):
    provider = EmptyProvider()
    request = APIRequestFactory().post("/api/v1/fares/compare/", compare_payload, format="json")

    response = compare_view(provider)(request)

    assert response.status_code == 200
    assert [item["providerId"] for item in response.data] == ["ola", "uber"]
    assert response.data[0]["fare"]["total"] == pytest.approx(155.15)
    assert response.data[0]["etaText"] == "20 mins"
    assert provider.calls == 1


def test_compare_skips_external_for_ineligible_pickup(compare_payload):
    provider = EmptyProvider()
    compare_payload["pickup"]["address"] = "Sector 17, Chandigarh"
    request = APIRequestFactory().post("/api/v1/fares/compare/", compare_payload, format="json")

    response = compare_view(provider)(request)

    assert response.status_code == 200
    assert len(response.data) == 2
    assert provider.calls == 0


@pytest.mark.parametrize("mutate", [
    lambda payload: payload.pop("route"),
    lambda payload: payload["pickup"].pop("lat"),
    lambda payload: payload["destination"].update(lng="east"),
    lambda payload: payload["pickup"].update(lat=123),
])
def test_compare_rejects_invalid_body(compare_payload, mutate):
    mutate(compare_payload)
    request = APIRequestFactory().post("/api/v1/fares/compare/", compare_payload, format="json")

    response = compare_view(EmptyProvider())(request)

    assert response.status_code == 400


def test_booking_link_for_live_quote():
    response = APIClient().post("/api/v1/fares/booking-link/", {
        "providerId": "namma-yatri",
        "vehicleClass": "AUTO_RICKSHAW",
        "bookingRef": {"estimateId": "est-1", "searchId": "search-42"},
        "pickup": "MG Road",
        "destination": "Koramangala",
    }, format="json")

    assert response.status_code == 200
    assert response.json() == {
        "providerId": "namma-yatri",
        "primaryUrl": "nammayatri://book?estimateId=est-1&searchId=search-42",
        "fallbackUrl": "https://nammayatri.in/book?estimateId=est-1&searchId=search-42",
        "fallbackDelaySeconds": 1.0,
    }


def test_booking_link_rejects_unknown_provider():
    response = APIClient().post("/api/v1/fares/booking-link/", {
        "providerId": "rapido",
        "pickup": "MG Road",
        "destination": "Koramangala",
    }, format="json")

    assert response.status_code == 400
    assert "providerId" in response.json()


def test_compare_view_reuses_one_aggregator():
    aggregator = CompareFaresView.aggregator_factory()

    assert aggregator is shared_aggregator()
    assert CompareFaresView.aggregator_factory() is aggregator
    assert aggregator.external_provider.client.session is shared_aggregator().external_provider.client.session
