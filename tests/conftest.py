import pytest

from fares.models import Location, Route


class FakeResponse:
    """
    Just enough of requests.Response for the Namma Yatri client.
    """
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self.payload = payload
        self.invalid_json = invalid_json

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """
    Replays canned responses (or raises canned exceptions) and records every call.
    """
    def __init__(self, post=None, get=None):
        self.post_results = list(post or [])
        self.get_results = list(get or [])
        self.calls = []

    def _next(self, results):
        result = results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._next(self.post_results)

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._next(self.get_results)


def raw_estimate(**overrides):
    record = {
        "estimateId": "est-auto-1",
        "vehicleVariant": "AUTO_RICKSHAW",
        "totalFare": 120,
        "baseFare": 30,
        "pickupCharges": 10,
        "waitingCharges": 0,
        "rideDistance": 6200,
        "rideDuration": 1500,
        "nightShiftCharge": 0,
        "currency": "INR",
        "descriptions": [],
    }
    record.update(overrides)
    return record


@pytest.fixture
def bengaluru_pickup():
    return Location(address="MG Road, Bengaluru", lat=12.9756, lng=77.6066, place_id="pl-mg-road")


@pytest.fixture
def bengaluru_destination():
    return Location(address="Koramangala, Bengaluru", lat=12.9352, lng=77.6245, place_id="pl-koramangala")


@pytest.fixture
def chandigarh_pickup():
    # keyword match only; coordinates are deliberately outside the box
    return Location(address="Sector 17, ChAnDiGaRh", lat=12.9756, lng=77.6066)


@pytest.fixture
def ten_km_route():
    return Route(distance_meters=10000, duration_seconds=1200, duration_text="20 mins")
