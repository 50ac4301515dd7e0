from datetime import datetime

import pandas as pd

from comparison.aggregator import FareAggregator
from fares.surge import FixedSurgeModel
from scripts.run_fare_comparison import compare_trips, load_trips


def test_sample_trips_load():
    trips = load_trips()

    assert len(trips) == 5
    assert {"trip_id", "pickup_address", "distance_meters", "duration_seconds"} <= set(trips.columns)


def test_compare_trips_ranks_each_trip():
    trips = pd.DataFrame([{
        "trip_id": "t-test",
        "pickup_address": "MG Road, Bengaluru",
        "pickup_lat": 12.9756,
        "pickup_lng": 77.6066,
        "destination_address": "Koramangala, Bengaluru",
        "destination_lat": 12.9352,
        "destination_lng": 77.6245,
        "distance_meters": 10000,
        "duration_seconds": 1200,
        "duration_text": "20 mins",
    }])
    aggregator = FareAggregator(surge_model=FixedSurgeModel(1.0))

    results = compare_trips(trips, aggregator, now=datetime(2024, 5, 14, 13, 0))

    assert list(results["rank"]) == [1, 2]
    assert list(results["provider_id"]) == ["ola", "uber"]
    assert list(results["total"]) == [155.15, 304.0]
