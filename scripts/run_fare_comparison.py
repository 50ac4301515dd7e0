import argparse
import logging
import os
import time
from datetime import datetime

import pandas as pd

from comparison.aggregator import FareAggregator, default_aggregator
from fares.models import Location, Route
from fares.surge import FixedSurgeModel

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def load_trips(filepath: str = "sampledata/trips.csv") -> pd.DataFrame:
    # Resolve the correct path depending on where the user runs the script from.
    absolute_path = filepath if os.path.isabs(filepath) else os.path.join(BASE_DIR, filepath)
    return pd.read_csv(absolute_path)


def trip_inputs(row) -> tuple:
    route = Route(
        distance_meters=float(row["distance_meters"]),
        duration_seconds=float(row["duration_seconds"]),
        duration_text=str(row["duration_text"]),
    )
    pickup = Location(
        address=str(row["pickup_address"]),
        lat=float(row["pickup_lat"]),
        lng=float(row["pickup_lng"]),
    )
    destination = Location(
        address=str(row["destination_address"]),
        lat=float(row["destination_lat"]),
        lng=float(row["destination_lng"]),
    )
    return route, pickup, destination


def compare_trips(trips: pd.DataFrame, aggregator: FareAggregator, now: datetime = None) -> pd.DataFrame:
    """
    One output row per (trip, estimate), ranked cheapest first within a trip.
    """
    rows = []
    for _, trip in trips.iterrows():
        route, pickup, destination = trip_inputs(trip)
        estimates = aggregator.compare_fares(route, pickup, destination, now=now)

        for rank, estimate in enumerate(estimates, 1):
            rows.append({
                "trip_id": trip["trip_id"],
                "rank": rank,
                "provider_id": estimate.provider_id.value,
                "vehicle_class": estimate.vehicle_class,
                "surge_multiplier": round(estimate.fare.surge_multiplier, 2),
                "total": round(estimate.fare.total, 2),
                "eta": estimate.eta_text,
            })

    return pd.DataFrame(
        rows,
        columns=["trip_id", "rank", "provider_id", "vehicle_class", "surge_multiplier", "total", "eta"],
    )


def run_comparison(live: bool = False, surge: float = None):
    print("=== STARTING FARE COMPARISON ===")

    trips = load_trips()
    print(f"Loaded {len(trips)} trips.\n")

    aggregator = default_aggregator(include_external=live)
    if surge is not None:
        aggregator.surge_model = FixedSurgeModel(surge)

    start_time = time.time()
    results = compare_trips(trips, aggregator)
    print(f"Compared {len(trips)} trips in {time.time() - start_time:.2f}s.\n")

    for trip_id, trip_results in results.groupby("trip_id", sort=False):
        cheapest = trip_results.iloc[0]
        print(f"[{trip_id}] cheapest: {cheapest['provider_id']} {cheapest['vehicle_class']} "
              f"at {cheapest['total']:.2f} ({len(trip_results)} options)")

    output_path = os.path.join(BASE_DIR, "fare_comparison_results.csv")
    results.to_csv(output_path, index=False)

    print("\n=== COMPARISON COMPLETE ===")
    print(f"Results written to '{output_path}'.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Compare ride fares for every trip in sampledata/trips.csv.")
    parser.add_argument("--live", action="store_true", help="Also query Namma Yatri over HTTP.")
    parser.add_argument("--surge", type=float, default=None, help="Use a fixed surge multiplier instead of time of day.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log provider calls.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    run_comparison(live=args.live, surge=args.surge)
