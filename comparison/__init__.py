#Expose the comparison pipeline:
#Aggregator orchestrator (the "one call" entry point)
#Stable sort by fare total

from .aggregator import ExternalFareProvider, FareAggregator, default_aggregator, sort_by_total

__all__ = [
    "ExternalFareProvider",
    "FareAggregator",
    "default_aggregator",
    "sort_by_total",
]
