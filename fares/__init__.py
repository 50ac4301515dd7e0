#Marks fares as a package.
#Re-exports the domain models, the surge strategies and the local estimators
#so other modules import from fares without knowing internal file names.
#No HTTP here.

from .models import (
    AggregateResult,
    BookingRef,
    FareBreakdown,
    Location,
    NormalizedEstimate,
    ProviderId,
    Route,
)
from .surge import FixedSurgeModel, SurgeModel, TimeOfDaySurgeModel
from .estimators import LocalFareEstimator, ola_estimator, uber_estimator

__all__ = [
    "AggregateResult",
    "BookingRef",
    "FareBreakdown",
    "Location",
    "NormalizedEstimate",
    "ProviderId",
    "Route",
    "SurgeModel",
    "FixedSurgeModel",
    "TimeOfDaySurgeModel",
    "LocalFareEstimator",
    "ola_estimator",
    "uber_estimator",
]
