"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_resolver import AvailabilityResolver
from .exceptions import (
    AvailabilityError,
    DataAccessFailure,
    FailureKind,
    InvalidDateFormat,
    MissingQuery,
    SlotStoreError,
)
from .models import AvailabilityEntry, Query, SalesManager, Slot, TimeRange
from .query_normalizer import normalize_date
from .results import AvailabilityResult, Failure

__all__ = [
    "AvailabilityEntry",
    "AvailabilityError",
    "AvailabilityResolver",
    "AvailabilityResult",
    "DataAccessFailure",
    "Failure",
    "FailureKind",
    "InvalidDateFormat",
    "MissingQuery",
    "Query",
    "SalesManager",
    "Slot",
    "SlotStoreError",
    "TimeRange",
    "normalize_date",
]
