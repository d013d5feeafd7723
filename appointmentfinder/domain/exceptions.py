"""
Domain-specific exception hierarchy for availability resolution.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Tag identifying which kind of failure ended a resolution."""
    MISSING_QUERY = "missing_query"
    INVALID_DATE_FORMAT = "invalid_date_format"
    DATA_ACCESS_FAILURE = "data_access_failure"


class AvailabilityError(Exception):
    """Base class for all application-level errors."""

    kind: FailureKind = FailureKind.DATA_ACCESS_FAILURE


class MissingQuery(AvailabilityError):
    """Raised when no query object was supplied."""

    kind = FailureKind.MISSING_QUERY


class InvalidDateFormat(AvailabilityError):
    """Raised when the query date is not a valid YYYY-MM-DD calendar day."""

    kind = FailureKind.INVALID_DATE_FORMAT


class DataAccessFailure(AvailabilityError):
    """Raised when slot data cannot be fetched."""

    kind = FailureKind.DATA_ACCESS_FAILURE


class SlotStoreError(DataAccessFailure):
    """Raised by slot store adapters when records cannot be read or parsed."""
