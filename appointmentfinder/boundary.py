"""
Request/response mapping between callers and the availability service.

Validates incoming query payloads and translates an ``AvailabilityResult``
into a status code plus JSON-ready body. This is the only place failures are
logged and turned into user-facing messages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .domain.exceptions import FailureKind
from .domain.models import Query
from .domain.results import AvailabilityResult
from .services.availability_finder import AvailabilityFinderService

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_INTERNAL_SERVER_ERROR = 500


class QueryRequest(BaseModel):
    """Incoming availability query."""
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    products: List[str] = Field(min_length=1)
    language: str = Field(min_length=1)
    rating: str = Field(min_length=1)

    @field_validator("products")
    @classmethod
    def validate_products(cls, value: List[str]) -> List[str]:
        """Reject blank product names."""
        if any(not product for product in value):
            raise ValueError("Product names must not be empty")
        return value

    def to_query(self) -> Query:
        return Query(
            date=self.date,
            language=self.language,
            products=frozenset(self.products),
            rating=self.rating,
        )


@dataclass(frozen=True)
class BoundaryResponse:
    """Status code plus JSON-serializable body."""
    status_code: int
    body: Any

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


def build_response(result: AvailabilityResult) -> BoundaryResponse:
    """
    Translate a resolution result into a response.

    Success maps to 200 with the entry list, a bad date to 400 with a fixed
    message, a missing query to 400, everything else to 500.
    """
    failure = result.failure
    if failure is None:
        return BoundaryResponse(HTTP_OK, [entry.to_dict() for entry in result.entries])

    if failure.kind is FailureKind.INVALID_DATE_FORMAT:
        logger.warning("Rejected query: %s", failure.message)
        return BoundaryResponse(HTTP_BAD_REQUEST, {"message": "Invalid date format."})

    if failure.kind is FailureKind.MISSING_QUERY:
        logger.warning("Rejected query: %s", failure.message)
        return BoundaryResponse(HTTP_BAD_REQUEST, {"message": failure.message})

    logger.error("Error retrieving slots: %s", failure.message, exc_info=failure.error)
    return BoundaryResponse(HTTP_INTERNAL_SERVER_ERROR, {"message": failure.message})


def validation_error_response(exc: ValidationError) -> BoundaryResponse:
    """Build a 400 response listing each invalid field."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning("Rejected invalid query payload: %d error(s)", len(errors))
    return BoundaryResponse(HTTP_BAD_REQUEST, {"message": "Invalid request.", "errors": errors})


async def handle_query(
    payload: Optional[Mapping[str, Any]],
    service: AvailabilityFinderService,
) -> BoundaryResponse:
    """
    Validate a raw query payload, run it and build the response.

    A ``None`` payload is passed through as a missing query.
    """
    query: Optional[Query] = None

    if payload is not None:
        try:
            query = QueryRequest.model_validate(payload).to_query()
        except ValidationError as exc:
            return validation_error_response(exc)

    result = await service.find_availability(query)
    return build_response(result)
