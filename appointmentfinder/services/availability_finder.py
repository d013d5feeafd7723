"""
Application service for resolving appointment availability.

The service coordinates fetching the day's slots via a slot loader adapter and
delegates the actual resolution to the domain-level ``AvailabilityResolver``.
This keeps the CLI thin and improves testability by allowing the storage
dependency to be replaced via a simple protocol.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Protocol

from ..domain.availability_resolver import AvailabilityResolver
from ..domain.exceptions import AvailabilityError, DataAccessFailure, MissingQuery
from ..domain.models import Query, Slot, TimeRange
from ..domain.query_normalizer import normalize_date
from ..domain.results import AvailabilityResult

logger = logging.getLogger(__name__)


class SlotLoaderProtocol(Protocol):
    """Protocol describing the slot storage behaviour needed by the service."""

    async def fetch_slots(
        self,
        start: datetime,
        end: datetime,
    ) -> List[Slot]:
        """Return every slot (booked or free) with ``start <= slot.start < end``."""


class AvailabilityFinderService:
    """
    Orchestrates slot retrieval and availability resolution.

    Dependency inversion toward a protocol makes it easy to plug in the JSON
    file store, the HTTP store, or a stub in tests.
    """

    def __init__(
        self,
        slot_loader: SlotLoaderProtocol,
        resolver: Optional[AvailabilityResolver] = None,
        fetch_timeout: Optional[float] = None,
    ) -> None:
        self._slot_loader = slot_loader
        self._resolver = resolver or AvailabilityResolver()
        self._fetch_timeout = fetch_timeout

    async def find_availability(self, query: Optional[Query]) -> AvailabilityResult:
        """
        Normalize the query date, fetch the day's slots and resolve them.

        Never raises for a missing query, a bad date or a failed fetch; those
        come back as a failed ``AvailabilityResult``.
        """
        try:
            if query is None:
                raise MissingQuery("A query is required.")

            window = normalize_date(query.date)
            slots = await self.fetch_slots(window)
        except AvailabilityError as exc:
            logger.debug("Availability resolution failed (%s): %s", exc.kind.value, exc)
            return AvailabilityResult.from_error(exc)

        entries = self._resolver.resolve(slots, query)
        logger.debug(
            "Resolved %d slot(s) for %s into %d entr%s",
            len(slots),
            query.date,
            len(entries),
            "y" if len(entries) == 1 else "ies",
        )
        return AvailabilityResult.success(entries)

    async def fetch_slots(self, window: TimeRange) -> List[Slot]:
        """
        Fetch the snapshot for one window.

        The fetch timeout applies here and nowhere else. Any loader failure is
        surfaced once as ``DataAccessFailure``; nothing is retried.
        """
        try:
            if self._fetch_timeout is None:
                slots = await self._slot_loader.fetch_slots(window.start, window.end)
            else:
                slots = await asyncio.wait_for(
                    self._slot_loader.fetch_slots(window.start, window.end),
                    timeout=self._fetch_timeout,
                )
        except DataAccessFailure:
            logger.warning("Slot loader failed for window %s", window)
            raise
        except asyncio.TimeoutError as exc:
            logger.warning("Slot loader timed out after %ss for window %s", self._fetch_timeout, window)
            raise DataAccessFailure(
                f"Fetching slots timed out after {self._fetch_timeout} seconds"
            ) from exc
        except Exception as exc:
            logger.warning("Slot loader raised %s for window %s", type(exc).__name__, window)
            raise DataAccessFailure(f"Failed to fetch slots: {exc}") from exc

        return list(slots)
