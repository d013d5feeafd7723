"""
HTTP client for a remote slot store.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import requests

from ..domain.exceptions import SlotStoreError
from ..domain.models import Slot
from .slot_records import parse_slots, slots_starting_in

logger = logging.getLogger(__name__)


def _format_instant(instant: datetime) -> str:
    return instant.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HttpSlotStore:
    """
    Client for a slot store exposing ``GET /slots?start=...&end=...``.

    The endpoint returns the same document shape the JSON store reads.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the HTTP slot store.

        Args:
            base_url: Base URL of the slot store service
            timeout_seconds: Per-request timeout
            session: Optional requests session (a new one is created otherwise)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}

    async def fetch_slots(self, start: datetime, end: datetime) -> List[Slot]:
        """
        Fetch every slot whose start lies in ``[start, end)``.

        The blocking request runs in a worker thread.

        Raises:
            SlotStoreError: If the request fails or the payload is malformed
        """
        document = await asyncio.to_thread(self._get_document, start, end)

        # The remote filter is not trusted to use the same boundaries
        return slots_starting_in(parse_slots(document), start, end)

    def _get_document(self, start: datetime, end: datetime) -> Any:
        url = f"{self.base_url}/slots"
        params = {"start": _format_instant(start), "end": _format_instant(end)}

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout_seconds
            )
            response.raise_for_status()
            document = response.json()
        except requests.exceptions.RequestException as e:
            raise SlotStoreError(f"Failed to fetch slots from {url}: {e}") from e
        except ValueError as e:
            raise SlotStoreError(f"Slot store returned invalid JSON: {e}") from e

        logger.debug("Fetched slot document from %s", url)
        return document
