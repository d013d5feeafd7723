"""
Slot store backed by a local JSON document.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List

from ..domain.exceptions import SlotStoreError
from ..domain.models import SalesManager, Slot
from .slot_records import parse_sales_managers, parse_slots, slots_starting_in

logger = logging.getLogger(__name__)


class JsonSlotStore:
    """
    Loads sales managers and slots from a JSON file.

    The file is re-read on every fetch so each resolution sees the current
    contents as one snapshot.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Path to the JSON document (see ``slot_records`` for the format)
        """
        self.path = Path(path)

    def _load_document(self) -> Any:
        if not self.path.exists():
            raise SlotStoreError(f"Slot data file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as exc:
            raise SlotStoreError(f"Invalid JSON in {self.path}: {exc}") from exc
        except OSError as exc:
            raise SlotStoreError(f"Could not read slot data file {self.path}: {exc}") from exc

    async def fetch_slots(self, start: datetime, end: datetime) -> List[Slot]:
        """
        Return every slot whose start lies in ``[start, end)``.

        Args:
            start: Inclusive window start
            end: Exclusive window end

        Returns:
            List of Slot objects, booked and free
        """
        slots = parse_slots(self._load_document())
        in_window = slots_starting_in(slots, start, end)
        logger.debug("Loaded %d of %d slot(s) from %s", len(in_window), len(slots), self.path)
        return in_window

    def list_sales_managers(self) -> List[SalesManager]:
        """Return all sales managers in the document, ordered by id."""
        document = self._load_document()
        if not isinstance(document, dict):
            raise SlotStoreError("Slot store document must be a JSON object.")

        managers = parse_sales_managers(document)
        return [managers[key] for key in sorted(managers)]
