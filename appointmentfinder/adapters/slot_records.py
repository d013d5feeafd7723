"""
Parsing of raw slot store documents into domain models.

Document format:
{
    "sales_managers": [
        {"id": 1, "name": "...", "languages": [...], "products": [...],
         "customer_ratings": [...]}
    ],
    "slots": [
        {"id": 1, "start_date": "2024-05-03T09:00:00Z",
         "end_date": "2024-05-03T10:00:00Z", "booked": false,
         "sales_manager_id": 1}
    ]
}
"""

from datetime import datetime
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime

from ..domain.exceptions import SlotStoreError
from ..domain.models import SalesManager, Slot, TimeRange


def parse_timestamp(value: Any) -> DateTime:
    """
    Parse an ISO 8601 timestamp into a pendulum DateTime in UTC.

    Naive timestamps are taken as UTC.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO 8601 string, got {value!r}")

    parsed = pendulum.parse(value, tz="UTC")

    if isinstance(parsed, DateTime):
        return parsed.in_timezone("UTC")

    raise ValueError(f"Could not parse datetime: {value}")


def _record_list(document: Dict[str, Any], key: str) -> List[Any]:
    records = document.get(key, [])
    if not isinstance(records, list):
        raise SlotStoreError(f"Slot store field '{key}' must be a list, got {type(records).__name__}")
    return records


def _parse_booked(record: Dict[str, Any]) -> bool:
    booked = record.get("booked", False)
    if not isinstance(booked, bool):
        raise SlotStoreError(
            f"Slot {record.get('id')!r}: 'booked' must be true or false, got {booked!r}"
        )
    return booked


def parse_sales_managers(document: Dict[str, Any]) -> Dict[int, SalesManager]:
    """Build the sales manager lookup keyed by id."""
    managers: Dict[int, SalesManager] = {}

    for record in _record_list(document, "sales_managers"):
        try:
            manager = SalesManager(
                id=record["id"],
                name=record.get("name", ""),
                languages=record.get("languages", []),
                products=record.get("products", []),
                rating_tiers=record.get("customer_ratings", []),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise SlotStoreError(f"Invalid sales manager record {record!r}: {exc}") from exc

        managers[manager.id] = manager

    return managers


def parse_slots(document: Any) -> List[Slot]:
    """
    Parse every slot of a store document, attaching its owner snapshot.

    Raises:
        SlotStoreError: If the document or any record is malformed
    """
    if not isinstance(document, dict):
        raise SlotStoreError("Slot store document must be a JSON object.")

    managers = parse_sales_managers(document)
    slots: List[Slot] = []

    for record in _record_list(document, "slots"):
        try:
            manager_id = record["sales_manager_id"]
            owner = managers.get(manager_id)
            if owner is None:
                raise SlotStoreError(
                    f"Slot {record.get('id')!r} references unknown sales manager {manager_id!r}"
                )

            slots.append(
                Slot(
                    id=record["id"],
                    start=parse_timestamp(record["start_date"]),
                    end=parse_timestamp(record["end_date"]),
                    booked=_parse_booked(record),
                    owner=owner,
                )
            )
        except SlotStoreError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SlotStoreError(f"Invalid slot record {record!r}: {exc}") from exc

    return slots


def slots_starting_in(slots: List[Slot], start: datetime, end: datetime) -> List[Slot]:
    """Keep slots whose start lies in ``[start, end)``."""
    window = TimeRange(start=start, end=end)
    return [slot for slot in slots if window.contains(slot.start)]
