"""
Domain models for slots, sales managers and availability queries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable


def _as_frozenset(values: Iterable[str]) -> FrozenSet[str]:
    if isinstance(values, str):
        # A bare string would otherwise be split into characters
        return frozenset([values])
    return frozenset(values)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ranges do not overlap."""
        return self.start < other.end and self.end > other.start

    def contains(self, instant: datetime) -> bool:
        """Check if an instant lies inside the range (end excluded)."""
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


@dataclass(frozen=True)
class SalesManager:
    """
    Capability snapshot of a provider offering appointments.

    Capabilities are held as frozensets so membership checks stay O(1).
    """
    id: int
    languages: FrozenSet[str] = field(default_factory=frozenset)
    products: FrozenSet[str] = field(default_factory=frozenset)
    rating_tiers: FrozenSet[str] = field(default_factory=frozenset)
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "languages", _as_frozenset(self.languages))
        object.__setattr__(self, "products", _as_frozenset(self.products))
        object.__setattr__(self, "rating_tiers", _as_frozenset(self.rating_tiers))


@dataclass(frozen=True)
class Slot:
    """
    A bookable (or already booked) time interval owned by one sales manager.

    Invariant: start must be before end.
    """
    id: int
    start: datetime
    end: datetime
    booked: bool
    owner: SalesManager

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Slot {self.id}: start {self.start} must be before end {self.end}"
            )

    @property
    def owner_id(self) -> int:
        return self.owner.id

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)

    def overlaps(self, other: "Slot") -> bool:
        """Check if this slot's interval overlaps another slot's interval."""
        return self.time_range.overlaps(other.time_range)


@dataclass(frozen=True)
class Query:
    """
    Match criteria for one availability lookup.
    """
    date: str
    language: str
    products: FrozenSet[str]
    rating: str

    def __post_init__(self):
        object.__setattr__(self, "products", _as_frozenset(self.products))


@dataclass(frozen=True)
class AvailabilityEntry:
    """
    Number of free slots starting at one instant.
    """
    start: datetime
    count: int

    def format_start(self) -> str:
        """
        Format the start instant in UTC with millisecond precision.
        Format: YYYY-MM-DDTHH:MM:SS.fffZ
        """
        utc_start = self.start.astimezone(timezone.utc)
        return utc_start.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, object]:
        """Wire representation used by the JSON output."""
        return {
            "start_date": self.format_start(),
            "available_count": self.count,
        }
