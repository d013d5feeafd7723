"""
Typed outcome of an availability resolution.

Callers receive either the ordered entries or a tagged failure instead of an
exception; only the boundary layer turns a failure into a transport response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import AvailabilityError, FailureKind
from .models import AvailabilityEntry


@dataclass(frozen=True)
class Failure:
    """A failed resolution: what went wrong and the exception behind it."""
    kind: FailureKind
    message: str
    error: AvailabilityError

    @classmethod
    def from_error(cls, error: AvailabilityError) -> "Failure":
        return cls(kind=error.kind, message=str(error), error=error)


@dataclass(frozen=True)
class AvailabilityResult:
    """Either ``entries`` (success) or ``failure``, never both."""
    entries: List[AvailabilityEntry] = field(default_factory=list)
    failure: Optional[Failure] = None

    @classmethod
    def success(cls, entries: List[AvailabilityEntry]) -> "AvailabilityResult":
        return cls(entries=list(entries))

    @classmethod
    def from_error(cls, error: AvailabilityError) -> "AvailabilityResult":
        return cls(failure=Failure.from_error(error))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> List[AvailabilityEntry]:
        """
        Return the entries, re-raising the stored exception on failure.
        """
        if self.failure is not None:
            raise self.failure.error
        return self.entries
