"""
Core business logic for resolving appointment availability.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from bisect import bisect_left
from collections import Counter, defaultdict
from typing import Dict, List, Sequence

from .models import AvailabilityEntry, Query, Slot


class AvailabilityResolver:
    """
    Resolves which free slots of one day can be offered for a query.

    Algorithm:
    1. Keep free slots whose sales manager matches language, products and rating
    2. Drop free slots overlapping a booked slot of the same sales manager
    3. Group the survivors by start instant and count them
    4. Return the groups in ascending start order
    """

    def resolve(self, slots: Sequence[Slot], query: Query) -> List[AvailabilityEntry]:
        """
        Run the full pipeline over one snapshot of slots.

        Args:
            slots: Every slot (booked and free) starting inside the day window
            query: Match criteria

        Returns:
            List of AvailabilityEntry objects ordered by start
        """
        eligible = self.filter_eligible(slots, query)
        survivors = self.remove_conflicts(eligible, slots)
        return self.aggregate(survivors)

    def filter_eligible(self, slots: Sequence[Slot], query: Query) -> List[Slot]:
        """
        Keep free slots whose sales manager satisfies all criteria.

        Products are matched conjunctively: the manager must cover every
        requested product. An empty product set matches everyone.
        """
        return [
            slot for slot in slots
            if not slot.booked
            and query.language in slot.owner.languages
            and query.products <= slot.owner.products
            and query.rating in slot.owner.rating_tiers
        ]

    def remove_conflicts(
        self,
        eligible: Sequence[Slot],
        all_slots: Sequence[Slot]
    ) -> List[Slot]:
        """
        Drop eligible slots that overlap a booked slot of the same owner.

        Booked slots are indexed per owner and sorted by start, so each free
        slot only scans bookings of its own owner that start before it ends.
        """
        booked_by_owner = self._index_booked_by_owner(all_slots)

        return [
            slot for slot in eligible
            if not self._has_conflict(slot, booked_by_owner.get(slot.owner_id, []))
        ]

    def aggregate(self, survivors: Sequence[Slot]) -> List[AvailabilityEntry]:
        """
        Count survivors per exact start instant, ascending by start.
        """
        counts = Counter(slot.start for slot in survivors)

        return [
            AvailabilityEntry(start=start, count=count)
            for start, count in sorted(counts.items())
        ]

    @staticmethod
    def _index_booked_by_owner(slots: Sequence[Slot]) -> Dict[int, List[Slot]]:
        index: Dict[int, List[Slot]] = defaultdict(list)

        for slot in slots:
            if slot.booked:
                index[slot.owner_id].append(slot)

        for booked in index.values():
            booked.sort(key=lambda s: s.start)

        return index

    @staticmethod
    def _has_conflict(slot: Slot, booked: List[Slot]) -> bool:
        """
        Check a free slot against one owner's bookings (sorted by start).

        Only bookings starting before ``slot.end`` can overlap it.
        """
        upper = bisect_left(booked, slot.end, key=lambda s: s.start)

        return any(slot.overlaps(other) for other in booked[:upper])
