"""
Tests for availability resolver.
"""

from datetime import datetime, timedelta, timezone

from appointmentfinder.domain.availability_resolver import AvailabilityResolver
from appointmentfinder.domain.models import AvailabilityEntry, Query, SalesManager, Slot


def _utc(hour: int, minute: int = 0, microsecond: int = 0) -> datetime:
    return datetime(2024, 5, 3, hour, minute, 0, microsecond, tzinfo=timezone.utc)


def _manager(manager_id: int = 1, languages=("English",), products=("Product1",), ratings=("5",)) -> SalesManager:
    return SalesManager(
        id=manager_id,
        languages=languages,
        products=products,
        rating_tiers=ratings,
    )


def _slot(slot_id: int, start: datetime, end: datetime, owner: SalesManager, booked: bool = False) -> Slot:
    return Slot(id=slot_id, start=start, end=end, booked=booked, owner=owner)


def _query(language="English", products=("Product1",), rating="5") -> Query:
    return Query(date="2024-05-03", language=language, products=frozenset(products), rating=rating)


class TestScenarios:
    """End-to-end resolution scenarios."""

    def test_single_matching_slot(self):
        """One free matching slot yields one entry."""
        owner = _manager()
        slots = [_slot(1, _utc(9), _utc(10), owner)]

        result = AvailabilityResolver().resolve(slots, _query())

        assert result == [AvailabilityEntry(start=_utc(9), count=1)]
        assert result[0].format_start() == "2024-05-03T09:00:00.000Z"

    def test_two_slots_are_ordered(self):
        """Two free slots of one owner yield two ascending entries."""
        owner = _manager()
        slots = [
            _slot(2, _utc(10), _utc(11), owner),
            _slot(1, _utc(9), _utc(10), owner),
        ]

        result = AvailabilityResolver().resolve(slots, _query())

        assert [entry.start for entry in result] == [_utc(9), _utc(10)]
        assert [entry.count for entry in result] == [1, 1]

    def test_overlapping_booking_excludes_free_slot(self):
        """A booked slot of the same owner overlapping the free slot removes it."""
        owner = _manager()
        slots = [
            _slot(1, _utc(9), _utc(10), owner),
            _slot(2, _utc(9, 30), _utc(10, 30), owner, booked=True),
        ]

        assert AvailabilityResolver().resolve(slots, _query()) == []

    def test_language_mismatch(self):
        """Nothing matches a language the manager does not speak."""
        owner = _manager(languages=("English",))
        slots = [_slot(1, _utc(9), _utc(10), owner)]

        assert AvailabilityResolver().resolve(slots, _query(language="Spanish")) == []

    def test_empty_snapshot(self):
        """No slots yields an empty list, not an error."""
        assert AvailabilityResolver().resolve([], _query()) == []


class TestEligibilityFilter:
    """Tests for the criteria filter."""

    def test_booked_slots_never_eligible(self):
        owner = _manager()
        slots = [_slot(1, _utc(9), _utc(10), owner, booked=True)]

        assert AvailabilityResolver().filter_eligible(slots, _query()) == []

    def test_language_match_is_case_sensitive(self):
        owner = _manager(languages=("English",))
        slots = [_slot(1, _utc(9), _utc(10), owner)]

        assert AvailabilityResolver().filter_eligible(slots, _query(language="english")) == []

    def test_all_requested_products_must_be_covered(self):
        covers_both = _manager(1, products=("SolarPanels", "Heatpumps"))
        covers_one = _manager(2, products=("SolarPanels",))
        slots = [
            _slot(1, _utc(9), _utc(10), covers_both),
            _slot(2, _utc(9), _utc(10), covers_one),
        ]

        eligible = AvailabilityResolver().filter_eligible(
            slots, _query(products=("SolarPanels", "Heatpumps"))
        )

        assert [slot.id for slot in eligible] == [1]

    def test_manager_may_cover_more_products_than_requested(self):
        owner = _manager(products=("SolarPanels", "Heatpumps", "Batteries"))
        slots = [_slot(1, _utc(9), _utc(10), owner)]

        eligible = AvailabilityResolver().filter_eligible(slots, _query(products=("Heatpumps",)))

        assert len(eligible) == 1

    def test_rating_must_match(self):
        owner = _manager(ratings=("Gold", "Silver"))
        slots = [_slot(1, _utc(9), _utc(10), owner)]
        resolver = AvailabilityResolver()

        assert len(resolver.filter_eligible(slots, _query(rating="Silver"))) == 1
        assert resolver.filter_eligible(slots, _query(rating="Bronze")) == []

    def test_empty_products_match_every_manager(self):
        """An empty product set is vacuously covered."""
        owner = _manager(products=())
        slots = [_slot(1, _utc(9), _utc(10), owner)]

        eligible = AvailabilityResolver().filter_eligible(slots, _query(products=()))

        assert [slot.id for slot in eligible] == [1]


class TestConflictResolver:
    """Tests for overlap removal."""

    def test_touching_booking_is_not_a_conflict(self):
        owner = _manager()
        free = _slot(1, _utc(9), _utc(10), owner)
        before = _slot(2, _utc(8), _utc(9), owner, booked=True)
        after = _slot(3, _utc(10), _utc(11), owner, booked=True)

        survivors = AvailabilityResolver().remove_conflicts([free], [free, before, after])

        assert survivors == [free]

    def test_other_owner_booking_is_not_a_conflict(self):
        owner = _manager(1)
        other = _manager(2)
        free = _slot(1, _utc(9), _utc(10), owner)
        booked = _slot(2, _utc(9), _utc(10), other, booked=True)

        survivors = AvailabilityResolver().remove_conflicts([free], [free, booked])

        assert survivors == [free]

    def test_coarse_booking_covering_free_slot(self):
        """A longer booked block that contains the free slot excludes it."""
        owner = _manager()
        free = _slot(1, _utc(10), _utc(10, 30), owner)
        block = _slot(2, _utc(9), _utc(12), owner, booked=True)

        assert AvailabilityResolver().remove_conflicts([free], [free, block]) == []

    def test_booking_inside_free_slot(self):
        owner = _manager()
        free = _slot(1, _utc(9), _utc(12), owner)
        booked = _slot(2, _utc(10), _utc(10, 15), owner, booked=True)

        assert AvailabilityResolver().remove_conflicts([free], [free, booked]) == []

    def test_booking_starting_earlier_with_late_end(self):
        """A long booking that starts first is found past shorter ones."""
        owner = _manager()
        free = _slot(1, _utc(14), _utc(15), owner)
        long_booking = _slot(2, _utc(8), _utc(16), owner, booked=True)
        short_booking = _slot(3, _utc(9), _utc(10), owner, booked=True)

        survivors = AvailabilityResolver().remove_conflicts(
            [free], [short_booking, free, long_booking]
        )

        assert survivors == []

    def test_free_slots_do_not_conflict_with_each_other(self):
        owner = _manager()
        first = _slot(1, _utc(9), _utc(10), owner)
        overlapping_free = _slot(2, _utc(9, 30), _utc(10, 30), owner)

        survivors = AvailabilityResolver().remove_conflicts(
            [first, overlapping_free], [first, overlapping_free]
        )

        assert survivors == [first, overlapping_free]


class TestAggregator:
    """Tests for grouping and ordering."""

    def test_counts_slots_per_start(self):
        a = _manager(1)
        b = _manager(2)
        c = _manager(3)
        survivors = [
            _slot(1, _utc(11), _utc(12), a),
            _slot(2, _utc(10), _utc(11), b),
            _slot(3, _utc(11), _utc(12), b),
            _slot(4, _utc(11), _utc(11, 30), c),
        ]

        result = AvailabilityResolver().aggregate(survivors)

        assert result == [
            AvailabilityEntry(start=_utc(10), count=1),
            AvailabilityEntry(start=_utc(11), count=3),
        ]

    def test_starts_differing_by_one_tick_are_separate(self):
        owner = _manager()
        survivors = [
            _slot(1, _utc(9), _utc(10), owner),
            _slot(2, _utc(9, microsecond=1), _utc(10), owner),
        ]

        result = AvailabilityResolver().aggregate(survivors)

        assert [entry.count for entry in result] == [1, 1]

    def test_sub_millisecond_starts_stay_separate_but_render_alike(self):
        """Grouping keeps full precision; the wire format truncates to milliseconds."""
        owner = _manager()
        survivors = [
            _slot(1, _utc(9), _utc(10), owner),
            _slot(2, _utc(9, microsecond=1), _utc(10), owner),
        ]

        result = AvailabilityResolver().aggregate(survivors)

        assert len(result) == 2
        assert result[0].start < result[1].start
        assert [entry.to_dict()["start_date"] for entry in result] == [
            "2024-05-03T09:00:00.000Z",
            "2024-05-03T09:00:00.000Z",
        ]

    def test_equal_instants_in_different_offsets_group_together(self):
        owner = _manager()
        plus_two = timezone(timedelta(hours=2))
        survivors = [
            _slot(1, _utc(9), _utc(10), owner),
            _slot(2, datetime(2024, 5, 3, 11, 0, tzinfo=plus_two), _utc(10), owner),
        ]

        result = AvailabilityResolver().aggregate(survivors)

        assert len(result) == 1
        assert result[0].count == 2

    def test_empty_input(self):
        assert AvailabilityResolver().aggregate([]) == []


class TestProperties:
    """Invariants over a mixed snapshot with several managers."""

    def _snapshot(self):
        gold = _manager(1, languages=("German", "English"), products=("SolarPanels", "Heatpumps"), ratings=("Gold",))
        silver = _manager(2, languages=("German",), products=("SolarPanels", "Heatpumps"), ratings=("Gold", "Silver"))
        other = _manager(3, languages=("English",), products=("Heatpumps",), ratings=("Gold",))
        base = _utc(8)
        slots = []
        slot_id = 0
        for owner in (gold, silver, other):
            for half_hours in range(0, 16):
                slot_id += 1
                start = base + timedelta(minutes=30 * half_hours)
                slots.append(_slot(slot_id, start, start + timedelta(hours=1), owner, booked=(half_hours % 5 == 0)))
        return slots

    def test_no_booked_leakage_and_count_conservation(self):
        slots = self._snapshot()
        query = _query(language="German", products=("SolarPanels", "Heatpumps"), rating="Gold")
        resolver = AvailabilityResolver()

        result = resolver.resolve(slots, query)

        survivors = resolver.remove_conflicts(resolver.filter_eligible(slots, query), slots)
        assert all(not slot.booked for slot in survivors)
        assert sum(entry.count for entry in result) == len(survivors)
        for entry in result:
            assert entry.count == sum(1 for slot in survivors if slot.start == entry.start)

    def test_output_strictly_ascending(self):
        slots = self._snapshot()
        query = _query(language="German", products=("SolarPanels",), rating="Gold")

        result = AvailabilityResolver().resolve(slots, query)

        starts = [entry.start for entry in result]
        assert starts == sorted(starts)
        assert len(starts) == len(set(starts))
        assert result

    def test_survivors_never_overlap_own_bookings(self):
        slots = self._snapshot()
        query = _query(language="German", products=("Heatpumps",), rating="Gold")
        resolver = AvailabilityResolver()

        survivors = resolver.remove_conflicts(resolver.filter_eligible(slots, query), slots)

        for slot in survivors:
            for other in slots:
                if other.booked and other.owner_id == slot.owner_id:
                    assert not slot.overlaps(other)
