"""
Tests für Zeitfenster und Kapazitätsberechnung.
"""
from datetime import date, time
from types import SimpleNamespace
from uuid import uuid4

from app.models import ReservationStatus
from app.services import slot_aggregator
from app.services.slot_aggregator import Slot, aggregate


class TestCapacityMath:

    def test_booked_and_available(self, activity, make_reservation):
        reservations = [make_reservation(people=4), make_reservation(people=3)]
        slots = aggregate(activity, [], reservations)

        assert len(slots) == 1
        assert slots[0].capacity == 10
        assert slots[0].booked == 7
        assert slots[0].available == 3

    def test_overbooking_is_not_clamped(self, activity, make_reservation):
        reservations = [make_reservation(people=4), make_reservation(people=3), make_reservation(people=5)]
        slot = aggregate(activity, [], reservations)[0]

        assert slot.booked == 12
        assert slot.available == -2
        assert len(slot.members) == 3

    def test_cancelled_and_completed_are_ignored(self, activity, make_reservation):
        reservations = [
            make_reservation(people=2, status=ReservationStatus.PENDING),
            make_reservation(people=5, status=ReservationStatus.CANCELLED),
            make_reservation(people=5, status=ReservationStatus.COMPLETED),
        ]
        slot = aggregate(activity, [], reservations)[0]
        assert slot.booked == 2
        assert slot.available == 8

    def test_only_cancelled_gives_no_slot(self, activity, make_reservation):
        reservations = [make_reservation(status=ReservationStatus.CANCELLED)]
        assert aggregate(activity, [], reservations) == []


class TestGrouping:

    def test_grouped_by_exact_range_and_sorted(self, activity, make_reservation):
        reservations = [
            make_reservation(start=time(14, 0), end=time(15, 0)),
            make_reservation(start=time(9, 0), end=time(10, 0)),
            make_reservation(start=time(9, 0), end=time(10, 30)),
        ]
        slots = aggregate(activity, [], reservations)

        assert [(s.start, s.end) for s in slots] == [
            (time(9, 0), time(10, 0)),
            (time(9, 0), time(10, 30)),
            (time(14, 0), time(15, 0)),
        ]

    def test_capacity_from_variant(self, activity, variant, make_reservation):
        slot = aggregate(activity, [variant], [make_reservation(people=1, variant_id=variant.id)])[0]
        assert slot.capacity == 4
        assert slot.available == 3

    def test_first_reservation_decides_capacity(self, activity, variant, make_reservation):
        first_variant = [make_reservation(people=1, variant_id=variant.id), make_reservation(people=1)]
        assert aggregate(activity, [variant], first_variant)[0].capacity == 4

        first_plain = [make_reservation(people=1), make_reservation(people=1, variant_id=variant.id)]
        assert aggregate(activity, [variant], first_plain)[0].capacity == 10

    def test_unknown_variant_falls_back_to_activity(self, activity):
        reservation = SimpleNamespace(
            status=ReservationStatus.CONFIRMED, start_time=time(10, 0), end_time=time(11, 0),
            variant_id=uuid4(), number_of_people=2
        )
        slot = aggregate(activity, [], [reservation])[0]
        assert slot.capacity == 10


class TestLevels:

    def _slot(self, capacity, booked):
        return Slot(start=time(10, 0), end=time(11, 0), capacity=capacity, booked=booked)

    def test_utilization_levels(self):
        assert slot_aggregator.utilization_level(self._slot(10, 10)) == "critical"
        assert slot_aggregator.utilization_level(self._slot(10, 12)) == "critical"
        assert slot_aggregator.utilization_level(self._slot(10, 8)) == "warning"
        assert slot_aggregator.utilization_level(self._slot(10, 7)) == "normal"

    def test_availability_levels(self):
        assert slot_aggregator.availability_level(self._slot(10, 10)) == "critical"
        assert slot_aggregator.availability_level(self._slot(10, 9)) == "warning"
        assert slot_aggregator.availability_level(self._slot(10, 8)) == "warning"
        assert slot_aggregator.availability_level(self._slot(10, 7)) == "normal"


class TestDaySlotsEndpoint:
    """Tests für GET /reservations/slots"""

    def test_day_overview(self, client, auth_headers, activity, make_reservation):
        make_reservation(people=4)
        make_reservation(people=3)
        make_reservation(people=5, booking_date=date(2024, 12, 24))

        response = client.get("/reservations/slots?date=2024-12-23", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["booking_date"] == "2024-12-23"
        assert len(data["activities"]) == 1

        slot = data["activities"][0]["slots"][0]
        assert slot["capacity"] == 10
        assert slot["booked"] == 7
        assert slot["available"] == 3
        assert slot["utilization_level"] == "normal"
        assert slot["availability_level"] == "normal"
        assert len(slot["reservations"]) == 2

    def test_overbooked_slot(self, client, auth_headers, activity, make_reservation):
        make_reservation(people=8)
        make_reservation(people=4)

        response = client.get("/reservations/slots?date=2024-12-23", headers=auth_headers)
        slot = response.json()["activities"][0]["slots"][0]
        assert slot["available"] == -2
        assert slot["utilization_level"] == "critical"
        assert slot["availability_level"] == "critical"

    def test_activity_without_bookings_omitted(self, client, auth_headers, activity):
        response = client.get("/reservations/slots?date=2024-12-23", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["activities"] == []

    def test_inactive_activity_omitted(self, client, auth_headers, activity, make_reservation, db):
        make_reservation(people=2)
        activity.is_active = False
        db.commit()

        response = client.get("/reservations/slots?date=2024-12-23", headers=auth_headers)
        assert response.json()["activities"] == []
