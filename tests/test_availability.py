"""Tests for schedule resolution, overlays and the availability engine."""

from datetime import date, datetime

import pytest

from app.core import day_availability, excluded_labels, hours_for_date, is_slot_available
from app.models import Appointment, BarberSchedule, BlockedTime, BusinessHours, Holiday, owner_key
from tests.conftest import NOW, SUNDAY, WEDNESDAY, make_barber, update_settings

WEDNESDAY_HOURS = [
    "7:00 AM", "8:00 AM", "9:00 AM", "10:00 AM", "11:00 AM",
    "3:00 PM", "4:00 PM", "5:00 PM", "6:00 PM",
]


def _book(session, day, time, barber_id=None, cancelled=False):
    appt = Appointment(
        date=day,
        time=time,
        client_name="Ana",
        client_phone="8095550199",
        service_id=1,
        barber_id=barber_id,
        slot_owner=owner_key(barber_id),
        cancelled=cancelled,
        created_at=NOW,
    )
    session.add(appt)
    session.commit()
    return appt


class TestScheduleResolver:
    def test_wednesday_business_hours(self, session):
        assert hours_for_date(session, WEDNESDAY) == WEDNESDAY_HOURS

    def test_sunday_has_morning_only(self, session):
        assert hours_for_date(session, SUNDAY) == ["10:00 AM", "11:00 AM", "12:00 PM", "1:00 PM", "2:00 PM"]

    def test_closed_day_is_empty(self, session):
        hours = session.get(BusinessHours, 3)
        hours.is_open = False
        session.add(hours)
        session.commit()
        assert hours_for_date(session, WEDNESDAY) == []

    def test_missing_row_is_closed(self, session):
        session.delete(session.get(BusinessHours, 3))
        session.commit()
        assert hours_for_date(session, WEDNESDAY) == []

    def test_non_hour_boundaries_are_truncated(self, session):
        hours = session.get(BusinessHours, 3)
        hours.morning_start, hours.morning_end = "07:30", "09:45"
        hours.afternoon_start = hours.afternoon_end = None
        session.add(hours)
        session.commit()
        assert hours_for_date(session, WEDNESDAY) == ["7:00 AM", "8:00 AM"]

    def test_barber_override_requires_multi_barber_mode(self, session):
        barber = make_barber(session)
        session.add(BarberSchedule(barber_id=barber.id, day_of_week=3, morning_start="09:00", morning_end="11:00"))
        session.commit()

        assert hours_for_date(session, WEDNESDAY, barber.id) == WEDNESDAY_HOURS

        update_settings(session, multiple_barbers_enabled=True)
        assert hours_for_date(session, WEDNESDAY, barber.id) == ["9:00 AM", "10:00 AM"]

    def test_unavailable_barber_has_no_hours(self, session):
        barber = make_barber(session)
        update_settings(session, multiple_barbers_enabled=True)
        session.add(BarberSchedule(barber_id=barber.id, day_of_week=3, is_available=False))
        session.commit()
        assert hours_for_date(session, WEDNESDAY, barber.id) == []

    def test_barber_without_override_uses_business_hours(self, session):
        barber = make_barber(session)
        update_settings(session, multiple_barbers_enabled=True)
        assert hours_for_date(session, WEDNESDAY, barber.id) == WEDNESDAY_HOURS


class TestOverlayFilter:
    def test_global_holiday_excludes_everything(self, session):
        session.add(Holiday(date=WEDNESDAY, description="Closed"))
        session.commit()
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=NOW) == set(WEDNESDAY_HOURS)

    def test_barber_holiday_only_affects_that_barber(self, session):
        carlos = make_barber(session)
        luis = make_barber(session, name="Luis", phone="8095550102")
        session.add(Holiday(date=WEDNESDAY, description="Vacation", barber_id=carlos.id, barber_owner=carlos.id))
        session.commit()

        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, carlos.id, now=NOW) == set(WEDNESDAY_HOURS)
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, luis.id, now=NOW) == set()
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=NOW) == set()

    def test_blocked_times(self, session):
        carlos = make_barber(session)
        session.add(BlockedTime(date=WEDNESDAY, time_slots=["9:00 AM"], reason="Errands"))
        session.add(BlockedTime(date=WEDNESDAY, time_slots=["3:00 PM", "4:00 PM"], barber_id=carlos.id))
        session.commit()

        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=NOW) == {"9:00 AM"}
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, carlos.id, now=NOW) == {
            "9:00 AM",
            "3:00 PM",
            "4:00 PM",
        }

    def test_blocked_times_on_other_dates_are_ignored(self, session):
        session.add(BlockedTime(date=date(2030, 1, 3), time_slots=["9:00 AM"]))
        session.commit()
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=NOW) == set()

    def test_advance_notice_boundary(self, session):
        update_settings(
            session,
            early_booking_restriction_enabled=True,
            early_booking_hours=12,
            restricted_hours=["7:00 AM"],
        )
        # 7:00 AM Wednesday is 11h59m away
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=datetime(2030, 1, 1, 19, 1)) == {"7:00 AM"}
        # 12h01m away
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=datetime(2030, 1, 1, 18, 59)) == set()
        # exactly 12h away is not "less than" the notice period
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=datetime(2030, 1, 1, 19, 0)) == set()

    def test_advance_notice_only_applies_to_restricted_hours(self, session):
        update_settings(
            session,
            early_booking_restriction_enabled=True,
            early_booking_hours=12,
            restricted_hours=["7:00 AM", "8:00 AM"],
        )
        excluded = excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=datetime(2030, 1, 2, 5, 0))
        assert excluded == {"7:00 AM", "8:00 AM"}

    def test_advance_notice_disabled(self, session):
        update_settings(session, early_booking_restriction_enabled=False, restricted_hours=["7:00 AM"])
        assert excluded_labels(session, WEDNESDAY, WEDNESDAY_HOURS, now=datetime(2030, 1, 2, 6, 0)) == set()


class TestAvailabilityEngine:
    def test_full_mapping_is_returned(self, session):
        _book(session, WEDNESDAY, "10:00 AM")
        session.add(BlockedTime(date=WEDNESDAY, time_slots=["4:00 PM"]))
        session.commit()

        slots = day_availability(session, WEDNESDAY, now=NOW)

        assert list(slots) == WEDNESDAY_HOURS
        assert slots["10:00 AM"] is False
        assert slots["4:00 PM"] is False
        assert sum(slots.values()) == len(WEDNESDAY_HOURS) - 2

    def test_no_hours_returns_empty_mapping(self, session):
        hours = session.get(BusinessHours, 3)
        hours.is_open = False
        session.add(hours)
        session.commit()
        assert day_availability(session, WEDNESDAY, now=NOW) == {}

    def test_global_holiday_blocks_every_barber(self, session):
        barber = make_barber(session)
        update_settings(session, multiple_barbers_enabled=True)
        session.add(BarberSchedule(barber_id=barber.id, day_of_week=3, morning_start="06:00", morning_end="22:00"))
        session.add(Holiday(date=WEDNESDAY, description="National holiday"))
        session.commit()

        for barber_id in (None, barber.id):
            slots = day_availability(session, WEDNESDAY, barber_id, now=NOW)
            assert slots
            assert not any(slots.values())

    def test_cancelled_appointments_do_not_block(self, session):
        _book(session, WEDNESDAY, "9:00 AM", cancelled=True)
        assert day_availability(session, WEDNESDAY, now=NOW)["9:00 AM"] is True

    def test_single_barber_mode_counts_every_appointment(self, session):
        barber = make_barber(session)
        _book(session, WEDNESDAY, "9:00 AM", barber_id=barber.id)
        assert day_availability(session, WEDNESDAY, now=NOW)["9:00 AM"] is False

    def test_barber_query_only_sees_that_barbers_appointments(self, session):
        carlos = make_barber(session)
        luis = make_barber(session, name="Luis", phone="8095550102")
        update_settings(session, multiple_barbers_enabled=True)
        _book(session, WEDNESDAY, "9:00 AM", barber_id=carlos.id)

        assert day_availability(session, WEDNESDAY, carlos.id, now=NOW)["9:00 AM"] is False
        assert day_availability(session, WEDNESDAY, luis.id, now=NOW)["9:00 AM"] is True

    def test_single_barber_mode_shares_one_chair(self, session):
        carlos = make_barber(session)
        _book(session, WEDNESDAY, "9:00 AM")

        assert day_availability(session, WEDNESDAY, carlos.id, now=NOW)["9:00 AM"] is False
        assert is_slot_available(session, WEDNESDAY, "9:00 AM", carlos.id, now=NOW) is False

    @pytest.mark.parametrize(
        "time, expected",
        [("9:00 AM", True), ("12:00 PM", False), ("8:00 PM", False)],
    )
    def test_is_slot_available_outside_schedule(self, session, time, expected):
        assert is_slot_available(session, WEDNESDAY, time, now=NOW) is expected

    def test_is_slot_available_matches_day_view(self, session):
        _book(session, WEDNESDAY, "10:00 AM")
        session.add(BlockedTime(date=WEDNESDAY, time_slots=["4:00 PM"]))
        session.commit()

        slots = day_availability(session, WEDNESDAY, now=NOW)
        for label, available in slots.items():
            assert is_slot_available(session, WEDNESDAY, label, now=NOW) is available
