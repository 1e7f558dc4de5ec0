"""Unit tests for the pure booking rules: overlap, window parsing, eligibility, transitions."""
from datetime import date, datetime

import pytest

from booking import (
    ALLOWED_TRANSITIONS, combine_date_time, generate_proof_code,
    is_zone_allowed, parse_window, transition_reservation
)
from crud import intervals_overlap
from errors import InvalidTransition, ValidationError
from models import Reservation


def at(hhmm):
    return datetime.strptime(f"2024-01-10 {hhmm}", "%Y-%m-%d %H:%M")


class TestIntervalsOverlap:

    @pytest.mark.parametrize("a, b, expected", [
        (("09:00", "11:00"), ("10:00", "12:00"), True),
        (("09:00", "11:00"), ("10:30", "12:00"), True),
        (("09:00", "11:00"), ("09:30", "10:30"), True),   # contained
        (("09:00", "11:00"), ("08:00", "12:00"), True),   # containing
        (("09:00", "11:00"), ("09:00", "11:00"), True),   # identical
        (("09:00", "11:00"), ("11:00", "13:00"), False),  # adjacent after
        (("09:00", "11:00"), ("07:00", "09:00"), False),  # adjacent before
        (("09:00", "11:00"), ("12:00", "13:00"), False),
    ])
    def test_half_open_overlap(self, a, b, expected):
        assert intervals_overlap(at(a[0]), at(a[1]), at(b[0]), at(b[1])) is expected
        assert intervals_overlap(at(b[0]), at(b[1]), at(a[0]), at(a[1])) is expected


class TestWindowParsing:

    def test_combines_date_and_time(self):
        assert combine_date_time("2024-01-10", "09:30") == datetime(2024, 1, 10, 9, 30)

    def test_accepts_seconds(self):
        assert combine_date_time("2024-01-10", "09:30:15") == datetime(2024, 1, 10, 9, 30, 15)

    @pytest.mark.parametrize("day, time", [
        ("2024-13-01", "09:00"),
        ("10/01/2024", "09:00"),
        ("2024-01-10", "25:00"),
        ("2024-01-10", "nine"),
        (None, "09:00"),
    ])
    def test_rejects_malformed_input(self, day, time):
        with pytest.raises(ValidationError):
            combine_date_time(day, time)

    def test_parse_window_returns_calendar_date(self):
        day, start, end = parse_window("2024-01-10", "09:00", "11:00")
        assert day == date(2024, 1, 10)
        assert (start, end) == (datetime(2024, 1, 10, 9), datetime(2024, 1, 10, 11))

    @pytest.mark.parametrize("start, end", [("11:00", "09:00"), ("09:00", "09:00")])
    def test_end_must_follow_start(self, start, end):
        with pytest.raises(ValidationError):
            parse_window("2024-01-10", start, end)

    def test_missing_part_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_window("2024-01-10", "", "11:00")


class TestZoneEligibility:

    @pytest.mark.parametrize("user_type, allowed", [
        ("Staff", {"Staff", "Mixed"}),
        ("Student", {"Student", "Mixed"}),
        ("Visitor", {"Visitor", "Mixed"}),
    ])
    def test_user_type_gates_zone_type(self, user_type, allowed):
        for zone_type in ("Student", "Staff", "Visitor", "Mixed", "Disabled"):
            assert is_zone_allowed(user_type, zone_type) is (zone_type in allowed)

    def test_unknown_user_type_allowed_nowhere(self):
        assert not is_zone_allowed("Admin", "Mixed")


class TestTransitions:

    @pytest.mark.parametrize("current, target", [
        ("Reserved", "CheckedIn"),
        ("Reserved", "Cancelled"),
        ("CheckedIn", "Completed"),
        ("CheckedIn", "Cancelled"),
    ])
    def test_allowed(self, current, target):
        reservation = Reservation(status=current, proof_code="ABCD1234")
        transition_reservation(None, reservation, target)
        assert reservation.status == target

    @pytest.mark.parametrize("current, target", [
        ("Reserved", "Completed"),
        ("Reserved", "Reserved"),
        ("CheckedIn", "Reserved"),
        ("Completed", "Cancelled"),
        ("Cancelled", "Reserved"),
        ("Cancelled", "CheckedIn"),
    ])
    def test_rejected(self, current, target):
        reservation = Reservation(status=current, proof_code="ABCD1234")
        with pytest.raises(InvalidTransition):
            transition_reservation(None, reservation, target)
        assert reservation.status == current

    def test_terminal_states_have_no_exits(self):
        assert ALLOWED_TRANSITIONS["Completed"] == ()
        assert ALLOWED_TRANSITIONS["Cancelled"] == ()

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            transition_reservation(None, Reservation(status="Reserved", proof_code="X"), "Lost")


def test_proof_code_shape():
    codes = {generate_proof_code() for _ in range(50)}
    assert len(codes) == 50
    for code in codes:
        assert len(code) == 8
        assert code.isalnum() and code == code.upper()
