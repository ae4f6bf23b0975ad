"""Tests für die Zeitraster-Auflösung (aktuelle Stunde, Schultag, Beschriftungen)."""

from datetime import date, datetime, time

import pytest

from analysis.errors import InvalidArgumentError, MalformedInputError
from analysis.time_slots import (
    day_name,
    is_school_hours,
    lesson_periods_only,
    parse_hhmm,
    period_label_for_number,
    require_school_day,
    resolve_current_day,
    resolve_current_slot,
    resolve_slot_label,
    sort_periods,
)
from config.defaults import DEFAULT_PERIODS, default_periods
from models.period import Period


@pytest.fixture(scope="module")
def periods() -> list[Period]:
    return default_periods()


# ─── Standard-Raster ──────────────────────────────────────────────────────────

class TestDefaultPeriods:
    def test_exact_table(self, periods):
        """Standard-Raster entspricht exakt der gedruckten Tabelle."""
        expected = [
            (1, "lesson", 1, None, "07:30", "08:15"),
            (2, "lesson", 2, None, "08:15", "09:00"),
            (3, "lesson", 3, None, "09:00", "09:45"),
            (4, "break", None, "Istirahat", "09:45", "10:00"),
            (5, "lesson", 4, None, "10:00", "10:45"),
            (6, "lesson", 5, None, "10:45", "11:30"),
            (7, "break", None, "ISHOMA & Islamic Public Speaking", "11:30", "13:00"),
            (8, "lesson", 6, None, "13:00", "13:45"),
            (9, "lesson", 7, None, "13:45", "14:30"),
        ]
        actual = [
            (p.order, p.kind, p.period_number, p.break_name, p.start_time, p.end_time)
            for p in periods
        ]
        assert actual == expected
        assert len(DEFAULT_PERIODS) == 9

    def test_default_ids(self, periods):
        """IDs lauten default-<index>."""
        assert [p.id for p in periods] == [f"default-{i}" for i in range(9)]

    def test_fresh_list_each_call(self):
        """Jeder Aufruf liefert eine neue Liste."""
        assert default_periods() is not default_periods()
        assert default_periods() == default_periods()


# ─── Aktuelle Stunde ──────────────────────────────────────────────────────────

class TestResolveCurrentSlot:
    def test_inside_first_lesson(self, periods):
        slot = resolve_current_slot(periods, time(7, 45))
        assert slot.period_number == 1

    def test_boundary_belongs_to_next(self, periods):
        """08:15 gehört zu JP 2 (halboffenes Intervall)."""
        slot = resolve_current_slot(periods, time(8, 15))
        assert slot.period_number == 2

    def test_break(self, periods):
        slot = resolve_current_slot(periods, datetime(2024, 3, 4, 9, 50))
        assert slot.is_break
        assert slot.break_name == "Istirahat"

    def test_before_school_is_none(self, periods):
        """06:00 → keine Stunde."""
        assert resolve_current_slot(periods, time(6, 0)) is None

    def test_end_of_day_is_none(self, periods):
        """14:30 ist das Ende der letzten Stunde → keine Stunde mehr."""
        assert resolve_current_slot(periods, time(14, 30)) is None

    def test_first_match_in_input_order(self):
        """Bei Überlappung gewinnt der erste Eintrag der Eingabe."""
        a = Period(id="a", kind="lesson", period_number=1, start_time="08:00", end_time="09:00")
        b = Period(id="b", kind="lesson", period_number=2, start_time="08:30", end_time="09:30")
        assert resolve_current_slot([a, b], time(8, 45)).id == "a"
        assert resolve_current_slot([b, a], time(8, 45)).id == "b"

    def test_empty_list(self):
        assert resolve_current_slot([], time(8, 0)) is None

    @pytest.mark.parametrize("bad", ["7:30", "24:00", "08:60", "0800", "", "ab:cd"])
    def test_malformed_time_raises(self, bad):
        """Ungültige Uhrzeiten → MalformedInputError."""
        p = Period(id="x", kind="lesson", period_number=1, start_time=bad, end_time="09:00")
        with pytest.raises(MalformedInputError):
            resolve_current_slot([p], time(8, 0))

    def test_malformed_later_entry_still_raises(self, periods):
        """Auch ein kaputter Eintrag nach dem Treffer führt zum Fehler."""
        broken = Period(id="kaputt", kind="break", break_name="X",
                        start_time="15:00", end_time="99:00")
        with pytest.raises(MalformedInputError, match="kaputt"):
            resolve_current_slot(periods + [broken], time(7, 45))


class TestParseHHMM:
    @pytest.mark.parametrize("value, minutes", [
        ("00:00", 0), ("07:30", 450), ("23:59", 1439),
    ])
    def test_valid(self, value, minutes):
        assert parse_hhmm(value) == minutes

    def test_non_string_raises(self):
        with pytest.raises(MalformedInputError):
            parse_hhmm(730)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_hhmm("7.30")


# ─── Schultag ─────────────────────────────────────────────────────────────────

class TestResolveCurrentDay:
    @pytest.mark.parametrize("d, expected", [
        (date(2024, 3, 4), 1),   # Montag
        (date(2024, 3, 5), 2),
        (date(2024, 3, 8), 5),   # Freitag
        (date(2024, 3, 9), 6),   # Samstag
    ])
    def test_weekdays(self, d, expected):
        assert resolve_current_day(d) == expected

    def test_sunday_maps_to_monday(self):
        """Sonntag → 1 (Senin)."""
        assert resolve_current_day(date(2024, 3, 10)) == 1

    def test_accepts_datetime(self):
        assert resolve_current_day(datetime(2024, 3, 6, 10, 0)) == 3

    def test_require_school_day(self):
        assert require_school_day(6) == 6
        with pytest.raises(InvalidArgumentError):
            require_school_day(7)
        with pytest.raises(InvalidArgumentError):
            require_school_day(0)


# ─── Beschriftungen & Helfer ──────────────────────────────────────────────────

class TestLabels:
    def test_lesson_label(self, periods):
        assert resolve_slot_label(periods[2]) == "JP 3 (09:00 - 09:45)"

    def test_break_label(self, periods):
        assert resolve_slot_label(periods[3]) == "Istirahat (09:45 - 10:00)"

    def test_label_for_number(self, periods):
        assert period_label_for_number(periods, 6) == "JP 6 (13:00 - 13:45)"

    def test_label_for_unknown_number(self, periods):
        """JP-Nummer außerhalb des Rasters → nur "JP n"."""
        assert period_label_for_number(periods, 9) == "JP 9"

    def test_day_names(self):
        assert day_name(1) == "Senin"
        assert day_name(0) == "Minggu"
        assert day_name(6) == "Sabtu"
        assert day_name(9) == ""

    def test_lesson_periods_only(self, periods):
        lessons = lesson_periods_only(periods)
        assert [p.period_number for p in lessons] == [1, 2, 3, 4, 5, 6, 7]

    def test_sort_periods_stable(self):
        """Gleiche order → Eingabereihenfolge bleibt erhalten."""
        a = Period(id="a", kind="lesson", period_number=1, start_time="08:00",
                   end_time="08:45", order=2)
        b = Period(id="b", kind="lesson", period_number=2, start_time="08:45",
                   end_time="09:30", order=1)
        c = Period(id="c", kind="break", break_name="P", start_time="09:30",
                   end_time="09:45", order=2)
        assert [p.id for p in sort_periods([a, b, c])] == ["b", "a", "c"]

    def test_is_school_hours_inclusive(self, periods):
        assert is_school_hours(periods, time(7, 30))
        assert is_school_hours(periods, time(14, 30))
        assert not is_school_hours(periods, time(14, 31))
        assert not is_school_hours(periods, time(6, 0))
        assert not is_school_hours([], time(9, 0))
