"""
Tests for the calendar engine.
"""

import pendulum
import pytest

from weekclock.domain.calendar_engine import CalendarEngine
from weekclock.domain.exceptions import InvalidRequestError, ParseError, TimezoneError
from weekclock.domain.models import Preset, Weekday

TIMEZONES = [
    "America/New_York",
    "America/Los_Angeles",
    "America/St_Johns",
    "Europe/Berlin",
    "Asia/Kolkata",
    "Australia/Sydney",
    "Pacific/Auckland",
    "Pacific/Kiritimati",
    "UTC",
]


@pytest.fixture
def engine():
    return CalendarEngine("America/New_York")


class TestComputeWeekStart:
    """Tests for week-start derivation."""

    def test_wednesday_maps_to_monday(self, engine):
        """A Wednesday afternoon belongs to that week's Monday."""
        assert engine.compute_week_start("2025-08-13T15:00:00Z") == "2025-08-11"

    def test_new_years_day_belongs_to_december_week(self, engine):
        """New Year's Day 2025 is a Wednesday in the week of Dec 30."""
        assert engine.compute_week_start("2025-01-01T12:00:00Z") == "2024-12-30"

    def test_uses_civil_date_in_configured_timezone(self, engine):
        """Early Monday UTC is still Sunday evening in New York."""
        assert engine.compute_week_start("2025-08-18T02:00:00Z") == "2025-08-11"

    def test_same_instant_differs_by_timezone(self):
        """Sunday 20:00 UTC is already Monday morning in Tokyo."""
        instant = "2025-08-17T20:00:00Z"

        assert CalendarEngine("Europe/London").compute_week_start(instant) == "2025-08-11"
        assert CalendarEngine("Asia/Tokyo").compute_week_start(instant) == "2025-08-18"

    def test_accepts_pendulum_and_offset_strings(self, engine):
        """Instants with explicit offsets are converted, not reinterpreted."""
        berlin_monday = pendulum.datetime(2025, 8, 18, 1, 0, tz="Europe/Berlin")

        # 01:00 Monday in Berlin is 19:00 Sunday in New York
        assert engine.compute_week_start(berlin_monday) == "2025-08-11"
        assert engine.compute_week_start("2025-08-18T01:00:00+02:00") == "2025-08-11"

    def test_bare_date_is_a_civil_day_in_configured_timezone(self, engine):
        """A plain date never slips into the previous day via UTC midnight."""
        assert engine.compute_week_start("2025-08-11") == "2025-08-11"
        assert engine.compute_week_start("2025-08-17") == "2025-08-11"

    def test_spring_forward_week(self, engine):
        """Weeks around the March DST change keep their Monday."""
        # 01:59 EST on Sunday March 9, just before clocks jump
        assert engine.compute_week_start("2025-03-09T06:59:00Z") == "2025-03-03"
        # 00:30 EDT on Monday March 10
        assert engine.compute_week_start("2025-03-10T04:30:00Z") == "2025-03-10"

    def test_fall_back_week(self, engine):
        """Weeks around the November DST change keep their Monday."""
        # 23:30 EST on Sunday November 2
        assert engine.compute_week_start("2025-11-03T04:30:00Z") == "2025-10-27"
        # Midnight EST on Monday November 3
        assert engine.compute_week_start("2025-11-03T05:00:00Z") == "2025-11-03"

    @pytest.mark.parametrize("timezone", TIMEZONES)
    def test_result_is_always_monday(self, timezone):
        """Every week start is a Monday no more than six days back."""
        engine = CalendarEngine(timezone)
        instant = pendulum.datetime(2025, 3, 1, tz="UTC")

        # Every five hours across spring DST changes and a month boundary
        for _ in range(300):
            week_key = engine.compute_week_start(instant)
            monday = engine.parse_date(week_key)
            civil = engine.civil_date(instant)

            assert monday.isoweekday() == 1
            assert 0 <= civil.toordinal() - monday.toordinal() <= 6

            instant = instant.add(hours=5)

    @pytest.mark.parametrize("timezone", TIMEZONES)
    def test_year_boundary(self, timezone):
        """Days around New Year map into the week that straddles it."""
        engine = CalendarEngine(timezone)

        for day in ["2025-12-29", "2025-12-31", "2026-01-01", "2026-01-04"]:
            assert engine.week_start_of_date(day) == "2025-12-29"


class TestWeekStability:
    """All seven days of a week share one week key."""

    @pytest.mark.parametrize("monday", ["2025-08-11", "2025-03-03", "2025-10-27", "2024-12-30"])
    def test_seven_days_share_week_start(self, engine, monday):
        days = engine.week_dates(monday)

        assert len(days) == 7
        for day in days:
            assert engine.week_start_of_date(day) == monday
            assert engine.compute_week_start(day.to_date_string()) == monday

    def test_date_for_weekday(self, engine):
        assert engine.date_for_weekday("2025-08-11", Weekday.FRIDAY) == pendulum.date(2025, 8, 15)
        assert engine.date_for_weekday("2025-08-13", "sunday") == pendulum.date(2025, 8, 17)


class TestDateArithmetic:
    """Tests for adding days and weeks."""

    def test_add_one_week(self, engine):
        shift = engine.add_weeks("2025-08-11", 1)

        assert shift.new_date_key == "2025-08-18"
        assert shift.week_start == "2025-08-18"

    def test_subtract_one_week(self, engine):
        shift = engine.add_weeks("2025-08-11", -1)

        assert shift.new_date_key == "2025-08-04"
        assert shift.week_start == "2025-08-04"

    def test_add_days_reports_containing_week(self, engine):
        shift = engine.add_days("2025-08-13", 7)

        assert shift.new_date_key == "2025-08-20"
        assert shift.week_start == "2025-08-18"

    def test_add_days_across_month_and_year(self, engine):
        assert engine.add_days("2025-02-28", 1).new_date_key == "2025-03-01"
        assert engine.add_days("2024-02-28", 1).new_date_key == "2024-02-29"
        assert engine.add_days("2025-01-01", -7).new_date_key == "2024-12-25"

    def test_weeks_across_dst_move_monday_to_monday(self, engine):
        assert engine.add_weeks("2025-03-03", 1).week_start == "2025-03-10"
        assert engine.add_weeks("2025-11-03", -1).week_start == "2025-10-27"

    @pytest.mark.parametrize("start", ["2025-08-13", "2024-02-29", "2025-03-09", "2025-11-02", "2025-12-31"])
    @pytest.mark.parametrize("count", [-400, -8, -1, 0, 1, 6, 7, 365])
    def test_round_trip(self, engine, start, count):
        """Adding then subtracting the same number of days is the identity."""
        forward = engine.add_days(start, count)
        back = engine.add_days(forward.new_date, -count)

        assert back.new_date_key == start

    def test_non_integer_count_is_rejected(self, engine):
        with pytest.raises(InvalidRequestError):
            engine.add_days("2025-08-11", 1.5)

    def test_years_before_1000_keep_four_digits(self, engine):
        shift = engine.add_days("1000-01-01", -1)

        assert shift.new_date_key == "0999-12-31"
        assert shift.week_start == "0999-12-30"
        assert engine.week_start_of_date(shift.new_date_key) == "0999-12-30"


class TestResolvePreset:
    """Tests for preset range resolution."""

    def test_last_full_week(self, engine):
        now = pendulum.parse("2025-08-20T12:00:00Z")

        date_range = engine.resolve_preset(Preset.WEEK, now=now)

        assert date_range.start_key == "2025-08-11"
        assert date_range.end_key == "2025-08-17"

    @pytest.mark.parametrize(
        "now",
        [
            "2025-08-18T02:00:00Z",  # Sunday evening in New York
            "2025-08-18T05:00:00Z",  # Monday morning in New York
            "2025-01-01T12:00:00Z",
            "2025-03-09T12:00:00Z",
            "2025-11-02T12:00:00Z",
        ],
    )
    def test_last_week_is_exact(self, engine, now):
        """The range is always the seven days of the previous week."""
        instant = pendulum.parse(now)
        date_range = engine.resolve_preset("week", now=instant)
        this_week = engine.parse_date(engine.compute_week_start(instant))

        assert date_range.days() == 7
        assert date_range.start.isoweekday() == 1
        assert date_range.end == date_range.start.add(days=6)
        assert date_range.start == this_week.subtract(days=7)

    def test_trailing_thirty_days(self, engine):
        now = pendulum.parse("2025-08-20T12:00:00Z")

        date_range = engine.resolve_preset(Preset.MONTH, now=now)

        assert date_range.start_key == "2025-07-21"
        assert date_range.end_key == "2025-08-20"

    def test_trailing_ninety_days(self, engine):
        now = pendulum.parse("2025-08-20T12:00:00Z")

        date_range = engine.resolve_preset("90days", now=now)

        assert date_range.start_key == "2025-05-22"
        assert date_range.end_key == "2025-08-20"
        assert date_range.days() == 91

    def test_trailing_range_ends_on_local_today(self, engine):
        """It is still August 20 in New York at 02:00 UTC on August 21."""
        now = pendulum.parse("2025-08-21T02:00:00Z")

        assert engine.resolve_preset(Preset.MONTH, now=now).end_key == "2025-08-20"

    def test_custom_preset_has_no_rule(self, engine):
        with pytest.raises(InvalidRequestError):
            engine.resolve_preset(Preset.CUSTOM)


class TestValidateRange:
    """Tests for range validation."""

    def test_reversed_range_is_invalid(self, engine):
        result = engine.validate_range("2025-08-01", "2025-07-01")

        assert result.valid is False
        assert "must be on or before" in result.message
        assert result.date_range is None

    def test_ordered_range_is_valid(self, engine):
        result = engine.validate_range("2025-07-01", "2025-08-01")

        assert result.valid is True
        assert result.date_range.start_key == "2025-07-01"
        assert result.date_range.end_key == "2025-08-01"

    def test_single_day_range_is_valid(self, engine):
        assert engine.validate_range("2025-03-09", "2025-03-09").valid is True

    @pytest.mark.parametrize(
        "start, end",
        [
            ("2025-02-30", "2025-03-01"),
            ("08/01/2025", "2025-08-31"),
            ("2025-08-01", "next week"),
            (None, "2025-08-31"),
            ("2025-08-01", ""),
        ],
    )
    def test_unparsable_bounds_are_invalid(self, engine, start, end):
        result = engine.validate_range(start, end)

        assert result.valid is False
        assert result.message.startswith("Invalid")


class TestFormatWeekDisplay:
    """Tests for week labels."""

    def test_label_within_one_year(self, engine):
        assert engine.format_week_display("2025-08-11") == "Aug 11 – Aug 17, 2025"

    def test_label_across_new_year(self, engine):
        assert engine.format_week_display("2025-12-29") == "Dec 29, 2025 – Jan 4, 2026"

    def test_mid_week_date_is_normalised(self, engine):
        assert engine.format_week_display("2025-08-14") == "Aug 11 – Aug 17, 2025"

    def test_label_does_not_depend_on_timezone(self):
        labels = {CalendarEngine(tz).format_week_display("2025-08-11") for tz in TIMEZONES}

        assert labels == {"Aug 11 – Aug 17, 2025"}


class TestFailures:
    """Tests for parse and timezone failures."""

    @pytest.mark.parametrize("value", ["2025-13-01", "2025-8-1", "20250811", "2025-08-11T10:00:00", ""])
    def test_malformed_date(self, engine, value):
        with pytest.raises(ParseError) as exc_info:
            engine.parse_date(value)

        assert exc_info.value.value == value

    def test_malformed_instant(self, engine):
        with pytest.raises(ParseError):
            engine.compute_week_start("not a date")

    @pytest.mark.parametrize("timezone", ["Mars/Olympus_Mons", "", "   ", None])
    def test_unknown_timezone(self, timezone):
        with pytest.raises(TimezoneError):
            CalendarEngine(timezone)

    @pytest.mark.parametrize("value", ["２０２５-０８-１１", "٢٠٢٥-٠٨-١١"])
    def test_non_ascii_digits_are_rejected(self, engine, value):
        with pytest.raises(ParseError):
            engine.parse_date(value)

    @pytest.mark.parametrize("value", ["2025-08", "2025", "2025-W33", "2025-W33-1", "15:00:00"])
    def test_partial_or_date_only_instants_are_rejected(self, engine, value):
        """Only YYYY-MM-DD is read as a civil day; other date forms are not guessed at."""
        with pytest.raises(ParseError):
            engine.compute_week_start(value)

    @pytest.mark.parametrize(
        "call",
        [
            lambda e: e.add_days("9999-12-31", 1),
            lambda e: e.add_days("2025-08-11", 10**9),
            lambda e: e.add_days("0001-01-01", -1),
            lambda e: e.add_weeks("9999-12-27", 1),
            lambda e: e.compute_week_start("0001-01-01T00:00:00Z"),
            lambda e: e.format_week_display("9999-12-30"),
        ],
    )
    def test_results_outside_the_calendar(self, engine, call):
        with pytest.raises(InvalidRequestError, match="outside the supported calendar"):
            call(engine)
