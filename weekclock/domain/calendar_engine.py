"""
Canonical calendar and week-boundary calculations.

This is the heart of the application - pure domain logic without any
external dependencies (no settings, no I/O, no caller locale). Every
result is a function of the explicit inputs and the timezone the engine
was built with, so two callers asking the same question get the same
answer regardless of where their own clocks are.

Algorithm for the week containing an instant:
1. Convert the instant into the configured timezone
2. Take the civil date it falls on there
3. Step back ``isoweekday - 1`` calendar days to reach Monday

Steps 2 and 3 operate on calendar dates, not on instants, so daylight
saving transitions never shift the result by a day.
"""

import logging
import re
from datetime import date, datetime
from typing import List

import pendulum
from pendulum import Date, DateTime, FixedTimezone, Timezone

from .exceptions import InvalidRequestError, ParseError, TimezoneError
from .models import DateRange, DateShift, Preset, RangeValidation, Weekday, date_key

logger = logging.getLogger(__name__)

DATE_FORMAT = "YYYY-MM-DD"

# Week labels use one fixed locale regardless of viewer.
DISPLAY_LOCALE = "en"

_CIVIL_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def load_timezone(name: str) -> Timezone | FixedTimezone:
    """
    Look up a timezone identifier in the timezone database.

    Raises:
        TimezoneError: If the identifier is empty or unknown
    """
    if not isinstance(name, str) or not name.strip():
        raise TimezoneError(name, f"Timezone identifier must be a non-empty string, got {name!r}")

    try:
        return pendulum.timezone(name.strip())
    except (ValueError, KeyError) as exc:
        raise TimezoneError(name) from exc


def _shift(day: Date, days: int) -> Date:
    """
    Move a civil date by whole days.

    Raises:
        InvalidRequestError: If the result falls outside years 1-9999
    """
    try:
        return day.add(days=days)
    except OverflowError as exc:
        raise InvalidRequestError(
            f"{date_key(day)} {days:+d} days is outside the supported calendar (years 1-9999)"
        ) from exc


class CalendarEngine:
    """
    Week-boundary, date arithmetic and range computations in one timezone.

    The timezone is injected at construction and never changes for the
    lifetime of the engine; build a new engine to observe a new setting.
    """

    def __init__(self, timezone: str):
        """
        Args:
            timezone: IANA timezone identifier, e.g. "America/New_York"

        Raises:
            TimezoneError: If the identifier is not known
        """
        self._tz = load_timezone(timezone)
        self.timezone: str = self._tz.name

    def __repr__(self) -> str:
        return f"CalendarEngine(timezone={self.timezone!r})"

    # -- parsing ---------------------------------------------------------

    def parse_date(self, value: str | date) -> Date:
        """
        Parse a civil date in ``YYYY-MM-DD`` form.

        Raises:
            ParseError: If the value is not a valid calendar date
        """
        if isinstance(value, datetime):
            raise ParseError(value, f"Expected a civil date, got a datetime: {value!r}")
        if isinstance(value, date):
            return pendulum.date(value.year, value.month, value.day)
        if not isinstance(value, str) or not _CIVIL_DATE_RE.match(value.strip()):
            raise ParseError(value, f"Expected a date in YYYY-MM-DD format, got {value!r}")

        try:
            return pendulum.from_format(value.strip(), DATE_FORMAT).date()
        except ValueError as exc:
            raise ParseError(value, f"Invalid calendar date: {value!r}") from exc

    def to_instant(self, value: str | datetime | date) -> DateTime:
        """
        Normalise an instant given as a DateTime, datetime or ISO-8601 string.

        Naive datetimes and strings without an offset are taken as UTC.
        A bare ``YYYY-MM-DD`` (string or date) means the start of that
        civil day in the configured timezone. Other date-only forms
        ("2025-08", "2025-W33") are rejected.

        Raises:
            ParseError: If the value cannot be read as an instant
        """
        if isinstance(value, DateTime):
            return value
        if isinstance(value, datetime):
            return pendulum.instance(value, tz="UTC")
        if isinstance(value, date):
            return self._start_of_day(self.parse_date(value))
        if not isinstance(value, str):
            raise ParseError(value, f"Expected an ISO-8601 instant, got {value!r}")

        text = value.strip()
        if _CIVIL_DATE_RE.match(text):
            return self._start_of_day(self.parse_date(text))

        try:
            parsed = pendulum.parse(text, exact=True)
        except ValueError as exc:
            raise ParseError(value, f"Invalid ISO-8601 instant: {value!r}") from exc

        if not isinstance(parsed, datetime):
            raise ParseError(value, f"Expected YYYY-MM-DD or an ISO-8601 instant with a time, got {value!r}")
        return pendulum.instance(parsed, tz="UTC")

    # -- civil dates and weeks ------------------------------------------

    def civil_date(self, instant: str | datetime | date) -> Date:
        """Calendar date the instant falls on in the configured timezone."""
        try:
            return self.to_instant(instant).in_timezone(self._tz).date()
        except OverflowError as exc:
            raise InvalidRequestError(
                f"{instant} in {self.timezone} is outside the supported calendar (years 1-9999)"
            ) from exc

    def today(self, now: DateTime | None = None) -> Date:
        """Today's civil date in the configured timezone."""
        return self.civil_date(now if now is not None else pendulum.now("UTC"))

    def compute_week_start(self, instant: str | datetime | date) -> str:
        """
        Return the WeekKey (Monday, ``YYYY-MM-DD``) of the week containing an instant.

        The weekday is taken from the civil date in the configured
        timezone, never from the instant's own offset.
        """
        civil = self.civil_date(instant)
        week_key = date_key(self._monday(civil))
        logger.debug("Week start for %s in %s: %s", instant, self.timezone, week_key)
        return week_key

    def week_start_of_date(self, value: str | date) -> str:
        """WeekKey of the week containing a civil date."""
        return date_key(self._monday(self.parse_date(value)))

    def date_for_weekday(self, week_key: str | date, weekday: Weekday | str) -> Date:
        """Civil date of a given weekday inside the week identified by ``week_key``."""
        if not isinstance(weekday, Weekday):
            weekday = Weekday.parse(weekday)
        return _shift(self._monday(self.parse_date(week_key)), weekday.offset)

    def week_dates(self, week_key: str | date) -> List[Date]:
        """The seven civil dates, Monday to Sunday, of a week."""
        monday = self._monday(self.parse_date(week_key))
        return [_shift(monday, offset) for offset in range(7)]

    # -- arithmetic ------------------------------------------------------

    def add_days(self, value: str | date, count: int) -> DateShift:
        """
        Add whole days (may be negative) to a civil date.

        Returns the new date and the WeekKey of the week containing it.

        Raises:
            InvalidRequestError: If the count is not an integer or the
                result leaves the supported calendar
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidRequestError(f"Day count must be an integer, got {count!r}")

        new_date = _shift(self.parse_date(value), count)
        return DateShift(new_date=new_date, week_start=date_key(self._monday(new_date)))

    def add_weeks(self, value: str | date, count: int) -> DateShift:
        """Add whole weeks to a civil date; equivalent to ``add_days(value, 7 * count)``."""
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidRequestError(f"Week count must be an integer, got {count!r}")
        return self.add_days(value, count * 7)

    # -- ranges ----------------------------------------------------------

    def resolve_preset(self, preset: Preset | str, now: DateTime | None = None) -> DateRange:
        """
        Resolve a named preset against "now" in the configured timezone.

        - week: the full Monday-Sunday week before the current one
        - month / 90days: today minus 30 / 90 days through today

        Raises:
            InvalidRequestError: For the custom preset, which has no rule
        """
        preset = Preset.parse(preset)
        today = self.today(now)

        if preset is Preset.WEEK:
            start = _shift(self._monday(today), -7)
            return DateRange(start=start, end=_shift(start, 6))

        if preset.trailing_days is not None:
            return DateRange(start=_shift(today, -preset.trailing_days), end=today)

        raise InvalidRequestError(
            "The custom preset has no resolution rule; supply explicit start and end dates."
        )

    def validate_range(self, start: str | date, end: str | date) -> RangeValidation:
        """
        Check a user-supplied range. Never raises for bad input.
        """
        try:
            start_date = self.parse_date(start)
        except ParseError:
            return RangeValidation(valid=False, message=f"Invalid start date: {start!r}")

        try:
            end_date = self.parse_date(end)
        except ParseError:
            return RangeValidation(valid=False, message=f"Invalid end date: {end!r}")

        if start_date > end_date:
            return RangeValidation(
                valid=False,
                message=(
                    f"Start date {date_key(start_date)} must be on or before "
                    f"end date {date_key(end_date)}"
                ),
            )

        return RangeValidation(
            valid=True,
            message="Date range is valid",
            date_range=DateRange(start=start_date, end=end_date),
        )

    # -- display ---------------------------------------------------------

    def format_week_display(self, week_key: str | date) -> str:
        """
        Human label for a week, e.g. "Aug 11 – Aug 17, 2025".

        A week crossing New Year carries both years:
        "Dec 29, 2025 – Jan 4, 2026".
        """
        monday = self._monday(self.parse_date(week_key))
        sunday = _shift(monday, 6)

        start_fmt = "MMM D" if monday.year == sunday.year else "MMM D, YYYY"
        return (
            f"{monday.format(start_fmt, locale=DISPLAY_LOCALE)} – "
            f"{sunday.format('MMM D, YYYY', locale=DISPLAY_LOCALE)}"
        )

    # -- helpers ---------------------------------------------------------

    @staticmethod
    def _monday(day: Date) -> Date:
        return _shift(day, -(day.isoweekday() - 1))

    def _start_of_day(self, day: Date) -> DateTime:
        return pendulum.datetime(day.year, day.month, day.day, tz=self._tz)
