"""
Domain models for week keys, date ranges and range presets.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from pendulum import Date

from .exceptions import InvalidRequestError, ParseError


def date_key(day: date) -> str:
    """``YYYY-MM-DD`` with a zero-padded four-digit year."""
    return day.isoformat()


class Preset(Enum):
    """
    Named rules for resolving an analytics date range.

    WEEK is the last full Monday-Sunday week, not the trailing seven days.
    """
    WEEK = "week"
    MONTH = "month"
    NINETY_DAYS = "90days"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "str | Preset") -> "Preset":
        """
        Resolve a preset name or one of its URL aliases.

        Raises:
            InvalidRequestError: If the name is not a known preset
        """
        if isinstance(value, Preset):
            return value

        key = str(value).strip().lower()
        aliases = {
            "lastweek": cls.WEEK,
            "lastmonth": cls.MONTH,
            "last90days": cls.NINETY_DAYS,
        }
        if key in aliases:
            return aliases[key]

        for preset in cls:
            if preset.value == key:
                return preset

        raise InvalidRequestError(
            f"Unknown date range preset: '{value}'. "
            f"Use one of: {', '.join(p.value for p in cls)}."
        )

    @property
    def trailing_days(self) -> int | None:
        """Length of a trailing window, for the presets that have one."""
        return {Preset.MONTH: 30, Preset.NINETY_DAYS: 90}.get(self)


class Weekday(Enum):
    """
    The seven days of a Monday-start week, valued by ISO ordinal.

    Collaborators address per-day storage columns through ``column``
    instead of free-form day strings.
    """
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def parse(cls, name: str) -> "Weekday":
        """Parse a full English weekday name, case-insensitively."""
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ParseError(name, f"Unknown weekday: {name!r}") from None

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Weekday of a civil date."""
        return cls(day.isoweekday())

    @property
    def column(self) -> str:
        return self.name.lower()

    @property
    def offset(self) -> int:
        """Days after Monday."""
        return self.value - 1


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive range of civil dates.

    Invariant: start must not be after end.
    """
    start: Date
    end: Date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start date {self.start} must not be after end date {self.end}")

    @property
    def start_key(self) -> str:
        return date_key(self.start)

    @property
    def end_key(self) -> str:
        return date_key(self.end)

    def days(self) -> int:
        """Number of days in the range, both ends included."""
        return self.end.toordinal() - self.start.toordinal() + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.start_key} - {self.end_key}"


@dataclass(frozen=True)
class DateShift:
    """Result of adding days or weeks to a civil date."""
    new_date: Date
    week_start: str

    @property
    def new_date_key(self) -> str:
        return date_key(self.new_date)


@dataclass(frozen=True)
class RangeValidation:
    """
    Outcome of validating a user-supplied range.

    An invalid range is an expected result of user input, so it is
    reported here rather than raised.
    """
    valid: bool
    message: str
    date_range: DateRange | None = None
