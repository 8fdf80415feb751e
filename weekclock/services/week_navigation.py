"""
Application service for week navigation and analytics range resolution.

The service takes one snapshot of the configured timezone per call and
hands it to a fresh ``CalendarEngine``. That snapshot is the single
reload point: a request never mixes two timezone values, and a change
made by an administrator is picked up by the next request.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

import pendulum
from pendulum import DateTime

from ..domain.calendar_engine import CalendarEngine
from ..domain.exceptions import InvalidRequestError, TimezoneError
from ..domain.models import DateShift, Preset, RangeValidation
from .timezone_setting import TimezoneSetting

logger = logging.getLogger(__name__)


def utc_now() -> DateTime:
    return pendulum.now("UTC")


class WeekNavigationService:
    """
    Stateless orchestration over ``CalendarEngine``.

    The clock is injectable so tests can pin "now".
    """

    def __init__(
        self,
        timezone_setting: TimezoneSetting,
        clock: Callable[[], DateTime] = utc_now,
    ) -> None:
        self._timezone_setting = timezone_setting
        self._clock = clock

    def now(self) -> DateTime:
        return self._clock()

    def engine(self) -> CalendarEngine:
        """
        Build an engine for the timezone configured right now.

        Raises:
            TimezoneError: If the stored identifier is unusable
        """
        timezone = self._timezone_setting.get()
        try:
            return CalendarEngine(timezone)
        except TimezoneError:
            logger.error(
                "Configured timezone %r is not in the timezone database; "
                "week calculations are failing until it is corrected",
                timezone,
            )
            raise

    def current_week(
        self,
        target: str | datetime | date | None = None,
        *,
        engine: CalendarEngine | None = None,
    ) -> str:
        """
        WeekKey of the week containing ``target``, or of the current week.

        Used both for the initial load and for jumping to the week of a
        chosen date.
        """
        engine = engine or self.engine()
        return engine.compute_week_start(target if target is not None else self.now())

    def shift_week(
        self,
        week_key: str | date,
        direction: int,
        *,
        engine: CalendarEngine | None = None,
    ) -> DateShift:
        """
        Move exactly one week from the Monday of ``week_key``.

        Args:
            week_key: Any date inside the starting week
            direction: +1 for the next week, -1 for the previous week
        """
        if isinstance(direction, bool) or direction not in (1, -1):
            raise InvalidRequestError(f"Direction must be 1 or -1, got {direction!r}")

        engine = engine or self.engine()
        monday = engine.week_start_of_date(week_key)
        shift = engine.add_weeks(monday, direction)
        logger.debug("Shifted week %s by %+d: %s", monday, direction, shift.week_start)
        return shift

    def default_week(
        self,
        *,
        engine: CalendarEngine | None = None,
        now: DateTime | None = None,
    ) -> str:
        """Current week moved by the configured default week offset."""
        engine = engine or self.engine()
        offset = self._timezone_setting.get_default_week_offset()
        current = engine.compute_week_start(now or self.now())
        if offset == 0:
            return current
        return engine.add_weeks(current, offset).week_start

    def resolve_analytics_range(
        self,
        preset: Preset | str,
        start: str | date | None = None,
        end: str | date | None = None,
        *,
        engine: CalendarEngine | None = None,
        now: DateTime | None = None,
    ) -> RangeValidation:
        """
        Resolve a preset to concrete dates, or validate explicit custom bounds.

        Preset ranges are valid by construction; a custom range comes back
        with ``valid=False`` and a message when the bounds are unusable.
        """
        preset = Preset.parse(preset)
        engine = engine or self.engine()

        if preset is Preset.CUSTOM:
            if start is None or end is None:
                return RangeValidation(
                    valid=False,
                    message="A custom range needs both a start date and an end date",
                )
            return engine.validate_range(start, end)

        date_range = engine.resolve_preset(preset, now=now or self.now())
        return RangeValidation(
            valid=True,
            message=f"Resolved preset '{preset.value}'",
            date_range=date_range,
        )
