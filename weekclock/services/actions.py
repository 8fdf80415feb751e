"""
Request/response actions over the week navigation service.

Each action takes plain values and returns a JSON-ready dict with the
camelCase keys the tracker UI consumes, so any transport (HTTP handler,
RPC, the CLI) can expose them unchanged.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping

from pendulum import DateTime

from ..domain.calendar_engine import CalendarEngine
from ..domain.exceptions import InvalidRequestError, UnknownOperationError
from ..domain.models import Preset, date_key
from .timezone_setting import TimezoneSetting
from .week_navigation import WeekNavigationService

Payload = Dict[str, Any]


def _require(params: Mapping[str, Any], name: str) -> Any:
    value = params.get(name)
    if value is None or value == "":
        raise InvalidRequestError(f"Missing required parameter: {name}")
    return value


def _require_int(params: Mapping[str, Any], name: str) -> int:
    value = _require(params, name)
    if isinstance(value, bool):
        raise InvalidRequestError(f"Parameter {name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidRequestError(f"Parameter {name} must be an integer, got {value!r}")


class WeekClockActions:
    """
    The four logical actions: current week, shift/jump, date operations,
    and the timezone setting.
    """

    def __init__(
        self,
        navigation: WeekNavigationService,
        timezone_setting: TimezoneSetting,
    ) -> None:
        self._navigation = navigation
        self._timezone_setting = timezone_setting
        self._operations: Dict[str, Callable[[CalendarEngine, Mapping[str, Any], DateTime], Payload]] = {
            "getToday": self._get_today,
            "addDays": self._add_days,
            "addWeeks": self._add_weeks,
            "formatWeekDisplay": self._format_week_display,
            "calculateDateRange": self._calculate_date_range,
            "validateDateRange": self._validate_date_range,
        }

    @property
    def operations(self) -> list[str]:
        return list(self._operations)

    def get_current_week(self, target: str | datetime | date | None = None) -> Payload:
        """GetCurrentWeek: week of ``target`` (default now) plus server context."""
        engine = self._navigation.engine()
        now = self._navigation.now()
        return {
            "currentWeek": self._navigation.current_week(target if target is not None else now, engine=engine),
            "timezone": engine.timezone,
            "serverTime": now.to_iso8601_string(),
        }

    def shift_or_jump_week(self, target: str | datetime | date) -> Payload:
        """ShiftOrJumpWeek: week containing an explicit target instant or date."""
        if target is None or target == "":
            raise InvalidRequestError("Missing required parameter: targetDate")

        engine = self._navigation.engine()
        return {
            "currentWeek": self._navigation.current_week(target, engine=engine),
            "timezone": engine.timezone,
            "targetDate": target if isinstance(target, str) else target.isoformat(),
        }

    def shift_week(self, week_key: str | date, direction: int) -> Payload:
        """Previous/next week navigation: one Monday-to-Monday step."""
        engine = self._navigation.engine()
        shift = self._navigation.shift_week(week_key, direction, engine=engine)
        return {
            "weekStart": shift.week_start,
            "display": engine.format_week_display(shift.week_start),
            "timezone": engine.timezone,
        }

    def get_default_week(self) -> Payload:
        """Week the tracker opens on, per the default week offset."""
        engine = self._navigation.engine()
        return {
            "weekStart": self._navigation.default_week(engine=engine),
            "offset": self._timezone_setting.get_default_week_offset(),
            "timezone": engine.timezone,
        }

    def date_operation(self, operation: str, params: Mapping[str, Any] | None = None) -> Payload:
        """
        DateOperation: dispatch a named calendar operation.

        Raises:
            UnknownOperationError: If the operation name is not recognised
            InvalidRequestError: If a parameter is missing or ill-typed
            ParseError: If a date parameter is malformed
        """
        handler = self._operations.get(operation)
        if handler is None:
            raise UnknownOperationError(operation)

        engine = self._navigation.engine()
        now = self._navigation.now()
        payload = handler(engine, params or {}, now)
        payload["timezone"] = engine.timezone
        payload["serverTime"] = now.to_iso8601_string()
        return payload

    def get_timezone_setting(self) -> Payload:
        return {"timezone": self._timezone_setting.get()}

    def set_timezone_setting(self, value: str) -> Payload:
        """SetTimezoneSetting: rejects unknown identifiers with ``TimezoneError``."""
        return {"success": True, "timezone": self._timezone_setting.set(value)}

    # -- operations ------------------------------------------------------

    def _get_today(self, engine: CalendarEngine, params: Mapping[str, Any], now: DateTime) -> Payload:
        return {
            "today": date_key(engine.today(now)),
            "weekStart": engine.compute_week_start(now),
        }

    def _add_days(self, engine: CalendarEngine, params: Mapping[str, Any], now: DateTime) -> Payload:
        shift = engine.add_days(_require(params, "startDate"), _require_int(params, "days"))
        return {"newDate": shift.new_date_key, "weekStart": shift.week_start}

    def _add_weeks(self, engine: CalendarEngine, params: Mapping[str, Any], now: DateTime) -> Payload:
        shift = engine.add_weeks(_require(params, "startDate"), _require_int(params, "weeks"))
        return {"newDate": shift.new_date_key, "weekStart": shift.week_start}

    def _format_week_display(self, engine: CalendarEngine, params: Mapping[str, Any], now: DateTime) -> Payload:
        week_start = engine.week_start_of_date(_require(params, "weekStartDate"))
        return {"display": engine.format_week_display(week_start), "weekStart": week_start}

    def _calculate_date_range(self, engine: CalendarEngine, params: Mapping[str, Any], now: DateTime) -> Payload:
        preset = Preset.parse(_require(params, "preset"))
        result = self._navigation.resolve_analytics_range(
            preset,
            params.get("startDate"),
            params.get("endDate"),
            engine=engine,
            now=now,
        )
        if not result.valid:
            raise InvalidRequestError(result.message)

        return {
            "startDate": result.date_range.start_key,
            "endDate": result.date_range.end_key,
            "preset": preset.value,
        }

    def _validate_date_range(self, engine: CalendarEngine, params: Mapping[str, Any], now: DateTime) -> Payload:
        result = engine.validate_range(params.get("startDate"), params.get("endDate"))
        return {"valid": result.valid, "message": result.message}
