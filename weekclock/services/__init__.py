"""
Service layer helpers that orchestrate settings and domain logic.
"""

from .actions import WeekClockActions
from .timezone_setting import SettingsStoreProtocol, TimezoneSetting
from .week_navigation import WeekNavigationService

__all__ = ["SettingsStoreProtocol", "TimezoneSetting", "WeekClockActions", "WeekNavigationService"]
