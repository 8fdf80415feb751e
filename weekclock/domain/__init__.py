"""
Domain layer - Pure calendar logic without external dependencies.
"""

from .calendar_engine import CalendarEngine
from .models import DateRange, DateShift, Preset, RangeValidation, Weekday

__all__ = ["CalendarEngine", "DateRange", "DateShift", "Preset", "RangeValidation", "Weekday"]
