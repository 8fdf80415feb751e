"""
Domain-specific exception hierarchy for the weekclock application.
"""


class WeekclockError(Exception):
    """Base class for all application-level errors."""


class ParseError(WeekclockError, ValueError):
    """Raised when a date or instant string cannot be parsed."""

    def __init__(self, value: object, message: str | None = None):
        self.value = value
        super().__init__(message or f"Could not parse date value: {value!r}")


class TimezoneError(WeekclockError, ValueError):
    """Raised when a timezone identifier is not known to the timezone database."""

    def __init__(self, timezone: object, message: str | None = None):
        self.timezone = timezone
        super().__init__(message or f"Unknown timezone identifier: {timezone!r}")


class InvalidRequestError(WeekclockError, ValueError):
    """Raised when a caller supplies missing or ill-typed parameters."""


class UnknownOperationError(InvalidRequestError):
    """Raised for an unrecognised date operation name."""

    def __init__(self, operation: object):
        self.operation = operation
        super().__init__(f"Unknown date operation: {operation!r}")


class SettingsError(WeekclockError):
    """Raised when the settings file cannot be read or written."""
