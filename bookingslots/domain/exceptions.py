"""
Domain-specific exception hierarchy for the booking slots engine.
"""


class BookingSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidDurationError(BookingSlotsError, ValueError):
    """Raised when a service duration is not a positive number of minutes."""


class ScheduleParseError(BookingSlotsError, ValueError):
    """Raised when a time, date or timestamp value cannot be parsed."""


class DataSourceError(BookingSlotsError):
    """Raised when business, appointment or closure data cannot be loaded."""
