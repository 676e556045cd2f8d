"""Errors raised by the calendar and pricing services."""


class CalendarServiceError(Exception):
    """Base class for business-rule rejections of the calendar services."""


class NotFoundError(CalendarServiceError):
    """Raised when a property, slot or rule does not exist."""


class ForbiddenError(CalendarServiceError):
    """Raised when the requester neither owns the property nor is an admin."""


class BadRequestError(CalendarServiceError):
    """Raised for invalid dates, overlapping slots, malformed rules or deleted properties."""
