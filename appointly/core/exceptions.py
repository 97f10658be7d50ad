# appointly/core/exceptions.py
"""Domain errors raised by the booking engine and rendered as {message, kind}"""


class SchedulingError(Exception):
    """Base class for errors surfaced to API callers"""

    kind = "scheduling_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind}


class ValidationError(SchedulingError):
    """Malformed input: missing field, bad date or time format"""
    kind = "validation_error"
    status_code = 400


class InvalidAvailabilityError(SchedulingError):
    """Weekly rules with overlapping, unsorted or out-of-range intervals"""
    kind = "invalid_availability"
    status_code = 400


class InvalidSlotError(SchedulingError):
    """Requested time is not inside any open interval for that day"""
    kind = "invalid_slot"
    status_code = 400


class InvalidTransitionError(SchedulingError):
    """Status change not allowed from the appointment's current status"""
    kind = "invalid_transition"
    status_code = 400


class NotFoundError(SchedulingError):
    """Unknown provider, service, client or appointment for this provider"""
    kind = "not_found"
    status_code = 404


class BookingConflictError(SchedulingError):
    """Requested interval overlaps an existing active appointment"""
    kind = "booking_conflict"
    status_code = 409
