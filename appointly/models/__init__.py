# appointly/models/__init__.py
from .base import Base
from .provider import Provider
from .service import Service
from .client import Client
from .availability import AvailabilityRule
from .appointment import Appointment, AppointmentStatus, ACTIVE_STATUSES
from .booking_form import BookingForm

__all__ = [
    "Base",
    "Provider",
    "Service",
    "Client",
    "AvailabilityRule",
    "Appointment",
    "AppointmentStatus",
    "ACTIVE_STATUSES",
    "BookingForm",
]
