"""
Pydantic schemas for owner-created appointments
"""
from datetime import date as dt_date, time as dt_time
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional

from appointly.models.appointment import AppointmentStatus
from appointly.schemas.common import parse_start_time


class AppointmentCreate(BaseModel):
    client_id: int
    service_id: int
    date: dt_date
    time: dt_time = Field(..., description="Start time as HH:MM")
    notes: Optional[str] = None

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_start_time(v)


class AppointmentUpdate(BaseModel):
    """
    Either a status change, or a new date and time (a reschedule).
    Both date and time must be sent together.
    """
    status: Optional[AppointmentStatus] = None
    date: Optional[dt_date] = None
    time: Optional[dt_time] = None

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        if v is None:
            return v
        return parse_start_time(v)

    @model_validator(mode="after")
    def check_fields(self):
        if (self.date is None) != (self.time is None):
            raise ValueError("date and time must be provided together")
        if self.date is None and self.status is None:
            raise ValueError("Nothing to update: send a status or a new date and time")
        return self

    @property
    def is_reschedule(self) -> bool:
        return self.date is not None
