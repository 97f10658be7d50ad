"""
Pydantic schemas for the public booking page
"""
from datetime import date as dt_date, time as dt_time
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from appointly.schemas.common import parse_start_time


class VisitorInfo(BaseModel):
    """Contact details typed in by an anonymous visitor"""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=30)
    whatsapp: Optional[str] = Field(None, max_length=30)


class PublicBookingRequest(VisitorInfo):
    service_id: int
    date: dt_date
    time: dt_time = Field(..., description="Start time as HH:MM")

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_start_time(v)

    def visitor(self) -> VisitorInfo:
        return VisitorInfo(
            name=self.name,
            email=self.email,
            phone=self.phone,
            whatsapp=self.whatsapp,
        )


class BookingFormUpdate(BaseModel):
    """All fields optional - only send what you want to change"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    background_color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    button_color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    header_image: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None
