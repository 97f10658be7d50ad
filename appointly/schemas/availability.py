"""
Pydantic schemas for weekly availability
"""
from pydantic import BaseModel, Field, field_validator
from typing import List

from appointly.utils.time_utils import parse_hhmm


class IntervalIn(BaseModel):
    """One open interval, 'HH:MM' to 'HH:MM' (end exclusive, '24:00' allowed)"""
    start: str = Field(..., examples=["09:00"])
    end: str = Field(..., examples=["12:00"])

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, v):
        parse_hhmm(v)
        return v

    def to_minutes(self):
        return parse_hhmm(self.start), parse_hhmm(self.end)


class AvailabilityRuleIn(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    is_enabled: bool = True
    intervals: List[IntervalIn] = Field(default_factory=list)

    def to_rule(self) -> dict:
        return {
            "day_of_week": self.day_of_week,
            "is_enabled": self.is_enabled,
            "intervals": [interval.to_minutes() for interval in self.intervals],
        }
