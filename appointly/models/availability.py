# ===== appointly/models/availability.py =====
from sqlalchemy import Column, Integer, Boolean, JSON, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from appointly.models.base import Base
from appointly.utils.time_utils import format_hhmm


class AvailabilityRule(Base):
    """Provider-defined weekly working hours, one row per weekday"""
    __tablename__ = "availability_rules"
    __table_args__ = (
        UniqueConstraint("provider_id", "day_of_week", name="uq_availability_provider_day"),
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_availability_day_of_week"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    provider_id = Column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_enabled = Column(Boolean, nullable=False, default=True)

    # Sorted, non-overlapping [start, end) pairs in minutes since midnight
    intervals = Column(JSON, nullable=False, default=list)

    provider = relationship("Provider", back_populates="availability_rules")

    def __repr__(self):
        return f"<AvailabilityRule(provider_id={self.provider_id}, day={self.day_of_week}, enabled={self.is_enabled})>"

    @property
    def open_intervals(self):
        """Intervals as tuples; empty when the day is disabled"""
        if not self.is_enabled:
            return []
        return [(int(start), int(end)) for start, end in (self.intervals or [])]

    def to_dict(self):
        return {
            "day_of_week": self.day_of_week,
            "is_enabled": self.is_enabled,
            "intervals": [
                {"start": format_hhmm(start), "end": format_hhmm(end)}
                for start, end in self.open_intervals
            ],
        }
