# ===== appointly/models/appointment.py =====
import enum

from sqlalchemy import Column, Integer, Text, Date, Time, DateTime, ForeignKey, Index, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from appointly.models.base import Base
from appointly.utils.time_utils import format_hhmm, time_to_minutes


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"

    @property
    def is_active(self) -> bool:
        """Every status except cancelled holds its reservation"""
        return self is not AppointmentStatus.CANCELLED

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    def can_transition_to(self, target: "AppointmentStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    }),
    AppointmentStatus.RESCHEDULED: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RESCHEDULED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

ACTIVE_STATUSES = [status for status in AppointmentStatus if status.is_active]


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_provider_date", "provider_id", "date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # References
    provider_id = Column(Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)

    # Appointment details; end time is derived from the service duration
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(
        Enum(
            AppointmentStatus,
            name="appointment_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("Client")
    service = relationship("Service")

    def __repr__(self):
        return f"<Appointment(id={self.id}, date={self.date}, time={self.start_time}, status={self.status})>"

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.service.duration

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "time": format_hhmm(self.start_minutes),
            "end_time": format_hhmm(self.end_minutes),
            "status": self.status.value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "client": self.client.to_summary() if self.client else None,
            "service": self.service.to_summary() if self.service else None,
        }
