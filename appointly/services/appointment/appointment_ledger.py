# ============================================================================
# appointly/services/appointment/appointment_ledger.py
# Committed appointments per provider/date. Writes only flush; the
# admission controller owns the commit inside its critical section.
# ============================================================================
from datetime import date, time
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from appointly.models.appointment import Appointment, AppointmentStatus, ACTIVE_STATUSES


class AppointmentLedger:
    """Read and write access to a provider's appointments"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, provider_id: int, appointment_id: int) -> Optional[Appointment]:
        return (
            self.db.query(Appointment)
            .options(joinedload(Appointment.service), joinedload(Appointment.client))
            .filter(
                Appointment.id == appointment_id,
                Appointment.provider_id == provider_id,
            )
            .first()
        )

    def list_active(
            self,
            provider_id: int,
            day: date,
            exclude_id: Optional[int] = None
    ) -> List[Appointment]:
        """Appointments holding a reservation on ``day``, ordered by start time"""
        query = (
            self.db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(
                Appointment.provider_id == provider_id,
                Appointment.date == day,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)

        return query.order_by(Appointment.start_time.asc()).all()

    def busy_intervals(
            self,
            provider_id: int,
            day: date,
            exclude_id: Optional[int] = None
    ) -> List[Tuple[int, int]]:
        return [
            (appt.start_minutes, appt.end_minutes)
            for appt in self.list_active(provider_id, day, exclude_id=exclude_id)
        ]

    def insert(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def update_status(self, appointment: Appointment, status: AppointmentStatus) -> Appointment:
        appointment.status = status
        self.db.flush()
        return appointment

    def reschedule(
            self,
            appointment: Appointment,
            day: date,
            start_time: time,
            status: AppointmentStatus = AppointmentStatus.RESCHEDULED
    ) -> Appointment:
        appointment.date = day
        appointment.start_time = start_time
        appointment.status = status
        self.db.flush()
        return appointment
