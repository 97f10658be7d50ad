# ============================================================================
# appointly/services/appointment/appointment_query_service.py
# Read side of the appointment screens - no FastAPI dependencies
# ============================================================================
from sqlalchemy.orm import Session, joinedload
from datetime import date
from typing import Optional, Dict, Any

from appointly.core.exceptions import NotFoundError
from appointly.models.appointment import Appointment, AppointmentStatus


class AppointmentQueryService:
    """Service layer for appointment listing and removal."""

    @staticmethod
    def list_appointments(
            db: Session,
            provider_id: int,
            day: Optional[date] = None,
            status: Optional[AppointmentStatus] = None
    ) -> Dict[str, Any]:
        """List appointments, newest date/time first, with optional filters."""
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.client), joinedload(Appointment.service))
            .filter(Appointment.provider_id == provider_id)
        )

        if day:
            query = query.filter(Appointment.date == day)
        if status:
            query = query.filter(Appointment.status == status)

        appointments = query.order_by(Appointment.date.desc(), Appointment.start_time.desc()).all()

        return {
            "total_appointments": len(appointments),
            "filters": {
                "date": day.isoformat() if day else None,
                "status": status.value if status else None,
            },
            "appointments": [appt.to_dict() for appt in appointments]
        }

    @staticmethod
    def get_appointment(db: Session, provider_id: int, appointment_id: int) -> Appointment:
        appointment = (
            db.query(Appointment)
            .options(joinedload(Appointment.client), joinedload(Appointment.service))
            .filter(Appointment.id == appointment_id, Appointment.provider_id == provider_id)
            .first()
        )
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    @staticmethod
    def delete_appointment(db: Session, provider_id: int, appointment_id: int) -> None:
        appointment = AppointmentQueryService.get_appointment(db, provider_id, appointment_id)
        db.delete(appointment)
        db.commit()
