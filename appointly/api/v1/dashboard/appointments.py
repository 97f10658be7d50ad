# ============================================================================
# appointly/api/v1/dashboard/appointments.py
# Session authenticated endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path, status as http_status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from appointly.config.database import get_db
from appointly.models.appointment import AppointmentStatus
from appointly.models.provider import Provider
from appointly.api.dependencies import get_current_provider
from appointly.schemas.appointment import AppointmentCreate, AppointmentUpdate
from appointly.services.appointment.admission_controller import BookingAdmissionController
from appointly.services.appointment.appointment_query_service import AppointmentQueryService

router = APIRouter(prefix="/appointments", tags=["dashboard-appointments"])


@router.get("")
def list_appointments(
        date: Optional[date] = Query(None, description="Only appointments on this date"),
        status: Optional[AppointmentStatus] = Query(None, description="Filter by status"),
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """
    Get a list of all appointments for your business.
    Requires authenticated session.
    """
    return AppointmentQueryService.list_appointments(
        db=db,
        provider_id=current_provider.id,
        day=date,
        status=status
    )


@router.get("/{appointment_id}")
def get_appointment(
        appointment_id: int = Path(..., description="The appointment ID"),
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """Get detailed information about a specific appointment."""
    return AppointmentQueryService.get_appointment(db, current_provider.id, appointment_id).to_dict()


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_appointment(
        payload: AppointmentCreate,
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """
    Book an appointment for one of your clients.
    Rejected with 400 outside working hours and 409 when the time is taken.
    """
    appointment = BookingAdmissionController(db).admit(
        provider_id=current_provider.id,
        client_id=payload.client_id,
        service_id=payload.service_id,
        day=payload.date,
        start_time=payload.time,
        notes=payload.notes,
    )
    return appointment.to_dict()


@router.patch("/{appointment_id}")
def update_appointment(
        payload: AppointmentUpdate,
        appointment_id: int = Path(..., description="The appointment ID"),
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """
    Change an appointment's status, or move it to a new date and time.
    A move is validated like a new booking and marks it 'rescheduled'.
    """
    controller = BookingAdmissionController(db)

    if payload.is_reschedule:
        appointment = controller.reschedule(
            current_provider.id, appointment_id, payload.date, payload.time,
            new_status=payload.status
        )
    else:
        appointment = controller.transition(current_provider.id, appointment_id, payload.status)

    return appointment.to_dict()


@router.delete("/{appointment_id}")
def delete_appointment(
        appointment_id: int = Path(..., description="The appointment ID"),
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    AppointmentQueryService.delete_appointment(db, current_provider.id, appointment_id)
    return {"message": "Appointment deleted successfully"}
