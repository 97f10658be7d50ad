# ============================================================================
# appointly/api/v1/public/booking.py
# Unauthenticated endpoints behind a provider's booking link
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query, status as http_status
from sqlalchemy.orm import Session
from datetime import date

from appointly.config.database import get_db
from appointly.schemas.booking import PublicBookingRequest
from appointly.services.availability.availability_service import AvailabilityService
from appointly.services.booking.public_booking_gateway import PublicBookingGateway
from appointly.services.booking_form.booking_form_service import BookingFormService

router = APIRouter()


@router.get("/booking-form/{provider_id}")
def get_public_booking_form(
        provider_id: int = Path(..., description="Provider the booking link belongs to"),
        db: Session = Depends(get_db)
):
    """Booking page settings plus the services visitors can choose from."""
    return BookingFormService.get_public_view(db, provider_id)


@router.get("/{provider_id}/slots")
def get_public_slots(
        provider_id: int = Path(...),
        date: date = Query(..., description="Day to list slots for (YYYY-MM-DD)"),
        service_id: int = Query(..., alias="serviceId"),
        db: Session = Depends(get_db)
):
    """What the public form should offer: free slots for an active service."""
    slots = AvailabilityService(db).get_free_slots(
        provider_id, date, service_id, active_only=True
    )
    return {
        "date": date.isoformat(),
        "service_id": service_id,
        "slots": [slot.to_dict() for slot in slots],
    }


@router.post("/appointments/{provider_id}", status_code=http_status.HTTP_201_CREATED)
def create_public_appointment(
        payload: PublicBookingRequest,
        provider_id: int = Path(...),
        db: Session = Depends(get_db)
):
    """
    Book as an anonymous visitor. The visitor is matched to an existing
    client by email, or a new client is created.
    """
    appointment = PublicBookingGateway(db).book(
        provider_id=provider_id,
        visitor=payload.visitor(),
        service_id=payload.service_id,
        day=payload.date,
        start_time=payload.time,
    )
    return appointment.to_dict()
