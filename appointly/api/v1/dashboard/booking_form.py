# ============================================================================
# appointly/api/v1/dashboard/booking_form.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from appointly.config.database import get_db
from appointly.models.provider import Provider
from appointly.api.dependencies import get_current_provider
from appointly.schemas.booking import BookingFormUpdate
from appointly.services.booking_form.booking_form_service import BookingFormService

router = APIRouter(prefix="/booking-form", tags=["dashboard-booking-form"])


@router.get("")
def get_booking_form(
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    return BookingFormService.get_form(db, current_provider.id).to_dict()


@router.put("")
def update_booking_form(
        payload: BookingFormUpdate,
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """Create or update the public booking page settings."""
    form = BookingFormService.update_form(
        db, current_provider.id, **payload.model_dump(exclude_unset=True)
    )
    return form.to_dict()
