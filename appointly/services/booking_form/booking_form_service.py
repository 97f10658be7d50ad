# appointly/services/booking_form/booking_form_service.py
"""Public booking page settings"""
from typing import Dict, Any
from sqlalchemy.orm import Session

from appointly.core.exceptions import NotFoundError
from appointly.models.booking_form import BookingForm
from appointly.models.service import Service


class BookingFormService:

    @staticmethod
    def get_form(db: Session, provider_id: int) -> BookingForm:
        form = db.query(BookingForm).filter(BookingForm.provider_id == provider_id).first()
        if not form:
            raise NotFoundError("Booking form not found")
        return form

    @staticmethod
    def update_form(db: Session, provider_id: int, **updates) -> BookingForm:
        """Create the form on first save, then update only the provided fields"""
        form = db.query(BookingForm).filter(BookingForm.provider_id == provider_id).first()
        if not form:
            form = BookingForm(provider_id=provider_id)
            db.add(form)

        for key, value in updates.items():
            if value is not None and hasattr(form, key):
                setattr(form, key, value)

        db.commit()
        db.refresh(form)
        return form

    @staticmethod
    def get_public_view(db: Session, provider_id: int) -> Dict[str, Any]:
        form = BookingFormService.get_form(db, provider_id)
        if not form.is_active:
            raise NotFoundError("Booking form not found")

        services = (
            db.query(Service)
            .filter(Service.provider_id == provider_id, Service.is_active.is_(True))
            .order_by(Service.name.asc())
            .all()
        )

        return {
            "form": form.to_dict(),
            "services": [service.to_dict() for service in services],
        }
