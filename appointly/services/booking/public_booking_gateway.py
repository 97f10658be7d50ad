# ============================================================================
# appointly/services/booking/public_booking_gateway.py
# ============================================================================
"""Bookings made by anonymous visitors through a provider's public page"""
import logging
from datetime import date, time
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from appointly.core.exceptions import NotFoundError
from appointly.models.appointment import Appointment
from appointly.models.booking_form import BookingForm
from appointly.models.client import Client
from appointly.models.provider import Provider
from appointly.models.service import Service
from appointly.schemas.booking import VisitorInfo
from appointly.services.appointment.admission_controller import BookingAdmissionController

logger = logging.getLogger(__name__)


class PublicBookingGateway:

    def __init__(self, db: Session, controller: Optional[BookingAdmissionController] = None):
        self.db = db
        self.controller = controller if controller is not None else BookingAdmissionController(db)

    def find_client_by_email(self, provider_id: int, email: str) -> Optional[Client]:
        """Case-insensitive match within the provider, oldest record wins"""
        return (
            self.db.query(Client)
            .filter(
                Client.provider_id == provider_id,
                func.lower(Client.email) == email.strip().lower(),
            )
            .order_by(Client.id.asc())
            .first()
        )

    def get_or_create_client(self, provider_id: int, visitor: VisitorInfo) -> Client:
        """
        Reuse the client with the visitor's email or create one. A created
        client is committed on its own and survives a failed booking, so a
        retry finds it again.
        """
        client = self.find_client_by_email(provider_id, visitor.email)
        if client:
            return client

        client = Client(
            provider_id=provider_id,
            name=visitor.name,
            email=visitor.email.strip(),
            phone=visitor.phone,
            whatsapp=visitor.whatsapp,
        )
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)

        logger.info(f"Created client {client.id} for provider {provider_id} from public booking")
        return client

    def book(
            self,
            provider_id: int,
            visitor: VisitorInfo,
            service_id: int,
            day: date,
            start_time: time
    ) -> Appointment:
        provider = self.db.query(Provider).filter(Provider.id == provider_id).first()
        if not provider:
            raise NotFoundError("Provider not found")

        # Providers without a saved form still take bookings; a switched-off page does not
        form = self.db.query(BookingForm).filter(BookingForm.provider_id == provider_id).first()
        if form is not None and not form.is_active:
            raise NotFoundError("Booking form not found")

        service = self.db.query(Service).filter(
            Service.id == service_id,
            Service.provider_id == provider_id,
            Service.is_active.is_(True)
        ).first()
        if not service:
            raise NotFoundError("Service not found")

        client = self.get_or_create_client(provider_id, visitor)

        return self.controller.admit(
            provider_id=provider_id,
            client_id=client.id,
            service_id=service.id,
            day=day,
            start_time=start_time,
        )
