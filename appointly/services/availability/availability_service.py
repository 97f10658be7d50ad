# ===== appointly/services/availability/availability_service.py =====
from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session
from appointly.config.settings import get_settings
from appointly.core.exceptions import NotFoundError
from appointly.models.service import Service
from appointly.services.appointment.appointment_ledger import AppointmentLedger
from appointly.services.availability.availability_store import AvailabilityStore
from appointly.services.availability.slot_generator import TimeSlot, filter_free_slots, generate_slots
from appointly.utils.time_utils import day_of_week
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Slots a booking page should offer: working hours minus existing bookings"""

    def __init__(self, db: Session, store: Optional[AvailabilityStore] = None,
                 ledger: Optional[AppointmentLedger] = None):
        self.db = db
        self.store = store if store is not None else AvailabilityStore(db)
        self.ledger = ledger if ledger is not None else AppointmentLedger(db)

    def get_free_slots(
            self,
            provider_id: int,
            day: date,
            service_id: int,
            step_minutes: Optional[int] = None,
            active_only: bool = False
    ) -> List[TimeSlot]:
        """
        Generate slots from the weekday rule and block out active appointments.
        ``active_only`` hides inactive services, as the public page does.
        """
        query = self.db.query(Service).filter(
            Service.id == service_id,
            Service.provider_id == provider_id
        )
        if active_only:
            query = query.filter(Service.is_active.is_(True))

        service = query.first()
        if not service:
            raise NotFoundError("Service not found")

        step = step_minutes or get_settings().SLOT_STEP_MINUTES

        rule = self.store.get_rule(provider_id, day_of_week(day))
        if rule is None:
            logger.debug(f"No availability rule for provider {provider_id} on {day}")
            return []

        candidates = generate_slots(rule, service.duration, step)
        return filter_free_slots(candidates, self.ledger.busy_intervals(provider_id, day))
