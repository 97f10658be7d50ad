# ============================================================================
# appointly/services/appointment/admission_controller.py
# Single authority deciding whether an appointment may be committed
# ============================================================================
"""
Booking admission.

Every write that places an appointment on the calendar (a new booking or
a reschedule) goes through ``BookingAdmissionController``. The checks and
the write run inside one per-(provider, date) critical section and one
database transaction, so two callers racing for the same slot cannot both
commit, and a rejected request leaves nothing behind.
"""
import logging
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from appointly.core.exceptions import (
    BookingConflictError,
    InvalidSlotError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from appointly.core.locks import get_booking_lock
from appointly.models.appointment import Appointment, AppointmentStatus
from appointly.models.client import Client
from appointly.models.service import Service
from appointly.services.appointment.appointment_ledger import AppointmentLedger
from appointly.services.availability.availability_store import AvailabilityStore
from appointly.services.availability.slot_generator import containing_interval, intervals_overlap
from appointly.utils.time_utils import day_of_week, format_hhmm, time_to_minutes

logger = logging.getLogger(__name__)


class BookingAdmissionController:

    def __init__(
            self,
            db: Session,
            lock=None,
            store: Optional[AvailabilityStore] = None,
            ledger: Optional[AppointmentLedger] = None
    ):
        self.db = db
        self.lock = lock if lock is not None else get_booking_lock()
        self.store = store if store is not None else AvailabilityStore(db)
        self.ledger = ledger if ledger is not None else AppointmentLedger(db)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_service(self, provider_id: int, service_id: int) -> Service:
        service = self.db.query(Service).filter(
            Service.id == service_id,
            Service.provider_id == provider_id
        ).first()
        if not service:
            raise NotFoundError("Service not found")
        return service

    def get_client(self, provider_id: int, client_id: int) -> Client:
        client = self.db.query(Client).filter(
            Client.id == client_id,
            Client.provider_id == provider_id
        ).first()
        if not client:
            raise NotFoundError("Client not found")
        return client

    # ------------------------------------------------------------------
    # Checks (run inside the critical section)
    # ------------------------------------------------------------------

    def _check_within_availability(self, provider_id: int, day: date, start: int, end: int) -> None:
        rule = self.store.get_rule(provider_id, day_of_week(day))

        if rule is None or not rule.is_enabled:
            raise InvalidSlotError(f"No working hours on {day.isoformat()}")

        if containing_interval(rule.open_intervals, start, end) is None:
            raise InvalidSlotError(
                f"{format_hhmm(start)}-{format_hhmm(end)} on {day.isoformat()} is outside working hours"
            )

    def _check_no_conflict(
            self,
            provider_id: int,
            day: date,
            start: int,
            end: int,
            exclude_id: Optional[int] = None
    ) -> None:
        for appt in self.ledger.list_active(provider_id, day, exclude_id=exclude_id):
            if intervals_overlap(start, end, appt.start_minutes, appt.end_minutes):
                raise BookingConflictError(
                    f"{format_hhmm(start)}-{format_hhmm(end)} on {day.isoformat()} overlaps an existing "
                    f"appointment at {format_hhmm(appt.start_minutes)}-{format_hhmm(appt.end_minutes)}"
                )

    @staticmethod
    def _check_can_reschedule(appointment: Appointment, target: AppointmentStatus) -> None:
        current = appointment.status
        if not current.can_transition_to(AppointmentStatus.RESCHEDULED):
            raise InvalidTransitionError(
                f"Cannot reschedule an appointment that is '{current.value}'"
            )
        if target is not AppointmentStatus.RESCHEDULED and \
                not AppointmentStatus.RESCHEDULED.can_transition_to(target):
            raise InvalidTransitionError(
                f"Cannot change a rescheduled appointment to '{target.value}'"
            )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def admit(
            self,
            provider_id: int,
            client_id: int,
            service_id: int,
            day: date,
            start_time: time,
            notes: Optional[str] = None
    ) -> Appointment:
        """Validate a booking request and commit it as a pending appointment"""
        service = self.get_service(provider_id, service_id)
        self.get_client(provider_id, client_id)

        start = time_to_minutes(start_time)
        end = start + service.duration

        with self.lock.hold(provider_id, day):
            try:
                self._check_within_availability(provider_id, day, start, end)
                self._check_no_conflict(provider_id, day, start, end)

                appointment = self.ledger.insert(Appointment(
                    provider_id=provider_id,
                    client_id=client_id,
                    service_id=service.id,
                    date=day,
                    start_time=start_time,
                    notes=notes,
                    status=AppointmentStatus.PENDING,
                ))
                self.db.commit()
            except (InvalidSlotError, BookingConflictError) as e:
                self.db.rollback()
                logger.info(
                    f"Rejected booking for provider {provider_id} on {day} at {format_hhmm(start)}: {e.kind}"
                )
                raise
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(appointment)
        logger.info(
            f"Admitted appointment {appointment.id} for provider {provider_id} "
            f"on {day} at {format_hhmm(start)}-{format_hhmm(end)}"
        )
        return appointment

    def transition(
            self,
            provider_id: int,
            appointment_id: int,
            new_status: AppointmentStatus
    ) -> Appointment:
        """Move an appointment to a new status without changing its time"""
        appointment = self.ledger.get(provider_id, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        if new_status is AppointmentStatus.RESCHEDULED:
            raise ValidationError("Rescheduling requires a new date and time")

        current = appointment.status
        if not current.can_transition_to(new_status):
            raise InvalidTransitionError(
                f"Cannot change appointment status from '{current.value}' to '{new_status.value}'"
            )

        try:
            self.ledger.update_status(appointment, new_status)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(f"Appointment {appointment_id} moved from {current.value} to {new_status.value}")
        return appointment

    def reschedule(
            self,
            provider_id: int,
            appointment_id: int,
            new_day: date,
            new_start_time: time,
            new_status: Optional[AppointmentStatus] = None
    ) -> Appointment:
        """
        Move an appointment to a new date/time. The new interval is checked
        like a fresh booking, ignoring the appointment's own reservation.
        ``new_status`` is applied after the move (rescheduled -> new_status)
        in the same commit. On failure nothing about the appointment changes.
        """
        appointment = self.ledger.get(provider_id, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        target = new_status or AppointmentStatus.RESCHEDULED
        self._check_can_reschedule(appointment, target)

        start = time_to_minutes(new_start_time)
        end = start + appointment.service.duration

        with self.lock.hold(provider_id, new_day):
            try:
                # A cancel may have committed while we waited for the lock
                self.db.refresh(appointment)
                self._check_can_reschedule(appointment, target)

                self._check_within_availability(provider_id, new_day, start, end)
                self._check_no_conflict(provider_id, new_day, start, end, exclude_id=appointment.id)

                self.ledger.reschedule(appointment, new_day, new_start_time, status=target)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(appointment)
        logger.info(
            f"Rescheduled appointment {appointment_id} to {new_day} at {format_hhmm(start)} ({target.value})"
        )
        return appointment
