# ============================================================================
# appointly/api/v1/dashboard/availability.py
# Weekly working hours and the slots derived from them
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from appointly.config.database import get_db
from appointly.models.provider import Provider
from appointly.api.dependencies import get_current_provider
from appointly.schemas.availability import AvailabilityRuleIn
from appointly.services.availability.availability_store import AvailabilityStore
from appointly.services.availability.availability_service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["dashboard-availability"])


@router.get("")
def get_availability(
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """Stored weekly rules, one entry per configured weekday."""
    rules = AvailabilityStore(db).get_rules(current_provider.id)
    return [rule.to_dict() for rule in rules]


@router.put("")
def replace_availability(
        rules: List[AvailabilityRuleIn],
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """
    Replace the whole week. Weekdays left out of the payload lose their rule.
    Overlapping or unsorted intervals are rejected before anything is saved.
    """
    stored = AvailabilityStore(db).set_rules(
        current_provider.id,
        [rule.to_rule() for rule in rules]
    )
    return [rule.to_dict() for rule in stored]


@router.get("/slots")
def get_slots(
        date: date = Query(..., description="Day to list slots for (YYYY-MM-DD)"),
        service_id: int = Query(..., alias="serviceId", description="Service whose duration sizes the slots"),
        step: Optional[int] = Query(None, ge=5, le=240, description="Minutes between slot starts"),
        current_provider: Provider = Depends(get_current_provider),
        db: Session = Depends(get_db)
):
    """Free slots for a service on a date, excluding already booked times."""
    slots = AvailabilityService(db).get_free_slots(
        current_provider.id, date, service_id, step_minutes=step
    )
    return {
        "date": date.isoformat(),
        "service_id": service_id,
        "slots": [slot.to_dict() for slot in slots],
    }
