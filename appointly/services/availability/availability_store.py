# ===== appointly/services/availability/availability_store.py =====
from typing import Dict, List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from appointly.core.exceptions import InvalidAvailabilityError
from appointly.models.availability import AvailabilityRule
from appointly.utils.time_utils import MINUTES_PER_DAY, format_hhmm
import logging

logger = logging.getLogger(__name__)


def validate_intervals(intervals: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """
    Check a day's intervals are within the day, non-empty, sorted and
    non-overlapping. Returns them as a list of tuples.
    """
    checked = []
    previous_end = None

    for start, end in intervals:
        if not 0 <= start < end <= MINUTES_PER_DAY:
            raise InvalidAvailabilityError(
                f"Interval {format_hhmm(start)}-{format_hhmm(end)} must start before it ends and stay within the day"
            )
        if previous_end is not None and start < previous_end:
            raise InvalidAvailabilityError(
                f"Interval starting at {format_hhmm(start)} overlaps or precedes the previous interval"
            )
        checked.append((start, end))
        previous_end = end

    return checked


class AvailabilityStore:
    """Weekly availability rules of one provider, replaced as a whole"""

    def __init__(self, db: Session):
        self.db = db

    def get_rules(self, provider_id: int) -> List[AvailabilityRule]:
        return (
            self.db.query(AvailabilityRule)
            .filter(AvailabilityRule.provider_id == provider_id)
            .order_by(AvailabilityRule.day_of_week.asc())
            .all()
        )

    def get_rule(self, provider_id: int, day_of_week: int) -> Optional[AvailabilityRule]:
        return (
            self.db.query(AvailabilityRule)
            .filter(
                AvailabilityRule.provider_id == provider_id,
                AvailabilityRule.day_of_week == day_of_week,
            )
            .first()
        )

    @staticmethod
    def validate_rules(rules: Sequence[Dict]) -> List[Dict]:
        """Validate a full week before anything is written"""
        seen_days = set()
        validated = []

        for rule in rules:
            day = rule["day_of_week"]
            if not 0 <= day <= 6:
                raise InvalidAvailabilityError(f"day_of_week must be between 0 and 6, got {day}")
            if day in seen_days:
                raise InvalidAvailabilityError(f"Duplicate rule for day_of_week {day}")
            seen_days.add(day)

            enabled = bool(rule.get("is_enabled", True))
            intervals = validate_intervals(rule.get("intervals") or [])

            validated.append({
                "day_of_week": day,
                "is_enabled": enabled,
                # A disabled day keeps no hours
                "intervals": [list(i) for i in intervals] if enabled else [],
            })

        return validated

    def set_rules(self, provider_id: int, rules: Sequence[Dict]) -> List[AvailabilityRule]:
        """
        Replace the provider's whole week in one transaction.

        Rules are validated up front so an invalid submission leaves the
        stored week untouched. Days missing from ``rules`` end up with no rule.
        """
        validated = self.validate_rules(rules)

        try:
            self.db.query(AvailabilityRule).filter(
                AvailabilityRule.provider_id == provider_id
            ).delete(synchronize_session=False)

            for rule in validated:
                self.db.add(AvailabilityRule(provider_id=provider_id, **rule))

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Replaced availability for provider {provider_id} ({len(validated)} rules)")
        return self.get_rules(provider_id)
