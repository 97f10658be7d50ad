# ===== appointly/services/availability/slot_generator.py =====
"""
Pure slot derivation from a weekday availability rule.

All values are minutes since midnight and every interval is half-open
[start, end). Nothing here touches the database.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from appointly.utils.time_utils import format_hhmm

Interval = Tuple[int, int]


@dataclass(frozen=True, order=True)
class TimeSlot:
    """A candidate bookable start time and the end it implies"""
    start: int
    end: int

    @property
    def start_label(self) -> str:
        return format_hhmm(self.start)

    @property
    def end_label(self) -> str:
        return format_hhmm(self.end)

    def to_dict(self):
        return {
            "start": self.start_label,
            "end": self.end_label,
            "duration_minutes": self.end - self.start,
        }


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open intersection test; touching intervals do not overlap"""
    return a_start < b_end and b_start < a_end


def containing_interval(intervals: Iterable[Interval], start: int, end: int) -> Optional[Interval]:
    """Open interval that fully contains [start, end), if any"""
    for interval_start, interval_end in intervals:
        if interval_start <= start and end <= interval_end:
            return interval_start, interval_end
    return None


def generate_slots(rule, service_duration: int, step_minutes: int = 30) -> List[TimeSlot]:
    """
    Emit every slot of ``service_duration`` minutes, spaced ``step_minutes``
    apart, that fits entirely inside one of the rule's open intervals.

    A disabled rule, an empty interval or a non-positive duration/step
    yields an empty list.
    """
    if rule is None or service_duration <= 0 or step_minutes <= 0:
        return []

    slots = []
    for start, end in rule.open_intervals:
        slot_start = start
        while slot_start + service_duration <= end:
            slots.append(TimeSlot(slot_start, slot_start + service_duration))
            slot_start += step_minutes

    return sorted(slots)


def filter_free_slots(slots: Sequence[TimeSlot], busy: Iterable[Interval]) -> List[TimeSlot]:
    """Drop slots that intersect any busy interval"""
    busy = list(busy)
    return [
        slot for slot in slots
        if not any(intervals_overlap(slot.start, slot.end, b_start, b_end) for b_start, b_end in busy)
    ]
