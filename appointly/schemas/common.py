"""
Shared field parsing for request schemas
"""
from datetime import time

from appointly.utils.time_utils import minutes_to_time, parse_hhmm


def parse_start_time(value) -> time:
    """Accept 'HH:MM' strings (or time objects) for a booking start"""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    return minutes_to_time(parse_hhmm(value))
