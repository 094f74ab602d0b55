"""Time-of-day classification."""

from datetime import datetime

from models import TimeSlot


def classify_time_slot(timestamp: datetime) -> TimeSlot:
    """Bucket a timestamp by its local hour. Total: every hour maps to exactly one slot."""
    return TimeSlot.for_hour(timestamp.hour)
