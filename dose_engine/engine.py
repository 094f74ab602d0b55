"""
The Medication Dose Engine.

This module implements the public scheduling operations:
1. Daily Schedule - every active medication, every rule, bucketed by time slot.
2. Multi-Day Schedule - the daily schedule repeated over a date range.
3. Next Dose - the earliest dose still ahead of a given moment (same day only).

All operations are pure functions of their arguments. Nothing is cached between calls,
and the Medication records handed in are only read.
"""

import logging
from datetime import date as date_type, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Union
from collections import defaultdict

from models import Medication, ScheduledDose, TimeSlot, DailySchedule
from .settings import ScheduleSettings, DEFAULT_SETTINGS
from .duration import is_active, as_date
from .expander import expand_rule
from .report import ScheduleReport

logger = logging.getLogger(__name__)


def generate_daily_schedule(
    medications: Sequence[Medication],
    on: Optional[Union[date_type, datetime]] = None,
    settings: Optional[ScheduleSettings] = None,
    report: Optional[ScheduleReport] = None,
) -> DailySchedule:
    """
    Convert medications into the doses due on one date, grouped by time slot.

    Slots without doses are left out. Within a slot, doses are in chronological order;
    equal times keep the order in which they were produced.
    """
    if on is None:
        on = datetime.now()
    settings = settings or DEFAULT_SETTINGS
    day = as_date(on)

    buckets: Dict[TimeSlot, List[ScheduledDose]] = defaultdict(list)

    for medication in medications:
        if not is_active(medication, day, settings, report):
            logger.debug(f"{medication.name}: outside its duration window on {day}")
            if report is not None:
                report.record_inactive(medication, day)
            continue

        # Rules are independent; every one of them adds its own doses
        for rule in medication.rules:
            for dose in expand_rule(medication, rule, on, settings, report):
                buckets[dose.time_slot].append(dose)

    schedule: DailySchedule = {}
    for slot in TimeSlot.ordered():
        if slot in buckets:
            schedule[slot] = sorted(buckets[slot], key=lambda d: d.scheduled_time)

    if report is not None:
        for slot_doses in schedule.values():
            for dose in slot_doses:
                report.add_dose(dose)

    logger.debug(f"Schedule for {day}: {count_doses(schedule)} doses across {len(schedule)} slots")
    return schedule


def generate_multi_day_schedule(
    medications: Sequence[Medication],
    start: Union[date_type, datetime],
    number_of_days: int,
    settings: Optional[ScheduleSettings] = None,
    report: Optional[ScheduleReport] = None,
) -> Dict[date_type, DailySchedule]:
    """
    One independent daily schedule per day in [start, start + number_of_days).
    Keyed by calendar date.
    """
    if number_of_days <= 0:
        return {}

    logger.info(f"Generating {number_of_days}-day schedule from {as_date(start)} for {len(medications)} medications")

    result: Dict[date_type, DailySchedule] = {}
    for offset in range(number_of_days):
        target = start + timedelta(days=offset)
        result[as_date(target)] = generate_daily_schedule(medications, target, settings, report)
    return result


def next_upcoming_dose(
    medications: Sequence[Medication],
    after: Optional[datetime] = None,
    settings: Optional[ScheduleSettings] = None,
) -> Optional[ScheduledDose]:
    """
    Earliest dose strictly after `after` on the same calendar day.
    Does not look into the following days; loop over generate_daily_schedule for that.
    """
    if after is None:
        after = datetime.now()

    schedule = generate_daily_schedule(medications, after, settings)
    upcoming = [dose for dose in flatten_schedule(schedule) if dose.scheduled_time > after]
    if not upcoming:
        return None
    return min(upcoming, key=lambda d: d.scheduled_time)


# --- Schedule Helpers ---

def flatten_schedule(schedule: DailySchedule) -> List[ScheduledDose]:
    """All doses of a daily schedule in chronological order."""
    doses = [dose for slot_doses in schedule.values() for dose in slot_doses]
    doses.sort(key=lambda d: d.scheduled_time)
    return doses


def count_doses(schedule: DailySchedule) -> int:
    return sum(len(slot_doses) for slot_doses in schedule.values())


def due_soon_doses(
    schedule: DailySchedule,
    now: datetime,
    settings: Optional[ScheduleSettings] = None,
) -> List[ScheduledDose]:
    """Doses due within settings.due_soon_minutes of now (already-due doses excluded)."""
    settings = settings or DEFAULT_SETTINGS
    return [dose for dose in flatten_schedule(schedule) if dose.is_due_soon(now, settings.due_soon_minutes)]
