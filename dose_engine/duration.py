"""
Duration-window evaluation.

Decides whether a medication may produce doses on a given calendar date.
Policy is fail-open: whenever the window cannot be determined (no duration,
no anchor date, an end date that overflows the calendar) the medication is
treated as active.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Union, assert_never

from dateutil.relativedelta import relativedelta

from models import (
    Medication,
    AsNeeded,
    Ongoing,
    DaysDuration,
    WeeksDuration,
    MonthsDuration,
    UntilDate,
    DurationWindow,
)
from .settings import ScheduleSettings, MonthArithmetic, DEFAULT_SETTINGS
from .report import ScheduleReport, ExpansionIssue, MISSING_ANCHOR, UNRESOLVED_END_DATE

logger = logging.getLogger(__name__)


def as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def window_end(duration: DurationWindow, anchor: date, settings: Optional[ScheduleSettings] = None) -> Optional[date]:
    """
    Last active date of a window starting on anchor; None for open-ended windows.
    Raises OverflowError/ValueError when the end falls outside the supported calendar.
    """
    settings = settings or DEFAULT_SETTINGS

    if isinstance(duration, (AsNeeded, Ongoing)):
        return None
    elif isinstance(duration, DaysDuration):
        return anchor + timedelta(days=duration.count)
    elif isinstance(duration, WeeksDuration):
        return anchor + timedelta(weeks=duration.count)
    elif isinstance(duration, MonthsDuration):
        if settings.month_arithmetic == MonthArithmetic.FIXED_30_DAYS:
            return anchor + timedelta(days=duration.count * 30)
        # relativedelta clamps to month end (Jan 31 + 1 month = Feb 28)
        return anchor + relativedelta(months=duration.count)
    elif isinstance(duration, UntilDate):
        return duration.end_date
    else:
        assert_never(duration)


def active_until(medication: Medication, settings: Optional[ScheduleSettings] = None) -> Optional[date]:
    """Last active date, or None when unbounded or unknown."""
    anchor = medication.anchor_date
    if medication.duration is None or anchor is None:
        return None
    try:
        return window_end(medication.duration, anchor, settings)
    except (OverflowError, ValueError):
        return None


def is_active(
    medication: Medication,
    on: Union[date, datetime],
    settings: Optional[ScheduleSettings] = None,
    report: Optional[ScheduleReport] = None,
) -> bool:
    """True if the medication may produce doses on the given date."""
    day = as_date(on)
    duration = medication.duration

    if duration is None or isinstance(duration, (AsNeeded, Ongoing)):
        return True

    anchor = medication.anchor_date
    if anchor is None:
        logger.debug(f"{medication.name}: no anchor date, treating '{duration.display_text}' as unbounded")
        if report is not None:
            report.record_issue(ExpansionIssue(
                MISSING_ANCHOR,
                "No prescription or creation date; duration not enforced",
                medication.id, day
            ))
        return True

    try:
        end = window_end(duration, anchor, settings)
    except (OverflowError, ValueError) as e:
        logger.warning(f"{medication.name}: cannot compute end of '{duration.display_text}' from {anchor} ({e}); treating as active")
        if report is not None:
            report.record_issue(ExpansionIssue(
                UNRESOLVED_END_DATE,
                f"End date out of range: {e}",
                medication.id, day
            ))
        return True

    if end is None:
        return True

    return anchor <= day <= end
