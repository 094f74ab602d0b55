"""
Dose Expansion.

Turns one recurrence rule into the concrete doses it produces on one calendar date.
Each rule variant has its own expansion function; expand_rule dispatches between them.

Malformed entries (a daily time without an hour, a weekly rule without a minute, ...)
are skipped one at a time, so a single bad entry never costs the rest of the
medication its doses.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import List, Optional, Union, assert_never

from models import (
    Medication,
    ScheduledDose,
    MealRelation,
    Weekday,
    TimeOfDay,
    RecurrenceRule,
    DailyRule,
    HourlyRule,
    WeeklyRule,
    BiweeklyRule,
    MonthlyRule,
    MealBasedRule,
)
from .settings import ScheduleSettings, BiweeklyMode, DEFAULT_SETTINGS
from .time_slots import classify_time_slot
from .meals import build_meal_relation, resolve_meal_time
from .duration import as_date
from .report import ScheduleReport, ExpansionIssue, MALFORMED_TIME, INVALID_INTERVAL

logger = logging.getLogger(__name__)


def expand_rule(
    medication: Medication,
    rule: RecurrenceRule,
    on: Union[date, datetime],
    settings: Optional[ScheduleSettings] = None,
    report: Optional[ScheduleReport] = None,
) -> List[ScheduledDose]:
    """
    All doses a single rule produces on the given date.
    A datetime's tzinfo is carried onto the produced doses.
    """
    settings = settings or DEFAULT_SETTINGS
    day = as_date(on)
    tz = on.tzinfo if isinstance(on, datetime) else None

    if isinstance(rule, DailyRule):
        return expand_daily(medication, rule, day, tz, report)
    elif isinstance(rule, HourlyRule):
        return expand_hourly(medication, rule, day, tz, report)
    elif isinstance(rule, WeeklyRule):
        return expand_weekly(medication, rule, day, tz, report)
    elif isinstance(rule, BiweeklyRule):
        return expand_biweekly(medication, rule, day, tz, settings, report)
    elif isinstance(rule, MonthlyRule):
        return expand_monthly(medication, rule, day, tz, report)
    elif isinstance(rule, MealBasedRule):
        return expand_meal_based(medication, rule, day, tz, settings)
    else:
        assert_never(rule)


def make_dose(medication: Medication, scheduled_time: datetime, meal_relation: Optional[MealRelation] = None) -> ScheduledDose:
    return ScheduledDose(
        medication=medication,
        scheduled_time=scheduled_time,
        time_slot=classify_time_slot(scheduled_time),
        meal_relation=meal_relation,
    )


def _skip_malformed(
    medication: Medication,
    rule_type: str,
    entry: TimeOfDay,
    day: date,
    report: Optional[ScheduleReport],
) -> None:
    logger.warning(f"{medication.name}: skipping {rule_type} dose with malformed time {entry}")
    if report is not None:
        report.record_issue(ExpansionIssue(
            MALFORMED_TIME,
            f"Time {entry} is incomplete or out of range",
            medication.id, day, rule_type
        ))


def _single_dose(
    medication: Medication,
    rule_type: str,
    entry: TimeOfDay,
    day: date,
    tz: Optional[tzinfo],
    report: Optional[ScheduleReport],
) -> List[ScheduledDose]:
    """One dose at entry on day, or none if entry is malformed."""
    clock = entry.as_time()
    if clock is None:
        _skip_malformed(medication, rule_type, entry, day, report)
        return []
    return [make_dose(medication, datetime.combine(day, clock, tzinfo=tz))]


# --- Daily ---

def expand_daily(
    medication: Medication,
    rule: DailyRule,
    day: date,
    tz: Optional[tzinfo] = None,
    report: Optional[ScheduleReport] = None,
) -> List[ScheduledDose]:
    doses = []
    for entry in rule.times:
        doses.extend(_single_dose(medication, rule.type, entry, day, tz, report))
    return doses


# --- Hourly ---

def expand_hourly(
    medication: Medication,
    rule: HourlyRule,
    day: date,
    tz: Optional[tzinfo] = None,
    report: Optional[ScheduleReport] = None,
) -> List[ScheduledDose]:
    """
    Every interval_hours from the start time until (excluding) next midnight.
    The walk restarts each day; it does not continue from yesterday's last dose.
    """
    if rule.interval_hours <= 0:
        logger.warning(f"{medication.name}: hourly interval {rule.interval_hours} is not positive, no doses produced")
        if report is not None:
            report.record_issue(ExpansionIssue(
                INVALID_INTERVAL,
                f"Interval of {rule.interval_hours} hours",
                medication.id, day, rule.type
            ))
        return []

    start = time(0, 0)
    if rule.start_time is not None:
        clock = rule.start_time.as_time()
        if clock is None:
            logger.warning(f"{medication.name}: hourly start time {rule.start_time} is malformed, starting at midnight")
            if report is not None:
                report.record_issue(ExpansionIssue(
                    MALFORMED_TIME,
                    f"Start time {rule.start_time} is incomplete or out of range; used midnight",
                    medication.id, day, rule.type
                ))
        else:
            start = clock

    current = datetime.combine(day, start, tzinfo=tz)
    end_of_day = datetime.combine(day + timedelta(days=1), time(0, 0), tzinfo=tz)
    step = timedelta(hours=rule.interval_hours)

    doses = []
    if tz is None:
        while current < end_of_day:
            doses.append(make_dose(medication, current))
            current += step
        return doses

    # Aware times step in UTC: a daylight-saving day has 23 or 25 hourly doses
    instant = current.astimezone(timezone.utc)
    end = end_of_day.astimezone(timezone.utc)
    while instant < end:
        doses.append(make_dose(medication, instant.astimezone(tz)))
        instant += step
    return doses


# --- Weekly / Biweekly ---

def expand_weekly(
    medication: Medication,
    rule: Union[WeeklyRule, BiweeklyRule],
    day: date,
    tz: Optional[tzinfo] = None,
    report: Optional[ScheduleReport] = None,
) -> List[ScheduledDose]:
    if Weekday.of(day) != rule.weekday:
        return []
    return _single_dose(medication, rule.type, rule.time, day, tz, report)


def week_start(day: date) -> date:
    """Sunday of the week containing day."""
    return day - timedelta(days=Weekday.of(day) - Weekday.SUNDAY)


def is_on_week(anchor: date, day: date) -> bool:
    """True if day falls an even number of weeks after (or before) the anchor's week."""
    weeks = (week_start(day) - week_start(anchor)).days // 7
    return weeks % 2 == 0


def expand_biweekly(
    medication: Medication,
    rule: BiweeklyRule,
    day: date,
    tz: Optional[tzinfo] = None,
    settings: Optional[ScheduleSettings] = None,
    report: Optional[ScheduleReport] = None,
) -> List[ScheduledDose]:
    """
    In WEEKLY_EQUIVALENT mode (the default) this matches every week.
    ALTERNATE_WEEKS counts weeks from the medication's anchor date; without an
    anchor there is no reference week, so it behaves like WEEKLY_EQUIVALENT.
    """
    settings = settings or DEFAULT_SETTINGS

    if settings.biweekly_mode == BiweeklyMode.ALTERNATE_WEEKS:
        anchor = medication.anchor_date
        if anchor is not None and not is_on_week(anchor, day):
            return []

    return expand_weekly(medication, rule, day, tz, report)


# --- Monthly ---

def expand_monthly(
    medication: Medication,
    rule: MonthlyRule,
    day: date,
    tz: Optional[tzinfo] = None,
    report: Optional[ScheduleReport] = None,
) -> List[ScheduledDose]:
    """Months shorter than day_of_month simply have no dose."""
    if day.day != rule.day_of_month:
        return []
    return _single_dose(medication, rule.type, rule.time, day, tz, report)


# --- Meal-Based ---

def expand_meal_based(
    medication: Medication,
    rule: MealBasedRule,
    day: date,
    tz: Optional[tzinfo] = None,
    settings: Optional[ScheduleSettings] = None,
) -> List[ScheduledDose]:
    settings = settings or DEFAULT_SETTINGS
    relation = build_meal_relation(rule.meal, rule.timing)
    scheduled = resolve_meal_time(rule.meal, rule.timing, settings.meal_time_for(rule.meal), day, tz)
    return [make_dose(medication, scheduled, relation)]
