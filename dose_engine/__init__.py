"""
Medication dose-recurrence engine.

Turns medication definitions into a time-bucketed schedule of doses:

    from dose_engine import generate_daily_schedule
    schedule = generate_daily_schedule(medications, date(2025, 9, 20))
    for slot, doses in schedule.items():
        ...
"""

from .engine import (
    generate_daily_schedule,
    generate_multi_day_schedule,
    next_upcoming_dose,
    flatten_schedule,
    count_doses,
    due_soon_doses,
)
from .duration import is_active, active_until
from .expander import expand_rule
from .meals import offset_minutes, build_meal_relation, resolve_meal_time
from .time_slots import classify_time_slot
from .settings import ScheduleSettings, MonthArithmetic, BiweeklyMode, DEFAULT_SETTINGS, DEFAULT_MEAL_TIMES
from .report import ScheduleReport, ExpansionIssue

__all__ = [
    # --- Schedule Operations ---
    "generate_daily_schedule",
    "generate_multi_day_schedule",
    "next_upcoming_dose",
    "flatten_schedule",
    "count_doses",
    "due_soon_doses",

    # --- Building Blocks ---
    "is_active",
    "active_until",
    "expand_rule",
    "offset_minutes",
    "build_meal_relation",
    "resolve_meal_time",
    "classify_time_slot",

    # --- Configuration & Diagnostics ---
    "ScheduleSettings",
    "MonthArithmetic",
    "BiweeklyMode",
    "DEFAULT_SETTINGS",
    "DEFAULT_MEAL_TIMES",
    "ScheduleReport",
    "ExpansionIssue",
]
