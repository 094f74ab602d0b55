"""
Data models package for the Dose Scheduler.

This package exports the two core pillars of the data architecture:
1. Input (Medication, RecurrenceRule, DurationWindow)
2. Output (ScheduledDose, TimeSlot, MealRelation)
"""

from .medication import (
    Medication,
    Weekday,
    MealTime,
    MealTiming,
    TimeOfDay,
    RecurrenceRule,
    DailyRule,
    HourlyRule,
    WeeklyRule,
    BiweeklyRule,
    MonthlyRule,
    MealBasedRule,
    DurationWindow,
    AsNeeded,
    Ongoing,
    DaysDuration,
    WeeksDuration,
    MonthsDuration,
    UntilDate,
)

from .schedule import (
    TimeSlot,
    MealRelation,
    ScheduledDose,
    DailySchedule,
)

__all__ = [
    # --- Input Models ---
    "Medication",
    "Weekday",
    "MealTime",
    "MealTiming",
    "TimeOfDay",

    # --- Recurrence Rules ---
    "RecurrenceRule",
    "DailyRule",
    "HourlyRule",
    "WeeklyRule",
    "BiweeklyRule",
    "MonthlyRule",
    "MealBasedRule",

    # --- Duration Windows ---
    "DurationWindow",
    "AsNeeded",
    "Ongoing",
    "DaysDuration",
    "WeeksDuration",
    "MonthsDuration",
    "UntilDate",

    # --- Output Models ---
    "TimeSlot",
    "MealRelation",
    "ScheduledDose",
    "DailySchedule",
]
