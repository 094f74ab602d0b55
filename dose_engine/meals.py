"""
Meal-relative timing.

A meal-based dose is due at the meal's anchor time shifted by a fixed offset:
15 minutes before, 30 minutes after, or right with the meal.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from models import MealRelation, MealTime, MealTiming

BEFORE_MEAL_OFFSET_MINUTES = -15
AFTER_MEAL_OFFSET_MINUTES = 30
WITH_MEAL_OFFSET_MINUTES = 0


def offset_minutes(timing: Optional[MealTiming]) -> int:
    if timing == MealTiming.BEFORE:
        return BEFORE_MEAL_OFFSET_MINUTES
    if timing == MealTiming.AFTER:
        return AFTER_MEAL_OFFSET_MINUTES
    return WITH_MEAL_OFFSET_MINUTES


def build_meal_relation(meal: MealTime, timing: Optional[MealTiming]) -> MealRelation:
    return MealRelation(meal=meal, timing=timing, offset_minutes=offset_minutes(timing))


def resolve_meal_time(
    meal: MealTime,
    timing: Optional[MealTiming],
    anchor_time: time,
    reference_date: date,
    tz: Optional[tzinfo] = None,
) -> datetime:
    """
    Absolute due time of a meal-based dose on reference_date.
    The offset is applied after combining, so a dose can land on the neighbouring day
    (e.g. 15 minutes before a 00:10 snack).
    """
    anchor = datetime.combine(reference_date, anchor_time, tzinfo=tz)
    return anchor + timedelta(minutes=offset_minutes(timing))
