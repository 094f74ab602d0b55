"""
Engine configuration.

Every public operation takes an optional ScheduleSettings; omitting it means
DEFAULT_SETTINGS. Meal anchor times belong to the caller, the table below is
only the fallback the app ships with.
"""

from enum import Enum
from datetime import time
from typing import Dict
from pydantic import BaseModel, Field, ConfigDict

from models import MealTime


DEFAULT_MEAL_TIMES: Dict[MealTime, time] = {
    MealTime.BREAKFAST: time(8, 0),
    MealTime.LUNCH: time(13, 0),
    MealTime.DINNER: time(19, 0),
    MealTime.BEDTIME: time(22, 0),
}


class MonthArithmetic(str, Enum):
    """How a Months(n) duration window is turned into an end date."""
    CALENDAR = "calendar"            # anchor + n calendar months, clamped to month end
    FIXED_30_DAYS = "fixed_30_days"  # anchor + n * 30 days


class BiweeklyMode(str, Enum):
    """How Biweekly rules pick their weeks."""
    WEEKLY_EQUIVALENT = "weekly_equivalent"  # every matching weekday, same as Weekly
    ALTERNATE_WEEKS = "alternate_weeks"      # every other week, counted from the anchor date


class ScheduleSettings(BaseModel):
    """Caller-tunable knobs of the dose engine."""
    model_config = ConfigDict(frozen=True)

    meal_times: Dict[MealTime, time] = Field(
        default_factory=lambda: dict(DEFAULT_MEAL_TIMES),
        description="Anchor clock time of each meal"
    )
    fallback_meal_time: time = Field(
        default=time(8, 0),
        description="Used for a meal missing from meal_times"
    )
    month_arithmetic: MonthArithmetic = Field(default=MonthArithmetic.CALENDAR)
    biweekly_mode: BiweeklyMode = Field(default=BiweeklyMode.WEEKLY_EQUIVALENT)
    due_soon_minutes: int = Field(default=30, ge=0, description="Window used by due_soon_doses")

    def meal_time_for(self, meal: MealTime) -> time:
        return self.meal_times.get(meal, self.fallback_meal_time)


DEFAULT_SETTINGS = ScheduleSettings()
