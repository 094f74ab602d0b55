"""
Schedule data models for the Dose Scheduler.

This module defines the 'Output' of the dose engine:
Concrete dosing events, bucketed into the five time slots of the day.
"""

from typing import Dict, List, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime, timedelta

from .medication import Medication, MealTime, MealTiming


class TimeSlot(str, Enum):
    """Fixed, non-overlapping buckets of the day used to group doses."""
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def hour_range(self) -> Tuple[int, int]:
        """(start, end) hours. Night wraps past midnight, so its start is greater than its end."""
        return _HOUR_RANGES[self]

    def contains_hour(self, hour: int) -> bool:
        start, end = self.hour_range
        if start < end:
            return start <= hour < end
        return hour >= start or hour < end

    @classmethod
    def for_hour(cls, hour: int) -> "TimeSlot":
        if 6 <= hour < 11:
            return cls.MORNING
        if 11 <= hour < 14:
            return cls.MIDDAY
        if 14 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 21:
            return cls.EVENING
        return cls.NIGHT

    @classmethod
    def ordered(cls) -> List["TimeSlot"]:
        """Display order of a day's timeline."""
        return [cls.MORNING, cls.MIDDAY, cls.AFTERNOON, cls.EVENING, cls.NIGHT]


_HOUR_RANGES: Dict[TimeSlot, Tuple[int, int]] = {
    TimeSlot.MORNING: (6, 11),
    TimeSlot.MIDDAY: (11, 14),
    TimeSlot.AFTERNOON: (14, 17),
    TimeSlot.EVENING: (17, 21),
    TimeSlot.NIGHT: (21, 6),
}


class MealRelation(BaseModel):
    """How a meal-based dose relates to its meal."""
    model_config = ConfigDict(frozen=True)

    meal: MealTime
    timing: Optional[MealTiming] = Field(default=None, description="None means 'with' the meal")
    offset_minutes: int = Field(description="Minutes added to the meal's anchor time")

    @property
    def display_text(self) -> str:
        if self.offset_minutes < 0:
            prefix = "Before"
        elif self.offset_minutes > 0:
            prefix = "After"
        else:
            prefix = "With"
        return f"{prefix} {self.meal.display_name}"


class ScheduledDose(BaseModel):
    """
    One concrete, timestamped instance of a medication being due.
    Holds a reference to the source Medication (not a copy) for display purposes.
    """

    # --- Core Scheduling Data ---
    medication: Medication = Field(description="The medication this dose belongs to")
    scheduled_time: datetime = Field(description="When the dose is due")
    time_slot: TimeSlot = Field(description="Bucket of the day, derived from scheduled_time")

    # --- Meal Context ---
    meal_relation: Optional[MealRelation] = Field(
        default=None,
        description="Populated only for meal-based rules"
    )

    model_config = ConfigDict(frozen=True)

    def __hash__(self) -> int:
        return hash((self.medication.id, self.scheduled_time, self.time_slot))

    @property
    def display_time(self) -> str:
        return self.scheduled_time.strftime("%H:%M")

    def time_until_due(self, now: datetime) -> timedelta:
        """Negative if the dose is already overdue."""
        return self.scheduled_time - now

    def is_due_soon(self, now: datetime, within_minutes: int = 30) -> bool:
        remaining = self.time_until_due(now)
        return timedelta(0) < remaining <= timedelta(minutes=within_minutes)

    def is_overdue(self, now: datetime) -> bool:
        return self.scheduled_time < now


# Output of a single day: only populated slots appear as keys
DailySchedule = Dict[TimeSlot, List[ScheduledDose]]
