"""
Medication and Recurrence data models for the Dose Scheduler.

This module defines the 'Input' of the dose engine:
1. Recurrence Rules (When should a dose be taken?)
2. Duration Windows (For how long is the medication active?)
3. The Medication record itself (owned by the caller, never mutated)
"""

from enum import Enum, IntEnum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime, time


class Weekday(IntEnum):
    """Day of the week. Numbering starts on Sunday (1) and ends on Saturday (7)."""
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Weekday of a calendar date (isoweekday is Monday=1 .. Sunday=7)."""
        return cls(day.isoweekday() % 7 + 1)

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class MealTime(str, Enum):
    """Meals a dose can be anchored to."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    BEDTIME = "bedtime"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class MealTiming(str, Enum):
    """Whether a meal-based dose is taken before or after the meal."""
    BEFORE = "before"
    AFTER = "after"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class TimeOfDay(BaseModel):
    """
    A clock reading that may be partially filled in.
    Records come from parsed prescriptions, so hour or minute can be missing.
    """
    hour: Optional[int] = Field(default=None, description="0-23")
    minute: Optional[int] = Field(default=None, description="0-59")

    def as_time(self) -> Optional[time]:
        """Concrete time, or None when a component is missing or out of range."""
        if self.hour is None or self.minute is None:
            return None
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59):
            return None
        return time(self.hour, self.minute)

    @classmethod
    def at(cls, hour: int, minute: int = 0) -> "TimeOfDay":
        return cls(hour=hour, minute=minute)

    def __str__(self) -> str:
        if self.hour is None or self.minute is None:
            return f"{self.hour}:{self.minute}"
        return f"{self.hour:02d}:{self.minute:02d}"


# --- Recurrence Rules ---

class DailyRule(BaseModel):
    """Every day at each of the listed times."""
    type: Literal["daily"] = "daily"
    times: List[TimeOfDay] = Field(default_factory=list, description="Clock times, e.g. 08:00 and 20:00")

    @property
    def display_text(self) -> str:
        if len(self.times) == 1:
            return "Once daily"
        return f"{len(self.times)} times daily"


class HourlyRule(BaseModel):
    """Every N hours, starting at start_time (or midnight) each day."""
    type: Literal["hourly"] = "hourly"
    interval_hours: int = Field(ge=1, description="Hours between doses")
    start_time: Optional[TimeOfDay] = Field(default=None, description="First dose of the day; midnight if None")

    @property
    def display_text(self) -> str:
        return f"Every {self.interval_hours} hour{'' if self.interval_hours == 1 else 's'}"


class WeeklyRule(BaseModel):
    """Once a week on the given weekday."""
    type: Literal["weekly"] = "weekly"
    weekday: Weekday
    time: TimeOfDay

    @property
    def display_text(self) -> str:
        return "Weekly"


class BiweeklyRule(BaseModel):
    """Every other week on the given weekday."""
    type: Literal["biweekly"] = "biweekly"
    weekday: Weekday
    time: TimeOfDay

    @property
    def display_text(self) -> str:
        return "Every 2 weeks"


class MonthlyRule(BaseModel):
    """Once a month on the given day of the month."""
    type: Literal["monthly"] = "monthly"
    day_of_month: int = Field(ge=1, le=31)
    time: TimeOfDay

    @property
    def display_text(self) -> str:
        return "Monthly"


class MealBasedRule(BaseModel):
    """Once a day, relative to a meal."""
    type: Literal["meal_based"] = "meal_based"
    meal: MealTime
    timing: Optional[MealTiming] = Field(default=None, description="None means 'with' the meal")

    @property
    def display_text(self) -> str:
        if self.timing is None:
            return f"With {self.meal.display_name}"
        return f"{self.timing.display_name} {self.meal.display_name}"


RecurrenceRule = Annotated[
    Union[DailyRule, HourlyRule, WeeklyRule, BiweeklyRule, MonthlyRule, MealBasedRule],
    Field(discriminator="type"),
]


# --- Duration Windows ---

class AsNeeded(BaseModel):
    type: Literal["as_needed"] = "as_needed"

    @property
    def total_days(self) -> Optional[int]:
        return None

    @property
    def display_text(self) -> str:
        return "As needed"


class Ongoing(BaseModel):
    """Long-term medication with no end date."""
    type: Literal["ongoing"] = "ongoing"

    @property
    def total_days(self) -> Optional[int]:
        return None

    @property
    def display_text(self) -> str:
        return "Ongoing"


class DaysDuration(BaseModel):
    type: Literal["days"] = "days"
    count: int = Field(ge=0)

    @property
    def total_days(self) -> Optional[int]:
        return self.count

    @property
    def display_text(self) -> str:
        return f"{self.count} day{'' if self.count == 1 else 's'}"


class WeeksDuration(BaseModel):
    type: Literal["weeks"] = "weeks"
    count: int = Field(ge=0)

    @property
    def total_days(self) -> Optional[int]:
        return self.count * 7

    @property
    def display_text(self) -> str:
        return f"{self.count} week{'' if self.count == 1 else 's'}"


class MonthsDuration(BaseModel):
    type: Literal["months"] = "months"
    count: int = Field(ge=0)

    @property
    def total_days(self) -> Optional[int]:
        # Approximate
        return self.count * 30

    @property
    def display_text(self) -> str:
        return f"{self.count} month{'' if self.count == 1 else 's'}"


class UntilDate(BaseModel):
    """Active until a fixed date (typically the next follow-up appointment)."""
    type: Literal["until_date"] = "until_date"
    end_date: date

    @property
    def total_days(self) -> Optional[int]:
        return None

    @property
    def display_text(self) -> str:
        return f"Until {self.end_date.strftime('%b %d, %Y')}"


DurationWindow = Annotated[
    Union[AsNeeded, Ongoing, DaysDuration, WeeksDuration, MonthsDuration, UntilDate],
    Field(discriminator="type"),
]


class Medication(BaseModel):
    """
    A medication as handed over by the persistence layer.
    The engine only reads it; dosage and instructions are passed through untouched.
    """

    # --- Core Identity ---
    id: str = Field(description="Unique identifier for the medication")
    name: str = Field(description="Human-readable name")

    # --- Timing ---
    rules: List[RecurrenceRule] = Field(
        default_factory=list,
        description="Independent recurrence rules; every rule contributes its own doses"
    )
    duration: Optional[DurationWindow] = Field(
        default=None,
        description="Active window; None means always active"
    )

    # --- Anchors ---
    prescription_issued: Optional[Union[datetime, date]] = Field(
        default=None,
        description="Issue date of the prescription this medication belongs to"
    )
    created_at: Optional[Union[datetime, date]] = Field(
        default=None,
        description="When the record was created"
    )

    # --- Pass-through Metadata ---
    dosage: Optional[str] = Field(default=None, description="e.g. '500mg'")
    instructions: Optional[str] = Field(default=None, description="Free-text instructions")

    @property
    def anchor_date(self) -> Optional[date]:
        """Start of the duration window: prescription date, else creation date."""
        anchor = self.prescription_issued if self.prescription_issued is not None else self.created_at
        if anchor is None:
            return None
        if isinstance(anchor, datetime):
            return anchor.date()
        return anchor

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "med_metformin_01",
            "name": "Metformin",
            "rules": [
                {"type": "meal_based", "meal": "breakfast", "timing": "after"},
                {"type": "meal_based", "meal": "dinner", "timing": "after"}
            ],
            "duration": {"type": "months", "count": 3},
            "prescription_issued": "2025-09-01T10:00:00",
            "dosage": "500mg",
            "instructions": "Take with water"
        }
    })
