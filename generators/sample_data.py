"""
Sample medication generator for the Dose Scheduler.
Provides a realistic regimen covering every recurrence rule and duration variant,
used for demos and as test fixtures.
"""

import itertools
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from models import (
    Medication,
    DailyRule,
    HourlyRule,
    WeeklyRule,
    BiweeklyRule,
    MonthlyRule,
    MealBasedRule,
    TimeOfDay,
    Weekday,
    MealTime,
    MealTiming,
    Ongoing,
    AsNeeded,
    DaysDuration,
    WeeksDuration,
    MonthsDuration,
)

logger = logging.getLogger(__name__)


class SampleMedicationFactory:
    """
    Builds sample medications anchored relative to a reference date,
    so they are active on that date regardless of when the factory runs.
    """

    def __init__(self, reference_date: Optional[date] = None):
        self.reference_date = reference_date or date.today()
        # Prescription issued a week before the reference date
        self.issued = datetime.combine(self.reference_date - timedelta(days=7), time(10, 0))
        self._sequence = itertools.count(1)

    def _new_id(self, prefix: str) -> str:
        """Sequential within one factory."""
        return f"{prefix}_{next(self._sequence):03d}"

    def simple(self) -> Medication:
        """Once daily in the morning."""
        return Medication(
            id=self._new_id("med_simple"),
            name="Vitamin D3",
            rules=[DailyRule(times=[TimeOfDay.at(8, 0)])],
            duration=Ongoing(),
            prescription_issued=self.issued,
            dosage="1000 IU",
        )

    def complex(self) -> Medication:
        """Twice daily plus a meal-based dose."""
        return Medication(
            id=self._new_id("med_complex"),
            name="Amoxicillin",
            rules=[
                DailyRule(times=[TimeOfDay.at(9, 30), TimeOfDay.at(21, 30)]),
                MealBasedRule(meal=MealTime.LUNCH, timing=MealTiming.BEFORE),
            ],
            duration=DaysDuration(count=10),
            prescription_issued=self.issued,
            dosage="500mg",
            instructions="Complete the full course",
        )

    def hourly(self) -> Medication:
        return Medication(
            id=self._new_id("med_hourly"),
            name="Ibuprofen",
            rules=[HourlyRule(interval_hours=6, start_time=TimeOfDay.at(6, 0))],
            duration=WeeksDuration(count=2),
            prescription_issued=self.issued,
            dosage="400mg",
            instructions="Take with food",
        )

    def weekly(self) -> Medication:
        """Weekly on the reference date's weekday."""
        return Medication(
            id=self._new_id("med_weekly"),
            name="Methotrexate",
            rules=[WeeklyRule(weekday=Weekday.of(self.reference_date), time=TimeOfDay.at(18, 0))],
            duration=MonthsDuration(count=3),
            prescription_issued=self.issued,
            dosage="15mg",
        )

    def biweekly(self) -> Medication:
        return Medication(
            id=self._new_id("med_biweekly"),
            name="Adalimumab",
            rules=[BiweeklyRule(weekday=Weekday.of(self.reference_date), time=TimeOfDay.at(19, 0))],
            duration=MonthsDuration(count=6),
            prescription_issued=self.issued,
            dosage="40mg",
        )

    def monthly(self) -> Medication:
        """Monthly on the reference date's day of the month."""
        return Medication(
            id=self._new_id("med_monthly"),
            name="Vitamin B12",
            rules=[MonthlyRule(day_of_month=self.reference_date.day, time=TimeOfDay.at(10, 0))],
            duration=Ongoing(),
            prescription_issued=self.issued,
            dosage="1000mcg",
        )

    def meal_based(self) -> Medication:
        return Medication(
            id=self._new_id("med_meal"),
            name="Metformin",
            rules=[
                MealBasedRule(meal=MealTime.BREAKFAST, timing=MealTiming.AFTER),
                MealBasedRule(meal=MealTime.DINNER, timing=MealTiming.AFTER),
            ],
            duration=Ongoing(),
            prescription_issued=self.issued,
            dosage="500mg",
        )

    def as_needed(self) -> Medication:
        return Medication(
            id=self._new_id("med_prn"),
            name="Melatonin",
            rules=[MealBasedRule(meal=MealTime.BEDTIME)],
            duration=AsNeeded(),
            dosage="3mg",
        )

    def regimen(self) -> List[Medication]:
        """One of everything."""
        medications = [
            self.simple(),
            self.complex(),
            self.hourly(),
            self.weekly(),
            self.biweekly(),
            self.monthly(),
            self.meal_based(),
            self.as_needed(),
        ]
        logger.info(f"Generated {len(medications)} sample medications for {self.reference_date}")
        return medications
