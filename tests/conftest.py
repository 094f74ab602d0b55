from datetime import date, datetime, time
from typing import List, Optional

import pytest

from models import Medication, Ongoing, TimeOfDay, DailyRule
from generators import SampleMedicationFactory

# A Saturday
REFERENCE_DATE = date(2025, 9, 20)


@pytest.fixture
def day() -> date:
    return REFERENCE_DATE


@pytest.fixture
def make_medication():
    """Factory for ad-hoc medications; ongoing and anchored a month back unless overridden."""
    counter = {"n": 0}

    def _make(rules: List, duration=Ongoing(), prescription_issued: Optional[datetime] = datetime(2025, 8, 20, 9, 0), **kwargs) -> Medication:
        counter["n"] += 1
        return Medication(
            id=kwargs.pop("id", f"med_test_{counter['n']}"),
            name=kwargs.pop("name", f"Test Medication {counter['n']}"),
            rules=rules,
            duration=duration,
            prescription_issued=prescription_issued,
            **kwargs,
        )

    return _make


@pytest.fixture
def twice_daily(make_medication) -> Medication:
    return make_medication([DailyRule(times=[TimeOfDay.at(8, 0), TimeOfDay.at(20, 0)])], name="Lisinopril")


@pytest.fixture
def sample_regimen(day) -> List[Medication]:
    return SampleMedicationFactory(reference_date=day).regimen()


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def clock(day):
    """clock(8, 30) -> datetime on the reference date."""
    def _clock(hour: int, minute: int = 0) -> datetime:
        return at(day, hour, minute)
    return _clock
