from datetime import date, datetime, time, timedelta

from dose_engine import (
    generate_daily_schedule,
    generate_multi_day_schedule,
    next_upcoming_dose,
    flatten_schedule,
    count_doses,
    due_soon_doses,
    ScheduleReport,
)
from models import (
    DailyRule,
    HourlyRule,
    WeeklyRule,
    MealBasedRule,
    TimeOfDay,
    Weekday,
    MealTime,
    DaysDuration,
    TimeSlot,
)
from generators import SampleMedicationFactory


def test_empty_input_gives_empty_schedule(day):
    assert generate_daily_schedule([], day) == {}


def test_twice_daily_lands_in_morning_and_evening(twice_daily, day):
    schedule = generate_daily_schedule([twice_daily], day)

    assert set(schedule) == {TimeSlot.MORNING, TimeSlot.EVENING}
    assert [d.scheduled_time for d in schedule[TimeSlot.MORNING]] == [datetime(2025, 9, 20, 8, 0)]
    assert [d.scheduled_time for d in schedule[TimeSlot.EVENING]] == [datetime(2025, 9, 20, 20, 0)]


def test_schedule_is_deterministic(sample_regimen, day):
    first = generate_daily_schedule(sample_regimen, day)
    second = generate_daily_schedule(sample_regimen, day)
    assert first == second


def test_inputs_are_not_mutated(sample_regimen, day):
    before = [m.model_dump() for m in sample_regimen]
    generate_multi_day_schedule(sample_regimen, day, 3)
    assert [m.model_dump() for m in sample_regimen] == before


def test_rules_are_additive(make_medication, day):
    medication = make_medication([
        DailyRule(times=[TimeOfDay.at(8, 0)]),
        HourlyRule(interval_hours=12, start_time=TimeOfDay.at(8, 0)),
        MealBasedRule(meal=MealTime.LUNCH),
    ])

    schedule = generate_daily_schedule([medication], day)

    assert count_doses(schedule) == 4
    assert len(schedule[TimeSlot.MORNING]) == 2


def test_buckets_are_sorted_and_consistent(sample_regimen, day):
    schedule = generate_daily_schedule(sample_regimen, day)

    for slot, doses in schedule.items():
        times = [d.scheduled_time for d in doses]
        assert times == sorted(times)
        assert all(d.time_slot == slot for d in doses)
        assert all(TimeSlot.for_hour(d.scheduled_time.hour) == slot for d in doses)


def test_slots_come_out_in_display_order(sample_regimen, day):
    schedule = generate_daily_schedule(sample_regimen, day)
    assert list(schedule) == [s for s in TimeSlot.ordered() if s in schedule]


def test_sample_regimen_schedule(sample_regimen, day):
    schedule = generate_daily_schedule(sample_regimen, day)

    assert count_doses(schedule) == 13
    assert [d.display_time for d in schedule[TimeSlot.MORNING]] == ["06:00", "08:00", "08:30", "09:30", "10:00"]
    assert [d.display_time for d in schedule[TimeSlot.MIDDAY]] == ["12:00", "12:45"]
    assert TimeSlot.AFTERNOON not in schedule
    assert [d.display_time for d in schedule[TimeSlot.EVENING]] == ["18:00", "18:00", "19:00", "19:30"]
    assert [d.display_time for d in schedule[TimeSlot.NIGHT]] == ["21:30", "22:00"]


def test_inactive_medication_is_skipped_and_reported(make_medication, twice_daily, day):
    expired = make_medication(
        [DailyRule(times=[TimeOfDay.at(9, 0)])],
        duration=DaysDuration(count=5),
        prescription_issued=datetime.combine(day - timedelta(days=10), time(9, 0)),
    )
    report = ScheduleReport()

    schedule = generate_daily_schedule([expired, twice_daily], day, report=report)

    assert all(d.medication is twice_daily for d in flatten_schedule(schedule))
    assert report.inactive[expired.id] == [day]
    assert report.get_statistics()["inactive_medications"] == 1


def test_defaults_to_today(twice_daily):
    today = date.today()
    schedule = generate_daily_schedule([twice_daily])

    days = {d.scheduled_time.date() for d in flatten_schedule(schedule)}
    assert len(days) == 1
    # The run may cross midnight
    assert days <= {today, today + timedelta(days=1)}


# --- Next Dose ---

def test_next_dose_skips_past_doses(twice_daily, clock):
    dose = next_upcoming_dose([twice_daily], clock(9, 0))
    assert dose is not None
    assert dose.scheduled_time == clock(20, 0)


def test_next_dose_is_strictly_after(twice_daily, clock):
    assert next_upcoming_dose([twice_daily], clock(8, 0)).scheduled_time == clock(20, 0)


def test_no_next_dose_after_last_of_day(twice_daily, clock):
    assert next_upcoming_dose([twice_daily], clock(21, 0)) is None
    assert next_upcoming_dose([twice_daily], clock(20, 0)) is None


def test_next_dose_across_medications(twice_daily, make_medication, clock):
    hourly = make_medication([HourlyRule(interval_hours=4, start_time=TimeOfDay.at(1, 0))])
    # Hourly: 01, 05, 09, 13, 17, 21
    assert next_upcoming_dose([twice_daily, hourly], clock(9, 30)).scheduled_time == clock(13, 0)
    assert next_upcoming_dose([twice_daily, hourly], clock(5, 0)).scheduled_time == clock(8, 0)


# --- Multi-Day ---

def test_multi_day_first_day_matches_daily(sample_regimen, day):
    for n in (1, 3, 7):
        multi = generate_multi_day_schedule(sample_regimen, day, n)
        assert multi[day] == generate_daily_schedule(sample_regimen, day)


def test_multi_day_keys_and_weekly_rule(make_medication, day):
    weekly = make_medication([WeeklyRule(weekday=Weekday.MONDAY, time=TimeOfDay.at(9, 0))])

    multi = generate_multi_day_schedule([weekly], day, 7)

    assert list(multi) == [day + timedelta(days=i) for i in range(7)]
    populated = [d for d, schedule in multi.items() if schedule]
    assert populated == [date(2025, 9, 22)]


def test_multi_day_respects_duration_window(make_medication, day):
    short_course = make_medication(
        [DailyRule(times=[TimeOfDay.at(8, 0)])],
        duration=DaysDuration(count=2),
        prescription_issued=datetime.combine(day, time(7, 0)),
    )

    multi = generate_multi_day_schedule([short_course], day, 5)

    assert [count_doses(s) for s in multi.values()] == [1, 1, 1, 0, 0]


def test_multi_day_with_no_days(twice_daily, day):
    assert generate_multi_day_schedule([twice_daily], day, 0) == {}


# --- Helpers & Report ---

def test_flatten_schedule_is_chronological(sample_regimen, day):
    doses = flatten_schedule(generate_daily_schedule(sample_regimen, day))
    assert len(doses) == 13
    assert doses[0].display_time == "06:00"
    assert doses[-1].display_time == "22:00"


def test_due_soon_doses(twice_daily, clock):
    schedule = generate_daily_schedule([twice_daily], clock(0, 0))

    assert [d.display_time for d in due_soon_doses(schedule, clock(7, 40))] == ["08:00"]
    assert due_soon_doses(schedule, clock(7, 0)) == []
    assert due_soon_doses(schedule, clock(8, 0)) == []


def test_report_statistics(sample_regimen, day):
    report = ScheduleReport()
    generate_daily_schedule(sample_regimen, day, report=report)

    stats = report.get_statistics()

    assert stats["total_doses"] == 13
    assert stats["slot_breakdown"] == {"morning": 5, "midday": 2, "evening": 4, "night": 2}
    assert stats["medications_scheduled"] == 8
    assert stats["issue_count"] == 0
    assert stats["date_range"] == (day, day)
    assert report.get_issue_report() == []


def test_issue_report_groups_by_medication(make_medication, day):
    broken = make_medication([DailyRule(times=[TimeOfDay(hour=8), TimeOfDay(minute=0), TimeOfDay.at(9, 0)])])
    report = ScheduleReport()

    schedule = generate_daily_schedule([broken], day, report=report)

    assert count_doses(schedule) == 1
    (entry,) = report.get_issue_report()
    assert entry["medication_id"] == broken.id
    assert entry["total_issues"] == 2
    assert entry["primary_issue"] == "MalformedTime"


def test_report_clear_resets_everything(sample_regimen, make_medication, day):
    broken = make_medication([DailyRule(times=[TimeOfDay(hour=8)])])
    report = ScheduleReport()
    generate_daily_schedule(sample_regimen + [broken], day, report=report)
    assert report.get_statistics()["issue_count"] == 1

    report.clear()

    stats = report.get_statistics()
    assert stats["total_doses"] == 0
    assert stats["slot_breakdown"] == {}
    assert stats["medications_scheduled"] == 0
    assert stats["issue_count"] == 0
    assert "date_range" not in stats
    assert report.get_issue_report() == []


def test_sample_regimen_is_reproducible(day):
    first = SampleMedicationFactory(reference_date=day).regimen()
    second = SampleMedicationFactory(reference_date=day).regimen()

    assert first == second
    assert len({m.id for m in first}) == len(first)
    assert generate_daily_schedule(first, day) == generate_daily_schedule(second, day)
