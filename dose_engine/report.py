"""
Schedule Diagnostics.

The engine never raises on bad medication data; it skips the offending dose and
carries on. This module lets a caller see what was skipped and why:
1. Produced doses per slot and per medication.
2. Medications that were outside their duration window.
3. Issues (malformed times, invalid intervals, fail-open fallbacks).

A ScheduleReport is created and owned by the caller and passed into a single call,
so the engine itself stays stateless.
"""

from datetime import date as date_type
from typing import List, Dict, Any, Optional
from collections import defaultdict
from dataclasses import dataclass

from models import Medication, ScheduledDose, TimeSlot


# Issue types
MALFORMED_TIME = "MalformedTime"
INVALID_INTERVAL = "InvalidInterval"
MISSING_ANCHOR = "MissingAnchor"
UNRESOLVED_END_DATE = "UnresolvedEndDate"


@dataclass
class ExpansionIssue:
    """Detailed reason a dose was skipped or a check fell back to 'active'."""
    issue_type: str  # e.g., "MalformedTime", "InvalidInterval"
    reason: str
    medication_id: str
    date: date_type
    rule_type: Optional[str] = None


class ScheduleReport:
    """
    Collects what happened while generating one or more daily schedules.
    """

    def __init__(self):
        self.doses: List[ScheduledDose] = []
        self.slot_counts: Dict[TimeSlot, int] = defaultdict(int)
        self.medication_doses: Dict[str, int] = defaultdict(int)

        # Medication ID -> dates on which it was outside its duration window
        self.inactive: Dict[str, List[date_type]] = defaultdict(list)

        self.issues: List[ExpansionIssue] = []

    def add_dose(self, dose: ScheduledDose) -> None:
        self.doses.append(dose)
        self.slot_counts[dose.time_slot] += 1
        self.medication_doses[dose.medication.id] += 1

    def record_inactive(self, medication: Medication, on: date_type) -> None:
        self.inactive[medication.id].append(on)

    def record_issue(self, issue: ExpansionIssue) -> None:
        self.issues.append(issue)

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        """Summary counts for logging or a debug panel."""
        issue_counts = defaultdict(int)
        for issue in self.issues:
            issue_counts[issue.issue_type] += 1

        stats: Dict[str, Any] = {
            "total_doses": len(self.doses),
            "slot_breakdown": {slot.value: self.slot_counts[slot] for slot in TimeSlot.ordered() if self.slot_counts[slot]},
            "medications_scheduled": len(self.medication_doses),
            "inactive_medications": len(self.inactive),
            "issue_count": len(self.issues),
            "issue_breakdown": dict(issue_counts),
        }

        if self.doses:
            dates = [d.scheduled_time.date() for d in self.doses]
            stats["date_range"] = (min(dates), max(dates))

        return stats

    def get_issue_report(self) -> List[Dict]:
        """
        One entry per medication that had issues, most affected first.
        """
        grouped: Dict[str, List[ExpansionIssue]] = defaultdict(list)
        for issue in self.issues:
            grouped[issue.medication_id].append(issue)

        report = []
        for medication_id, issues in grouped.items():
            breakdown = defaultdict(int)
            for issue in issues:
                breakdown[issue.issue_type] += 1

            report.append({
                "medication_id": medication_id,
                "total_issues": len(issues),
                "primary_issue": max(breakdown, key=breakdown.get),
                "issue_breakdown": dict(breakdown),
                "latest_reason": issues[-1].reason,
            })

        report.sort(key=lambda x: x["total_issues"], reverse=True)
        return report

    def clear(self) -> None:
        self.doses.clear()
        self.slot_counts.clear()
        self.medication_doses.clear()
        self.inactive.clear()
        self.issues.clear()
