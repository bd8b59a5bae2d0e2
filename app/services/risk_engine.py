"""
Risk Engine: categorical risk levels and the user-facing risk message.

Risk Level (student)
--------------------
Independent threshold ladders add up to an integer risk score:

  attendance   < 65 → +3   < 75 → +2   < 85 → +1
  marks        < 50 → +3   < 60 → +2   < 70 → +1
  well-being   avg(mood, sleep, motivation) < 2 → +2, < 3 → +1
               stress > 4 → +2, stress > 3 → +1      (only if a record exists)

  score >= 5 → high,  score >= 3 → medium,  else low

Subject Risk
------------
  attendance < 65 → +2, < 75 → +1
  marks      < 50 → +2, < 60 → +1
  assignments_done < total_assignments → +1

  score >= 3 → high,  score >= 2 → medium,  else low

Pure functions: no DB, no HTTP.
"""
from __future__ import annotations

from typing import Optional, Sequence

from app.schemas.student import (
    Assignment,
    RiskLevel,
    StudentData,
    SubjectData,
    WellBeingScores,
)

# Thresholds
LOW_ATTENDANCE_THRESHOLD = 75


def _attendance_points(attendance: float) -> int:
    if attendance < 65:
        return 3
    if attendance < 75:
        return 2
    if attendance < 85:
        return 1
    return 0


def _marks_points(marks: float) -> int:
    if marks < 50:
        return 3
    if marks < 60:
        return 2
    if marks < 70:
        return 1
    return 0


def _wellbeing_points(record: WellBeingScores) -> int:
    points = 0
    avg = (record.mood + record.sleep + record.motivation) / 3
    if avg < 2:
        points += 2
    elif avg < 3:
        points += 1

    if record.stress > 4:
        points += 2
    elif record.stress > 3:
        points += 1
    return points


def risk_score(
    attendance: Optional[float],
    marks: Optional[float],
    wellbeing: Optional[WellBeingScores] = None,
) -> int:
    """Weighted score behind calculate_risk_level. Missing attendance/marks count as 0."""
    score = _attendance_points(attendance or 0)
    score += _marks_points(marks or 0)
    if wellbeing is not None:
        score += _wellbeing_points(wellbeing)
    return score


def calculate_risk_level(
    attendance: Optional[float],
    marks: Optional[float],
    wellbeing: Optional[WellBeingScores] = None,
) -> RiskLevel:
    score = risk_score(attendance, marks, wellbeing)
    if score >= 5:
        return RiskLevel.high
    if score >= 3:
        return RiskLevel.medium
    return RiskLevel.low


def risk_level_for(data: StudentData) -> RiskLevel:
    """Risk level from the latest attendance, marks and well-being records."""
    latest_attendance = data.latest_attendance()
    latest_marks = data.latest_marks()
    return calculate_risk_level(
        latest_attendance.percentage if latest_attendance else None,
        latest_marks.average if latest_marks else None,
        data.latest_wellbeing(),
    )


def get_subject_risk(subject: SubjectData) -> RiskLevel:
    score = 0
    if subject.attendance < 65:
        score += 2
    elif subject.attendance < 75:
        score += 1

    if subject.internal_marks < 50:
        score += 2
    elif subject.internal_marks < 60:
        score += 1

    if subject.assignments_done < subject.total_assignments:
        score += 1

    if score >= 3:
        return RiskLevel.high
    if score >= 2:
        return RiskLevel.medium
    return RiskLevel.low


def get_risk_message(
    level: RiskLevel,
    subjects: Sequence[SubjectData],
    assignments: Sequence[Assignment],
) -> str:
    if level == RiskLevel.low:
        return "Great progress! Keep up the excellent work and maintain your momentum!"
    if level == RiskLevel.high:
        return (
            "We're here to help! Let's work together to get back on track. "
            "Reach out to your mentor."
        )

    pending = sum(1 for a in assignments if not a.completed)
    pending_text = f"{pending} pending assignment{'s' if pending != 1 else ''}."
    low_attendance = [s.name for s in subjects if s.attendance < LOW_ATTENDANCE_THRESHOLD]
    if low_attendance:
        return (
            f"Medium risk: Attendance slightly low in {', '.join(low_attendance)}. "
            f"{pending_text} You've got this!"
        )
    return (
        f"Medium risk: Some areas need attention. {pending_text} "
        "Small steps lead to big improvements!"
    )
