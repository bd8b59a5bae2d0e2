"""
Mood × Academics correlation.

Pearson coefficients between recent well-being scales and academic
signals, plus insight strings for the dashboard:

  mood ↔ attendance
  sleep ↔ attendance
  inverted stress (5 - stress) ↔ marks

The three series are joined on their date before slicing the window, so a
missing check-in or a missing marks entry drops that date instead of
shifting every later pair by one.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from app.schemas.student import AttendanceRecord, MarksRecord, StudentData, WellBeingRecord

DEFAULT_WINDOW = 6
INSIGHT_THRESHOLD = 0.3

GENERIC_INSIGHT = "Keep tracking to see patterns between mood and academics!"


@dataclass
class Insight:
    text: str
    positive: bool


@dataclass
class CorrelationResult:
    mood_attendance: float
    sleep_attendance: float
    stress_marks: float
    sample_size: int
    dates: list[date] = field(default_factory=list)
    insights: list[Insight] = field(default_factory=list)


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    r = (Σxy − ΣxΣy/n) / sqrt((Σx² − (Σx)²/n)(Σy² − (Σy)²/n))

    0.0 when the lengths differ, n < 2, or either series has no variance.
    """
    if len(xs) != len(ys) or len(xs) < 2:
        return 0.0

    n = len(xs)
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_x_sq = sum(x * x for x in xs)
    sum_y_sq = sum(y * y for y in ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))

    num = sum_xy - (sum_x * sum_y) / n
    den_sq = (sum_x_sq - sum_x ** 2 / n) * (sum_y_sq - sum_y ** 2 / n)
    if den_sq <= 0:
        return 0.0
    return num / math.sqrt(den_sq)


def build_insights(
    mood_attendance: float,
    sleep_attendance: float,
    stress_marks: float,
) -> list[Insight]:
    insights: list[Insight] = []

    if sleep_attendance > INSIGHT_THRESHOLD:
        insights.append(Insight("Weeks with better sleep had higher attendance.", True))
    elif sleep_attendance < -INSIGHT_THRESHOLD:
        insights.append(Insight("Sleep patterns may be affecting your attendance.", False))

    if mood_attendance > INSIGHT_THRESHOLD:
        insights.append(Insight("Better mood correlates with higher attendance.", True))

    if stress_marks > INSIGHT_THRESHOLD:
        insights.append(Insight("Lower stress weeks show better marks.", True))
    elif stress_marks < -INSIGHT_THRESHOLD:
        insights.append(Insight("High stress may be impacting your performance.", False))

    if not insights:
        insights.append(Insight(GENERIC_INSIGHT, True))
    return insights


def analyze_correlations(
    well_being: Sequence[WellBeingRecord],
    attendance: Sequence[AttendanceRecord],
    marks: Sequence[MarksRecord],
    window: int = DEFAULT_WINDOW,
) -> CorrelationResult:
    attendance_by_date = {r.date: r.percentage for r in attendance}
    marks_by_date = {r.date: r.average for r in marks}

    aligned = sorted(
        (w for w in well_being if w.date in attendance_by_date and w.date in marks_by_date),
        key=lambda w: w.date,
    )[-window:]

    moods = [w.mood for w in aligned]
    sleeps = [w.sleep for w in aligned]
    calmness = [5 - w.stress for w in aligned]
    attendance_values = [attendance_by_date[w.date] for w in aligned]
    marks_values = [marks_by_date[w.date] for w in aligned]

    mood_attendance = pearson_correlation(moods, attendance_values)
    sleep_attendance = pearson_correlation(sleeps, attendance_values)
    stress_marks = pearson_correlation(calmness, marks_values)

    return CorrelationResult(
        mood_attendance=mood_attendance,
        sleep_attendance=sleep_attendance,
        stress_marks=stress_marks,
        sample_size=len(aligned),
        dates=[w.date for w in aligned],
        insights=build_insights(mood_attendance, sleep_attendance, stress_marks),
    )


def correlations_for(data: StudentData, window: int = DEFAULT_WINDOW) -> CorrelationResult:
    return analyze_correlations(data.well_being, data.attendance, data.marks, window)
