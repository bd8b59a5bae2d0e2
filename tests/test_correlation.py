"""
Tests for the mood × academics correlation analyzer.
"""
from __future__ import annotations

from datetime import date, timedelta

import pytest

from app.schemas.student import AttendanceRecord, MarksRecord, WellBeingRecord
from app.services.correlation import (
    GENERIC_INSIGHT,
    analyze_correlations,
    build_insights,
    correlations_for,
    pearson_correlation,
)
from app.services.student_store import default_student_data

START = date(2024, 11, 18)


def _weeks(n: int) -> list[date]:
    return [START + timedelta(weeks=i) for i in range(n)]


def _wb(day: date, mood=3, stress=3, sleep=3, motivation=3) -> WellBeingRecord:
    return WellBeingRecord(date=day, mood=mood, stress=stress, sleep=sleep, motivation=motivation)


class TestPearson:
    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3, 4], [10, 20, 30, 40]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_single_point_is_zero(self):
        assert pearson_correlation([3], [70]) == 0.0

    def test_empty_is_zero(self):
        assert pearson_correlation([], []) == 0.0

    def test_unequal_lengths_is_zero(self):
        assert pearson_correlation([1, 2, 3], [1, 2]) == 0.0

    def test_constant_series_is_zero(self):
        assert pearson_correlation([3, 3, 3], [70, 80, 90]) == 0.0

    def test_result_within_bounds(self):
        r = pearson_correlation([1, 5, 2, 4, 3], [60, 62, 90, 70, 75])
        assert -1.0 <= r <= 1.0


class TestInsights:
    def test_positive_sleep_insight_comes_first(self):
        insights = build_insights(mood_attendance=0.5, sleep_attendance=0.8, stress_marks=0.4)
        assert [i.text for i in insights] == [
            "Weeks with better sleep had higher attendance.",
            "Better mood correlates with higher attendance.",
            "Lower stress weeks show better marks.",
        ]
        assert all(i.positive for i in insights)

    def test_negative_insights(self):
        insights = build_insights(mood_attendance=-0.9, sleep_attendance=-0.5, stress_marks=-0.5)
        assert [i.text for i in insights] == [
            "Sleep patterns may be affecting your attendance.",
            "High stress may be impacting your performance.",
        ]
        assert not any(i.positive for i in insights)

    def test_threshold_is_exclusive(self):
        insights = build_insights(0.3, 0.3, -0.3)
        assert len(insights) == 1
        assert insights[0].text == GENERIC_INSIGHT


class TestAnalyzeCorrelations:
    def test_series_are_aligned_by_date(self):
        days = _weeks(4)
        well_being = [_wb(d, sleep=s) for d, s in zip(days, [2, 3, 4, 5])]
        # no attendance for the second week
        attendance = [AttendanceRecord(date=d, percentage=p) for d, p in zip(days, [60, 70, 80, 90]) if d != days[1]]
        marks = [MarksRecord(date=d, average=70) for d in days]

        result = analyze_correlations(well_being, attendance, marks)
        assert result.sample_size == 3
        assert result.dates == [days[0], days[2], days[3]]
        assert result.sleep_attendance == pytest.approx(1.0)

    def test_window_keeps_most_recent_dates(self):
        days = _weeks(8)
        well_being = [_wb(d) for d in days]
        attendance = [AttendanceRecord(date=d, percentage=80) for d in days]
        marks = [MarksRecord(date=d, average=70) for d in days]

        result = analyze_correlations(well_being, attendance, marks, window=6)
        assert result.sample_size == 6
        assert result.dates == days[2:]

    def test_inverted_stress_against_marks(self):
        days = _weeks(4)
        well_being = [_wb(d, stress=s) for d, s in zip(days, [5, 4, 3, 2])]
        attendance = [AttendanceRecord(date=d, percentage=80) for d in days]
        marks = [MarksRecord(date=d, average=m) for d, m in zip(days, [50, 60, 70, 80])]

        result = analyze_correlations(well_being, attendance, marks)
        assert result.stress_marks == pytest.approx(1.0)
        assert any(i.text == "Lower stress weeks show better marks." for i in result.insights)

    def test_no_overlap_gives_generic_insight(self):
        result = analyze_correlations([_wb(START)], [], [])
        assert result.sample_size == 0
        assert result.mood_attendance == 0.0
        assert [i.text for i in result.insights] == [GENERIC_INSIGHT]

    def test_demo_data_uses_all_six_weeks(self):
        result = correlations_for(default_student_data("STU-corr"))
        assert result.sample_size == 6
        for r in (result.mood_attendance, result.sleep_attendance, result.stress_marks):
            assert -1.0 <= r <= 1.0
        assert result.insights
