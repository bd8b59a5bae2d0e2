"""
Typed row schemas for the student_analytics dataset.

One schema per logical table; rows are validated before they are written.

POST /analytics/{table}                  → InsertRowsRequest → InsertRowsResponse
GET  /analytics/{table}                  → list of rows
GET  /analytics/students/{id}/features   → StudentFeaturesResponse
"""
from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class AnalyticsRowBase(BaseModel):
    student_id: str = Field(min_length=1, max_length=64)


class AttendanceHistoryRow(AnalyticsRowBase):
    date: date
    status: Literal["present", "absent", "late"]
    subject: Optional[str] = None


class MarksHistoryRow(AnalyticsRowBase):
    subject: str
    score: float = Field(ge=0)
    max_score: float = Field(gt=0)
    exam_type: Literal["quiz", "midterm", "final", "assignment"]
    date: date


class WellbeingHistoryRow(AnalyticsRowBase):
    date: date
    mood_score: int = Field(ge=1, le=5)
    stress_level: int = Field(ge=1, le=5)
    sleep_hours: float = Field(ge=0, le=24)
    notes: Optional[str] = None


class InterventionRow(AnalyticsRowBase):
    mentor_id: str
    date: date
    type: Literal["counseling", "academic_support", "parent_meeting", "follow_up"]
    notes: str
    outcome: Optional[str] = None


class RiskPredictionRow(AnalyticsRowBase):
    prediction_date: datetime
    risk_level: Literal["low", "medium", "high"]
    source: Literal["ai", "fallback"]
    confidence: Optional[float] = Field(default=None, ge=0, le=1)
    factors: str = Field(description="Explanation and recommendations, newline separated.")
    model_version: str


class InsertRowsRequest(BaseModel):
    rows: list[dict[str, Any]] = Field(
        min_length=1,
        max_length=500,
        description="Rows validated against the table's schema.",
    )


class InsertRowsResponse(BaseModel):
    table: str
    inserted_count: int


class StudentFeaturesResponse(BaseModel):
    student_id: str
    avg_attendance: float = Field(description="Percentage of attendance rows marked present.")
    avg_marks: float = Field(description="Mean of score / max_score, as a percentage.")
    avg_mood: float
    avg_stress: float
    avg_sleep: float
    intervention_count: int
