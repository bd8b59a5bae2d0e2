"""
Dashboard router: deterministic scoring over the stored aggregate.

GET /students/{student_id}/dashboard       — everything below in one payload
GET /students/{student_id}/risk            — risk level, score and message
GET /students/{student_id}/subjects/risk   — per-subject risk
GET /students/{student_id}/balance         — College Life Balance Meter
GET /students/{student_id}/correlations    — mood × academics correlations
"""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.schemas.risk import (
    BalanceBreakdownOut,
    BalanceMeterResponse,
    CorrelationResponse,
    DashboardResponse,
    InsightOut,
    RiskLevelResponse,
    SubjectRiskItem,
    SubjectRiskResponse,
)
from app.schemas.student import StudentData
from app.services.balance_meter import BalanceMeter, balance_meter_for
from app.services.correlation import DEFAULT_WINDOW, CorrelationResult, correlations_for
from app.services.risk_engine import (
    calculate_risk_level,
    get_risk_message,
    get_subject_risk,
    risk_score,
)
from app.services.student_store import StudentStore, get_student_store

router = APIRouter(prefix="/students", tags=["dashboard"])

StudentId = Annotated[str, Path(min_length=1, max_length=64, examples=["STU001"])]


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _risk_to_response(data: StudentData) -> RiskLevelResponse:
    attendance = data.latest_attendance()
    marks = data.latest_marks()
    args = (
        attendance.percentage if attendance else None,
        marks.average if marks else None,
        data.latest_wellbeing(),
    )
    level = calculate_risk_level(*args)
    return RiskLevelResponse(
        risk_level=level,
        score=risk_score(*args),
        message=get_risk_message(level, data.subjects, data.assignments),
    )


def _subjects_to_response(data: StudentData) -> list[SubjectRiskItem]:
    return [
        SubjectRiskItem(**s.model_dump(), risk=get_subject_risk(s))
        for s in data.subjects
    ]


def _balance_to_response(b: BalanceMeter) -> BalanceMeterResponse:
    return BalanceMeterResponse(
        score=b.score,
        status=b.status.value,
        breakdown=BalanceBreakdownOut(
            attendance=b.breakdown.attendance,
            stress=b.breakdown.stress,
            sleep=b.breakdown.sleep,
            engagement=b.breakdown.engagement,
        ),
    )


def _correlation_to_response(c: CorrelationResult) -> CorrelationResponse:
    return CorrelationResponse(
        mood_attendance=round(c.mood_attendance, 4),
        sleep_attendance=round(c.sleep_attendance, 4),
        stress_marks=round(c.stress_marks, 4),
        sample_size=c.sample_size,
        dates=c.dates,
        insights=[InsightOut(text=i.text, positive=i.positive) for i in c.insights],
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/{student_id}/dashboard",
    response_model=DashboardResponse,
    summary="Home dashboard",
)
def dashboard(
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    """
    Risk level and message, subject risk map, balance meter, correlations,
    streaks and weekly goal progress, computed from the latest records.
    """
    data = store.load(student_id)
    latest_attendance = data.latest_attendance()
    latest_marks = data.latest_marks()
    return DashboardResponse(
        profile=data.profile,
        latest_attendance=latest_attendance.percentage if latest_attendance else None,
        latest_marks=latest_marks.average if latest_marks else None,
        risk=_risk_to_response(data),
        subjects=_subjects_to_response(data),
        balance=_balance_to_response(balance_meter_for(data)),
        correlations=_correlation_to_response(correlations_for(data)),
        streaks=data.streaks,
        goals=data.goals,
        pending_assignments=len(data.pending_assignments()),
    )


@router.get("/{student_id}/risk", response_model=RiskLevelResponse, summary="Overall risk level")
def risk(
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return _risk_to_response(store.load(student_id))


@router.get(
    "/{student_id}/subjects/risk",
    response_model=SubjectRiskResponse,
    summary="Per-subject risk map",
)
def subject_risk(
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return SubjectRiskResponse(subjects=_subjects_to_response(store.load(student_id)))


@router.get("/{student_id}/balance", response_model=BalanceMeterResponse, summary="Balance meter")
def balance(
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return _balance_to_response(balance_meter_for(store.load(student_id)))


@router.get(
    "/{student_id}/correlations",
    response_model=CorrelationResponse,
    summary="Mood × academics correlations",
)
def correlations(
    student_id: StudentId,
    window: int = Query(default=DEFAULT_WINDOW, ge=2, le=52, description="Most recent aligned weeks to use."),
    store: StudentStore = Depends(get_student_store),
):
    return _correlation_to_response(correlations_for(store.load(student_id), window=window))
