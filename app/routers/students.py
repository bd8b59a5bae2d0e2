"""
Students router: the stored StudentData aggregate and its mutations.

GET   /students/{student_id}                                — full aggregate
PATCH /students/{student_id}/profile                        — partial profile update
POST  /students/{student_id}/check-ins                      — upsert today's well-being
POST  /students/{student_id}/attendance                     — append attendance record
POST  /students/{student_id}/marks                          — append marks record
POST  /students/{student_id}/assignments/{id}/toggle        — flip completion
POST  /students/{student_id}/focus-sessions                 — log a focus session
POST  /students/{student_id}/reflections                    — upsert this week's reflection
"""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.schemas.common import ErrorResponse
from app.schemas.student import (
    AttendanceRequest,
    CheckInRequest,
    CheckInResponse,
    FocusSession,
    FocusSessionRequest,
    MarksRequest,
    ProfileUpdate,
    ReflectionRequest,
    StudentData,
    WellBeingScores,
    WeeklyReflection,
)
from app.services.student_store import StudentStore, get_student_store
from app.services.tips import tips_for_checkin

router = APIRouter(prefix="/students", tags=["students"])

StudentId = Annotated[
    str, Path(min_length=1, max_length=64, description="Student identifier.", examples=["STU001"])
]


@router.get(
    "/{student_id}",
    response_model=StudentData,
    summary="Full student aggregate",
)
def get_student(
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    """
    Returns the stored aggregate. Unknown students are seeded with the demo
    dataset on first read; unreadable documents fall back to it as well.
    """
    return store.load(student_id)


@router.patch(
    "/{student_id}/profile",
    response_model=StudentData,
    summary="Update profile fields",
    responses={422: {"model": ErrorResponse}},
)
def update_profile(
    body: ProfileUpdate,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return store.update_profile(student_id, body)


@router.post(
    "/{student_id}/check-ins",
    response_model=CheckInResponse,
    summary="Daily well-being check-in",
    responses={
        200: {"description": "Check-in stored (inserted or replaced) with personalised tips."},
        422: {"model": ErrorResponse, "description": "A scale value is outside 1–5."},
    },
)
def check_in(
    body: CheckInRequest,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    """
    At most one check-in per date: a second submission for the same date
    replaces the first and does not advance the check-in streak.
    """
    scores = WellBeingScores(**body.model_dump(exclude={"day"}))
    result = store.upsert_wellbeing(student_id, scores, day=body.day)
    return CheckInResponse(
        record=result.record,
        replaced_existing=result.replaced_existing,
        tips=tips_for_checkin(result.record),
        streak=result.streak,
    )


@router.post(
    "/{student_id}/attendance",
    response_model=StudentData,
    summary="Record an attendance percentage",
)
def record_attendance(
    body: AttendanceRequest,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return store.record_attendance(student_id, body.percentage, day=body.day)


@router.post(
    "/{student_id}/marks",
    response_model=StudentData,
    summary="Record an average marks percentage",
)
def record_marks(
    body: MarksRequest,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return store.record_marks(student_id, body.average, day=body.day)


@router.post(
    "/{student_id}/assignments/{assignment_id}/toggle",
    response_model=StudentData,
    summary="Toggle assignment completion",
    responses={404: {"model": ErrorResponse, "description": "Unknown assignment id."}},
)
def toggle_assignment(
    assignment_id: str,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    """Completing bumps the weekly goal and assignment streak; un-completing lowers the goal."""
    return store.toggle_assignment(student_id, assignment_id)


@router.post(
    "/{student_id}/focus-sessions",
    response_model=FocusSession,
    status_code=status.HTTP_201_CREATED,
    summary="Log a finished focus session",
)
def add_focus_session(
    body: FocusSessionRequest,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return store.add_focus_session(student_id, body.subject, body.duration_minutes)


@router.post(
    "/{student_id}/reflections",
    response_model=WeeklyReflection,
    summary="Weekly reflection (one per week)",
)
def add_reflection(
    body: ReflectionRequest,
    student_id: StudentId,
    store: StudentStore = Depends(get_student_store),
):
    return store.add_weekly_reflection(student_id, body.went_well, body.to_improve, day=body.day)
