"""
Mentor assignment router.

POST   /mentor-assignments                  — assign a student (409 if already assigned)
GET    /mentor-assignments                  — list newest first (?mentor_id=, ?student_id=)
GET    /mentors/{mentor_id}/students        — one mentor's students
DELETE /mentor-assignments/{assignment_id}  — remove
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.mentor import MentorAssignmentCreate, MentorAssignmentOut
from app.services import mentor_service

router = APIRouter(tags=["mentors"])


@router.post(
    "/mentor-assignments",
    response_model=MentorAssignmentOut,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a student to a mentor",
    responses={409: {"model": ErrorResponse, "description": "Pair already assigned."}},
)
def assign_student(payload: MentorAssignmentCreate, db: Session = Depends(get_db)):
    return mentor_service.assign_student(db, payload)


@router.get("/mentor-assignments", response_model=list[MentorAssignmentOut], summary="List assignments")
def list_assignments(
    mentor_id: Optional[str] = Query(default=None, max_length=64),
    student_id: Optional[str] = Query(default=None, max_length=64),
    db: Session = Depends(get_db),
):
    return mentor_service.list_assignments(db, mentor_id=mentor_id, student_id=student_id)


@router.get(
    "/mentors/{mentor_id}/students",
    response_model=list[MentorAssignmentOut],
    summary="A mentor's students",
)
def mentor_students(mentor_id: str, db: Session = Depends(get_db)):
    return mentor_service.list_assignments(db, mentor_id=mentor_id)


@router.delete(
    "/mentor-assignments/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove an assignment",
    responses={404: {"model": ErrorResponse, "description": "Assignment not found."}},
)
def remove_assignment(assignment_id: int, db: Session = Depends(get_db)):
    mentor_service.remove_assignment(db, assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
