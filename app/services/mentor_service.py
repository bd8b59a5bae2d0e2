"""
Mentor assignments over the `mentor_assignments` table.

A (mentor, student) pair is assigned at most once; a second assignment of
the same pair raises DuplicateMentorAssignmentError (409). A student may
have several mentors.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateMentorAssignmentError, MentorAssignmentNotFoundError
from app.models.mentor_assignment import MentorAssignment
from app.schemas.mentor import MentorAssignmentCreate

logger = logging.getLogger(__name__)


def _find_pair(db: Session, mentor_id: str, student_id: str) -> Optional[MentorAssignment]:
    return (
        db.query(MentorAssignment)
        .filter(
            MentorAssignment.mentor_id == mentor_id,
            MentorAssignment.student_id == student_id,
        )
        .first()
    )


def assign_student(db: Session, payload: MentorAssignmentCreate) -> MentorAssignment:
    if _find_pair(db, payload.mentor_id, payload.student_id) is not None:
        raise DuplicateMentorAssignmentError(payload.mentor_id, payload.student_id)

    notes = (payload.notes or "").strip() or None
    assignment = MentorAssignment(
        mentor_id=payload.mentor_id,
        student_id=payload.student_id,
        assigned_by=payload.assigned_by,
        notes=notes,
    )
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateMentorAssignmentError(payload.mentor_id, payload.student_id) from exc
    db.refresh(assignment)
    logger.info(f"Student {payload.student_id} assigned to mentor {payload.mentor_id}")
    return assignment


def get_assignment(db: Session, assignment_id: int) -> MentorAssignment:
    assignment = db.get(MentorAssignment, assignment_id)
    if assignment is None:
        raise MentorAssignmentNotFoundError(assignment_id)
    return assignment


def list_assignments(
    db: Session,
    mentor_id: Optional[str] = None,
    student_id: Optional[str] = None,
) -> list[MentorAssignment]:
    """Newest first, optionally narrowed to one mentor and/or one student."""
    query = db.query(MentorAssignment)
    if mentor_id is not None:
        query = query.filter(MentorAssignment.mentor_id == mentor_id)
    if student_id is not None:
        query = query.filter(MentorAssignment.student_id == student_id)
    return query.order_by(MentorAssignment.assigned_at.desc(), MentorAssignment.id.desc()).all()


def remove_assignment(db: Session, assignment_id: int) -> None:
    assignment = get_assignment(db, assignment_id)
    db.delete(assignment)
    db.commit()
    logger.info(f"Mentor assignment removed: {assignment_id}")
