"""
Skills portfolio router.

POST   /students/{student_id}/skills — add an entry (starts pending)
GET    /students/{student_id}/skills — one student's portfolio, newest first
GET    /skills?status=               — review queue across all students
GET    /skills/summary               — counts per verification status
GET    /skills/{skill_id}            — single entry
PATCH  /skills/{skill_id}            — partial update
DELETE /skills/{skill_id}            — delete
POST   /skills/{skill_id}/verify     — record a verified / rejected decision
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.skill import SkillCreate, SkillOut, SkillReview, SkillUpdate, VerificationStatus
from app.services import skill_service

router = APIRouter(tags=["skills"])

_not_found = {404: {"model": ErrorResponse, "description": "Skill not found."}}


@router.post(
    "/students/{student_id}/skills",
    response_model=SkillOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a portfolio entry",
)
def create_skill(student_id: str, payload: SkillCreate, db: Session = Depends(get_db)):
    return skill_service.create_skill(db, student_id, payload)


@router.get("/students/{student_id}/skills", response_model=list[SkillOut], summary="Student portfolio")
def student_skills(student_id: str, db: Session = Depends(get_db)):
    return skill_service.list_skills(db, student_id=student_id)


@router.get("/skills", response_model=list[SkillOut], summary="List skills")
def list_skills(
    status_filter: Optional[VerificationStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
):
    return skill_service.list_skills(db, status=status_filter)


@router.get("/skills/summary", response_model=dict[str, int], summary="Counts per verification status")
def skills_summary(db: Session = Depends(get_db)):
    return skill_service.status_counts(db)


@router.get("/skills/{skill_id}", response_model=SkillOut, summary="Get skill", responses=_not_found)
def get_skill(skill_id: int, db: Session = Depends(get_db)):
    return skill_service.get_skill(db, skill_id)


@router.patch("/skills/{skill_id}", response_model=SkillOut, summary="Update skill", responses=_not_found)
def update_skill(skill_id: int, payload: SkillUpdate, db: Session = Depends(get_db)):
    return skill_service.update_skill(db, skill_id, payload)


@router.delete(
    "/skills/{skill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete skill",
    responses=_not_found,
)
def delete_skill(skill_id: int, db: Session = Depends(get_db)):
    skill_service.delete_skill(db, skill_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/skills/{skill_id}/verify",
    response_model=SkillOut,
    summary="Review a skill",
    responses=_not_found,
)
def verify_skill(skill_id: int, payload: SkillReview, db: Session = Depends(get_db)):
    """`status` is `verified` or `rejected`; blank notes are stored as null."""
    return skill_service.review_skill(db, skill_id, payload)
