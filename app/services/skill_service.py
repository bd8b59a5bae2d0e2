"""
Skills portfolio service over the `skills` table.

Students add certificates, internships, achievements and extracurricular
entries; an admin reviews each one. Entries start `pending`, and a review
records the decision, the reviewer, the time and optional notes. A
reviewed entry can be reviewed again; the latest decision wins.

Public API
----------
create_skill(db, student_id, payload) -> Skill
get_skill(db, skill_id)               -> Skill             (404 if missing)
list_skills(db, student_id, status)   -> list[Skill]       (newest first)
update_skill(db, skill_id, changes)   -> Skill
delete_skill(db, skill_id)            -> None
review_skill(db, skill_id, review)    -> Skill
status_counts(db)                     -> dict[str, int]
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import SkillNotFoundError
from app.models.skill import Skill
from app.schemas.skill import SkillCreate, SkillReview, SkillUpdate, VerificationStatus

logger = logging.getLogger(__name__)


def create_skill(db: Session, student_id: str, payload: SkillCreate) -> Skill:
    fields = payload.model_dump()
    fields["type"] = payload.type.value
    skill = Skill(
        student_id=student_id,
        verification_status=VerificationStatus.pending.value,
        **fields,
    )
    db.add(skill)
    db.commit()
    db.refresh(skill)
    logger.info(f"Skill {skill.id} added for student {student_id}")
    return skill


def get_skill(db: Session, skill_id: int) -> Skill:
    skill = db.get(Skill, skill_id)
    if skill is None:
        raise SkillNotFoundError(skill_id)
    return skill


def list_skills(
    db: Session,
    student_id: Optional[str] = None,
    status: Optional[VerificationStatus] = None,
) -> list[Skill]:
    query = db.query(Skill)
    if student_id is not None:
        query = query.filter(Skill.student_id == student_id)
    if status is not None:
        query = query.filter(Skill.verification_status == status.value)
    return query.order_by(Skill.created_at.desc(), Skill.id.desc()).all()


def update_skill(db: Session, skill_id: int, changes: SkillUpdate) -> Skill:
    skill = get_skill(db, skill_id)
    for key, value in changes.model_dump(exclude_none=True).items():
        setattr(skill, key, value.value if key == "type" else value)
    db.commit()
    db.refresh(skill)
    return skill


def delete_skill(db: Session, skill_id: int) -> None:
    skill = get_skill(db, skill_id)
    db.delete(skill)
    db.commit()
    logger.info(f"Skill deleted: {skill_id}")


def review_skill(db: Session, skill_id: int, review: SkillReview) -> Skill:
    skill = get_skill(db, skill_id)
    skill.verification_status = review.status.value
    skill.verified_by = review.reviewer_id
    skill.verified_at = datetime.now(tz=timezone.utc)
    skill.verification_notes = (review.notes or "").strip() or None
    db.commit()
    db.refresh(skill)
    logger.info(f"Skill {skill_id} {review.status.value} by {review.reviewer_id}")
    return skill


def status_counts(db: Session) -> dict[str, int]:
    """Number of entries per verification status, zero-filled."""
    rows = (
        db.query(Skill.verification_status, func.count(Skill.id))
        .group_by(Skill.verification_status)
        .all()
    )
    counts = {s.value: 0 for s in VerificationStatus}
    counts.update({status: count for status, count in rows})
    return counts
