"""
Skills portfolio schemas.

POST  /students/{id}/skills  → SkillCreate → SkillOut (201, status pending)
PATCH /skills/{id}           → SkillUpdate → SkillOut
POST  /skills/{id}/verify    → SkillReview → SkillOut
"""
import enum
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

Title = Annotated[str, Field(min_length=1, max_length=200)]


class SkillType(str, enum.Enum):
    certificate = "certificate"
    internship = "internship"
    achievement = "achievement"
    extracurricular = "extracurricular"


class VerificationStatus(str, enum.Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class ReviewDecision(str, enum.Enum):
    verified = "verified"
    rejected = "rejected"


class SkillCreate(BaseModel):
    type: SkillType
    title: Title
    description: Optional[str] = Field(default=None, max_length=2000)
    issuing_authority: Optional[str] = Field(default=None, max_length=200)
    category: Optional[str] = Field(default=None, max_length=64)
    url: Optional[str] = Field(default=None, max_length=512)
    date_obtained: Optional[date] = None


class SkillUpdate(BaseModel):
    type: Optional[SkillType] = None
    title: Optional[Title] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    issuing_authority: Optional[str] = Field(default=None, max_length=200)
    category: Optional[str] = Field(default=None, max_length=64)
    url: Optional[str] = Field(default=None, max_length=512)
    date_obtained: Optional[date] = None


class SkillReview(BaseModel):
    status: ReviewDecision
    reviewer_id: str = Field(min_length=1, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=2000)


class SkillOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: str
    type: SkillType
    title: str
    description: Optional[str]
    issuing_authority: Optional[str]
    category: Optional[str]
    url: Optional[str]
    date_obtained: Optional[date]
    verification_status: VerificationStatus
    verified_by: Optional[str]
    verified_at: Optional[datetime]
    verification_notes: Optional[str]
    created_at: datetime
    updated_at: datetime
