"""
Academic-records (ERP) payloads.

Every ERP endpoint answers {data: T[], count}. Unknown fields are ignored
so additive upstream changes do not break parsing.
"""
from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.student import RiskLevel

T = TypeVar("T")


class ErpModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ErpStudent(ErpModel):
    id: str
    roll_no: str
    name: str
    branch: str
    attendance: float
    cie_marks: str = Field(description='Continuous internal evaluation, e.g. "18/20".')
    status: str = Field(description='"Regular", "Low Attendance" or "Detained".')
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ErpProgress(ErpModel):
    id: str
    student_id: str
    subject: str
    attendance: float
    marks: float
    assignments_done: int
    total_assignments: int
    created_at: Optional[datetime] = None


class ErpNotice(ErpModel):
    id: str
    title: str
    content: str
    type: str
    priority: str
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class ErpResponse(ErpModel, Generic[T]):
    data: list[T] = Field(default_factory=list)
    count: int = 0


class ErpStudentOut(ErpStudent):
    marks_percentage: int
    risk_level: RiskLevel
