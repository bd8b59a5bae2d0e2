from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

PersonId = Annotated[str, Field(min_length=1, max_length=64)]


class MentorAssignmentCreate(BaseModel):
    mentor_id: PersonId
    student_id: PersonId
    assigned_by: Optional[PersonId] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class MentorAssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    mentor_id: str
    student_id: str
    assigned_by: Optional[str]
    notes: Optional[str]
    assigned_at: datetime
