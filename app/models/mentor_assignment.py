from datetime import datetime
from typing import Optional
from sqlalchemy import Integer, String, Text, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class MentorAssignment(Base):
    """A student placed under a mentor. A pair can be assigned only once."""

    __tablename__ = "mentor_assignments"
    __table_args__ = (
        UniqueConstraint("mentor_id", "student_id", name="uq_mentor_assignments_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    mentor_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assigned_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
