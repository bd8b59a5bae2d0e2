"""
AnalyticsRow — append-only storage for the student_analytics dataset.

One row per inserted record; `table_name` names the logical table
(attendance_history, marks_history, wellbeing_history, interventions,
risk_predictions). The typed row schema lives in app/schemas/analytics.py.

payload: JSON-encoded row stored as Text (no external deps).
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class AnalyticsRow(Base):
    __tablename__ = "analytics_rows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    table_name: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
