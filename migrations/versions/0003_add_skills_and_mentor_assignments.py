"""add skills portfolio and mentor assignments

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "skills",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("issuing_authority", sa.String(200), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("url", sa.String(512), nullable=True),
        sa.Column("date_obtained", sa.Date(), nullable=True),
        sa.Column("verification_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("verified_by", sa.String(64), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_skills_id", "skills", ["id"])
    op.create_index("ix_skills_student_id", "skills", ["student_id"])
    op.create_index("ix_skills_verification_status", "skills", ["verification_status"])

    op.create_table(
        "mentor_assignments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("mentor_id", sa.String(64), nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("assigned_by", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("mentor_id", "student_id", name="uq_mentor_assignments_pair"),
    )
    op.create_index("ix_mentor_assignments_id", "mentor_assignments", ["id"])
    op.create_index("ix_mentor_assignments_mentor_id", "mentor_assignments", ["mentor_id"])
    op.create_index("ix_mentor_assignments_student_id", "mentor_assignments", ["student_id"])


def downgrade() -> None:
    op.drop_table("mentor_assignments")
    op.drop_index("ix_skills_verification_status", table_name="skills")
    op.drop_index("ix_skills_student_id", table_name="skills")
    op.drop_table("skills")
