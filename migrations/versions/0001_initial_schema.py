"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-05 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- student_documents ---
    op.create_table(
        "student_documents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_student_documents_id", "student_documents", ["id"])
    op.create_index(
        "ix_student_documents_student_id", "student_documents", ["student_id"], unique=True
    )

    # --- analytics_rows ---
    op.create_table(
        "analytics_rows",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("table_name", sa.String(64), nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("inserted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_analytics_rows_id", "analytics_rows", ["id"])
    op.create_index("ix_analytics_rows_table_name", "analytics_rows", ["table_name"])
    op.create_index("ix_analytics_rows_student_id", "analytics_rows", ["student_id"])


def downgrade() -> None:
    op.drop_table("analytics_rows")
    op.drop_table("student_documents")
