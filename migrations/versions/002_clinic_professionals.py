"""Clinic membership of professionals.

Revision ID: 002_clinic_professionals
Revises: 001_initial
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_clinic_professionals"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clinic_professionals",
        sa.Column("clinic_id", sa.Uuid(), nullable=False),
        sa.Column("professional_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["clinic_id"], ["clinics.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["professional_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("clinic_id", "professional_id"),
    )
    op.create_index(
        op.f("ix_clinic_professionals_professional_id"),
        "clinic_professionals",
        ["professional_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_clinic_professionals_professional_id"), table_name="clinic_professionals")
    op.drop_table("clinic_professionals")
