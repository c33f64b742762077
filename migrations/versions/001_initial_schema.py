"""Initial schema: clinics, users, patients, catalog, treatment plans, appointments.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

APPOINTMENT_STATUSES = ("SCHEDULED", "CONFIRMED", "IN_PROGRESS", "WAITING", "COMPLETED", "CANCELED")


def upgrade() -> None:
    op.create_table(
        "clinics",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("allow_parallel_appointments", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("parallel_appointments_limit", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("parallel_appointments_limit >= 1", name="ck_clinics_parallel_limit"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("is_professional", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("working_days", sa.JSON(), nullable=False),
        sa.Column("schedule_start_hour", sa.String(), nullable=True),
        sa.Column("schedule_end_hour", sa.String(), nullable=True),
        sa.Column("appointment_duration", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=False)

    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clinic_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["clinic_id"], ["clinics.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_patients_clinic_id"), "patients", ["clinic_id"], unique=False)

    op.create_table(
        "appointment_types",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "procedures",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "treatment_plans",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clinic_id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["clinic_id"], ["clinics.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_treatment_plans_clinic_id"), "treatment_plans", ["clinic_id"], unique=False)
    op.create_index(op.f("ix_treatment_plans_patient_id"), "treatment_plans", ["patient_id"], unique=False)

    op.create_table(
        "treatment_plan_procedures",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("treatment_plan_id", sa.Uuid(), nullable=False),
        sa.Column("procedure_id", sa.Uuid(), nullable=False),
        sa.Column("contracted_sessions", sa.Integer(), nullable=False),
        sa.Column("completed_sessions", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["treatment_plan_id"], ["treatment_plans.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["procedure_id"], ["procedures.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("contracted_sessions >= 1", name="ck_treatment_plan_procedures_contracted"),
    )
    op.create_index(
        op.f("ix_treatment_plan_procedures_treatment_plan_id"),
        "treatment_plan_procedures",
        ["treatment_plan_id"],
        unique=False,
    )

    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("clinic_id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("professional_id", sa.Uuid(), nullable=False),
        sa.Column("appointment_type_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*APPOINTMENT_STATUSES, name="appointmentstatus"),
            nullable=False,
            server_default="SCHEDULED",
        ),
        sa.Column("treatment_plan_id", sa.Uuid(), nullable=True),
        sa.Column("treatment_plan_procedure_id", sa.Uuid(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["clinic_id"], ["clinics.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"]),
        sa.ForeignKeyConstraint(["professional_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["appointment_type_id"], ["appointment_types.id"]),
        sa.ForeignKeyConstraint(["treatment_plan_id"], ["treatment_plans.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["treatment_plan_procedure_id"], ["treatment_plan_procedures.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("start_time < end_time", name="ck_appointments_time_order"),
    )
    op.create_index(op.f("ix_appointments_clinic_id"), "appointments", ["clinic_id"], unique=False)
    op.create_index(op.f("ix_appointments_patient_id"), "appointments", ["patient_id"], unique=False)
    op.create_index(op.f("ix_appointments_status"), "appointments", ["status"], unique=False)
    op.create_index(
        op.f("ix_appointments_treatment_plan_procedure_id"),
        "appointments",
        ["treatment_plan_procedure_id"],
        unique=False,
    )
    op.create_index(
        "ix_appointments_professional_date", "appointments", ["professional_id", "date"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_appointments_professional_date", table_name="appointments")
    op.drop_index(op.f("ix_appointments_treatment_plan_procedure_id"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_status"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_patient_id"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_clinic_id"), table_name="appointments")
    op.drop_table("appointments")
    sa.Enum(name="appointmentstatus").drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f("ix_treatment_plan_procedures_treatment_plan_id"), table_name="treatment_plan_procedures")
    op.drop_table("treatment_plan_procedures")
    op.drop_index(op.f("ix_treatment_plans_patient_id"), table_name="treatment_plans")
    op.drop_index(op.f("ix_treatment_plans_clinic_id"), table_name="treatment_plans")
    op.drop_table("treatment_plans")
    op.drop_table("procedures")
    op.drop_table("appointment_types")
    op.drop_index(op.f("ix_patients_clinic_id"), table_name="patients")
    op.drop_table("patients")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
    op.drop_table("clinics")
