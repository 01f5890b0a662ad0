"""user programs and completed workouts

Revision ID: 20260301_0001
Revises: 
Create Date: 2026-03-01 00:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_programs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_key", sa.String(length=120), nullable=False),
        sa.Column("program_id", sa.String(length=80), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("race_date", sa.Date(), nullable=True),
        sa.Column("fitness_level", sa.String(length=20), nullable=True),
        sa.Column("days_per_week", sa.Integer(), nullable=True),
        sa.Column("weak_areas", sa.JSON(), nullable=False),
        sa.Column("program_data", sa.JSON(), nullable=False),
        sa.Column("intensity_modifier", sa.Float(), nullable=False, server_default="1.0"),
        sa.Column("adapted_schedule", sa.JSON(), nullable=True),
        sa.Column("missed_workout_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index("ix_user_programs_user_key", "user_programs", ["user_key"], unique=True)

    op.create_table(
        "completed_program_workouts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_program_id",
            sa.Integer(),
            sa.ForeignKey("user_programs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=120), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("actual_duration", sa.Integer(), nullable=True),
        sa.Column("rpe", sa.Integer(), nullable=True),
        sa.Column("completion_status", sa.String(length=20), nullable=False, server_default="full"),
        sa.Column("percent_complete", sa.Integer(), nullable=False, server_default="100"),
        sa.UniqueConstraint(
            "user_program_id", "week", "day_of_week", name="completed_program_workout_slot_unique"
        ),
    )
    op.create_index(
        "ix_completed_program_workouts_user_program_id",
        "completed_program_workouts",
        ["user_program_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_completed_program_workouts_user_program_id", table_name="completed_program_workouts")
    op.drop_table("completed_program_workouts")
    op.drop_index("ix_user_programs_user_key", table_name="user_programs")
    op.drop_table("user_programs")
