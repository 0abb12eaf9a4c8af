"""Create walk booking / tracking tables

Revision ID: 3f2a91c0d7e4
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f2a91c0d7e4"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(30)),
        sa.Column("role", sa.Enum("ADMIN", "OWNER", "WALKER", name="userrole"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "owners",
        sa.Column("owner_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("address", sa.String(255)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "walkers",
        sa.Column("walker_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column("bio", sa.Text()),
        sa.Column("max_dogs", sa.Integer()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "dogs",
        sa.Column("dog_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("owners.owner_id"), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("breed", sa.String(50)),
        sa.Column("size", sa.Enum("SMALL", "MEDIUM", "LARGE", name="dogsize")),
        sa.Column("temperament", sa.String(255)),
        sa.Column("image_url", sa.String(255)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "assessments",
        sa.Column("assessment_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("dog_id", sa.Integer(), sa.ForeignKey("dogs.dog_id"), nullable=False),
        sa.Column("walker_id", sa.Integer(), sa.ForeignKey("walkers.walker_id")),
        sa.Column(
            "status",
            sa.Enum("PENDING", "SCHEDULED", "COMPLETED", "CANCELLED", name="assessmentstatus"),
            nullable=False,
        ),
        sa.Column("result", sa.Enum("APPROVED", "DENIED", name="assessmentresult")),
        sa.Column("scheduled_date", sa.String(10)),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "walks",
        sa.Column("walk_id", sa.String(36), primary_key=True),
        sa.Column("dog_id", sa.Integer(), sa.ForeignKey("dogs.dog_id"), nullable=False),
        sa.Column("walker_id", sa.Integer(), sa.ForeignKey("walkers.walker_id"), nullable=False),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("time_slot", sa.Enum("AM", "PM", name="timeslot"), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("SCHEDULED", "COMPLETED", "CANCELLED", name="walkstatus"),
            nullable=False,
        ),
        sa.Column("notes", sa.Text()),
        sa.Column("pickup_location", sa.JSON()),
        sa.Column("dropoff_location", sa.JSON()),
        sa.Column("walk_start_location", sa.JSON()),
        sa.Column("walk_end_location", sa.JSON()),
        sa.Column("route_coordinates", sa.JSON()),
        sa.Column("is_tracking_active", sa.Boolean(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    # 워커별 날짜/시간 조회 (그룹 산책 집계)
    op.create_index("ix_walks_walker_date", "walks", ["walker_id", "date", "start_time"])


def downgrade() -> None:
    op.drop_index("ix_walks_walker_date", table_name="walks")
    op.drop_table("walks")
    op.drop_table("assessments")
    op.drop_table("dogs")
    op.drop_table("walkers")
    op.drop_table("owners")
    op.drop_table("users")
