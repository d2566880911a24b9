"""Create leave_request and audit_log tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "leave_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("requester_id", sa.Uuid(), nullable=False),
        sa.Column("requester_work_site_id", sa.Uuid(), nullable=True),
        sa.Column("requester_department_id", sa.Uuid(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("leave_type", sa.String(length=255), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("attachment_ref", sa.String(length=1024), nullable=True),
        sa.Column("stage", sa.String(length=64), server_default="AWAITING_SCHOOL_HEAD", nullable=False),
        sa.Column("reviewer_comment", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("end_date >= start_date", name="ck_leave_request_date_range"),
    )
    op.create_index("ix_leave_request_requester_id", "leave_request", ["requester_id"])
    op.create_index("ix_leave_request_requester_work_site_id", "leave_request", ["requester_work_site_id"])
    op.create_index("ix_leave_request_requester_department_id", "leave_request", ["requester_department_id"])
    op.create_index("ix_leave_request_stage", "leave_request", ["stage"])
    op.create_index("ix_leave_request_requester_stage", "leave_request", ["requester_id", "stage"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_audit_log_created_at", table_name="audit_log")
    op.drop_index("ix_audit_entity", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_leave_request_requester_stage", table_name="leave_request")
    op.drop_index("ix_leave_request_stage", table_name="leave_request")
    op.drop_index("ix_leave_request_requester_department_id", table_name="leave_request")
    op.drop_index("ix_leave_request_requester_work_site_id", table_name="leave_request")
    op.drop_index("ix_leave_request_requester_id", table_name="leave_request")
    op.drop_table("leave_request")
