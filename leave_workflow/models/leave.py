# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from leave_workflow.models.base import TimestampMixin, UUIDBase
from leave_workflow.models.enums import Stage


class LeaveRequest(UUIDBase, TimestampMixin, table=True):
    """A staff member's leave request and its position in the approval chain."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_requester_stage", "requester_id", "stage"),
        sa.CheckConstraint("end_date >= start_date", name="ck_leave_request_date_range"),
    )

    requester_id: uuid.UUID = Field(index=True)
    requester_work_site_id: uuid.UUID | None = Field(default=None, index=True)
    requester_department_id: uuid.UUID | None = Field(default=None, index=True)
    start_date: date
    end_date: date
    leave_type: str = Field(max_length=255)
    reason: str
    attachment_ref: str | None = Field(default=None, max_length=1024)
    stage: str = Field(
        default=Stage.AWAITING_SCHOOL_HEAD,
        max_length=64,
        index=True,
        sa_column_kwargs={"server_default": "AWAITING_SCHOOL_HEAD"},
    )
    reviewer_comment: str | None = None
