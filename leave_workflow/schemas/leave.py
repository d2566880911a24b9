# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from leave_workflow.models.enums import LeaveAction, Stage

# Surrounding whitespace is stripped before the length checks, so blank text is rejected.
LeaveTypeText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
ReasonText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitLeavePayload(BaseModel):
    """Request body for submitting a new leave request."""

    start_date: date
    end_date: date
    leave_type: LeaveTypeText
    reason: ReasonText
    attachment_ref: str | None = Field(default=None, max_length=1024)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must be on or after start_date"
            raise ValueError(msg)
        return self


class LeavePatch(BaseModel):
    """Owner edits to a pending leave request. The stage cannot be patched."""

    model_config = ConfigDict(extra="forbid")

    start_date: date | None = None
    end_date: date | None = None
    leave_type: LeaveTypeText | None = None
    reason: ReasonText | None = None
    attachment_ref: str | None = Field(default=None, max_length=1024)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.start_date is not None and self.end_date is not None and self.end_date < self.start_date:
            msg = "end_date must be on or after start_date"
            raise ValueError(msg)
        return self


class ApprovePayload(BaseModel):
    """Request body for approve actions."""

    comment: str | None = Field(default=None, max_length=1000)


class RejectPayload(BaseModel):
    """Request body for reject actions. Some review levels require a reason."""

    reason: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    requester_id: uuid.UUID
    requester_work_site_id: uuid.UUID | None
    requester_department_id: uuid.UUID | None
    start_date: date
    end_date: date
    leave_type: str
    reason: str
    attachment_ref: str | None
    stage: Stage
    reviewer_comment: str | None
    created_at: datetime
    updated_at: datetime


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int


class AvailableAction(BaseModel):
    """An action the caller may take on a request."""

    action: LeaveAction
    target_stage: Stage
    requires_reason: bool


class AvailableActionsResponse(BaseModel):
    """Actions available to the caller at the request's current stage."""

    stage: Stage
    editable: bool
    actions: list[AvailableAction]
