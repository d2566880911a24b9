# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, Response, status

from leave_workflow.api.deps import AuthDep
from leave_workflow.db import SessionDep
from leave_workflow.models.enums import Stage
from leave_workflow.schemas.leave import (
    ApprovePayload,
    AvailableActionsResponse,
    LeavePatch,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    RejectPayload,
    SubmitLeavePayload,
)
from leave_workflow.services import leave as leave_service

leave_requests_router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@leave_requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave_request(
    payload: SubmitLeavePayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Submit a new leave request."""
    return await leave_service.submit_leave_request(session, auth, payload)


@leave_requests_router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    session: SessionDep,
    auth: AuthDep,
    stage: Stage | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List leave requests within the caller's visibility scope."""
    return await leave_service.list_leave_requests(session, auth, stage, offset, limit)


@leave_requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Get a single leave request."""
    return await leave_service.get_leave_request(session, auth, request_id)


@leave_requests_router.get("/{request_id}/actions", response_model=AvailableActionsResponse)
async def get_available_actions(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> AvailableActionsResponse:
    """List the actions the caller may take on a leave request."""
    return await leave_service.get_available_actions(session, auth, request_id)


@leave_requests_router.patch("/{request_id}", response_model=LeaveRequestResponse)
async def update_leave_request(
    request_id: uuid.UUID,
    patch: LeavePatch,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Edit a pending leave request (owner only)."""
    return await leave_service.update_leave_request(session, auth, request_id, patch)


@leave_requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> Response:
    """Delete a pending leave request (owner only)."""
    await leave_service.delete_leave_request(session, auth, request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@leave_requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    payload: ApprovePayload | None = None,
) -> LeaveRequestResponse:
    """Approve a leave request at the caller's review stage."""
    return await leave_service.approve_leave_request(session, auth, request_id, payload)


@leave_requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    payload: RejectPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a leave request at the caller's review stage."""
    return await leave_service.reject_leave_request(session, auth, request_id, payload)
