# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy import func, select
from sqlmodel import col

from leave_workflow.models.enums import AuditAction, AuditEntityType, LeaveAction, Stage
from leave_workflow.models.leave import LeaveRequest
from leave_workflow.schemas.leave import (
    AvailableAction,
    AvailableActionsResponse,
    LeaveRequestListResponse,
    LeaveRequestResponse,
)
from leave_workflow.services.attachments import get_attachment_store
from leave_workflow.services.audit import model_to_audit_dict, write_audit_log
from leave_workflow.services.staff import get_staff_directory
from leave_workflow.workflow import engine
from leave_workflow.workflow.errors import InvalidStateError, InvalidTransitionError, NotFoundError
from leave_workflow.workflow.roles import ListingFilter, listing_filter

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_workflow.schemas.auth import AuthContext
    from leave_workflow.schemas.leave import ApprovePayload, LeavePatch, RejectPayload, SubmitLeavePayload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_leave_response(leave: LeaveRequest) -> LeaveRequestResponse:
    """Map a leave request model to its response schema."""
    return LeaveRequestResponse(
        id=leave.id,
        requester_id=leave.requester_id,
        requester_work_site_id=leave.requester_work_site_id,
        requester_department_id=leave.requester_department_id,
        start_date=leave.start_date,
        end_date=leave.end_date,
        leave_type=leave.leave_type,
        reason=leave.reason,
        attachment_ref=leave.attachment_ref,
        stage=Stage(leave.stage),
        reviewer_comment=leave.reviewer_comment,
        created_at=leave.created_at,
        updated_at=leave.updated_at,
    )


def _scope_filters(scope: ListingFilter) -> list[Any] | None:
    """Translate a listing filter into WHERE clauses. None means match nothing."""
    if scope.match_nothing:
        return None
    filters: list[Any] = []
    if scope.requester_id is not None:
        filters.append(col(LeaveRequest.requester_id) == scope.requester_id)
    if scope.work_site_id is not None:
        filters.append(col(LeaveRequest.requester_work_site_id) == scope.work_site_id)
    if scope.department_id is not None:
        filters.append(col(LeaveRequest.requester_department_id) == scope.department_id)
    return filters


async def _resolve_listing_filter(auth: AuthContext) -> ListingFilter:
    """Combine the actor's roles with their placement from the staff directory."""
    staff = await get_staff_directory().get_staff(auth.user_id)
    return listing_filter(
        auth.roles,
        auth.user_id,
        work_site_id=staff.work_site_id if staff else None,
        department_id=staff.department_id if staff else None,
    )


async def _get_leave_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a leave request by ID. Raises NotFoundError if it does not exist."""
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id))
    leave = result.scalar_one_or_none()
    if leave is None:
        msg = "Leave request not found"
        raise NotFoundError(msg)
    return leave


async def _get_visible_leave_or_404(session: AsyncSession, auth: AuthContext, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a leave request the actor may see. Requests outside the scope read as missing."""
    filters = _scope_filters(await _resolve_listing_filter(auth))
    if filters is None:
        msg = "Leave request not found"
        raise NotFoundError(msg)
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id, *filters))
    leave = result.scalar_one_or_none()
    if leave is None:
        msg = "Leave request not found"
        raise NotFoundError(msg)
    return leave


async def _compare_and_set(
    session: AsyncSession,
    request_id: uuid.UUID,
    expected_stage: Stage,
    values: dict[str, Any],
) -> bool:
    """Update the row only if its stage is still the one the decision was made against.

    Returns False when another writer moved the stage first.
    """
    result = await session.execute(
        sa.update(LeaveRequest)
        .where(col(LeaveRequest.id) == request_id, col(LeaveRequest.stage) == expected_stage.value)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def _apply_transition(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    action: LeaveAction,
    comment: str | None,
) -> LeaveRequestResponse:
    """Shared logic for approve and reject.

    1. Fetch the request.
    2. Ask the engine for a decision (raises on a disallowed transition).
    3. Compare-and-swap the stage against the stage read in step 1.
    4. Audit log with before/after.
    5. Commit and return.
    """
    leave = await _get_leave_or_404(session, request_id)
    decision = engine.transition(leave.stage, auth.roles, action, leave.leave_type, comment)

    before_dict = model_to_audit_dict(leave)
    values: dict[str, Any] = {"stage": decision.to_stage.value, "updated_at": datetime.now(UTC)}
    if decision.comment is not None:
        values["reviewer_comment"] = decision.comment

    if not await _compare_and_set(session, leave.id, decision.from_stage, values):
        logger.warning(
            "Stage conflict on leave request %s: expected %s when applying %s",
            leave.id,
            decision.from_stage,
            action,
        )
        msg = f"Leave request is no longer at stage {decision.from_stage.value}"
        raise InvalidTransitionError(msg)

    await session.refresh(leave)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave.id,
        action=AuditAction.APPROVE if action is LeaveAction.APPROVE else AuditAction.REJECT,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave),
    )

    await session.commit()
    await session.refresh(leave)
    logger.info(
        "Leave request %s moved %s -> %s by %s",
        leave.id,
        decision.from_stage,
        decision.to_stage,
        auth.user_id,
    )
    return _build_leave_response(leave)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitLeavePayload,
) -> LeaveRequestResponse:
    """Create a leave request at the review stage the submitter's roles route it to."""
    stage = engine.submit(auth.roles, payload.start_date, payload.end_date, date.today())
    staff = await get_staff_directory().get_staff(auth.user_id)

    leave = LeaveRequest(
        requester_id=auth.user_id,
        requester_work_site_id=staff.work_site_id if staff else None,
        requester_department_id=staff.department_id if staff else None,
        start_date=payload.start_date,
        end_date=payload.end_date,
        leave_type=engine.normalize_leave_type(payload.leave_type),
        reason=payload.reason,
        attachment_ref=payload.attachment_ref,
        stage=stage.value,
    )
    session.add(leave)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave.id,
        action=AuditAction.SUBMIT,
        after_json=model_to_audit_dict(leave),
    )

    await session.commit()
    await session.refresh(leave)
    logger.info("Leave request %s submitted by %s at stage %s", leave.id, auth.user_id, stage)
    return _build_leave_response(leave)


async def update_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    patch: LeavePatch,
) -> LeaveRequestResponse:
    """Apply an owner edit to a pending request.

    A replaced attachment is discarded from the attachment store once the
    edit is committed.
    """
    leave = await _get_leave_or_404(session, request_id)
    changes = engine.edit(leave, auth.user_id, patch, date.today())
    read_stage = Stage(leave.stage)
    previous_attachment = leave.attachment_ref

    before_dict = model_to_audit_dict(leave)
    if not await _compare_and_set(session, leave.id, read_stage, {**changes, "updated_at": datetime.now(UTC)}):
        logger.warning("Stage conflict on leave request %s: expected %s when editing", leave.id, read_stage)
        msg = f"Leave request is no longer at stage {read_stage.value}"
        raise InvalidStateError(msg)

    await session.refresh(leave)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave),
    )

    await session.commit()
    await session.refresh(leave)

    if "attachment_ref" in changes and previous_attachment and previous_attachment != leave.attachment_ref:
        await get_attachment_store().discard(previous_attachment)

    logger.info("Leave request %s updated by %s: %s", leave.id, auth.user_id, sorted(changes))
    return _build_leave_response(leave)


async def delete_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> None:
    """Delete a pending request on behalf of its owner."""
    leave = await _get_leave_or_404(session, request_id)
    engine.delete(leave, auth.user_id)
    read_stage = Stage(leave.stage)

    before_dict = model_to_audit_dict(leave)
    result = await session.execute(
        sa.delete(LeaveRequest)
        .where(col(LeaveRequest.id) == leave.id, col(LeaveRequest.stage) == read_stage.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning("Stage conflict on leave request %s: expected %s when deleting", leave.id, read_stage)
        msg = f"Leave request is no longer at stage {read_stage.value}"
        raise InvalidStateError(msg)
    session.expunge(leave)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=request_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )

    await session.commit()
    logger.info("Leave request %s deleted by %s", request_id, auth.user_id)


async def approve_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: ApprovePayload | None = None,
) -> LeaveRequestResponse:
    """Approve a request at the reviewer's stage; a blank comment keeps the stored one."""
    return await _apply_transition(session, auth, request_id, LeaveAction.APPROVE, payload.comment if payload else None)


async def reject_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: RejectPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a request at the reviewer's stage."""
    return await _apply_transition(session, auth, request_id, LeaveAction.REJECT, payload.reason if payload else None)


async def get_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Get a single leave request visible to the actor."""
    leave = await _get_visible_leave_or_404(session, auth, request_id)
    return _build_leave_response(leave)


async def get_available_actions(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> AvailableActionsResponse:
    """Describe what the actor can do with a request right now."""
    leave = await _get_visible_leave_or_404(session, auth, request_id)
    actions = []
    for rule in engine.available_rules(leave.stage, auth.roles):
        target = rule.to_stage
        if rule.annual_leave_stage is not None and engine.is_annual_leave(leave.leave_type):
            target = rule.annual_leave_stage
        actions.append(AvailableAction(action=rule.action, target_stage=target, requires_reason=rule.requires_reason))
    return AvailableActionsResponse(
        stage=Stage(leave.stage),
        editable=leave.requester_id == auth.user_id and engine.is_pending(leave.stage),
        actions=actions,
    )


async def list_leave_requests(
    session: AsyncSession,
    auth: AuthContext,
    stage_filter: Stage | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List requests within the actor's visibility scope, newest first."""
    base_filters = _scope_filters(await _resolve_listing_filter(auth))
    if base_filters is None:
        return LeaveRequestListResponse(items=[], total=0)

    if stage_filter is not None:
        base_filters.append(col(LeaveRequest.stage) == stage_filter.value)

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(*base_filters)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    leaves = list(result.scalars().all())

    return LeaveRequestListResponse(
        items=[_build_leave_response(leave) for leave in leaves],
        total=total,
    )
