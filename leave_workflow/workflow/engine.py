# ruff: noqa: TC003
"""Approval state machine for leave requests.

Approve/reject decisions come from one static table keyed by
``(role, current stage, action)``. ``SUPER_ADMIN`` gets the union of every row,
standing in for whichever role the current stage expects. Role and stage are
both part of the key, so a reviewer holding the right role but acting on the
wrong stage finds no row, same as a reviewer holding the wrong role.

Nothing here touches the database. Callers persist the returned decision and
are responsible for applying it atomically against the stage they read.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol

from leave_workflow.models.enums import PENDING_STAGES, TERMINAL_STAGES, LeaveAction, Role, Stage
from leave_workflow.workflow.errors import (
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    WorkflowValidationError,
)
from leave_workflow.workflow.roles import initial_stage

if TYPE_CHECKING:
    from leave_workflow.schemas.leave import LeavePatch

ANNUAL_LEAVE = "annual leave"
HR_REJECTION_PLACEHOLDER = "Rejected"


class LeaveSubject(Protocol):
    """The attributes of a leave request the engine reads."""

    requester_id: uuid.UUID
    stage: str
    start_date: date
    end_date: date


class TransitionRule(NamedTuple):
    """One row of the transition table."""

    role: Role
    from_stage: Stage
    action: LeaveAction
    to_stage: Stage
    annual_leave_stage: Stage | None = None
    requires_reason: bool = False


_DIRECTOR_REVIEW_STAGES = (
    Stage.APPROVED_BY_HR_AWAITING_DIRECTOR,
    Stage.APPROVED_BY_HR_HEAD_AWAITING_DIRECTOR,
    Stage.APPROVED_BY_SCHOOL_HEAD_AWAITING_DIRECTOR,
    Stage.AWAITING_DIRECTOR_REVIEW,
)

TRANSITION_RULES: list[TransitionRule] = [
    # HR staff review requests from school and department heads.
    TransitionRule(
        Role.HR_STAFF,
        Stage.AWAITING_DEPARTMENT_REVIEW,
        LeaveAction.APPROVE,
        Stage.APPROVED_BY_HR_AWAITING_DIRECTOR,
    ),
    TransitionRule(Role.HR_STAFF, Stage.AWAITING_DEPARTMENT_REVIEW, LeaveAction.REJECT, Stage.REJECTED_BY_HR),
    # The HR head reviews requests from HR staff.
    TransitionRule(
        Role.HR_HEAD,
        Stage.AWAITING_HR_HEAD_REVIEW,
        LeaveAction.APPROVE,
        Stage.APPROVED_BY_HR_HEAD_AWAITING_DIRECTOR,
    ),
    TransitionRule(Role.HR_HEAD, Stage.AWAITING_HR_HEAD_REVIEW, LeaveAction.REJECT, Stage.REJECTED_BY_HR_HEAD),
    # School heads review educators; annual leave continues on to the director.
    TransitionRule(
        Role.SCHOOL_HEAD,
        Stage.AWAITING_SCHOOL_HEAD,
        LeaveAction.APPROVE,
        Stage.APPROVED_BY_SCHOOL_HEAD,
        annual_leave_stage=Stage.APPROVED_BY_SCHOOL_HEAD_AWAITING_DIRECTOR,
    ),
    TransitionRule(
        Role.SCHOOL_HEAD,
        Stage.AWAITING_SCHOOL_HEAD,
        LeaveAction.REJECT,
        Stage.REJECTED_BY_SCHOOL_HEAD,
        requires_reason=True,
    ),
    # The education director has the final word on everything escalated.
    *(
        TransitionRule(Role.EDUCATION_DIRECTOR, stage, LeaveAction.APPROVE, Stage.APPROVED_BY_DIRECTOR)
        for stage in _DIRECTOR_REVIEW_STAGES
    ),
    *(
        TransitionRule(
            Role.EDUCATION_DIRECTOR,
            stage,
            LeaveAction.REJECT,
            Stage.REJECTED_BY_DIRECTOR,
            requires_reason=True,
        )
        for stage in _DIRECTOR_REVIEW_STAGES
    ),
]

TRANSITIONS: dict[tuple[Role, Stage, LeaveAction], TransitionRule] = {
    (rule.role, rule.from_stage, rule.action): rule for rule in TRANSITION_RULES
}

SUPER_ADMIN_TRANSITIONS: dict[tuple[Stage, LeaveAction], TransitionRule] = {
    (rule.from_stage, rule.action): rule for rule in TRANSITION_RULES
}


@dataclass(frozen=True)
class TransitionDecision:
    """Outcome of a successful approve/reject.

    ``comment`` is the reviewer comment to store, or None to leave the stored
    comment as it is.
    """

    from_stage: Stage
    to_stage: Stage
    action: LeaveAction
    comment: str | None


def normalize_leave_type(leave_type: str) -> str:
    return leave_type.strip().lower()


def is_annual_leave(leave_type: str | None) -> bool:
    return leave_type is not None and normalize_leave_type(leave_type) == ANNUAL_LEAVE


def is_pending(stage: Stage | str) -> bool:
    """Return True while the requester may still edit or delete."""
    return Stage(stage) in PENDING_STAGES


def is_terminal(stage: Stage | str) -> bool:
    return Stage(stage) in TERMINAL_STAGES


def find_rule(stage: Stage | str, roles: Iterable[Role], action: LeaveAction) -> TransitionRule | None:
    """Look up the rule the actor may invoke, or None if there is none."""
    held = frozenset(roles)
    current = Stage(stage)
    if Role.SUPER_ADMIN in held:
        return SUPER_ADMIN_TRANSITIONS.get((current, action))
    for role in Role:
        if role in held:
            rule = TRANSITIONS.get((role, current, action))
            if rule is not None:
                return rule
    return None


def available_rules(stage: Stage | str, roles: Iterable[Role]) -> list[TransitionRule]:
    """Return the rules the actor may invoke at ``stage``, one per action."""
    held = frozenset(roles)
    rules = (find_rule(stage, held, action) for action in LeaveAction)
    return [rule for rule in rules if rule is not None]


def _validate_date_range(start_date: date, end_date: date, today: date, *, check_start: bool = True) -> None:
    if check_start and start_date < today:
        msg = "start_date cannot be in the past"
        raise WorkflowValidationError(msg)
    if end_date < start_date:
        msg = "end_date must be on or after start_date"
        raise WorkflowValidationError(msg)


def _ensure_owner_can_modify(request: LeaveSubject, actor_id: uuid.UUID, verb: str) -> None:
    if request.requester_id != actor_id:
        msg = f"Not authorized to {verb} this leave request"
        raise ForbiddenError(msg)
    if not is_pending(request.stage):
        msg = f"Cannot {verb} a leave request at stage {request.stage}"
        raise InvalidStateError(msg)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def submit(roles: Iterable[Role], start_date: date, end_date: date, today: date) -> Stage:
    """Validate a new request's dates and pick the stage it starts in."""
    _validate_date_range(start_date, end_date, today)
    return initial_stage(roles)


def transition(
    current_stage: Stage | str,
    roles: Iterable[Role],
    action: LeaveAction,
    leave_type: str | None = None,
    comment: str | None = None,
) -> TransitionDecision:
    """Decide the outcome of an approve/reject.

    Raises:
        InvalidTransitionError: no rule matches the roles, stage and action.
            Terminal stages have no rules, so every call on them lands here.
        WorkflowValidationError: a rejection that needs a reason got none.
    """
    held = frozenset(roles)
    stage = Stage(current_stage)
    rule = find_rule(stage, held, action)
    if rule is None:
        msg = f"Cannot {action.value.lower()} a leave request at stage {stage.value}"
        raise InvalidTransitionError(msg)

    to_stage = rule.to_stage
    if rule.annual_leave_stage is not None and is_annual_leave(leave_type):
        to_stage = rule.annual_leave_stage

    note = comment.strip() if comment else ""
    if action is LeaveAction.REJECT:
        if not note:
            if rule.requires_reason:
                msg = "A rejection reason is required"
                raise WorkflowValidationError(msg)
            note = HR_REJECTION_PLACEHOLDER
        return TransitionDecision(from_stage=stage, to_stage=to_stage, action=action, comment=note)

    return TransitionDecision(from_stage=stage, to_stage=to_stage, action=action, comment=note or None)


def edit(request: LeaveSubject, actor_id: uuid.UUID, patch: LeavePatch, today: date) -> dict[str, Any]:
    """Check an owner edit and return the field changes to apply.

    The stage is never part of the result.
    """
    _ensure_owner_can_modify(request, actor_id, "edit")

    changes = patch.model_dump(exclude_unset=True)
    for field_name in ("start_date", "end_date", "leave_type", "reason"):
        if field_name in changes and changes[field_name] is None:
            msg = f"{field_name} cannot be cleared"
            raise WorkflowValidationError(msg)

    _validate_date_range(
        changes.get("start_date", request.start_date),
        changes.get("end_date", request.end_date),
        today,
        check_start="start_date" in changes,
    )
    if "leave_type" in changes:
        changes["leave_type"] = normalize_leave_type(changes["leave_type"])
    return changes


def delete(request: LeaveSubject, actor_id: uuid.UUID) -> None:
    """Check that the owner may still delete the request."""
    _ensure_owner_can_modify(request, actor_id, "delete")
