from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Organizational role held by an actor."""

    EDUCATOR = "EDUCATOR"
    DEPARTMENT_HEAD = "DEPARTMENT_HEAD"
    SCHOOL_HEAD = "SCHOOL_HEAD"
    HR_STAFF = "HR_STAFF"
    HR_HEAD = "HR_HEAD"
    EDUCATION_DIRECTOR = "EDUCATION_DIRECTOR"
    SUPER_ADMIN = "SUPER_ADMIN"


class Stage(enum.StrEnum):
    """Workflow position of a leave request."""

    # Pending: the requester may still edit or delete.
    AWAITING_SCHOOL_HEAD = "AWAITING_SCHOOL_HEAD"
    AWAITING_DEPARTMENT_REVIEW = "AWAITING_DEPARTMENT_REVIEW"
    AWAITING_HR_HEAD_REVIEW = "AWAITING_HR_HEAD_REVIEW"
    AWAITING_DIRECTOR_REVIEW = "AWAITING_DIRECTOR_REVIEW"

    # Conditionally approved, waiting on the education director.
    APPROVED_BY_HR_AWAITING_DIRECTOR = "APPROVED_BY_HR_AWAITING_DIRECTOR"
    APPROVED_BY_HR_HEAD_AWAITING_DIRECTOR = "APPROVED_BY_HR_HEAD_AWAITING_DIRECTOR"
    APPROVED_BY_SCHOOL_HEAD_AWAITING_DIRECTOR = "APPROVED_BY_SCHOOL_HEAD_AWAITING_DIRECTOR"

    # Terminal.
    APPROVED_BY_SCHOOL_HEAD = "APPROVED_BY_SCHOOL_HEAD"
    APPROVED_BY_DIRECTOR = "APPROVED_BY_DIRECTOR"
    REJECTED_BY_HR = "REJECTED_BY_HR"
    REJECTED_BY_HR_HEAD = "REJECTED_BY_HR_HEAD"
    REJECTED_BY_SCHOOL_HEAD = "REJECTED_BY_SCHOOL_HEAD"
    REJECTED_BY_DIRECTOR = "REJECTED_BY_DIRECTOR"


PENDING_STAGES: frozenset[Stage] = frozenset(
    {
        Stage.AWAITING_SCHOOL_HEAD,
        Stage.AWAITING_DEPARTMENT_REVIEW,
        Stage.AWAITING_HR_HEAD_REVIEW,
        Stage.AWAITING_DIRECTOR_REVIEW,
    }
)

AWAITING_DIRECTOR_STAGES: frozenset[Stage] = frozenset(
    {
        Stage.APPROVED_BY_HR_AWAITING_DIRECTOR,
        Stage.APPROVED_BY_HR_HEAD_AWAITING_DIRECTOR,
        Stage.APPROVED_BY_SCHOOL_HEAD_AWAITING_DIRECTOR,
    }
)

TERMINAL_STAGES: frozenset[Stage] = frozenset(Stage) - PENDING_STAGES - AWAITING_DIRECTOR_STAGES


class LeaveAction(enum.StrEnum):
    """Reviewer action on a leave request."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"


class VisibilityScope(enum.StrEnum):
    """Which requests an actor may list."""

    ALL = "ALL"
    WORK_SITE = "WORK_SITE"
    DEPARTMENT = "DEPARTMENT"
    OWN = "OWN"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    LEAVE_REQUEST = "LEAVE_REQUEST"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    SUBMIT = "SUBMIT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
