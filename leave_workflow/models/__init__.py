from sqlmodel import SQLModel

from leave_workflow.models.audit import AuditLog
from leave_workflow.models.base import TimestampMixin, UUIDBase
from leave_workflow.models.enums import (
    AWAITING_DIRECTOR_STAGES,
    PENDING_STAGES,
    TERMINAL_STAGES,
    AuditAction,
    AuditEntityType,
    LeaveAction,
    Role,
    Stage,
    VisibilityScope,
)
from leave_workflow.models.leave import LeaveRequest

__all__ = [
    "AWAITING_DIRECTOR_STAGES",
    "PENDING_STAGES",
    "TERMINAL_STAGES",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "LeaveAction",
    "LeaveRequest",
    "Role",
    "SQLModel",
    "Stage",
    "TimestampMixin",
    "UUIDBase",
    "VisibilityScope",
]
