"""Typed errors raised by the approval workflow.

Every error is recoverable: the request record is never partially updated, and
the caller can retry after correcting the triggering condition.
"""

from __future__ import annotations

from http import HTTPStatus


class WorkflowError(Exception):
    """Base class for workflow decisions that reject an operation."""

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ForbiddenError(WorkflowError):
    """The actor may not act on this request."""

    status_code = HTTPStatus.FORBIDDEN


class InvalidStateError(WorkflowError):
    """The request's stage no longer allows edits or deletion by its owner."""

    status_code = HTTPStatus.CONFLICT


class InvalidTransitionError(WorkflowError):
    """No approve/reject rule matches the actor's roles and the current stage."""

    status_code = HTTPStatus.CONFLICT


class WorkflowValidationError(WorkflowError):
    """Input is missing or malformed (rejection reason, date range)."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY


class NotFoundError(WorkflowError):
    """The request id does not resolve."""

    status_code = HTTPStatus.NOT_FOUND
