# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from leave_workflow.models.enums import Role


class AuthContext(BaseModel):
    """Resolved actor: identity plus the set of roles it holds."""

    user_id: uuid.UUID
    roles: frozenset[Role] = frozenset({Role.EDUCATOR})
