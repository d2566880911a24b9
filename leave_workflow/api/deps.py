# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, status

from leave_workflow.exceptions import AppError
from leave_workflow.models.enums import Role
from leave_workflow.schemas.auth import AuthContext


def parse_roles(raw: str) -> frozenset[Role]:
    """Parse a comma-separated role header. Blank entries are ignored."""
    roles: set[Role] = set()
    for item in raw.split(","):
        name = item.strip().upper()
        if not name:
            continue
        try:
            roles.add(Role(name))
        except ValueError:
            raise AppError(f"Unknown role: {item.strip()}", status_code=status.HTTP_400_BAD_REQUEST) from None
    return frozenset(roles)


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_roles: str = Header(default=Role.EDUCATOR.value),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id, roles=parse_roles(x_roles))


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]
