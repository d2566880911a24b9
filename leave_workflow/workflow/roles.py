# ruff: noqa: TC003
"""Role-based routing: where a new request starts and what an actor may list.

A reviewer never reviews their own submission at their own level, so each
reviewing role's request starts one level above the stage that role would
normally handle.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from leave_workflow.models.enums import Role, Stage, VisibilityScope

# First match wins.
INITIAL_STAGE_RULES: tuple[tuple[frozenset[Role], Stage], ...] = (
    (frozenset({Role.SCHOOL_HEAD, Role.DEPARTMENT_HEAD}), Stage.AWAITING_DEPARTMENT_REVIEW),
    (frozenset({Role.HR_STAFF}), Stage.AWAITING_HR_HEAD_REVIEW),
    (frozenset({Role.HR_HEAD}), Stage.AWAITING_DIRECTOR_REVIEW),
)
DEFAULT_INITIAL_STAGE = Stage.AWAITING_SCHOOL_HEAD

# First match wins.
VISIBILITY_RULES: tuple[tuple[frozenset[Role], VisibilityScope], ...] = (
    (frozenset({Role.HR_HEAD, Role.HR_STAFF, Role.SUPER_ADMIN}), VisibilityScope.ALL),
    (frozenset({Role.SCHOOL_HEAD}), VisibilityScope.WORK_SITE),
    (frozenset({Role.DEPARTMENT_HEAD}), VisibilityScope.DEPARTMENT),
    (frozenset({Role.EDUCATION_DIRECTOR}), VisibilityScope.ALL),
)


def has_any_role(roles: Iterable[Role], candidates: frozenset[Role]) -> bool:
    """Return True if any of ``roles`` is in ``candidates``."""
    return not candidates.isdisjoint(roles)


def initial_stage(roles: Iterable[Role]) -> Stage:
    """Return the review stage a new request from an actor with ``roles`` starts in."""
    held = frozenset(roles)
    for candidates, stage in INITIAL_STAGE_RULES:
        if has_any_role(held, candidates):
            return stage
    return DEFAULT_INITIAL_STAGE


def visibility_scope(roles: Iterable[Role]) -> VisibilityScope:
    """Classify which requests an actor with ``roles`` may list."""
    held = frozenset(roles)
    for candidates, scope in VISIBILITY_RULES:
        if has_any_role(held, candidates):
            return scope
    return VisibilityScope.OWN


@dataclass(frozen=True)
class ListingFilter:
    """A resolved visibility scope, ready to be turned into a query filter.

    ``match_nothing`` is set when a scoped role has no organizational unit to
    scope by; such a caller sees an empty list rather than everything.
    """

    scope: VisibilityScope
    requester_id: uuid.UUID | None = None
    work_site_id: uuid.UUID | None = None
    department_id: uuid.UUID | None = None
    match_nothing: bool = False


def listing_filter(
    roles: Iterable[Role],
    actor_id: uuid.UUID,
    work_site_id: uuid.UUID | None = None,
    department_id: uuid.UUID | None = None,
) -> ListingFilter:
    """Resolve the actor's visibility scope against their organizational attributes."""
    scope = visibility_scope(roles)
    if scope is VisibilityScope.ALL:
        return ListingFilter(scope=scope)
    if scope is VisibilityScope.WORK_SITE:
        if work_site_id is None:
            return ListingFilter(scope=scope, match_nothing=True)
        return ListingFilter(scope=scope, work_site_id=work_site_id)
    if scope is VisibilityScope.DEPARTMENT:
        if department_id is None:
            return ListingFilter(scope=scope, match_nothing=True)
        return ListingFilter(scope=scope, department_id=department_id)
    return ListingFilter(scope=scope, requester_id=actor_id)
