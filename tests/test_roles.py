"""Tests for initial-stage routing and visibility scoping."""

from __future__ import annotations

import uuid

import pytest

from leave_workflow.models.enums import Role, Stage, VisibilityScope
from leave_workflow.workflow.roles import initial_stage, listing_filter, visibility_scope

ACTOR_ID = uuid.uuid4()
WORK_SITE_ID = uuid.uuid4()
DEPARTMENT_ID = uuid.uuid4()


# ---------------------------------------------------------------------------
# initial_stage
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("roles", "expected"),
    [
        ({Role.SCHOOL_HEAD}, Stage.AWAITING_DEPARTMENT_REVIEW),
        ({Role.DEPARTMENT_HEAD}, Stage.AWAITING_DEPARTMENT_REVIEW),
        ({Role.HR_STAFF}, Stage.AWAITING_HR_HEAD_REVIEW),
        ({Role.HR_HEAD}, Stage.AWAITING_DIRECTOR_REVIEW),
        (set(), Stage.AWAITING_SCHOOL_HEAD),
        ({Role.EDUCATOR}, Stage.AWAITING_SCHOOL_HEAD),
        ({Role.EDUCATION_DIRECTOR}, Stage.AWAITING_SCHOOL_HEAD),
        ({Role.SUPER_ADMIN}, Stage.AWAITING_SCHOOL_HEAD),
    ],
)
def test_initial_stage_by_role(roles: set[Role], expected: Stage) -> None:
    assert initial_stage(roles) == expected


def test_initial_stage_priority_heads_before_hr() -> None:
    assert initial_stage({Role.HR_HEAD, Role.SCHOOL_HEAD}) == Stage.AWAITING_DEPARTMENT_REVIEW
    assert initial_stage({Role.HR_HEAD, Role.HR_STAFF}) == Stage.AWAITING_HR_HEAD_REVIEW


def test_initial_stage_ignores_insertion_order() -> None:
    assert initial_stage([Role.EDUCATOR, Role.HR_STAFF]) == initial_stage([Role.HR_STAFF, Role.EDUCATOR])


# ---------------------------------------------------------------------------
# visibility_scope / listing_filter
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("roles", "expected"),
    [
        ({Role.HR_HEAD}, VisibilityScope.ALL),
        ({Role.HR_STAFF}, VisibilityScope.ALL),
        ({Role.SUPER_ADMIN}, VisibilityScope.ALL),
        ({Role.EDUCATION_DIRECTOR}, VisibilityScope.ALL),
        ({Role.SCHOOL_HEAD}, VisibilityScope.WORK_SITE),
        ({Role.DEPARTMENT_HEAD}, VisibilityScope.DEPARTMENT),
        ({Role.EDUCATOR}, VisibilityScope.OWN),
        (set(), VisibilityScope.OWN),
    ],
)
def test_visibility_scope_by_role(roles: set[Role], expected: VisibilityScope) -> None:
    assert visibility_scope(roles) == expected


def test_visibility_scope_hr_wins_over_school_head() -> None:
    assert visibility_scope({Role.SCHOOL_HEAD, Role.HR_STAFF}) == VisibilityScope.ALL


def test_listing_filter_all_has_no_constraints() -> None:
    result = listing_filter({Role.HR_HEAD}, ACTOR_ID)
    assert result.scope == VisibilityScope.ALL
    assert result.requester_id is None
    assert result.work_site_id is None
    assert result.department_id is None
    assert not result.match_nothing


def test_listing_filter_school_head_scoped_to_work_site() -> None:
    result = listing_filter({Role.SCHOOL_HEAD}, ACTOR_ID, work_site_id=WORK_SITE_ID, department_id=DEPARTMENT_ID)
    assert result.work_site_id == WORK_SITE_ID
    assert result.department_id is None
    assert not result.match_nothing


def test_listing_filter_department_head_scoped_to_department() -> None:
    result = listing_filter({Role.DEPARTMENT_HEAD}, ACTOR_ID, work_site_id=WORK_SITE_ID, department_id=DEPARTMENT_ID)
    assert result.department_id == DEPARTMENT_ID
    assert result.work_site_id is None


@pytest.mark.parametrize("roles", [{Role.SCHOOL_HEAD}, {Role.DEPARTMENT_HEAD}])
def test_listing_filter_fails_closed_without_placement(roles: set[Role]) -> None:
    result = listing_filter(roles, ACTOR_ID)
    assert result.match_nothing


def test_listing_filter_own_requests_for_educator() -> None:
    result = listing_filter({Role.EDUCATOR}, ACTOR_ID, work_site_id=WORK_SITE_ID)
    assert result.scope == VisibilityScope.OWN
    assert result.requester_id == ACTOR_ID
    assert result.work_site_id is None
