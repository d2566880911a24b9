"""Tests for request payload validation."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from leave_workflow.api.deps import parse_roles
from leave_workflow.exceptions import AppError
from leave_workflow.models.enums import Role
from leave_workflow.schemas.leave import LeavePatch, RejectPayload, SubmitLeavePayload


def test_submit_payload_accepts_single_day() -> None:
    payload = SubmitLeavePayload(
        start_date=date(2026, 5, 4),
        end_date=date(2026, 5, 4),
        leave_type="sick leave",
        reason="Flu",
    )
    assert payload.attachment_ref is None


def test_submit_payload_rejects_inverted_range() -> None:
    with pytest.raises(ValidationError, match="end_date must be on or after start_date"):
        SubmitLeavePayload(
            start_date=date(2026, 5, 5),
            end_date=date(2026, 5, 4),
            leave_type="sick leave",
            reason="Flu",
        )


@pytest.mark.parametrize("value", ["", "   ", "\t\n"])
@pytest.mark.parametrize("field", ["leave_type", "reason"])
def test_submit_payload_requires_text(field: str, value: str) -> None:
    data = {"start_date": "2026-05-04", "end_date": "2026-05-04", "leave_type": "sick leave", "reason": "Flu"}
    data[field] = value
    with pytest.raises(ValidationError):
        SubmitLeavePayload.model_validate(data)


@pytest.mark.parametrize("field", ["leave_type", "reason"])
def test_patch_rejects_blank_text(field: str) -> None:
    with pytest.raises(ValidationError):
        LeavePatch.model_validate({field: "   "})


def test_payload_text_is_stripped() -> None:
    payload = SubmitLeavePayload(
        start_date=date(2026, 5, 4),
        end_date=date(2026, 5, 4),
        leave_type="  sick leave ",
        reason=" Flu ",
    )
    assert payload.leave_type == "sick leave"
    assert payload.reason == "Flu"
    assert LeavePatch.model_validate({"reason": " Better "}).reason == "Better"


def test_patch_forbids_stage() -> None:
    with pytest.raises(ValidationError):
        LeavePatch.model_validate({"stage": "APPROVED_BY_DIRECTOR"})


def test_patch_tracks_only_given_fields() -> None:
    patch = LeavePatch.model_validate({"reason": "Updated"})
    assert patch.model_dump(exclude_unset=True) == {"reason": "Updated"}


def test_patch_checks_range_when_both_dates_given() -> None:
    with pytest.raises(ValidationError):
        LeavePatch(start_date=date(2026, 5, 5), end_date=date(2026, 5, 4))


def test_reject_payload_reason_optional() -> None:
    assert RejectPayload().reason is None


def test_parse_roles() -> None:
    assert parse_roles("school_head, HR_STAFF,,") == frozenset({Role.SCHOOL_HEAD, Role.HR_STAFF})
    assert parse_roles("") == frozenset()


def test_parse_roles_unknown() -> None:
    with pytest.raises(AppError) as exc_info:
        parse_roles("EDUCATOR,JANITOR")
    assert exc_info.value.status_code == 400
