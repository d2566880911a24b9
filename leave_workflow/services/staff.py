# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class StaffInfo(BaseModel):
    """Organizational placement of a staff member, from the staff directory."""

    id: uuid.UUID
    work_site_id: uuid.UUID | None = None  # school the staff member works at
    department_id: uuid.UUID | None = None


@runtime_checkable
class StaffDirectory(Protocol):
    """Interface for the staff directory."""

    async def get_staff(self, staff_id: uuid.UUID) -> StaffInfo | None:
        """Fetch staff placement. Returns None if not found."""
        ...


class InMemoryStaffDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._staff: dict[uuid.UUID, StaffInfo] = {}

    def seed(self, staff: StaffInfo) -> None:
        """Seed a staff member for testing."""
        self._staff[staff.id] = staff

    async def get_staff(self, staff_id: uuid.UUID) -> StaffInfo | None:
        """Fetch staff placement. Returns None if not found."""
        return self._staff.get(staff_id)


_staff_directory: StaffDirectory = InMemoryStaffDirectory()


def get_staff_directory() -> StaffDirectory:
    """Return the active staff directory."""
    return _staff_directory


def set_staff_directory(directory: StaffDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _staff_directory
    _staff_directory = directory
