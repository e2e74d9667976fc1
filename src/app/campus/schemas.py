"""Read schemas for the campus data store.

Agents only ever see these pydantic models, never ORM instances, so test
doubles can return them directly. Field names follow the table columns in
campus/models.py.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CampusRead(BaseModel):
    """Common config for read schemas built from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


# ── Dining ──────────────────────────────────────────────────────────────────


class DiningLocationRead(CampusRead):
    id: int
    name: str
    campus_area: str | None = None
    hours: list[Any] = Field(default_factory=list)
    is_open: bool = False
    updated_at: datetime | None = None

    def hours_text(self) -> str | None:
        """Display text of the first posted hours entry, if any."""
        if not self.hours:
            return None
        first = self.hours[0]
        if isinstance(first, dict) and first.get("text"):
            return str(first["text"])
        return "Check website for hours"


class MenuRead(CampusRead):
    id: int
    location_id: int | None = None
    menu_date: date
    items: dict[str, Any] = Field(default_factory=dict)


# ── Academics ───────────────────────────────────────────────────────────────


class CourseRead(CampusRead):
    id: int
    code: str | None = None
    title: str | None = None
    credits: int | None = None
    prereqs: str | None = None
    description: str | None = None
    catalog_url: str | None = None


class FacultyRead(CampusRead):
    id: int
    name: str
    dept: str | None = None
    office: str | None = None
    office_hours: str | None = None
    email: str | None = None
    phone: str | None = None
    research_areas: list[str] = Field(default_factory=list)
    profile_url: str | None = None


class ProgramRead(CampusRead):
    id: int
    name: str
    level: str | None = None
    dept: str | None = None
    overview: str | None = None
    catalog_url: str | None = None


class ScholarshipRead(CampusRead):
    id: int
    name: str
    description: str | None = None
    amount: float | None = None
    deadline: date | None = None
    eligibility: str | None = None
    url: str | None = None


# ── Events ──────────────────────────────────────────────────────────────────


class EventRead(CampusRead):
    id: int
    title: str
    description: str | None = None
    location: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    source_url: str | None = None


# ── Live Campus Feeds ───────────────────────────────────────────────────────


class ShuttleRead(CampusRead):
    id: int
    route_name: str
    next_stop: str | None = None
    eta_minutes: int | None = None
    capacity_status: str = "low"
    last_updated: datetime


class AlertRead(CampusRead):
    id: int
    title: str
    message: str
    severity: str = "low"
    alert_type: str | None = None
    affected_areas: list[str] = Field(default_factory=list)
    expires_at: datetime | None = None
    created_at: datetime


class ParkingLotRead(CampusRead):
    id: int
    lot_name: str
    total_spaces: int
    available_spaces: int
    permit_type: str | None = None
    hourly_rate: float | None = None
    last_updated: datetime

    @property
    def availability_percentage(self) -> float:
        if self.total_spaces <= 0:
            return 0.0
        return self.available_spaces / self.total_spaces * 100


class FacilityOccupancyRead(CampusRead):
    id: int
    facility_name: str
    building_name: str | None = None
    facility_type: str = "study_space"
    current_occupancy: int = 0
    max_capacity: int
    occupancy_percentage: float = 0.0
    status: str = "open"


class ServiceWaitTimeRead(CampusRead):
    id: int
    location_name: str
    estimated_wait_minutes: int = 0
    queue_length: int = 0
    status: str = "open"


# ── Reminders ───────────────────────────────────────────────────────────────


class ReminderCreate(BaseModel):
    """Schema for persisting a reminder."""

    title: str = Field(min_length=1, max_length=300)
    remind_at: datetime
    reminder_type: str = "event"


class ReminderRead(CampusRead):
    id: int
    title: str
    remind_at: datetime
    reminder_type: str = "event"
    created_at: datetime | None = None
