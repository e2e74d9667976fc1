"""Campus data store persistence models.

SQLAlchemy models on CampusBase, grouped by the agent family that reads them:
- Dining: DiningLocationModel, MenuModel
- Academics: CourseModel, FacultyModel, ProgramModel, ScholarshipModel
- Events: EventModel
- Live campus feeds: ShuttleModel, AlertModel, ParkingLotModel,
  FacilityOccupancyModel, ServiceWaitTimeModel
- Reminders: ReminderModel (the only table agents write to)

List-valued columns (hours, menu items, research areas, tags, affected areas)
are stored as JSON so the schema stays portable across backends.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.app.core.database import CampusBase

# ── Dining ──────────────────────────────────────────────────────────────────


class DiningLocationModel(CampusBase):
    """A campus dining location and its posted hours."""

    __tablename__ = "dining_locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    campus_area: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hours: Mapped[list] = mapped_column(JSON, default=list)
    is_open: Mapped[bool] = mapped_column(Boolean, default=False)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )


class MenuModel(CampusBase):
    """Menu for one location on one day. ``items`` maps category -> item names."""

    __tablename__ = "menus"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("dining_locations.id", ondelete="CASCADE"), nullable=True
    )
    menu_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    items: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


# ── Academics ───────────────────────────────────────────────────────────────


class CourseModel(CampusBase):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    credits: Mapped[int | None] = mapped_column(Integer, nullable=True)
    prereqs: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    catalog_url: Mapped[str | None] = mapped_column(String(500), nullable=True)


class FacultyModel(CampusBase):
    __tablename__ = "faculty"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    dept: Mapped[str | None] = mapped_column(String(200), nullable=True)
    office: Mapped[str | None] = mapped_column(String(100), nullable=True)
    office_hours: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    research_areas: Mapped[list] = mapped_column(JSON, default=list)
    profile_url: Mapped[str | None] = mapped_column(String(500), nullable=True)


class ProgramModel(CampusBase):
    __tablename__ = "programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dept: Mapped[str | None] = mapped_column(String(200), nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    catalog_url: Mapped[str | None] = mapped_column(String(500), nullable=True)


class ScholarshipModel(CampusBase):
    """A scholarship or financial aid award open to applicants."""

    __tablename__ = "scholarships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    eligibility: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


# ── Events ──────────────────────────────────────────────────────────────────


class EventModel(CampusBase):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(300), nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    source_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


# ── Live Campus Feeds ───────────────────────────────────────────────────────


class ShuttleModel(CampusBase):
    """Latest tracking fix for one shuttle route."""

    __tablename__ = "shuttle_tracking"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    route_name: Mapped[str] = mapped_column(String(200), nullable=False)
    next_stop: Mapped[str | None] = mapped_column(String(200), nullable=True)
    eta_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    capacity_status: Mapped[str] = mapped_column(String(20), default="low")  # low | medium | high
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


class AlertModel(CampusBase):
    __tablename__ = "live_alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), default="low")  # critical | high | medium | low
    alert_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    affected_areas: Mapped[list] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


class ParkingLotModel(CampusBase):
    __tablename__ = "parking_availability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lot_name: Mapped[str] = mapped_column(String(200), nullable=False)
    total_spaces: Mapped[int] = mapped_column(Integer, nullable=False)
    available_spaces: Mapped[int] = mapped_column(Integer, nullable=False)
    permit_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hourly_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_open: Mapped[bool] = mapped_column(Boolean, default=True)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


class FacilityOccupancyModel(CampusBase):
    __tablename__ = "facility_occupancy"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    facility_name: Mapped[str] = mapped_column(String(200), nullable=False)
    building_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    facility_type: Mapped[str] = mapped_column(String(50), default="study_space")
    current_occupancy: Mapped[int] = mapped_column(Integer, default=0)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    occupancy_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default="open")
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


class ServiceWaitTimeModel(CampusBase):
    __tablename__ = "service_wait_times"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_name: Mapped[str] = mapped_column(String(200), nullable=False)
    estimated_wait_minutes: Mapped[int] = mapped_column(Integer, default=0)
    queue_length: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="open")  # open | busy | closed
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )


# ── Reminders ───────────────────────────────────────────────────────────────


class ReminderModel(CampusBase):
    """A reminder created through the assistant."""

    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    remind_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    reminder_type: Mapped[str] = mapped_column(String(20), default="event")  # event | class
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
