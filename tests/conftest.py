"""Shared test fixtures for the campus assistant.

Provides:
- InMemoryCampusRepository: CampusRepository test double holding read schemas
- Sample campus data (dining, academics, events, live feeds)
- A fixed clock for agents whose answers depend on the current time
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from src.app.campus.schemas import (
    AlertRead,
    CourseRead,
    DiningLocationRead,
    EventRead,
    FacilityOccupancyRead,
    FacultyRead,
    MenuRead,
    ParkingLotRead,
    ProgramRead,
    ReminderCreate,
    ReminderRead,
    ScholarshipRead,
    ServiceWaitTimeRead,
    ShuttleRead,
)

FIXED_NOW = datetime(2026, 10, 14, 15, 0, tzinfo=timezone.utc)


# ── In-Memory Test Double ────────────────────────────────────────────────────


def _matches(terms: Sequence[str], *values: str | None) -> bool:
    if not terms:
        return True
    haystack = " ".join(v.lower() for v in values if v)
    return any(term.lower() in haystack for term in terms)


class InMemoryCampusRepository:
    """In-memory CampusRepository for testing without a database.

    Set ``fail_with`` to an exception instance to make every call raise it.
    Calls are recorded in ``calls`` as (method, args) tuples.
    """

    def __init__(self) -> None:
        self.dining_locations: list[DiningLocationRead] = []
        self.menus: list[MenuRead] = []
        self.courses: list[CourseRead] = []
        self.faculty: list[FacultyRead] = []
        self.programs: list[ProgramRead] = []
        self.scholarships: list[ScholarshipRead] = []
        self.events: list[EventRead] = []
        self.shuttles: list[ShuttleRead] = []
        self.alerts: list[AlertRead] = []
        self.parking: list[ParkingLotRead] = []
        self.facilities: list[FacilityOccupancyRead] = []
        self.wait_times: list[ServiceWaitTimeRead] = []
        self.reminders: list[ReminderRead] = []
        self.fail_with: Exception | None = None
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if self.fail_with is not None:
            raise self.fail_with

    async def list_dining_locations(self) -> list[DiningLocationRead]:
        self._record("list_dining_locations")
        return sorted(self.dining_locations, key=lambda d: d.name)

    async def list_menus(self, menu_date: date) -> list[MenuRead]:
        self._record("list_menus", menu_date)
        return [m for m in self.menus if m.menu_date == menu_date]

    async def search_courses(self, terms: Sequence[str], limit: int = 5) -> list[CourseRead]:
        self._record("search_courses", tuple(terms), limit)
        return [c for c in self.courses if _matches(terms, c.title, c.code)][:limit]

    async def search_faculty(self, terms: Sequence[str], limit: int = 3) -> list[FacultyRead]:
        self._record("search_faculty", tuple(terms), limit)
        return [f for f in self.faculty if _matches(terms, f.name, f.dept)][:limit]

    async def search_programs(self, terms: Sequence[str], limit: int = 3) -> list[ProgramRead]:
        self._record("search_programs", tuple(terms), limit)
        return [p for p in self.programs if _matches(terms, p.name, p.dept)][:limit]

    async def search_scholarships(
        self, terms: Sequence[str], limit: int = 5
    ) -> list[ScholarshipRead]:
        self._record("search_scholarships", tuple(terms), limit)
        hits = [
            s for s in self.scholarships
            if _matches(terms, s.name, s.description, s.eligibility)
        ]
        return hits[:limit]

    async def list_upcoming_events(
        self, start: datetime, end: datetime, limit: int = 10
    ) -> list[EventRead]:
        self._record("list_upcoming_events", start, end, limit)
        window = [e for e in self.events if start <= e.start_time <= end]
        return sorted(window, key=lambda e: e.start_time)[:limit]

    async def list_active_shuttles(self) -> list[ShuttleRead]:
        self._record("list_active_shuttles")
        return list(self.shuttles)

    async def list_active_alerts(self) -> list[AlertRead]:
        self._record("list_active_alerts")
        return list(self.alerts)

    async def list_open_parking(self) -> list[ParkingLotRead]:
        self._record("list_open_parking")
        return sorted(self.parking, key=lambda p: p.available_spaces, reverse=True)

    async def list_open_facilities(self) -> list[FacilityOccupancyRead]:
        self._record("list_open_facilities")
        return list(self.facilities)

    async def list_service_wait_times(self) -> list[ServiceWaitTimeRead]:
        self._record("list_service_wait_times")
        return list(self.wait_times)

    async def create_reminder(self, data: ReminderCreate) -> ReminderRead:
        self._record("create_reminder", data)
        reminder = ReminderRead(
            id=len(self.reminders) + 1,
            title=data.title,
            remind_at=data.remind_at,
            reminder_type=data.reminder_type,
            created_at=FIXED_NOW,
        )
        self.reminders.append(reminder)
        return reminder


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def repository() -> InMemoryCampusRepository:
    """Empty in-memory campus repository."""
    return InMemoryCampusRepository()


@pytest.fixture
def campus_repository() -> InMemoryCampusRepository:
    """In-memory campus repository with a small sample of every table."""
    repo = InMemoryCampusRepository()
    today = FIXED_NOW.date()

    repo.dining_locations = [
        DiningLocationRead(
            id=1, name="Maverick Cafe", campus_area="University Center",
            hours=[{"text": "7am - 9pm"}], is_open=True,
        ),
        DiningLocationRead(
            id=2, name="Connection Cafe", campus_area="Arlington Hall",
            hours=[], is_open=False,
        ),
    ]
    repo.menus = [
        MenuRead(
            id=1, location_id=1, menu_date=today,
            items={"Entrees": ["Pasta", "Tacos", "Curry", "Pizza"], "Sides": []},
        ),
        MenuRead(id=2, location_id=1, menu_date=today - timedelta(days=1), items={"Old": ["Soup"]}),
    ]
    repo.courses = [
        CourseRead(id=1, code="CSE 1310", title="Introduction to Computers and Programming", credits=3),
        CourseRead(id=2, code="MATH 1426", title="Calculus I", credits=4, prereqs="MATH 1323"),
    ]
    repo.faculty = [
        FacultyRead(
            id=1, name="Dr. Ada Byron", dept="Computer Science", office="ERB 640",
            email="ada@uta.edu", research_areas=["compilers"],
        ),
    ]
    repo.programs = [
        ProgramRead(id=1, name="Computer Science BS", level="Undergraduate", dept="Computer Science"),
    ]
    repo.scholarships = [
        ScholarshipRead(
            id=1, name="Maverick Engineering Scholarship", amount=2500.0,
            deadline=date(2026, 12, 1), eligibility="Engineering majors with a 3.0 GPA",
        ),
    ]
    repo.events = [
        EventRead(
            id=1, title="Career Fair", location="University Center",
            start_time=FIXED_NOW + timedelta(hours=2), description="Meet employers",
        ),
        EventRead(id=2, title="Robotics Club Meetup", start_time=FIXED_NOW + timedelta(days=1)),
        EventRead(id=3, title="Homecoming Game", start_time=FIXED_NOW + timedelta(days=3)),
        EventRead(id=4, title="Spring Gala", start_time=FIXED_NOW + timedelta(days=30)),
    ]
    repo.shuttles = [
        ShuttleRead(
            id=1, route_name="Campus Loop", next_stop="University Center",
            eta_minutes=4, capacity_status="medium", last_updated=FIXED_NOW,
        ),
    ]
    repo.alerts = [
        AlertRead(
            id=1, title="Lot 49 resurfacing", message="Lot 49 closed for maintenance",
            severity="low", alert_type="maintenance", affected_areas=["Lot 49"], created_at=FIXED_NOW,
        ),
        AlertRead(
            id=2, title="Severe weather", message="Shelter in place",
            severity="critical", alert_type="weather", created_at=FIXED_NOW - timedelta(hours=1),
        ),
    ]
    repo.parking = [
        ParkingLotRead(id=1, lot_name="Lot 50", total_spaces=100, available_spaces=50, last_updated=FIXED_NOW),
        ParkingLotRead(id=2, lot_name="West Garage", total_spaces=100, available_spaces=20, last_updated=FIXED_NOW),
        ParkingLotRead(id=3, lot_name="Lot 26", total_spaces=100, available_spaces=5, last_updated=FIXED_NOW),
    ]
    repo.facilities = [
        FacilityOccupancyRead(
            id=1, facility_name="Study Commons", building_name="Central Library",
            current_occupancy=90, max_capacity=100, occupancy_percentage=90.0,
        ),
    ]
    repo.wait_times = [
        ServiceWaitTimeRead(id=1, location_name="Registrar", estimated_wait_minutes=12, queue_length=6),
    ]
    return repo


@pytest.fixture
def failing_repository() -> InMemoryCampusRepository:
    """Repository whose every call raises a database error."""
    repo = InMemoryCampusRepository()
    repo.fail_with = OperationalError("SELECT 1", {}, Exception("connection refused"))
    return repo


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
