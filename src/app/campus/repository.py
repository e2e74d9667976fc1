"""Campus data store repository -- async reads for the campus agents.

Provides CampusRepository with the session_factory callable pattern. Every
method opens one session, runs one statement and converts ORM rows into the
read schemas from campus/schemas.py. SQLAlchemy errors propagate to the
calling agent, which turns them into a failure AgentResult.

Search methods take pre-extracted search terms and match any term
case-insensitively against the relevant text columns. An empty term list
returns the first rows in display order.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Sequence
from datetime import date, datetime

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.campus.models import (
    AlertModel,
    CourseModel,
    DiningLocationModel,
    EventModel,
    FacilityOccupancyModel,
    FacultyModel,
    MenuModel,
    ParkingLotModel,
    ProgramModel,
    ReminderModel,
    ScholarshipModel,
    ServiceWaitTimeModel,
    ShuttleModel,
)
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

logger = structlog.get_logger(__name__)


def _term_filter(terms: Sequence[str], *columns):
    """OR of ``column ILIKE %term%`` over every (term, column) pair."""
    return or_(*(column.ilike(f"%{term}%") for term in terms for column in columns))


class CampusRepository:
    """Async read access to the campus data store.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    # ── Dining ──────────────────────────────────────────────────────────────

    async def list_dining_locations(self) -> list[DiningLocationRead]:
        """All dining locations ordered by name."""
        async for session in self._session_factory():
            stmt = select(DiningLocationModel).order_by(DiningLocationModel.name)
            result = await session.execute(stmt)
            return [DiningLocationRead.model_validate(m) for m in result.scalars().all()]

    async def list_menus(self, menu_date: date) -> list[MenuRead]:
        """Menus posted for the given day."""
        async for session in self._session_factory():
            stmt = select(MenuModel).where(MenuModel.menu_date == menu_date)
            result = await session.execute(stmt)
            return [MenuRead.model_validate(m) for m in result.scalars().all()]

    # ── Academics ───────────────────────────────────────────────────────────

    async def search_courses(self, terms: Sequence[str], limit: int = 5) -> list[CourseRead]:
        """Courses whose code or title matches any term."""
        async for session in self._session_factory():
            stmt = select(CourseModel).order_by(CourseModel.code).limit(limit)
            if terms:
                stmt = stmt.where(_term_filter(terms, CourseModel.title, CourseModel.code))
            result = await session.execute(stmt)
            return [CourseRead.model_validate(m) for m in result.scalars().all()]

    async def search_faculty(self, terms: Sequence[str], limit: int = 3) -> list[FacultyRead]:
        """Faculty whose name or department matches any term."""
        async for session in self._session_factory():
            stmt = select(FacultyModel).order_by(FacultyModel.name).limit(limit)
            if terms:
                stmt = stmt.where(_term_filter(terms, FacultyModel.name, FacultyModel.dept))
            result = await session.execute(stmt)
            return [FacultyRead.model_validate(m) for m in result.scalars().all()]

    async def search_programs(self, terms: Sequence[str], limit: int = 3) -> list[ProgramRead]:
        """Degree programs whose name or department matches any term."""
        async for session in self._session_factory():
            stmt = select(ProgramModel).order_by(ProgramModel.name).limit(limit)
            if terms:
                stmt = stmt.where(_term_filter(terms, ProgramModel.name, ProgramModel.dept))
            result = await session.execute(stmt)
            return [ProgramRead.model_validate(m) for m in result.scalars().all()]

    async def search_scholarships(
        self, terms: Sequence[str], limit: int = 5
    ) -> list[ScholarshipRead]:
        """Active scholarships matching any term, soonest deadline first."""
        async for session in self._session_factory():
            stmt = (
                select(ScholarshipModel)
                .where(ScholarshipModel.is_active.is_(True))
                .order_by(ScholarshipModel.deadline.asc().nulls_last(), ScholarshipModel.name)
                .limit(limit)
            )
            if terms:
                stmt = stmt.where(
                    _term_filter(
                        terms,
                        ScholarshipModel.name,
                        ScholarshipModel.description,
                        ScholarshipModel.eligibility,
                    )
                )
            result = await session.execute(stmt)
            return [ScholarshipRead.model_validate(m) for m in result.scalars().all()]

    # ── Events ──────────────────────────────────────────────────────────────

    async def list_upcoming_events(
        self, start: datetime, end: datetime, limit: int = 10
    ) -> list[EventRead]:
        """Events starting within [start, end], earliest first."""
        async for session in self._session_factory():
            stmt = (
                select(EventModel)
                .where(EventModel.start_time >= start, EventModel.start_time <= end)
                .order_by(EventModel.start_time.asc())
                .limit(limit)
            )
            result = await session.execute(stmt)
            return [EventRead.model_validate(m) for m in result.scalars().all()]

    # ── Live Campus Feeds ───────────────────────────────────────────────────

    async def list_active_shuttles(self) -> list[ShuttleRead]:
        """Active shuttles, most recently updated first."""
        async for session in self._session_factory():
            stmt = (
                select(ShuttleModel)
                .where(ShuttleModel.is_active.is_(True))
                .order_by(ShuttleModel.last_updated.desc())
            )
            result = await session.execute(stmt)
            return [ShuttleRead.model_validate(m) for m in result.scalars().all()]

    async def list_active_alerts(self) -> list[AlertRead]:
        """Active alerts, newest first."""
        async for session in self._session_factory():
            stmt = (
                select(AlertModel)
                .where(AlertModel.is_active.is_(True))
                .order_by(AlertModel.created_at.desc())
            )
            result = await session.execute(stmt)
            return [AlertRead.model_validate(m) for m in result.scalars().all()]

    async def list_open_parking(self) -> list[ParkingLotRead]:
        """Open lots, most available spaces first."""
        async for session in self._session_factory():
            stmt = (
                select(ParkingLotModel)
                .where(ParkingLotModel.is_open.is_(True))
                .order_by(ParkingLotModel.available_spaces.desc())
            )
            result = await session.execute(stmt)
            return [ParkingLotRead.model_validate(m) for m in result.scalars().all()]

    async def list_open_facilities(self) -> list[FacilityOccupancyRead]:
        """Open facilities, busiest first."""
        async for session in self._session_factory():
            stmt = (
                select(FacilityOccupancyModel)
                .where(FacilityOccupancyModel.status == "open")
                .order_by(FacilityOccupancyModel.occupancy_percentage.desc())
            )
            result = await session.execute(stmt)
            return [FacilityOccupancyRead.model_validate(m) for m in result.scalars().all()]

    async def list_service_wait_times(self) -> list[ServiceWaitTimeRead]:
        """Service desks that are not closed, shortest wait first."""
        async for session in self._session_factory():
            stmt = (
                select(ServiceWaitTimeModel)
                .where(ServiceWaitTimeModel.status != "closed")
                .order_by(ServiceWaitTimeModel.estimated_wait_minutes.asc())
            )
            result = await session.execute(stmt)
            return [ServiceWaitTimeRead.model_validate(m) for m in result.scalars().all()]

    # ── Reminders ───────────────────────────────────────────────────────────

    async def create_reminder(self, data: ReminderCreate) -> ReminderRead:
        """Persist a reminder.

        Args:
            data: ReminderCreate with title, time and type.

        Returns:
            ReminderRead with all persisted fields.
        """
        async for session in self._session_factory():
            model = ReminderModel(
                title=data.title,
                remind_at=data.remind_at,
                reminder_type=data.reminder_type,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            logger.info("reminder_created", reminder_id=model.id, remind_at=model.remind_at.isoformat())
            return ReminderRead.model_validate(model)
