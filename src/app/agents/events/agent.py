"""Event Agent: campus events in the coming week, grouped by day."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from itertools import groupby

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import EventRead

LOOKAHEAD = timedelta(days=7)
MAX_EVENTS = 10
DESCRIPTION_PREVIEW = 80
EVENTS_URL = "https://events.uta.edu"

NO_EVENTS_MESSAGE = (
    "No upcoming events found in the next week. Check the UTA events "
    "calendar for more information!"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def day_label(day: date, today: date) -> str:
    """'Today', 'Tomorrow' or a short date like 'Mon, Oct 20'."""
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return day.strftime("%a, %b %d")


class EventAgent(BaseAgent):
    """Lists events starting within the next seven days.

    Args:
        repository: Campus data store.
        clock: Returns the current time. Defaults to UTC now.
    """

    name = "event"
    description = "Upcoming campus events, workshops and activities"
    source = "event_agent"
    keywords = (
        "event", "activity", "happening", "today", "tomorrow", "weekend",
        "calendar", "schedule", "meeting", "workshop", "seminar",
        "conference", "party", "social", "club", "organization",
    )
    weight = 0.3
    ceiling = 1.0

    def __init__(
        self,
        repository: CampusRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__()
        self._repository = repository
        self._clock = clock or _utcnow

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        now = self._clock()
        try:
            events = await self._repository.list_upcoming_events(
                now, now + LOOKAHEAD, limit=MAX_EVENTS
            )
        except SQLAlchemyError as exc:
            self._logger.error("event_lookup_failed", error=str(exc))
            return self._failure(
                "I had trouble getting event information. Please check the "
                "UTA events calendar.",
                start,
            )

        if not events:
            return AgentResult(
                success=False,
                data={"events": [], "sources": []},
                message=NO_EVENTS_MESSAGE,
                confidence=0.85,
                processing_time=elapsed_ms(start),
                source=self.source,
            )

        return AgentResult(
            success=True,
            data={
                "events": [e.model_dump(mode="json") for e in events],
                "sources": [
                    make_citation(
                        title=e.title,
                        url=e.source_url or EVENTS_URL,
                        type="events",
                        location=e.location,
                        date=e.start_time.isoformat(),
                    )
                    for e in events
                ],
            },
            message=self._render(events, now.date()),
            confidence=0.85,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(events: list[EventRead], today: date) -> str:
        lines = ["**Upcoming Campus Events:**", ""]
        # Events arrive sorted by start_time, so groupby yields one group per day.
        for day, day_events in groupby(events, key=lambda e: e.start_time.date()):
            lines.append(f"**{day_label(day, today)}:**")
            for event in day_events:
                lines.append(f"- **{event.title}** - {event.start_time.strftime('%I:%M %p')}")
                if event.location:
                    lines.append(f"  Location: {event.location}")
                if event.description:
                    lines.append(f"  {event.description[:DESCRIPTION_PREVIEW]}...")
            lines.append("")
        return "\n".join(lines).rstrip()
