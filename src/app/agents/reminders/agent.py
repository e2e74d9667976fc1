"""Reminder Agent: parses "remind me ..." requests and stores the reminder.

Extraction is rule-based:
- title: the text after the trigger phrase, minus any time expression
- time: "in N minutes|hours", "tomorrow" (optionally "at 3pm"), "at 3pm",
  otherwise one hour from now. A bare hour today ("at 5") is its next
  occurrence, 05:00 or 17:00, rolling over to tomorrow when both have passed
- type: "class" when the query mentions a class, else "event"

Reminders in the past are refused. Stored reminders come back with a Google
Calendar template link so the user can add them to their own calendar.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms, keyword_matches
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import ReminderCreate

CALENDAR_URL = "https://calendar.google.com/calendar/render"
DEFAULT_LEAD = timedelta(hours=1)
EVENT_DURATION = timedelta(hours=1)
TOMORROW_DEFAULT_HOUR = 9
MAX_TITLE_LENGTH = 300

TITLE_TRIGGERS = (
    "remind me", "set reminder", "alarm for", "notify me",
    "don't forget", "remember to", "schedule reminder",
)

_RELATIVE_RE = re.compile(r"\bin\s+(\d+)\s*(minutes?|mins?|hours?|hrs?)\b", re.IGNORECASE)
_TOMORROW_RE = re.compile(r"\btomorrow\b", re.IGNORECASE)
_CLOCK_RE = re.compile(r"\bat\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b", re.IGNORECASE)
_LEADING_FILLER_RE = re.compile(r"^(?:to|about|that|of|for)\s+", re.IGNORECASE)


@dataclass(frozen=True)
class ReminderRequest:
    """What a reminder query asks for."""

    title: str
    remind_at: datetime
    reminder_type: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clock_time(match: re.Match[str]) -> tuple[int, int, bool] | None:
    """(hour, minute, has_meridiem) of an "at 3pm" match, None when invalid."""
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = (match.group(3) or "").lower()
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    if hour > 23 or minute > 59:
        return None
    return hour, minute, bool(meridiem)


def _next_bare_hour(now: datetime, hour: int, minute: int) -> datetime:
    # "at 5" is 05:00 or 17:00, whichever comes first after now.
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    candidates = (
        midnight + timedelta(days=day, hours=h, minutes=minute)
        for day in (0, 1)
        for h in (hour % 12, hour % 12 + 12)
    )
    return min(c for c in candidates if c > now)


def parse_reminder(query: str, now: datetime) -> ReminderRequest:
    """Extract title, time and type from a reminder query.

    Args:
        query: Raw user query.
        now: Reference time for relative expressions.

    Returns:
        ReminderRequest. ``title`` is empty when nothing follows the trigger.
    """
    lowered = query.lower()
    text = query
    for trigger in TITLE_TRIGGERS:
        index = lowered.find(trigger)
        if index != -1:
            text = query[index + len(trigger):]
            break

    remind_at = now + DEFAULT_LEAD
    clock = _CLOCK_RE.search(text)
    clock_time = _clock_time(clock) if clock else None

    relative = _RELATIVE_RE.search(text)
    if relative:
        amount = int(relative.group(1))
        unit = relative.group(2).lower()
        delta = timedelta(hours=amount) if unit.startswith("h") else timedelta(minutes=amount)
        remind_at = now + delta
        text = _RELATIVE_RE.sub("", text)
    elif _TOMORROW_RE.search(text):
        hour, minute = clock_time[:2] if clock_time else (TOMORROW_DEFAULT_HOUR, 0)
        remind_at = (now + timedelta(days=1)).replace(hour=hour, minute=minute, second=0, microsecond=0)
        text = _TOMORROW_RE.sub("", text)
    elif clock_time:
        hour, minute, has_meridiem = clock_time
        if has_meridiem or not 1 <= hour <= 12:
            remind_at = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        else:
            remind_at = _next_bare_hour(now, hour, minute)

    if clock:
        text = _CLOCK_RE.sub("", text)

    title = " ".join(text.split()).strip(" .,!?:;")
    title = _LEADING_FILLER_RE.sub("", title).strip()[:MAX_TITLE_LENGTH]
    reminder_type = "class" if keyword_matches(query, ("class",)) else "event"
    return ReminderRequest(title=title, remind_at=remind_at, reminder_type=reminder_type)


def calendar_url(title: str, start: datetime, reminder_type: str) -> str:
    """Google Calendar "add event" template link for a one-hour slot."""

    def fmt(dt: datetime) -> str:
        return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    params = {
        "action": "TEMPLATE",
        "text": f"UTA {reminder_type}: {title}",
        "dates": f"{fmt(start)}/{fmt(start + EVENT_DURATION)}",
        "details": f"UTA {reminder_type} reminder set via the campus assistant",
    }
    return f"{CALENDAR_URL}?{urlencode(params)}"


class ReminderAgent(BaseAgent):
    """Creates reminders from natural-language requests.

    Args:
        repository: Campus data store the reminder is written to.
        clock: Returns the current time. Defaults to UTC now.
    """

    name = "reminder"
    description = "Reminders and alarms for classes and events"
    source = "reminder_agent"
    keywords = (
        "remind me", "set reminder", "alarm for", "notify me",
        "don't forget", "schedule reminder", "remember to",
    )
    weight = 0.6
    ceiling = 0.95

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
        request = parse_reminder(query, now)

        if not request.title:
            return self._failure(
                "I couldn't identify what you'd like me to remind you about. "
                "Could you be more specific about the event and time?",
                start,
                confidence=0.2,
            )

        if request.remind_at <= now:
            return self._failure(
                "Cannot set reminder for past events.",
                start,
                confidence=0.8,
            )

        try:
            reminder = await self._repository.create_reminder(
                ReminderCreate(
                    title=request.title,
                    remind_at=request.remind_at,
                    reminder_type=request.reminder_type,
                )
            )
        except SQLAlchemyError as exc:
            self._logger.error("reminder_create_failed", error=str(exc))
            return self._failure(
                "I had trouble setting up your reminder. Please try again.",
                start,
                source="reminder_agent_error",
            )

        url = calendar_url(reminder.title, reminder.remind_at, reminder.reminder_type)
        when = reminder.remind_at.strftime("%a, %b %d at %I:%M %p UTC")
        return AgentResult(
            success=True,
            data={
                "reminder": reminder.model_dump(mode="json"),
                "calendar_url": url,
                "action": "reminder_set",
                "sources": [
                    make_citation(
                        title=f"Add \"{reminder.title}\" to Google Calendar",
                        url=url,
                        type="general",
                        date=reminder.remind_at.isoformat(),
                    )
                ],
            },
            message=f"Reminder set for \"{reminder.title}\" on {when}. Add it to your calendar: {url}",
            confidence=0.8,
            processing_time=elapsed_ms(start),
            source=self.source,
        )
