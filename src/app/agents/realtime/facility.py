"""Facility Agent: live facility occupancy and service desk wait times."""

from __future__ import annotations

import time

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import FacilityOccupancyRead, ServiceWaitTimeRead


def occupancy_status(percentage: float) -> str:
    if percentage > 80:
        return "busy"
    if percentage > 60:
        return "moderate"
    return "quiet"


def wait_status(minutes: int) -> str:
    if minutes <= 5:
        return "quick"
    if minutes <= 15:
        return "moderate"
    return "long"


class FacilityAgent(BaseAgent):
    """Reports how busy open facilities are and how long service lines are."""

    name = "facility"
    description = "Live facility occupancy and service wait times"
    source = "facility_agent_realtime"
    keywords = (
        "library", "gym", "lab", "computer", "study", "room", "busy", "crowded",
        "wait", "line", "queue", "registrar", "financial aid", "office hours",
        "occupancy", "capacity", "available", "full",
    )
    weight = 0.35
    ceiling = 0.95

    def __init__(self, repository: CampusRepository) -> None:
        super().__init__()
        self._repository = repository

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        try:
            facilities = await self._repository.list_open_facilities()
            wait_times = await self._repository.list_service_wait_times()
        except SQLAlchemyError as exc:
            self._logger.error("facility_lookup_failed", error=str(exc))
            return self._failure(
                "I had trouble getting real-time facility information. Please try again.",
                start,
                source="facility_agent_error",
            )

        sources = [
            make_citation(
                title=f.facility_name,
                description=f"{f.occupancy_percentage:.0f}% occupied",
                type="buildings",
                location=f.building_name,
            )
            for f in facilities
        ]
        sources += [
            make_citation(
                title=w.location_name,
                description=f"~{w.estimated_wait_minutes} min wait",
                type="services",
            )
            for w in wait_times
        ]

        return AgentResult(
            success=True,
            data={
                "facilities": [f.model_dump(mode="json") for f in facilities],
                "wait_times": [w.model_dump(mode="json") for w in wait_times],
                "real_time": True,
                "sources": sources,
            },
            message=self._render(facilities, wait_times),
            confidence=0.9,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(
        facilities: list[FacilityOccupancyRead],
        wait_times: list[ServiceWaitTimeRead],
    ) -> str:
        lines = ["**Live Facility Status & Wait Times:**", ""]

        if facilities:
            lines.append("**Facility Occupancy:**")
            for f in facilities:
                building = f" ({f.building_name})" if f.building_name else ""
                lines.append(f"**{f.facility_name}**{building}: {occupancy_status(f.occupancy_percentage)}")
                lines.append(
                    f"- Occupancy: {f.current_occupancy}/{f.max_capacity} "
                    f"({f.occupancy_percentage:.0f}%)"
                )
                lines.append(f"- Type: {f.facility_type.replace('_', ' ')}")
            lines.append("")

        if wait_times:
            lines.append("**Current Wait Times:**")
            for w in wait_times:
                lines.append(f"**{w.location_name}**: {wait_status(w.estimated_wait_minutes)}")
                lines.append(f"- Wait: ~{w.estimated_wait_minutes} minutes")
                lines.append(f"- Queue: {w.queue_length} people")
                lines.append(f"- Status: {w.status}")
            lines.append("")

        if not facilities and not wait_times:
            lines.append("No live facility data available right now.")

        return "\n".join(lines).rstrip()
