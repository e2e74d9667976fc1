"""Transportation Agent: live shuttle positions, ETAs and crowding."""

from __future__ import annotations

import time

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import ShuttleRead

SHUTTLE_URL = "https://www.uta.edu/parking/shuttle"


class TransportationAgent(BaseAgent):
    """Reports every active shuttle from the tracking feed."""

    name = "transportation"
    description = "Live campus shuttle routes, next stops and ETAs"
    source = "transportation_agent_realtime"
    keywords = (
        "shuttle", "bus", "transport", "ride", "route", "pickup", "drop off",
        "campus loop", "research shuttle", "residence hall express", "eta", "arrival",
    )
    weight = 0.3
    ceiling = 0.95

    def __init__(self, repository: CampusRepository) -> None:
        super().__init__()
        self._repository = repository

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        try:
            shuttles = await self._repository.list_active_shuttles()
        except SQLAlchemyError as exc:
            self._logger.error("shuttle_lookup_failed", error=str(exc))
            return self._failure(
                "I had trouble getting real-time transportation information. Please try again.",
                start,
                source="transportation_agent_error",
            )

        return AgentResult(
            success=True,
            data={
                "shuttles": [s.model_dump(mode="json") for s in shuttles],
                "real_time": True,
                "sources": [
                    make_citation(
                        title=s.route_name,
                        url=SHUTTLE_URL,
                        description=f"Next stop: {s.next_stop}" if s.next_stop else None,
                        type="services",
                        date=s.last_updated.isoformat(),
                    )
                    for s in shuttles
                ],
            },
            message=self._render(shuttles),
            confidence=0.9,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(shuttles: list[ShuttleRead]) -> str:
        lines = ["**Campus Transportation - Live Updates:**", ""]
        if not shuttles:
            lines.append("No active shuttles currently running. Check back later!")
            return "\n".join(lines)

        for s in shuttles:
            lines.append(f"**{s.route_name}**")
            lines.append(f"- Next Stop: {s.next_stop or 'Unknown'}")
            if s.eta_minutes is not None:
                lines.append(f"- ETA: {s.eta_minutes} minutes")
            lines.append(f"- Capacity: {s.capacity_status}")
            lines.append(f"- Last Updated: {s.last_updated.strftime('%I:%M %p')}")
            lines.append("")
        lines.append("Capacity: low = plenty of space, medium = getting full, high = very crowded")
        return "\n".join(lines)
