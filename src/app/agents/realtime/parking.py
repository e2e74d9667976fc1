"""Parking Agent: live lot availability with status bands."""

from __future__ import annotations

import time

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import ParkingLotRead

PARKING_URL = "https://www.uta.edu/parking"

PLENTY_THRESHOLD = 30.0
LIMITED_THRESHOLD = 10.0


def availability_status(percentage: float) -> str:
    """'plenty' above 30% free, 'limited' above 10%, else 'full'."""
    if percentage > PLENTY_THRESHOLD:
        return "plenty"
    if percentage > LIMITED_THRESHOLD:
        return "limited"
    return "full"


class ParkingAgent(BaseAgent):
    """Reports open lots, most available spaces first."""

    name = "parking"
    description = "Live parking lot availability, permits and rates"
    source = "parking_agent_realtime"
    keywords = (
        "parking", "park", "lot", "garage", "spaces", "available", "permit",
        "visitor", "student", "faculty", "hourly", "rate", "cost",
    )
    weight = 0.4
    ceiling = 0.95

    def __init__(self, repository: CampusRepository) -> None:
        super().__init__()
        self._repository = repository

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        try:
            lots = await self._repository.list_open_parking()
        except SQLAlchemyError as exc:
            self._logger.error("parking_lookup_failed", error=str(exc))
            return self._failure(
                "I had trouble getting real-time parking information. Please try again.",
                start,
                source="parking_agent_error",
            )

        return AgentResult(
            success=True,
            data={
                "parking": [
                    {**lot.model_dump(mode="json"), "status": availability_status(lot.availability_percentage)}
                    for lot in lots
                ],
                "real_time": True,
                "sources": [
                    make_citation(
                        title=lot.lot_name,
                        url=PARKING_URL,
                        description=f"{lot.available_spaces}/{lot.total_spaces} spaces available",
                        type="services",
                        date=lot.last_updated.isoformat(),
                    )
                    for lot in lots
                ],
            },
            message=self._render(lots),
            confidence=0.9,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(lots: list[ParkingLotRead]) -> str:
        lines = ["**Live Parking Availability:**", ""]
        if not lots:
            lines.append("No parking data available at this time.")
            return "\n".join(lines)

        for lot in lots:
            status = availability_status(lot.availability_percentage)
            lines.append(f"**{lot.lot_name}** ({status})")
            lines.append(f"- Available: {lot.available_spaces}/{lot.total_spaces} spaces")
            if lot.permit_type:
                lines.append(f"- Permit: {lot.permit_type}")
            if lot.hourly_rate:
                lines.append(f"- Rate: ${lot.hourly_rate:.2f}/hour")
            lines.append(f"- Updated: {lot.last_updated.strftime('%I:%M %p')}")
            lines.append("")
        lines.append("plenty = 30%+ spaces, limited = 10-30% spaces, full = under 10%")
        return "\n".join(lines)
