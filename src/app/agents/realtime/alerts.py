"""Alerts Agent: active campus alerts (weather, maintenance, emergencies)."""

from __future__ import annotations

import time

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import AlertRead

ALERTS_URL = "https://www.uta.edu/news/alerts"

SEVERITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


class AlertsAgent(BaseAgent):
    """Reports active live alerts, most severe first."""

    name = "alerts"
    description = "Live campus alerts, closures and safety notices"
    source = "alerts_agent_realtime"
    keywords = (
        "alert", "emergency", "warning", "weather", "maintenance", "closed",
        "traffic", "incident", "safety", "urgent", "important", "notice",
    )
    weight = 0.35
    ceiling = 0.95

    def __init__(self, repository: CampusRepository) -> None:
        super().__init__()
        self._repository = repository

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        try:
            alerts = await self._repository.list_active_alerts()
        except SQLAlchemyError as exc:
            self._logger.error("alert_lookup_failed", error=str(exc))
            return self._failure(
                "I had trouble getting current alert information. Please try again.",
                start,
                source="alerts_agent_error",
            )

        # Stable sort keeps newest-first order within a severity.
        alerts = sorted(alerts, key=lambda a: SEVERITY_ORDER.get(a.severity, len(SEVERITY_ORDER)))

        return AgentResult(
            success=True,
            data={
                "alerts": [a.model_dump(mode="json") for a in alerts],
                "real_time": True,
                "sources": [
                    make_citation(
                        title=a.title,
                        url=ALERTS_URL,
                        description=a.message,
                        type="general",
                        location=", ".join(a.affected_areas) or None,
                        date=a.created_at.isoformat(),
                    )
                    for a in alerts
                ],
            },
            message=self._render(alerts),
            confidence=0.9,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(alerts: list[AlertRead]) -> str:
        lines = ["**Live Campus Alerts:**", ""]
        if not alerts:
            lines.append("No active alerts at this time. Campus operations are normal.")
            return "\n".join(lines)

        for a in alerts:
            kind = f" ({a.alert_type})" if a.alert_type else ""
            lines.append(f"[{a.severity.upper()}] **{a.title}**{kind}")
            lines.append(a.message)
            if a.affected_areas:
                lines.append(f"Affected areas: {', '.join(a.affected_areas)}")
            if a.expires_at:
                lines.append(f"Expires: {a.expires_at.strftime('%b %d, %I:%M %p')}")
            lines.append("")
        lines.append("Stay safe and check back for updates!")
        return "\n".join(lines)
