"""Dining Agent: campus dining locations, open status and today's menus."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import date, datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import DiningLocationRead, MenuRead

MENU_ITEMS_PER_CATEGORY = 3
DINING_URL = "https://www.uta.edu/campus-life/dining"


def _today() -> date:
    return datetime.now(timezone.utc).date()


class DiningAgent(BaseAgent):
    """Answers food and dining questions from the dining tables.

    Args:
        repository: Campus data store.
        today: Clock returning the menu date. Defaults to the current UTC date.
    """

    name = "dining"
    description = "Dining locations, open status, hours and today's menus"
    source = "dining_agent"
    keywords = (
        "dining", "food", "eat", "restaurant", "cafe", "menu", "meal",
        "lunch", "dinner", "breakfast", "snack", "cafeteria", "hours",
        "maverick cafe", "connection cafe", "hungry", "vegetarian", "vegan",
    )
    weight = 0.3
    ceiling = 1.0

    def __init__(
        self,
        repository: CampusRepository,
        today: Callable[[], date] | None = None,
    ) -> None:
        super().__init__()
        self._repository = repository
        self._today = today or _today

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        try:
            locations = await self._repository.list_dining_locations()
            menus = await self._repository.list_menus(self._today())
        except SQLAlchemyError as exc:
            self._logger.error("dining_lookup_failed", error=str(exc))
            return self._failure(
                "I had trouble getting dining information. Please try again "
                "or check the UTA dining website.",
                start,
            )

        return AgentResult(
            success=True,
            data={
                "locations": [loc.model_dump(mode="json") for loc in locations],
                "menus": [menu.model_dump(mode="json") for menu in menus],
                "sources": self._citations(locations),
            },
            message=self._render(locations, menus),
            confidence=0.9,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(locations: list[DiningLocationRead], menus: list[MenuRead]) -> str:
        lines = ["**Campus Dining Information:**", ""]
        for loc in locations:
            area = f" ({loc.campus_area})" if loc.campus_area else ""
            lines.append(f"**{loc.name}**{area}")
            lines.append(f"Status: {'Open' if loc.is_open else 'Closed'}")
            hours = loc.hours_text()
            if hours:
                lines.append(f"Hours: {hours}")
            lines.append("")

        featured = [
            f"- {category}: {', '.join(str(i) for i in items[:MENU_ITEMS_PER_CATEGORY])}"
            for menu in menus
            for category, items in menu.items.items()
            if isinstance(items, list) and items
        ]
        if featured:
            lines.append("**Today's Featured Items:**")
            lines.extend(featured)
            lines.append("")

        lines.append("For real-time hours and menus, check the UTA dining website!")
        return "\n".join(lines)

    @staticmethod
    def _citations(locations: list[DiningLocationRead]) -> list[dict]:
        if not locations:
            return [make_citation(title="UTA Dining Services", url=DINING_URL, type="dining")]
        return [
            make_citation(
                title=loc.name,
                url=DINING_URL,
                description="Open now" if loc.is_open else "Currently closed",
                type="dining",
                location=loc.campus_area,
            )
            for loc in locations[:5]
        ]
