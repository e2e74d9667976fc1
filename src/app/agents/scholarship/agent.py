"""Scholarship Agent: open scholarships and financial aid awards."""

from __future__ import annotations

import time

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms, search_terms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import ScholarshipRead

FINANCIAL_AID_URL = "https://www.uta.edu/administration/fao"
MAX_SCHOLARSHIPS = 5

NO_RESULTS_MESSAGE = (
    "I couldn't find scholarships matching your question. The Financial Aid "
    "Office (817-272-3561) can help you find awards you qualify for."
)


class ScholarshipAgent(BaseAgent):
    """Searches active scholarships, soonest deadline first."""

    name = "scholarship"
    description = "Scholarships, grants and financial aid deadlines"
    source = "scholarship_agent"
    keywords = (
        "scholarship", "financial aid", "grant", "award", "tuition",
        "fafsa", "fellowship", "funding", "bursary",
    )
    weight = 0.4
    ceiling = 0.95

    def __init__(self, repository: CampusRepository) -> None:
        super().__init__()
        self._repository = repository

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        terms = search_terms(query, exclude=self.keywords + ("financial", "aid"))
        try:
            scholarships = await self._repository.search_scholarships(
                terms, limit=MAX_SCHOLARSHIPS
            )
        except SQLAlchemyError as exc:
            self._logger.error("scholarship_lookup_failed", error=str(exc), terms=terms)
            return self._failure(
                "I had trouble searching scholarships. Please try again or "
                "contact the Financial Aid Office.",
                start,
                source="scholarship_agent_error",
            )

        if not scholarships:
            return AgentResult(
                success=False,
                data={"scholarships": [], "sources": []},
                message=NO_RESULTS_MESSAGE,
                confidence=0.3,
                processing_time=elapsed_ms(start),
                source=self.source,
            )

        return AgentResult(
            success=True,
            data={
                "scholarships": [s.model_dump(mode="json") for s in scholarships],
                "sources": [
                    make_citation(
                        title=s.name,
                        url=s.url or FINANCIAL_AID_URL,
                        description=s.eligibility,
                        type="academics",
                        date=s.deadline.isoformat() if s.deadline else None,
                    )
                    for s in scholarships
                ],
            },
            message=self._render(scholarships),
            confidence=0.85,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(scholarships: list[ScholarshipRead]) -> str:
        lines = ["**Scholarships & Financial Aid:**", ""]
        for s in scholarships:
            lines.append(f"- **{s.name}**")
            if s.amount is not None:
                lines.append(f"  Amount: ${s.amount:,.0f}")
            if s.deadline:
                lines.append(f"  Deadline: {s.deadline.strftime('%B %d, %Y')}")
            if s.eligibility:
                lines.append(f"  Eligibility: {s.eligibility}")
        lines.append("")
        lines.append("Apply early. Deadlines are firm and some awards require the FAFSA.")
        return "\n".join(lines)
