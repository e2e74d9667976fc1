"""Service Agent: static guidance for WiFi, parking permits, library and IT help.

Needs no data store. Each topic the query mentions contributes one section
of the answer; a query that mentions none gets the general information line
with a low confidence.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms, keyword_matches
from src.app.agents.citations import make_citation

GENERAL_INFO_MESSAGE = (
    "For campus services, contact the main UTA information line at "
    "817-272-2011 or visit the specific department's website."
)


@dataclass(frozen=True)
class ServiceTopic:
    """One block of canned guidance and the words that select it."""

    key: str
    title: str
    triggers: tuple[str, ...]
    lines: tuple[str, ...]
    url: str


SERVICE_TOPICS: tuple[ServiceTopic, ...] = (
    ServiceTopic(
        key="wifi",
        title="WiFi Access",
        triggers=("wifi", "internet", "network"),
        lines=(
            "- **UTA-WiFi**: Use your NetID and password",
            "- **UTA-Guest**: For visitors (no login required)",
            "- **eduroam**: For students/staff from partner institutions",
            "- Troubleshooting: forget and reconnect to the network",
            "- OIT Help Desk: 817-272-2208",
        ),
        url="https://oit.uta.edu",
    ),
    ServiceTopic(
        key="parking",
        title="Parking Information",
        triggers=("parking", "permit"),
        lines=(
            "- Daily parking: Available in most lots",
            "- Semester permits: Purchase online through MyMav",
            "- Visitor parking: Available near major buildings",
            "- Parking Services: 817-272-3923",
        ),
        url="https://www.uta.edu/parking",
    ),
    ServiceTopic(
        key="library",
        title="Library Services",
        triggers=("library",),
        lines=(
            "- Multiple libraries across campus",
            "- 24/7 study spaces available",
            "- Computer labs and printing services",
            "- Research assistance and tutoring",
            "- Contact: 817-272-3000",
        ),
        url="https://library.uta.edu",
    ),
    ServiceTopic(
        key="it",
        title="IT Support",
        triggers=("computer", "it support", "email", "password"),
        lines=(
            "- OIT Help Desk: 817-272-2208",
            "- Online support: oit.uta.edu",
            "- Computer labs in library and academic buildings",
            "- Email support for NetID issues",
        ),
        url="https://oit.uta.edu",
    ),
)


class ServiceAgent(BaseAgent):
    """Answers campus service questions from built-in guidance."""

    name = "service"
    description = "WiFi, parking permits, library services and IT support"
    source = "service_agent"
    keywords = (
        "wifi", "internet", "network", "parking", "permit", "library",
        "computer", "lab", "printing", "help", "support", "it support",
        "technology", "email", "password", "account", "id card", "card",
    )
    weight = 0.35
    ceiling = 1.0

    def matched_topics(self, query: str) -> list[ServiceTopic]:
        return [t for t in SERVICE_TOPICS if keyword_matches(query, t.triggers)]

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        topics = self.matched_topics(query)

        if not topics:
            return AgentResult(
                success=False,
                data=None,
                message=GENERAL_INFO_MESSAGE,
                confidence=0.4,
                processing_time=elapsed_ms(start),
                source=self.source,
            )

        lines = ["**Campus Services:**", ""]
        for topic in topics:
            lines.append(f"**{topic.title}:**")
            lines.extend(topic.lines)
            lines.append("")
        lines.append(
            "For more detailed information, visit the respective department "
            "websites or contact UTA directly."
        )

        return AgentResult(
            success=True,
            data={
                "topics": [t.key for t in topics],
                "sources": [
                    make_citation(title=t.title, url=t.url, type="services")
                    for t in topics
                ],
            },
            message="\n".join(lines),
            confidence=0.9,
            processing_time=elapsed_ms(start),
            source=self.source,
        )
