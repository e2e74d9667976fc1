"""Base agent abstractions for the multi-agent coordinator.

Defines the contract every campus agent implements:

- can_handle(query) -> float: synchronous, side-effect-free relevance estimate
  in [0, 1]. Keyword matching only, never I/O.
- process(query) -> AgentResult: asynchronous, may query the campus data
  store. Returns a structured result with its own self-reported confidence.

Agents are stateless with respect to a single query. They are owned by the
AgentRegistry (registry.py) for the lifetime of the process and scored,
selected and executed by the MultiAgentCoordinator (coordinator.py).
"""

from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

import structlog
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)


# ── Agent Result ─────────────────────────────────────────────────────────────


class AgentResult(BaseModel):
    """Structured result of a single agent invocation.

    Attributes:
        success: Whether the agent produced a usable answer.
        data: Domain-specific payload, opaque to the coordinator. When it is a
            dict, ``data["sources"]`` carries citation entries.
        message: Human-readable response text (primary rendering payload).
        confidence: Self-reported certainty in this specific result. Distinct
            from the pre-execution can_handle() score.
        processing_time: Wall-clock duration of the process() call in ms.
        source: Provenance tag identifying the agent/sub-path.
    """

    success: bool
    data: Any | None = None
    message: str
    confidence: float = Field(ge=0.0, le=1.0)
    processing_time: int = Field(ge=0, default=0)
    source: str


# ── Keyword Scoring ──────────────────────────────────────────────────────────


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Word-start anchored, tolerant of simple plurals ("event" matches "events").
    return re.compile(rf"\b{re.escape(keyword)}(?:s|es)?\b")


def keyword_matches(query: str, keywords: tuple[str, ...] | list[str]) -> list[str]:
    """Return the keywords that appear in the query (case-insensitive)."""
    query_lower = query.lower()
    return [kw for kw in keywords if _keyword_pattern(kw).search(query_lower)]


def keyword_score(
    query: str,
    keywords: tuple[str, ...] | list[str],
    weight: float,
    ceiling: float = 1.0,
) -> float:
    """Score a query as ``min(matches * weight, ceiling)``.

    Args:
        query: Raw user query.
        keywords: Keywords or multi-word patterns to look for.
        weight: Score contributed by each matched keyword.
        ceiling: Upper bound of the score.

    Returns:
        Relevance estimate in [0, ceiling].
    """
    return min(len(keyword_matches(query, keywords)) * weight, ceiling)


_STOPWORDS = frozenset(
    {
        "a", "about", "am", "an", "and", "any", "are", "at", "can", "do", "does",
        "find", "for", "get", "give", "how", "i", "in", "is", "list", "me", "my",
        "of", "on", "or", "show", "some", "tell", "that", "the", "there", "to",
        "what", "when", "where", "which", "who", "with", "you",
    }
)
_WORD_RE = re.compile(r"[a-z0-9][a-z0-9&+-]*")


def search_terms(query: str, exclude: tuple[str, ...] | list[str] = ()) -> list[str]:
    """Content words of a query for data store lookups.

    Drops stopwords, very short tokens and the excluded words (normally the
    agent's own trigger keywords, plural forms included). Order is preserved
    and duplicates removed.
    """
    excluded = set(exclude) | {f"{w}s" for w in exclude} | {f"{w}es" for w in exclude}
    terms: list[str] = []
    for word in _WORD_RE.findall(query.lower()):
        if len(word) < 3 or word in _STOPWORDS or word in excluded or word in terms:
            continue
        terms.append(word)
    return terms


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a ``time.perf_counter()`` timestamp."""
    return int((time.perf_counter() - start) * 1000)


# ── Base Agent ───────────────────────────────────────────────────────────────


class BaseAgent(ABC):
    """Abstract base class for all campus agents.

    Subclasses declare their scoring vocabulary as class attributes and
    implement process(). The default can_handle() applies keyword_score()
    with the declared weight and ceiling; agents with different heuristics
    override it.

    Class attributes:
        name: Stable registry identifier, unique within the registry.
        description: What the agent answers, listed by the registry.
        source: Provenance tag written into AgentResult.source.
        keywords: Vocabulary used by the default can_handle().
        weight: Score per matched keyword.
        ceiling: Maximum score the agent reports.
    """

    name: str = ""
    description: str = ""
    source: str = ""
    keywords: tuple[str, ...] = ()
    weight: float = 0.3
    ceiling: float = 1.0

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__).bind(agent=self.name)

    def can_handle(self, query: str) -> float:
        """Estimate relevance of this agent to the query, in [0, 1]."""
        return keyword_score(query, self.keywords, self.weight, self.ceiling)

    @abstractmethod
    async def process(self, query: str) -> AgentResult:
        """Answer the query.

        Args:
            query: Raw user query.

        Returns:
            AgentResult with message, payload and self-reported confidence.
        """
        ...

    def _failure(
        self,
        message: str,
        start: float,
        *,
        confidence: float = 0.1,
        source: str | None = None,
    ) -> AgentResult:
        """Build a failure-shaped result for this agent."""
        return AgentResult(
            success=False,
            data=None,
            message=message,
            confidence=confidence,
            processing_time=elapsed_ms(start),
            source=source or self.source,
        )

    def to_routing_info(self) -> dict[str, Any]:
        """Serialize agent metadata for listing endpoints."""
        return {
            "name": self.name,
            "description": self.description,
            "source": self.source,
            "keywords": list(self.keywords),
        }
