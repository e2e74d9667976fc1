"""Citation metadata and response envelope assembly.

Agents attach structured citation entries to their results under
``AgentResult.data["sources"]``. This module reads them back leniently
(agent payloads are opaque to the coordinator, so malformed entries are
skipped rather than failing the response) and folds a CoordinationResult into
the AssistantResponse consumed by the chat UI.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from pydantic import ValidationError

from src.app.agents.base import AgentResult
from src.app.agents.schemas import (
    AssistantResponse,
    CoordinationResult,
    SecondaryAnswer,
    SourceCitation,
)

logger = structlog.get_logger(__name__)

MAX_CITATIONS = 10


def make_citation(**fields: Any) -> dict[str, Any]:
    """Build a citation entry for ``data["sources"]``, dropping empty fields."""
    return SourceCitation(**fields).model_dump(exclude_none=True)


def extract_citations(result: AgentResult) -> list[SourceCitation]:
    """Read the citation entries an agent attached to its result.

    Args:
        result: Any agent result.

    Returns:
        Valid citations in the order the agent listed them. Entries that are
        not mappings or fail validation are logged and skipped.
    """
    data = result.data
    if not isinstance(data, dict):
        return []
    raw_sources = data.get("sources")
    if not isinstance(raw_sources, list):
        return []

    citations: list[SourceCitation] = []
    for entry in raw_sources:
        if isinstance(entry, SourceCitation):
            citations.append(entry)
            continue
        if not isinstance(entry, dict):
            logger.debug("citation_skipped", source=result.source, reason="not_a_mapping")
            continue
        try:
            citations.append(SourceCitation.model_validate(entry))
        except ValidationError as exc:
            logger.debug(
                "citation_skipped",
                source=result.source,
                reason="invalid",
                error_count=exc.error_count(),
            )
    return citations


def merge_citations(
    groups: Iterable[list[SourceCitation]],
    limit: int = MAX_CITATIONS,
) -> list[SourceCitation]:
    """Concatenate citation lists, dropping duplicates by (title, url)."""
    merged: list[SourceCitation] = []
    seen: set[tuple[str | None, str | None]] = set()
    for group in groups:
        for citation in group:
            key = (citation.title, citation.url)
            if key in seen:
                continue
            seen.add(key)
            merged.append(citation)
            if len(merged) >= limit:
                return merged
    return merged


def build_response(result: CoordinationResult) -> AssistantResponse:
    """Fold a coordination result into the chat UI response shape.

    Primary citations come first, then those of each secondary result.
    """
    secondary = result.secondary or []
    sources = merge_citations(
        [extract_citations(result.primary)] + [extract_citations(r) for r in secondary]
    )

    return AssistantResponse(
        response=result.primary.message,
        sources=sources,
        source=result.primary.source,
        strategy=result.strategy,
        agents_used=list(result.agents_used),
        confidence=result.primary.confidence,
        total_time=result.total_time,
        success=result.primary.success,
        secondary=[
            SecondaryAnswer(source=r.source, message=r.message, confidence=r.confidence)
            for r in secondary
        ],
        metadata={"processing_time": result.primary.processing_time},
    )
