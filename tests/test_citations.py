"""Tests for citation extraction and AssistantResponse assembly."""

from __future__ import annotations

from structlog.testing import capture_logs

from src.app.agents.base import AgentResult
from src.app.agents.citations import (
    build_response,
    extract_citations,
    make_citation,
    merge_citations,
)
from src.app.agents.schemas import CoordinationResult, SourceCitation, Strategy


def _result(source: str, sources=None, *, message: str = "ok", confidence: float = 0.8, data=None) -> AgentResult:
    if data is None and sources is not None:
        data = {"sources": sources}
    return AgentResult(
        success=True,
        data=data,
        message=message,
        confidence=confidence,
        processing_time=12,
        source=source,
    )


# ── make_citation / extract_citations ────────────────────────────────────────


def test_make_citation_drops_empty_fields():
    assert make_citation(title="Central Library", url=None, type="buildings") == {
        "title": "Central Library",
        "type": "buildings",
    }


def test_extract_citations_in_agent_order():
    result = _result(
        "event_agent",
        [make_citation(title="Career Fair", type="events"), make_citation(title="Gala", type="events")],
    )
    assert [c.title for c in extract_citations(result)] == ["Career Fair", "Gala"]


def test_extract_citations_without_payload():
    assert extract_citations(_result("service_agent")) == []
    assert extract_citations(_result("x", data=["not", "a", "dict"])) == []
    assert extract_citations(_result("x", data={"sources": "nope"})) == []


def test_malformed_entries_are_skipped_and_logged():
    result = _result(
        "dining_agent",
        [
            "just a string",
            {"title": "Bad", "type": "restaurants"},
            {"title": "Good", "type": "dining"},
        ],
    )
    with capture_logs() as logs:
        citations = extract_citations(result)

    assert [c.title for c in citations] == ["Good"]
    reasons = [e["reason"] for e in logs if e["event"] == "citation_skipped"]
    assert reasons == ["not_a_mapping", "invalid"]


# ── merge_citations ──────────────────────────────────────────────────────────


def test_merge_dedupes_by_title_and_url():
    a = SourceCitation(title="Lot 50", url="https://www.uta.edu/parking")
    b = SourceCitation(title="Lot 50", url="https://www.uta.edu/parking", description="dup")
    c = SourceCitation(title="Lot 50", url="https://example.edu/other")
    merged = merge_citations([[a], [b, c]])
    assert merged == [a, c]


def test_merge_respects_limit():
    group = [SourceCitation(title=f"c{i}") for i in range(20)]
    assert len(merge_citations([group])) == 10
    assert len(merge_citations([group], limit=3)) == 3


# ── build_response ───────────────────────────────────────────────────────────


def test_build_response_single():
    primary = _result("navigation_agent", [make_citation(title="Central Library", type="buildings")])
    response = build_response(
        CoordinationResult(
            primary=primary,
            agents_used=["navigation"],
            strategy=Strategy.SINGLE,
            total_time=40,
        )
    )

    assert response.response == "ok"
    assert response.source == "navigation_agent"
    assert response.strategy is Strategy.SINGLE
    assert response.agents_used == ["navigation"]
    assert response.confidence == 0.8
    assert response.total_time == 40
    assert response.success is True
    assert response.secondary == []
    assert response.metadata == {"processing_time": 12}
    assert [s.title for s in response.sources] == ["Central Library"]


def test_build_response_parallel_orders_primary_citations_first():
    primary = _result("event_agent", [make_citation(title="Career Fair")], message="events", confidence=0.85)
    secondary = _result(
        "dining_agent",
        [make_citation(title="Maverick Cafe"), make_citation(title="Career Fair")],
        message="dining",
        confidence=0.6,
    )
    response = build_response(
        CoordinationResult(
            primary=primary,
            secondary=[secondary],
            agents_used=["dining", "event"],
            strategy=Strategy.PARALLEL,
        )
    )

    assert [s.title for s in response.sources] == ["Career Fair", "Maverick Cafe"]
    assert len(response.secondary) == 1
    assert response.secondary[0].source == "dining_agent"
    assert response.secondary[0].message == "dining"
    assert response.secondary[0].confidence == 0.6


def test_build_response_serializes_strategy_value():
    response = build_response(
        CoordinationResult(
            primary=_result("coordinator"),
            agents_used=["coordinator"],
            strategy=Strategy.CASCADE,
        )
    )
    assert response.model_dump(mode="json")["strategy"] == "cascade"
