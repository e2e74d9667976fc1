"""REST API endpoints for the campus assistant.

Thin HTTP surface over the MultiAgentCoordinator stored on app.state:
- POST /assistant/query: score -> select -> execute for one query
- POST /assistant/query/complex: same, with multi-intent fan-out
- GET /assistant/agents: registered agents in tie-break order
- GET /assistant/stats: rolling per-agent performance
"""

from __future__ import annotations

from typing import Any, Literal

import structlog
from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field

from src.app.agents.citations import build_response
from src.app.agents.coordinator import MultiAgentCoordinator
from src.app.agents.schemas import AgentPerformance, AssistantResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])


# ── Request Schemas ──────────────────────────────────────────────────────────


class ConversationTurn(BaseModel):
    """One prior chat message supplied by the client."""

    role: Literal["user", "assistant"]
    content: str


class QueryRequest(BaseModel):
    """Request body for an assistant query."""

    query: str = Field(min_length=1, max_length=2000)
    conversation: list[ConversationTurn] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)


# ── Response Schemas ─────────────────────────────────────────────────────────


class AgentInfo(BaseModel):
    name: str
    description: str
    source: str
    keywords: list[str] = Field(default_factory=list)


class AgentListResponse(BaseModel):
    agents: list[AgentInfo]
    count: int


class StatsResponse(BaseModel):
    agents: dict[str, AgentPerformance] = Field(default_factory=dict)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _get_coordinator(request: Request) -> MultiAgentCoordinator:
    """Retrieve the coordinator from app.state, 503 if not available."""
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Assistant coordinator not initialized",
        )
    return coordinator


def _query_text(body: QueryRequest) -> str:
    query = body.query.strip()
    if not query:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Query must not be blank",
        )
    return query


# ── Endpoints ────────────────────────────────────────────────────────────────


@router.post("/query", response_model=AssistantResponse)
async def query_assistant(body: QueryRequest, request: Request) -> AssistantResponse:
    """Answer one free-text query."""
    coordinator = _get_coordinator(request)
    query = _query_text(body)
    logger.info("assistant_query_received", conversation_turns=len(body.conversation))
    result = await coordinator.process_query(query)
    return build_response(result)


@router.post("/query/complex", response_model=AssistantResponse)
async def query_assistant_complex(body: QueryRequest, request: Request) -> AssistantResponse:
    """Answer a query that may mix several intents (e.g. food and events)."""
    coordinator = _get_coordinator(request)
    query = _query_text(body)
    logger.info("assistant_complex_query_received", conversation_turns=len(body.conversation))
    result = await coordinator.process_complex_query(query)
    return build_response(result)


@router.get("/agents", response_model=AgentListResponse)
async def list_agents(request: Request) -> AgentListResponse:
    """List registered agents in registry (tie-break) order."""
    coordinator = _get_coordinator(request)
    agents = [AgentInfo(**info) for info in coordinator.registry.list_agents()]
    return AgentListResponse(agents=agents, count=len(agents))


@router.get("/stats", response_model=StatsResponse)
async def performance_stats(request: Request) -> StatsResponse:
    """Rolling average time, success rate and call count per agent."""
    coordinator = _get_coordinator(request)
    return StatsResponse(agents=coordinator.get_performance_stats())
