"""Pydantic data models for multi-agent coordination.

Defines the ephemeral scoring type (ScoredAgent), the execution strategy enum,
the envelope returned by the coordinator (CoordinationResult), the per-agent
performance snapshot, and the citation/response models consumed by the chat
UI. AgentResult itself lives in base.py next to the agent contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from src.app.agents.base import AgentResult

if TYPE_CHECKING:
    from src.app.agents.base import BaseAgent


# ── Strategy ─────────────────────────────────────────────────────────────────


class Strategy(str, Enum):
    """Execution plan chosen per query from the score distribution."""

    SINGLE = "single"
    PARALLEL = "parallel"
    CASCADE = "cascade"


# ── Scoring ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScoredAgent:
    """An agent paired with its relevance score for one query.

    Recomputed per query and never persisted.

    Attributes:
        name: Registry name of the agent.
        score: Pre-execution relevance estimate in [0, 1].
        agent: The agent instance.
    """

    name: str
    score: float
    agent: BaseAgent


# ── Coordination Result ──────────────────────────────────────────────────────


class CoordinationResult(BaseModel):
    """Unified result envelope returned by the coordinator.

    Attributes:
        primary: The chosen best result.
        secondary: Other successful results, shown as citations. Only present
            for the parallel strategy when more than one agent succeeded.
        total_time: Full coordinator wall-clock time in ms, scoring included.
        agents_used: Names of the agents actually invoked, in order.
        strategy: The strategy that produced this result.
    """

    primary: AgentResult
    secondary: list[AgentResult] | None = None
    total_time: int = Field(ge=0, default=0)
    agents_used: list[str] = Field(min_length=1)
    strategy: Strategy


class AgentPerformance(BaseModel):
    """Read-only performance snapshot for one agent."""

    avg_time: float = Field(ge=0.0)
    success_rate: float = Field(ge=0.0, le=1.0)
    call_count: int = Field(ge=0)


# ── Citations ────────────────────────────────────────────────────────────────


CitationType = Literal["dining", "events", "buildings", "academics", "services", "general"]


class SourceCitation(BaseModel):
    """Structured citation entry rendered in the expandable citations panel.

    All fields are optional; agents fill in what their data source provides.
    """

    title: str | None = None
    url: str | None = None
    description: str | None = None
    type: CitationType | None = None
    location: str | None = None
    date: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class SecondaryAnswer(BaseModel):
    """Condensed view of a supplementary parallel result."""

    source: str
    message: str
    confidence: float


class AssistantResponse(BaseModel):
    """Response shape consumed by the chat UI.

    ``response`` is rendered as chat text; ``source``, ``strategy``,
    ``agents_used``, ``confidence`` and ``total_time`` feed the source
    citation badge strip; ``sources`` feeds the citations panel.
    """

    response: str
    sources: list[SourceCitation] = Field(default_factory=list)
    source: str
    strategy: Strategy
    agents_used: list[str]
    confidence: float
    total_time: int
    success: bool
    secondary: list[SecondaryAnswer] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
