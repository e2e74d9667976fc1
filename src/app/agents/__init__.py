"""Agent orchestration package.

Provides the base agent contract, the ordered agent registry, scoring and
strategy selection, and the MultiAgentCoordinator that runs campus agents
per query. Concrete campus agents live in the subpackages (dining, academic,
events, services, scholarship, navigation, reminders, realtime) and are
assembled by build_agent_registry().

Exports:
    BaseAgent: Abstract base class for all campus agents.
    AgentResult: Structured result of one agent invocation.
    AgentRegistry: Ordered name -> agent directory.
    build_agent_registry: Factory for the default campus agent set.
    MultiAgentCoordinator: Score -> select -> execute facade.
    CoordinationResult: Envelope returned by the coordinator.
    Strategy: Execution strategy enum (SINGLE, PARALLEL, CASCADE).
    ScoredAgent: Agent paired with its relevance score.
    AgentPerformance: Rolling per-agent performance snapshot.
    AssistantResponse: Response shape for the chat UI.
    build_response: CoordinationResult -> AssistantResponse.
"""

from __future__ import annotations

from src.app.agents.base import AgentResult, BaseAgent
from src.app.agents.citations import build_response
from src.app.agents.coordinator import MultiAgentCoordinator
from src.app.agents.registry import AgentRegistry, build_agent_registry
from src.app.agents.schemas import (
    AgentPerformance,
    AssistantResponse,
    CoordinationResult,
    ScoredAgent,
    Strategy,
)

__all__ = [
    "AgentPerformance",
    "AgentRegistry",
    "AgentResult",
    "AssistantResponse",
    "BaseAgent",
    "CoordinationResult",
    "MultiAgentCoordinator",
    "ScoredAgent",
    "Strategy",
    "build_agent_registry",
    "build_response",
]
