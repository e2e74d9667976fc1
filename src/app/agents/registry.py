"""Agent registry: the ordered directory of campus agents.

The AgentRegistry maps agent names to agent instances, preserving insertion
order. Order matters: the scorer breaks score ties by registry order, so the
registry is assembled once at startup in a fixed sequence.

build_agent_registry() assembles the default campus agent set against a
CampusRepository. The coordinator receives the registry explicitly; there is
no module-level singleton.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

import structlog

from src.app.agents.base import BaseAgent

if TYPE_CHECKING:
    from src.app.campus.repository import CampusRepository

logger = structlog.get_logger(__name__)


class AgentRegistry:
    """Ordered collection of agents keyed by name.

    Thread safety note: This registry is designed for use in an async
    single-threaded event loop (FastAPI/uvicorn). It is populated at startup
    and read afterwards.
    """

    def __init__(self, agents: list[BaseAgent] | None = None) -> None:
        self._agents: dict[str, BaseAgent] = {}
        for agent in agents or []:
            self.register(agent)

    def register(self, agent: BaseAgent, name: str | None = None) -> None:
        """Register an agent under its own name (or an explicit override).

        Args:
            agent: The agent instance.
            name: Registry key. Defaults to ``agent.name``.

        Raises:
            ValueError: If the name is empty or already registered.
        """
        key = name or agent.name
        if not key:
            raise ValueError(f"Agent has no name: {type(agent).__name__}")
        if key in self._agents:
            raise ValueError(f"Agent already registered: {key}")
        self._agents[key] = agent
        logger.info("agent_registered", agent_name=key, agent_type=type(agent).__name__)

    def unregister(self, name: str) -> None:
        """Remove an agent from the registry.

        Raises:
            KeyError: If no agent with the given name is registered.
        """
        if name not in self._agents:
            raise KeyError(f"Agent not registered: {name}")
        del self._agents[name]
        logger.info("agent_unregistered", agent_name=name)

    def get(self, name: str) -> BaseAgent | None:
        """Get an agent by name, or None."""
        return self._agents.get(name)

    def items(self) -> list[tuple[str, BaseAgent]]:
        """(name, agent) pairs in registration order."""
        return list(self._agents.items())

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._agents.keys())

    def list_agents(self) -> list[dict[str, Any]]:
        """Routing info for every agent, keyed by registry name."""
        return [
            {**agent.to_routing_info(), "name": name}
            for name, agent in self._agents.items()
        ]

    def __iter__(self) -> Iterator[tuple[str, BaseAgent]]:
        return iter(self._agents.items())

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, name: object) -> bool:
        return name in self._agents


def build_agent_registry(repository: CampusRepository) -> AgentRegistry:
    """Assemble the default campus agent set.

    Registration order is the scorer's tie-break order.

    Args:
        repository: Campus data store shared by the data-backed agents.

    Returns:
        Populated AgentRegistry.
    """
    from src.app.agents.academic import AcademicAgent
    from src.app.agents.dining import DiningAgent
    from src.app.agents.events import EventAgent
    from src.app.agents.navigation import NavigationAgent
    from src.app.agents.realtime import (
        AlertsAgent,
        FacilityAgent,
        ParkingAgent,
        TransportationAgent,
    )
    from src.app.agents.reminders import ReminderAgent
    from src.app.agents.scholarship import ScholarshipAgent
    from src.app.agents.services import ServiceAgent

    return AgentRegistry(
        [
            DiningAgent(repository),
            AcademicAgent(repository),
            EventAgent(repository),
            ServiceAgent(),
            ScholarshipAgent(repository),
            NavigationAgent(),
            ReminderAgent(repository),
            TransportationAgent(repository),
            AlertsAgent(repository),
            ParkingAgent(repository),
            FacilityAgent(repository),
        ]
    )
