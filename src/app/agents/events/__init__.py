"""Event agent for upcoming campus events.

Exports:
    EventAgent: BaseAgent subclass registered as "event".
"""

from src.app.agents.events.agent import EventAgent

__all__ = ["EventAgent"]
