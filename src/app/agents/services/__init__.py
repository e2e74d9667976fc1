"""Service agent for WiFi, parking permits, library and IT help.

Exports:
    ServiceAgent: BaseAgent subclass registered as "service".
"""

from src.app.agents.services.agent import ServiceAgent

__all__ = ["ServiceAgent"]
