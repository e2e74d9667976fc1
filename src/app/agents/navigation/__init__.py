"""Navigation agent for directions to campus buildings.

Exports:
    NavigationAgent: BaseAgent subclass registered as "navigation".
"""

from src.app.agents.navigation.agent import NavigationAgent

__all__ = ["NavigationAgent"]
