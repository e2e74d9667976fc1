"""Dining agent for campus food and dining questions.

Exports:
    DiningAgent: BaseAgent subclass registered as "dining".
"""

from src.app.agents.dining.agent import DiningAgent

__all__ = ["DiningAgent"]
