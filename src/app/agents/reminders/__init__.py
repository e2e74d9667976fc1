"""Reminder agent for natural-language reminders.

Exports:
    ReminderAgent: BaseAgent subclass registered as "reminder".
"""

from src.app.agents.reminders.agent import ReminderAgent

__all__ = ["ReminderAgent"]
