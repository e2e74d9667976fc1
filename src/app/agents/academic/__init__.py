"""Academic agent for courses, faculty and degree programs.

Exports:
    AcademicAgent: BaseAgent subclass registered as "academic".
"""

from src.app.agents.academic.agent import AcademicAgent

__all__ = ["AcademicAgent"]
