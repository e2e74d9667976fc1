"""Scholarship agent for scholarships and financial aid.

Exports:
    ScholarshipAgent: BaseAgent subclass registered as "scholarship".
"""

from src.app.agents.scholarship.agent import ScholarshipAgent

__all__ = ["ScholarshipAgent"]
