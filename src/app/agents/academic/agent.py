"""Academic Agent: courses, faculty and degree programs.

Which tables are searched depends on the words in the query:
- course / class -> courses (up to 5)
- professor / faculty -> faculty (up to 3)
- program / degree / major -> programs (up to 3)

The remaining content words of the query are the search terms. The result
is successful only when at least one table returned a hit.
"""

from __future__ import annotations

import time

from sqlalchemy.exc import SQLAlchemyError

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms, keyword_matches, search_terms
from src.app.agents.citations import make_citation
from src.app.campus.repository import CampusRepository
from src.app.campus.schemas import CourseRead, FacultyRead, ProgramRead

CATALOG_URL = "https://catalog.uta.edu"

COURSE_TRIGGERS = ("course", "class")
FACULTY_TRIGGERS = ("professor", "faculty")
PROGRAM_TRIGGERS = ("program", "degree", "major")

NO_RESULTS_MESSAGE = (
    "I didn't find specific academic information for your query. Try asking "
    "about specific courses, professors, or degree programs. You can also "
    "check the UTA course catalog online."
)


class AcademicAgent(BaseAgent):
    """Searches the course catalog, faculty directory and program list."""

    name = "academic"
    description = "Courses, prerequisites, faculty and degree programs"
    source = "academic_agent"
    keywords = (
        "course", "class", "professor", "faculty", "degree", "program",
        "major", "credit", "prerequisite", "semester", "schedule",
        "registration", "syllabus", "grade", "gpa", "transcript",
        "advisor", "department", "college", "research",
    )
    weight = 0.25
    ceiling = 1.0

    def __init__(self, repository: CampusRepository) -> None:
        super().__init__()
        self._repository = repository

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        terms = search_terms(query, exclude=self.keywords)

        courses: list[CourseRead] = []
        faculty: list[FacultyRead] = []
        programs: list[ProgramRead] = []
        try:
            if keyword_matches(query, COURSE_TRIGGERS):
                courses = await self._repository.search_courses(terms, limit=5)
            if keyword_matches(query, FACULTY_TRIGGERS):
                faculty = await self._repository.search_faculty(terms, limit=3)
            if keyword_matches(query, PROGRAM_TRIGGERS):
                programs = await self._repository.search_programs(terms, limit=3)
        except SQLAlchemyError as exc:
            self._logger.error("academic_lookup_failed", error=str(exc), terms=terms)
            return self._failure(
                "I had trouble searching academic information. Please try "
                "again or visit the UTA academic website.",
                start,
            )

        has_results = bool(courses or faculty or programs)
        if not has_results:
            return AgentResult(
                success=False,
                data=None,
                message=NO_RESULTS_MESSAGE,
                confidence=0.3,
                processing_time=elapsed_ms(start),
                source=self.source,
            )

        return AgentResult(
            success=True,
            data={
                "courses": [c.model_dump(mode="json") for c in courses],
                "faculty": [f.model_dump(mode="json") for f in faculty],
                "programs": [p.model_dump(mode="json") for p in programs],
                "sources": self._citations(courses, faculty, programs),
            },
            message=self._render(courses, faculty, programs),
            confidence=0.8,
            processing_time=elapsed_ms(start),
            source=self.source,
        )

    @staticmethod
    def _render(
        courses: list[CourseRead],
        faculty: list[FacultyRead],
        programs: list[ProgramRead],
    ) -> str:
        lines = ["**Academic Information:**", ""]

        if courses:
            lines.append("**Courses:**")
            for course in courses:
                lines.append(f"- **{course.code or 'Course'}**: {course.title or 'Untitled'}")
                lines.append(f"  Credits: {course.credits if course.credits is not None else 'TBD'}")
                if course.prereqs:
                    lines.append(f"  Prerequisites: {course.prereqs}")
            lines.append("")

        if faculty:
            lines.append("**Faculty:**")
            for prof in faculty:
                dept = f" ({prof.dept})" if prof.dept else ""
                lines.append(f"- **{prof.name}**{dept}")
                if prof.office:
                    lines.append(f"  Office: {prof.office}")
                if prof.email:
                    lines.append(f"  Email: {prof.email}")
                if prof.research_areas:
                    lines.append(f"  Research: {', '.join(prof.research_areas)}")
            lines.append("")

        if programs:
            lines.append("**Programs:**")
            for program in programs:
                level = f" ({program.level})" if program.level else ""
                lines.append(f"- **{program.name}**{level}")
                if program.dept:
                    lines.append(f"  Department: {program.dept}")
                if program.overview:
                    lines.append(f"  {program.overview[:100]}...")
            lines.append("")

        return "\n".join(lines).rstrip()

    @staticmethod
    def _citations(
        courses: list[CourseRead],
        faculty: list[FacultyRead],
        programs: list[ProgramRead],
    ) -> list[dict]:
        citations = [
            make_citation(
                title=f"{c.code}: {c.title}" if c.code else c.title,
                url=c.catalog_url or CATALOG_URL,
                type="academics",
            )
            for c in courses
        ]
        citations += [
            make_citation(
                title=f.name,
                url=f.profile_url,
                description=f.dept,
                type="academics",
                location=f.office,
            )
            for f in faculty
        ]
        citations += [
            make_citation(
                title=p.name,
                url=p.catalog_url or CATALOG_URL,
                description=p.level,
                type="academics",
            )
            for p in programs
        ]
        return citations
