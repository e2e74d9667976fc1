"""Navigation Agent: resolves a building from the query and links directions.

Buildings are resolved through an alias table. A whole alias in the query is
a direct match (confidence 0.9); failing that, any distinctive word of a
multi-word alias is a partial match (confidence 0.6). The answer carries a
Google Maps directions URL instead of opening a maps app.
"""

from __future__ import annotations

import time
from urllib.parse import urlencode

from src.app.agents.base import AgentResult, BaseAgent, elapsed_ms, keyword_matches
from src.app.agents.citations import make_citation

CAMPUS_SUFFIX = "University of Texas at Arlington, TX"
MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"

DIRECT_MATCH_CONFIDENCE = 0.9
PARTIAL_MATCH_CONFIDENCE = 0.6

# Alias -> canonical building name. Lookup order is significant.
BUILDING_ALIASES: dict[str, str] = {
    "library": "Central Library",
    "lib": "Central Library",
    "central library": "Central Library",
    "erb": "Engineering Research Building",
    "engineering": "Engineering Research Building",
    "engineering building": "Engineering Research Building",
    "business": "Business Building",
    "business building": "Business Building",
    "mac": "Maverick Activities Center",
    "maverick activities center": "Maverick Activities Center",
    "gym": "Maverick Activities Center",
    "rec center": "Maverick Activities Center",
    "student union": "University Center",
    "uc": "University Center",
    "university center": "University Center",
    "science": "Science Hall",
    "science hall": "Science Hall",
    "fine arts": "Fine Arts Building",
    "art building": "Fine Arts Building",
    "trimble hall": "Trimble Hall",
    "trimble": "Trimble Hall",
}

# Too common across aliases to identify a building on their own.
GENERIC_WORDS = frozenset({"building", "center", "hall", "university"})


def find_building(query: str) -> tuple[str | None, float]:
    """Resolve the building a query refers to.

    Returns:
        (canonical name, match confidence), or (None, 0.0) when nothing matches.
    """
    for alias, building in BUILDING_ALIASES.items():
        if keyword_matches(query, (alias,)):
            return building, DIRECT_MATCH_CONFIDENCE

    for alias, building in BUILDING_ALIASES.items():
        words = tuple(w for w in alias.split() if w not in GENERIC_WORDS)
        if len(alias.split()) > 1 and keyword_matches(query, words):
            return building, PARTIAL_MATCH_CONFIDENCE

    return None, 0.0


def directions_url(building: str) -> str:
    """Google Maps directions from the device's location to the building."""
    params = {"api": "1", "destination": f"{building} {CAMPUS_SUFFIX}"}
    return f"{MAPS_DIRECTIONS_URL}?{urlencode(params)}"


class NavigationAgent(BaseAgent):
    """Gives directions to campus buildings."""

    name = "navigation"
    description = "Directions to campus buildings"
    source = "navigation_agent"
    keywords = (
        "directions to", "how to get to", "where is", "navigate to",
        "find", "location of", "go to", "take me to", "building",
    )
    weight = 0.4
    ceiling = 0.95

    async def process(self, query: str) -> AgentResult:
        start = time.perf_counter()
        building, confidence = find_building(query)

        if building is None:
            return self._failure(
                "I couldn't identify which building you're looking for. "
                "Could you be more specific?",
                start,
            )

        url = directions_url(building)
        return AgentResult(
            success=True,
            data={
                "building": building,
                "directions_url": url,
                "action": "navigation_link",
                "sources": [
                    make_citation(
                        title=building,
                        url=url,
                        description="Directions in Google Maps",
                        type="buildings",
                        location=building,
                        confidence=confidence,
                    )
                ],
            },
            message=f"Here are directions to {building}: {url}",
            confidence=confidence,
            processing_time=elapsed_ms(start),
            source=self.source,
        )
