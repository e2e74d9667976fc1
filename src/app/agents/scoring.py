"""Agent scoring and strategy selection.

score_agents() asks every registered agent how relevant it is to a query and
returns the full ranked list. select_strategy() classifies that ranked list
into one of three execution strategies:

    single    top > 0.8 and (top - second) > 0.3
    parallel  at least two scores > 0.6 and top > 0.5
    cascade   top > 0.4
    single    otherwise (the single executor emits the no-match answer)

Both are deterministic for a fixed query and registry. Scoring never performs
I/O and never lets one agent's failing heuristic block the others.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

import structlog

from src.app.agents.registry import AgentRegistry
from src.app.agents.schemas import ScoredAgent, Strategy
from src.app.core.monitoring import agent_scoring_failures_total

logger = structlog.get_logger(__name__)

SINGLE_MIN_SCORE = 0.8
SINGLE_MIN_GAP = 0.3
HIGH_CONFIDENCE_SCORE = 0.6
PARALLEL_MIN_SCORE = 0.5
CASCADE_MIN_SCORE = 0.4

# Keyword families used to detect queries that mix several intents.
INTENT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "dining": ("dining", "food"),
    "event": ("event", "activity"),
    "academic": ("course", "class"),
    "service": ("parking", "wifi"),
    "navigation": ("building", "direction"),
    "scholarship": ("scholarship", "financial aid"),
}


def score_agents(
    query: str,
    registry: AgentRegistry,
    log: Any | None = None,
) -> list[ScoredAgent]:
    """Score every registered agent for a query.

    Exceptions from can_handle() are logged and recorded as score 0.
    Non-finite scores become 0 and out-of-range scores are clamped to [0, 1].

    Args:
        query: Raw user query.
        registry: Agents to score, in tie-break order.
        log: Bound logger to emit through. Defaults to the module logger.

    Returns:
        All agents sorted by descending score. Ties keep registry order.
    """
    log = log or logger
    scores: list[ScoredAgent] = []

    for name, agent in registry:
        try:
            raw = float(agent.can_handle(query))
        except Exception as exc:
            log.warning(
                "agent_scoring_failed",
                agent=name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            agent_scoring_failures_total.labels(agent=name).inc()
            scores.append(ScoredAgent(name=name, score=0.0, agent=agent))
            continue

        score = raw
        if math.isnan(raw):
            score = 0.0
        elif raw < 0.0 or raw > 1.0:
            score = min(max(raw, 0.0), 1.0)
        if score != raw:
            log.warning("agent_score_out_of_range", agent=name, raw_score=raw, score=score)
        scores.append(ScoredAgent(name=name, score=score, agent=agent))

    # sorted() is stable, so equal scores stay in registry order.
    return sorted(scores, key=lambda s: s.score, reverse=True)


def select_strategy(scores: Sequence[ScoredAgent]) -> Strategy:
    """Pick the execution strategy for a ranked score list.

    Args:
        scores: Output of score_agents(), sorted descending.

    Returns:
        The first matching strategy; SINGLE when nothing matches.
    """
    top = scores[0].score if scores else 0.0
    second = scores[1].score if len(scores) > 1 else 0.0
    high_confidence = sum(1 for s in scores if s.score > HIGH_CONFIDENCE_SCORE)

    if top > SINGLE_MIN_SCORE and (top - second) > SINGLE_MIN_GAP:
        return Strategy.SINGLE

    if high_confidence >= 2 and top > PARALLEL_MIN_SCORE:
        return Strategy.PARALLEL

    if top > CASCADE_MIN_SCORE:
        return Strategy.CASCADE

    return Strategy.SINGLE


def detect_intents(query: str) -> list[str]:
    """List the intent families a query mentions (plain substring check)."""
    query_lower = query.lower()
    return [
        intent
        for intent, words in INTENT_KEYWORDS.items()
        if any(word in query_lower for word in words)
    ]
