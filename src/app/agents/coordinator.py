"""Multi-agent query coordinator.

The MultiAgentCoordinator turns a free-text query into one ranked answer:

1. Score every registered agent (scoring.score_agents)
2. Select an execution strategy from the ranked scores (scoring.select_strategy)
3. Execute it:
   - single: run the top agent, or answer "no match" when nothing scored
   - parallel: run up to 3 strong candidates concurrently, keep the most
     confident success as primary and the other successes as secondary
   - cascade: try up to 3 candidates in order, stop at the first result whose
     own confidence clears 0.6
4. Stamp the total wall-clock time and record per-agent performance samples

Failure policy: no agent failure escapes the coordinator. A process() that
raises (or times out, when a timeout is configured) becomes a low-confidence
failure AgentResult. Parallel and cascade degrade to the single strategy when
they cannot produce a usable result, and the single strategy degrades to the
no-match answer.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import structlog

from src.app.agents.base import AgentResult, elapsed_ms
from src.app.agents.performance import DEFAULT_WINDOW, PerformanceTracker
from src.app.agents.registry import AgentRegistry
from src.app.agents.schemas import AgentPerformance, CoordinationResult, ScoredAgent, Strategy
from src.app.agents.scoring import detect_intents, score_agents, select_strategy
from src.app.core.monitoring import record_coordinator_query, track_agent_invocation

COORDINATOR_SOURCE = "coordinator"
NO_MATCH_MESSAGE = (
    "I'm not sure how to help with that. Could you try asking about dining, "
    "events, courses, faculty, or campus services?"
)
RETRY_MESSAGE = "I encountered an issue processing your request. Please try again."

FAILURE_CONFIDENCE = 0.1
NO_MATCH_THRESHOLD = 0.1
MAX_CANDIDATES = 3
PARALLEL_CANDIDATE_SCORE = 0.5
CASCADE_CANDIDATE_SCORE = 0.3
CASCADE_MIN_CONFIDENCE = 0.6


# ── Exceptions ───────────────────────────────────────────────────────────────


class AgentInvocationError(Exception):
    """Raised internally when an agent's process() call fails.

    Executors catch it and apply their own recovery policy; it never leaves
    the coordinator.

    Attributes:
        agent_name: The agent that failed.
        original_error: The underlying exception.
        timed_out: Whether the failure was the configured timeout.
    """

    def __init__(self, agent_name: str, original_error: BaseException, timed_out: bool = False) -> None:
        self.agent_name = agent_name
        self.original_error = original_error
        self.timed_out = timed_out
        reason = "timed out" if timed_out else f"failed: {original_error}"
        super().__init__(f"Agent '{agent_name}' {reason}")


def _failure_result(agent_name: str, message: str) -> AgentResult:
    return AgentResult(
        success=False,
        data=None,
        message=message,
        confidence=FAILURE_CONFIDENCE,
        processing_time=0,
        source=agent_name,
    )


# ── Coordinator ──────────────────────────────────────────────────────────────


class MultiAgentCoordinator:
    """Scores, selects and runs campus agents for each query.

    Args:
        registry: Ordered agent registry. Registry order breaks score ties.
        agent_timeout: Optional per-process() deadline in seconds. None waits
            indefinitely.
        metrics_window: Samples kept per agent for get_performance_stats().
        logger: Structured logger to emit through. Defaults to this module's
            structlog logger.
    """

    def __init__(
        self,
        registry: AgentRegistry,
        *,
        agent_timeout: float | None = None,
        metrics_window: int = DEFAULT_WINDOW,
        logger: Any | None = None,
    ) -> None:
        if agent_timeout is not None and agent_timeout <= 0:
            raise ValueError(f"agent_timeout must be positive, got {agent_timeout}")
        self._registry = registry
        self._agent_timeout = agent_timeout
        self._performance = PerformanceTracker(window=metrics_window, names=registry.names())
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def registry(self) -> AgentRegistry:
        return self._registry

    @property
    def agent_timeout(self) -> float | None:
        return self._agent_timeout

    # ── Public API ───────────────────────────────────────────────────────────

    async def process_query(self, query: str) -> CoordinationResult:
        """Answer a query through score -> select -> execute.

        Args:
            query: Raw user query.

        Returns:
            CoordinationResult. Never raises for agent failures.
        """
        start = time.perf_counter()
        self._logger.info("coordinator_query_started", query_length=len(query))

        scores = self.score_agents(query)
        strategy = select_strategy(scores)
        self._logger.info("strategy_selected", strategy=strategy.value)

        outcomes: dict[str, bool] = {}
        if strategy is Strategy.PARALLEL:
            result = await self._process_parallel(query, scores, outcomes)
        elif strategy is Strategy.CASCADE:
            result = await self._process_cascade(query, scores, outcomes)
        else:
            result = await self._process_single(query, scores, outcomes)

        return self._finalize(result, start, outcomes)

    async def process_complex_query(self, query: str) -> CoordinationResult:
        """Answer a query that may mix several intents.

        When two or more intent families are mentioned (e.g. dining and
        events), the parallel executor runs directly regardless of the
        strategy the scores would select. Otherwise this is process_query().
        """
        intents = detect_intents(query)
        if len(intents) <= 1:
            return await self.process_query(query)

        start = time.perf_counter()
        self._logger.info(
            "multi_intent_query_detected",
            query_length=len(query),
            intents=intents,
        )

        scores = self.score_agents(query)
        outcomes: dict[str, bool] = {}
        result = await self._process_parallel(query, scores, outcomes)
        return self._finalize(result, start, outcomes)

    def score_agents(self, query: str) -> list[ScoredAgent]:
        """Ranked relevance scores for every registered agent."""
        scores = score_agents(query, self._registry, self._logger)
        self._logger.info(
            "agent_scores_computed",
            scores=[{"agent": s.name, "score": round(s.score, 3)} for s in scores],
        )
        return scores

    def get_performance_stats(self) -> dict[str, AgentPerformance]:
        """Average time, success rate and call count per agent with samples."""
        return self._performance.stats()

    # ── Executors ────────────────────────────────────────────────────────────

    async def _process_single(
        self,
        query: str,
        scores: list[ScoredAgent],
        outcomes: dict[str, bool],
    ) -> CoordinationResult:
        """Run the top-scoring agent, or answer "no match"."""
        top = scores[0] if scores else None

        if top is None or top.score < NO_MATCH_THRESHOLD:
            self._logger.info(
                "no_confident_agent",
                top_agent=top.name if top else None,
                top_score=top.score if top else 0.0,
            )
            return CoordinationResult(
                primary=AgentResult(
                    success=False,
                    data=None,
                    message=NO_MATCH_MESSAGE,
                    confidence=FAILURE_CONFIDENCE,
                    processing_time=0,
                    source=COORDINATOR_SOURCE,
                ),
                agents_used=[COORDINATOR_SOURCE],
                strategy=Strategy.SINGLE,
            )

        try:
            result = await self._invoke(top, query, outcomes)
        except AgentInvocationError:
            result = _failure_result(top.name, RETRY_MESSAGE)

        return CoordinationResult(
            primary=result,
            agents_used=[top.name],
            strategy=Strategy.SINGLE,
        )

    async def _process_parallel(
        self,
        query: str,
        scores: list[ScoredAgent],
        outcomes: dict[str, bool],
    ) -> CoordinationResult:
        """Run the strongest candidates concurrently and merge the successes."""
        candidates = [s for s in scores if s.score > PARALLEL_CANDIDATE_SCORE][:MAX_CANDIDATES]
        if not candidates:
            self._logger.info(
                "parallel_no_candidates",
                top_score=scores[0].score if scores else 0.0,
            )
            return await self._process_single(query, scores, outcomes)

        self._logger.info("parallel_execution_started", agents=[c.name for c in candidates])

        async def _guarded(candidate: ScoredAgent) -> tuple[str, AgentResult]:
            try:
                return candidate.name, await self._invoke(candidate, query, outcomes)
            except AgentInvocationError:
                return candidate.name, _failure_result(candidate.name, f"{candidate.name} agent failed")

        # gather() schedules every call before awaiting any of them.
        results = await asyncio.gather(*(_guarded(c) for c in candidates))
        successful = [(name, result) for name, result in results if result.success]

        if not successful:
            self._logger.warning(
                "parallel_all_failed_falling_back",
                agents=[name for name, _ in results],
            )
            return await self._process_single(query, scores, outcomes)

        best = 0
        for i, (_, result) in enumerate(successful):
            if result.confidence > successful[best][1].confidence:
                best = i

        secondary = [result for i, (_, result) in enumerate(successful) if i != best]

        return CoordinationResult(
            primary=successful[best][1],
            secondary=secondary or None,
            agents_used=[name for name, _ in results],
            strategy=Strategy.PARALLEL,
        )

    async def _process_cascade(
        self,
        query: str,
        scores: list[ScoredAgent],
        outcomes: dict[str, bool],
    ) -> CoordinationResult:
        """Try candidates in ranked order until one is confident enough."""
        candidates = [s for s in scores if s.score > CASCADE_CANDIDATE_SCORE][:MAX_CANDIDATES]
        self._logger.info("cascade_execution_started", agents=[c.name for c in candidates])

        for candidate in candidates:
            try:
                result = await self._invoke(candidate, query, outcomes)
            except AgentInvocationError:
                self._logger.warning("cascade_agent_failed_trying_next", agent=candidate.name)
                continue

            if result.success and result.confidence > CASCADE_MIN_CONFIDENCE:
                return CoordinationResult(
                    primary=result,
                    agents_used=[candidate.name],
                    strategy=Strategy.CASCADE,
                )

            self._logger.info(
                "cascade_result_below_threshold",
                agent=candidate.name,
                success=result.success,
                confidence=result.confidence,
            )

        self._logger.warning(
            "cascade_exhausted_falling_back",
            agents=[c.name for c in candidates],
        )
        return await self._process_single(query, scores, outcomes)

    # ── Internals ────────────────────────────────────────────────────────────

    async def _invoke(
        self,
        candidate: ScoredAgent,
        query: str,
        outcomes: dict[str, bool],
    ) -> AgentResult:
        """Call one agent's process() with timing, metrics and logging.

        Records the agent's outcome in ``outcomes``.

        Raises:
            AgentInvocationError: If process() raised, timed out, or returned
                something that is not a valid AgentResult.
        """
        name = candidate.name
        self._logger.info("agent_invocation_started", agent=name, score=candidate.score)
        start = time.perf_counter()

        try:
            async with track_agent_invocation(name):
                if self._agent_timeout is None:
                    raw = await candidate.agent.process(query)
                else:
                    raw = await asyncio.wait_for(
                        candidate.agent.process(query),
                        timeout=self._agent_timeout,
                    )
                result = raw if isinstance(raw, AgentResult) else AgentResult.model_validate(raw)
        except asyncio.TimeoutError as exc:
            outcomes[name] = False
            self._logger.error(
                "agent_invocation_timed_out",
                agent=name,
                timeout_seconds=self._agent_timeout,
                duration_ms=elapsed_ms(start),
            )
            raise AgentInvocationError(name, exc, timed_out=True) from exc
        except Exception as exc:
            outcomes[name] = False
            self._logger.error(
                "agent_invocation_failed",
                agent=name,
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=elapsed_ms(start),
            )
            raise AgentInvocationError(name, exc) from exc

        outcomes[name] = result.success
        self._logger.info(
            "agent_invocation_completed",
            agent=name,
            success=result.success,
            confidence=result.confidence,
            duration_ms=elapsed_ms(start),
        )
        return result

    def _finalize(
        self,
        result: CoordinationResult,
        start: float,
        outcomes: dict[str, bool],
    ) -> CoordinationResult:
        """Stamp total time, record performance samples and metrics."""
        total_time = elapsed_ms(start)
        result = result.model_copy(update={"total_time": total_time})

        for name in result.agents_used:
            self._performance.record(name, total_time, outcomes.get(name, False))
        record_coordinator_query(result.strategy.value, total_time)

        self._logger.info(
            "coordinator_query_completed",
            strategy=result.strategy.value,
            agents_used=result.agents_used,
            total_time=total_time,
            primary_confidence=result.primary.confidence,
            success=result.primary.success,
        )
        return result
