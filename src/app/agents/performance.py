"""Rolling per-agent performance tracking.

Each agent name maps to a bounded ring buffer of its most recent samples.
A sample is the coordinator's total query time (ms) for a query that used the
agent, plus whether that agent's own result succeeded. The oldest sample is
evicted once the window is full.

State is process-wide for a coordinator instance and is lost on restart.
Writes happen once per coordinator call on the event loop thread, so no
locking is needed.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from src.app.agents.schemas import AgentPerformance

DEFAULT_WINDOW = 50


@dataclass(frozen=True)
class PerformanceSample:
    """One recorded coordinator call for one agent."""

    total_time: int
    success: bool


class PerformanceTracker:
    """Bounded ring buffers of recent samples, keyed by agent name.

    Args:
        window: Maximum samples kept per agent.
        names: Agent names to pre-register with empty buffers.
    """

    def __init__(self, window: int = DEFAULT_WINDOW, names: list[str] | None = None) -> None:
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self._window = window
        self._samples: dict[str, deque[PerformanceSample]] = {}
        for name in names or []:
            self._buffer(name)

    @property
    def window(self) -> int:
        return self._window

    def _buffer(self, name: str) -> deque[PerformanceSample]:
        buffer = self._samples.get(name)
        if buffer is None:
            buffer = deque(maxlen=self._window)
            self._samples[name] = buffer
        return buffer

    def record(self, name: str, total_time: int, success: bool) -> None:
        """Append a sample, evicting the oldest when the buffer is full."""
        self._buffer(name).append(PerformanceSample(total_time=total_time, success=success))

    def samples(self, name: str) -> list[PerformanceSample]:
        """Copy of the buffered samples for an agent, oldest first."""
        return list(self._samples.get(name, ()))

    def stats(self) -> dict[str, AgentPerformance]:
        """Snapshot for every agent with at least one sample.

        avg_time is the mean total_time over the buffer; success_rate is the
        fraction of buffered samples whose agent result succeeded.
        """
        snapshot: dict[str, AgentPerformance] = {}
        for name, buffer in self._samples.items():
            if not buffer:
                continue
            count = len(buffer)
            snapshot[name] = AgentPerformance(
                avg_time=sum(s.total_time for s in buffer) / count,
                success_rate=sum(1 for s in buffer if s.success) / count,
                call_count=count,
            )
        return snapshot

    def reset(self) -> None:
        """Drop all samples, keeping known names."""
        for buffer in self._samples.values():
            buffer.clear()
