"""Player trace level: a 0-100 exposure meter."""

from __future__ import annotations

import logging

from icebreaker.events import EventSink, EventType, publish

log = logging.getLogger(__name__)

TRACE_MIN = 0
TRACE_MAX = 100


class TraceMeter:
    """Cumulative exposure, always clamped to [TRACE_MIN, TRACE_MAX].

    Reaching TRACE_MAX publishes ``trace_maxed``; what happens next is the
    caller's decision.
    """

    def __init__(self, level: int = 0, sink: EventSink | None = None) -> None:
        self.level = max(TRACE_MIN, min(TRACE_MAX, level))
        self.sink = sink

    def add(self, amount: int) -> int:
        previous = self.level
        self.level = max(TRACE_MIN, min(TRACE_MAX, self.level + max(0, amount)))
        if self.level == TRACE_MAX and previous < TRACE_MAX:
            log.warning("Trace level maxed out")
            publish(self.sink, EventType.TRACE_MAXED, {"trace_level": self.level})
        return self.level

    def reduce(self, amount: int) -> int:
        self.level = max(TRACE_MIN, self.level - max(0, amount))
        return self.level

    def decay(self, minutes_passed: float, rate_per_minute: int) -> int:
        """Apply time-based decay; returns the amount removed."""
        reduction = int(minutes_passed * rate_per_minute // 60)
        before = self.level
        self.reduce(reduction)
        return before - self.level

    @property
    def maxed(self) -> bool:
        return self.level >= TRACE_MAX
