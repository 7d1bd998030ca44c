"""Event sink capability consumed by the engine."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class EventType(str, Enum):
    """Event names published to the sink."""

    TERMINAL_CREATED = "terminal_created"
    TERMINAL_STATUS_CHANGED = "terminal_status_changed"
    TERMINAL_DELETED = "terminal_deleted"
    NETWORK_CREATED = "network_created"
    NETWORK_STATUS_CHANGED = "network_status_changed"
    HACK_SUCCEEDED = "hack_succeeded"
    HACK_FAILED = "hack_failed"
    SECURITY_ALERT = "security_alert"
    ICE_BYPASSED = "ice_bypassed"
    ICE_BYPASS_FAILED = "ice_bypass_failed"
    DATA_STOLEN = "data_stolen"
    TERMINAL_ACTION = "terminal_action"
    TRACE_MAXED = "trace_maxed"


def _event_name(event_type: EventType | str) -> str:
    return event_type.value if isinstance(event_type, Enum) else event_type


class EventSink(Protocol):
    """Anything that accepts published engine events."""

    def publish(self, event_type: str, payload: dict[str, Any]) -> None: ...


class NullSink:
    """Sink that drops every event."""

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        return None


@dataclass
class RecordedEvent:
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)


class RecordingSink:
    """Keeps the most recent events in memory, oldest dropped first."""

    def __init__(self, max_size: int = 500) -> None:
        self._log: deque[RecordedEvent] = deque(maxlen=max_size)

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        self._log.append(RecordedEvent(_event_name(event_type), dict(payload)))

    def events(self, event_type: str | None = None, limit: int = 100) -> list[RecordedEvent]:
        """Most recent events, optionally filtered by type."""
        log = list(self._log)
        if event_type is not None:
            log = [e for e in log if e.event_type == _event_name(event_type)]
        return log[-limit:] if limit > 0 else []

    def clear(self) -> None:
        self._log.clear()

    def __len__(self) -> int:
        return len(self._log)


def publish(sink: EventSink | None, event_type: EventType, payload: dict[str, Any]) -> None:
    """Publish to a sink that may be absent."""
    if sink is not None:
        sink.publish(event_type.value, payload)
